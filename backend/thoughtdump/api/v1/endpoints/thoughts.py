from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TCH003

from fastapi import APIRouter, Depends, HTTPException, Query, status

from thoughtdump.api.v1.schemas.thought import (
    StatusTransitions,
    ThoughtCaptured,
    ThoughtCategoryUpdate,
    ThoughtContentUpdate,
    ThoughtCreate,
    ThoughtRead,
    ThoughtStatusUpdate,
)
from thoughtdump.core.services.thought_service import available_status_transitions
from thoughtdump.dependencies import get_current_user, get_thought_service

if TYPE_CHECKING:
    from thoughtdump.core.schemas.auth import AuthUser
    from thoughtdump.core.services.thought_service import ThoughtService

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Thought not found")


@router.post("/", response_model=ThoughtCaptured, status_code=status.HTTP_201_CREATED)
async def capture_thought(
    payload: ThoughtCreate,
    current_user: AuthUser = Depends(get_current_user),
    service: ThoughtService = Depends(get_thought_service),
):
    """Classify a thought with Gemini and store it."""
    try:
        thought, classification = await service.capture_thought(payload.content, user_id=current_user.id)
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    return ThoughtCaptured(
        thought=ThoughtRead.model_validate(thought),
        classification=classification,
    )


@router.get("/", response_model=list[ThoughtRead])
async def list_thoughts(
    category: str | None = Query(default=None, description="Category, or 'thoughts' for reflections"),
    status_filter: str | None = Query(default=None, alias="status", description="Status, or 'urgent'"),
    search: str | None = Query(default=None, max_length=200),
    limit: int | None = Query(default=None, ge=1, le=500),
    current_user: AuthUser = Depends(get_current_user),
    service: ThoughtService = Depends(get_thought_service),
):
    try:
        thoughts = await service.list_thoughts(
            current_user.id,
            category=category,
            status=status_filter,
            search=search,
            limit=limit,
        )
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    return [ThoughtRead.model_validate(t) for t in thoughts]


@router.get("/{thought_id}", response_model=ThoughtRead)
async def get_thought(
    thought_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: ThoughtService = Depends(get_thought_service),
):
    thought = await service.get_thought(thought_id, user_id=current_user.id)
    if not thought:
        raise _not_found()
    return ThoughtRead.model_validate(thought)


@router.get("/{thought_id}/transitions", response_model=StatusTransitions)
async def get_status_transitions(
    thought_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: ThoughtService = Depends(get_thought_service),
):
    """Statuses the dashboard may offer for this thought."""
    thought = await service.get_thought(thought_id, user_id=current_user.id)
    if not thought:
        raise _not_found()
    return StatusTransitions(
        current=thought.status,
        available=available_status_transitions(thought.status, thought.category),
    )


@router.patch("/{thought_id}/status", response_model=ThoughtRead)
async def update_status(
    thought_id: UUID,
    payload: ThoughtStatusUpdate,
    current_user: AuthUser = Depends(get_current_user),
    service: ThoughtService = Depends(get_thought_service),
):
    try:
        thought = await service.update_status(thought_id, payload.status, user_id=current_user.id)
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    if not thought:
        raise _not_found()
    return ThoughtRead.model_validate(thought)


@router.patch("/{thought_id}/category", response_model=ThoughtRead)
async def move_to_category(
    thought_id: UUID,
    payload: ThoughtCategoryUpdate,
    current_user: AuthUser = Depends(get_current_user),
    service: ThoughtService = Depends(get_thought_service),
):
    try:
        thought = await service.move_to_category(thought_id, payload.category, user_id=current_user.id)
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    if not thought:
        raise _not_found()
    return ThoughtRead.model_validate(thought)


@router.patch("/{thought_id}/content", response_model=ThoughtRead)
async def edit_content(
    thought_id: UUID,
    payload: ThoughtContentUpdate,
    current_user: AuthUser = Depends(get_current_user),
    service: ThoughtService = Depends(get_thought_service),
):
    try:
        thought = await service.edit_content(thought_id, payload.content, user_id=current_user.id)
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    if not thought:
        raise _not_found()
    return ThoughtRead.model_validate(thought)


@router.delete("/{thought_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_thought(
    thought_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: ThoughtService = Depends(get_thought_service),
):
    deleted = await service.delete_thought(thought_id, user_id=current_user.id)
    if not deleted:
        raise _not_found()
    return None
