from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TCH003

from fastapi import APIRouter, Depends, HTTPException, status

from thoughtdump.api.v1.schemas.thought import ThoughtRead
from thoughtdump.dependencies import get_current_user, get_focus_service

if TYPE_CHECKING:
    from thoughtdump.core.schemas.auth import AuthUser
    from thoughtdump.core.services.focus_service import FocusService

router = APIRouter()


@router.get("/queue", response_model=list[ThoughtRead])
async def focus_queue(
    current_user: AuthUser = Depends(get_current_user),
    service: FocusService = Depends(get_focus_service),
):
    """Pending tasks to work through in focus mode, oldest first."""
    thoughts = await service.focus_queue(current_user.id)
    return [ThoughtRead.model_validate(t) for t in thoughts]


@router.post("/{thought_id}/complete", response_model=ThoughtRead)
async def complete_thought(
    thought_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: FocusService = Depends(get_focus_service),
):
    thought = await service.complete(thought_id, user_id=current_user.id)
    if not thought:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Thought not found")
    return ThoughtRead.model_validate(thought)
