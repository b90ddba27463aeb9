from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends

from thoughtdump.core.schemas.insights import WeeklyInsights
from thoughtdump.dependencies import get_current_user, get_insights_service

if TYPE_CHECKING:
    from thoughtdump.core.schemas.auth import AuthUser
    from thoughtdump.core.services.insights_service import InsightsService

router = APIRouter()


@router.get("/weekly", response_model=WeeklyInsights)
async def weekly_insights(
    current_user: AuthUser = Depends(get_current_user),
    service: InsightsService = Depends(get_insights_service),
):
    """Counts for the current Monday–Sunday week."""
    return await service.weekly_insights(current_user.id)
