from __future__ import annotations

from datetime import datetime  # noqa: TCH003

from pydantic import Field

from thoughtdump.core.models.base import AppBaseModel


class CategoryStat(AppBaseModel):
    """Number of thoughts captured in one category."""

    category: str = Field(description="Display label, e.g. 'Work'")
    count: int = Field(ge=0)
    color: str = Field(description="Hex colour used by the charts")


class WeeklyInsights(AppBaseModel):
    """Summary of a user's activity between Monday and Sunday."""

    week_start: datetime
    week_end: datetime
    thoughts_added: int
    tasks_completed: int
    category_stats: list[CategoryStat] = Field(default_factory=list)
    motivational_message: str
