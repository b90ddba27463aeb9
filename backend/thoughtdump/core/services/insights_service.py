from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from thoughtdump.core.models.thought import Category, ThoughtStatus
from thoughtdump.core.schemas.insights import CategoryStat, WeeklyInsights

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from thoughtdump.core.models.thought import Thought
    from thoughtdump.core.repositories.thought_repository import ThoughtRepository

CATEGORY_COLORS: dict[Category, str] = {
    Category.WORK: "#3b82f6",
    Category.SHOPPING: "#10b981",
    Category.IDEA: "#8b5cf6",
    Category.PERSONAL: "#14b8a6",
    Category.REMINDER: "#f59e0b",
    Category.HEALTH: "#ec4899",
    Category.TRAVEL: "#eab308",
    Category.RANDOM: "#6b7280",
}
DEFAULT_COLOR = "#6b7280"


def week_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Monday 00:00 through Sunday 23:59:59.999999 of the week containing `now`."""
    monday = (now - timedelta(days=now.weekday())).replace(hour=0, minute=0, second=0, microsecond=0)
    sunday = monday + timedelta(days=6, hours=23, minutes=59, seconds=59, microseconds=999999)
    return monday, sunday


def motivational_message(thoughts_added: int, tasks_completed: int) -> str:
    if tasks_completed >= 10:
        return "🚀 Incredible! You're absolutely crushing it this week!"
    if tasks_completed >= 5:
        return "🎉 Great job! You're making excellent progress this week!"
    if tasks_completed >= 1:
        return "👍 Nice work! Every completed task is a step forward!"
    if thoughts_added >= 5:
        return "💭 You're capturing lots of thoughts! Now let's turn them into action!"
    return "🌱 Keep going! Small steps make big progress. You've got this!"


def category_stats(thoughts: Sequence[Thought]) -> list[CategoryStat]:
    counts = Counter(t.category for t in thoughts)
    stats = [
        CategoryStat(
            category=category.value.capitalize(),
            count=count,
            color=CATEGORY_COLORS.get(category, DEFAULT_COLOR),
        )
        for category, count in counts.items()
    ]
    # sorted() is stable, so equal counts keep first-seen order
    return sorted(stats, key=lambda s: s.count, reverse=True)


class InsightsService:
    """Weekly productivity summary built from the thoughts table."""

    def __init__(self, repo: ThoughtRepository) -> None:
        self._repo = repo

    async def weekly_insights(self, user_id: UUID, now: datetime | None = None) -> WeeklyInsights:
        start, end = week_bounds(now or datetime.now(UTC))
        thoughts = await self._repo.list(user_id=user_id, created_from=start, created_to=end)

        thoughts_added = len(thoughts)
        tasks_completed = sum(1 for t in thoughts if t.status is ThoughtStatus.DONE)

        return WeeklyInsights(
            week_start=start,
            week_end=end,
            thoughts_added=thoughts_added,
            tasks_completed=tasks_completed,
            category_stats=category_stats(thoughts),
            motivational_message=motivational_message(thoughts_added, tasks_completed),
        )
