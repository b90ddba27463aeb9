from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from thoughtdump.core.models.thought import Category, ThoughtStatus

if TYPE_CHECKING:
    from collections.abc import Sequence

    from thoughtdump.core.models.thought import Thought
    from thoughtdump.core.repositories.thought_repository import ThoughtRepository


class FocusService:
    """Pending-task queue worked through one item at a time in focus mode."""

    def __init__(self, repo: ThoughtRepository) -> None:
        self._repo = repo

    async def focus_queue(self, user_id: UUID) -> Sequence[Thought]:
        """Pending tasks outside the `random` bucket, oldest first."""
        return await self._repo.list(
            user_id=user_id,
            status=ThoughtStatus.PENDING,
            exclude_category=Category.RANDOM,
            ascending=True,
        )

    async def complete(self, thought_id: str | UUID, user_id: UUID) -> Thought | None:
        try:
            thought_uuid = UUID(str(thought_id))
        except ValueError:
            return None
        thought = await self._repo.get(thought_uuid)
        if not thought or thought.user_id != user_id:
            return None
        return await self._repo.update_fields(thought_uuid, {"status": ThoughtStatus.DONE})
