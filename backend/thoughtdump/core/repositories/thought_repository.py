from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from uuid import UUID

    from thoughtdump.core.models.thought import Category, Thought, ThoughtStatus


class ThoughtRepository(ABC):
    """Abstract repository interface for thoughts.

    Contract used by services and dependency injection. Implementations should
    perform I/O (database, network) and therefore expose async methods.
    """

    @abstractmethod
    async def create(self, thought: Thought) -> Thought:  # pragma: no cover - interface only
        """Persist a new thought and return the stored entity."""

    @abstractmethod
    async def get(self, thought_id: UUID) -> Thought | None:  # pragma: no cover
        """Fetch a thought by id or return None if not found."""

    @abstractmethod
    async def list(
        self,
        *,
        user_id: UUID,
        category: Category | None = None,
        status: ThoughtStatus | None = None,
        exclude_category: Category | None = None,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
        ascending: bool = False,
        limit: int | None = None,
    ) -> Sequence[Thought]:  # pragma: no cover
        """Return a user's thoughts ordered by creation time.

        Newest first unless `ascending` is set. All filters are optional and
        combine with AND; the creation bounds are inclusive.
        """

    @abstractmethod
    async def update_fields(self, thought_id: UUID, changes: dict) -> Thought | None:  # pragma: no cover
        """Partially update fields on a thought and return the updated entity, or None if missing."""

    @abstractmethod
    async def delete(self, thought_id: UUID) -> bool:  # pragma: no cover
        """Delete a thought by id. Return True if a row was removed, False otherwise."""
