from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from thoughtdump.core.classification.normalizer import normalize_category
from thoughtdump.core.models.thought import Thought
from thoughtdump.core.repositories.thought_repository import ThoughtRepository
from thoughtdump.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime
    from uuid import UUID

    from supabase import Client

    from thoughtdump.core.models.thought import Category, ThoughtStatus


class SupabaseThoughtRepository(ThoughtRepository):
    """Supabase implementation of the ThoughtRepository.

    Uses Supabase's PostgREST client for CRUD against a `thoughts` table with
    columns matching the `Thought` model. Row level security scopes every
    query to the bearer of the request client.
    """

    TABLE_NAME = "thoughts"

    def __init__(self, client: Client, table_name: str | None = None) -> None:
        self._client: Client = client
        self._table_name = table_name or self.TABLE_NAME

    def _table(self):
        return self._client.table(self._table_name)

    async def create(self, thought: Thought) -> Thought:
        row = self._thought_to_row(thought)
        resp = await self._run(
            lambda: self._table()
            .insert(row)
            .execute()
        )
        data = self._first(resp.data)
        return self._row_to_thought(data)

    async def get(self, thought_id: UUID) -> Thought | None:
        resp = await self._run(
            lambda: self._table()
            .select("*")
            .eq("id", str(thought_id))
            .limit(1)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_thought(items[0])

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
    ) -> Sequence[Thought]:
        def _query():
            q = self._table().select("*").eq("user_id", str(user_id))
            if category is not None:
                q = q.eq("category", category.value)
            if status is not None:
                q = q.eq("status", status.value)
            if exclude_category is not None:
                q = q.neq("category", exclude_category.value)
            if created_from is not None:
                q = q.gte("created_at", created_from.isoformat())
            if created_to is not None:
                q = q.lte("created_at", created_to.isoformat())
            q = q.order("created_at", desc=not ascending)
            if limit is not None:
                q = q.limit(limit)
            return q.execute()

        resp = await self._run(_query)
        items = resp.data or []
        return [self._row_to_thought(i) for i in items]

    async def update_fields(self, thought_id: UUID, changes: dict) -> Thought | None:
        sanitized: dict[str, Any] = {
            k: (v.value if isinstance(v, Enum) else v)
            for k, v in (changes or {}).items()
            if k not in {"id", "user_id", "created_at"}
        }
        if not sanitized:
            return await self.get(thought_id)

        resp = await self._run(
            lambda: self._table()
            .update(sanitized)
            .eq("id", str(thought_id))
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_thought(items[0])

    async def delete(self, thought_id: UUID) -> bool:
        resp = await self._run(
            lambda: self._table()
            .delete()
            .eq("id", str(thought_id))
            .execute()
        )
        items = resp.data or []
        return len(items) > 0

    @staticmethod
    async def _run(func: Callable[[], Any]) -> Any:
        import asyncio
        return await asyncio.to_thread(func)

    @staticmethod
    def _first(data: Any) -> dict[str, Any]:
        if isinstance(data, list) and data:
            return data[0]
        if isinstance(data, dict):
            return data
        return {}

    @staticmethod
    def _row_to_thought(row: dict[str, Any]) -> Thought:
        normalized = {k: v for k, v in row.items() if k in Thought.model_fields}
        # Rows written by other clients may carry categories outside the enum
        normalized["category"] = normalize_category(normalized.get("category"))
        return Thought.model_validate(normalized)

    @staticmethod
    def _thought_to_row(thought: Thought) -> dict[str, Any]:
        # PostgREST expects JSON-serializable values
        return thought.model_dump(mode="json")
