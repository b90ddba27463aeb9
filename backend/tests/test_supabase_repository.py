"""
Unit tests for the Supabase-backed thought repository.

The PostgREST query builder is replaced by a recorder that captures the
chained calls and returns canned rows.
"""

from datetime import UTC, datetime
from types import SimpleNamespace
from uuid import uuid4

import pytest

from thoughtdump.core.models.thought import Category, Thought, ThoughtStatus
from thoughtdump.core.repositories.implementations.supabase.thought_repository import (
    SupabaseThoughtRepository,
)


class QueryRecorder:
    """Stand-in for a PostgREST request builder."""

    def __init__(self, rows):
        self.rows = rows
        self.calls = []

    def __getattr__(self, name):
        def _call(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self

        return _call

    def execute(self):
        self.calls.append(("execute", (), {}))
        return SimpleNamespace(data=self.rows)


class FakeClient:
    def __init__(self, rows=None):
        self.query = QueryRecorder(rows if rows is not None else [])
        self.tables = []

    def table(self, name):
        self.tables.append(name)
        return self.query


def row_for(user_id, **overrides):
    row = {
        "id": str(uuid4()),
        "content": "Buy milk",
        "category": "shopping",
        "status": "pending",
        "created_at": "2026-10-19T10:00:00+00:00",
        "user_id": str(user_id),
    }
    row.update(overrides)
    return row


@pytest.fixture
def user_id():
    return uuid4()


class TestSupabaseThoughtRepository:
    async def test_create_sends_json_row(self, user_id):
        thought = Thought(content="Buy milk", category=Category.SHOPPING, status=ThoughtStatus.PENDING, user_id=user_id)
        client = FakeClient(rows=[thought.model_dump(mode="json")])
        repo = SupabaseThoughtRepository(client)

        stored = await repo.create(thought)

        name, args, _ = client.query.calls[0]
        assert name == "insert"
        assert args[0]["id"] == str(thought.id)
        assert args[0]["category"] == "shopping"
        assert args[0]["status"] == "pending"
        assert isinstance(args[0]["created_at"], str)
        assert stored == thought
        assert client.tables == ["thoughts"]

    async def test_custom_table_name(self, user_id):
        client = FakeClient(rows=[])
        repo = SupabaseThoughtRepository(client, table_name="thoughts_staging")
        assert await repo.get(uuid4()) is None
        assert client.tables == ["thoughts_staging"]

    async def test_list_applies_filters(self, user_id):
        client = FakeClient(rows=[row_for(user_id)])
        repo = SupabaseThoughtRepository(client)
        start = datetime(2026, 10, 19, tzinfo=UTC)

        result = await repo.list(
            user_id=user_id,
            status=ThoughtStatus.PENDING,
            exclude_category=Category.RANDOM,
            created_from=start,
            ascending=True,
            limit=10,
        )

        calls = [(name, args, kwargs) for name, args, kwargs in client.query.calls]
        assert ("eq", ("user_id", str(user_id)), {}) in calls
        assert ("eq", ("status", "pending"), {}) in calls
        assert ("neq", ("category", "random"), {}) in calls
        assert ("gte", ("created_at", start.isoformat()), {}) in calls
        assert ("order", ("created_at",), {"desc": False}) in calls
        assert ("limit", (10,), {}) in calls
        assert [t.content for t in result] == ["Buy milk"]

    async def test_unknown_stored_category_is_normalized(self, user_id):
        client = FakeClient(rows=[row_for(user_id, category="Groceries!", lexeme="'milk'")])
        repo = SupabaseThoughtRepository(client)

        [thought] = await repo.list(user_id=user_id)

        assert thought.category is Category.SHOPPING

    async def test_update_serializes_enums_and_protects_keys(self, user_id):
        client = FakeClient(rows=[row_for(user_id, status="done")])
        repo = SupabaseThoughtRepository(client)

        updated = await repo.update_fields(uuid4(), {"status": ThoughtStatus.DONE, "user_id": "x"})

        name, args, _ = client.query.calls[0]
        assert name == "update"
        assert args[0] == {"status": "done"}
        assert updated.status is ThoughtStatus.DONE

    async def test_delete_reports_missing_rows(self):
        repo = SupabaseThoughtRepository(FakeClient(rows=[]))
        assert await repo.delete(uuid4()) is False
