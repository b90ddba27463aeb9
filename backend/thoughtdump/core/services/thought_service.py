from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from thoughtdump.core.models.thought import (
    MOVE_CATEGORIES,
    Category,
    Thought,
    ThoughtStatus,
    status_for_type,
)
from thoughtdump.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from thoughtdump.core.repositories.thought_repository import ThoughtRepository
    from thoughtdump.core.schemas.classification import ClassificationResult
    from thoughtdump.core.services.classification_service import GeminiClassifier

logger = get_logger(__name__)

URGENCY_KEYWORDS: tuple[str, ...] = (
    "tomorrow", "tonight", "asap", "by evening", "next hour", "urgent", "immediately",
    "right now", "today", "this morning", "this afternoon", "deadline", "due", "emergency", "now",
)

# Dashboard pseudo-filters layered on top of the real column values
THOUGHTS_CATEGORY_FILTER = "thoughts"
URGENT_STATUS_FILTER = "urgent"


def has_urgency(content: str) -> bool:
    """True when the text mentions one of the urgency keywords."""
    lowered = content.lower()
    return any(keyword in lowered for keyword in URGENCY_KEYWORDS)


def available_status_transitions(status: ThoughtStatus, category: Category) -> list[ThoughtStatus]:
    """Statuses a thought may be moved to from its current one."""
    if category is Category.RANDOM:
        return [] if status is ThoughtStatus.ARCHIVED else [ThoughtStatus.ARCHIVED]
    if status is ThoughtStatus.THOUGHT:
        return [ThoughtStatus.ARCHIVED]
    workflow = [ThoughtStatus.PENDING, ThoughtStatus.DONE, ThoughtStatus.ARCHIVED]
    return [s for s in workflow if s is not status]


class ThoughtService:
    """Service for capturing and managing thoughts with user-scoped access (RLS friendly)."""

    def __init__(self, repo: ThoughtRepository, classifier: GeminiClassifier) -> None:
        self._repo = repo
        self._classifier = classifier

    async def capture_thought(self, content: str, user_id: UUID) -> tuple[Thought, ClassificationResult]:
        """Classify a new thought and store it for the user.

        Classification cannot fail; at worst the thought is filed as a
        `random` thought.
        """
        text = (content or "").strip()
        if not text:
            raise ValueError("Thought content cannot be empty")

        classification = await self._classifier.classify(text)
        if classification.is_fallback:
            logger.info("Storing thought with fallback classification", extra={"user_id": str(user_id)})

        thought = Thought(
            id=uuid4(),
            content=text,
            category=classification.category,
            status=status_for_type(classification.type),
            user_id=user_id,
        )
        stored = await self._repo.create(thought)
        return stored, classification

    async def get_thought(self, thought_id: str | UUID, user_id: UUID) -> Thought | None:
        """Return thought if it exists and belongs to the user; otherwise None."""
        try:
            thought_uuid = UUID(str(thought_id))
        except ValueError:
            return None
        thought = await self._repo.get(thought_uuid)
        if thought and thought.user_id == user_id:
            return thought
        return None

    async def list_thoughts(
        self,
        user_id: UUID,
        *,
        category: str | None = None,
        status: str | None = None,
        search: str | None = None,
        limit: int | None = None,
    ) -> Sequence[Thought]:
        """List a user's thoughts, newest first, with the dashboard filters.

        `category="thoughts"` selects entries whose status is `thought`, and
        `status="urgent"` selects entries mentioning an urgency keyword.
        """
        category_filter: Category | None = None
        status_filter: ThoughtStatus | None = None
        urgent_only = False

        if category:
            if category == THOUGHTS_CATEGORY_FILTER:
                status_filter = ThoughtStatus.THOUGHT
            else:
                category_filter = Category(category)

        if status:
            if status == URGENT_STATUS_FILTER:
                urgent_only = True
            else:
                requested = ThoughtStatus(status)
                if status_filter is not None and requested is not status_filter:
                    return []
                status_filter = requested

        thoughts = await self._repo.list(
            user_id=user_id,
            category=category_filter,
            status=status_filter,
        )

        if urgent_only:
            thoughts = [t for t in thoughts if has_urgency(t.content)]
        if search:
            needle = search.lower()
            thoughts = [t for t in thoughts if needle in t.content.lower()]
        if limit is not None:
            thoughts = list(thoughts)[:limit]
        return thoughts

    async def update_status(self, thought_id: str | UUID, status: ThoughtStatus, user_id: UUID) -> Thought | None:
        existing = await self.get_thought(thought_id, user_id)
        if not existing:
            return None
        allowed = available_status_transitions(existing.status, existing.category)
        if status not in allowed:
            raise ValueError(
                f"Cannot change status from {existing.status.value} to {status.value}"
            )
        return await self._repo.update_fields(existing.id, {"status": status})

    async def move_to_category(self, thought_id: str | UUID, category: Category, user_id: UUID) -> Thought | None:
        existing = await self.get_thought(thought_id, user_id)
        if not existing:
            return None
        if category not in MOVE_CATEGORIES:
            raise ValueError(f"Thoughts cannot be moved to {category.value}")
        return await self._repo.update_fields(existing.id, {"category": category})

    async def edit_content(self, thought_id: str | UUID, content: str, user_id: UUID) -> Thought | None:
        text = (content or "").strip()
        if not text:
            raise ValueError("Thought content cannot be empty")
        existing = await self.get_thought(thought_id, user_id)
        if not existing:
            return None
        return await self._repo.update_fields(existing.id, {"content": text})

    async def delete_thought(self, thought_id: str | UUID, user_id: UUID) -> bool:
        """Delete a user's thought if it exists and belongs to them."""
        thought = await self.get_thought(thought_id, user_id)
        if not thought:
            return False
        return await self._repo.delete(thought.id)
