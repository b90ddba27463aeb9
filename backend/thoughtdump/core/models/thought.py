from __future__ import annotations

from enum import Enum
from uuid import UUID, uuid4

from pydantic import Field, field_validator

from .base import TimestampedModel


class Category(str, Enum):
    """Closed set of topical tags a thought can be filed under.

    Declaration order is significant: partial matching during normalization
    walks the members in this order and the first hit wins.
    """

    WORK = "work"
    SHOPPING = "shopping"
    IDEA = "idea"
    PERSONAL = "personal"
    REMINDER = "reminder"
    HEALTH = "health"
    TRAVEL = "travel"
    RANDOM = "random"


class ThoughtType(str, Enum):
    """Whether a thought is something to act on or a passing reflection."""

    TASK = "task"
    THOUGHT = "thought"


class ThoughtStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"
    ARCHIVED = "archived"
    THOUGHT = "thought"


# Categories a user may move a thought into from the dashboard
MOVE_CATEGORIES: tuple[Category, ...] = tuple(c for c in Category if c is not Category.RANDOM)


def status_for_type(thought_type: ThoughtType) -> ThoughtStatus:
    """Initial status of a freshly captured thought."""
    if thought_type is ThoughtType.TASK:
        return ThoughtStatus.PENDING
    return ThoughtStatus.THOUGHT


class Thought(TimestampedModel):
    """Thought domain model, one row of the `thoughts` table."""

    id: UUID = Field(default_factory=uuid4, description="Unique thought identifier")
    content: str = Field(..., min_length=1, max_length=10000, description="Captured text")
    category: Category = Field(default=Category.RANDOM, description="Topical category")
    status: ThoughtStatus = Field(default=ThoughtStatus.THOUGHT, description="Workflow status")
    user_id: UUID = Field(..., description="Owner of the thought")

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Thought content cannot be empty")
        return stripped

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": str(uuid4()),
                    "content": "Buy groceries tomorrow",
                    "category": "shopping",
                    "status": "pending",
                    "user_id": str(uuid4()),
                }
            ]
        }
    }
