from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import UUID  # noqa: TCH003

from pydantic import Field, field_validator

from thoughtdump.core.models.base import AppBaseModel
from thoughtdump.core.models.thought import Category, ThoughtStatus  # noqa: TCH001
from thoughtdump.core.schemas.classification import ClassificationResult  # noqa: TCH001


def _require_text(v: str) -> str:
    stripped = v.strip()
    if not stripped:
        raise ValueError("Thought content cannot be empty")
    return stripped


class ThoughtCreate(AppBaseModel):
    content: str = Field(..., min_length=1, max_length=10000, description="Free-text thought")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _require_text(v)


class ClassifyRequest(ThoughtCreate):
    """Text to classify without storing it."""


class ThoughtContentUpdate(AppBaseModel):
    content: str = Field(..., min_length=1, max_length=10000)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _require_text(v)


class ThoughtStatusUpdate(AppBaseModel):
    status: ThoughtStatus


class ThoughtCategoryUpdate(AppBaseModel):
    category: Category


class ThoughtRead(AppBaseModel):
    id: UUID
    content: str
    category: Category
    status: ThoughtStatus
    user_id: UUID
    created_at: datetime


class ThoughtCaptured(AppBaseModel):
    """A stored thought together with how it was classified."""

    thought: ThoughtRead
    classification: ClassificationResult


class StatusTransitions(AppBaseModel):
    current: ThoughtStatus
    available: list[ThoughtStatus]
