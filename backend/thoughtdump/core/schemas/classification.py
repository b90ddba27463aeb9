from __future__ import annotations

from enum import Enum

from pydantic import Field

from thoughtdump.core.models.base import AppBaseModel
from thoughtdump.core.models.thought import Category, ThoughtType


class ClassificationSource(str, Enum):
    """Where a classification came from."""

    MODEL = "model"
    FALLBACK = "fallback"


class ClassificationResult(AppBaseModel):
    """Category and type assigned to a thought.

    `source` tells genuine model answers apart from the fixed fallback that is
    returned whenever the model could not be consulted.
    """

    category: Category
    type: ThoughtType
    source: ClassificationSource = Field(default=ClassificationSource.MODEL)

    @classmethod
    def fallback(cls) -> ClassificationResult:
        return cls(
            category=Category.RANDOM,
            type=ThoughtType.THOUGHT,
            source=ClassificationSource.FALLBACK,
        )

    @property
    def is_fallback(self) -> bool:
        return self.source is ClassificationSource.FALLBACK
