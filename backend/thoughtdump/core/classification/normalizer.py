"""Coerce free-form model output into the closed category and type vocabularies.

Both normalizers are total: any input, including ``None`` and non-strings,
maps to a valid enum member and nothing is ever raised.
"""
from __future__ import annotations

import re
from collections.abc import Callable
from types import MappingProxyType
from typing import Any

from thoughtdump.core.models.thought import Category, ThoughtType
from thoughtdump.utils.logging import get_logger

logger = get_logger(__name__)

_NON_LETTERS = re.compile(r"[^a-z]")

SYNONYMS: MappingProxyType[str, Category] = MappingProxyType({
    # work
    "job": Category.WORK,
    "office": Category.WORK,
    "career": Category.WORK,
    "business": Category.WORK,
    "meeting": Category.WORK,
    "project": Category.WORK,
    "task": Category.WORK,
    "deadline": Category.WORK,
    # shopping
    "buy": Category.SHOPPING,
    "purchase": Category.SHOPPING,
    "store": Category.SHOPPING,
    "grocery": Category.SHOPPING,
    "groceries": Category.SHOPPING,
    "market": Category.SHOPPING,
    # idea
    "concept": Category.IDEA,
    "thought": Category.IDEA,
    "brainstorm": Category.IDEA,
    "innovation": Category.IDEA,
    "creative": Category.IDEA,
    # personal
    "self": Category.PERSONAL,
    "me": Category.PERSONAL,
    "myself": Category.PERSONAL,
    "life": Category.PERSONAL,
    "family": Category.PERSONAL,
    "relationship": Category.PERSONAL,
    # reminder
    "todo": Category.REMINDER,
    "remember": Category.REMINDER,
    "note": Category.REMINDER,
    "appointment": Category.REMINDER,
    "schedule": Category.REMINDER,
    "calendar": Category.REMINDER,
    # health
    "medical": Category.HEALTH,
    "doctor": Category.HEALTH,
    "fitness": Category.HEALTH,
    "exercise": Category.HEALTH,
    "wellness": Category.HEALTH,
    "diet": Category.HEALTH,
    # travel
    "trip": Category.TRAVEL,
    "vacation": Category.TRAVEL,
    "journey": Category.TRAVEL,
    "flight": Category.TRAVEL,
    "hotel": Category.TRAVEL,
    "destination": Category.TRAVEL,
})

TASK_MARKERS: tuple[str, ...] = ("task", "action", "todo")


def clean_token(raw: str) -> str:
    """Strip, lowercase and drop everything that is not an ASCII letter."""
    return _NON_LETTERS.sub("", raw.strip().lower())


def _overlaps(cleaned: str, name: str) -> bool:
    return cleaned in name or name in cleaned


def _exact_category(cleaned: str) -> Category | None:
    for category in Category:
        if cleaned == category.value:
            return category
    return None


def _exact_synonym(cleaned: str) -> Category | None:
    return SYNONYMS.get(cleaned)


def _partial_category(cleaned: str) -> Category | None:
    for category in Category:
        if _overlaps(cleaned, category.value):
            return category
    return None


def _partial_synonym(cleaned: str) -> Category | None:
    for alias, category in SYNONYMS.items():
        if _overlaps(cleaned, alias):
            return category
    return None


# Evaluated top to bottom; the first rule returning a category wins.
CATEGORY_RULES: tuple[tuple[str, Callable[[str], Category | None]], ...] = (
    ("exact", _exact_category),
    ("synonym", _exact_synonym),
    ("partial", _partial_category),
    ("partial-synonym", _partial_synonym),
)


def normalize_category(raw: Any) -> Category:
    """Map arbitrary model output to a member of ``Category``.

    Falls back to ``Category.RANDOM`` for missing, non-string or unmatched
    input. A value with no letters cleans to ``""``, which the partial rule
    matches against the first category (``work``).
    """
    if not raw or not isinstance(raw, str):
        logger.debug("Invalid category input: %r", raw)
        return Category.RANDOM

    cleaned = clean_token(raw)
    for rule_name, rule in CATEGORY_RULES:
        match = rule(cleaned)
        if match is not None:
            logger.debug("Category %r matched by %s rule -> %s", cleaned, rule_name, match.value)
            return match

    logger.debug("No category match for %r, defaulting to random", cleaned)
    return Category.RANDOM


def normalize_type(raw: Any) -> ThoughtType:
    """Map arbitrary model output to ``task`` or ``thought``."""
    if not raw or not isinstance(raw, str):
        logger.debug("Invalid type input: %r", raw)
        return ThoughtType.THOUGHT

    cleaned = clean_token(raw)
    if any(marker in cleaned for marker in TASK_MARKERS):
        return ThoughtType.TASK
    return ThoughtType.THOUGHT
