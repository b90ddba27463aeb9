"""
Unit tests for thoughtdump/core/classification/normalizer.py
"""

import pytest

from thoughtdump.core.classification import SYNONYMS, normalize_category, normalize_type
from thoughtdump.core.classification.normalizer import CATEGORY_RULES, clean_token
from thoughtdump.core.models.thought import Category, ThoughtType


SAMPLE_INPUTS = [
    None,
    "",
    "   ",
    "!!!",
    42,
    3.5,
    ["work"],
    {"category": "work"},
    "WORK!!",
    "  Job ",
    "grocery",
    "xyzzy",
    "shoping",
    "Category: Health.",
    "tr1p",
    "homework",
    "a",
    "ünïcödé",
    "TODO",
    "This is a TASK",
]


class TestCleanToken:
    def test_strips_case_and_non_letters(self):
        assert clean_token("  He-llo, W-orld! ") == "helloworld"

    def test_digits_are_dropped(self):
        assert clean_token("W0rld") == "wrld"

    def test_non_ascii_letters_are_dropped(self):
        assert clean_token("café") == "caf"


class TestNormalizeCategory:
    @pytest.mark.parametrize("raw", SAMPLE_INPUTS)
    def test_always_returns_a_category(self, raw):
        assert normalize_category(raw) in set(Category)

    @pytest.mark.parametrize("raw", [None, "", 0, [], {"a": 1}, b"work"])
    def test_missing_or_non_string_is_random(self, raw):
        assert normalize_category(raw) is Category.RANDOM

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("WORK!!", Category.WORK),
            ("  Job ", Category.WORK),
            ("grocery", Category.SHOPPING),
            ("xyzzy", Category.RANDOM),
            ("Travel", Category.TRAVEL),
            ('"health"', Category.HEALTH),
            ("vacation", Category.TRAVEL),
            ("brainstorm", Category.IDEA),
            ("appointment", Category.REMINDER),
        ],
    )
    def test_known_values(self, raw, expected):
        assert normalize_category(raw) is expected

    def test_exact_category_beats_synonym(self):
        # "thought" is only a synonym; "idea" is a category in its own right
        assert normalize_category("idea") is Category.IDEA
        assert normalize_category("thought") is Category.IDEA

    def test_substring_of_category(self):
        assert normalize_category("shop") is Category.SHOPPING

    def test_superstring_of_category(self):
        assert normalize_category("healthcare") is Category.HEALTH

    def test_partial_match_follows_category_order(self):
        # "homework" contains "work" and the synonym "me"; the category rule runs first
        assert normalize_category("homework") is Category.WORK

    def test_partial_synonym_match(self):
        assert normalize_category("flights") is Category.TRAVEL
        assert normalize_category("doctors") is Category.HEALTH

    def test_near_miss_without_overlap_is_random(self):
        assert normalize_category("shoping") is Category.RANDOM

    def test_input_without_letters_overlaps_first_category(self):
        assert normalize_category("!!!") is Category.WORK
        assert normalize_category("123") is Category.WORK
        assert normalize_category("   ") is Category.WORK

    @pytest.mark.parametrize("raw", SAMPLE_INPUTS)
    def test_idempotent(self, raw):
        once = normalize_category(raw)
        assert normalize_category(once) is once

    @pytest.mark.parametrize("category", list(Category))
    def test_every_category_maps_to_itself(self, category):
        assert normalize_category(category.value) is category

    def test_rule_order(self):
        assert [name for name, _ in CATEGORY_RULES] == [
            "exact",
            "synonym",
            "partial",
            "partial-synonym",
        ]


class TestSynonymTable:
    def test_every_alias_points_to_a_real_category(self):
        assert all(value in set(Category) for value in SYNONYMS.values())
        assert Category.RANDOM not in SYNONYMS.values()

    def test_aliases_resolve_through_normalizer(self):
        for alias, category in SYNONYMS.items():
            assert normalize_category(alias) is category

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            SYNONYMS["new"] = Category.WORK


class TestNormalizeType:
    @pytest.mark.parametrize("raw", SAMPLE_INPUTS)
    def test_always_returns_a_type(self, raw):
        assert normalize_type(raw) in set(ThoughtType)

    @pytest.mark.parametrize("raw", [None, "", 7, ["task"]])
    def test_missing_or_non_string_is_thought(self, raw):
        assert normalize_type(raw) is ThoughtType.THOUGHT

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("This is a TASK", ThoughtType.TASK),
            ("todo: call mom", ThoughtType.TASK),
            ("Actionable", ThoughtType.TASK),
            ("to-do", ThoughtType.TASK),
            ("I feel happy", ThoughtType.THOUGHT),
            ("thought", ThoughtType.THOUGHT),
            ("reflection", ThoughtType.THOUGHT),
        ],
    )
    def test_known_values(self, raw, expected):
        assert normalize_type(raw) is expected
