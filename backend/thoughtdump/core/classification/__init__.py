from .normalizer import SYNONYMS, normalize_category, normalize_type

__all__ = [
    "SYNONYMS",
    "normalize_category",
    "normalize_type",
]
