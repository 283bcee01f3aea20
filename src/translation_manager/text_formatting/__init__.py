"""Locale-aware typographic post-processing for stored translations."""

from .rules import COMMON_UNITS, NBSP, NON_BREAKING_SPACE_RULES, LanguageRules
from .typography import (
    apply_typography,
    has_non_breaking_space_rules,
    insert_non_breaking_spaces,
    language_from_locale,
)

__all__ = [
    "COMMON_UNITS",
    "NBSP",
    "NON_BREAKING_SPACE_RULES",
    "LanguageRules",
    "apply_typography",
    "has_non_breaking_space_rules",
    "insert_non_breaking_spaces",
    "language_from_locale",
]
