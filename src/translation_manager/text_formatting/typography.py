#!/usr/bin/env python3
"""Non-breaking space insertion driven by per-language rule tables."""

import re
from dataclasses import dataclass
from functools import lru_cache
from re import Pattern

from .rules import COMMON_UNITS, NBSP, NON_BREAKING_SPACE_RULES

# Digits 1-9 standing alone between spaces stay attached to the preceding word
SINGLE_DIGIT_PATTERN = re.compile(r"\s+([1-9])\s+")


@dataclass(frozen=True)
class _CompiledRules:
    short_words: Pattern | None
    number_units: Pattern | None
    before_punctuation: Pattern | None
    glue_single_digits: bool


def _alternation(words) -> str:
    return "|".join(re.escape(word) for word in words)


@lru_cache(maxsize=None)
def _compile_rules(language: str) -> _CompiledRules | None:
    rules = NON_BREAKING_SPACE_RULES.get(language)
    if rules is None:
        return None

    short_words = None
    if rules.all_short_words:
        # Never glue a short word to a following markdown header marker
        short_words = re.compile(rf"\b({_alternation(rules.all_short_words)}) +(?!#{{1,6}})", re.IGNORECASE)

    number_units = None
    if rules.number_units:
        number_units = re.compile(rf"(\d)\s+({_alternation(COMMON_UNITS)})\b")

    before_punctuation = None
    if rules.before_punctuation:
        before_punctuation = re.compile(rf"\s+([{re.escape(''.join(rules.before_punctuation))}])")

    return _CompiledRules(
        short_words=short_words,
        number_units=number_units,
        before_punctuation=before_punctuation,
        glue_single_digits=rules.glue_single_digits,
    )


def insert_non_breaking_spaces(content: str, language: str) -> str:
    """Insert non-breaking spaces in text according to language rules.

    Args:
        content: The text to process
        language: Language code (e.g. 'pl', 'fr', 'de')

    Returns:
        Text with non-breaking spaces inserted. Languages without rules are
        returned unchanged.

    """
    compiled = _compile_rules(language)
    if compiled is None:
        return content

    text = content
    if compiled.short_words is not None:
        text = compiled.short_words.sub(lambda match: f"{match.group(1)}{NBSP}", text)
    if compiled.number_units is not None:
        text = compiled.number_units.sub(lambda match: f"{match.group(1)}{NBSP}{match.group(2)}", text)
    if compiled.before_punctuation is not None:
        text = compiled.before_punctuation.sub(lambda match: f"{NBSP}{match.group(1)}", text)
    if compiled.glue_single_digits:
        text = SINGLE_DIGIT_PATTERN.sub(lambda match: f"{NBSP}{match.group(1)} ", text)
    return text


def language_from_locale(locale: str) -> str:
    """Return the language part of a locale identifier ('pl-pl' -> 'pl')."""
    return locale.split("-")[0]


def has_non_breaking_space_rules(language: str) -> bool:
    return language in NON_BREAKING_SPACE_RULES


def apply_typography(value, locale: str):
    """Apply the transform for ``locale`` to string values; other leaves pass through."""
    if isinstance(value, str):
        return insert_non_breaking_spaces(value, language_from_locale(locale))
    return value


__all__ = [
    "apply_typography",
    "has_non_breaking_space_rules",
    "insert_non_breaking_spaces",
    "language_from_locale",
]
