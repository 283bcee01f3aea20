#!/usr/bin/env python3
"""Language rule tables for non-breaking space insertion.

Each language lists the short words that must not be left dangling at the
end of a line, whether numbers are glued to their units, and any
punctuation that takes a non-breaking space in front of it.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LanguageRules:
    """Typographic rules for one language."""

    single_letter_words: tuple[str, ...] = ()
    short_words: tuple[str, ...] = ()
    number_units: bool = False
    before_punctuation: tuple[str, ...] = ()
    glue_single_digits: bool = False

    @property
    def all_short_words(self) -> tuple[str, ...]:
        return self.single_letter_words + self.short_words


# ==============================================================================
# LANGUAGE RULES
# ==============================================================================

NON_BREAKING_SPACE_RULES: dict[str, LanguageRules] = {
    "pl": LanguageRules(
        single_letter_words=("a", "i", "o", "u", "w", "z"),
        short_words=(
            "na", "po", "do", "od", "za", "ze", "we", "wi", "wo", "ku", "by", "ta", "te", "to", "ty",
            "co", "że", "ja", "on", "my", "wy", "or", "bo", "no", "ah", "oj", "eh", "mu", "go",
            "ją", "je", "ję", "mi", "ci", "si", "ma", "są",
        ),
        number_units=True,
        glue_single_digits=True,
    ),
    "cs": LanguageRules(
        single_letter_words=("a", "i", "o", "u", "v", "z", "k", "s"),
        short_words=(
            "na", "po", "do", "od", "za", "ze", "ve", "ku", "by", "ta", "te", "to", "ty", "co", "že",
            "ja", "on", "my", "vy", "bo", "no", "se", "si", "je", "ho", "mu", "mi",
        ),
        number_units=True,
        glue_single_digits=True,
    ),
    "sk": LanguageRules(
        single_letter_words=("a", "i", "o", "u", "v", "z", "k", "s"),
        short_words=(
            "na", "po", "do", "od", "za", "zo", "ve", "ku", "by", "ta", "te", "to", "ty", "čo", "že",
            "ja", "on", "my", "vy", "bo", "no", "sa", "si", "je", "ho", "mu", "mi",
        ),
        number_units=True,
        glue_single_digits=True,
    ),
    "fr": LanguageRules(
        single_letter_words=("a", "à", "y"),
        short_words=(
            "le", "la", "de", "du", "et", "ou", "ce", "se", "ne", "me", "te", "je", "tu", "il", "un",
            "au", "si", "en", "on",
        ),
        number_units=True,
        before_punctuation=(":", ";", "!", "?", "»"),
    ),
    "de": LanguageRules(
        short_words=("am", "an", "im", "in", "um", "zu", "ob", "wo", "so", "da", "es", "er", "du"),
        number_units=True,
    ),
    "hu": LanguageRules(
        single_letter_words=("a", "é", "s"),
        short_words=("az", "el", "le", "be", "ki", "fel", "meg", "át", "rá", "oda"),
        number_units=True,
    ),
    "es": LanguageRules(
        single_letter_words=("a", "e", "o", "u", "y"),
        short_words=(
            "el", "la", "de", "en", "un", "es", "se", "no", "te", "le", "me", "lo", "al", "mi", "tu",
            "su", "si", "ya", "da",
        ),
        number_units=True,
    ),
    "it": LanguageRules(
        single_letter_words=("a", "e", "è", "o"),
        short_words=(
            "il", "la", "di", "in", "un", "si", "no", "te", "le", "me", "lo", "al", "mi", "tu", "su",
            "se", "da", "ma", "ha",
        ),
        number_units=True,
    ),
    "nl": LanguageRules(
        single_letter_words=("a",),
        short_words=("de", "in", "en", "op", "te", "is", "ze", "me", "je", "we", "al", "om", "nu", "zo", "er"),
        number_units=True,
    ),
}


# ==============================================================================
# UNITS
# ==============================================================================

COMMON_UNITS: tuple[str, ...] = (
    # SI base units
    "m", "km", "cm", "mm", "g", "kg", "l", "ml", "s", "min", "h",
    # Area, volume, speed
    "m²", "m³", "ha", "l/min", "km/h",
    # Currencies
    "zł", "PLN", "EUR", "USD", "CZK", "HUF",
    # Ratios
    "%", "‰",
    # Temperature
    "°C", "°F", "K",
    # Power and energy
    "W", "kW", "MW", "kWh", "J", "kJ",
    # Frequency
    "Hz", "kHz", "MHz", "GHz",
    # Pressure
    "Pa", "kPa", "bar", "atm",
    # Data
    "B", "kB", "MB", "GB", "TB", "bit", "bps", "Mbps",
)

NBSP = "\u00a0"

__all__ = ["COMMON_UNITS", "LanguageRules", "NBSP", "NON_BREAKING_SPACE_RULES"]
