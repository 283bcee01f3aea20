"""In-memory data model of the translation catalog."""

from __future__ import annotations

import bisect
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Iterator, TypeVar

from .exceptions import InvalidArgumentError
from .tree_codec import Leaf

T = TypeVar("T")

Snapshot = dict[str, dict[str, Leaf]]


class StoreState(Enum):
    """Load lifecycle of a translation store."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    RELOADING = "reloading"


def is_missing(value: Leaf) -> bool:
    """Absent, null and empty-string values all count as missing."""
    return value is None or value == ""


@dataclass
class Entry:
    """One translation key: its review flag and per-locale values."""

    is_checked: bool = False
    translations: dict[str, Leaf] = field(default_factory=dict)

    def missing_locales(self, locales: list[str]) -> list[str]:
        return [locale for locale in locales if is_missing(self.translations.get(locale))]


class Catalog:
    """Key/locale matrix with review flags.

    Keys iterate in insertion order for the lifetime of the catalog; the
    locale list is kept sorted and free of duplicates.
    """

    def __init__(self) -> None:
        self.entries: dict[str, Entry] = {}
        self.locales: list[str] = []

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def __iter__(self) -> Iterator[tuple[str, Entry]]:
        return iter(self.entries.items())

    def get(self, key: str) -> Entry | None:
        return self.entries.get(key)

    def ensure_entry(self, key: str) -> tuple[Entry, bool]:
        """Return the entry for ``key``, creating an unchecked one if needed."""
        entry = self.entries.get(key)
        if entry is not None:
            return entry, False
        entry = Entry()
        self.entries[key] = entry
        return entry, True

    def remove(self, key: str) -> None:
        self.entries.pop(key, None)

    def has_locale(self, locale: str) -> bool:
        index = bisect.bisect_left(self.locales, locale)
        return index < len(self.locales) and self.locales[index] == locale

    def add_locale(self, locale: str) -> bool:
        if self.has_locale(locale):
            return False
        bisect.insort(self.locales, locale)
        return True

    def replace_locales(self, locales) -> list[str]:
        """Reset the locale list, pruning values of locales no longer present.

        Returns the locales that were dropped.
        """
        new_locales = sorted(set(locales))
        dropped = [locale for locale in self.locales if locale not in new_locales]
        self.locales = new_locales
        if dropped:
            for key in list(self.entries):
                translations = self.entries[key].translations
                for locale in dropped:
                    translations.pop(locale, None)
        return dropped

    def snapshot(self) -> Snapshot:
        """Translations-only projection of the catalog."""
        return {key: dict(entry.translations) for key, entry in self.entries.items()}

    def locale_pairs(self, locale: str) -> list[tuple[str, Leaf]]:
        return [(key, entry.translations[locale]) for key, entry in self.entries.items() if locale in entry.translations]


@dataclass
class Page(Generic[T]):
    """One page of a paginated query."""

    count: int
    total_pages: int
    current_page: int
    page_size: int
    items: list[T]


def paginate(items: list[T], page: int, page_size: int) -> Page[T]:
    """Slice ``items`` into the requested page.

    Pages outside ``1..total_pages`` are empty rather than an error.
    """
    if page_size < 1:
        raise InvalidArgumentError(f"page_size must be a positive integer, got {page_size}")

    total_count = len(items)
    total_pages = math.ceil(total_count / page_size)
    if page < 1:
        page_items: list[T] = []
    else:
        start = (page - 1) * page_size
        page_items = items[start : start + page_size]
    return Page(
        count=total_count,
        total_pages=total_pages,
        current_page=page,
        page_size=page_size,
        items=page_items,
    )


@dataclass
class IncompleteEntry:
    key: str
    missing_locales: list[str]
    existing_translations: dict[str, Leaf]


@dataclass
class StatusSummary:
    total: int = 0
    missing_translations: int = 0
    waiting_for_check: int = 0


@dataclass
class UpdateResult:
    success: bool
    updated_keys: int = 0
    skipped: int = 0
    error: str | None = None


@dataclass
class MarkCheckedResult:
    success: bool
    marked_count: int = 0
    error: str | None = None


@dataclass
class AddResult:
    success: bool
    added_keys: int = 0
    added_locales: list[str] = field(default_factory=list)
    error: str | None = None


@dataclass
class DeleteResult:
    success: bool
    deleted_count: int = 0
    error: str | None = None


@dataclass
class TypographyResult:
    success: bool
    total_keys: int = 0
    total_locales: int = 0
    updated_translations: int = 0
    error: str | None = None


@dataclass
class SaveReport:
    """Documents written by one persist call."""

    saved_locales: list[str]
    key_count: int


@dataclass
class LoadReport:
    """Outcome of a load or reload cycle."""

    key_count: int
    locales: list[str]
    errors: dict[str, str] = field(default_factory=dict)
    invalidated: list[str] = field(default_factory=list)
