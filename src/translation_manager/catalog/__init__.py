"""Translation catalog: data model, JSON codec, persistence and change watching."""

from .exceptions import (
    CatalogError,
    CatalogLoadError,
    InvalidArgumentError,
    KeyConflictError,
    TreeShapeError,
)
from .file_set import LocaleFileSet
from .models import Catalog, Entry, LoadReport, Page, StatusSummary, StoreState, paginate
from .store import TranslationStore
from .tree_codec import find_conflicts, flatten, unflatten
from .watcher import ChangeWatcher, DebounceScheduler

__all__ = [
    "Catalog",
    "CatalogError",
    "CatalogLoadError",
    "ChangeWatcher",
    "DebounceScheduler",
    "Entry",
    "InvalidArgumentError",
    "KeyConflictError",
    "LoadReport",
    "LocaleFileSet",
    "Page",
    "StatusSummary",
    "StoreState",
    "TranslationStore",
    "TreeShapeError",
    "find_conflicts",
    "flatten",
    "paginate",
    "unflatten",
]
