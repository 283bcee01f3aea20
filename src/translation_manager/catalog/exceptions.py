"""Exception hierarchy for the translation catalog."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for all catalog specific errors."""


class InvalidArgumentError(CatalogError, ValueError):
    """Raised when an operation is called with arguments it cannot act on."""


class TreeShapeError(CatalogError, TypeError):
    """Raised when a JSON tree holds a value outside the supported leaf types."""


class KeyConflictError(CatalogError):
    """Raised when a dotted key needs an object where a leaf already sits (or the reverse)."""

    def __init__(self, key: str, conflicting_key: str) -> None:
        super().__init__(f"Key '{key}' conflicts with existing key '{conflicting_key}'")
        self.key = key
        self.conflicting_key = conflicting_key


class CatalogLoadError(CatalogError):
    """Raised when the locale directory itself cannot be enumerated."""


__all__ = [
    "CatalogError",
    "CatalogLoadError",
    "InvalidArgumentError",
    "KeyConflictError",
    "TreeShapeError",
]
