"""On-disk documents backing a catalog.

A messages directory holds one ``<locale>.json`` per locale plus the review
status document. The change-detection snapshot lives outside that directory.
All methods here are blocking; the store runs them in an executor.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from .exceptions import CatalogLoadError, TreeShapeError
from .models import Snapshot

LOCALE_INDENT = 4
STATUS_INDENT = 2
SNAPSHOT_INDENT = 2

DEFAULT_STATUS_FILENAME = "translation-check.json"
DEFAULT_BACKUP_SUFFIXES = (".bak", ".backup.json")

FileSignature = tuple[int, int]


def _dump(data: Any, indent: int) -> str:
    return json.dumps(data, indent=indent, ensure_ascii=False)


class LocaleFileSet:
    """Read/write surface over the locale, status and snapshot documents."""

    def __init__(
        self,
        messages_dir: str | Path,
        state_file: str | Path,
        *,
        status_filename: str = DEFAULT_STATUS_FILENAME,
        backup_suffixes: tuple[str, ...] = DEFAULT_BACKUP_SUFFIXES,
    ) -> None:
        self.messages_dir = Path(messages_dir)
        self.state_file = Path(state_file)
        self.status_filename = status_filename
        self.backup_suffixes = tuple(backup_suffixes)
        self._own_writes: dict[str, FileSignature] = {}

    @property
    def status_path(self) -> Path:
        return self.messages_dir / self.status_filename

    def locale_path(self, locale: str) -> Path:
        return self.messages_dir / f"{locale}.json"

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------
    def is_locale_filename(self, filename: str) -> bool:
        if not filename.endswith(".json") or filename == self.status_filename:
            return False
        if any(filename.endswith(suffix) for suffix in self.backup_suffixes):
            return False
        return len(filename) > len(".json")

    @staticmethod
    def locale_from_filename(filename: str) -> str:
        return filename[: -len(".json")]

    def list_locales(self) -> list[str]:
        try:
            names = os.listdir(self.messages_dir)
        except OSError as exc:
            raise CatalogLoadError(f"Cannot read messages directory {self.messages_dir}: {exc}") from exc
        return sorted(self.locale_from_filename(name) for name in names if self.is_locale_filename(name))

    # ------------------------------------------------------------------
    # Locale documents
    # ------------------------------------------------------------------
    def read_locale(self, locale: str) -> dict[str, Any]:
        """Parse one locale document.

        Raises OSError, json.JSONDecodeError or TreeShapeError; callers
        isolate these per file.
        """
        with open(self.locale_path(locale), encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise TreeShapeError(f"Top level of {locale}.json must be an object")
        return data

    def write_locale(self, locale: str, tree: dict[str, Any]) -> None:
        path = self.locale_path(locale)
        path.write_text(_dump(tree, LOCALE_INDENT), encoding="utf-8")
        self._remember_write(path)

    # ------------------------------------------------------------------
    # Status document
    # ------------------------------------------------------------------
    def read_status(self) -> dict[str, Any] | None:
        """Return the review flags, or None when the document is absent."""
        try:
            with open(self.status_path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        if not isinstance(data, dict):
            raise TreeShapeError(f"{self.status_filename} must contain a JSON object")
        return data

    def write_status(self, flags: dict[str, bool]) -> None:
        self.status_path.write_text(_dump(flags, STATUS_INDENT), encoding="utf-8")

    # ------------------------------------------------------------------
    # Snapshot document
    # ------------------------------------------------------------------
    def read_snapshot(self) -> Snapshot | None:
        try:
            with open(self.state_file, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        if not isinstance(data, dict):
            return None
        return data

    def write_snapshot(self, snapshot: Snapshot) -> None:
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        self.state_file.write_text(_dump(snapshot, SNAPSHOT_INDENT), encoding="utf-8")

    # ------------------------------------------------------------------
    # Change detection support
    # ------------------------------------------------------------------
    @staticmethod
    def _signature(path: Path) -> FileSignature | None:
        try:
            stat = path.stat()
        except OSError:
            return None
        return stat.st_mtime_ns, stat.st_size

    def _remember_write(self, path: Path) -> None:
        signature = self._signature(path)
        if signature is not None:
            self._own_writes[path.name] = signature

    def signatures(self) -> dict[str, FileSignature]:
        """Signatures of every locale document currently on disk."""
        result: dict[str, FileSignature] = {}
        try:
            names = os.listdir(self.messages_dir)
        except OSError:
            return result
        for name in names:
            if not self.is_locale_filename(name):
                continue
            signature = self._signature(self.messages_dir / name)
            if signature is not None:
                result[name] = signature
        return result

    def is_own_write(self, filename: str, signature: FileSignature | None) -> bool:
        """True when ``signature`` matches the last write made through this file set."""
        return signature is not None and self._own_writes.get(filename) == signature


__all__ = ["DEFAULT_BACKUP_SUFFIXES", "DEFAULT_STATUS_FILENAME", "FileSignature", "LocaleFileSet"]
