"""Translation store: the in-memory catalog and its persistence.

The store owns one :class:`Catalog`. Queries are synchronous and read the
catalog directly. Mutations and reload cycles are coroutines serialized
behind a single ``asyncio.Lock``; their blocking file I/O runs in the
default executor while the catalog itself is only touched on the event
loop thread.
"""

from __future__ import annotations

import asyncio
import functools
import re
from collections.abc import Iterable, Mapping
from typing import Any, Callable

from ..core.config import ConfigLoader, get_config, setup_logging
from ..text_formatting import apply_typography
from .exceptions import CatalogError, InvalidArgumentError, TreeShapeError
from .file_set import LocaleFileSet
from .models import (
    AddResult,
    Catalog,
    DeleteResult,
    Entry,
    IncompleteEntry,
    LoadReport,
    MarkCheckedResult,
    Page,
    SaveReport,
    Snapshot,
    StatusSummary,
    StoreState,
    TypographyResult,
    UpdateResult,
    paginate,
)
from .tree_codec import FlatPairs, Leaf, find_conflicts, flatten, is_leaf, unflatten

logger = setup_logging(__name__)

Typography = Callable[[Leaf, str], Leaf]

LOCALE_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")

_ABSENT = object()


class TranslationStore:
    """Versioned multi-locale key/value catalog backed by JSON documents."""

    def __init__(self, file_set: LocaleFileSet, *, typography: Typography = apply_typography) -> None:
        self.file_set = file_set
        self.catalog = Catalog()
        self._typography = typography
        self._lock = asyncio.Lock()
        self._state = StoreState.UNINITIALIZED
        self._status_loaded = False

    @classmethod
    def from_config(
        cls,
        config: ConfigLoader | None = None,
        *,
        messages_dir=None,
        state_file=None,
    ) -> "TranslationStore":
        """Build a store from configuration, optionally overriding locations."""
        config = config or get_config()
        file_set = LocaleFileSet(
            messages_dir or config.messages_dir,
            state_file or config.state_file,
            status_filename=config.status_filename,
            backup_suffixes=config.backup_suffixes,
        )
        return cls(file_set)

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def locales(self) -> tuple[str, ...]:
        return tuple(self.catalog.locales)

    @property
    def is_ready(self) -> bool:
        return self._state is StoreState.READY

    async def _run_blocking(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args))

    # ------------------------------------------------------------------
    # Load / reload
    # ------------------------------------------------------------------
    async def load(self, *, record_snapshot: bool = True) -> LoadReport:
        """Initial load: documents, snapshot diff and the one-time status load."""
        return await self.reload(record_snapshot=record_snapshot)

    async def reload(self, *, record_snapshot: bool = True) -> LoadReport:
        """Merge the on-disk documents into the catalog.

        Keys whose value changed relative to the remembered snapshot, and
        keys the snapshot does not know, become unchecked. Read-only callers
        pass ``record_snapshot=False`` to leave the remembered snapshot as is.
        """
        async with self._lock:
            previous_state = self._state
            self._state = StoreState.LOADING if previous_state is StoreState.UNINITIALIZED else StoreState.RELOADING
            try:
                report = await self._load_cycle(record_snapshot)
            except BaseException:
                self._state = previous_state
                raise
            self._state = StoreState.READY
            return report

    async def _load_cycle(self, record_snapshot: bool) -> LoadReport:
        snapshot = await self._read_snapshot()
        locales = await self._run_blocking(self.file_set.list_locales)

        documents: dict[str, FlatPairs] = {}
        errors: dict[str, str] = {}
        for locale in locales:
            filename = f"{locale}.json"
            try:
                tree = await self._run_blocking(self.file_set.read_locale, locale)
                documents[locale] = flatten(tree)
            except (OSError, ValueError, TreeShapeError) as e:
                logger.error(f"Error processing {filename}: {e}")
                errors[filename] = str(e)

        invalidated = self._merge_documents(locales, documents, snapshot)

        if record_snapshot:
            await self._write_snapshot(self.catalog.snapshot())

        if not self._status_loaded:
            await self._load_checked_status()
            self._status_loaded = True

        logger.info(f"Loaded {len(self.catalog)} keys in {len(self.catalog.locales)} locales")
        if invalidated:
            logger.info(f"Detected {len(invalidated)} changed or new keys since the last snapshot")
        return LoadReport(
            key_count=len(self.catalog),
            locales=list(self.catalog.locales),
            errors=errors,
            invalidated=invalidated,
        )

    def _merge_documents(
        self,
        locales: list[str],
        documents: dict[str, FlatPairs],
        snapshot: Snapshot | None,
    ) -> list[str]:
        dropped = self.catalog.replace_locales(locales)
        if dropped:
            logger.info(f"Locales no longer on disk: {', '.join(dropped)}")
            for key in [key for key, entry in self.catalog if not entry.translations]:
                self.catalog.remove(key)

        invalidated: dict[str, None] = {}
        for locale in locales:
            for key, value in documents.get(locale, ()):
                entry, _ = self.catalog.ensure_entry(key)
                entry.translations[locale] = value

                if snapshot is None:
                    continue
                previous = snapshot.get(key)
                if isinstance(previous, dict):
                    if previous.get(locale, _ABSENT) != value:
                        entry.is_checked = False
                        invalidated[key] = None
                else:
                    entry.is_checked = False
                    invalidated[key] = None
        return list(invalidated)

    async def _read_snapshot(self) -> Snapshot | None:
        try:
            snapshot = await self._run_blocking(self.file_set.read_snapshot)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read translation state, starting fresh: {e}")
            return None
        if snapshot is None:
            logger.info("No previous translation state found, starting fresh")
        else:
            logger.debug(f"Loaded previous translation state with {len(snapshot)} keys")
        return snapshot

    async def _write_snapshot(self, snapshot: Snapshot) -> None:
        try:
            await self._run_blocking(self.file_set.write_snapshot, snapshot)
            logger.debug(f"Saved current translation state with {len(snapshot)} keys")
        except OSError as e:
            logger.error(f"Error saving translation state: {e}")

    async def _load_checked_status(self) -> None:
        try:
            flags = await self._run_blocking(self.file_set.read_status)
        except (OSError, ValueError, TreeShapeError) as e:
            logger.warning(f"Could not load {self.file_set.status_filename}, starting with all unchecked: {e}")
            return
        if flags is None:
            logger.info(f"No {self.file_set.status_filename} found, starting with all unchecked")
            return

        for key, is_checked in flags.items():
            entry = self.catalog.get(key)
            if entry is not None:
                entry.is_checked = bool(is_checked)
        logger.info(f"Loaded checked status for {len(flags)} keys")

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    async def _persist(self, locales: Iterable[str] | None = None) -> SaveReport:
        """Write the given locale documents (all when None), then status and snapshot."""
        if locales is None:
            to_save = list(self.catalog.locales)
        else:
            to_save = [locale for locale in locales if self.catalog.has_locale(locale)]

        snapshot = self.catalog.snapshot()
        documents: dict[str, dict[str, Any]] = {}
        for locale in to_save:
            pairs = [(key, self._typography(value, locale)) for key, value in self.catalog.locale_pairs(locale)]
            documents[locale] = unflatten(pairs)
            for key, value in pairs:
                snapshot[key][locale] = value
        flags = self._status_flags()

        await self._run_blocking(self._write_documents, documents, flags)
        await self._write_snapshot(snapshot)

        logger.info(f"Saved translations to {len(to_save)} JSON files")
        return SaveReport(saved_locales=[*to_save, self.file_set.status_filename], key_count=len(self.catalog))

    def _write_documents(self, documents: dict[str, dict[str, Any]], flags: dict[str, bool]) -> None:
        for locale, tree in documents.items():
            self.file_set.write_locale(locale, tree)
        self.file_set.write_status(flags)

    async def _persist_status(self) -> None:
        flags = self._status_flags()
        await self._run_blocking(self.file_set.write_status, flags)
        logger.debug(f"Saved checked status for {len(flags)} keys")

    def _status_flags(self) -> dict[str, bool]:
        return {key: entry.is_checked for key, entry in self.catalog}

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_entry(self, key: str) -> Entry | None:
        entry = self.catalog.get(key)
        if entry is None:
            return None
        return Entry(is_checked=entry.is_checked, translations=dict(entry.translations))

    def get_unreviewed(self, limit: int = 10) -> dict[str, dict[str, Leaf]]:
        """Up to ``limit`` unchecked entries, in catalog order."""
        unchecked: dict[str, dict[str, Leaf]] = {}
        if limit <= 0:
            return unchecked
        for key, entry in self.catalog:
            if entry.is_checked:
                continue
            unchecked[key] = dict(entry.translations)
            if len(unchecked) >= limit:
                break
        return unchecked

    def get_reviewed_keys(self) -> list[str]:
        return [key for key, entry in self.catalog if entry.is_checked]

    def get_incomplete(self, page: int = 1, page_size: int = 50) -> Page[IncompleteEntry]:
        """Keys missing a value in at least one known locale, paginated."""
        incomplete = []
        for key, entry in self.catalog:
            missing = entry.missing_locales(self.catalog.locales)
            if missing:
                incomplete.append(
                    IncompleteEntry(key=key, missing_locales=missing, existing_translations=dict(entry.translations))
                )
        return paginate(incomplete, page, page_size)

    def get_by_prefix(self, prefix: str, page: int = 1, page_size: int = 50) -> Page[tuple[str, dict[str, Leaf]]]:
        matches = [(key, dict(entry.translations)) for key, entry in self.catalog if key.startswith(prefix)]
        return paginate(matches, page, page_size)

    def get_status_summary(self) -> StatusSummary:
        summary = StatusSummary()
        for _, entry in self.catalog:
            summary.total += 1
            if entry.missing_locales(self.catalog.locales):
                summary.missing_translations += 1
            if not entry.is_checked:
                summary.waiting_for_check += 1
        return summary

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    async def update(self, updates: Mapping[str, Mapping[str, Leaf]]) -> UpdateResult:
        """Overwrite existing values; unknown keys and locales are skipped.

        Only the touched locale documents (plus status) are rewritten. Review
        flags are left alone.
        """
        self._validate_translations(updates, "updates")

        async with self._lock:
            updated_count = 0
            skipped = 0
            modified_locales: set[str] = set()

            for key, locale_values in updates.items():
                entry = self.catalog.get(key)
                if entry is None:
                    logger.debug(f"Skipping update for unknown key {key}")
                    skipped += len(locale_values)
                    continue

                for locale, translation in locale_values.items():
                    if not self.catalog.has_locale(locale):
                        logger.debug(f"Skipping update for unknown locale {locale} of {key}")
                        skipped += 1
                        continue
                    entry.translations[locale] = self._typography(translation, locale)
                    modified_locales.add(locale)
                    updated_count += 1

            if modified_locales:
                try:
                    await self._persist(sorted(modified_locales))
                    logger.info(f"Auto-saved translations for locales: {', '.join(sorted(modified_locales))}")
                except (OSError, CatalogError) as e:
                    logger.error(f"Error auto-saving translations: {e}")
                    return UpdateResult(success=False, updated_keys=updated_count, skipped=skipped, error=str(e))

            return UpdateResult(success=True, updated_keys=updated_count, skipped=skipped)

    async def mark_checked(self, keys: str | Iterable[str]) -> MarkCheckedResult:
        """Mark one key or several keys as reviewed; unknown keys are ignored."""
        key_list = [keys] if isinstance(keys, str) else list(keys)

        async with self._lock:
            marked_count = 0
            for key in key_list:
                entry = self.catalog.get(key)
                if entry is None:
                    continue
                entry.is_checked = True
                marked_count += 1

            try:
                await self._persist_status()
            except OSError as e:
                logger.error(f"Error saving {self.file_set.status_filename}: {e}")
                return MarkCheckedResult(success=False, marked_count=marked_count, error=str(e))

            return MarkCheckedResult(success=True, marked_count=marked_count)

    async def add(self, translations: Mapping[str, Mapping[str, Leaf]]) -> AddResult:
        """Add keys and locales; every locale document is rewritten afterwards."""
        self._validate_translations(translations, "translations")
        for key, locale_values in translations.items():
            if not locale_values:
                raise InvalidArgumentError(f"translations['{key}'] must name at least one locale")
            for locale in locale_values:
                self._validate_locale(locale)

        async with self._lock:
            self._check_key_conflicts(translations)

            added_keys = 0
            added_locales: list[str] = []

            for key, locale_values in translations.items():
                entry, created = self.catalog.ensure_entry(key)
                if created:
                    added_keys += 1

                for locale, translation in locale_values.items():
                    if self.catalog.add_locale(locale):
                        logger.info(f"Added new locale {locale}")
                    entry.translations[locale] = self._typography(translation, locale)
                    if locale not in added_locales:
                        added_locales.append(locale)

            if added_locales:
                try:
                    await self._persist()
                    logger.info(f"Auto-saved translations for locales: {', '.join(added_locales)}")
                except (OSError, CatalogError) as e:
                    logger.error(f"Error auto-saving translations: {e}")
                    return AddResult(success=False, added_keys=added_keys, added_locales=added_locales, error=str(e))

            return AddResult(success=True, added_keys=added_keys, added_locales=added_locales)

    async def delete_by_prefix(self, prefix: str, locales: Iterable[str] | None = None) -> DeleteResult:
        """Delete keys starting with ``prefix``.

        With ``locales``, only those locale values are removed and the
        count is per removed value; entries left without any value are
        dropped. Without it, whole entries are removed and the count is per
        key.
        """
        if not prefix:
            raise InvalidArgumentError("Prefix is required")
        locale_list = list(locales) if locales else []

        async with self._lock:
            deleted_count = 0
            affected_locales: set[str] = set()

            if locale_list:
                for key, entry in list(self.catalog):
                    if not key.startswith(prefix):
                        continue
                    for locale in locale_list:
                        if locale in entry.translations:
                            del entry.translations[locale]
                            affected_locales.add(locale)
                            deleted_count += 1
                    if not entry.translations:
                        self.catalog.remove(key)
            else:
                keys_to_delete = [key for key, _ in self.catalog if key.startswith(prefix)]
                for key in keys_to_delete:
                    self.catalog.remove(key)
                deleted_count = len(keys_to_delete)

            if deleted_count > 0:
                try:
                    await self._persist(sorted(affected_locales) if locale_list else None)
                except (OSError, CatalogError) as e:
                    logger.error(f"Error saving after deleting keys with prefix {prefix}: {e}")
                    return DeleteResult(success=False, deleted_count=deleted_count, error=str(e))
                logger.info(f"Deleted {deleted_count} item(s) with prefix {prefix}")

            return DeleteResult(success=True, deleted_count=deleted_count)

    async def apply_typography_to_all(self) -> TypographyResult:
        """Re-run the typography transform over every stored string."""
        async with self._lock:
            updated_count = 0
            for _, entry in self.catalog:
                for locale in self.catalog.locales:
                    original = entry.translations.get(locale)
                    if not isinstance(original, str) or not original:
                        continue
                    processed = self._typography(original, locale)
                    if processed != original:
                        entry.translations[locale] = processed
                        updated_count += 1

            result = TypographyResult(
                success=True,
                total_keys=len(self.catalog),
                total_locales=len(self.catalog.locales),
                updated_translations=updated_count,
            )
            if updated_count:
                try:
                    await self._persist()
                except (OSError, CatalogError) as e:
                    logger.error(f"Error saving typography changes: {e}")
                    result.success = False
                    result.error = str(e)
            return result

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    @staticmethod
    def _validate_translations(translations: Any, argument: str) -> None:
        if not isinstance(translations, Mapping):
            raise InvalidArgumentError(f"{argument} must map keys to {{locale: text}} objects")
        for key, locale_values in translations.items():
            if not isinstance(key, str) or not key:
                raise InvalidArgumentError(f"{argument} contains an empty or non-string key")
            if not isinstance(locale_values, Mapping):
                raise InvalidArgumentError(f"{argument}['{key}'] must be an object of locale -> text")
            for locale, value in locale_values.items():
                if not is_leaf(value):
                    raise InvalidArgumentError(f"{argument}['{key}']['{locale}'] is not a JSON scalar or array")

    def _validate_locale(self, locale: str) -> None:
        if not isinstance(locale, str) or not LOCALE_PATTERN.match(locale):
            raise InvalidArgumentError(f"Invalid locale identifier: {locale!r}")
        if not self.file_set.is_locale_filename(f"{locale}.json"):
            raise InvalidArgumentError(f"Locale {locale!r} collides with a reserved file name")

    def _check_key_conflicts(self, translations: Mapping[str, Mapping[str, Any]]) -> None:
        incoming: dict[str, list[str]] = {}
        for key, locale_values in translations.items():
            for locale in locale_values:
                incoming.setdefault(locale, []).append(key)

        # Each locale document is rebuilt on its own, so conflicts are per locale
        for locale, keys in incoming.items():
            known = {key for key, _ in self.catalog.locale_pairs(locale)}
            known.update(keys)
            for key in keys:
                conflicts = find_conflicts(key, known)
                if conflicts:
                    raise InvalidArgumentError(
                        f"Key '{key}' conflicts with existing key '{min(conflicts)}' in locale '{locale}'"
                    )


__all__ = ["TranslationStore"]
