"""Tests for store mutations and their persistence."""

import json

import pytest

from translation_manager.catalog.exceptions import InvalidArgumentError
from translation_manager.text_formatting import NBSP


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def written_locales(loaded_store, monkeypatch):
    """Record which locale documents each mutation rewrites."""
    calls = []
    original = loaded_store.file_set.write_locale

    def _record(locale, tree):
        calls.append(locale)
        original(locale, tree)

    monkeypatch.setattr(loaded_store.file_set, "write_locale", _record)
    return calls


class TestUpdate:
    """Overwriting existing values."""

    @pytest.mark.asyncio
    async def test_applies_typography_and_rewrites_only_touched_locale(
        self, loaded_store, written_locales, messages_dir
    ):
        result = await loaded_store.update({"common.save": {"pl": "Zapisz i wyjdź"}})

        assert result.success is True
        assert result.updated_keys == 1
        assert loaded_store.get_entry("common.save").translations["pl"] == f"Zapisz i{NBSP}wyjdź"
        assert written_locales == ["pl"]
        assert _read(messages_dir / "pl.json")["common"]["save"] == f"Zapisz i{NBSP}wyjdź"

    @pytest.mark.asyncio
    async def test_unknown_keys_and_locales_are_skipped(self, loaded_store, written_locales):
        result = await loaded_store.update(
            {"missing.key": {"en": "x", "pl": "y"}, "common.save": {"de": "Speichern", "en": "Store"}}
        )

        assert result.success is True
        assert result.updated_keys == 1
        assert result.skipped == 3
        assert "de" not in loaded_store.get_entry("common.save").translations
        assert written_locales == ["en"]

    @pytest.mark.asyncio
    async def test_nothing_written_when_nothing_matched(self, loaded_store, written_locales):
        result = await loaded_store.update({"missing.key": {"en": "x"}})
        assert result.updated_keys == 0
        assert written_locales == []

    @pytest.mark.asyncio
    async def test_review_flag_is_kept(self, loaded_store):
        await loaded_store.mark_checked("common.save")
        await loaded_store.update({"common.save": {"en": "Save now"}})
        assert loaded_store.get_entry("common.save").is_checked is True

    @pytest.mark.asyncio
    async def test_write_failure_is_reported_without_rollback(self, loaded_store, monkeypatch):
        def _fail(locale, tree):
            raise OSError("disk full")

        monkeypatch.setattr(loaded_store.file_set, "write_locale", _fail)

        result = await loaded_store.update({"common.save": {"en": "Keep"}})

        assert result.success is False
        assert "disk full" in result.error
        assert loaded_store.get_entry("common.save").translations["en"] == "Keep"

    @pytest.mark.asyncio
    async def test_malformed_updates_are_rejected(self, loaded_store):
        with pytest.raises(InvalidArgumentError):
            await loaded_store.update({"common.save": "not a mapping"})


class TestMarkChecked:
    """Review flags."""

    @pytest.mark.asyncio
    async def test_accepts_single_key_and_list(self, loaded_store, messages_dir):
        single = await loaded_store.mark_checked("common.save")
        many = await loaded_store.mark_checked(["common.cancel", "unknown.key"])

        assert single.marked_count == 1
        assert many.marked_count == 1
        assert loaded_store.get_reviewed_keys() == ["common.save", "common.cancel"]
        status = _read(messages_dir / "translation-check.json")
        assert status == {"common.save": True, "common.cancel": True, "home.title": False, "home.subtitle": False}

    @pytest.mark.asyncio
    async def test_does_not_touch_locale_documents(self, loaded_store, written_locales):
        await loaded_store.mark_checked("common.save")
        assert written_locales == []


class TestAdd:
    """Adding keys and locales."""

    @pytest.mark.asyncio
    async def test_new_key_is_unchecked_and_counted(self, loaded_store, messages_dir):
        before = loaded_store.get_status_summary().total

        result = await loaded_store.add({"home.footer": {"en": "Bye", "pl": "Do zobaczenia"}})

        assert result.success is True
        assert result.added_keys == 1
        assert result.added_locales == ["en", "pl"]
        assert loaded_store.get_status_summary().total == before + 1
        assert loaded_store.get_entry("home.footer").is_checked is False
        assert _read(messages_dir / "pl.json")["home"]["footer"] == f"Do{NBSP}zobaczenia"

    @pytest.mark.asyncio
    async def test_new_locale_creates_document(self, loaded_store, messages_dir):
        result = await loaded_store.add({"common.save": {"de": "Speichern"}})

        assert result.added_keys == 0
        assert loaded_store.locales == ("de", "en", "pl")
        assert _read(messages_dir / "de.json") == {"common": {"save": "Speichern"}}

    @pytest.mark.asyncio
    async def test_every_locale_is_rewritten(self, loaded_store, written_locales):
        await loaded_store.add({"x": {"en": "X"}})
        assert sorted(written_locales) == ["en", "pl"]

    @pytest.mark.asyncio
    async def test_conflicting_key_is_rejected_before_mutation(self, loaded_store):
        with pytest.raises(InvalidArgumentError):
            await loaded_store.add({"common.save.label": {"en": "Label"}})
        with pytest.raises(InvalidArgumentError):
            await loaded_store.add({"common": {"en": "Common"}})
        assert "common.save.label" not in loaded_store.catalog
        assert loaded_store.get_status_summary().total == 4

    @pytest.mark.parametrize("locale", ["", "../evil", "en/US", "translation-check", "pl.backup"])
    @pytest.mark.asyncio
    async def test_invalid_locale_is_rejected(self, loaded_store, locale):
        with pytest.raises(InvalidArgumentError):
            await loaded_store.add({"new.key": {locale: "x"}})
        assert "new.key" not in loaded_store.catalog

    @pytest.mark.asyncio
    async def test_empty_locale_map_is_rejected(self, loaded_store, written_locales):
        with pytest.raises(InvalidArgumentError):
            await loaded_store.add({"new.key": {}})
        assert "new.key" not in loaded_store.catalog
        assert written_locales == []


class TestAddAcrossLocales:
    """Key shapes may differ between locale documents."""

    @pytest.fixture
    def split_dir(self, tmp_path):
        directory = tmp_path / "split"
        directory.mkdir()
        (directory / "en.json").write_text(json.dumps({"a": "X"}), encoding="utf-8")
        (directory / "pl.json").write_text(json.dumps({"a": {"b": "Y"}}), encoding="utf-8")
        return directory

    @pytest.mark.asyncio
    async def test_conflict_in_target_locale_is_rejected(self, make_store, split_dir):
        store = make_store(split_dir)
        await store.load()

        with pytest.raises(InvalidArgumentError, match="'en'"):
            await store.add({"a.b": {"en": "Z"}})

        assert store.get_entry("a.b").translations == {"pl": "Y"}
        result = await store.update({"a": {"en": "X2"}})
        assert result.success is True
        assert _read(split_dir / "en.json") == {"a": "X2"}

    @pytest.mark.asyncio
    async def test_compatible_key_is_added_to_its_locale(self, make_store, split_dir):
        store = make_store(split_dir)
        await store.load()

        result = await store.add({"a.c": {"pl": "W"}})

        assert result.success is True
        assert _read(split_dir / "pl.json") == {"a": {"b": "Y", "c": "W"}}
        assert _read(split_dir / "en.json") == {"a": "X"}

    @pytest.mark.asyncio
    async def test_conflict_within_one_request_is_rejected(self, make_store, split_dir):
        store = make_store(split_dir)
        await store.load()

        with pytest.raises(InvalidArgumentError):
            await store.add({"x": {"en": "1"}, "x.y": {"en": "2"}})
        assert "x" not in store.catalog
        assert "x.y" not in store.catalog


class TestDeleteByPrefix:
    """Whole-key and locale-scoped deletion."""

    @pytest.mark.asyncio
    async def test_whole_key_deletion(self, loaded_store, messages_dir):
        result = await loaded_store.delete_by_prefix("common.")

        assert result.success is True
        assert result.deleted_count == 2
        assert "common.save" not in loaded_store.catalog
        assert "common" not in _read(messages_dir / "en.json")
        assert "common" not in _read(messages_dir / "pl.json")
        assert "common.save" not in _read(messages_dir / "translation-check.json")

    @pytest.mark.asyncio
    async def test_locale_scoped_deletion_keeps_other_locales(self, loaded_store, messages_dir, written_locales):
        result = await loaded_store.delete_by_prefix("common.", locales=["pl"])

        assert result.deleted_count == 2
        assert loaded_store.get_entry("common.save").translations == {"en": "Save"}
        assert written_locales == ["pl"]
        assert "common" not in _read(messages_dir / "pl.json")
        assert _read(messages_dir / "en.json")["common"]["save"] == "Save"

    @pytest.mark.asyncio
    async def test_locale_scoped_deletion_drops_emptied_entries(self, loaded_store):
        result = await loaded_store.delete_by_prefix("home.subtitle", locales=["en", "pl"])

        assert result.deleted_count == 1
        assert "home.subtitle" not in loaded_store.catalog

    @pytest.mark.asyncio
    async def test_no_match_writes_nothing(self, loaded_store, written_locales):
        result = await loaded_store.delete_by_prefix("nothing.")
        assert result.deleted_count == 0
        assert written_locales == []

    @pytest.mark.parametrize("prefix", ["", None])
    @pytest.mark.asyncio
    async def test_empty_prefix_is_invalid(self, loaded_store, prefix):
        with pytest.raises(InvalidArgumentError):
            await loaded_store.delete_by_prefix(prefix)
        assert loaded_store.get_status_summary().total == 4


class TestApplyTypographyToAll:
    """Bulk typography pass."""

    @pytest.mark.asyncio
    async def test_updates_only_changed_strings(self, make_store, tmp_path):
        directory = tmp_path / "raw"
        directory.mkdir()
        (directory / "pl.json").write_text(json.dumps({"a": "kot i pies", "b": "pies", "n": 5}), encoding="utf-8")
        (directory / "en.json").write_text(json.dumps({"a": "cat i dog"}), encoding="utf-8")
        store = make_store(directory)
        await store.load()

        result = await store.apply_typography_to_all()

        assert result.success is True
        assert result.total_keys == 3
        assert result.total_locales == 2
        assert result.updated_translations == 1
        assert store.get_entry("a").translations == {"en": "cat i dog", "pl": f"kot i{NBSP}pies"}
        assert _read(directory / "pl.json")["a"] == f"kot i{NBSP}pies"

    @pytest.mark.asyncio
    async def test_second_pass_changes_nothing(self, loaded_store):
        await loaded_store.apply_typography_to_all()
        result = await loaded_store.apply_typography_to_all()
        assert result.updated_translations == 0


class TestInjectedTypography:
    """The transform is a constructor parameter."""

    @pytest.mark.asyncio
    async def test_custom_transform_is_used_on_write(self, make_store, messages_dir):
        store = make_store(messages_dir, typography=lambda value, locale: f"[{locale}]{value}")
        await store.load()

        await store.update({"common.save": {"en": "Save"}})

        assert store.get_entry("common.save").translations["en"] == "[en]Save"


@pytest.mark.asyncio
async def test_add_applies_polish_typography(loaded_store, messages_dir):
    await loaded_store.add({"x.y": {"pl": "Ma 5 lat i 10 kg"}})

    stored = loaded_store.get_entry("x.y").translations["pl"]
    assert f"i{NBSP}10" in stored
    assert f"10{NBSP}kg" in stored
    assert _read(messages_dir / "pl.json")["x"]["y"] == stored
