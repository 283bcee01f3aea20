"""
Shared pytest fixtures.

Logs go to a throwaway directory and every test gets its own messages
directory and snapshot file.
"""

import json
import os
import tempfile

import pytest
import pytest_asyncio

# Keep log files out of the home directory before any module configures logging
os.environ.setdefault("TRANSLATION_MANAGER_LOG_DIR", tempfile.mkdtemp(prefix="translation-manager-logs-"))

from translation_manager.catalog import LocaleFileSet, TranslationStore  # noqa: E402


def write_json(path, data):
    path.write_text(json.dumps(data, ensure_ascii=False, indent=4), encoding="utf-8")


@pytest.fixture
def messages_dir(tmp_path):
    directory = tmp_path / "messages"
    directory.mkdir()
    write_json(
        directory / "en.json",
        {
            "common": {"save": "Save", "cancel": "Cancel"},
            "home": {"title": "Welcome", "subtitle": "Hello there"},
        },
    )
    write_json(
        directory / "pl.json",
        {
            "common": {"save": "Zapisz", "cancel": "Anuluj"},
            "home": {"title": "Witaj"},
        },
    )
    return directory


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "state" / "translation-state.json"


@pytest.fixture
def file_set(messages_dir, state_file):
    return LocaleFileSet(messages_dir, state_file)


@pytest.fixture
def store(file_set):
    return TranslationStore(file_set)


@pytest_asyncio.fixture
async def loaded_store(store):
    await store.load()
    return store


@pytest.fixture
def make_store(state_file):
    """Build a store over an arbitrary directory, sharing the test's snapshot file."""

    def _make(directory, **kwargs):
        return TranslationStore(LocaleFileSet(directory, state_file), **kwargs)

    return _make


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path):
    from translation_manager.core import config as config_module

    for name in ("MESSAGES_DIR", "TRANSLATION_MANAGER_STATE_FILE", "TRANSLATION_MANAGER_PORT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TRANSLATION_MANAGER_CONFIG", str(tmp_path / "missing-config.toml"))
    monkeypatch.setattr(config_module, "_config_loader", None)
    yield
