#!/usr/bin/env python3
"""CLI Smoke Tests - "Does it still work?" tests

These tests detect when the app is fundamentally broken:
- Import errors
- Config file corruption
- Basic CLI functionality
- Startup crashes

NOT testing edge cases or complex logic - just "can the app start?"
"""

import json
import os
import subprocess
import sys

import pytest


def _run_cli(*args, env_overrides=None):
    env = dict(os.environ)
    env.update(env_overrides or {})
    return subprocess.run(
        [sys.executable, "-m", "translation_manager.cli", *args],
        check=False,
        capture_output=True,
        text=True,
        timeout=30,
        env=env,
    )


class TestCLIImports:
    """Test that core components can be imported without crashing."""

    def test_package_exports(self):
        """Can we import the public API without explosions?"""
        import translation_manager
        from translation_manager import ChangeWatcher, TranslationStore, apply_typography

        assert translation_manager.__version__
        assert TranslationStore is not None
        assert ChangeWatcher is not None
        assert callable(apply_typography)

    def test_server_imports(self):
        from translation_manager.server import CatalogWebSocketServer, main

        assert CatalogWebSocketServer is not None
        assert callable(main)


class TestCLICommands:
    """Test that basic CLI commands work without crashing."""

    def test_help_command_works(self):
        """Does --help work without crashing?"""
        result = _run_cli("--help")

        assert result.returncode == 0
        assert "translation" in result.stdout.lower()

    def test_status_json(self, messages_dir, state_file, tmp_path):
        """Does status report the fixture catalog without touching the snapshot?"""
        result = _run_cli(
            "--messages-dir",
            str(messages_dir),
            "status",
            "--json",
            env_overrides={
                "TRANSLATION_MANAGER_STATE_FILE": str(state_file),
                "TRANSLATION_MANAGER_CONFIG": str(tmp_path / "missing.toml"),
            },
        )

        assert result.returncode == 0, result.stderr
        assert json.loads(result.stdout) == {
            "total": 4,
            "missingTranslations": 1,
            "waitingForCheck": 4,
            "locales": ["en", "pl"],
        }
        assert not state_file.exists()

    def test_unreviewed_json(self, messages_dir, state_file, tmp_path):
        result = _run_cli(
            "--messages-dir",
            str(messages_dir),
            "unreviewed",
            "-n",
            "1",
            "--json",
            env_overrides={
                "TRANSLATION_MANAGER_STATE_FILE": str(state_file),
                "TRANSLATION_MANAGER_CONFIG": str(tmp_path / "missing.toml"),
            },
        )

        assert result.returncode == 0, result.stderr
        assert json.loads(result.stdout) == {"common.save": {"en": "Save", "pl": "Zapisz"}}

    def test_missing_messages_dir_fails_cleanly(self, tmp_path):
        result = _run_cli(
            "--messages-dir",
            str(tmp_path / "nowhere"),
            "status",
            env_overrides={"TRANSLATION_MANAGER_CONFIG": str(tmp_path / "missing.toml")},
        )
        assert result.returncode == 1


if __name__ == "__main__":
    # Allow running this file directly for quick smoke tests
    pytest.main([__file__, "-v"])
