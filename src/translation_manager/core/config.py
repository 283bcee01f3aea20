#!/usr/bin/env python3
"""Configuration loader that reads from config files."""
import os
from pathlib import Path
from typing import Any

import tomllib

DEFAULT_CONFIG: dict[str, Any] = {
    "catalog": {
        "messages_dir": "messages",
        "status_file": "translation-check.json",
        "state_file": "",
        "backup_suffixes": [".bak", ".backup.json"],
    },
    "watcher": {
        "enabled": True,
        "debounce_seconds": 0.5,
        "poll_interval_seconds": 0.25,
    },
    "queries": {
        "unreviewed_limit": 10,
        "page_size": 50,
    },
    "server": {
        "websocket": {
            "host": "localhost",
            "bind_host": "127.0.0.1",
            "port": 8780,
            "max_message_mb": 10,
        }
    },
    "paths": {
        "state_dir": "~/.translation-manager",
    },
}


class ConfigLoader:
    """Load configuration from config files."""

    def __init__(self, config_path: str | Path | None = None) -> None:
        if config_path is None:
            config_path = self._default_config_path()

        self.config_file = str(config_path)
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path, "rb") as f:
                full_config = tomllib.load(f)
            manager_config = full_config.get("translation_manager", {})
        else:
            manager_config = {}

        self._config = self._merge_dicts(DEFAULT_CONFIG, manager_config)

    def _default_config_path(self) -> Path:
        env_path = os.environ.get("TRANSLATION_MANAGER_CONFIG")
        if env_path:
            return Path(env_path)
        return Path.home() / ".translation-manager" / "config.toml"

    def _merge_dicts(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        merged = base.copy()
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._merge_dicts(merged[key], value)
            else:
                merged[key] = value
        return merged

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get a value using dot notation (e.g., 'server.websocket.port')"""
        keys = key_path.split(".")
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    # Catalog locations
    @property
    def messages_dir(self) -> Path:
        """Directory holding one JSON document per locale.

        MESSAGES_DIR wins over the config file; relative paths resolve
        against the current working directory.
        """
        env_dir = os.environ.get("MESSAGES_DIR")
        if env_dir:
            return Path(env_dir)
        return Path.cwd() / str(self.get("catalog.messages_dir", "messages"))

    @property
    def status_filename(self) -> str:
        return str(self.get("catalog.status_file", "translation-check.json"))

    @property
    def state_dir(self) -> Path:
        return Path(str(self.get("paths.state_dir", "~/.translation-manager"))).expanduser()

    @property
    def state_file(self) -> Path:
        """Snapshot file used for change detection between reloads."""
        env_path = os.environ.get("TRANSLATION_MANAGER_STATE_FILE")
        if env_path:
            return Path(env_path)
        configured = self.get("catalog.state_file")
        if configured:
            return Path(str(configured)).expanduser()
        return self.state_dir / "translation-state.json"

    @property
    def backup_suffixes(self) -> tuple[str, ...]:
        return tuple(self.get("catalog.backup_suffixes", [".bak"]))

    # Watcher
    @property
    def watcher_enabled(self) -> bool:
        return bool(self.get("watcher.enabled", True))

    @property
    def debounce_seconds(self) -> float:
        return float(self.get("watcher.debounce_seconds", 0.5))

    @property
    def poll_interval_seconds(self) -> float:
        return float(self.get("watcher.poll_interval_seconds", 0.25))

    # Query defaults
    @property
    def unreviewed_limit(self) -> int:
        return int(self.get("queries.unreviewed_limit", 10))

    @property
    def page_size(self) -> int:
        return int(self.get("queries.page_size", 50))

    # WebSocket server
    @property
    def websocket_port(self) -> int:
        env_port = os.environ.get("TRANSLATION_MANAGER_PORT")
        if env_port:
            return int(env_port)
        return int(self.get("server.websocket.port", 8780))

    @property
    def websocket_host(self) -> str:
        return str(self.get("server.websocket.host", "localhost"))

    @property
    def websocket_bind_host(self) -> str:
        return str(self.get("server.websocket.bind_host", "127.0.0.1"))

    @property
    def max_message_bytes(self) -> int:
        return int(float(self.get("server.websocket.max_message_mb", 10)) * 1024 * 1024)


# Global singleton instance
_config_loader: ConfigLoader | None = None


def get_config() -> ConfigLoader:
    """Get the global config loader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader


def reset_config(config_path: str | Path | None = None) -> ConfigLoader:
    """Replace the global config loader, re-reading the config file."""
    global _config_loader
    _config_loader = ConfigLoader(config_path)
    return _config_loader


# Re-export logging functions
from .logging import setup_logging  # noqa: E402, F401
