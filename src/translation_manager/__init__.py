"""Translation Manager - multi-locale JSON catalog with review tracking."""

from importlib import metadata
from importlib import import_module
from pathlib import Path
import tomllib
from typing import TYPE_CHECKING


def _get_version() -> str:
    try:
        return metadata.version("translation-manager")
    except Exception:
        pass

    try:
        pyproject_path = Path(__file__).resolve().parents[2] / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
        return str(data["project"]["version"])
    except Exception:
        return "unknown"


__version__ = _get_version()

if TYPE_CHECKING:
    from .catalog import ChangeWatcher, LocaleFileSet, TranslationStore
    from .core.config import ConfigLoader, get_config
    from .text_formatting import apply_typography, insert_non_breaking_spaces

_LAZY_EXPORTS = {
    "TranslationStore": (".catalog", "TranslationStore"),
    "LocaleFileSet": (".catalog", "LocaleFileSet"),
    "ChangeWatcher": (".catalog", "ChangeWatcher"),
    "ConfigLoader": (".core.config", "ConfigLoader"),
    "get_config": (".core.config", "get_config"),
    "apply_typography": (".text_formatting", "apply_typography"),
    "insert_non_breaking_spaces": (".text_formatting", "insert_non_breaking_spaces"),
}


def __getattr__(name):
    if name in {"catalog", "core", "server", "text_formatting"}:
        module = import_module(f".{name}", __name__)
        globals()[name] = module
        return module

    if name not in _LAZY_EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attr_name = _LAZY_EXPORTS[name]
    module = import_module(module_name, __name__)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


__all__ = [
    "TranslationStore",
    "LocaleFileSet",
    "ChangeWatcher",
    "ConfigLoader",
    "get_config",
    "apply_typography",
    "insert_non_breaking_spaces",
]
