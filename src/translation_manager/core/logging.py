"""Logging setup for the translation manager.

Every module logger feeds one queue-backed sink: a rotating file under
TRANSLATION_MANAGER_LOG_DIR and, when enabled, stderr.
"""

import atexit
import logging
import os
import sys
import threading
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import SimpleQueue

_LISTENER_LOCK = threading.Lock()
_LOG_QUEUE: SimpleQueue | None = None
_LOG_LISTENER: QueueListener | None = None

DEFAULT_LOG_FILENAME = "translation-manager.log"


def _is_truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes"}


def _stop_listener() -> None:
    global _LOG_LISTENER
    if _LOG_LISTENER is not None:
        _LOG_LISTENER.stop()
        _LOG_LISTENER = None


def _resolve_logs_dir() -> Path | None:
    env_dir = os.environ.get("TRANSLATION_MANAGER_LOG_DIR")
    if env_dir:
        logs_dir = Path(env_dir)
    else:
        logs_dir = Path.home() / ".translation-manager" / "logs"

    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None
    return logs_dir


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, str(default)))
    except ValueError:
        return default


def _file_handler() -> RotatingFileHandler | None:
    logs_dir = _resolve_logs_dir()
    if logs_dir is None:
        return None
    log_filename = os.environ.get("TRANSLATION_MANAGER_LOG_FILE", DEFAULT_LOG_FILENAME)
    max_bytes = _env_int("TRANSLATION_MANAGER_LOG_MAX_BYTES", 10 * 1024 * 1024)
    backup_count = _env_int("TRANSLATION_MANAGER_LOG_BACKUP_COUNT", 5)
    try:
        return RotatingFileHandler(
            logs_dir / log_filename, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    except OSError:
        return None


def _ensure_listener(log_level: int, include_console: bool) -> QueueListener | None:
    global _LOG_QUEUE, _LOG_LISTENER
    with _LISTENER_LOCK:
        if _LOG_LISTENER is not None and _LOG_QUEUE is not None:
            return _LOG_LISTENER

        handlers: list[logging.Handler] = []
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )

        file_handler = _file_handler()
        if file_handler is not None:
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)

        if include_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(log_level)
            console_handler.setFormatter(formatter)
            handlers.append(console_handler)

        if not handlers:
            return None

        _LOG_QUEUE = SimpleQueue()
        _LOG_LISTENER = QueueListener(_LOG_QUEUE, *handlers, respect_handler_level=True)
        _LOG_LISTENER.start()
        atexit.register(_stop_listener)
        return _LOG_LISTENER


def setup_logging(
    module_name: str,
    log_level: str | None = None,
    include_console: bool | None = None,
) -> logging.Logger:
    """Attach ``module_name``'s logger to the shared queue sink.

    ``log_level`` defaults to TRANSLATION_MANAGER_LOG_LEVEL (INFO when unset);
    ``include_console`` defaults to TRANSLATION_MANAGER_CONSOLE_LOGS. Only the
    first call in a process decides which handlers the sink has.
    """
    logger = logging.getLogger(module_name)
    if logger.handlers:
        return logger

    if log_level is None:
        log_level = os.environ.get("TRANSLATION_MANAGER_LOG_LEVEL", "INFO")
    level = getattr(logging, log_level.upper(), logging.INFO)
    logger.setLevel(level)
    if include_console is None:
        include_console = _is_truthy(os.environ.get("TRANSLATION_MANAGER_CONSOLE_LOGS"))

    logger.propagate = False

    listener = _ensure_listener(level, include_console)
    if listener is None or _LOG_QUEUE is None:
        logger.addHandler(logging.NullHandler())
        return logger

    queue_handler = QueueHandler(_LOG_QUEUE)
    queue_handler.setLevel(level)
    logger.addHandler(queue_handler)
    return logger


__all__ = ["setup_logging"]
