"""Debounced reloads triggered by external edits to locale documents."""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING, Awaitable, Callable

from ..core.config import ConfigLoader, get_config, setup_logging
from .file_set import FileSignature

if TYPE_CHECKING:
    from .store import TranslationStore

logger = setup_logging(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class DebounceScheduler:
    """Run ``callback`` once events stop arriving for ``delay`` seconds.

    Every ``schedule()`` cancels the pending timer and starts a new one.
    A callback that has already started is never cancelled by a later event;
    that event simply arms the next timer.
    """

    def __init__(self, delay: float, callback: Callable[[], Awaitable[None]], *, sleep: SleepFunc = asyncio.sleep):
        self.delay = delay
        self._callback = callback
        self._sleep = sleep
        self._timer: asyncio.Task | None = None
        self._running: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def schedule(self) -> None:
        self.cancel()
        self._timer = asyncio.create_task(self._wait_then_fire())

    def cancel(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _wait_then_fire(self) -> None:
        await self._sleep(self.delay)

        # Detach from the timer slot so a new event cannot cancel the callback
        task = asyncio.current_task()
        if self._timer is task:
            self._timer = None
        if task is not None:
            self._running.add(task)
        try:
            await self._callback()
        finally:
            if task is not None:
                self._running.discard(task)

    async def drain(self) -> None:
        """Wait for the pending timer and any callbacks in flight."""
        while self.pending or self._running:
            waiting = [t for t in (self._timer, *self._running) if t is not None]
            await asyncio.gather(*waiting, return_exceptions=True)


class ChangeWatcher:
    """Poll the messages directory and reload the store after quiet periods.

    Only locale documents count. The status document, backups and other
    files are ignored, as are files whose signature matches the store's own
    last write.
    """

    def __init__(
        self,
        store: TranslationStore,
        *,
        debounce_seconds: float = 0.5,
        poll_interval: float = 0.25,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.store = store
        self.file_set = store.file_set
        self.poll_interval = poll_interval
        self.scheduler = DebounceScheduler(debounce_seconds, self._reload, sleep=sleep)
        self._signatures: dict[str, FileSignature] = {}
        self._poll_task: asyncio.Task | None = None
        self.reload_count = 0

    @classmethod
    def from_config(cls, store: TranslationStore, config: ConfigLoader | None = None) -> "ChangeWatcher":
        config = config or get_config()
        return cls(store, debounce_seconds=config.debounce_seconds, poll_interval=config.poll_interval_seconds)

    @property
    def running(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    async def start(self) -> None:
        if self.running:
            return
        self._signatures = await self._current_signatures()
        self._poll_task = asyncio.create_task(self._poll_loop())
        logger.info(f"Watching for changes in {self.file_set.messages_dir}")

    async def stop(self) -> None:
        self.scheduler.cancel()
        if self._poll_task is not None:
            self._poll_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._poll_task
            self._poll_task = None
        logger.info("Stopped watching for changes")

    def notify(self, filename: str) -> bool:
        """Record a change event for ``filename``; returns True if a reload was scheduled."""
        if not self.file_set.is_locale_filename(filename):
            return False
        logger.info(f"Detected change in {filename}, reloading translations...")
        self.scheduler.schedule()
        return True

    async def poll_once(self) -> list[str]:
        """Compare signatures with the previous poll and notify for each external change."""
        current = await self._current_signatures()
        previous = self._signatures
        self._signatures = current

        changed = []
        for name in sorted(set(previous) | set(current)):
            signature = current.get(name)
            if previous.get(name) == signature:
                continue
            if self.file_set.is_own_write(name, signature):
                continue
            changed.append(name)

        for name in changed:
            self.notify(name)
        return changed

    async def _current_signatures(self) -> dict[str, FileSignature]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.file_set.signatures)

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self.poll_interval)
            try:
                await self.poll_once()
            except OSError as e:
                logger.error(f"Error polling {self.file_set.messages_dir}: {e}")

    async def _reload(self) -> None:
        try:
            report = await self.store.reload()
        except Exception as e:
            logger.exception(f"Error reloading translations: {e}")
            return
        self.reload_count += 1
        if report.errors:
            logger.warning(f"Reload finished with errors in: {', '.join(sorted(report.errors))}")


__all__ = ["ChangeWatcher", "DebounceScheduler"]
