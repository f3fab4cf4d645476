"""
DirWatch Debounced Directory Watcher.

Turns raw directory change signals into rate-limited notifications.
Requires Python 3.11+.
"""

import asyncio
import os
import time
from collections.abc import Callable
from typing import Any

from utils.config import WatcherSettings, get_settings
from utils.logger import LoggerMixin
from watcher.change_source import ChangeSource, WatchdogChangeSource
from watcher.errors import NotifyError, PathNotFoundError


class DebouncedWatcher(LoggerMixin):
    """
    Watches one directory and reports debounced changes.

    Each raw change that arrives more than ``min_interval`` after the last
    scheduled notification opens a debounce window: the directory path is
    put on the notification queue ``trailing_delay`` later. Changes inside
    an open window are dropped.

    Use ``DebouncedWatcher.create()`` or ``create_watcher()``; both return
    a watcher whose supervision loop is already running.
    """

    def __init__(
        self,
        directory_path: str,
        source: ChangeSource,
        settings: WatcherSettings,
        clock: Callable[[], int] = time.monotonic_ns,
    ) -> None:
        """
        Initialize the watcher without starting it.

        Args:
            directory_path: Directory being watched
            source: Armed change source for the directory
            settings: Debounce and channel settings
            clock: Monotonic clock in integer nanoseconds used for the debounce decision
        """
        self._directory_path = directory_path
        self._source = source
        self._min_interval_ns = settings.min_interval_ms * 1_000_000
        self._trailing_delay = settings.trailing_delay
        self._clock = clock

        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=settings.channel_capacity)
        self._deliveries: set[asyncio.Task[None]] = set()
        self._task: asyncio.Task[None] | None = None
        self._error: NotifyError | None = None
        self._finished = asyncio.Event()
        self._stopping = False

        # Written only by the supervision loop; None until the first window opens
        self._last_emit: int | None = None

    @classmethod
    async def create(
        cls,
        directory_path: str | os.PathLike[str],
        settings: WatcherSettings | None = None,
        source: ChangeSource | None = None,
        clock: Callable[[], int] = time.monotonic_ns,
    ) -> "DebouncedWatcher":
        """
        Create a watcher and start its supervision loop.

        Args:
            directory_path: Existing directory to watch
            settings: Watcher settings (defaults to application settings)
            source: Change source to use instead of the watchdog one
            clock: Monotonic clock in integer nanoseconds used for the debounce decision

        Returns:
            Running DebouncedWatcher

        Raises:
            PathNotFoundError: If the directory does not exist
            ArmFailedError: If the change source could not be armed
        """
        path = os.fspath(directory_path)
        if not os.path.exists(path):
            raise PathNotFoundError(path)
        if not os.path.isdir(path):
            raise PathNotFoundError(path, "not a directory")

        settings = settings or get_settings().watcher
        if source is None:
            source = WatchdogChangeSource.from_settings(path, settings)
        source.arm()

        watcher = cls(path, source, settings, clock=clock)
        watcher._start()
        return watcher

    def _start(self) -> None:
        self._task = asyncio.create_task(
            self._supervise(), name=f"dirwatch:{self._directory_path}"
        )
        self._task.add_done_callback(lambda _: self._check_finished())
        self.log.info(
            "watcher_started",
            path=self._directory_path,
            min_interval_ms=self._min_interval_ns // 1_000_000,
            trailing_delay=self._trailing_delay,
        )

    async def _supervise(self) -> None:
        """Supervision loop: wait, debounce, schedule."""
        try:
            while True:
                try:
                    await self._source.wait_next()
                except NotifyError as e:
                    self._error = e
                    self.log.error(
                        "watcher_failed",
                        path=self._directory_path,
                        error=e.reason,
                        errno=e.errno,
                    )
                    return

                now = self._clock()
                if self._last_emit is None or now - self._last_emit > self._min_interval_ns:
                    self._last_emit = now
                    self._schedule_delivery()
                    self.log.debug("notification_scheduled", path=self._directory_path)
                else:
                    self.log.debug(
                        "change_dropped",
                        path=self._directory_path,
                        elapsed_ms=(now - self._last_emit) / 1_000_000,
                    )
        except Exception as e:
            self.log.error(
                "watcher_failed",
                path=self._directory_path,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        finally:
            # stop() closes the source itself after cancelling this task
            if not self._stopping:
                await asyncio.to_thread(self._source.close)

    def _schedule_delivery(self) -> None:
        task = asyncio.create_task(self._deliver())
        self._deliveries.add(task)
        task.add_done_callback(self._delivery_done)

    async def _deliver(self) -> None:
        """Wait out the trailing delay, then send the path."""
        await asyncio.sleep(self._trailing_delay)
        # Blocks while the queue is full rather than dropping the notification
        await self._queue.put(self._directory_path)

    def _delivery_done(self, task: asyncio.Task[None]) -> None:
        self._deliveries.discard(task)
        self._check_finished()

    def _check_finished(self) -> None:
        if self._task is not None and self._task.done() and not self._deliveries:
            self._finished.set()

    @property
    def directory_path(self) -> str:
        """The watched directory."""
        return self._directory_path

    @property
    def notifications(self) -> asyncio.Queue[str]:
        """Queue receiving the directory path for each debounced change."""
        return self._queue

    @property
    def is_running(self) -> bool:
        """Check if the supervision loop is still running."""
        return self._task is not None and not self._task.done()

    @property
    def error(self) -> NotifyError | None:
        """The error that terminated the supervision loop, if any."""
        return self._error

    @property
    def pending_deliveries(self) -> int:
        """Get number of scheduled notifications not yet delivered."""
        return len(self._deliveries)

    async def get(self) -> str:
        """Wait for the next notification."""
        return await self._queue.get()

    async def wait_closed(self) -> None:
        """
        Wait until the supervision loop has terminated.

        Raises:
            NotifyError: If the loop ended because the source failed
        """
        if self._task is not None:
            await asyncio.wait({self._task})
            if not self._task.cancelled():
                self._task.result()
        if self._error is not None:
            raise self._error

    async def stop(self) -> None:
        """
        Stop watching.

        Cancels the supervision loop and every pending delivery, then
        closes the change source. Safe to call more than once.
        """
        if self._stopping:
            return
        self._stopping = True

        tasks = list(self._deliveries)
        if self._task is not None:
            tasks.append(self._task)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        await asyncio.to_thread(self._source.close)
        self._finished.set()
        self.log.info("watcher_stopped", path=self._directory_path)

    def __aiter__(self) -> "DebouncedWatcher":
        return self

    async def __anext__(self) -> str:
        """Yield notifications until the watcher is finished and drained."""
        if not self._queue.empty():
            return self._queue.get_nowait()
        if self._finished.is_set():
            raise StopAsyncIteration

        getter = asyncio.ensure_future(self._queue.get())
        finished = asyncio.ensure_future(self._finished.wait())
        try:
            await asyncio.wait({getter, finished}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            getter.cancel()
            raise
        finally:
            finished.cancel()

        if getter.done():
            return getter.result()
        getter.cancel()
        if not self._queue.empty():
            return self._queue.get_nowait()
        raise StopAsyncIteration

    async def __aenter__(self) -> "DebouncedWatcher":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.stop()


async def create_watcher(
    directory_path: str | os.PathLike[str],
    settings: WatcherSettings | None = None,
    source: ChangeSource | None = None,
) -> DebouncedWatcher:
    """
    Create a running debounced watcher.

    Args:
        directory_path: Existing directory to watch
        settings: Watcher settings (defaults to application settings)
        source: Change source to use instead of the watchdog one

    Returns:
        Running DebouncedWatcher
    """
    return await DebouncedWatcher.create(directory_path, settings=settings, source=source)
