"""
DirWatch Change Source.

Raw, unthrottled directory change signals from the operating system.
Requires Python 3.11+.
"""

import asyncio
import enum
import errno
import os
from abc import ABC, abstractmethod

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    DirDeletedEvent,
    DirMovedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

from utils.config import WatcherSettings
from utils.logger import LoggerMixin
from watcher.errors import ArmFailedError, NotifyError

# File creation, name changes (delete/move) and content or size writes.
# Directory-only, open/close and access events are not part of the mask.
CHANGE_FILTER: frozenset[str] = frozenset(
    {
        EVENT_TYPE_CREATED,
        EVENT_TYPE_DELETED,
        EVENT_TYPE_MOVED,
        EVENT_TYPE_MODIFIED,
    }
)

# Event classes requested from the OS backend. Directory delete and move are
# kept so removal of the watched directory itself can be detected.
WATCH_EVENT_FILTER: list[type[FileSystemEvent]] = [
    FileCreatedEvent,
    FileDeletedEvent,
    FileMovedEvent,
    FileModifiedEvent,
    DirDeletedEvent,
    DirMovedEvent,
]


class Signal(enum.Enum):
    """Result of a successful wait on a change source."""

    CHANGED = "changed"


class ChangeSource(ABC):
    """
    Capability interface over an OS directory change notification.

    Implementations arm the notification once, then alternate between
    ``wait`` and ``rearm``. Nothing here reports which file changed.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    @abstractmethod
    def arm(self) -> None:
        """Register interest in changes. Raises ArmFailedError."""

    @abstractmethod
    async def wait(self) -> None:
        """Suspend until at least one change is pending. Raises NotifyError."""

    @abstractmethod
    def rearm(self) -> bool:
        """Reset for the next change. False means no further delivery."""

    @abstractmethod
    def close(self) -> None:
        """Release OS resources."""

    async def wait_next(self) -> Signal:
        """
        Wait for the next raw change and re-arm before returning.

        Returns:
            Signal.CHANGED

        Raises:
            NotifyError: If waiting or re-arming failed
        """
        await self.wait()
        if not self.rearm():
            raise NotifyError(self.path, "change notification could not be re-armed")
        return Signal.CHANGED


class _ChangeHandler(FileSystemEventHandler):
    """Forwards relevant watchdog events to the owning source."""

    def __init__(self, source: "WatchdogChangeSource") -> None:
        super().__init__()
        self._source = source
        self._root = os.path.normpath(source.path)

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type in (EVENT_TYPE_DELETED, EVENT_TYPE_MOVED) and self._is_root(
            event.src_path
        ):
            self._source.fail_threadsafe(
                NotifyError(self._source.path, "watched directory was removed", errno.ENOENT)
            )
            return

        if event.is_directory:
            return

        if event.event_type in CHANGE_FILTER:
            self._source.signal_threadsafe()

    def _is_root(self, path: str | bytes) -> bool:
        return os.path.normpath(os.fsdecode(path)) == self._root


class WatchdogChangeSource(ChangeSource, LoggerMixin):
    """
    Change source backed by a watchdog observer.

    The observer thread reports events; they are marshalled onto the
    event loop that armed the source.
    """

    def __init__(
        self,
        path: str,
        recursive: bool = True,
        use_polling: bool = False,
        health_check_interval: float = 1.0,
    ) -> None:
        """
        Initialize the change source.

        Args:
            path: Directory to watch
            recursive: Whether to include the subtree
            use_polling: Use the stat-polling observer instead of the native one
            health_check_interval: Seconds between observer liveness checks while waiting
        """
        super().__init__(path)
        self._recursive = recursive
        self._observer_class = PollingObserver if use_polling else Observer
        self._health_check_interval = health_check_interval

        self._handler = _ChangeHandler(self)
        self._observer = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._pending = asyncio.Event()
        self._failure: NotifyError | None = None

    @classmethod
    def from_settings(cls, path: str, settings: WatcherSettings) -> "WatchdogChangeSource":
        """Create a source configured from watcher settings."""
        return cls(
            path,
            recursive=settings.recursive,
            use_polling=settings.use_polling,
            health_check_interval=settings.health_check_interval,
        )

    def arm(self) -> None:
        if self._observer is not None:
            return

        if not os.path.isdir(self.path):
            raise ArmFailedError(self.path, "not a directory")

        self._loop = asyncio.get_running_loop()
        observer = self._observer_class()
        try:
            observer.schedule(
                self._handler,
                self.path,
                recursive=self._recursive,
                event_filter=WATCH_EVENT_FILTER,
            )
            observer.start()
        except OSError as e:
            self.log.error("arm_failed", path=self.path, error=str(e), errno=e.errno)
            raise ArmFailedError(self.path, f"observer could not be started ({e})") from e

        self._observer = observer
        self.log.debug(
            "change_source_armed",
            path=self.path,
            recursive=self._recursive,
            observer=type(observer).__name__,
        )

    async def wait(self) -> None:
        if self._observer is None:
            raise NotifyError(self.path, "change source is not armed")

        while not self._pending.is_set():
            self._check_health()
            try:
                await asyncio.wait_for(
                    self._pending.wait(), timeout=self._health_check_interval
                )
            except TimeoutError:
                continue

        self._check_health()

    def rearm(self) -> bool:
        self._pending.clear()
        return self._failure is None and self._observer is not None and self._observer.is_alive()

    def close(self) -> None:
        if self._observer is None:
            return

        observer, self._observer = self._observer, None
        observer.stop()
        observer.join(timeout=5.0)
        self.log.debug("change_source_closed", path=self.path)

    def signal_threadsafe(self) -> None:
        """Mark a change as pending. Called from the observer thread."""
        self._call_in_loop(self._pending.set)

    def fail_threadsafe(self, error: NotifyError) -> None:
        """Record a terminal failure. Called from the observer thread."""
        self._call_in_loop(self._set_failure, error)

    def _set_failure(self, error: NotifyError) -> None:
        if self._failure is None:
            self._failure = error
        # Wake the waiter so it observes the failure
        self._pending.set()

    def _call_in_loop(self, callback, *args) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        try:
            loop.call_soon_threadsafe(callback, *args)
        except RuntimeError:
            # Loop closed between the check and the call
            self.log.debug("event_loop_closed", path=self.path)

    def _check_health(self) -> None:
        if self._failure is not None:
            raise self._failure
        observer = self._observer
        if observer is None or not observer.is_alive():
            raise NotifyError(self.path, "observer stopped unexpectedly")
        if not any(emitter.is_alive() for emitter in observer.emitters):
            raise NotifyError(self.path, "event emitter stopped unexpectedly")
