"""
DirWatch Test Configuration.

Pytest fixtures and in-memory change sources.
Requires Python 3.11+.
"""

import asyncio
import time
from collections.abc import Sequence
from pathlib import Path

import pytest

from utils.config import WatcherSettings
from watcher.change_source import ChangeSource
from watcher.errors import ArmFailedError, NotifyError


class FakeClock:
    """Manually advanced monotonic clock in integer nanoseconds."""

    def __init__(self, now: int = 1_000_000_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance_ms(self, ms: int) -> None:
        self.now += ms * 1_000_000

    def advance_ns(self, ns: int) -> None:
        self.now += ns


class ManualChangeSource(ChangeSource):
    """Change source fired explicitly by the test."""

    def __init__(self, path: str, arm_error: str | None = None) -> None:
        super().__init__(path)
        self._arm_error = arm_error
        self._events: asyncio.Queue[Exception | None] = asyncio.Queue()
        self.rearm_ok = True
        self.armed = False
        self.closed = False
        self.wait_calls = 0

    def arm(self) -> None:
        if self._arm_error is not None:
            raise ArmFailedError(self.path, self._arm_error)
        self.armed = True

    async def wait(self) -> None:
        self.wait_calls += 1
        error = await self._events.get()
        if error is not None:
            raise error

    def rearm(self) -> bool:
        return self.rearm_ok

    def close(self) -> None:
        self.closed = True

    async def trigger(self) -> None:
        """Deliver one raw change and let the supervision loop handle it."""
        self._events.put_nowait(None)
        await settle()

    async def fail(self, errno: int | None = 5) -> None:
        """Make the pending wait fail."""
        await self.fail_with(NotifyError(self.path, "wait failed", errno=errno))

    async def fail_with(self, error: Exception) -> None:
        """Make the pending wait raise an arbitrary exception."""
        self._events.put_nowait(error)
        await settle()


class ScriptedChangeSource(ChangeSource):
    """Change source that fires at fixed offsets (seconds) after arming."""

    def __init__(
        self,
        path: str,
        offsets: Sequence[float],
        fail_at: int | None = None,
    ) -> None:
        super().__init__(path)
        self._offsets = list(offsets)
        self._fail_at = fail_at
        self._calls = 0
        self._start = 0.0
        self.closed = False

    def arm(self) -> None:
        self._start = time.monotonic()

    async def wait(self) -> None:
        index = self._calls
        self._calls += 1
        if self._fail_at is not None and index >= self._fail_at:
            raise NotifyError(self.path, "scripted failure", errno=5)
        if index >= len(self._offsets):
            await asyncio.Event().wait()

        delay = self._start + self._offsets[index] - time.monotonic()
        if delay > 0:
            await asyncio.sleep(delay)

    def rearm(self) -> bool:
        return True

    def close(self) -> None:
        self.closed = True


async def settle(rounds: int = 10) -> None:
    """Give pending tasks a chance to run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def watched_dir(tmp_path: Path) -> Path:
    """Create an empty directory to watch."""
    directory = tmp_path / "watched"
    directory.mkdir()
    return directory


@pytest.fixture
def fake_clock() -> FakeClock:
    """Create a manually advanced clock."""
    return FakeClock()


@pytest.fixture
def fast_settings() -> WatcherSettings:
    """Default debounce interval with a short trailing delay."""
    return WatcherSettings(
        min_interval_ms=100,
        trailing_delay_ms=20,
        channel_capacity=1,
        health_check_interval_ms=50,
    )


@pytest.fixture
def default_settings() -> WatcherSettings:
    """Watcher settings with the default timings."""
    return WatcherSettings(
        min_interval_ms=100,
        trailing_delay_ms=100,
        channel_capacity=1,
        health_check_interval_ms=50,
    )


@pytest.fixture
def roomy_settings() -> WatcherSettings:
    """Short trailing delay and a channel large enough to hold every delivery."""
    return WatcherSettings(
        min_interval_ms=100,
        trailing_delay_ms=20,
        channel_capacity=8,
        health_check_interval_ms=50,
    )
