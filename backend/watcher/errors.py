"""
DirWatch Watcher Errors.

Exception hierarchy for watcher construction and runtime failures.
Requires Python 3.11+.
"""


class WatcherError(Exception):
    """Base class for all directory watcher errors."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{reason}: {path}")
        self.path = path
        self.reason = reason


class ConstructionError(WatcherError):
    """The watcher could not be created; nothing was started."""


class PathNotFoundError(ConstructionError):
    """The directory to watch does not exist or is not a directory."""

    def __init__(self, path: str, reason: str = "directory does not exist") -> None:
        super().__init__(path, reason)


class ArmFailedError(ConstructionError):
    """The OS change notification could not be armed for the directory."""


class NotifyError(WatcherError):
    """
    The change notification failed after the watcher was running.

    Terminal for the supervision loop. ``errno`` carries the OS status
    code when the backend reported one.
    """

    def __init__(self, path: str, reason: str, errno: int | None = None) -> None:
        super().__init__(path, reason)
        self.errno = errno
