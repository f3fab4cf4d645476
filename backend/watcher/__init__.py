"""
DirWatch Directory Watcher Package.

Debounced directory change notifications.
Requires Python 3.11+.
"""

from watcher.change_source import (
    CHANGE_FILTER,
    WATCH_EVENT_FILTER,
    ChangeSource,
    Signal,
    WatchdogChangeSource,
)
from watcher.dir_watcher import DebouncedWatcher, create_watcher
from watcher.errors import (
    ArmFailedError,
    ConstructionError,
    NotifyError,
    PathNotFoundError,
    WatcherError,
)

__all__ = [
    "CHANGE_FILTER",
    "WATCH_EVENT_FILTER",
    "ChangeSource",
    "Signal",
    "WatchdogChangeSource",
    "DebouncedWatcher",
    "create_watcher",
    "WatcherError",
    "ConstructionError",
    "PathNotFoundError",
    "ArmFailedError",
    "NotifyError",
]
