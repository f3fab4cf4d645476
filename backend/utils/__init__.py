"""
DirWatch Utilities Package.

Common utilities shared by the watcher and file utility packages.
Requires Python 3.11+.
"""

from utils.config import Settings, get_settings
from utils.logger import configure_logging, get_logger, logger, LoggerMixin

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "logger",
    "LoggerMixin",
]
