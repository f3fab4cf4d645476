"""
DirWatch File Utilities Package.

Plain file system helpers used alongside the watcher.
Requires Python 3.11+.
"""

from fsutil.files import (
    dir_exists,
    file_exists,
    flat_zip,
    is_file_ext,
    is_text_file,
    read_file_lines,
    write_file_lines,
)
from fsutil.paths import get_file_paths
from fsutil.text_exts import TEXT_FILE_EXTS

__all__ = [
    "dir_exists",
    "file_exists",
    "flat_zip",
    "is_file_ext",
    "is_text_file",
    "read_file_lines",
    "write_file_lines",
    "get_file_paths",
    "TEXT_FILE_EXTS",
]
