"""
DirWatch File Path Listing.

Recursive file discovery filtered by extension.
Requires Python 3.11+.
"""

import os

from utils.logger import get_logger

logger = get_logger("fsutil.paths")

# Directory names never descended into
SKIPPED_DIRS = ("$RECYCLE.BIN",)


def _normalize_ext(ext: str) -> str:
    """Turn "*.ext", ".ext" or "ext" into ".ext" (lower case)."""
    return "." + ext.lower().strip("*.")


def get_file_paths(directory: str | os.PathLike[str], *exts: str) -> list[str]:
    """
    List files under a directory that match the given extensions.

    Args:
        directory: Root directory to walk
        *exts: Extensions as "*.ext", ".ext" or "ext"; none means all files

    Returns:
        Full paths in sorted walk order
    """
    root = os.fspath(directory)
    if not root.strip():
        logger.warning("blank_directory_argument")
        return []

    suffixes = tuple(_normalize_ext(ext) for ext in exts)

    def on_error(error: OSError) -> None:
        logger.warning("walk_error", path=error.filename, error=error.strerror)

    paths: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        dirnames[:] = sorted(d for d in dirnames if not any(s in d for s in SKIPPED_DIRS))
        for filename in sorted(filenames):
            if suffixes and not filename.lower().endswith(suffixes):
                continue
            paths.append(os.path.join(dirpath, filename))

    return paths
