#!/usr/bin/env python3
"""
DirWatch Directory Watch Script.

Watches a directory and reports each debounced change.
Requires Python 3.11+.

Usage:
    python scripts/watch_directory.py /path/to/directory
"""

import argparse
import asyncio
import sys
import time
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from fsutil import get_file_paths
from utils.config import get_settings
from utils.logger import configure_logging, get_logger
from watcher import ConstructionError, NotifyError, create_watcher


configure_logging()
logger = get_logger("watch_directory")


async def watch_directory(
    root_path: Path,
    min_interval_ms: int | None = None,
    trailing_delay_ms: int | None = None,
    max_notifications: int | None = None,
    exts: list[str] | None = None,
) -> int:
    """
    Watch a directory until interrupted or the watcher fails.

    Args:
        root_path: Directory to watch
        min_interval_ms: Override for the debounce window interval
        trailing_delay_ms: Override for the trailing quiet delay
        max_notifications: Stop after this many notifications
        exts: Count only files with these extensions in each report

    Returns:
        Number of notifications received
    """
    settings = get_settings().watcher
    overrides: dict[str, int] = {}
    if min_interval_ms is not None:
        overrides["min_interval_ms"] = min_interval_ms
    if trailing_delay_ms is not None:
        overrides["trailing_delay_ms"] = trailing_delay_ms
    if overrides:
        settings = settings.model_copy(update=overrides)

    count = 0
    start_time = time.perf_counter()

    async with await create_watcher(root_path, settings=settings) as watcher:
        async for path in watcher:
            count += 1
            files = get_file_paths(path, *(exts or []))
            logger.info(
                "directory_changed",
                path=path,
                notification=count,
                file_count=len(files),
                elapsed_seconds=round(time.perf_counter() - start_time, 3),
            )
            if max_notifications is not None and count >= max_notifications:
                break

        if watcher.error is not None:
            raise watcher.error

    return count


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Watch a directory and report debounced changes"
    )
    parser.add_argument(
        "path",
        type=Path,
        help="Directory to watch",
    )
    parser.add_argument(
        "--min-interval-ms",
        type=int,
        default=None,
        help="Minimum gap between debounce windows (default from settings)",
    )
    parser.add_argument(
        "--trailing-delay-ms",
        type=int,
        default=None,
        help="Quiet delay before each notification (default from settings)",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=None,
        help="Exit after this many notifications",
    )
    parser.add_argument(
        "--ext",
        action="append",
        default=None,
        help="Count only files with this extension in reports (repeatable)",
    )

    args = parser.parse_args()

    try:
        count = asyncio.run(watch_directory(
            args.path,
            min_interval_ms=args.min_interval_ms,
            trailing_delay_ms=args.trailing_delay_ms,
            max_notifications=args.count,
            exts=args.ext,
        ))
        print(f"\nReceived {count} notification(s)")

    except ConstructionError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except NotifyError as e:
        print(f"Watcher stopped: {e}")
        sys.exit(2)
    except KeyboardInterrupt:
        print("\nCancelled by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
