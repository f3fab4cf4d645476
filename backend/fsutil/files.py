"""
DirWatch File Functions.

Existence checks, extension matching, line-oriented text I/O and
flat ZIP packaging.
Requires Python 3.11+.
"""

import os
import zipfile
from collections.abc import Iterable
from pathlib import Path

from fsutil.text_exts import TEXT_FILE_EXTS
from utils.logger import get_logger

logger = get_logger("fsutil.files")


def dir_exists(path: str | os.PathLike[str]) -> bool:
    """Return True if the directory given by path exists."""
    try:
        return Path(path).is_dir()
    except OSError:
        return False


def file_exists(path: str | os.PathLike[str]) -> bool:
    """Return True if path exists (file or directory)."""
    try:
        return Path(path).exists()
    except OSError:
        return False


def is_file_ext(filename: str, file_exts: Iterable[str]) -> bool:
    """
    Check whether filename ends with one of the given extensions.

    Extensions are listed without the dot, e.g. ["py", "txt", "log"].
    Matching is case-insensitive.
    """
    filename = filename.lower()
    return any(filename.endswith("." + ext.lower()) for ext in file_exts)


def is_text_file(filename: str) -> bool:
    """Check whether filename has a known text file extension."""
    return is_file_ext(filename, TEXT_FILE_EXTS)


def read_file_lines(filename: str | os.PathLike[str]) -> list[str]:
    """
    Read a file and split it into lines.

    Line breaks are split on "\\n" only, so Windows files keep a
    trailing "\\r" on each line. Bytes that are not valid UTF-8 are
    kept as surrogate escapes, so writing the lines back with
    write_file_lines reproduces them unchanged.

    Raises:
        OSError: If the file could not be read
    """
    try:
        with open(filename, encoding="utf-8", errors="surrogateescape", newline="") as f:
            data = f.read()
    except OSError as e:
        logger.error("read_failed", path=str(filename), error=str(e))
        raise
    return data.split("\n")


def write_file_lines(filename: str | os.PathLike[str], lines: Iterable[str]) -> None:
    """
    Write lines to a file, terminating the last line with a newline.

    If the text already contains Windows line breaks the terminator
    is "\\r\\n".

    Raises:
        ValueError: If filename is blank
        OSError: If the file could not be written
    """
    name = os.fspath(filename).strip()
    if not name:
        raise ValueError("filename must not be blank")

    data = "\n".join(lines)
    if data and not data.endswith("\n"):
        if "\r\n" in data:
            data += "\r"
        data += "\n"

    try:
        with open(name, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write(data)
    except OSError as e:
        logger.error("write_failed", path=name, error=str(e))
        raise


def flat_zip(zip_name: str | os.PathLike[str], file_names: Iterable[str | os.PathLike[str]]) -> None:
    """
    Compress files into a ZIP archive without subfolders.

    Every entry is stored deflated under its base name.

    Raises:
        OSError: If the archive or one of the files could not be accessed
    """
    with zipfile.ZipFile(zip_name, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for file_name in file_names:
            archive.write(file_name, arcname=os.path.basename(file_name))

    logger.debug("zip_written", path=str(zip_name))
