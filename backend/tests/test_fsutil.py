"""
Tests for File Utilities.

Requires Python 3.11+.
"""

import zipfile
from pathlib import Path

import pytest

from fsutil import (
    TEXT_FILE_EXTS,
    dir_exists,
    file_exists,
    flat_zip,
    get_file_paths,
    is_file_ext,
    is_text_file,
    read_file_lines,
    write_file_lines,
)


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a small directory tree with mixed file types."""
    root = tmp_path / "tree"
    (root / "src").mkdir(parents=True)
    (root / "docs").mkdir()
    (root / "$RECYCLE.BIN").mkdir()

    (root / "README.md").write_text("# readme\n")
    (root / "src" / "main.go").write_text("package main\n")
    (root / "src" / "util.PY").write_text("x = 1\n")
    (root / "docs" / "image.png").write_bytes(b"\x89PNG")
    (root / "$RECYCLE.BIN" / "old.go").write_text("package old\n")
    return root


class TestExistence:
    """Test cases for existence checks."""

    def test_dir_exists(self, tmp_path: Path):
        """Test directory detection."""
        file_path = tmp_path / "f.txt"
        file_path.write_text("x")

        assert dir_exists(tmp_path)
        assert not dir_exists(tmp_path / "missing")
        assert not dir_exists(file_path)

    def test_file_exists(self, tmp_path: Path):
        """Test file detection."""
        file_path = tmp_path / "f.txt"
        file_path.write_text("x")

        assert file_exists(file_path)
        assert file_exists(str(file_path))
        assert not file_exists(tmp_path / "missing.txt")


class TestExtensions:
    """Test cases for extension matching."""

    def test_is_file_ext(self):
        """Test case-insensitive suffix matching."""
        assert is_file_ext("main.go", ["go", "txt"])
        assert is_file_ext("NOTES.TXT", ["txt"])
        assert not is_file_ext("main.go", ["py"])
        assert not is_file_ext("archive.tar.gz", ["tar"])
        assert not is_file_ext("gofile", ["go"])

    def test_is_text_file(self):
        """Test the built-in text extension list."""
        assert is_text_file("readme.txt")
        assert is_text_file("main.py")
        assert is_text_file(".gitignore")
        assert not is_text_file("image.png")
        assert "go" in TEXT_FILE_EXTS
        assert len(TEXT_FILE_EXTS) == len(set(TEXT_FILE_EXTS))


class TestFileLines:
    """Test cases for line-oriented reading and writing."""

    def test_write_terminates_last_line(self, tmp_path: Path):
        """Test a newline is appended after the last line."""
        file_path = tmp_path / "out.txt"
        write_file_lines(file_path, ["one", "two"])

        assert file_path.read_bytes() == b"one\ntwo\n"

    def test_write_keeps_existing_terminator(self, tmp_path: Path):
        """Test an already terminated text is not doubled."""
        file_path = tmp_path / "out.txt"
        write_file_lines(file_path, ["one", "two", ""])

        assert file_path.read_bytes() == b"one\ntwo\n"

    def test_write_windows_line_breaks(self, tmp_path: Path):
        """Test Windows line breaks get a CRLF terminator."""
        file_path = tmp_path / "out.txt"
        write_file_lines(file_path, ["one\r", "two"])

        assert file_path.read_bytes() == b"one\r\ntwo\r\n"

    def test_write_empty(self, tmp_path: Path):
        """Test no lines writes an empty file."""
        file_path = tmp_path / "out.txt"
        write_file_lines(file_path, [])

        assert file_path.read_bytes() == b""

    def test_write_blank_filename(self):
        """Test a blank filename is rejected."""
        with pytest.raises(ValueError):
            write_file_lines("   ", ["x"])

    def test_read_lines(self, tmp_path: Path):
        """Test reading splits on newlines only."""
        file_path = tmp_path / "in.txt"
        file_path.write_bytes(b"a\r\nb\nc")

        assert read_file_lines(file_path) == ["a\r", "b", "c"]

    def test_read_then_write(self, tmp_path: Path):
        """Test text written by write_file_lines reads back with a trailing empty line."""
        file_path = tmp_path / "lines.txt"
        write_file_lines(file_path, ["alpha", "beta"])

        assert read_file_lines(file_path) == ["alpha", "beta", ""]

    def test_read_invalid_utf8(self, tmp_path: Path):
        """Test Latin-1 bytes are read without error and written back unchanged."""
        source = tmp_path / "latin1.txt"
        source.write_bytes(b"caf\xe9\nna\xefve\n")
        copy = tmp_path / "copy.txt"

        lines = read_file_lines(source)
        write_file_lines(copy, lines)

        assert len(lines) == 3
        assert lines[0].startswith("caf")
        assert lines[2] == ""
        assert copy.read_bytes() == source.read_bytes()

    def test_read_missing_file(self, tmp_path: Path):
        """Test a read failure propagates."""
        with pytest.raises(OSError):
            read_file_lines(tmp_path / "missing.txt")


class TestGetFilePaths:
    """Test cases for recursive file listing."""

    def test_all_files(self, sample_tree: Path):
        """Test no extensions lists every file outside the recycle bin."""
        paths = get_file_paths(sample_tree)

        assert paths == [
            str(sample_tree / "README.md"),
            str(sample_tree / "docs" / "image.png"),
            str(sample_tree / "src" / "main.go"),
            str(sample_tree / "src" / "util.PY"),
        ]

    @pytest.mark.parametrize("ext", ["go", ".go", "*.go", "GO"])
    def test_extension_forms(self, sample_tree: Path, ext: str):
        """Test the accepted extension spellings."""
        assert get_file_paths(sample_tree, ext) == [str(sample_tree / "src" / "main.go")]

    def test_multiple_extensions(self, sample_tree: Path):
        """Test several extensions combine."""
        paths = get_file_paths(sample_tree, "py", "md")

        assert paths == [
            str(sample_tree / "README.md"),
            str(sample_tree / "src" / "util.PY"),
        ]

    def test_blank_directory(self):
        """Test a blank directory argument gives nothing."""
        assert get_file_paths("") == []

    def test_missing_directory(self, tmp_path: Path):
        """Test a missing directory gives nothing."""
        assert get_file_paths(tmp_path / "missing") == []


class TestFlatZip:
    """Test cases for flat ZIP archives."""

    def test_flat_zip(self, sample_tree: Path, tmp_path: Path):
        """Test files are stored under their base names, deflated."""
        zip_path = tmp_path / "out.zip"
        flat_zip(zip_path, [sample_tree / "README.md", sample_tree / "src" / "main.go"])

        with zipfile.ZipFile(zip_path) as archive:
            assert sorted(archive.namelist()) == ["README.md", "main.go"]
            assert archive.read("main.go") == b"package main\n"
            assert all(i.compress_type == zipfile.ZIP_DEFLATED for i in archive.infolist())

    def test_flat_zip_missing_file(self, tmp_path: Path):
        """Test a missing input file raises."""
        with pytest.raises(OSError):
            flat_zip(tmp_path / "out.zip", [tmp_path / "missing.txt"])
