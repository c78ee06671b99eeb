"""Tests for the file-level conflict probe and directory search."""

import pytest

from mergechunks.chunks.errors import NotFoundError, ReadError
from mergechunks.chunks.probe import (
    contains_conflict_markers,
    find_conflicted_files,
    has_conflicts,
)
from mergechunks.chunks.scanner import scan


def test_has_conflicts_true(write_file, two_chunks):
    assert has_conflicts(write_file("a.py", two_chunks)) is True


def test_has_conflicts_false_for_clean_file(write_file):
    path = write_file("clean.py", "line 1\nline 2\n")

    assert has_conflicts(path) is False
    assert scan(path.read_text()) == []


def test_has_conflicts_missing_file(tmp_path):
    with pytest.raises(NotFoundError):
        has_conflicts(tmp_path / "missing.py")


def test_missing_file_is_also_file_not_found(tmp_path):
    with pytest.raises(FileNotFoundError):
        has_conflicts(tmp_path / "missing.py")


def test_has_conflicts_read_failure(write_file, two_chunks, monkeypatch):
    path = write_file("a.py", two_chunks)

    def failing_read_bytes(self):
        raise PermissionError("access denied")

    monkeypatch.setattr(type(path), "read_bytes", failing_read_bytes)

    with pytest.raises(ReadError, match="access denied"):
        has_conflicts(path)


def test_marker_must_start_a_line():
    """Agrees with the scanner: a mid-line marker is not a conflict."""
    content = 'print("<<<<<<< not a marker")\n'

    assert contains_conflict_markers(content) is False
    assert scan(content) == []


def test_marker_detected_in_crlf_content():
    assert contains_conflict_markers(b"a\r\n<<<<<<< HEAD\r\n") is True


def test_probe_skips_structural_validation():
    """The probe fires on malformed files the scanner rejects."""
    assert contains_conflict_markers("<<<<<<< HEAD\nunterminated\n") is True


def test_find_conflicted_files(tmp_path, two_chunks):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.py").write_text(two_chunks)
    (tmp_path / "b.txt").write_text(two_chunks)
    (tmp_path / "clean.txt").write_text("nothing here\n")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "MERGE_MSG").write_text(two_chunks)
    (tmp_path / "image.bin").write_bytes(b"\0\1<<<<<<< x\n")

    assert find_conflicted_files(tmp_path) == ["b.txt", "src/a.py"]


def test_find_conflicted_files_custom_skip(tmp_path, two_chunks):
    (tmp_path / "vendor").mkdir()
    (tmp_path / "vendor" / "lib.py").write_text(two_chunks)
    (tmp_path / "main.py").write_text(two_chunks)

    assert find_conflicted_files(tmp_path, skip_dirs=["vendor"]) == [
        "main.py"
    ]


def test_find_conflicted_files_requires_directory(tmp_path):
    with pytest.raises(NotFoundError):
        find_conflicted_files(tmp_path / "nope")
