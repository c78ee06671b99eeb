"""Tests for the chunk registry and list_chunks."""

import pytest

from mergechunks.chunks.errors import (
    ChunkNotFoundError,
    FileTooLargeError,
    NoConflictsError,
    NotFoundError,
    UnterminatedConflictError,
)
from mergechunks.chunks.registry import ChunkRegistry, list_chunks, read_text


def test_list_chunks(write_file, two_chunks):
    chunks = list_chunks(write_file("a.py", two_chunks))

    assert [c.id for c in chunks] == [0, 1]
    assert chunks[1].theirs == "theirs two"


def test_list_chunks_missing_file(tmp_path):
    with pytest.raises(NotFoundError):
        list_chunks(tmp_path / "missing.py")


def test_list_chunks_clean_file_is_distinct_from_parse_error(write_file):
    with pytest.raises(NoConflictsError):
        list_chunks(write_file("clean.py", "x = 1\n"))

    with pytest.raises(UnterminatedConflictError):
        list_chunks(write_file("broken.py", "<<<<<<< HEAD\nx = 1\n"))


def test_registry_lookup(two_chunks):
    registry = ChunkRegistry.from_text(two_chunks, "a.py")

    assert len(registry) == 2
    assert 1 in registry
    assert 2 not in registry
    assert "1" not in registry
    assert registry.has_chunk(0)
    assert not registry.has_chunk(-1)
    assert registry.get(1).ours == "ours two"
    assert [c.id for c in registry] == [0, 1]


def test_registry_get_out_of_range(two_chunks):
    registry = ChunkRegistry.from_text(two_chunks)

    with pytest.raises(ChunkNotFoundError, match="file has 2 chunks"):
        registry.get(2)
    with pytest.raises(IndexError):
        registry.get(-1)


def test_registry_context(two_chunks):
    registry = ChunkRegistry.from_text(two_chunks)
    first, second = registry.chunks

    assert registry.context_before(first, 3) == ["header"]
    assert registry.context_after(first, 1) == ["middle"]
    assert registry.context_before(second, 0) == []
    # The empty element after the final newline is not a line.
    assert registry.context_after(second, 5) == ["footer"]
    assert registry.line_total == 13


def test_list_chunks_mixed_line_endings(write_file, mixed_endings):
    chunks = list_chunks(write_file("mixed.txt", mixed_endings))

    assert len(chunks) == 1
    assert (chunks[0].ours, chunks[0].theirs) == ("x", "y")
    assert (chunks[0].start_line, chunks[0].end_line) == (3, 7)


def test_registry_side_lines_keep_own_endings(mixed_endings):
    registry = ChunkRegistry.from_text(mixed_endings)
    chunk = registry.get(0)

    assert registry.side_lines(chunk, "ours") == ["x\r"]
    assert registry.side_lines(chunk, "both") == ["x\r", "y"]
    assert registry.context_before(chunk, 5) == ["a", "b"]
    assert registry.context_after(chunk, 5) == ["c"]


def test_registry_side_lines_base():
    registry = ChunkRegistry.from_text(
        "<<<<<<< HEAD\no\n||||||| base\nb1\nb2\n=======\nt\n>>>>>>> x\n"
    )
    chunk = registry.get(0)

    assert registry.side_lines(chunk, "base") == ["b1", "b2"]
    assert registry.side_lines(chunk, "theirs") == ["t"]
    with pytest.raises(ValueError):
        registry.side_lines(chunk, "left")


def test_registry_load_preserves_content(write_file):
    content = "a\r\n<<<<<<< HEAD\r\nx\r\n=======\r\ny\r\n>>>>>>> b\r\n"
    registry = ChunkRegistry.load(write_file("crlf.txt", content))

    assert registry.content == content
    assert "\n".join(registry.lines) == content
    assert registry.context_before(registry.get(0), 1) == ["a"]
    assert registry.path.name == "crlf.txt"


def test_read_text_keeps_undecodable_bytes(tmp_path):
    path = tmp_path / "latin.txt"
    path.write_bytes(b"caf\xe9\n")

    text = read_text(path)

    assert text.encode("utf-8", "surrogateescape") == b"caf\xe9\n"


def test_read_text_size_limit(write_file):
    path = write_file("big.txt", "x" * 100)

    with pytest.raises(FileTooLargeError):
        read_text(path, max_file_bytes=10)
