"""Addressable view of the conflict chunks in one file version."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from mergechunks.chunks.chunk import ConflictChunk
from mergechunks.chunks.errors import (
    ChunkNotFoundError,
    FileTooLargeError,
    NoConflictsError,
    NotFoundError,
    ReadError,
)
from mergechunks.chunks.probe import contains_conflict_markers
from mergechunks.chunks.scanner import scan_lines, split_lines
from mergechunks.core.log import logger


def read_text(
    path: str | Path,
    encoding: str = "utf-8",
    max_file_bytes: int | None = None,
) -> str:
    """Read a file exactly as stored.

    Newline translation is disabled and undecodable bytes are kept as
    surrogates, so writing the result back reproduces the file.

    Raises:
        NotFoundError: If the file does not exist
        FileTooLargeError: If the file exceeds max_file_bytes
        ReadError: On any other I/O failure
    """
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(path)
    try:
        size = path.stat().st_size
        if max_file_bytes is not None and size > max_file_bytes:
            raise FileTooLargeError(path, size, max_file_bytes)
        with open(
            path, encoding=encoding, errors="surrogateescape", newline=""
        ) as f:
            return f.read()
    except FileTooLargeError:
        raise
    except OSError as e:
        raise ReadError(path, e) from e


@dataclass
class ChunkRegistry:
    """Chunks of one scanned file version, addressable by ID.

    A registry is a snapshot. It is never updated in place; after any
    write to the file, load a new one.
    """

    content: str
    lines: list[str]
    chunks: list[ConflictChunk] = field(default_factory=list)
    path: Path | None = None

    @classmethod
    def from_text(
        cls, content: str, path: str | Path | None = None
    ) -> ChunkRegistry:
        """Scan content into a registry.

        Raises:
            ParseError: If the conflict markers are malformed
        """
        lines = split_lines(content)
        chunks = scan_lines(lines, path)
        return cls(
            content=content,
            lines=lines,
            chunks=chunks,
            path=Path(path) if path is not None else None,
        )

    @classmethod
    def load(
        cls,
        path: str | Path,
        encoding: str = "utf-8",
        max_file_bytes: int | None = None,
    ) -> ChunkRegistry:
        """Read and scan a file.

        Raises:
            NotFoundError: If the file does not exist
            ParseError: If the conflict markers are malformed
        """
        content = read_text(path, encoding, max_file_bytes)
        registry = cls.from_text(content, path)
        logger.debug(
            f"Scanned {path}: {len(registry)} conflict chunks",
            file=str(path),
            chunk_count=len(registry),
            line_count=registry.line_total,
        )
        return registry

    def __len__(self) -> int:
        return len(self.chunks)

    def __iter__(self) -> Iterator[ConflictChunk]:
        return iter(self.chunks)

    def __contains__(self, chunk_id: object) -> bool:
        return isinstance(chunk_id, int) and self.has_chunk(chunk_id)

    def has_chunk(self, chunk_id: int) -> bool:
        return 0 <= chunk_id < len(self.chunks)

    def get(self, chunk_id: int) -> ConflictChunk:
        """Return chunk chunk_id.

        Raises:
            ChunkNotFoundError: If no chunk has that ID
        """
        if not self.has_chunk(chunk_id):
            raise ChunkNotFoundError(chunk_id, len(self.chunks), self.path)
        return self.chunks[chunk_id]

    @property
    def line_total(self) -> int:
        """Number of lines, not counting the empty element that a
        trailing newline leaves at the end of ``lines``."""
        if self.lines and self.lines[-1] == "":
            return len(self.lines) - 1
        return len(self.lines)

    def context_before(self, chunk: ConflictChunk, count: int) -> list[str]:
        """Up to count lines immediately above the chunk."""
        start = chunk.start_line - 1
        return _text(self.lines[max(0, start - count):start])

    def context_after(self, chunk: ConflictChunk, count: int) -> list[str]:
        """Up to count lines immediately below the chunk."""
        end = chunk.end_line
        return _text(self.lines[end:min(self.line_total, end + count)])

    def side_lines(self, chunk: ConflictChunk, choice: str) -> list[str]:
        """Like ConflictChunk.side_lines, but as raw lines that keep
        their own ``\\r``, for writing back into the file.

        Raises:
            ValueError: For an unknown choice, or ``base`` on a
                two-way conflict
        """
        chunk.side_lines(choice)  # validates choice
        ours_start = chunk.start_line
        ours = self.lines[ours_start:ours_start + len(chunk.ours_lines)]
        theirs_end = chunk.end_line - 1
        theirs = self.lines[theirs_end - len(chunk.theirs_lines):theirs_end]
        if choice == "ours":
            return ours
        if choice == "theirs":
            return theirs
        if choice == "both":
            return ours + theirs
        base_start = ours_start + len(chunk.ours_lines) + 1
        return self.lines[base_start:base_start + len(chunk.base_lines)]


def _text(lines: list[str]) -> list[str]:
    return [line.removesuffix("\r") for line in lines]


def list_chunks(
    path: str | Path,
    encoding: str = "utf-8",
    max_file_bytes: int | None = None,
) -> list[ConflictChunk]:
    """List the conflict chunks of a file.

    Args:
        path: File to scan
        encoding: File encoding
        max_file_bytes: Optional size limit

    Returns:
        Chunks ordered top to bottom, IDs 0..N-1

    Raises:
        NotFoundError: If the file does not exist
        NoConflictsError: If the file has no conflict markers at all
        ParseError: If the conflict markers are malformed
    """
    content = read_text(path, encoding, max_file_bytes)
    if not contains_conflict_markers(content):
        raise NoConflictsError(path)
    return ChunkRegistry.from_text(content, path).chunks
