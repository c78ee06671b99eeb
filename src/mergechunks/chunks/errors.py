"""Errors raised by the conflict chunk engine.

Every error carries the path it concerns (when there is one) so the
tool layer can report it without extra context.
"""

from __future__ import annotations

from pathlib import Path


class ChunkError(Exception):
    """Base class for all chunk engine failures."""

    def __init__(self, message: str, path: str | Path | None = None):
        super().__init__(message)
        self.path = str(path) if path is not None else None


class NotFoundError(ChunkError, FileNotFoundError):
    """The file to scan or rewrite does not exist."""

    def __init__(self, path: str | Path):
        super().__init__(f"File '{path}' does not exist", path)


class NoConflictsError(ChunkError):
    """The file exists but contains no conflict markers."""

    def __init__(self, path: str | Path):
        super().__init__(f"No merge conflicts found in file: {path}", path)


class ParseError(ChunkError):
    """Conflict markers are structurally malformed.

    Attributes:
        line: 1-indexed line where the problem was detected
    """

    def __init__(
        self, message: str, line: int, path: str | Path | None = None
    ):
        location = f"{path}:{line}" if path else f"line {line}"
        super().__init__(f"{message} at {location}", path)
        self.line = line


class NestedConflictError(ParseError):
    """A start marker appeared inside an open conflict."""


class UnterminatedConflictError(ParseError):
    """The file ended while a conflict was still open."""


class MissingDividerError(ParseError):
    """An end marker closed a conflict that never had a divider."""


class MalformedConflictError(ParseError):
    """A second divider appeared inside one conflict."""


class ChunkNotFoundError(ChunkError, IndexError):
    """The chunk ID does not address any chunk in the file."""

    def __init__(
        self, chunk_id: int, count: int, path: str | Path | None = None
    ):
        super().__init__(
            f"chunk_id {chunk_id} out of range, file has {count} "
            f"chunk{'' if count == 1 else 's'}"
            + (f" (valid IDs 0-{count - 1})" if count else ""),
            path,
        )
        self.chunk_id = chunk_id
        self.count = count


class StaleChunkError(ChunkError):
    """The chunk at an ID no longer matches the caller's fingerprint.

    Raised when a caller replays an ID captured before another edit
    shifted the chunk numbering.
    """

    def __init__(
        self,
        chunk_id: int,
        expected: str,
        actual: str,
        path: str | Path | None = None,
    ):
        super().__init__(
            f"chunk {chunk_id} has fingerprint {actual}, expected "
            f"{expected}; the file changed since it was listed",
            path,
        )
        self.chunk_id = chunk_id
        self.expected = expected
        self.actual = actual


class FileTooLargeError(ChunkError):
    """The file exceeds the configured scan limit."""

    def __init__(self, path: str | Path, size: int, limit: int):
        super().__init__(
            f"File '{path}' is {size} bytes, over the {limit} byte limit",
            path,
        )


class ReadError(ChunkError, OSError):
    """The file exists but could not be read."""

    def __init__(self, path: str | Path, cause: OSError):
        super().__init__(f"Failed to read '{path}': {cause}", path)
        self.cause = cause


class WriteError(ChunkError, OSError):
    """Writing the rewritten file back failed; the original is intact."""

    def __init__(self, path: str | Path, cause: OSError):
        super().__init__(f"Failed to write '{path}': {cause}", path)
        self.cause = cause
