"""Conflict chunk engine: scan, address and replace conflict regions."""

from mergechunks.chunks.chunk import CHOICES, ConflictChunk
from mergechunks.chunks.errors import (
    ChunkError,
    ChunkNotFoundError,
    FileTooLargeError,
    MalformedConflictError,
    MissingDividerError,
    NestedConflictError,
    NoConflictsError,
    NotFoundError,
    ParseError,
    ReadError,
    StaleChunkError,
    UnterminatedConflictError,
    WriteError,
)
from mergechunks.chunks.mutator import (
    replace_chunk,
    replacement_lines,
    resolve_chunk,
)
from mergechunks.chunks.probe import find_conflicted_files, has_conflicts
from mergechunks.chunks.registry import ChunkRegistry, list_chunks
from mergechunks.chunks.scanner import scan

__all__ = [
    "CHOICES",
    "ChunkError",
    "ChunkNotFoundError",
    "ChunkRegistry",
    "ConflictChunk",
    "FileTooLargeError",
    "MalformedConflictError",
    "MissingDividerError",
    "NestedConflictError",
    "NoConflictsError",
    "NotFoundError",
    "ParseError",
    "ReadError",
    "StaleChunkError",
    "UnterminatedConflictError",
    "WriteError",
    "find_conflicted_files",
    "has_conflicts",
    "list_chunks",
    "replace_chunk",
    "replacement_lines",
    "resolve_chunk",
    "scan",
]
