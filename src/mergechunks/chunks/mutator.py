"""Replace conflict chunks in files on disk.

Every call re-reads and re-scans the file, so chunk IDs are always
resolved against the current content. Replacing chunk ``k`` never
moves chunks ``0..k-1``, but renumbers everything after it: callers
replacing several chunks of one file must go from the highest ID to
the lowest, or pass each chunk's fingerprint so that a shifted ID is
refused with StaleChunkError instead of overwriting the wrong chunk.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import tempfile
from pathlib import Path

from mergechunks.chunks.chunk import ConflictChunk
from mergechunks.chunks.errors import StaleChunkError, WriteError
from mergechunks.chunks.registry import ChunkRegistry
from mergechunks.core.log import logger


def replacement_lines(text: str) -> list[str]:
    """Split caller-supplied replacement text into lines.

    ``\\n`` and ``\\r\\n`` are both accepted. A single trailing line
    break ends the last line rather than adding an empty one, and the
    empty string means no lines at all.
    """
    text = text.replace("\r\n", "\n")
    if not text:
        return []
    if text.endswith("\n"):
        text = text[:-1]
    return text.split("\n")


def terminated(lines: list[str], ending: str) -> list[str]:
    """Give plain lines the raw form split_lines produces for ending."""
    if ending == "\r\n":
        return [line + "\r" for line in lines]
    return list(lines)


def splice(
    registry: ChunkRegistry,
    chunk: ConflictChunk,
    new_lines: list[str],
) -> str:
    """Return the registry's content with chunk's span replaced.

    The span runs from the start marker through the end marker. All
    other lines are reused as read, so every byte outside the span is
    preserved. new_lines are raw lines that carry their own ``\\r``
    where wanted.
    """
    lines = registry.lines
    tail = lines[chunk.end_line:]
    if new_lines and not tail:
        # The end marker was the unterminated last line
        new_lines = new_lines[:-1] + [new_lines[-1].removesuffix("\r")]
    return "\n".join(lines[:chunk.start_line - 1] + new_lines + tail)


def write_atomic(path: str | Path, content: str, encoding: str = "utf-8"):
    """Write content to path through a temporary file and a rename.

    Readers see either the old file or the new one, never a partial
    write. The file's permission bits are kept.

    Raises:
        WriteError: If any step fails; the original file is untouched
    """
    path = Path(path)
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        with open(
            fd, "w", encoding=encoding, errors="surrogateescape", newline=""
        ) as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
        raise WriteError(path, e) from e


def _replace_span(
    path: str | Path,
    chunk_id: int,
    new_lines_for,
    fingerprint: str | None,
    encoding: str,
    max_file_bytes: int | None,
) -> ConflictChunk:
    registry = ChunkRegistry.load(path, encoding, max_file_bytes)
    chunk = registry.get(chunk_id)

    if fingerprint is not None and chunk.fingerprint != fingerprint:
        raise StaleChunkError(chunk_id, fingerprint, chunk.fingerprint, path)

    new_lines = new_lines_for(registry, chunk)
    write_atomic(path, splice(registry, chunk, new_lines), encoding)

    logger.info(
        f"Replaced conflict chunk {chunk_id} in {path}",
        file=str(path),
        chunk_id=chunk_id,
        start_line=chunk.start_line,
        end_line=chunk.end_line,
        old_line_count=chunk.line_count,
        new_line_count=len(new_lines),
    )
    return chunk


def replace_chunk(
    path: str | Path,
    chunk_id: int,
    new_content: str,
    fingerprint: str | None = None,
    encoding: str = "utf-8",
    max_file_bytes: int | None = None,
) -> ConflictChunk:
    """Replace a whole conflict chunk, markers included, with new text.

    Args:
        path: Conflicted file
        chunk_id: ID from a scan of the file's current content
        new_content: Complete replacement text; line breaks are
            converted to the line ending of the chunk's start marker
        fingerprint: If given, refuse unless chunk_id still has this
            fingerprint
        encoding: File encoding
        max_file_bytes: Optional size limit

    Returns:
        The chunk that was replaced, as scanned before the write

    Raises:
        NotFoundError: If the file does not exist
        ParseError: If the conflict markers are malformed
        ChunkNotFoundError: If chunk_id is out of range
        StaleChunkError: If the fingerprint does not match
        WriteError: If writing the result fails
    """
    lines = replacement_lines(new_content)
    return _replace_span(
        path,
        chunk_id,
        lambda registry, chunk: terminated(lines, chunk.separator),
        fingerprint,
        encoding,
        max_file_bytes,
    )


def resolve_chunk(
    path: str | Path,
    chunk_id: int,
    choice: str,
    fingerprint: str | None = None,
    encoding: str = "utf-8",
    max_file_bytes: int | None = None,
) -> ConflictChunk:
    """Replace a chunk with one of its own sides.

    Args:
        choice: ``ours``, ``theirs``, ``both`` or ``base``

    Raises:
        ValueError: For an unusable choice
        (plus everything replace_chunk raises)
    """
    return _replace_span(
        path,
        chunk_id,
        lambda registry, chunk: registry.side_lines(chunk, choice),
        fingerprint,
        encoding,
        max_file_bytes,
    )
