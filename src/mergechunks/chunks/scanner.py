"""Scan text for git conflict markers."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from mergechunks.chunks.chunk import ConflictChunk
from mergechunks.chunks.errors import (
    MalformedConflictError,
    MissingDividerError,
    NestedConflictError,
    UnterminatedConflictError,
)

START_MARKER = "<<<<<<<"
BASE_MARKER = "|||||||"
DIVIDER_MARKER = "======="
END_MARKER = ">>>>>>>"


def is_start_marker(line: str) -> bool:
    return line.startswith(START_MARKER)


def is_base_marker(line: str) -> bool:
    return line.startswith(BASE_MARKER)


def is_divider_marker(line: str) -> bool:
    return line.startswith(DIVIDER_MARKER)


def is_end_marker(line: str) -> bool:
    return line.startswith(END_MARKER)


def line_ending(line: str) -> str:
    """Return ``\\r\\n`` for a raw line that kept its ``\\r``, else ``\\n``."""
    return "\r\n" if line.endswith("\r") else "\n"


def split_lines(content: str) -> list[str]:
    """Split content into raw lines on ``\\n``.

    Each line keeps its own ``\\r`` when it had one, so files mixing
    CRLF and LF lines split where git sees line starts, and
    ``"\\n".join(lines) == content`` always holds. A rewrite that only
    touches some elements reproduces every other byte exactly. A
    trailing newline yields a final empty element.
    """
    return content.split("\n")


class _Side(Enum):
    OURS = "ours"
    BASE = "base"
    THEIRS = "theirs"


def scan_lines(
    lines: list[str],
    path: str | Path | None = None,
) -> list[ConflictChunk]:
    """Extract conflict chunks from raw lines.

    Side lines are stored without their ``\\r``. Each chunk records the
    line ending of its start marker as its separator.

    Args:
        lines: File content as returned by split_lines
        path: File name used in error messages only

    Returns:
        Chunks ordered top to bottom with IDs 0..N-1; empty when the
        lines contain no conflict

    Raises:
        NestedConflictError: Start marker inside an open conflict
        MissingDividerError: End marker before any divider
        MalformedConflictError: Second divider in one conflict
        UnterminatedConflictError: Input ended inside a conflict
    """
    chunks: list[ConflictChunk] = []
    side: _Side | None = None
    start = 0
    ours_label = ""
    separator = "\n"
    sides: dict[_Side, list[str]] = {}

    for lineno, line in enumerate(lines, start=1):
        if side is None:
            if is_start_marker(line):
                side = _Side.OURS
                start = lineno
                ours_label = line[len(START_MARKER):].strip()
                separator = line_ending(line)
                sides = {_Side.OURS: []}
            continue

        if is_start_marker(line):
            raise NestedConflictError(
                f"Nested conflict marker inside conflict opened at "
                f"line {start}",
                lineno,
                path,
            )

        if side is _Side.OURS and is_base_marker(line):
            side = _Side.BASE
            sides[side] = []
        elif is_divider_marker(line):
            if side is _Side.THEIRS:
                raise MalformedConflictError(
                    f"Second divider in conflict opened at line {start}",
                    lineno,
                    path,
                )
            side = _Side.THEIRS
            sides[side] = []
        elif is_end_marker(line):
            if side is not _Side.THEIRS:
                raise MissingDividerError(
                    f"End marker without divider in conflict opened at "
                    f"line {start}",
                    lineno,
                    path,
                )
            base = sides.get(_Side.BASE)
            chunks.append(ConflictChunk(
                id=len(chunks),
                ours_lines=tuple(sides[_Side.OURS]),
                theirs_lines=tuple(sides[_Side.THEIRS]),
                start_line=start,
                end_line=lineno,
                base_lines=tuple(base) if base is not None else None,
                ours_label=ours_label,
                theirs_label=line[len(END_MARKER):].strip(),
                separator=separator,
            ))
            side = None
        else:
            sides[side].append(line.removesuffix("\r"))

    if side is not None:
        raise UnterminatedConflictError(
            "Conflict opened here is never closed", start, path
        )

    return chunks


def scan(content: str, path: str | Path | None = None) -> list[ConflictChunk]:
    """Parse git conflict markers from file content.

    Markers are recognised by prefix alone; anything after the prefix
    is a label and never part of a side's text. Divider and end marker
    lines outside a conflict are ordinary content.

    Args:
        content: Full file content
        path: File name used in error messages only

    Returns:
        Chunks ordered top to bottom; empty for a clean file

    Raises:
        ParseError: If the conflict markers are malformed
    """
    return scan_lines(split_lines(content), path)
