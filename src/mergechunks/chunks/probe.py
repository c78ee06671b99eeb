"""Cheap conflict checks that avoid a full scan."""

from __future__ import annotations

import os
import re
from pathlib import Path

from mergechunks.chunks.errors import NotFoundError, ReadError
from mergechunks.core.log import logger

# A start marker at the beginning of any line. Same predicate as the
# scanner, without the structural validation.
_START_MARKER = re.compile(rb"^<<<<<<<", re.MULTILINE)

# Bytes sniffed to decide whether a file is binary.
_SNIFF_BYTES = 8192


def contains_conflict_markers(data: bytes | str) -> bool:
    """True if any line of data starts with a conflict start marker."""
    if isinstance(data, str):
        data = data.encode("utf-8", "surrogateescape")
    return _START_MARKER.search(data) is not None


def has_conflicts(path: str | Path) -> bool:
    """Check whether a file contains conflict markers.

    Args:
        path: File to check

    Returns:
        True when some line begins with ``<<<<<<<``

    Raises:
        NotFoundError: If the file does not exist
        ReadError: If the file cannot be read
    """
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ReadError(path, e) from e
    return contains_conflict_markers(data)


def find_conflicted_files(
    root: str | Path,
    skip_dirs: list[str] | None = None,
) -> list[str]:
    """List files under root that contain conflict markers.

    Binary and unreadable files are skipped.

    Args:
        root: Directory to search
        skip_dirs: Directory names not descended into (default ``.git``)

    Returns:
        Sorted paths relative to root, using forward slashes

    Raises:
        NotFoundError: If root is not a directory
    """
    root = Path(root)
    if not root.is_dir():
        raise NotFoundError(root)
    skip = set(skip_dirs if skip_dirs is not None else [".git"])

    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d not in skip]
        for name in filenames:
            file_path = Path(dirpath) / name
            try:
                data = file_path.read_bytes()
            except OSError as e:
                logger.debug(
                    "Skipping unreadable file",
                    file=str(file_path),
                    error=str(e),
                )
                continue
            if b"\0" in data[:_SNIFF_BYTES]:
                continue
            if contains_conflict_markers(data):
                found.append(file_path.relative_to(root).as_posix())

    found.sort()
    logger.debug(
        f"Found {len(found)} conflicted files", root=str(root), files=found
    )
    return found
