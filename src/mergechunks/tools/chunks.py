"""Conflict chunk tools for LLM agents.

Thin adapters over mergechunks.chunks: validate arguments, delegate,
and turn engine errors into ModelRetry messages the model can act on.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from pydantic_ai import RunContext
from pydantic_ai.exceptions import ModelRetry

from mergechunks.chunks import (
    ChunkError,
    ChunkRegistry,
    ConflictChunk,
    StaleChunkError,
    find_conflicted_files,
    has_conflicts,
    replace_chunk,
    replacement_lines,
    resolve_chunk,
)
from mergechunks.chunks.scanner import is_end_marker, is_start_marker
from mergechunks.tools.workspace import Workspace

ORDERING_HINT = (
    "Chunk IDs are recomputed after every edit. When replacing several "
    "chunks in one file, go from the highest ID to the lowest."
)


def _retry(e: Exception) -> ModelRetry:
    message = str(e)
    if isinstance(e, StaleChunkError):
        message += ". Call view_conflict_chunks again for current IDs."
    return ModelRetry(message)


def _check_chunk_id(chunk_id: int) -> None:
    if chunk_id < 0:
        raise ModelRetry(
            f"chunk_id must be 0 or greater, got {chunk_id}. "
            f"Chunk 0 is the first chunk from the top of the file."
        )


def _format_lines(lines: list[str], first: int) -> str:
    return "\n".join(
        f"{n}: {line}" for n, line in enumerate(lines, start=first)
    )


def format_chunk(
    registry: ChunkRegistry, chunk: ConflictChunk, context_lines: int = 0
) -> str:
    """Render one chunk the way the tools show it to the model."""
    out = [
        f"Chunk ID: {chunk.id} (lines {chunk.start_line}-{chunk.end_line}, "
        f"fingerprint {chunk.fingerprint})"
    ]
    before = registry.context_before(chunk, context_lines)
    if before:
        out.append("Context before:")
        out.append(_format_lines(before, chunk.start_line - len(before)))
    out.append(f"Ours ({chunk.ours_label or 'ours'}):")
    out.append(f"```\n{chunk.ours}\n```")
    if chunk.base is not None:
        out.append("Base:")
        out.append(f"```\n{chunk.base}\n```")
    out.append(f"Theirs ({chunk.theirs_label or 'theirs'}):")
    out.append(f"```\n{chunk.theirs}\n```")
    after = registry.context_after(chunk, context_lines)
    if after:
        out.append("Context after:")
        out.append(_format_lines(after, chunk.end_line + 1))
    return "\n".join(out)


def find_merge_conflicts(ctx: RunContext[Workspace], path: str = ".") -> str:
    """List files containing git merge conflict markers.

    Args:
        path: Directory to search, relative to the workspace (default:
            the whole workspace)

    Returns:
        JSON array of file paths relative to the workspace
    """
    workspace = ctx.deps
    root = workspace.resolve(path)
    try:
        found = find_conflicted_files(root, workspace.chunk_config.skip_dirs)
    except ChunkError as e:
        raise _retry(e) from e

    prefix = root.relative_to(workspace.workdir.resolve())
    return json.dumps([(prefix / f).as_posix() for f in found])


def has_merge_conflicts(ctx: RunContext[Workspace], filepath: str) -> str:
    """Check whether a file still contains conflict markers.

    Args:
        filepath: Path to file (relative to workspace)
    """
    file_path = ctx.deps.resolve(filepath)
    try:
        conflicted = has_conflicts(file_path)
    except ChunkError as e:
        raise _retry(e) from e
    if conflicted:
        return f"File {filepath} has merge conflicts."
    return f"File {filepath} has no merge conflicts."


def view_conflict_chunks(
    ctx: RunContext[Workspace],
    filepath: str,
    context_lines: int | None = None,
) -> str:
    """View the conflict chunks in a file.

    Shows each chunk's ID, line span, fingerprint, our side and their
    side (and the base side for diff3 conflicts). IDs start at 0 for
    the chunk nearest the top of the file.

    Args:
        filepath: Path to file (relative to workspace)
        context_lines: Lines of surrounding context to show per chunk
            (default from configuration)
    """
    workspace = ctx.deps
    config = workspace.chunk_config
    if context_lines is None:
        context_lines = config.context_lines
    if context_lines < 0:
        raise ModelRetry(
            f"context_lines must be 0 or greater, got {context_lines}."
        )
    file_path = workspace.resolve(filepath)

    try:
        registry = ChunkRegistry.load(
            file_path, config.encoding, config.max_file_bytes
        )
    except ChunkError as e:
        raise _retry(e) from e

    if not registry.chunks:
        return f"No merge conflicts found in file: {filepath}"

    sections = [
        f"File: {filepath}",
        f"Found {len(registry)} conflict chunks:",
    ]
    for chunk in registry:
        sections.append(format_chunk(registry, chunk, context_lines))
        sections.append("---")
    sections.append(workspace.prompt("tools", "ordering") or ORDERING_HINT)
    return "\n\n".join(sections)


def replace_conflict_chunk(
    ctx: RunContext[Workspace],
    filepath: str,
    chunk_id: int,
    new_content: str,
    fingerprint: str | None = None,
) -> str:
    """Resolve one conflict chunk by replacing it with new content.

    The whole chunk, including its <<<<<<<, ======= and >>>>>>>
    marker lines, is replaced by new_content. Everything else in the
    file is left unchanged.

    IMPORTANT: chunk IDs are recomputed after every edit. Replacing a
    chunk renumbers all chunks below it, so when resolving several
    chunks in one file, replace the highest ID first and work upwards.
    Passing the fingerprint shown by view_conflict_chunks makes the
    edit fail safely instead of hitting the wrong chunk.

    Args:
        filepath: Path to file (relative to workspace)
        chunk_id: ID of the chunk (0 is the first chunk from the top)
        new_content: Complete merged text to put in place of the chunk,
            with no conflict markers. Empty removes the chunk
        fingerprint: Optional fingerprint of the chunk from
            view_conflict_chunks
    """
    workspace = ctx.deps
    config = workspace.chunk_config
    _check_chunk_id(chunk_id)
    file_path = workspace.resolve(filepath)

    if config.reject_markers_in_replacement:
        for line in replacement_lines(new_content):
            if is_start_marker(line) or is_end_marker(line):
                raise ModelRetry(
                    "new_content contains a conflict marker line "
                    f"({line[:20]!r}). Supply the merged text only."
                )

    try:
        if not has_conflicts(file_path):
            raise ModelRetry(f"No merge conflicts found in file: {filepath}")
        chunk = replace_chunk(
            file_path,
            chunk_id,
            new_content,
            fingerprint=fingerprint,
            encoding=config.encoding,
            max_file_bytes=config.max_file_bytes,
        )
    except ChunkError as e:
        raise _retry(e) from e

    return _edited(workspace, filepath, file_path, chunk)


def resolve_conflict_chunk(
    ctx: RunContext[Workspace],
    filepath: str,
    chunk_id: int,
    choice: Literal["ours", "theirs", "both", "base"],
    fingerprint: str | None = None,
) -> str:
    """Resolve one conflict chunk by keeping one of its sides.

    'both' keeps our lines followed by their lines; 'base' keeps the
    common ancestor (diff3 conflicts only). The same ordering rule as
    replace_conflict_chunk applies: highest ID first.

    Args:
        filepath: Path to file (relative to workspace)
        chunk_id: ID of the chunk (0 is the first chunk from the top)
        choice: Which side to keep
        fingerprint: Optional fingerprint of the chunk from
            view_conflict_chunks
    """
    workspace = ctx.deps
    config = workspace.chunk_config
    _check_chunk_id(chunk_id)
    file_path = workspace.resolve(filepath)

    try:
        if not has_conflicts(file_path):
            raise ModelRetry(f"No merge conflicts found in file: {filepath}")
        chunk = resolve_chunk(
            file_path,
            chunk_id,
            choice,
            fingerprint=fingerprint,
            encoding=config.encoding,
            max_file_bytes=config.max_file_bytes,
        )
    except (ChunkError, ValueError) as e:
        raise _retry(e) from e

    return _edited(workspace, filepath, file_path, chunk)


def _edited(
    workspace: Workspace,
    filepath: str,
    file_path: Path,
    chunk: ConflictChunk,
) -> str:
    message = (
        f"Successfully replaced conflict chunk {chunk.id} "
        f"(was lines {chunk.start_line}-{chunk.end_line}) in file "
        f"{filepath}."
    )
    try:
        still_conflicted = has_conflicts(file_path)
    except ChunkError as e:
        raise ModelRetry(
            f"{message} Checking the file afterwards failed: {e}"
        ) from e
    if still_conflicted:
        return (
            message + " The file still has conflicts; view it again for "
            "current IDs."
        )
    if filepath in workspace.conflict_files:
        workspace.conflict_files.remove(filepath)
    return message + " No conflicts remain in this file."
