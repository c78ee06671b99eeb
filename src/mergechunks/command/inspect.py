"""Read-only commands: list chunks, check files, find conflicted files."""

import json
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import CliPositionalArg

from mergechunks.chunks import (
    ChunkError,
    ChunkRegistry,
    NoConflictsError,
    find_conflicted_files,
    has_conflicts,
)
from mergechunks.core.log import logger
from mergechunks.tools.chunks import ORDERING_HINT, format_chunk


class ListCommand(BaseModel):
    """Show the conflict chunks of a file with their IDs.

    IDs are valid only until the file is next modified.
    """

    path: CliPositionalArg[Path] = Field(description="Conflicted file")
    context: int | None = Field(
        default=None,
        ge=0,
        description="Lines of context around each chunk",
    )
    as_json: bool = Field(
        default=False,
        alias="json",
        description="Print chunks as a JSON array",
    )

    def run(self, state: "State") -> int:
        """List chunks.

        Returns:
            Exit code (0=listed, 1=error, 2=no conflicts)
        """
        config = state.config.chunks
        context = (
            config.context_lines if self.context is None else self.context
        )

        try:
            registry = ChunkRegistry.load(
                self.path, config.encoding, config.max_file_bytes
            )
            if len(registry) == 0:
                raise NoConflictsError(self.path)
        except NoConflictsError as e:
            logger.info(str(e))
            return 2
        except ChunkError as e:
            logger.error(f"Cannot list chunks: {e}", file=str(self.path))
            return 1

        if self.as_json:
            print(json.dumps([
                {
                    "id": c.id,
                    "start_line": c.start_line,
                    "end_line": c.end_line,
                    "ours": c.ours,
                    "base": c.base,
                    "theirs": c.theirs,
                    "ours_label": c.ours_label,
                    "theirs_label": c.theirs_label,
                    "fingerprint": c.fingerprint,
                }
                for c in registry
            ], indent=2))
            return 0

        print(f"File: {self.path}")
        print(f"Found {len(registry)} conflict chunks:\n")
        for chunk in registry:
            print(format_chunk(registry, chunk, context))
            print("---")
        print(state.config.prompts.get("tools", {}).get(
            "ordering", ORDERING_HINT
        ))
        return 0


class CheckCommand(BaseModel):
    """Report whether a file still has conflict markers.

    Exits 0 when clean and 2 when markers remain, so it can gate a
    commit hook.
    """

    path: CliPositionalArg[Path] = Field(description="File to check")

    def run(self, state: "State") -> int:  # noqa: ARG002
        try:
            conflicted = has_conflicts(self.path)
        except ChunkError as e:
            logger.error(str(e), file=str(self.path))
            return 1

        if conflicted:
            print(f"{self.path}: conflicts")
            return 2
        print(f"{self.path}: clean")
        return 0


class FindCommand(BaseModel):
    """List files under a directory that contain conflict markers."""

    root: Path = Field(
        default=Path("."),
        description="Directory to search",
    )

    def run(self, state: "State") -> int:
        try:
            found = find_conflicted_files(
                self.root, state.config.chunks.skip_dirs
            )
        except ChunkError as e:
            logger.error(str(e), root=str(self.root))
            return 1

        for name in found:
            print(name)
        logger.info(
            f"{len(found)} conflicted files under {self.root}",
            root=str(self.root),
        )
        return 2 if found else 0
