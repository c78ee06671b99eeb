"""Mutating commands: replace a chunk, or keep one of its sides."""

import sys
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import CliPositionalArg

from mergechunks.chunks import (
    ChunkError,
    ChunkRegistry,
    replace_chunk,
    resolve_chunk,
)
from mergechunks.core.log import logger


class ReplaceCommand(BaseModel):
    """Replace one conflict chunk, markers included, with new text.

    Chunk IDs come from `mergechunks list` and are renumbered by every
    edit: when replacing several chunks of one file, start with the
    highest ID, or pass --fingerprint to have a shifted ID refused.
    """

    path: CliPositionalArg[Path] = Field(description="Conflicted file")
    chunk_id: CliPositionalArg[int] = Field(
        ge=0, description="Chunk ID (0 = first chunk from the top)"
    )
    content: str | None = Field(
        default=None,
        description="Replacement text",
    )
    content_file: Path | None = Field(
        default=None,
        alias="content-file",
        description="Read replacement text from this file ('-' for stdin)",
    )
    fingerprint: str | None = Field(
        default=None,
        description="Refuse unless the chunk still has this fingerprint",
    )

    @model_validator(mode="after")
    def _one_content_source(self) -> "ReplaceCommand":
        if (self.content is None) == (self.content_file is None):
            raise ValueError(
                "Give exactly one of --content or --content-file"
            )
        return self

    def _replacement(self) -> str:
        if self.content is not None:
            return self.content
        if str(self.content_file) == "-":
            return sys.stdin.read()
        with open(self.content_file, encoding="utf-8", newline="") as f:
            return f.read()

    def run(self, state: "State") -> int:
        """Replace the chunk.

        Returns:
            Exit code (0=replaced, 1=error)
        """
        config = state.config.chunks
        try:
            new_content = self._replacement()
        except OSError as e:
            logger.error(f"Cannot read replacement text: {e}")
            return 1

        try:
            chunk = replace_chunk(
                self.path,
                self.chunk_id,
                new_content,
                fingerprint=self.fingerprint,
                encoding=config.encoding,
                max_file_bytes=config.max_file_bytes,
            )
        except ChunkError as e:
            logger.error(
                f"Cannot replace chunk: {e}",
                file=str(self.path),
                chunk_id=self.chunk_id,
            )
            return 1

        state.runtime.session.record(str(self.path))
        print(
            f"Replaced chunk {chunk.id} "
            f"(lines {chunk.start_line}-{chunk.end_line}) in {self.path}"
        )
        return 0


class TakeCommand(BaseModel):
    """Resolve chunks by keeping ours, theirs, both, or the diff3 base.

    With --all every chunk in the file is resolved; they are processed
    from the last to the first so that no edit renumbers a chunk that
    is still pending.
    """

    path: CliPositionalArg[Path] = Field(description="Conflicted file")
    choice: CliPositionalArg[Literal["ours", "theirs", "both", "base"]] = (
        Field(description="Side to keep")
    )
    chunk_id: int | None = Field(
        default=None,
        ge=0,
        alias="chunk",
        description="Chunk ID to resolve",
    )
    all_chunks: bool = Field(
        default=False,
        alias="all",
        description="Resolve every chunk in the file",
    )
    fingerprint: str | None = Field(
        default=None,
        description="Refuse unless the chunk still has this fingerprint",
    )

    @model_validator(mode="after")
    def _one_target(self) -> "TakeCommand":
        if (self.chunk_id is None) == (not self.all_chunks):
            raise ValueError("Give exactly one of --chunk or --all")
        if self.all_chunks and self.fingerprint:
            raise ValueError("--fingerprint applies to a single --chunk")
        return self

    def run(self, state: "State") -> int:
        """Resolve the selected chunks.

        Returns:
            Exit code (0=resolved, 1=error)
        """
        config = state.config.chunks
        try:
            if self.all_chunks:
                registry = ChunkRegistry.load(
                    self.path, config.encoding, config.max_file_bytes
                )
                targets = [(c.id, c.fingerprint) for c in registry]
                targets.reverse()
            else:
                targets = [(self.chunk_id, self.fingerprint)]

            for chunk_id, fingerprint in targets:
                resolve_chunk(
                    self.path,
                    chunk_id,
                    self.choice,
                    fingerprint=fingerprint,
                    encoding=config.encoding,
                    max_file_bytes=config.max_file_bytes,
                )
                state.runtime.session.record(str(self.path))
        except (ChunkError, ValueError) as e:
            logger.error(
                f"Cannot resolve chunk: {e}",
                file=str(self.path),
                choice=self.choice,
            )
            return 1

        print(
            f"Kept {self.choice} for {len(targets)} chunk"
            f"{'' if len(targets) == 1 else 's'} in {self.path}"
        )
        return 0
