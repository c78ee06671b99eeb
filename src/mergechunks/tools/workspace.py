"""Workspace shared by the conflict chunk tools."""

from __future__ import annotations

from pathlib import Path

from pydantic_ai.exceptions import ModelRetry

from mergechunks.core.config import ChunkConfig, Config


class Workspace:
    """Directory holding the conflicted files a client works on.

    Tool paths are interpreted relative to ``workdir`` and may not
    leave it.
    """

    def __init__(
        self,
        workdir: Path,
        conflict_files: list[str] | None = None,
        config: Config | None = None,
    ):
        """Initialize workspace.

        Args:
            workdir: Directory containing the conflicted files
            conflict_files: Files known to be conflicted, if already
                determined by the caller
            config: Optional configuration; engine defaults otherwise
        """
        self.workdir = Path(workdir)
        self.conflict_files = list(conflict_files or [])
        self.config = config

    @property
    def chunk_config(self) -> ChunkConfig:
        if self.config is not None:
            return self.config.chunks
        return ChunkConfig()

    def prompt(self, section: str, key: str) -> str | None:
        """Configured prompt text, if any."""
        if self.config is None:
            return None
        return self.config.prompts.get(section, {}).get(key)

    def resolve(self, filepath: str) -> Path:
        """Map a tool path argument to a path inside the workspace.

        Raises:
            ModelRetry: If the path is empty or escapes the workspace
        """
        if not filepath or not filepath.strip():
            raise ModelRetry("File path cannot be empty.")

        root = self.workdir.resolve()
        target = (root / filepath).resolve()
        if target != root and root not in target.parents:
            raise ModelRetry(
                f"Path '{filepath}' is outside the workspace. "
                f"Use paths relative to the repository root."
            )
        return target
