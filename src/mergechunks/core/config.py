"""Application state and configuration."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import platformdirs
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from mergechunks.core.base import BaseConfig, BaseState
from mergechunks.core.log import Logger
from mergechunks.core.yaml_settings import (
    APP_NAME,
    PROJECT_CONFIG,
    YamlWithIncludesSettingsSource,
)

# Names usable in {...} templates besides the State itself, e.g.
# {platformdirs.user_state_dir} or {Path.cwd}.
TEMPLATE_NAMESPACE = {
    'os': os,
    'platformdirs': platformdirs,
    'Path': Path,
}


class ChunkConfig(BaseConfig):
    """Conflict chunk engine settings."""

    encoding: str = Field(
        default="utf-8",
        description=(
            "Text encoding of conflicted files. Undecodable bytes are "
            "carried through unchanged"
        ),
    )
    max_file_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Refuse to scan files larger than this many bytes",
    )
    context_lines: int = Field(
        default=3,
        ge=0,
        description="Lines of context shown around each chunk",
    )
    reject_markers_in_replacement: bool = Field(
        default=True,
        description=(
            "Reject replacement text containing start or end conflict "
            "markers, which would create new chunks"
        ),
    )
    skip_dirs: list[str] = Field(
        default_factory=lambda: [".git"],
        description="Directory names skipped when searching a tree",
    )


class Config(BaseConfig):
    """Configuration loaded from YAML/env/CLI."""

    logger: Logger = Field(
        default=None,
        description="Logger configuration and runtime instance",
    )
    chunks: ChunkConfig = Field(
        default_factory=ChunkConfig,
        description="Conflict chunk engine settings",
    )
    session_name: str = Field(
        default="session",
        description="Name of this resolution session, used in log paths",
    )
    log_root: Path = Field(
        default_factory=lambda: Path(platformdirs.user_state_dir(APP_NAME)),
        description=(
            "Root directory for log files "
            "(supports {platformdirs.*} templates)"
        ),
    )
    prompts: dict[str, dict[str, str]] = Field(
        default_factory=dict,
        description="Tool descriptions and hints shown to LLM clients",
    )

    @model_validator(mode='after')
    def _setup_logger(self) -> Config:
        """Install the global logger once configuration is loaded."""
        from mergechunks.core.log import setup_logger

        if self.logger is None:
            self.logger = Logger()

        self.logger = setup_logger(
            log_root=self.log_root,
            session_name=self.session_name,
            console=self.logger.console,
            file=self.logger.file,
            logfire=self.logger.logfire,
            level=self.logger.level,
        )
        return self


class SessionState(BaseState):
    """What the current command changed on disk."""

    files_touched: list[str] = Field(
        default_factory=list,
        description="Files rewritten during this run",
    )
    chunks_replaced: int = Field(
        default=0,
        description="Number of chunk replacements performed",
    )

    def record(self, path: str) -> None:
        self.chunks_replaced += 1
        if path not in self.files_touched:
            self.files_touched.append(path)


class Runtime(BaseModel):
    """Runtime state, grouped by concern."""

    session: SessionState = Field(default_factory=SessionState)


class State(BaseSettings):
    """Configuration plus runtime; the object every command receives."""

    config: Config = Field(
        default_factory=Config,
        description="Application configuration (from YAML/env/CLI)",
    )
    runtime: Runtime = Field(
        default_factory=Runtime,
        description="Runtime state (mutates while a command runs)",
    )
    include: list[str] | None = Field(
        default=None,
        description=(
            "Additional YAML files to deep-merge over the configuration"
        ),
    )

    model_config = SettingsConfigDict(
        yaml_file=PROJECT_CONFIG,
        env_file=".env",
        env_prefix="MERGECHUNKS_",
        env_nested_delimiter="__",
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Init args, then YAML, .env, environment, secrets."""
        return (
            init_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )

    @model_validator(mode="after")
    def substitute_templates(self) -> State:
        """Expand {dotted.path} templates in every string and Path."""
        self._substitute_recursive(self)
        return self

    def close(self):
        self.config.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        self.close()
        return False

    def _substitute_recursive(self, obj: Any) -> None:
        if isinstance(obj, BaseModel):
            for field_name in obj.__class__.model_fields:
                value = getattr(obj, field_name)
                new_value = self._substitute_value(value)
                if new_value is not value:
                    setattr(obj, field_name, new_value)
        elif isinstance(obj, dict):
            for key in obj:
                obj[key] = self._substitute_value(obj[key])
        elif isinstance(obj, list):
            for i, item in enumerate(obj):
                obj[i] = self._substitute_value(item)

    def _substitute_value(self, value: Any) -> Any:
        if isinstance(value, str):
            new = self._substitute_string(value)
            return value if new == value else new
        if isinstance(value, Path):
            new = self._substitute_string(str(value))
            return value if new == str(value) else Path(new)
        if isinstance(value, (BaseModel, dict, list)):
            self._substitute_recursive(value)
        return value

    def _substitute_string(self, value: str) -> str:
        """Replace {config.log_root}-style references with their values.

        Module references come from TEMPLATE_NAMESPACE; callables found
        there are called with the application name, so
        {platformdirs.user_log_dir} yields the mergechunks log dir.
        Unknown references are left as written, which keeps runtime
        templates such as {session_name} in FileSink.path intact.
        """
        def replace_template(match):
            parts = match.group(1).split(".")
            if parts[0] in TEMPLATE_NAMESPACE:
                obj = TEMPLATE_NAMESPACE[parts[0]]
                parts = parts[1:]
            else:
                obj = self
            try:
                for part in parts:
                    obj = getattr(obj, part)
                if callable(obj):
                    obj = obj(APP_NAME, appauthor=False)
                return str(obj)
            except (AttributeError, TypeError):
                return match.group(0)

        return re.sub(r'\{([a-z._]+)\}', replace_template, value)


__all__ = ["State", "Config", "ChunkConfig", "BaseConfig", "BaseState"]
