"""YAML settings source with include: directive support."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import yaml
from platformdirs import user_config_dir
from pydantic_settings import BaseSettings, YamlConfigSettingsSource

from mergechunks.core.log import logger

APP_NAME = "mergechunks"
PROJECT_CONFIG = "mergechunks.yaml"
DEFAULTS_FILE = Path(__file__).parent.parent / "defaults" / "default.yaml"


def _cli_includes(argv: list[str]) -> list[str]:
    """Collect ``--include FILE`` values before pydantic parses argv."""
    includes = []
    i = 1
    while i < len(argv):
        if argv[i] == "--include" and i + 1 < len(argv):
            includes.append(argv[i + 1])
            i += 1
        i += 1
    return includes


def deep_merge(base: dict, override: dict) -> dict:
    """Return a copy of base with override merged in; override wins."""
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class YamlWithIncludesSettingsSource(YamlConfigSettingsSource):
    """Layered YAML source.

    Merges, lowest priority first: packaged defaults, the user config
    in the platform config dir, ./mergechunks.yaml, then every
    ``--include`` file. Any of them may pull in further files through
    an ``include:`` key, resolved relative to the including file.
    """

    def __init__(self, settings_cls: type[BaseSettings], yaml_file=None):
        includes = _cli_includes(sys.argv)
        base = yaml_file or settings_cls.model_config.get("yaml_file")
        if base and includes:
            base = ([base] if isinstance(base, str) else list(base))
            yaml_file = base + includes
        elif includes:
            yaml_file = includes
        else:
            yaml_file = base
        super().__init__(settings_cls, yaml_file)

    def _read_files(self, files, *args, **kwargs):  # noqa: ARG002
        # Layers are always deep-merged, whatever the base class asks.
        candidates = [
            DEFAULTS_FILE,
            Path(user_config_dir(APP_NAME, appauthor=False)) / PROJECT_CONFIG,
        ]
        if files:
            if isinstance(files, (str, os.PathLike)):
                files = [files]
            candidates.extend(Path(f).expanduser() for f in files)
        else:
            candidates.append(Path(PROJECT_CONFIG))

        result = {}
        seen = set()
        for file_path in candidates:
            resolved = file_path.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            if not file_path.is_file():
                logger.debug(
                    "Configuration file not found (skipping)",
                    file=str(file_path),
                )
                continue
            with logger.span("Configuration loading", file=str(file_path)):
                data = self._load_file_recursive(file_path, set())
            result = deep_merge(result, data)
        return result

    def _load_file_recursive(self, filepath: Path, visited: set[Path]) -> dict:
        """Load one file, resolving its include: entries first.

        Raises:
            ValueError: If an include cycle is found
        """
        filepath = filepath.resolve()
        if filepath in visited:
            raise ValueError(f"Circular include: {filepath}")
        visited.add(filepath)

        with open(filepath, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        includes = data.pop("include", None) or []
        if isinstance(includes, str):
            includes = [includes]

        merged = {}
        for inc in includes:
            inc_path = Path(inc).expanduser()
            if not inc_path.is_absolute():
                inc_path = filepath.parent / inc_path
            logger.debug(
                f"Including {inc_path.name}",
                included_from=str(filepath),
            )
            merged = deep_merge(
                merged, self._load_file_recursive(inc_path, visited.copy())
            )
        return deep_merge(merged, data)
