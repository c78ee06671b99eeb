"""Tests for {dotted.path} template substitution in State."""

from pathlib import Path

import platformdirs
import pytest

from mergechunks.core.config import Config, State


@pytest.fixture
def state(tmp_path, monkeypatch, restore_logging):
    """Build a State from a project config in an empty directory."""
    monkeypatch.chdir(tmp_path)

    def _build(yaml_text: str) -> State:
        (tmp_path / "mergechunks.yaml").write_text(yaml_text)
        return State()
    return _build


def test_config_reference_substituted(state, tmp_path):
    result = state(
        f"config:\n"
        f"  session_name: nightly\n"
        f"  log_root: {tmp_path}\n"
        f"  prompts:\n"
        f"    tools:\n"
        f"      banner: 'Session {{config.session_name}}'\n"
    )

    assert result.config.prompts["tools"]["banner"] == "Session nightly"


def test_platformdirs_reference_substituted(state):
    result = state("config:\n  log_root: '{platformdirs.user_state_dir}'\n")

    assert result.config.log_root == Path(
        platformdirs.user_state_dir("mergechunks", appauthor=False)
    )


def test_runtime_templates_preserved(state, tmp_path):
    """{log_root} and {session_name} belong to FileSink, not to State."""
    result = state(f"config:\n  log_root: {tmp_path}\n")

    assert result.config.logger.file.path == (
        "{log_root}/{session_name}/mergechunks.log"
    )


def test_unknown_reference_left_as_written(state, tmp_path):
    result = state(
        f"config:\n"
        f"  log_root: {tmp_path}\n"
        f"  prompts:\n"
        f"    tools:\n"
        f"      note: 'see {{config.nonexistent}}'\n"
    )

    assert result.config.prompts["tools"]["note"] == "see {config.nonexistent}"


def test_env_fills_keys_yaml_leaves_unset(state, tmp_path, monkeypatch):
    """YAML outranks the environment; env supplies what YAML omits."""
    monkeypatch.setenv("MERGECHUNKS_CONFIG__LOG_ROOT", str(tmp_path / "env"))
    monkeypatch.setenv("MERGECHUNKS_CONFIG__CHUNKS__CONTEXT_LINES", "9")

    result = state("config:\n  chunks:\n    context_lines: 2\n")

    assert result.config.log_root == tmp_path / "env"
    assert result.config.chunks.context_lines == 2


def test_negative_context_lines_rejected(restore_logging):
    with pytest.raises(ValueError):
        Config(chunks={"context_lines": -1})
