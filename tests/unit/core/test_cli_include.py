"""Tests for the --include command line argument."""

import sys

import pytest

from mergechunks.core.config import State
from mergechunks.core.yaml_settings import (
    YamlWithIncludesSettingsSource,
    _cli_includes,
)


@pytest.fixture
def mock_argv():
    """Save and restore sys.argv."""
    original = sys.argv.copy()
    yield
    sys.argv = original


def test_cli_includes_parsing():
    argv = ["prog", "list", "--include", "a.yaml", "x.py", "--include", "b"]

    assert _cli_includes(argv) == ["a.yaml", "b"]
    assert _cli_includes(["prog", "--include"]) == []
    assert _cli_includes(["prog"]) == []


def test_cli_include_overrides_project_config(tmp_path, mock_argv):
    project = tmp_path / "mergechunks.yaml"
    project.write_text("config:\n  session_name: project\n")
    extra = tmp_path / "extra.yaml"
    extra.write_text("config:\n  session_name: included\n")
    sys.argv = ["prog", "--include", str(extra)]

    data = YamlWithIncludesSettingsSource(State, yaml_file=str(project))()

    assert data["config"]["session_name"] == "included"


def test_multiple_cli_includes_apply_in_order(tmp_path, mock_argv):
    first = tmp_path / "first.yaml"
    first.write_text("config:\n  chunks:\n    context_lines: 1\n")
    second = tmp_path / "second.yaml"
    second.write_text("config:\n  chunks:\n    encoding: latin-1\n")
    sys.argv = [
        "prog", "--include", str(first), "--include", str(second),
    ]

    data = YamlWithIncludesSettingsSource(
        State, yaml_file=str(tmp_path / "absent.yaml")
    )()

    assert data["config"]["chunks"]["context_lines"] == 1
    assert data["config"]["chunks"]["encoding"] == "latin-1"
