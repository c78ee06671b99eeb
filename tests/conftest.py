"""Pytest configuration and fixtures for mergechunks tests."""

import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest
from pydantic_ai import RunContext

from mergechunks.core.log import ConsoleSink, setup_logger
from mergechunks.tools.workspace import Workspace

TWO_CHUNKS = (
    "header\n"
    "<<<<<<< HEAD\n"
    "ours one\n"
    "=======\n"
    "theirs one\n"
    ">>>>>>> feature\n"
    "middle\n"
    "<<<<<<< HEAD\n"
    "ours two\n"
    "=======\n"
    "theirs two\n"
    ">>>>>>> feature\n"
    "footer\n"
)

THREE_CHUNKS = (
    "a\n"
    "<<<<<<< HEAD\nA1\n=======\nA2\n>>>>>>> b\n"
    "b\n"
    "<<<<<<< HEAD\nB1\n=======\nB2\n>>>>>>> b\n"
    "c\n"
    "<<<<<<< HEAD\nC1\n=======\nC2\n>>>>>>> b\n"
    "d\n"
)

# CRLF body with LF markers, as git writes when the sides disagree
MIXED_ENDINGS = (
    "a\r\n"
    "b\r\n"
    "<<<<<<< HEAD\n"
    "x\r\n"
    "=======\n"
    "y\n"
    ">>>>>>> br\n"
    "c\r\n"
)


def configure_test_logging():
    setup_logger(
        log_root=Path(tempfile.gettempdir()) / "mergechunks-tests",
        session_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Console-only logging at debug level, nothing sent to logfire.dev."""
    configure_test_logging()


@pytest.fixture
def restore_logging():
    """For tests that install their own logger."""
    yield
    configure_test_logging()


@pytest.fixture
def two_chunks():
    return TWO_CHUNKS


@pytest.fixture
def three_chunks():
    return THREE_CHUNKS


@pytest.fixture
def mixed_endings():
    return MIXED_ENDINGS


@pytest.fixture
def write_file(tmp_path):
    """Write text to a file under tmp_path without newline translation."""
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8"))
        return path
    return _write


@pytest.fixture
def workspace(tmp_path):
    """Workspace over tmp_path with one conflicted and one clean file."""
    (tmp_path / "conflict.py").write_bytes(TWO_CHUNKS.encode())
    (tmp_path / "clean.py").write_bytes(b"line 1\nline 2\n")
    return Workspace(workdir=tmp_path, conflict_files=["conflict.py"])


@pytest.fixture
def ctx(workspace):
    """Mock RunContext carrying the workspace."""
    ctx = Mock(spec=RunContext)
    ctx.deps = workspace
    return ctx
