"""Test log format templates."""

import re

import pytest

from mergechunks.core.log import (
    ConsoleSink,
    FileSink,
    LogfireSink,
    setup_logger,
)


@pytest.fixture
def log_to_file(tmp_path, restore_logging):
    """Log one record through a FileSink and return the file text."""
    def _log(message: str, **sink_options) -> str:
        log_file = tmp_path / "format.log"
        logger = setup_logger(
            log_root=tmp_path,
            session_name="test",
            console=ConsoleSink(enabled=False),
            file=FileSink(enabled=True, path=str(log_file), **sink_options),
            logfire=LogfireSink(enabled=False),
        )
        logger.info(message)
        logger.close()
        return log_file.read_text()
    return _log


def test_raw_json_format(log_to_file):
    """No template writes the OpenTelemetry span JSON."""
    content = log_to_file("Test message", format_template=None)

    assert content.startswith("{")
    assert '"name": "Test message"' in content


def test_default_text_format(log_to_file):
    content = log_to_file("Test message")

    assert re.match(
        r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} info  Test message", content
    )


def test_location_field(log_to_file):
    content = log_to_file(
        "Test message", format_template="[{level}] {location} {message}"
    )

    assert re.search(r"\[info\] \S+\.py:\d+ Test message", content)


def test_escape_special_characters(log_to_file):
    content = log_to_file(
        "line one\nline two\tend", escape_special_characters=True
    )

    assert "line one\\nline two\\tend" in content
    assert len(content.strip().splitlines()) == 1


def test_invalid_template_field(log_to_file):
    content = log_to_file("Test message", format_template="{nonsense}")

    assert "ERROR: Invalid template field 'nonsense'" in content
