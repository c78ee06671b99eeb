"""Test log level filtering, especially spew level."""

import pytest

from mergechunks.core.log import (
    LEVELS,
    ConsoleSink,
    FileSink,
    LogfireSink,
    Logger,
    level_name,
    setup_logger,
)

MESSAGES = ["spew", "trace", "debug", "info", "warn", "error"]


@pytest.fixture
def file_logger(tmp_path, restore_logging):
    """Install a file-only logger; restore test logging afterwards."""
    log_file = tmp_path / "levels.log"

    def _setup(level: str) -> Logger:
        return setup_logger(
            log_root=tmp_path,
            session_name="test",
            console=ConsoleSink(enabled=False),
            file=FileSink(enabled=True, level=level, path=str(log_file)),
            logfire=LogfireSink(enabled=False),
        )

    return _setup, log_file


@pytest.mark.parametrize("level", MESSAGES)
def test_file_sink_filters_below_level(file_logger, level):
    setup, log_file = file_logger
    logger = setup(level)

    for name in MESSAGES:
        getattr(logger, name)(f"{name.upper()} message")
    logger.close()

    content = log_file.read_text()
    threshold = MESSAGES.index(level)
    for i, name in enumerate(MESSAGES):
        if i < threshold:
            assert f"{name.upper()} message" not in content
        else:
            assert f"{name.upper()} message" in content


def test_file_records_carry_attributes(file_logger):
    setup, log_file = file_logger
    logger = setup("info")

    logger.info("Replaced conflict chunk 1", chunk_id=1)
    logger.close()

    line = next(
        line for line in log_file.read_text().splitlines()
        if "Replaced conflict chunk 1" in line
    )
    assert " info  Replaced conflict chunk 1 │ " in line
    assert "chunk_id=1" in line


def test_level_ordering():
    """spew < trace < debug < info < warn < error < fatal."""
    order = ["spew", "trace", "debug", "info", "warn", "error", "fatal"]
    numbers = [LEVELS[name] for name in order]

    assert numbers == sorted(numbers)
    assert len(set(numbers)) == len(numbers)
    assert LEVELS["spew"] == 1
    assert LEVELS["trace"] == 3
    assert LEVELS["info"] == 9


def test_level_name_round_trip():
    for name, number in LEVELS.items():
        assert level_name(number) == name
    assert level_name(0) == "unknown"


def test_sink_level_inherits_logger_level():
    logger = Logger(level="debug", console=ConsoleSink(), file=FileSink())

    assert logger.console.level == "debug"
    assert logger.file.level == "debug"

    logger = Logger(level="debug", file=FileSink(level="error"))

    assert logger.file.level == "error"
