"""Test log level filtering, especially spew level."""

import pytest

from bumpcat.core.log import (
    ConsoleSink,
    FileSink,
    LevelFilteringExporter,
    LogfireSink,
    setup_logger,
)

LEVELS = ["spew", "trace", "debug", "info", "warn", "error"]


def file_logger(tmp_path, level):
    log_file = tmp_path / f"{level}.log"
    logger = setup_logger(
        log_root=tmp_path,
        session_name="test",
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, level=level, path=str(log_file)),
        logfire=LogfireSink(enabled=False),
    )
    return logger, log_file


@pytest.mark.parametrize("level", LEVELS)
def test_file_sink_filters_below_level(tmp_path, level):
    """Messages below the sink's level are dropped, the rest kept."""
    logger, log_file = file_logger(tmp_path, level)

    for name in LEVELS:
        getattr(logger, name)(f"{name.upper()} message")
    logger.close()

    content = log_file.read_text()
    threshold = LEVELS.index(level)
    for i, name in enumerate(LEVELS):
        if i >= threshold:
            assert f"{name.upper()} message" in content
        else:
            assert f"{name.upper()} message" not in content


def test_named_level_log(tmp_path):
    """log() accepts bumpcat's own level names, spew included."""
    logger, log_file = file_logger(tmp_path, "spew")

    logger.log("spew", "{line}", line="npm WARN deprecated {x}")
    logger.log("debug", "plain debug")
    logger.close()

    content = log_file.read_text()
    assert "npm WARN deprecated {x}" in content
    assert "plain debug" in content


def test_keyword_attributes_are_appended(tmp_path):
    logger, log_file = file_logger(tmp_path, "info")

    logger.info("Round done", good=["a", "b"])
    logger.close()

    assert "good=" in log_file.read_text()


def test_level_ordering():
    """Test level ordering: spew < trace < debug < info."""
    thresholds = LevelFilteringExporter._level_thresholds

    assert thresholds['spew'] < thresholds['trace']
    assert thresholds['trace'] < thresholds['debug']
    assert thresholds['debug'] < thresholds['info']
    assert thresholds['info'] < thresholds['warn']
    assert thresholds['warn'] < thresholds['error']
    assert thresholds['error'] < thresholds['fatal']

    assert thresholds['spew'] == 1
    assert thresholds['trace'] == 3
    assert thresholds['debug'] == 5
    assert thresholds['info'] == 9
