"""Tests for logger cleanup cascade via BaseCloseable."""

import pytest

from bumpcat.core.log import ConsoleSink, FileSink, Logger, LogfireSink


def make_logger(tmp_path, name="test.log"):
    logger = Logger(
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, path=str(tmp_path / name)),
        logfire=LogfireSink(enabled=False),
    )
    logger.setup(log_root=tmp_path, session_name="test")
    return logger


def test_logger_closes_file_via_context_manager(tmp_path):
    logger = make_logger(tmp_path)

    assert logger.file._file is not None
    assert not logger.file._file.closed

    with logger:
        logger.info("test message")

    assert logger.file._file.closed


def test_logger_closes_on_exception(tmp_path):
    """Files are closed even when the block raises."""
    logger = make_logger(tmp_path)

    with pytest.raises(ValueError), logger:
        logger.info("before exception")
        raise ValueError("test exception")

    assert logger.file._file.closed


def test_config_cascade_closes_logger(tmp_path):
    """Config.close() cascades to Logger then to each Sink."""
    from bumpcat.core.config import Config, ProjectConfig

    config = Config(
        logger=Logger(
            console=ConsoleSink(enabled=False),
            file=FileSink(enabled=True, path=str(tmp_path / "cascade.log")),
            logfire=LogfireSink(enabled=False),
        ),
        project=ProjectConfig(workdir=tmp_path),
        log_root=tmp_path,
    )

    file_sink = config.logger.file
    assert file_sink._file is not None
    assert not file_sink._file.closed

    config.close()

    assert file_sink._file.closed


def test_file_written_and_flushed_on_close(tmp_path):
    logger = make_logger(tmp_path, "written.log")

    with logger:
        logger.info("test message to file")

    content = (tmp_path / "written.log").read_text()
    assert "test message to file" in content
