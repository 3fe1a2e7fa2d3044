"""Tests for loading State and substituting templates in its config."""

from pathlib import Path

import pytest

from bumpcat.core.config import Config, ProjectConfig, State
from bumpcat.core.log import ConsoleSink, Logger
from bumpcat.upgrade.status import UpgradeMode


@pytest.fixture
def fixtures_dir():
    return Path(__file__).parent / "fixtures"


def quiet_logger():
    return Logger(console=ConsoleSink(enabled=False))


def test_output_dir_template_resolved(mock_argv, tmp_path):
    """{config.log_root} in the test output dir points at the log root."""
    state = State(config=Config(
        logger=quiet_logger(),
        project=ProjectConfig(workdir=tmp_path),
        log_root=tmp_path / "logs",
    ))

    assert state.config.test.output_dir == tmp_path / "logs" / "tests"


def test_packages_placeholder_survives(mock_argv, tmp_path):
    """Command placeholders that are not config paths stay untouched."""
    state = State(config=Config(
        logger=quiet_logger(),
        project=ProjectConfig(workdir=tmp_path),
        log_root=tmp_path,
    ))

    assert "{packages}" in state.config.package_manager.upgrade_latest
    assert "{packages}" in state.config.package_manager.upgrade_compatible


def test_platformdirs_template(mock_argv, tmp_path):
    import platformdirs

    state = State(config=Config(
        logger=quiet_logger(),
        project=ProjectConfig(workdir=tmp_path),
        log_root="{platformdirs.user_cache_dir}",
    ))

    assert state.config.log_root == Path(
        platformdirs.user_cache_dir("bumpcat", appauthor=False)
    )


def test_state_loads_yaml_layers(fixtures_dir, monkeypatch, tmp_path):
    """A full State load picks up --include files from the command line."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.argv", [
        "bumpcat",
        "--include", str(fixtures_dir / "minimal.yaml"),
        "--include", str(fixtures_dir / "override_modes.yaml"),
    ])

    state = State()

    assert state.config.project.manifest == "requirements.in"
    assert state.config.package_manager.outdated_format == "lines"
    assert state.config.upgrade.modes == [UpgradeMode.LATEST]
    assert state.config.test.timeout == 900
    state.config.close()


def test_environment_fills_unset_values(fixtures_dir, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.argv", [
        "bumpcat", "--include", str(fixtures_dir / "minimal.yaml"),
    ])
    monkeypatch.setenv("BUMPCAT_CONFIG__TEST__TIMEOUT", "120")

    state = State()

    assert state.config.test.timeout == 120
    assert state.config.test.command == "pytest -x"
    state.config.close()


def test_log_level_flag_sets_console_level(mock_argv, tmp_path):
    config = Config(
        logger=Logger(console=ConsoleSink(enabled=False, level="info")),
        project=ProjectConfig(workdir=tmp_path),
        log_root=tmp_path,
        log_level="debug",
    )

    assert config.logger.console.level == "debug"
    config.close()
