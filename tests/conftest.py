"""Pytest configuration and fixtures for bumpcat tests."""

import json
import sys
import tempfile
from pathlib import Path

import pytest

from bumpcat.core.errors import PackageManagerError
from bumpcat.core.log import ConsoleSink, setup_logger
from bumpcat.upgrade.backup import FileBackupStore
from bumpcat.upgrade.status import UpgradeMode


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Console-only debug logging, nothing sent to logfire.dev."""
    test_log_root = Path(tempfile.gettempdir()) / "bumpcat-tests"
    setup_logger(
        log_root=test_log_root,
        session_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture
def mock_argv():
    """Save and restore sys.argv around CLI-parsing State loads."""
    original = sys.argv.copy()
    sys.argv = ["bumpcat"]
    yield
    sys.argv = original


class FakePackageManager:
    """Package manager over a JSON manifest of name -> version label.

    Upgrading writes the mode name ("latest"/"compatible") as the
    package's version. Everything starts at "current".
    """

    def __init__(self, manifest: Path, lock: Path,
                 outdated: dict[UpgradeMode, list[str]],
                 broken_apply: set[str] = frozenset(),
                 install_fails: bool = False):
        self.manifest = manifest
        self.lock = lock
        self.outdated = outdated
        self.broken_apply = set(broken_apply)
        self.install_fails = install_fails
        self.applied: list[tuple[tuple[str, ...], UpgradeMode]] = []
        self.installs = 0

    def versions(self) -> dict[str, str]:
        return json.loads(self.manifest.read_text())

    def list_outdated(self, mode):
        return tuple(self.outdated.get(mode, ()))

    def apply_upgrade(self, batch, mode):
        self.applied.append((tuple(batch), mode))
        versions = self.versions()
        for name in batch:
            versions[name] = str(mode)
        self.manifest.write_text(json.dumps(versions, sort_keys=True))
        self.lock.write_text(f"lock {len(self.applied)}\n")
        if self.broken_apply & set(batch):
            raise PackageManagerError("registry unreachable",
                                      command="fake up", returncode=1)

    def run_full_install(self):
        self.installs += 1
        if self.install_fails:
            self.lock.write_text("half-written lock\n")
            raise PackageManagerError("install failed",
                                      command="fake install", returncode=1)
        self.lock.write_text(
            json.dumps(self.versions(), sort_keys=True) + "\n"
        )


class FakeOracle:
    """Fails while any package sits at a version that breaks it."""

    def __init__(self, package_manager: FakePackageManager,
                 breaks: dict[str, set[str]] | None = None,
                 baseline_fails: bool = False):
        self.package_manager = package_manager
        self.breaks = breaks or {}
        self.baseline_fails = baseline_fails
        self.runs = 0

    def run(self) -> bool:
        self.runs += 1
        if self.baseline_fails:
            return False
        versions = self.package_manager.versions()
        return not any(
            versions.get(name) in bad for name, bad in self.breaks.items()
        )


class FakeProject:
    """A temp project wired with fake collaborators and a real backup."""

    def __init__(self, root: Path, roster: list[str],
                 breaks: dict[str, set[str]] | None = None,
                 compatible: list[str] | None = None, **pm_kwargs):
        self.root = root
        self.manifest = root / "package.json"
        self.lock = root / "pnpm-lock.yaml"
        self.manifest.write_text(json.dumps(
            {name: "current" for name in roster}, sort_keys=True
        ))
        self.lock.write_text("lock 0\n")
        self.package_manager = FakePackageManager(
            self.manifest, self.lock,
            {
                UpgradeMode.LATEST: roster,
                UpgradeMode.COMPATIBLE: compatible or [],
            },
            **pm_kwargs,
        )
        self.oracle = FakeOracle(self.package_manager, breaks)
        self.backup = FileBackupStore(
            root, ["package.json", "pnpm-lock.yaml"]
        )

    def versions(self) -> dict[str, str]:
        return self.package_manager.versions()


@pytest.fixture
def make_project(tmp_path):
    """Factory for FakeProject instances rooted in tmp_path."""
    def _make(roster, breaks=None, compatible=None, **pm_kwargs):
        return FakeProject(tmp_path, roster, breaks, compatible, **pm_kwargs)
    return _make
