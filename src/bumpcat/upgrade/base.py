"""Interfaces of the collaborators an upgrade session drives."""

from abc import abstractmethod
from collections.abc import Sequence
from typing import Protocol

from bumpcat.upgrade.status import UpgradeMode


class PackageManager(Protocol):
    """Lists outdated dependencies and rewrites manifest/lock files."""

    @abstractmethod
    def list_outdated(self, mode: UpgradeMode) -> tuple[str, ...]:
        """Dependencies with a newer version available for `mode`."""

    @abstractmethod
    def apply_upgrade(self, batch: Sequence[str], mode: UpgradeMode) -> None:
        """Upgrade exactly `batch` to the `mode` target.

        Raises:
            PackageManagerError: If the package manager command fails
        """

    @abstractmethod
    def run_full_install(self) -> None:
        """Install from the manifest, normalizing the lock file.

        Raises:
            PackageManagerError: If the install fails
        """


class TestOracle(Protocol):
    """Runs the project's test suite."""

    @abstractmethod
    def run(self) -> bool:
        """True if the suite passes; any failure or crash is False."""


class BackupStore(Protocol):
    """Snapshot/restore of the manifest and lock file."""

    generation: int
    """Number of snapshots taken since the last discard."""

    @abstractmethod
    def snapshot(self) -> None:
        """Record the current files as the committed baseline."""

    @abstractmethod
    def restore(self) -> None:
        """Overwrite the files with the last snapshot."""

    @abstractmethod
    def discard(self) -> None:
        """Delete the snapshot."""

    @abstractmethod
    def ensure_clean(self) -> None:
        """Raise SetupError if a snapshot from an earlier run exists."""


class Trial(Protocol):
    """Something that can try a batch and report pass/fail."""

    @abstractmethod
    def trial(self, batch: Sequence[str], target: UpgradeMode) -> bool:
        ...
