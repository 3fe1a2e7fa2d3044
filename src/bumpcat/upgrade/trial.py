"""Trial executor - applies one batch, tests it, commits or rolls back."""

from collections.abc import Sequence

from bumpcat.core.log import logger
from bumpcat.core.result import TrialRecord
from bumpcat.upgrade.base import BackupStore, PackageManager, TestOracle
from bumpcat.upgrade.status import UpgradeMode


class TrialExecutor:
    """Runs trials for the scheduler.

    Only the batch is passed to the package manager. Everything else
    stays at whatever version is committed on disk, which is how earlier
    successful batches accumulate. After every trial the working tree is
    either the newly tested state (pass, snapshotted) or the previous
    snapshot (fail).
    """

    def __init__(self, package_manager: PackageManager, oracle: TestOracle,
                 backup: BackupStore):
        self.package_manager = package_manager
        self.oracle = oracle
        self.backup = backup
        self.history: list[TrialRecord] = []

    def trial(self, batch: Sequence[str], target: UpgradeMode) -> bool:
        """Try upgrading `batch` to `target` on top of the committed state.

        Returns:
            True if the tests passed and the upgrade was committed

        Raises:
            ValueError: If batch is empty
            PackageManagerError: If the upgrade command fails. Any error
                from the upgrade restores the last snapshot before it
                propagates.
        """
        batch = tuple(batch)
        if not batch:
            raise ValueError("Cannot run a trial with an empty batch")

        baseline = self.backup.generation
        logger.debug(
            f"Trial {len(self.history) + 1}: upgrading {len(batch)} "
            f"package(s) to {target}",
            batch=list(batch),
        )

        try:
            self.package_manager.apply_upgrade(batch, target)
        except Exception:
            logger.error("Upgrade failed, restoring last good state")
            self.backup.restore()
            raise

        passed = self.oracle.run()
        if passed:
            self.backup.snapshot()
        else:
            self.backup.restore()

        self.history.append(TrialRecord(
            index=len(self.history) + 1,
            batch=batch,
            target=target,
            baseline=baseline,
            passed=passed,
            log_file=getattr(self.oracle, "last_log_file", None),
        ))
        logger.info(
            f"Tests {'passed' if passed else 'failed'} with "
            f"{', '.join(batch)} at {target}"
        )
        return passed
