"""Upgrade session - one full resolution pass for one upgrade mode."""

from bumpcat.core.errors import BumpcatError, SetupError
from bumpcat.core.log import logger
from bumpcat.upgrade.base import BackupStore, PackageManager, TestOracle
from bumpcat.upgrade.bisect import BisectionScheduler
from bumpcat.upgrade.ledger import StatusLedger
from bumpcat.upgrade.report import SessionReport
from bumpcat.upgrade.status import UpgradeMode
from bumpcat.upgrade.trial import TrialExecutor


class UpgradeSession:
    """Runs upgrade sessions against one project.

    Wires the package manager, test oracle and backup store into a
    TrialExecutor and drives a BisectionScheduler over a fresh
    StatusLedger for each mode.
    """

    def __init__(self, package_manager: PackageManager, oracle: TestOracle,
                 backup: BackupStore):
        self.package_manager = package_manager
        self.oracle = oracle
        self.backup = backup

    @classmethod
    def from_config(cls, config: "Config") -> "UpgradeSession":
        """Wire the command-driven collaborators described by config."""
        from bumpcat.package.manager import CommandPackageManager
        from bumpcat.runner.check import CheckRunner, TestOracle
        from bumpcat.upgrade.backup import FileBackupStore

        workdir = config.project.workdir
        return cls(
            package_manager=CommandPackageManager(
                workdir, config.package_manager
            ),
            oracle=TestOracle(
                CheckRunner(workdir, config.test.output_dir),
                config.test.command,
                timeout=config.test.timeout,
            ),
            backup=FileBackupStore(
                workdir,
                [config.project.manifest, config.project.lock_file],
                suffix=config.backup.suffix,
            ),
        )

    def precheck(self) -> None:
        """Make sure the untouched project installs and passes its tests.

        Raises:
            SetupError: On a leftover snapshot, or if install or tests
                fail before anything was upgraded
        """
        self.backup.ensure_clean()

        logger.info(
            "Making sure dependencies are installed and tests work "
            "before we start"
        )
        try:
            self.package_manager.run_full_install()
        except BumpcatError as e:
            raise SetupError(
                f"Install failed before any upgrade was attempted: {e}"
            ) from e

        if not self.oracle.run():
            raise SetupError(
                "Tests failed before any upgrade was attempted. "
                "Fix the test suite on the current dependencies first."
            )

    def run(self, mode: UpgradeMode, ledger: StatusLedger | None = None
            ) -> SessionReport:
        """Resolve every outdated dependency for `mode`.

        Args:
            mode: Version target for this session
            ledger: Ledger to continue from; a fresh one over the
                outdated roster when None

        Returns:
            SessionReport with the disposition of every candidate
        """
        if ledger is None:
            ledger = StatusLedger(self.package_manager.list_outdated(mode))

        report = SessionReport(mode=mode)
        if not ledger.pending():
            logger.info(f"Nothing to upgrade to {mode} versions")
            report.dispositions = ledger.dispositions()
            return report

        logger.info(
            f"Attempting to upgrade {len(ledger)} package(s) to {mode} "
            f"versions",
            packages=list(ledger.roster),
        )
        executor = TrialExecutor(
            self.package_manager, self.oracle, self.backup
        )
        scheduler = BisectionScheduler(executor, mode)

        with logger.span(f"Upgrade session ({mode})", mode=str(mode)):
            self.backup.snapshot()
            scheduler.run(ledger)
            try:
                self.package_manager.run_full_install()
            except BumpcatError:
                logger.error("Final install failed, restoring last good state")
                self.backup.restore()
                raise
            self.backup.discard()

        report.dispositions = ledger.dispositions()
        report.trials = executor.history
        logger.info(
            f"Upgrade to {mode} versions finished after "
            f"{report.trial_count} trial(s)",
            good=report.good,
            degraded=report.degraded,
            incompatible=report.incompatible,
        )
        return report
