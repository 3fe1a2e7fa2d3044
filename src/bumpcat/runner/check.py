"""Test oracle - runs the project's test command with log management."""

from datetime import datetime
from pathlib import Path

from bumpcat.core.log import logger
from bumpcat.core.result import CheckResult
from bumpcat.core.runner import Runner


class CheckRunner:
    """Execute check commands and keep one log file per run."""

    def __init__(self, workdir: Path, output_dir: Path,
                 runner: Runner | None = None):
        """Initialize check runner.

        Args:
            workdir: Working directory for check commands
            output_dir: Directory for storing check logs
            runner: Command runner (a new Runner when None)
        """
        self.workdir = workdir
        self.output_dir = output_dir
        self.runner = runner or Runner()
        self._runs = 0

    def run(self, check_name: str, command: str,
            timeout: int | None = None) -> CheckResult:
        """Run a check command, saving its output to a log file.

        Args:
            check_name: Name of check (used in log filename)
            command: Check command to execute
            timeout: Timeout in seconds, or None to wait indefinitely

        Returns:
            CheckResult with success status, log file path, returncode,
            and timestamp
        """
        self._runs += 1
        timestamp = datetime.now()
        log_file = self.output_dir / (
            f"{check_name}-{timestamp.strftime('%Y%m%d-%H%M%S')}"
            f"-{self._runs:03d}.log"
        )
        self.output_dir.mkdir(parents=True, exist_ok=True)

        result = self.runner.execute(
            command,
            cwd=self.workdir,
            timeout=timeout,
            log_file=log_file,
            log_level="spew",
            check=False,
        )

        return CheckResult(
            check_name=check_name,
            success=(result.exited == 0),
            log_file=log_file,
            returncode=result.exited,
            timestamp=timestamp,
        )


class TestOracle:
    """Pass/fail verdict of the project's test suite.

    Any non-zero exit, including a timeout, counts as a failure.
    """

    __test__ = False  # not a pytest class

    def __init__(self, checks: CheckRunner, command: str,
                 timeout: int | None = None, name: str = "test"):
        self.checks = checks
        self.command = command
        self.timeout = timeout
        self.name = name
        self.last_result: CheckResult | None = None

    @property
    def last_log_file(self) -> Path | None:
        return self.last_result.log_file if self.last_result else None

    def run(self) -> bool:
        logger.info(f"Running tests: {self.command}")
        self.last_result = self.checks.run(
            self.name, self.command, self.timeout
        )
        if not self.last_result.success:
            logger.info(
                f"Tests failed (exit code {self.last_result.returncode}), "
                f"see {self.last_result.log_file}"
            )
        return self.last_result.success
