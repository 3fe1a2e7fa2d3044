"""Package manager adapter driven by configured command templates."""

import shlex
from collections.abc import Sequence
from pathlib import Path

from invoke import Result

from bumpcat.core.config import PackageManagerConfig
from bumpcat.core.errors import PackageManagerError
from bumpcat.core.log import logger
from bumpcat.core.runner import Runner
from bumpcat.package.outdated import parse_outdated
from bumpcat.upgrade.status import UpgradeMode


class CommandPackageManager:
    """Runs package manager commands in the project directory.

    Commands come from config.package_manager. Upgrade templates carry a
    {packages} placeholder that receives the shell-quoted batch.
    """

    def __init__(self, workdir: Path, config: PackageManagerConfig,
                 runner: Runner | None = None):
        """Initialize package manager.

        Args:
            workdir: Project directory the commands run in
            config: Command templates and outdated output format
            runner: Command runner (a new Runner when None)
        """
        self.workdir = Path(workdir)
        self.config = config
        self.runner = runner or Runner()

    def _run(self, command: str) -> Result:
        return self.runner.execute(
            command,
            cwd=self.workdir,
            log_level="spew",
            check=False,
        )

    def _fail(self, what: str, command: str, result: Result):
        raise PackageManagerError(
            f"{what} failed with exit code {result.exited}: {command}\n"
            f"{result.stderr.strip()}",
            command=command,
            returncode=result.exited,
            stderr=result.stderr,
        )

    def list_outdated(self, mode: UpgradeMode) -> tuple[str, ...]:
        """List outdated dependencies for `mode`.

        A non-zero exit alone is not an error: pnpm exits 1 whenever it
        finds something outdated. Only a non-zero exit with output on
        stderr is.

        Raises:
            PackageManagerError: If the listing command failed or its
                output does not parse in the configured format
        """
        command = (
            self.config.outdated_latest if mode is UpgradeMode.LATEST
            else self.config.outdated_compatible
        )
        if not command:
            return ()

        result = self._run(command)
        if result.exited != 0 and result.stderr.strip():
            self._fail("Listing outdated packages", command, result)

        try:
            packages = parse_outdated(
                result.stdout, self.config.outdated_format
            )
        except (ValueError, KeyError, TypeError) as e:
            raise PackageManagerError(
                f"Could not parse the output of {command} as "
                f"{self.config.outdated_format}: {e}",
                command=command,
                returncode=result.exited,
                stderr=result.stderr,
            ) from e
        logger.debug(
            f"{len(packages)} package(s) outdated for {mode}",
            packages=list(packages),
        )
        return packages

    def apply_upgrade(self, batch: Sequence[str], mode: UpgradeMode) -> None:
        """Upgrade exactly the packages in `batch` to the `mode` target.

        Raises:
            ValueError: If batch is empty
            PackageManagerError: If the upgrade command fails
        """
        if not batch:
            raise ValueError("apply_upgrade needs at least one package")

        template = (
            self.config.upgrade_latest if mode is UpgradeMode.LATEST
            else self.config.upgrade_compatible
        )
        packages = " ".join(shlex.quote(name) for name in batch)
        command = template.replace("{packages}", packages)

        result = self._run(command)
        if result.exited != 0:
            self._fail("Upgrade", command, result)

    def run_full_install(self) -> None:
        """Run the install command.

        Raises:
            PackageManagerError: If the install command fails
        """
        result = self._run(self.config.install)
        if result.exited != 0:
            self._fail("Install", self.config.install, result)
