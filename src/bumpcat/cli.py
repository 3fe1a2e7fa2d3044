#!/usr/bin/env python3
"""Bumpcat CLI - test-guarded dependency upgrades."""

import asyncio
import sys

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from bumpcat.command.restore import RestoreCommand
from bumpcat.command.upgrade import UpgradeCommand
from bumpcat.core.config import State
from bumpcat.core.log import logger


class CliState(State):
    """Upgrade a project's dependencies without breaking its tests.

    Bumpcat upgrades outdated dependencies in batches, runs the test
    suite after each batch, and bisects failing batches until the
    dependencies that break the tests are isolated and left out.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.test.command value)
    2. bumpcat.yaml in the current directory
    3. .env file
    4. Environment variables (BUMPCAT_CONFIG__TEST__COMMAND=value)
    """

    upgrade: CliSubCommand[UpgradeCommand]
    restore: CliSubCommand[RestoreCommand]

    def cli_cmd(self):
        """Dispatch to the active subcommand, or show help if none."""
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        # Closing the logger flushes file sinks even on failure
        with logger:
            exit_code = asyncio.run(subcommand.run_workflow(self))
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
