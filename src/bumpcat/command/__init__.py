"""CLI command modules for bumpcat."""

from bumpcat.command.restore import RestoreCommand
from bumpcat.command.upgrade import UpgradeCommand

__all__ = ["RestoreCommand", "UpgradeCommand"]
