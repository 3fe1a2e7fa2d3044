"""Fatal error types.

A dependency that breaks the test suite is never an error; it only ends
up with a disposition. These exceptions cover the cases where the
session itself cannot continue.
"""


class BumpcatError(RuntimeError):
    """Base class for fatal bumpcat errors."""


class SetupError(BumpcatError):
    """The project is not in a state where an upgrade can start.

    Raised before any candidate is touched: a leftover snapshot from a
    crashed run, or a baseline install/test run that already fails.
    """


class PackageManagerError(BumpcatError):
    """The package manager command itself failed.

    Distinct from a failing test run: it may reflect a broken
    environment rather than a bad dependency, so it aborts the session.
    """

    def __init__(self, message: str, command: str | None = None,
                 returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class BackupError(BumpcatError):
    """Snapshot store misuse, such as restoring without a snapshot."""


__all__ = [
    "BumpcatError",
    "SetupError",
    "PackageManagerError",
    "BackupError",
]
