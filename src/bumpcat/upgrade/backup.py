"""Backup store - whole-file snapshots of the manifest and lock file."""

import shutil
from pathlib import Path

from bumpcat.core.errors import BackupError, SetupError
from bumpcat.core.log import logger

DEFAULT_SUFFIX = ".bumpcat-backup"


class FileBackupStore:
    """Keeps one snapshot of each tracked file beside it.

    The snapshot of `package.json` is `package.json.bumpcat-backup`. The
    name is fixed so that a snapshot left behind by a crashed run can be
    found by the next one.

    A tracked file that does not exist at snapshot time is remembered as
    absent; restore() then deletes it if an upgrade created it.
    """

    def __init__(self, workdir: Path, files: list[str],
                 suffix: str = DEFAULT_SUFFIX):
        """Initialize backup store.

        Args:
            workdir: Project directory holding the tracked files
            files: Tracked file names, relative to workdir
            suffix: Appended to a tracked file's name for its snapshot
        """
        self.workdir = Path(workdir)
        self.files = [self.workdir / name for name in files]
        self.suffix = suffix
        self.generation = 0
        self._absent: set[Path] = set()

    def backup_path(self, path: Path) -> Path:
        return path.with_name(path.name + self.suffix)

    def leftovers(self) -> list[Path]:
        """Snapshot files currently on disk."""
        return [
            self.backup_path(path) for path in self.files
            if self.backup_path(path).exists()
        ]

    @property
    def has_snapshot(self) -> bool:
        return self.generation > 0

    def ensure_clean(self) -> None:
        """Refuse to start over a snapshot left by an earlier run.

        Raises:
            SetupError: With the commands to restore or drop the snapshot
        """
        leftovers = self.leftovers()
        if not leftovers:
            return

        restore_cmds = []
        discard_cmds = []
        for backup in leftovers:
            original = backup.name[:-len(self.suffix)]
            restore_cmds.append(f"mv {backup.name} {original}")
            discard_cmds.append(f"rm {backup.name}")

        raise SetupError(
            f"{', '.join(b.name for b in leftovers)} already exists in "
            f"{self.workdir}, probably from a failed previous run\n"
            f"To restore the backup, run: {' && '.join(restore_cmds)}\n"
            f"  (or: bumpcat restore)\n"
            f"To discard it, run: {' && '.join(discard_cmds)}\n"
            f"  (or: bumpcat restore --discard)"
        )

    def snapshot(self) -> None:
        """Copy the tracked files to their snapshot locations."""
        absent = set()
        for path in self.files:
            backup = self.backup_path(path)
            if path.exists():
                logger.debug(f"$ cp {path.name} {backup.name}")
                shutil.copyfile(path, backup)
            else:
                absent.add(path)
                backup.unlink(missing_ok=True)
        self._absent = absent
        self.generation += 1

    def restore(self) -> None:
        """Put the tracked files back to the last snapshot.

        Raises:
            BackupError: If no snapshot was taken by this store
        """
        if not self.has_snapshot:
            raise BackupError("Cannot restore: no snapshot has been taken")

        for path in self.files:
            if path in self._absent:
                if path.exists():
                    logger.debug(f"$ rm {path.name}")
                    path.unlink()
                continue
            backup = self.backup_path(path)
            if not backup.exists():
                raise BackupError(f"Snapshot {backup} disappeared")
            logger.debug(f"$ cp {backup.name} {path.name}")
            shutil.copyfile(backup, path)

    def discard(self) -> None:
        for path in self.files:
            backup = self.backup_path(path)
            if backup.exists():
                logger.debug(f"$ rm {backup.name}")
                backup.unlink()
        self._absent = set()
        self.generation = 0

    def recover(self) -> list[Path]:
        """Move snapshots left by a crashed run back over the tracked files.

        Returns:
            The files that were restored
        """
        restored = []
        for path in self.files:
            backup = self.backup_path(path)
            if backup.exists():
                logger.debug(f"$ mv {backup.name} {path.name}")
                backup.replace(path)
                restored.append(path)
        return restored
