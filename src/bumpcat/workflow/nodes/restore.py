"""Restore node - recover from snapshots left by a crashed run."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from bumpcat.core.config import State
from bumpcat.core.log import logger
from bumpcat.upgrade.backup import FileBackupStore


@dataclass
class Restore(BaseNode[State]):
    """Put leftover snapshots back in place, or delete them."""

    async def run(self, ctx: GraphRunContext[State]) -> End[None]:
        project = ctx.state.config.project
        restore = ctx.state.runtime.restore
        backup = FileBackupStore(
            project.workdir,
            [project.manifest, project.lock_file],
            suffix=ctx.state.config.backup.suffix,
        )

        leftovers = backup.leftovers()
        if not leftovers:
            logger.warning(f"No snapshots found in {project.workdir}")
            restore.status = "complete"
            return End(None)

        if restore.discard:
            backup.discard()
            restore.files = leftovers
            logger.info(
                f"Discarded {', '.join(p.name for p in leftovers)}"
            )
        else:
            restore.files = backup.recover()
            logger.info(
                f"Restored {', '.join(p.name for p in restore.files)}"
            )

        restore.status = "complete"
        return End(None)
