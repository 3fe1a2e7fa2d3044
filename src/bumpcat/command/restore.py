"""Restore command - recovers from a crashed run's snapshots."""

from pydantic import BaseModel, Field

from bumpcat.core.log import logger


class RestoreCommand(BaseModel):
    """Restore the manifest and lock file from a leftover snapshot.

    A run that aborts leaves its snapshot beside the manifest, and the
    next run refuses to start until it is dealt with. This moves the
    snapshot back in place, or deletes it with --discard.
    """

    discard: bool = Field(
        default=False,
        description="Delete the leftover snapshot instead of restoring it"
    )

    async def run_workflow(self, state: "State") -> int:
        """Run restore workflow.

        Args:
            state: State instance

        Returns:
            Exit code (0=success)
        """
        from pydantic_graph import Graph

        from bumpcat.workflow.nodes.restore import Restore

        state.runtime.restore.discard = self.discard

        workflow = Graph(nodes=(Restore,), state_type=type(state))
        async with workflow.iter(Restore(), state=state) as run:
            async for _node in run:
                pass

        logger.info("Restore complete")
        return 0
