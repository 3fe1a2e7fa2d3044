"""Upgrade command - runs the upgrade workflow."""

from pydantic import BaseModel

from bumpcat.core.errors import BumpcatError
from bumpcat.core.log import logger


class UpgradeCommand(BaseModel):
    """Upgrade dependencies while keeping the test suite green.

    Tries every outdated dependency at its latest version, bisects
    failing batches to find the dependencies that break the tests,
    falls back to their highest compatible version where possible, then
    repeats for compatible versions.

    All configuration comes from bumpcat.yaml, .env, or CLI flags.
    """

    async def run_workflow(self, state: "State") -> int:
        """Run upgrade workflow.

        Args:
            state: State instance with config loaded

        Returns:
            Exit code (0=success, 1=failure)
        """
        from bumpcat.workflow.graph import create_workflow
        from bumpcat.workflow.nodes.initialize import Initialize

        workflow = create_workflow()

        try:
            async with workflow.iter(Initialize(), state=state) as run:
                async for _node in run:
                    pass
        except BumpcatError as e:
            state.runtime.upgrade.status = "failed"
            logger.error(str(e))
            return 1

        if run.result is None:
            logger.error("Upgrade failed - workflow ended unexpectedly")
            return 1
        return 0
