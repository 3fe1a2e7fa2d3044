"""Initialize node - pre-checks before anything is upgraded."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from bumpcat.core.config import State
from bumpcat.core.log import logger
from bumpcat.upgrade.session import UpgradeSession


@dataclass
class Initialize(BaseNode[State]):
    """Wire the upgrade session and verify the untouched project."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> "Upgrade | Finalize":
        """Refuse leftover snapshots and make sure the tests pass now.

        Returns:
            Upgrade: For the first configured mode
            Finalize: If no modes are configured
        """
        upgrade = ctx.state.runtime.upgrade
        if upgrade.session is None:
            upgrade.session = UpgradeSession.from_config(ctx.state.config)

        logger.info(
            f"Upgrading dependencies in "
            f"{ctx.state.config.project.workdir.resolve()}"
        )
        upgrade.session.precheck()
        upgrade.status = "running"

        if not ctx.state.config.upgrade.modes:
            logger.warning("No upgrade modes configured")
            from bumpcat.workflow.nodes.finalize import Finalize
            return Finalize()

        from bumpcat.workflow.nodes.upgrade import Upgrade
        return Upgrade(index=0)
