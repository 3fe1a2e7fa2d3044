"""Upgrade node - one bisection session for one upgrade mode."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from bumpcat.core.config import State
from bumpcat.core.log import logger


@dataclass
class Upgrade(BaseNode[State]):
    """Run the session for config.upgrade.modes[index]."""

    index: int

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> "Upgrade | Finalize":
        """Resolve every outdated dependency for this mode.

        Returns:
            Upgrade: For the next configured mode
            Finalize: After the last mode
        """
        modes = ctx.state.config.upgrade.modes
        mode = modes[self.index]
        upgrade = ctx.state.runtime.upgrade
        upgrade.current_mode = mode

        logger.info(
            f"Attempting to upgrade all packages to {mode} versions"
        )
        report = upgrade.session.run(mode)
        upgrade.reports[mode] = report
        upgrade.history.extend(report.trials)

        if self.index + 1 < len(modes):
            return Upgrade(index=self.index + 1)

        from bumpcat.workflow.nodes.finalize import Finalize
        return Finalize()
