"""Finalize node - summarize every session."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from bumpcat.core.config import State
from bumpcat.core.log import logger
from bumpcat.upgrade.report import SessionReport
from bumpcat.upgrade.status import UpgradeMode


@dataclass
class Finalize(BaseNode[State, None, dict[UpgradeMode, SessionReport]]):
    """Log the outcome and end the workflow with the session reports."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> End[dict[UpgradeMode, SessionReport]]:
        upgrade = ctx.state.runtime.upgrade

        for mode, report in upgrade.reports.items():
            if report.good:
                logger.info(
                    f"Upgraded to {mode}: {', '.join(report.good)}"
                )
            if report.degraded:
                logger.warning(
                    f"Only upgraded to compatible versions: "
                    f"{', '.join(report.degraded)}"
                )
            if report.incompatible:
                logger.warning(
                    f"Could not upgrade to {mode}: "
                    f"{', '.join(report.incompatible)}"
                )

        upgrade.status = "complete"
        logger.info(
            f"Update complete after {len(upgrade.history)} trial(s)"
        )
        return End(dict(upgrade.reports))
