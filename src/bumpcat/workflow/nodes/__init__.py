"""Workflow nodes for graph state machine."""

from bumpcat.workflow.nodes.finalize import Finalize
from bumpcat.workflow.nodes.initialize import Initialize
from bumpcat.workflow.nodes.restore import Restore
from bumpcat.workflow.nodes.upgrade import Upgrade

__all__ = [
    "Initialize",
    "Upgrade",
    "Finalize",
    "Restore",
]
