"""Graph workflow definition."""

from pydantic_graph import Graph

from bumpcat.core.config import State
from bumpcat.core.log import logger


def create_workflow():
    """Create the upgrade workflow graph.

    Initialize -> Upgrade(latest) -> Upgrade(compatible) -> Finalize

    Returns:
        Graph workflow with State as state_type
    """
    logger.debug("Building workflow graph")

    # Imported here so the graph can resolve the nodes' return hints
    from bumpcat.workflow.nodes.finalize import Finalize
    from bumpcat.workflow.nodes.initialize import Initialize
    from bumpcat.workflow.nodes.upgrade import Upgrade

    return Graph(
        nodes=(
            Initialize,
            Upgrade,
            Finalize,
        ),
        state_type=State
    )
