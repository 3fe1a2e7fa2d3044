"""Candidate statuses and upgrade modes."""

from enum import StrEnum


class Status(StrEnum):
    """Lifecycle status of one candidate within a session."""

    UNRESOLVED = "unresolved"
    """Not yet classified; included in the next fresh batch."""
    SUSPECT = "suspect"
    """Was in a failing batch; individual guilt not yet known."""
    GOOD = "good"
    """Upgraded to the session's target and committed."""
    INCOMPATIBLE = "incompatible"
    """Isolated as a blocker; left at its current version."""
    DEGRADED = "degraded"
    """Blocks "latest" but was upgraded to its highest compatible version."""

    @property
    def resolved(self) -> bool:
        return self not in (Status.UNRESOLVED, Status.SUSPECT)


class UpgradeMode(StrEnum):
    """Version target of a session."""

    LATEST = "latest"
    COMPATIBLE = "compatible"


DISPOSITIONS = (Status.GOOD, Status.INCOMPATIBLE, Status.DEGRADED)
