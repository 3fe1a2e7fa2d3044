"""Per-session disposition report."""

from pydantic import BaseModel, Field

from bumpcat.core.result import TrialRecord
from bumpcat.upgrade.status import Status, UpgradeMode


class SessionReport(BaseModel):
    """Final disposition of every candidate in one session."""

    mode: UpgradeMode
    dispositions: dict[str, Status] = Field(default_factory=dict)
    trials: list[TrialRecord] = Field(default_factory=list)

    def with_status(self, status: Status) -> list[str]:
        return [
            name for name, value in self.dispositions.items()
            if value is status
        ]

    @property
    def good(self) -> list[str]:
        return self.with_status(Status.GOOD)

    @property
    def incompatible(self) -> list[str]:
        return self.with_status(Status.INCOMPATIBLE)

    @property
    def degraded(self) -> list[str]:
        return self.with_status(Status.DEGRADED)

    @property
    def trial_count(self) -> int:
        return len(self.trials)
