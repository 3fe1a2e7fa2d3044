"""Result types for test runs and upgrade trials."""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field

from bumpcat.upgrade.status import UpgradeMode


class CheckResult(BaseModel):
    """Result of one test suite run."""

    check_name: str
    success: bool
    log_file: Path | None
    returncode: int
    timestamp: datetime


class TrialRecord(BaseModel):
    """One trial: a batch tried on top of the committed baseline.

    index counts trials, so an isolation fallback gets its own number
    within the round that triggered it.
    """

    index: int
    batch: tuple[str, ...]
    target: UpgradeMode
    baseline: int = Field(
        description="Snapshot generation the batch was applied on top of"
    )
    passed: bool
    log_file: Path | None = None
