"""Bisection scheduler - isolates dependencies that break the tests."""

from collections.abc import Sequence

from bumpcat.core.log import logger
from bumpcat.upgrade.base import Trial
from bumpcat.upgrade.ledger import StatusLedger
from bumpcat.upgrade.status import Status, UpgradeMode


def split_suspects(
    suspects: Sequence[str],
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Split suspects into (head, tail) with len(head) == len // 2.

    head is tried next; tail waits. Order is preserved, so head + tail
    always reconstructs the input.
    """
    mid = len(suspects) // 2
    return tuple(suspects[:mid]), tuple(suspects[mid:])


class BisectionScheduler:
    """Chooses each round's batch and classifies candidates from the result.

    Each round either tries every UNRESOLVED candidate at once, or, when
    a previous batch failed, the first half of the SUSPECT candidates.
    Passing batches are committed and stay committed, so later batches
    are tried on top of everything already marked GOOD.

    When a single suspect is left it is the blocker. In LATEST mode it
    gets one more trial at its highest compatible version, which decides
    between DEGRADED and INCOMPATIBLE.
    """

    def __init__(self, executor: Trial, mode: UpgradeMode):
        """Initialize scheduler.

        Args:
            executor: Runs a batch and reports pass/fail
            mode: Version target of this session
        """
        self.executor = executor
        self.mode = mode
        self.rounds = 0

    def step(self, ledger: StatusLedger) -> None:
        """Run one round and update the ledger from its outcome."""
        self.rounds += 1
        suspects = ledger.filter(Status.SUSPECT)

        # A ledger handed in from outside may already hold a lone suspect
        if len(suspects) == 1:
            self.isolate(ledger, suspects[0])
        elif suspects:
            head, tail = split_suspects(suspects)
            logger.info(
                f"Round {self.rounds}: trying {len(head)} of "
                f"{len(suspects)} suspects",
                batch=list(head),
            )
            if self.executor.trial(head, self.mode):
                for candidate in head:
                    ledger.set(candidate, Status.GOOD)
            else:
                for candidate in tail:
                    ledger.clear(candidate)
        else:
            unknowns = ledger.filter(Status.UNRESOLVED)
            logger.info(
                f"Round {self.rounds}: trying {len(unknowns)} "
                f"unresolved candidates",
                batch=list(unknowns),
            )
            new_status = (
                Status.GOOD if self.executor.trial(unknowns, self.mode)
                else Status.SUSPECT
            )
            for candidate in unknowns:
                ledger.set(candidate, new_status)

        suspects = ledger.filter(Status.SUSPECT)
        if len(suspects) == 1:
            self.isolate(ledger, suspects[0])

        logger.info(f"Round {self.rounds} done", **ledger.summary())

    def isolate(self, ledger: StatusLedger, blocker: str) -> None:
        """Resolve the last remaining suspect."""
        if self.mode is UpgradeMode.LATEST:
            logger.warning(
                f"{blocker} breaks the tests at its latest version, "
                f"trying its highest compatible version"
            )
            if self.executor.trial((blocker,), UpgradeMode.COMPATIBLE):
                ledger.set(blocker, Status.DEGRADED)
                return
        logger.warning(f"{blocker} cannot be upgraded ({self.mode})")
        ledger.set(blocker, Status.INCOMPATIBLE)

    def run(self, ledger: StatusLedger) -> int:
        """Run rounds until every candidate is resolved.

        Returns:
            Number of rounds run
        """
        start = self.rounds
        while ledger.pending():
            self.step(ledger)
        return self.rounds - start
