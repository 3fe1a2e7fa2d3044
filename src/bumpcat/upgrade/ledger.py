"""Status ledger - the per-session record of candidate statuses."""

from collections.abc import Iterable

from bumpcat.upgrade.status import Status


class StatusLedger:
    """Maps each candidate of a roster to its current Status.

    The roster order is fixed at construction and every query preserves
    it. Candidates not explicitly set are UNRESOLVED. Once a candidate
    reaches a resolved status it cannot be moved to another one.
    """

    def __init__(self, roster: Iterable[str]):
        self.roster: tuple[str, ...] = tuple(dict.fromkeys(roster))
        self._statuses: dict[str, Status] = {}

    def __len__(self) -> int:
        return len(self.roster)

    def __contains__(self, candidate: str) -> bool:
        return candidate in self.roster

    def _check_known(self, candidate: str) -> None:
        if candidate not in self.roster:
            raise KeyError(f"Unknown candidate: {candidate}")

    def get(self, candidate: str) -> Status:
        self._check_known(candidate)
        return self._statuses.get(candidate, Status.UNRESOLVED)

    def set(self, candidate: str, status: Status) -> None:
        """Set a candidate's status.

        Raises:
            KeyError: If the candidate is not in the roster
            ValueError: If the candidate already holds a different
                resolved status
        """
        current = self.get(candidate)
        if current.resolved and current is not status:
            raise ValueError(
                f"{candidate} is already resolved as {current}, "
                f"cannot change it to {status}"
            )
        if status is Status.UNRESOLVED:
            self._statuses.pop(candidate, None)
        else:
            self._statuses[candidate] = status

    def clear(self, candidate: str) -> None:
        self.set(candidate, Status.UNRESOLVED)

    def filter(self, status: Status) -> tuple[str, ...]:
        """Candidates holding `status`, in roster order."""
        return tuple(c for c in self.roster if self.get(c) is status)

    def pending(self) -> bool:
        """True while any candidate is UNRESOLVED or SUSPECT."""
        return any(not self.get(c).resolved for c in self.roster)

    def dispositions(self) -> dict[str, Status]:
        return {c: self.get(c) for c in self.roster}

    def summary(self) -> dict[str, list[str]]:
        """Non-empty status groups, keyed by status name."""
        groups = {status.value: list(self.filter(status)) for status in Status}
        return {name: members for name, members in groups.items() if members}
