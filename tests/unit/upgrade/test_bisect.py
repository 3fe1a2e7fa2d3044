"""Tests for the bisection scheduler."""

import math
import random

import pytest

from bumpcat.upgrade.bisect import BisectionScheduler, split_suspects
from bumpcat.upgrade.ledger import StatusLedger
from bumpcat.upgrade.status import DISPOSITIONS, Status, UpgradeMode

LATEST = UpgradeMode.LATEST
COMPATIBLE = UpgradeMode.COMPATIBLE


class ScriptedExecutor:
    """Fails any batch holding a package that breaks at the target."""

    def __init__(self, breaks=None):
        self.breaks = breaks or {}
        self.batches = []

    def trial(self, batch, target):
        batch = tuple(batch)
        assert batch, "scheduler must never try an empty batch"
        self.batches.append((batch, target))
        return not any(target in self.breaks.get(name, ()) for name in batch)


def run(roster, breaks=None, mode=LATEST):
    executor = ScriptedExecutor(breaks)
    ledger = StatusLedger(roster)
    rounds = BisectionScheduler(executor, mode).run(ledger)
    return ledger, executor, rounds


@pytest.mark.parametrize("size", range(0, 12))
def test_split_sizes(size):
    """Head is the first floor(n/2) suspects; head + tail is the input."""
    suspects = [f"pkg{i}" for i in range(size)]
    head, tail = split_suspects(suspects)

    assert len(head) == size // 2
    assert head + tail == tuple(suspects)


def test_split_does_not_alias_input():
    """Mutating the input afterwards leaves both halves untouched."""
    suspects = ["a", "b", "c"]
    head, tail = split_suspects(suspects)
    suspects.append("d")
    suspects[0] = "z"

    assert head == ("a",)
    assert tail == ("b", "c")


def test_scenario_one_blocker_degraded():
    """Only C breaks at latest; its compatible version works."""
    ledger, executor, _ = run(["A", "B", "C", "D"], {"C": {LATEST}})

    assert executor.batches == [
        (("A", "B", "C", "D"), LATEST),
        (("A", "B"), LATEST),
        (("C",), LATEST),
        (("C",), COMPATIBLE),
        (("D",), LATEST),
    ]
    assert ledger.dispositions() == {
        "A": Status.GOOD,
        "B": Status.GOOD,
        "C": Status.DEGRADED,
        "D": Status.GOOD,
    }


def test_scenario_one_blocker_incompatible():
    """C breaks at every version, so the fallback trial fails too."""
    ledger, executor, _ = run(
        ["A", "B", "C", "D"], {"C": {LATEST, COMPATIBLE}}
    )

    assert len(executor.batches) == 5
    assert ledger.get("C") is Status.INCOMPATIBLE
    assert ledger.filter(Status.GOOD) == ("A", "B", "D")


def test_compatible_mode_has_no_fallback():
    """In compatible mode the isolated blocker is incompatible at once."""
    ledger, executor, _ = run(
        ["A", "B", "C", "D"], {"C": {COMPATIBLE}}, mode=COMPATIBLE
    )

    assert executor.batches == [
        (("A", "B", "C", "D"), COMPATIBLE),
        (("A", "B"), COMPATIBLE),
        (("C",), COMPATIBLE),
        (("D",), COMPATIBLE),
    ]
    assert ledger.get("C") is Status.INCOMPATIBLE


def test_everything_passes_in_one_trial():
    ledger, executor, rounds = run(["a", "b", "c"])

    assert rounds == 1
    assert executor.batches == [(("a", "b", "c"), LATEST)]
    assert ledger.filter(Status.GOOD) == ("a", "b", "c")


def test_single_candidate_blocker():
    """A lone failing candidate is isolated without any bisection."""
    ledger, executor, _ = run(["only"], {"only": {LATEST, COMPATIBLE}})

    assert executor.batches == [
        (("only",), LATEST),
        (("only",), COMPATIBLE),
    ]
    assert ledger.get("only") is Status.INCOMPATIBLE


def test_resolved_ledger_runs_no_trials():
    """A fully resolved ledger needs zero trials."""
    ledger = StatusLedger(["a", "b", "c"])
    ledger.set("a", Status.GOOD)
    ledger.set("b", Status.INCOMPATIBLE)
    ledger.set("c", Status.DEGRADED)
    executor = ScriptedExecutor()

    rounds = BisectionScheduler(executor, LATEST).run(ledger)

    assert rounds == 0
    assert executor.batches == []


def test_empty_roster_runs_no_trials():
    ledger, executor, rounds = run([])

    assert rounds == 0
    assert executor.batches == []


@pytest.mark.parametrize("size", [1, 2, 3, 5, 8, 16, 33, 64])
def test_single_blocker_isolated_in_log_rounds(size):
    """One blocker anywhere is found within O(log n) trials."""
    roster = [f"pkg{i:02d}" for i in range(size)]
    bound = 2 * math.ceil(math.log2(size)) + 3 if size > 1 else 3

    for position in range(size):
        blocker = roster[position]
        ledger, executor, _ = run(roster, {blocker: {LATEST, COMPATIBLE}})

        assert ledger.get(blocker) is Status.INCOMPATIBLE
        assert len(ledger.filter(Status.GOOD)) == size - 1
        assert len(executor.batches) <= bound


def test_two_blockers_are_both_isolated():
    """Neither blocker masks the other."""
    roster = [str(i) for i in range(8)]
    ledger, _, _ = run(roster, {"1": {LATEST}, "6": {LATEST}})

    assert ledger.get("1") is Status.DEGRADED
    assert ledger.get("6") is Status.DEGRADED
    assert ledger.filter(Status.GOOD) == ("0", "2", "3", "4", "5", "7")


def test_adjacent_blockers():
    ledger, _, _ = run(
        ["a", "b", "c", "d"], {"c": {LATEST}, "d": {LATEST, COMPATIBLE}}
    )

    assert ledger.get("c") is Status.DEGRADED
    assert ledger.get("d") is Status.INCOMPATIBLE
    assert ledger.filter(Status.GOOD) == ("a", "b")


def test_failing_head_resets_tail_to_unresolved():
    """After a failing head, the tail is re-tried as fresh candidates."""
    ledger = StatusLedger(["a", "b", "c", "d"])
    executor = ScriptedExecutor({"a": {LATEST}})
    scheduler = BisectionScheduler(executor, LATEST)

    scheduler.step(ledger)
    assert ledger.filter(Status.SUSPECT) == ("a", "b", "c", "d")

    scheduler.step(ledger)
    assert executor.batches[-1] == (("a", "b"), LATEST)
    assert ledger.filter(Status.SUSPECT) == ("a", "b")
    assert ledger.filter(Status.UNRESOLVED) == ("c", "d")


def test_random_blocker_sets_classify_exactly():
    """Blockers never end GOOD, everything else always does."""
    rng = random.Random(1234)
    for _ in range(200):
        size = rng.randint(1, 20)
        roster = [f"p{i}" for i in range(size)]
        blockers = {name for name in roster if rng.random() < 0.2}
        hard = {name for name in blockers if rng.random() < 0.5}
        breaks = {name: {LATEST} for name in blockers}
        for name in hard:
            breaks[name] = {LATEST, COMPATIBLE}

        ledger, _, _ = run(roster, breaks)
        dispositions = ledger.dispositions()

        assert not ledger.pending()
        assert set(dispositions) == set(roster)
        assert all(status in DISPOSITIONS for status in dispositions.values())
        for name in roster:
            if name in hard:
                assert dispositions[name] is Status.INCOMPATIBLE
            elif name in blockers:
                assert dispositions[name] is Status.DEGRADED
            else:
                assert dispositions[name] is Status.GOOD


def test_lone_suspect_at_start_is_isolated():
    """A ledger that starts with one suspect never tries an empty head."""
    executor = ScriptedExecutor({"a": {LATEST}})
    ledger = StatusLedger(["a", "b"])
    ledger.set("a", Status.SUSPECT)

    BisectionScheduler(executor, LATEST).run(ledger)

    assert executor.batches == [
        (("a",), COMPATIBLE),
        (("b",), LATEST),
    ]
    assert ledger.get("a") is Status.DEGRADED
    assert ledger.get("b") is Status.GOOD


def test_lone_suspect_at_start_compatible_mode():
    executor = ScriptedExecutor()
    ledger = StatusLedger(["a"])
    ledger.set("a", Status.SUSPECT)

    rounds = BisectionScheduler(executor, COMPATIBLE).run(ledger)

    assert rounds == 1
    assert executor.batches == []
    assert ledger.get("a") is Status.INCOMPATIBLE
