"""Tests for the transaction lifecycle tracker."""

import pytest

from erc8004_agent.errors import BusyError
from erc8004_agent.models import TransactionStatus
from erc8004_agent.registry import TransactionTracker


def _record(tracker):
    seen = []
    tracker.subscribe(lambda state: seen.append(state.status))
    return seen


def test_starts_idle():
    tracker = TransactionTracker()
    assert tracker.state.status is TransactionStatus.IDLE
    assert tracker.state.tx_hash is None
    assert not tracker.state.is_settled


def test_success_sequence():
    tracker = TransactionTracker()
    seen = _record(tracker)

    tracker.begin()
    tracker.succeed("0xabc")

    assert seen == [TransactionStatus.PENDING, TransactionStatus.SUCCESS]
    assert tracker.state.tx_hash == "0xabc"
    assert tracker.state.is_settled


def test_error_sequence_keeps_error():
    tracker = TransactionTracker()
    seen = _record(tracker)
    error = RuntimeError("boom")

    tracker.begin()
    tracker.fail(error)

    assert seen == [TransactionStatus.PENDING, TransactionStatus.ERROR]
    assert tracker.state.error is error


def test_settled_state_can_reenter_pending():
    tracker = TransactionTracker()
    tracker.begin()
    tracker.fail(RuntimeError("first"))

    tracker.begin()

    assert tracker.is_pending
    assert tracker.state.error is None


def test_idle_cannot_settle_directly():
    tracker = TransactionTracker()
    with pytest.raises(RuntimeError, match="Cannot move from idle to success"):
        tracker.succeed("0xabc")
    with pytest.raises(RuntimeError, match="Cannot move from idle to error"):
        tracker.fail(RuntimeError("boom"))
    assert tracker.state.status is TransactionStatus.IDLE


def test_begin_while_pending_is_rejected():
    tracker = TransactionTracker()
    tracker.begin()

    with pytest.raises(BusyError):
        tracker.begin()

    assert tracker.is_pending


def test_unsubscribe_and_failing_listener():
    tracker = TransactionTracker()
    seen = []

    def broken(state):
        raise ValueError("listener bug")

    tracker.subscribe(broken)
    unsubscribe = tracker.subscribe(lambda state: seen.append(state.status))

    tracker.begin()
    unsubscribe()
    tracker.succeed("0xabc")

    assert seen == [TransactionStatus.PENDING]
    assert tracker.state.status is TransactionStatus.SUCCESS
