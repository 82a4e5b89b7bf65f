"""Tests for the Command contract and the helpers commands use."""

from __future__ import annotations

import pytest

from counter_model import Add, Counter, Decrement, Increment, OnlyFromZero, Reset
from statecheck import (
    AssertionFailure,
    Command,
    PreconditionRejected,
    assert_equal,
    discard,
    is_valid_command,
    precondition,
    seal,
)
from statecheck.gen import Draw


class Discarding(Command[int, Counter]):
    def next_state(self, state: int) -> int:
        precondition(state < 3, "too big")
        return state + 1


class TestCommandDefaults:

    def test_next_state_unchanged(self):
        assert Command().next_state(42) == 42

    def test_run_does_nothing(self):
        sut = Counter()
        assert Command().run(0, sut) is None
        assert sut.value == 0

    def test_always_valid(self):
        assert Command().is_valid(object())


class TestDescribe:

    def test_without_parameters(self):
        assert Reset().describe() == "Reset"
        assert str(Increment()) == "Increment"

    def test_with_parameters(self):
        add = Add(Draw(seed=1, size=10))
        assert add.describe() == f"Add(amount={add.amount})"
        assert repr(add) == add.describe()

    def test_private_attributes_hidden(self):
        cmd = Increment()
        cmd._note = "internal"
        assert cmd.describe() == "Increment"


class TestSealing:

    def test_unsealed_is_mutable(self):
        cmd = Add(Draw(seed=1, size=10))
        cmd.amount = 3
        assert cmd.amount == 3

    def test_sealed_rejects_assignment(self):
        cmd = seal(Add(Draw(seed=1, size=10)))
        with pytest.raises(AttributeError, match="immutable"):
            cmd.amount = 3

    def test_sealed_rejects_deletion(self):
        cmd = seal(Add(Draw(seed=1, size=10)))
        with pytest.raises(AttributeError):
            del cmd.amount

    def test_seal_returns_same_instance(self):
        cmd = Reset()
        assert seal(cmd) is cmd


class TestValidity:

    def test_is_valid_false(self):
        assert not is_valid_command(Decrement(), 0)
        assert is_valid_command(Decrement(), 1)

    def test_next_state_discard_is_invalid(self):
        assert is_valid_command(Discarding(), 2)
        assert not is_valid_command(Discarding(), 3)

    def test_constructor_discard(self):
        with pytest.raises(PreconditionRejected):
            OnlyFromZero(state=1)
        assert OnlyFromZero(state=0).next_state(0) == 1


class TestHelpers:

    def test_discard(self):
        with pytest.raises(PreconditionRejected) as exc_info:
            discard("not now")
        assert exc_info.value.message == "not now"

    def test_discard_default_message(self):
        with pytest.raises(PreconditionRejected) as exc_info:
            discard()
        assert exc_info.value.message == "Command discarded for this state"

    def test_precondition(self):
        precondition(True)
        with pytest.raises(PreconditionRejected, match="needs items"):
            precondition(False, "needs items")

    def test_assert_equal_passes(self):
        assert_equal(1, 1)

    def test_assert_equal_fails(self):
        with pytest.raises(AssertionFailure) as exc_info:
            assert_equal(0, 1, "counter")
        error = exc_info.value
        assert isinstance(error, AssertionError)
        assert error.message == "counter: expected 0, got 1"
        assert error.expected == 0
        assert error.actual == 1

    def test_run_checks_sut(self):
        with pytest.raises(AssertionFailure):
            Reset().run(3, Counter(buggy_reset=True))
