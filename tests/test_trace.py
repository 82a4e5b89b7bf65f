"""Tests for ExecutionTrace."""

from __future__ import annotations

import pytest

from counter_model import Decrement, Increment, Reset
from statecheck import ExecutionTrace, PreconditionRejected, TraceStep


class TestDerive:

    def test_states_follow_next_state(self):
        trace = ExecutionTrace.derive(0, [Increment(), Increment(), Reset(), Increment()])
        assert trace.states == [0, 1, 2, 0, 1]
        assert trace.final_state == 1
        assert len(trace) == 4

    def test_empty_sequence(self):
        trace = ExecutionTrace.derive(5, [])
        assert trace.final_state == 5
        assert trace.states == [5]
        assert trace.commands == []

    def test_replay_is_deterministic(self):
        commands = [Increment(), Increment(), Decrement(), Reset(), Increment()]
        assert (
            ExecutionTrace.derive(0, commands).final_state
            == ExecutionTrace.derive(0, commands).final_state
        )

    def test_invalid_command_rejected_with_position(self):
        with pytest.raises(PreconditionRejected) as exc_info:
            ExecutionTrace.derive(0, [Increment(), Decrement(), Decrement()])
        context = exc_info.value.context
        assert context.position == 2
        assert context.command == "Decrement"
        assert context.model_state == 0

    def test_steps(self):
        inc, reset = Increment(), Reset()
        trace = ExecutionTrace.derive(3, [inc, reset])
        assert list(trace) == [
            TraceStep(0, 3, inc, 4),
            TraceStep(1, 4, reset, 0),
        ]
        assert trace.commands == [inc, reset]


class TestAppend:

    def test_returns_state_after(self):
        trace = ExecutionTrace(0)
        assert trace.append(Increment(), 0, 1) == 1
        assert trace.final_state == 1
        assert trace.steps[0].position == 0
