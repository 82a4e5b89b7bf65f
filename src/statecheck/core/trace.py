"""Execution trace: the model-side history of a command sequence."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from statecheck.core.command import Command, is_valid_command
from statecheck.errors import ErrorContext, PreconditionRejected


@dataclass(frozen=True)
class TraceStep:
    """Records one model transition: state_before -> command -> state_after."""

    position: int
    state_before: Any
    command: Command[Any, Any]
    state_after: Any


@dataclass
class ExecutionTrace:
    """Ordered model transitions of a sequence, starting at initial_state.

    Can be derived from the model alone (``derive``), which lets the shrinker
    reject candidates whose preconditions no longer hold without touching
    the SUT.
    """

    initial_state: Any
    steps: list[TraceStep] = field(default_factory=list)

    @classmethod
    def derive(cls, initial_state: Any, commands: Sequence[Command[Any, Any]]) -> ExecutionTrace:
        """Apply commands to the model only.

        Raises:
            PreconditionRejected: a command is invalid at its position; the
                position is in ``error.context.position``.
        """
        trace = cls(initial_state)
        state = initial_state
        for position, command in enumerate(commands):
            if not is_valid_command(command, state):
                raise PreconditionRejected(
                    f"{command.describe()} is not valid at position {position}",
                    context=ErrorContext(
                        command=command.describe(),
                        position=position,
                        model_state=state,
                    ),
                )
            state = trace.append(command, state, command.next_state(state))
        return trace

    def append(self, command: Command[Any, Any], state_before: Any, state_after: Any) -> Any:
        """Record a transition and return state_after."""
        self.steps.append(TraceStep(len(self.steps), state_before, command, state_after))
        return state_after

    @property
    def final_state(self) -> Any:
        if not self.steps:
            return self.initial_state
        return self.steps[-1].state_after

    @property
    def commands(self) -> list[Command[Any, Any]]:
        return [step.command for step in self.steps]

    @property
    def states(self) -> list[Any]:
        """Every model state visited, initial state included."""
        return [self.initial_state] + [step.state_after for step in self.steps]

    def __iter__(self) -> Iterator[TraceStep]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)
