"""Run outcomes: RunResult, Failure, MinimalFailure and CheckResult."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from statecheck.core.command import Command
from statecheck.core.trace import ExecutionTrace
from statecheck.errors import StateCheckError, SutError
from statecheck.gen import Shrinkable


class RunStatus(Enum):
    """How a single run of a command sequence ended."""

    COMPLETED = "completed"  # reached its target length
    FAILED = "failed"  # a command's run() raised
    EXHAUSTED = "exhausted"  # no valid command could be generated
    INVALID = "invalid"  # replay only: a command's precondition no longer holds


@dataclass(frozen=True)
class Failure:
    """A command whose execution did not match the model.

    Attributes:
        position: Index of the failing command in its sequence.
        state_before: Model state the command was applied to.
        command: The failing command.
        error: What run() raised (usually an AssertionError).
        description: The command's describe() at failure time.
        traceback: Formatted traceback of the error.
    """

    position: int
    state_before: Any
    command: Command[Any, Any]
    error: BaseException
    description: str = ""
    traceback: str | None = None

    def __post_init__(self) -> None:
        if not self.description:
            object.__setattr__(self, "description", self.command.describe())

    @property
    def error_type(self) -> str:
        return type(self.error).__name__

    @property
    def message(self) -> str:
        """The assertion message, without error-code decoration."""
        if isinstance(self.error, StateCheckError):
            return self.error.message
        return str(self.error) or self.error_type

    def same_as(self, other: Failure) -> bool:
        """Same kind of failure: same error type raised by the same command kind."""
        return (
            type(self.error) is type(other.error)
            and type(self.command) is type(other.command)
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": self.position,
            "state_before": repr(self.state_before),
            "command": self.description,
            "error_type": self.error_type,
            "message": self.message,
        }


@dataclass
class RunResult:
    """The outcome of driving one command sequence against a fresh SUT.

    ``shrinkables`` holds the accepted commands in order and, when the run
    failed, the failing command last; they keep each command's shrink
    candidates for the shrinker.
    """

    status: RunStatus
    trace: ExecutionTrace
    shrinkables: list[Shrinkable[Command[Any, Any]]] = field(default_factory=list)
    seed: int | None = None
    size: int | None = None
    max_length: int | None = None
    failure: Failure | None = None
    error: StateCheckError | None = None
    sut_errors: list[SutError] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: datetime | None = None
    duration_ms: float = 0.0

    @property
    def completed(self) -> bool:
        return self.status is RunStatus.COMPLETED

    @property
    def failed(self) -> bool:
        return self.status is RunStatus.FAILED

    @property
    def exhausted(self) -> bool:
        return self.status is RunStatus.EXHAUSTED

    @property
    def length(self) -> int:
        """Number of commands applied successfully."""
        return len(self.trace)

    @property
    def commands(self) -> list[Command[Any, Any]]:
        return [s.value for s in self.shrinkables]

    @property
    def descriptions(self) -> list[str]:
        return [c.describe() for c in self.commands]

    def finish(self) -> None:
        """Mark the run as finished."""
        self.finished_at = datetime.now()
        self.duration_ms = (self.finished_at - self.started_at).total_seconds() * 1000

    def summary(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "status": self.status.value,
            "length": self.length,
            "seed": self.seed,
            "size": self.size,
            "duration_ms": round(self.duration_ms, 2),
        }
        if self.failure is not None:
            result["failure"] = self.failure.to_dict()
        if self.error is not None:
            result["error"] = self.error.to_dict()
        if self.sut_errors:
            result["sut_errors"] = [e.to_dict() for e in self.sut_errors]
        return result


@dataclass
class MinimalFailure:
    """The shrunk counterexample handed to reporters.

    Attributes:
        commands: The minimal failing sequence.
        failure: The failure it produces when replayed.
        original_length: Length of the sequence before shrinking.
        seed: Seed of the run that first failed.
        size: Size of that run.
        replays: SUT replays spent while shrinking.
        accepted: Shrink steps that were accepted.
        inconclusive: SUT lifecycle errors met while shrinking.
        budget_exhausted: Shrinking stopped at max_shrink_replays.
    """

    commands: list[Command[Any, Any]]
    failure: Failure
    original_length: int
    seed: int | None = None
    size: int | None = None
    replays: int = 0
    accepted: int = 0
    inconclusive: list[SutError] = field(default_factory=list)
    budget_exhausted: bool = False

    @property
    def sequence(self) -> list[str]:
        """Descriptions of the commands, in order."""
        return [c.describe() for c in self.commands]

    @property
    def assertion_info(self) -> str:
        return self.failure.message

    def __len__(self) -> int:
        return len(self.commands)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sequence": self.sequence,
            "failure": self.failure.to_dict(),
            "original_length": self.original_length,
            "seed": self.seed,
            "size": self.size,
            "replays": self.replays,
            "accepted": self.accepted,
            "inconclusive": [e.to_dict() for e in self.inconclusive],
            "budget_exhausted": self.budget_exhausted,
        }


@dataclass
class CheckResult:
    """Summary of a stateful property that held for every trial."""

    trials: int
    commands_run: int
    seed: int
    max_length_seen: int = 0
    sut_errors: list[SutError] = field(default_factory=list)

    def summary(self) -> dict[str, Any]:
        return {
            "trials": self.trials,
            "commands_run": self.commands_run,
            "seed": self.seed,
            "max_length_seen": self.max_length_seen,
            "sut_errors": len(self.sut_errors),
        }
