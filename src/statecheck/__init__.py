"""statecheck - Model-based stateful property testing.

Describe the system under test with a model state and a set of commands;
statecheck generates command sequences, runs them against the model and the
real system in lockstep, and shrinks any failing sequence to a minimal one.

Example:
    from statecheck import Command, CommandRegistry, CheckConfig, check

    class Increment(Command):
        def next_state(self, state):
            return state + 1

        def run(self, state, sut):
            sut.increment()
            assert_equal(state + 1, sut.value, "counter")

    check(0, Counter, CommandRegistry([Increment, Reset]), CheckConfig(seed=42))
"""

from statecheck.config import CheckConfig, load_config
from statecheck.core import (
    CheckResult,
    Command,
    CommandKind,
    CommandRegistry,
    ExecutionTrace,
    Failure,
    MinimalFailure,
    RunResult,
    RunStatus,
    TraceStep,
    any_command,
    assert_equal,
    discard,
    is_valid_command,
    precondition,
    seal,
)
from statecheck.enums import Selection, ShrinkStrategy
from statecheck.errors import (
    AssertionFailure,
    ConfigValidationError,
    ErrorCode,
    ErrorContext,
    GenerationExhausted,
    PreconditionRejected,
    RegistryError,
    StateCheckError,
    StatefulCheckFailed,
    SutConstructionError,
    SutError,
    SutTeardownError,
)
from statecheck.gen import Draw, Gen, Shrinkable, booleans, integers, just, sampled_from
from statecheck.reporters import ConsoleReporter, JSONReporter
from statecheck.runner import SequenceDriver, Shrinker, SutManager, check

__version__ = "0.1.0"

__all__ = [
    # Commands
    "Command",
    "CommandKind",
    "CommandRegistry",
    "any_command",
    "assert_equal",
    "discard",
    "is_valid_command",
    "precondition",
    "seal",
    # Generators
    "Draw",
    "Gen",
    "Shrinkable",
    "booleans",
    "integers",
    "just",
    "sampled_from",
    # Running
    "SequenceDriver",
    "Shrinker",
    "SutManager",
    "check",
    # Results
    "CheckResult",
    "ExecutionTrace",
    "Failure",
    "MinimalFailure",
    "RunResult",
    "RunStatus",
    "TraceStep",
    # Config
    "CheckConfig",
    "Selection",
    "ShrinkStrategy",
    "load_config",
    # Errors
    "AssertionFailure",
    "ConfigValidationError",
    "ErrorCode",
    "ErrorContext",
    "GenerationExhausted",
    "PreconditionRejected",
    "RegistryError",
    "StateCheckError",
    "StatefulCheckFailed",
    "SutConstructionError",
    "SutError",
    "SutTeardownError",
    # Reporters
    "ConsoleReporter",
    "JSONReporter",
]
