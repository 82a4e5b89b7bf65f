"""Core data objects: commands, the registry, traces and run results."""

from statecheck.core.command import (
    Command,
    assert_equal,
    discard,
    is_valid_command,
    precondition,
    seal,
)
from statecheck.core.registry import CommandKind, CommandRegistry, any_command
from statecheck.core.result import CheckResult, Failure, MinimalFailure, RunResult, RunStatus
from statecheck.core.trace import ExecutionTrace, TraceStep

__all__ = [
    "Command",
    "CommandKind",
    "CommandRegistry",
    "CheckResult",
    "ExecutionTrace",
    "Failure",
    "MinimalFailure",
    "RunResult",
    "RunStatus",
    "TraceStep",
    "any_command",
    "assert_equal",
    "discard",
    "is_valid_command",
    "precondition",
    "seal",
]
