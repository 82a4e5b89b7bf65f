"""Custom exception hierarchy for statecheck.

statecheck errors carry:
- A structured error code for programmatic handling
- Rich context (command, position, model state, seed) for debugging
- Actionable suggestions for fixing the model or the SUT

All statecheck errors inherit from StateCheckError. Some of them are not
program errors at all but signals consumed by the engine:

- PreconditionRejected is recovered locally by generating another command.
- AssertionFailure is what the engine exists to find; it is captured as a
  Failure and handed to the shrinker.

Example:
    try:
        check(0, Counter, registry)
    except StatefulCheckFailed as e:
        print(e.minimal.sequence)
    except GenerationExhausted as e:
        print(f"Error [{e.error_code.value}]: {e.message}")
        for suggestion in e.suggestions:
            print(f"  - {suggestion}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from statecheck.core.result import MinimalFailure


class ErrorCode(Enum):
    """Standardized error codes for statecheck.

    Error codes are organized by category:
    - E1xx: Generation errors
    - E2xx: Execution errors
    - E3xx: SUT lifecycle errors
    - E4xx: Setup errors (configuration, registration)
    - E5xx: Property results
    - E9xx: Unknown/internal errors
    """

    # Generation errors (E1xx)
    PRECONDITION_REJECTED = "E101"
    GENERATION_EXHAUSTED = "E102"

    # Execution errors (E2xx)
    ASSERTION_FAILED = "E201"

    # SUT lifecycle errors (E3xx)
    SUT_CONSTRUCTION_FAILED = "E301"
    SUT_TEARDOWN_FAILED = "E302"

    # Setup errors (E4xx)
    INVALID_CONFIG = "E401"
    INVALID_REGISTRY = "E402"

    # Property results (E5xx)
    PROPERTY_FAILED = "E501"

    # Unknown/internal errors (E9xx)
    UNKNOWN = "E999"

    @property
    def category(self) -> str:
        """Get the error category name."""
        code_num = int(self.value[1:])
        if code_num < 200:
            return "generation"
        elif code_num < 300:
            return "execution"
        elif code_num < 400:
            return "sut"
        elif code_num < 500:
            return "setup"
        elif code_num < 600:
            return "property"
        else:
            return "unknown"


@dataclass
class ErrorContext:
    """Structured context for error logging and debugging.

    Attributes:
        command: Description of the command involved (if any)
        position: Index of that command in its sequence
        model_state: The model state the command was applied to
        seed: Seed of the run, enough to replay it
        extra: Additional context-specific information
        timestamp: When the error occurred
        traceback: Full stack trace (if available)
    """

    command: str | None = None
    position: int | None = None
    model_state: Any = None
    seed: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)
    traceback: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for serialization."""
        result = {
            "command": self.command,
            "position": self.position,
            "model_state": repr(self.model_state) if self.model_state is not None else None,
            "seed": self.seed,
            "extra": self.extra,
            "timestamp": self.timestamp.isoformat(),
            "traceback": self.traceback,
        }
        return {k: v for k, v in result.items() if v is not None}

    def format_location(self) -> str:
        """Format the error location as a readable string."""
        parts = []
        if self.seed is not None:
            parts.append(f"seed={self.seed}")
        if self.position is not None:
            parts.append(f"position={self.position}")
        if self.command:
            parts.append(f"command={self.command}")
        return " > ".join(parts) if parts else "unknown location"


class StateCheckError(Exception):
    """Base exception for all statecheck errors.

    Attributes:
        error_code: Unique ErrorCode for this error type
        message: Human-readable error description
        context: ErrorContext with execution details
        suggestions: List of actionable steps to resolve the issue
        recoverable: Whether the engine can carry on after this error
        cause: The underlying exception (if any)
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN
    default_message: str = "An unexpected error occurred"
    default_suggestions: list[str] = []
    default_recoverable: bool = True

    def __init__(
        self,
        message: str | None = None,
        error_code: ErrorCode | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
        recoverable: bool | None = None,
        suggestions: list[str] | None = None,
        **extra_context: Any,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.error_code
        self.context = context or ErrorContext()
        self.cause = cause
        self.recoverable = self.default_recoverable if recoverable is None else recoverable
        self._suggestions = suggestions

        if extra_context:
            self.context.extra.update(extra_context)

        super().__init__(self.message)

    @property
    def suggestions(self) -> list[str]:
        """Get actionable suggestions for resolving this error."""
        if self._suggestions is not None:
            return self._suggestions
        return self.default_suggestions.copy()

    def __str__(self) -> str:
        """Format error as a readable string with context."""
        parts = [f"[{self.error_code.value}] {self.message}"]

        location = self.context.format_location()
        if location != "unknown location":
            parts.append(f"at {location}")

        return " | ".join(parts)

    def format_verbose(self) -> str:
        """Format error with full details including suggestions."""
        lines = [
            f"Error [{self.error_code.value}]: {self.message}",
            "",
        ]

        location = self.context.format_location()
        if location != "unknown location":
            lines.append(f"Location: {location}")

        if self.context.model_state is not None:
            lines.append(f"Model state: {self.context.model_state!r}")

        if self.cause is not None:
            lines.append(f"Caused by: {type(self.cause).__name__}: {self.cause}")

        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  - {suggestion}")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_code": self.error_code.value,
            "error_type": self.__class__.__name__,
            "message": self.message,
            "recoverable": self.recoverable,
            "suggestions": self.suggestions,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }


class PreconditionRejected(StateCheckError):
    """A command does not apply to the current model state.

    Raised by ``discard()`` / ``precondition()`` from a command constructor or
    from ``next_state``. The engine recovers by generating another command.
    """

    error_code = ErrorCode.PRECONDITION_REJECTED
    default_message = "Command discarded for this state"


class GenerationExhausted(StateCheckError):
    """No valid command could be generated within the retry bound.

    This is a defect in the model or the command generators, not in the
    system under test: for the reached state every candidate was rejected.
    """

    error_code = ErrorCode.GENERATION_EXHAUSTED
    default_message = "Could not generate a valid command"
    default_recoverable = False
    default_suggestions = [
        "Check that at least one command kind is valid for every reachable state",
        "Loosen is_valid() or the discard() calls in command constructors",
        "Raise max_generation_retries if valid commands are merely rare",
    ]

    def __init__(self, message: str | None = None, attempts: int = 0, **kwargs: Any) -> None:
        self.attempts = attempts
        super().__init__(message=message, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["attempts"] = self.attempts
        return result


class AssertionFailure(StateCheckError, AssertionError):
    """The SUT behaved differently from what the model predicts.

    Commands may raise this (or a plain AssertionError, or let any SUT error
    escape) from ``run``. ``expected`` and ``actual`` are optional structured
    details for reports.
    """

    error_code = ErrorCode.ASSERTION_FAILED
    default_message = "SUT behaviour does not match the model"

    def __init__(
        self,
        message: str | None = None,
        expected: Any = None,
        actual: Any = None,
        **kwargs: Any,
    ) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(message=message, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["expected"] = repr(self.expected)
        result["actual"] = repr(self.actual)
        return result


class SutError(StateCheckError):
    """Error acquiring or releasing the system under test."""


class SutConstructionError(SutError):
    """The SUT factory raised while creating a fresh instance.

    During shrinking this makes the candidate inconclusive: it is rejected
    and the search goes on.
    """

    error_code = ErrorCode.SUT_CONSTRUCTION_FAILED
    default_message = "Failed to construct the system under test"
    default_suggestions = [
        "Make the SUT factory idempotent: it runs once per run and per shrink replay",
        "Release external resources in teardown so later constructions succeed",
    ]


class SutTeardownError(SutError):
    """Releasing the SUT raised.

    The run's verdict is kept; the error is recorded for diagnostics.
    """

    error_code = ErrorCode.SUT_TEARDOWN_FAILED
    default_message = "Failed to tear down the system under test"
    default_suggestions = [
        "Check the SUT's close()/teardown for errors on repeated use",
        "Set strict_teardown to treat these as inconclusive while shrinking",
    ]


class ConfigValidationError(StateCheckError):
    """Configuration validation failed."""

    error_code = ErrorCode.INVALID_CONFIG
    default_message = "Invalid configuration"
    default_recoverable = False
    default_suggestions = [
        "Check the field name and value mentioned in the error",
        "Check STATECHECK_* environment variables for stray values",
    ]

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message=message, **kwargs)

    def __str__(self) -> str:
        base = super().__str__()
        if self.field:
            base = f"{base} (field: {self.field})"
        return base

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["field"] = self.field
        result["value"] = repr(self.value)
        return result


class RegistryError(StateCheckError):
    """A command kind cannot be registered or the registry is unusable."""

    error_code = ErrorCode.INVALID_REGISTRY
    default_message = "Invalid command registry"
    default_recoverable = False
    default_suggestions = [
        "Command constructors may only take 'state' and/or 'draw' parameters",
        "Register at least one command kind before generating",
    ]


class StatefulCheckFailed(StateCheckError, AssertionError):
    """A stateful property failed; carries the minimal reproducing sequence."""

    error_code = ErrorCode.PROPERTY_FAILED
    default_message = "Stateful property failed"
    default_recoverable = False

    def __init__(self, minimal: MinimalFailure, message: str | None = None, **kwargs: Any) -> None:
        self.minimal = minimal
        if message is None:
            steps = ", ".join(minimal.sequence)
            message = (
                f"Falsified after {len(minimal.sequence)} command(s): [{steps}]: "
                f"{minimal.failure.message}"
            )
        super().__init__(message=message, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["minimal"] = self.minimal.to_dict()
        return result
