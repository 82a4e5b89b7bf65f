"""statecheck error handling.

Provides the exception hierarchy with error codes and structured context:

- Engine signals (PreconditionRejected, AssertionFailure)
- Run failures distinct from SUT defects (GenerationExhausted)
- SUT lifecycle errors treated as inconclusive while shrinking
- Setup errors (ConfigValidationError, RegistryError)
- The property failure raised by check() (StatefulCheckFailed)
"""

from statecheck.errors.base import (
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

__all__ = [
    # Base
    "StateCheckError",
    "ErrorCode",
    "ErrorContext",
    # Generation
    "PreconditionRejected",
    "GenerationExhausted",
    # Execution
    "AssertionFailure",
    # SUT lifecycle
    "SutError",
    "SutConstructionError",
    "SutTeardownError",
    # Setup
    "ConfigValidationError",
    "RegistryError",
    # Property
    "StatefulCheckFailed",
]
