"""Command base class and the helpers commands use."""

from __future__ import annotations

from typing import Any, Generic, NoReturn, TypeVar

from statecheck.errors import AssertionFailure, PreconditionRejected

S = TypeVar("S")
SutT = TypeVar("SutT")


class Command(Generic[S, SutT]):
    """One unit of interaction with the system under test.

    A command predicts its effect on the model (``next_state``), performs it
    against the real system and checks the outcome (``run``), and says whether
    it applies to a model state at all (``is_valid``).

    Commands are immutable: the registry seals every instance it builds, so
    one instance can appear in many candidate sequences while shrinking.
    Constructors may accept a ``state`` parameter (the current model state)
    and/or a ``draw`` parameter (a Draw for pulling random values):

        class Add(Command[int, Counter]):
            def __init__(self, draw):
                self.amount = draw(integers(0, 100))

            def next_state(self, state):
                return state + self.amount

            def run(self, state, sut):
                sut.add(self.amount)
                assert_equal(state + self.amount, sut.value, "counter")

    Raise ``discard()`` from the constructor or ``next_state`` when the
    command cannot apply to the given state.
    """

    _sealed = False

    def next_state(self, state: S) -> S:
        """Return the model state after this command. Default: unchanged."""
        return state

    def run(self, state: S, sut: SutT) -> None:
        """Apply this command to the SUT, which is assumed to be in ``state``.

        Default: does nothing.
        """
        return None

    def is_valid(self, state: S) -> bool:
        """Precondition on the model state. Default: always valid."""
        return True

    def describe(self) -> str:
        """Human readable rendering, e.g. ``Add(amount=3)`` or ``Reset``."""
        name = type(self).__name__
        try:
            params = {k: v for k, v in vars(self).items() if not k.startswith("_")}
        except TypeError:
            # __slots__ without __dict__
            params = {}
        if not params:
            return name
        args = ", ".join(f"{k}={v!r}" for k, v in params.items())
        return f"{name}({args})"

    def __setattr__(self, name: str, value: Any) -> None:
        if self._sealed:
            raise AttributeError(
                f"cannot assign to '{name}': {type(self).__name__} is immutable once generated"
            )
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if self._sealed:
            raise AttributeError(
                f"cannot delete '{name}': {type(self).__name__} is immutable once generated"
            )
        object.__delattr__(self, name)

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return self.describe()


def seal(command: Any) -> Any:
    """Make a command immutable. Returns the command."""
    if isinstance(command, Command):
        object.__setattr__(command, "_sealed", True)
    return command


def is_valid_command(command: Command[S, Any], state: S) -> bool:
    """Check whether a command applies to the given model state.

    A command is valid when ``is_valid(state)`` holds and ``next_state(state)``
    does not discard.
    """
    if not command.is_valid(state):
        return False
    try:
        command.next_state(state)
    except PreconditionRejected:
        return False
    return True


def discard(reason: str = "") -> NoReturn:
    """Reject the command being built or applied for the current state."""
    raise PreconditionRejected(reason or None)


def precondition(condition: bool, reason: str = "") -> None:
    """Discard unless condition holds."""
    if not condition:
        discard(reason or "precondition does not hold")


def assert_equal(expected: Any, actual: Any, what: str = "value") -> None:
    """Fail the command when the SUT's observation differs from the model."""
    if expected != actual:
        raise AssertionFailure(
            f"{what}: expected {expected!r}, got {actual!r}",
            expected=expected,
            actual=actual,
        )
