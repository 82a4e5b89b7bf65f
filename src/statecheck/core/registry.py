"""Command generator registry.

Turns a set of command kinds into a generator of commands for a given model
state. Each kind is a Command subclass (or any callable returning a Command)
whose constructor may take the current ``state`` and/or a ``draw``.
"""

from __future__ import annotations

import inspect
import logging
import random
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from statecheck.core.command import Command, seal
from statecheck.enums import Selection
from statecheck.errors import ErrorContext, GenerationExhausted, PreconditionRejected, RegistryError
from statecheck.gen import Draw, Gen, Shrinkable

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 100

# Constructor parameters the registry knows how to fill
_INJECTED = ("state", "draw")


@dataclass(frozen=True)
class CommandKind:
    """A registered command kind.

    The constructor signature is inspected once: a ``state`` parameter gets
    the current model state, a ``draw`` parameter gets a Draw. With neither,
    the default constructor is used.
    """

    factory: Callable[..., Command[Any, Any]]
    weight: float = 1
    name: str = ""
    accepts_state: bool = field(default=False, init=False)
    accepts_draw: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        if not callable(self.factory):
            raise RegistryError(f"Command kind {self.factory!r} is not callable")
        if self.weight <= 0:
            raise RegistryError(
                f"Command kind weight must be positive, got {self.weight} for {self.factory!r}"
            )
        if not self.name:
            object.__setattr__(self, "name", getattr(self.factory, "__name__", repr(self.factory)))

        try:
            params = inspect.signature(self.factory).parameters
        except (ValueError, TypeError):
            # Can't inspect (e.g., built-in), assume default constructor
            return

        for param in params.values():
            if param.name in _INJECTED:
                continue
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            if param.default is param.empty:
                raise RegistryError(
                    f"Cannot construct {self.name}: required parameter '{param.name}' "
                    f"(only {' and '.join(_INJECTED)} are supplied)"
                )
        object.__setattr__(self, "accepts_state", "state" in params)
        object.__setattr__(self, "accepts_draw", "draw" in params)

    def build(self, state: Any, draw: Draw) -> Command[Any, Any]:
        """Construct and seal an instance for the given state."""
        kwargs: dict[str, Any] = {}
        if self.accepts_state:
            kwargs["state"] = state
        if self.accepts_draw:
            kwargs["draw"] = draw
        return seal(self.factory(**kwargs))


def _build(
    kind: CommandKind,
    state: Any,
    seed: int,
    size: int,
    replay: Sequence[Shrinkable[Any]] = (),
) -> Shrinkable[Command[Any, Any]]:
    draw = Draw(seed, size, replay)
    command = kind.build(state, draw)
    picks = list(draw.picks)
    return Shrinkable(command, lambda: _shrink_command(kind, state, seed, size, picks))


def _shrink_command(
    kind: CommandKind,
    state: Any,
    seed: int,
    size: int,
    picks: list[Shrinkable[Any]],
) -> Iterator[Shrinkable[Command[Any, Any]]]:
    """Rebuild the command with one recorded draw replaced by a simpler one.

    Draws after the replaced one are regenerated from their own seeds, since
    their generators may depend on the earlier values.
    """
    for index, pick in enumerate(picks):
        for candidate in pick.shrinks():
            replay = picks[:index] + [candidate]
            try:
                yield _build(kind, state, seed, size, replay)
            except PreconditionRejected:
                continue


class CommandRegistry:
    """A closed set of command kinds and the policy for picking among them.

    Example:
        registry = CommandRegistry([Increment, Reset])

        @registry.register(weight=3)
        class Add(Command):
            def __init__(self, draw):
                self.amount = draw(integers(0, 100))

        gen = registry.any_command(state)   # or registry(state)
    """

    def __init__(
        self,
        kinds: Iterable[Callable[..., Command[Any, Any]] | CommandKind] = (),
        *,
        selection: Selection | str = Selection.UNIFORM,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise RegistryError(f"max_attempts must be at least 1, got {max_attempts}")
        self.selection = Selection(selection)
        self.max_attempts = max_attempts
        self._kinds: list[CommandKind] = []
        for kind in kinds:
            self.register(kind)

    def register(
        self,
        kind: Callable[..., Command[Any, Any]] | CommandKind | None = None,
        *,
        weight: float = 1,
        name: str | None = None,
    ) -> Any:
        """Register a command kind. Works as a plain call or a class decorator."""
        if kind is None:
            return lambda k: self.register(k, weight=weight, name=name)
        if isinstance(kind, CommandKind):
            self._kinds.append(kind)
        else:
            self._kinds.append(CommandKind(kind, weight=weight, name=name or ""))
        return kind

    @property
    def kinds(self) -> list[CommandKind]:
        return list(self._kinds)

    def __len__(self) -> int:
        return len(self._kinds)

    def _pick(self, rng: random.Random, kinds: list[CommandKind]) -> CommandKind:
        if self.selection is Selection.WEIGHTED:
            return rng.choices(kinds, weights=[k.weight for k in kinds])[0]
        return kinds[rng.randrange(len(kinds))]

    def any_command(self, state: Any) -> Gen[Command[Any, Any]]:
        """Generator of one command suitable for the given model state.

        A kind whose constructor discards is retried with a fresh random
        draw; after ``max_attempts`` discards GenerationExhausted is raised.
        """
        if not self._kinds:
            raise RegistryError("No command kinds registered")
        kinds = list(self._kinds)

        def generate(rng: random.Random, size: int) -> Shrinkable[Command[Any, Any]]:
            for _ in range(self.max_attempts):
                kind = self._pick(rng, kinds)
                seed = rng.getrandbits(64)
                try:
                    return _build(kind, state, seed, size)
                except PreconditionRejected as e:
                    logger.debug(f"{kind.name} discarded for state {state!r}: {e.message}")
            raise GenerationExhausted(
                f"No command could be constructed for state {state!r} "
                f"after {self.max_attempts} attempts",
                attempts=self.max_attempts,
                context=ErrorContext(model_state=state),
            )

        return Gen(generate, f"any_command({', '.join(k.name for k in kinds)})")

    def __call__(self, state: Any) -> Gen[Command[Any, Any]]:
        return self.any_command(state)

    def __repr__(self) -> str:
        names = ", ".join(k.name for k in self._kinds)
        return f"CommandRegistry([{names}], selection={self.selection.value})"


def any_command(
    *kinds: Callable[..., Command[Any, Any]] | CommandKind,
    state: Any,
    selection: Selection | str = Selection.UNIFORM,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Gen[Command[Any, Any]]:
    """Generator yielding one of the given command kinds for ``state``."""
    registry = CommandRegistry(kinds, selection=selection, max_attempts=max_attempts)
    return registry.any_command(state)
