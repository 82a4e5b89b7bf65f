"""Recording draws made while a command is being constructed."""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Any, TypeVar

from statecheck.gen.generators import Gen
from statecheck.gen.shrinkable import Shrinkable

T = TypeVar("T")


class Draw:
    """Pulls values from generators on behalf of a command constructor.

    Every draw is recorded as a Shrinkable so that the command can later be
    rebuilt with one of its values replaced by a simpler one. When ``replay``
    is given, the first draws return those recorded values instead of
    generating. Draws past the end of ``replay`` generate from the seed they
    had originally, against whatever generator the constructor now passes.

    Example:
        class Add(Command):
            def __init__(self, draw):
                self.amount = draw(integers(0, 100))
    """

    def __init__(self, seed: int, size: int, replay: Sequence[Shrinkable[Any]] = ()) -> None:
        self.seed = seed
        self.size = size
        self._rng = random.Random(seed)
        self._replay = list(replay)
        self.picks: list[Shrinkable[Any]] = []

    def __call__(self, gen: Gen[T]) -> T:
        index = len(self.picks)
        # consumed on every draw so later draws keep their seeds under replay
        sub_seed = self._rng.getrandbits(64)
        if index < len(self._replay):
            shrinkable = self._replay[index]
        else:
            shrinkable = gen.generate(sub_seed, self.size)
        self.picks.append(shrinkable)
        return shrinkable.value

    def __repr__(self) -> str:
        return f"Draw(seed={self.seed}, size={self.size}, picks={len(self.picks)})"
