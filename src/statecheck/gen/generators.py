"""A small set of seeded generators.

Just enough to let commands draw their parameters; every generator is
deterministic in (seed, size) and yields Shrinkable values.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Iterator, Sequence
from typing import Generic, TypeVar

from statecheck.gen.shrinkable import Shrinkable

T = TypeVar("T")
U = TypeVar("U")


class Gen(Generic[T]):
    """A replayable generator of shrinkable values.

    Example:
        amounts = integers(0, 100)
        value = amounts.generate(seed=42, size=10).value
    """

    def __init__(self, fn: Callable[[random.Random, int], Shrinkable[T]], name: str = "gen") -> None:
        self._fn = fn
        self.name = name

    def generate(self, seed: int, size: int) -> Shrinkable[T]:
        """Produce a value for the given seed and size."""
        return self._fn(random.Random(seed), size)

    def map(self, fn: Callable[[T], U], name: str | None = None) -> Gen[U]:
        return Gen(
            lambda rng, size: self._fn(rng, size).map(fn),
            name or f"{self.name}.map({getattr(fn, '__name__', 'fn')})",
        )

    def __repr__(self) -> str:
        return f"Gen({self.name})"


def just(value: T) -> Gen[T]:
    """Always the same value; never shrinks."""
    return Gen(lambda rng, size: Shrinkable.just(value), f"just({value!r})")


def _towards(value: int, target: int) -> Iterator[int]:
    # target first, then halving the distance: each candidate is strictly
    # closer to target than value.
    diff = value - target
    while diff != 0:
        yield value - diff
        diff = -(-diff // 2) if diff < 0 else diff // 2


def _integer_shrinkable(value: int, target: int) -> Shrinkable[int]:
    return Shrinkable(
        value,
        lambda: (_integer_shrinkable(c, target) for c in _towards(value, target)),
    )


def integers(min_value: int | None = None, max_value: int | None = None) -> Gen[int]:
    """Integers in [min_value, max_value].

    Missing bounds default to -size / +size. Values shrink toward zero, or
    toward the bound nearest to zero when zero is out of range.
    """
    if min_value is not None and max_value is not None and min_value > max_value:
        raise ValueError(f"min_value {min_value} is greater than max_value {max_value}")

    def generate(rng: random.Random, size: int) -> Shrinkable[int]:
        lo = -size if min_value is None else min_value
        hi = size if max_value is None else max_value
        if lo > hi:
            lo, hi = (hi, hi) if min_value is None else (lo, lo)
        target = min(max(0, lo), hi)
        return _integer_shrinkable(rng.randint(lo, hi), target)

    return Gen(generate, f"integers({min_value}, {max_value})")


def booleans() -> Gen[bool]:
    """True or False; True shrinks to False."""

    def generate(rng: random.Random, size: int) -> Shrinkable[bool]:
        if rng.random() < 0.5:
            return Shrinkable(True, lambda: iter((Shrinkable(False),)))
        return Shrinkable(False)

    return Gen(generate, "booleans()")


def _element_shrinkable(elements: Sequence[T], index: int) -> Shrinkable[T]:
    return Shrinkable(
        elements[index],
        lambda: (_element_shrinkable(elements, i) for i in range(index)),
    )


def sampled_from(elements: Sequence[T]) -> Gen[T]:
    """One of the given elements; shrinks toward earlier elements."""
    elements = list(elements)
    if not elements:
        raise ValueError("sampled_from() requires at least one element")

    def generate(rng: random.Random, size: int) -> Shrinkable[T]:
        return _element_shrinkable(elements, rng.randrange(len(elements)))

    return Gen(generate, f"sampled_from({elements!r})")
