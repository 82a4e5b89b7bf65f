"""Shrinkable values: a generated value plus its lazy shrink candidates."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Shrinkable(Generic[T]):
    """A value together with the candidates it can shrink to.

    Candidates are produced lazily, simplest first. Every candidate is
    strictly simpler than the value it came from, so following shrinks
    always ends.
    """

    value: T
    shrink_fn: Callable[[], Iterable[Shrinkable[T]]] | None = field(
        default=None, compare=False, repr=False
    )

    def shrinks(self) -> Iterator[Shrinkable[T]]:
        """Iterate over the shrink candidates of this value."""
        if self.shrink_fn is None:
            return iter(())
        return iter(self.shrink_fn())

    def map(self, fn: Callable[[T], U]) -> Shrinkable[U]:
        """Apply fn to this value and, lazily, to every candidate."""
        return Shrinkable(fn(self.value), lambda: (s.map(fn) for s in self.shrinks()))

    @classmethod
    def just(cls, value: T) -> Shrinkable[T]:
        """A value that does not shrink."""
        return cls(value)
