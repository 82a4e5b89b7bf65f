"""The system under test as a scoped resource."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

from statecheck.errors import SutConstructionError, SutTeardownError

logger = logging.getLogger(__name__)

SutT = TypeVar("SutT")


class SutManager(Generic[SutT]):
    """Creates a fresh SUT for every run and releases it on every exit path.

    The factory is called once per run attempt, shrink replays included.
    Release calls ``teardown(sut)`` when given, otherwise ``sut.close()`` if
    the SUT has one.

    Example:
        manager = SutManager(Counter)
        with manager.acquire() as sut:
            sut.increment()

        # With explicit teardown
        manager = SutManager(
            factory=lambda: connect(url),
            teardown=lambda conn: conn.drop_all(),
        )
    """

    def __init__(
        self,
        factory: Callable[[], SutT],
        teardown: Callable[[SutT], None] | None = None,
    ) -> None:
        self.factory = factory
        self.teardown = teardown
        self.created = 0
        self.released = 0
        # Teardown errors swallowed while another exception was propagating
        self.suppressed_errors: list[SutTeardownError] = []

    @contextmanager
    def acquire(self) -> Iterator[SutT]:
        """Construct a SUT, yield it, release it.

        Raises:
            SutConstructionError: The factory raised.
            SutTeardownError: Releasing raised. Not raised when the body is
                already propagating an exception; that error is logged, kept
                in ``suppressed_errors`` and the original one wins.
        """
        try:
            sut = self.factory()
        except Exception as e:
            raise SutConstructionError(
                f"SUT factory raised {type(e).__name__}: {e}", cause=e
            ) from e
        self.created += 1

        try:
            yield sut
        except BaseException:
            try:
                self._release(sut)
            except SutTeardownError as e:
                # Don't mask the original error
                logger.warning(f"{e.message} while handling another error")
                self.suppressed_errors.append(e)
            raise
        self._release(sut)

    def _release(self, sut: SutT) -> None:
        self.released += 1
        try:
            if self.teardown is not None:
                self.teardown(sut)
            elif hasattr(sut, "close"):
                sut.close()
        except Exception as e:
            raise SutTeardownError(
                f"SUT teardown raised {type(e).__name__}: {e}", cause=e
            ) from e

    def __repr__(self) -> str:
        name = getattr(self.factory, "__name__", repr(self.factory))
        return f"SutManager({name})"


def as_sut_manager(sut: SutManager[Any] | Callable[[], Any]) -> SutManager[Any]:
    """Wrap a bare factory in a SutManager."""
    if isinstance(sut, SutManager):
        return sut
    if not callable(sut):
        raise TypeError(
            f"Expected a SutManager or a zero-argument SUT factory, got {type(sut).__name__}. "
            "A fresh SUT is needed for every run and every shrink replay."
        )
    return SutManager(sut)
