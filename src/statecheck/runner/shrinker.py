"""Shrinker - reduces a failing command sequence to a minimal counterexample."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from statecheck.config import CheckConfig
from statecheck.core.command import Command
from statecheck.core.result import Failure, MinimalFailure, RunResult
from statecheck.core.trace import ExecutionTrace
from statecheck.enums import ShrinkStrategy
from statecheck.errors import PreconditionRejected, SutConstructionError, SutError
from statecheck.gen import Shrinkable
from statecheck.runner.driver import SequenceDriver

logger = logging.getLogger(__name__)

Candidate = list[Shrinkable[Command[Any, Any]]]


def _split_chunks(items: Sequence[Any], n: int) -> list[tuple[int, int]]:
    """Split [0..len(items)) into n contiguous ranges, returning [(start, end), ...]."""
    length = len(items)
    if length == 0:
        return []
    n = max(1, min(n, length))
    base, rem = divmod(length, n)
    chunks = []
    start = 0
    for i in range(n):
        end = start + base + (1 if i < rem else 0)
        chunks.append((start, end))
        start = end
    return chunks


class Shrinker:
    """Searches for a smaller command sequence that still fails.

    Two dimensions are shrunk in turn until neither makes progress:

    - Structure: remove commands. DDMIN removes contiguous chunks, starting
      with halves and refining down to single commands; SINGLE removes one
      command at a time. Both finish by trying every single removal.
    - Values: replace one command by one of its own shrink candidates
      (the same kind rebuilt with a simpler drawn value).

    Every candidate is first checked against the model alone; candidates
    whose preconditions no longer hold are rejected without touching the
    SUT. The rest are replayed on a fresh SUT. A candidate is accepted when
    the replay fails (with the same kind of failure, when
    ``shrink_require_same_failure`` is set); the sequence is then cut right
    after the failing command.

    SUT construction errors make a candidate inconclusive: it is rejected,
    the error is logged and kept on the result, and the search goes on.
    Teardown errors are logged and kept too; they only reject the candidate
    with ``strict_teardown``.
    """

    def __init__(self, driver: SequenceDriver, config: CheckConfig | None = None) -> None:
        self.driver = driver
        self.config = config or driver.config
        self._original: Failure | None = None
        self._replays = 0
        self._accepted = 0
        self._inconclusive: list[SutError] = []
        self._budget_hit = False

    def shrink(self, failing: RunResult) -> MinimalFailure:
        """Shrink a failed run to a local minimum.

        Returns:
            MinimalFailure: the smallest failing sequence found.

        Raises:
            ValueError: the run did not fail.
        """
        if not failing.failed or failing.failure is None:
            raise ValueError(f"Can only shrink a failed run, got {failing.status.value}")

        self._original = failing.failure
        self._replays = 0
        self._accepted = 0
        self._inconclusive = []
        self._budget_hit = False

        best: Candidate = list(failing.shrinkables[: failing.failure.position + 1])
        failure = failing.failure
        original_length = len(best)
        logger.info(
            f"Shrinking {original_length} command(s) failing with "
            f"{failure.error_type}: {failure.message}"
        )

        while True:
            best, failure, _ = self._shrink_structure(best, failure)
            best, failure, simplified = self._shrink_values(best, failure)
            if not simplified or self._budget_hit:
                break

        logger.info(
            f"Shrunk {original_length} -> {len(best)} command(s) in {self._replays} replay(s), "
            f"{self._accepted} accepted, {len(self._inconclusive)} inconclusive"
        )
        return MinimalFailure(
            commands=[s.value for s in best],
            failure=failure,
            original_length=original_length,
            seed=failing.seed,
            size=failing.size,
            replays=self._replays,
            accepted=self._accepted,
            inconclusive=list(self._inconclusive),
            budget_exhausted=self._budget_hit,
        )

    def _shrink_structure(
        self, best: Candidate, failure: Failure
    ) -> tuple[Candidate, Failure, bool]:
        """Remove commands until no single removal still fails."""
        single = self.config.shrink_strategy is ShrinkStrategy.SINGLE
        changed = False
        n = 2
        # the empty sequence cannot fail
        while len(best) >= 2 and not self._budget_hit:
            if single:
                n = len(best)
            reduced = False
            for start, end in _split_chunks(best, n):
                result = self._try(best[:start] + best[end:])
                if result is not None:
                    best, failure = self._accept(result)
                    changed = reduced = True
                    n = max(2, n - 1)
                    break
                if self._budget_hit:
                    break
            if reduced:
                continue
            if n >= len(best):
                break
            n = min(len(best), n * 2)
        return best, failure, changed

    def _shrink_values(
        self, best: Candidate, failure: Failure
    ) -> tuple[Candidate, Failure, bool]:
        """Simplify each command in place, following its shrink candidates."""
        changed = False
        index = 0
        while index < len(best) and not self._budget_hit:
            improved = False
            for candidate in best[index].shrinks():
                result = self._try(best[:index] + [candidate] + best[index + 1:])
                if result is not None:
                    best, failure = self._accept(result)
                    changed = improved = True
                    break
                if self._budget_hit:
                    break
            if not improved:
                index += 1
        return best, failure, changed

    def _accept(self, result: RunResult) -> tuple[Candidate, Failure]:
        assert result.failure is not None
        self._accepted += 1
        logger.debug(
            f"Accepted {len(result.shrinkables)} command(s): "
            f"[{', '.join(result.descriptions)}]"
        )
        return list(result.shrinkables), result.failure

    def _try(self, candidate: Candidate) -> RunResult | None:
        """Replay a candidate. Returns the failing run, or None to reject it."""
        if not candidate or self._budget_hit:
            return None

        try:
            ExecutionTrace.derive(self.driver.initial_state, [s.value for s in candidate])
        except PreconditionRejected as e:
            logger.debug(f"Rejected candidate without replay: {e.message}")
            return None

        if self._replays >= self.config.max_shrink_replays:
            self._budget_hit = True
            logger.warning(
                f"Shrinking stopped after {self._replays} replays (max_shrink_replays); "
                "the result may not be minimal"
            )
            return None
        self._replays += 1

        try:
            result = self.driver.replay(candidate)
        except SutConstructionError as e:
            logger.warning(f"Shrink candidate inconclusive: {e.message}")
            self._inconclusive.append(e)
            return None

        if result.sut_errors:
            self._inconclusive.extend(result.sut_errors)
            if self.config.strict_teardown:
                logger.warning(
                    f"Shrink candidate inconclusive: {result.sut_errors[0].message}"
                )
                return None

        if not result.failed or result.failure is None:
            return None
        if (
            self.config.shrink_require_same_failure
            and self._original is not None
            and not result.failure.same_as(self._original)
        ):
            logger.debug(
                f"Rejected candidate with a different failure: "
                f"{result.failure.error_type} from {result.failure.description}"
            )
            return None
        return result
