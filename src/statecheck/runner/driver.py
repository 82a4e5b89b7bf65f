"""Sequence driver - runs command sequences against the model and the SUT."""

from __future__ import annotations

import logging
import random
import traceback
from collections.abc import Callable, Sequence
from typing import Any

from statecheck.config import CheckConfig
from statecheck.core.command import Command, is_valid_command
from statecheck.core.registry import CommandKind, CommandRegistry
from statecheck.core.result import Failure, RunResult, RunStatus
from statecheck.core.trace import ExecutionTrace
from statecheck.errors import ErrorContext, GenerationExhausted, PreconditionRejected, SutTeardownError
from statecheck.gen import Gen, Shrinkable
from statecheck.runner.sut import SutManager, as_sut_manager

logger = logging.getLogger(__name__)

GenerationFunc = Callable[[Any], Gen[Command[Any, Any]]]
CommandKinds = Sequence[Callable[..., Command[Any, Any]] | CommandKind]


class SequenceDriver:
    """Drives a model and a system under test in lockstep.

    Each step:
    1. Generates a command for the current model state
    2. Discards and regenerates it if it is not valid for that state
    3. Computes the next model state
    4. Runs the command against the SUT, which asserts on what it observes
    5. On success, advances the model state and records the step

    A run ends COMPLETED at its target length, FAILED when a command's run()
    raises, or EXHAUSTED when no valid command can be generated within
    ``config.max_generation_retries`` attempts.

    Every run (generated or replayed) gets a fresh SUT from the SutManager,
    released whatever the outcome.
    """

    def __init__(
        self,
        initial_state: Any,
        sut: SutManager[Any] | Callable[[], Any],
        generation_func: GenerationFunc | CommandKinds,
        config: CheckConfig | None = None,
    ) -> None:
        self.initial_state = initial_state
        self.sut = as_sut_manager(sut)
        self.config = config or CheckConfig()
        self.generation_func = as_generation_func(generation_func, self.config)

    def run(
        self,
        seed: int,
        size: int | None = None,
        max_length: int | None = None,
    ) -> RunResult:
        """Generate and execute one sequence.

        The run is reproducible from (seed, size). When neither ``max_length``
        nor ``config.max_length`` is set, the target length is drawn from
        [0, size].
        """
        size = self.config.max_size if size is None else size
        rng = random.Random(seed)
        if max_length is None:
            max_length = self.config.max_length
        if max_length is None:
            max_length = rng.randint(0, max(size, 0))

        result = RunResult(
            status=RunStatus.COMPLETED,
            trace=ExecutionTrace(self.initial_state),
            seed=seed,
            size=size,
            max_length=max_length,
        )
        self._within_sut(
            result, lambda sut: self._generate_and_execute(sut, rng, size, max_length, result)
        )
        result.finish()
        logger.debug(
            f"Run seed={seed} size={size} ended {result.status.value} "
            f"after {result.length}/{max_length} command(s)"
        )
        return result

    def replay(self, commands: Sequence[Command[Any, Any] | Shrinkable[Command[Any, Any]]]) -> RunResult:
        """Execute a fixed sequence from the initial state on a fresh SUT.

        Ends INVALID when a command's precondition does not hold at its
        position; nothing after it is executed.
        """
        shrinkables = [c if isinstance(c, Shrinkable) else Shrinkable.just(c) for c in commands]
        result = RunResult(
            status=RunStatus.COMPLETED,
            trace=ExecutionTrace(self.initial_state),
            max_length=len(shrinkables),
        )
        self._within_sut(result, lambda sut: self._replay(sut, shrinkables, result))
        result.finish()
        return result

    def _within_sut(self, result: RunResult, body: Callable[[Any], None]) -> None:
        try:
            with self.sut.acquire() as sut:
                body(sut)
        except SutTeardownError as e:
            # The sequence was fully observed before release
            logger.warning(f"{e.message} (verdict kept: {result.status.value})")
            result.sut_errors.append(e)

    def _generate_and_execute(
        self,
        sut: Any,
        rng: random.Random,
        size: int,
        max_length: int,
        result: RunResult,
    ) -> None:
        state = self.initial_state
        while result.length < max_length:
            position = result.length
            try:
                shrinkable = self._generate(state, rng, size, position)
            except GenerationExhausted as e:
                if e.context.position is None:
                    e.context.position = position
                e.context.seed = result.seed
                logger.info(f"Generation exhausted at position {position}: {e.message}")
                result.status = RunStatus.EXHAUSTED
                result.error = e
                return
            if not self._execute(sut, state, shrinkable, position, result):
                return
            state = result.trace.final_state

    def _generate(
        self,
        state: Any,
        rng: random.Random,
        size: int,
        position: int,
    ) -> Shrinkable[Command[Any, Any]]:
        retries = self.config.max_generation_retries
        for _ in range(retries):
            gen = self.generation_func(state)
            shrinkable = gen.generate(rng.getrandbits(64), size)
            if is_valid_command(shrinkable.value, state):
                return shrinkable
            logger.debug(
                f"Discarded {shrinkable.value.describe()} at position {position}: "
                f"not valid for state {state!r}"
            )
        raise GenerationExhausted(
            f"No valid command for state {state!r} after {retries} attempts",
            attempts=retries,
            context=ErrorContext(position=position, model_state=state),
        )

    def _replay(
        self,
        sut: Any,
        shrinkables: list[Shrinkable[Command[Any, Any]]],
        result: RunResult,
    ) -> None:
        state = self.initial_state
        for position, shrinkable in enumerate(shrinkables):
            command = shrinkable.value
            if not is_valid_command(command, state):
                result.status = RunStatus.INVALID
                result.error = PreconditionRejected(
                    f"{command.describe()} is not valid at position {position}",
                    context=ErrorContext(
                        command=command.describe(),
                        position=position,
                        model_state=state,
                    ),
                )
                return
            if not self._execute(sut, state, shrinkable, position, result):
                return
            state = result.trace.final_state

    def _execute(
        self,
        sut: Any,
        state: Any,
        shrinkable: Shrinkable[Command[Any, Any]],
        position: int,
        result: RunResult,
    ) -> bool:
        """Apply one valid command to model and SUT. Returns False on failure."""
        command = shrinkable.value
        next_state = command.next_state(state)
        result.shrinkables.append(shrinkable)
        try:
            command.run(state, sut)
        except Exception as e:
            result.status = RunStatus.FAILED
            result.failure = Failure(
                position=position,
                state_before=state,
                command=command,
                error=e,
                traceback=traceback.format_exc(),
            )
            logger.debug(f"{command.describe()} failed at position {position}: {result.failure.message}")
            return False
        result.trace.append(command, state, next_state)
        return True


def as_generation_func(
    generation_func: GenerationFunc | CommandKinds,
    config: CheckConfig,
) -> GenerationFunc:
    """Accept a state -> Gen callable, or a list of command kinds.

    A list of kinds becomes a CommandRegistry using the configured
    selection weighting and retry bound.
    """
    if callable(generation_func):
        return generation_func
    if isinstance(generation_func, (list, tuple)):
        return CommandRegistry(
            generation_func,
            selection=config.selection_weighting,
            max_attempts=config.max_generation_retries,
        )
    raise TypeError(
        f"Expected a generation function or a list of command kinds, "
        f"got {type(generation_func).__name__}"
    )
