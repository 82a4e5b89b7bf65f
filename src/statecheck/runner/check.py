"""check() - run a stateful property over many generated sequences."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from typing import Any

from statecheck.config import CheckConfig
from statecheck.core.result import CheckResult, MinimalFailure, RunResult
from statecheck.errors import StatefulCheckFailed
from statecheck.runner.driver import CommandKinds, GenerationFunc, SequenceDriver
from statecheck.runner.shrinker import Shrinker
from statecheck.runner.sut import SutManager

logger = logging.getLogger(__name__)


def trial_size(trial: int, trials: int, max_size: int) -> int:
    """Size for a trial: ramps linearly from 0 to max_size."""
    if trials <= 1:
        return max_size
    return (trial * max_size) // (trials - 1)


def check(
    initial_state: Any,
    sut: SutManager[Any] | Callable[[], Any],
    generation_func: GenerationFunc | CommandKinds,
    config: CheckConfig | None = None,
) -> CheckResult:
    """Check that the SUT follows the model for ``config.trials`` sequences.

    Args:
        initial_state: Model state every sequence starts from.
        sut: A SutManager, or a zero-argument factory for a fresh SUT.
        generation_func: state -> Gen[Command] (a CommandRegistry works), or
            a list of command kinds.
        config: Check settings; defaults to CheckConfig().

    Returns:
        CheckResult: statistics when every trial passed.

    Raises:
        StatefulCheckFailed: A sequence failed. Carries the (shrunk)
            MinimalFailure; it is also an AssertionError, so test runners
            report it as a test failure.
        GenerationExhausted: No valid command could be generated for a
            reached state.

    Example:
        registry = CommandRegistry([Increment, Reset, Add])
        check(0, Counter, registry, CheckConfig(seed=42))
    """
    config = config or CheckConfig()
    driver = SequenceDriver(initial_state, sut, generation_func, config)

    base_seed = config.seed
    if base_seed is None:
        base_seed = random.SystemRandom().getrandbits(64)
        logger.info(f"Using random seed {base_seed} (set seed to reproduce)")
    seeds = random.Random(base_seed)

    result = CheckResult(trials=0, commands_run=0, seed=base_seed)
    for trial in range(config.trials):
        size = trial_size(trial, config.trials, config.max_size)
        run = driver.run(seeds.getrandbits(64), size)
        result.sut_errors.extend(run.sut_errors)

        if run.exhausted:
            assert run.error is not None
            logger.info(f"Trial {trial + 1}/{config.trials} could not generate a command")
            raise run.error
        if run.failed:
            logger.info(
                f"Trial {trial + 1}/{config.trials} failed after {run.length + 1} command(s) "
                f"(seed={run.seed}, size={size})"
            )
            raise StatefulCheckFailed(_minimize(driver, run, config))

        result.trials += 1
        result.commands_run += run.length
        result.max_length_seen = max(result.max_length_seen, run.length)

    logger.info(
        f"Passed {result.trials} trial(s), {result.commands_run} command(s), "
        f"longest sequence {result.max_length_seen} (seed={base_seed})"
    )
    return result


def _minimize(driver: SequenceDriver, run: RunResult, config: CheckConfig) -> MinimalFailure:
    assert run.failure is not None
    if config.shrink:
        return Shrinker(driver, config).shrink(run)
    return MinimalFailure(
        commands=run.commands,
        failure=run.failure,
        original_length=len(run.shrinkables),
        seed=run.seed,
        size=run.size,
    )
