"""Pytest fixtures for statecheck tests."""

from __future__ import annotations

import os

import pytest

from counter_model import Counter, Decrement, Increment, Reset
from statecheck import (
    CheckConfig,
    CommandRegistry,
    MinimalFailure,
    SequenceDriver,
    Shrinker,
    SutManager,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep STATECHECK_* variables from the environment out of the tests."""
    for key in list(os.environ):
        if key.startswith("STATECHECK_"):
            monkeypatch.delenv(key)


@pytest.fixture
def registry() -> CommandRegistry:
    return CommandRegistry([Increment, Decrement, Reset])


@pytest.fixture
def config() -> CheckConfig:
    return CheckConfig(seed=1234, trials=50, max_size=20)


@pytest.fixture
def counter_manager() -> SutManager[Counter]:
    return SutManager(Counter)


@pytest.fixture
def buggy_reset_manager() -> SutManager[Counter]:
    return SutManager(lambda: Counter(buggy_reset=True))


@pytest.fixture
def buggy_reset_driver(buggy_reset_manager: SutManager[Counter], config: CheckConfig) -> SequenceDriver:
    return SequenceDriver(0, buggy_reset_manager, CommandRegistry([Increment, Reset]), config)


@pytest.fixture
def scenario_a_minimal(buggy_reset_driver: SequenceDriver) -> MinimalFailure:
    """Three increments then a buggy reset, shrunk."""
    failing = buggy_reset_driver.replay([Increment(), Increment(), Increment(), Reset()])
    return Shrinker(buggy_reset_driver).shrink(failing)
