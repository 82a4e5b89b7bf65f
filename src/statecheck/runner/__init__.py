"""Running command sequences: the SUT resource, the driver, the shrinker and check()."""

from statecheck.runner.check import check, trial_size
from statecheck.runner.driver import SequenceDriver, as_generation_func
from statecheck.runner.shrinker import Shrinker
from statecheck.runner.sut import SutManager, as_sut_manager

__all__ = [
    "SequenceDriver",
    "Shrinker",
    "SutManager",
    "as_generation_func",
    "as_sut_manager",
    "check",
    "trial_size",
]
