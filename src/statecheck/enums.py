"""Policy enumerations shared by the engine and its configuration."""

from enum import Enum


class Selection(Enum):
    """How the registry picks a command kind."""

    UNIFORM = "uniform"  # every kind equally likely
    WEIGHTED = "weighted"  # proportional to each kind's registered weight


class ShrinkStrategy(Enum):
    """How the shrinker removes commands from a failing sequence."""

    DDMIN = "ddmin"  # contiguous chunks, halving down to single commands
    SINGLE = "single"  # one command at a time


__all__ = ["Selection", "ShrinkStrategy"]
