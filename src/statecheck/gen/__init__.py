"""Generator capability consumed by the engine."""

from statecheck.gen.draw import Draw
from statecheck.gen.generators import Gen, booleans, integers, just, sampled_from
from statecheck.gen.shrinkable import Shrinkable

__all__ = [
    "Draw",
    "Gen",
    "Shrinkable",
    "booleans",
    "integers",
    "just",
    "sampled_from",
]
