"""Random sources for symbol draws."""
import random
import secrets
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


class RNGBase(ABC):
    """Integer source behind every reel draw."""

    @abstractmethod
    def randint(self, a: int, b: int) -> int:
        """Return random int in [a, b] inclusive."""
        pass

    def choice(self, options: Sequence[T]) -> T:
        """Pick one element uniformly."""
        if not options:
            raise IndexError("cannot choose from an empty sequence")
        return options[self.randint(0, len(options) - 1)]


class ProductionRNG(RNGBase):
    """Unseeded draws from the OS entropy source, for live sessions."""

    def randint(self, a: int, b: int) -> int:
        return secrets.randbelow(b - a + 1) + a


class SeededRNG(RNGBase):
    """
    Test/Simulation RNG.

    Deterministic, fully controlled by seed.
    """

    def __init__(self, seed: int):
        self._rng = random.Random(seed)
        self.seed = seed

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)
