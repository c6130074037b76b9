"""
Injected random source for knot placement and color table choices.
Always constructed explicitly and passed in; there is no module-level generator.
"""
import random
import secrets
from typing import Sequence, TypeVar

T = TypeVar("T")


class RandomSource:
    """
    Seeded uniform generator. Same seed → same sequence of draws, so a scene
    built from a seeded source is reproducible.
    Not thread-safe: confine one instance to the thread that builds fields.
    """

    def __init__(self, seed: int | None = None):
        if seed is None:
            seed = secrets.randbits(64)
        self.seed = seed
        self._rng = random.Random(seed)

    @classmethod
    def from_entropy(cls) -> "RandomSource":
        """Source seeded from the OS (interactive use: every run differs)."""
        return cls(None)

    def uniform(self) -> float:
        """Random float in [0, 1)."""
        return self._rng.random()

    def coinflip(self) -> bool:
        """True or False with probability 1/2."""
        return self._rng.random() < 0.5

    def sign(self) -> int:
        """+1 or -1 with probability 1/2."""
        return 1 if self.coinflip() else -1

    def randrange(self, n: int) -> int:
        """Integer uniformly in [0, n)."""
        return self._rng.randrange(n)

    def randint(self, low: int, high: int) -> int:
        """Integer uniformly in [low, high], both ends included."""
        return self._rng.randint(low, high)

    def choice(self, sequence: Sequence[T]) -> T:
        """Uniform pick from a non-empty sequence (with replacement)."""
        if not sequence:
            raise IndexError("cannot choose from an empty sequence")
        return sequence[self._rng.randrange(len(sequence))]
