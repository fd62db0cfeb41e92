"""
Seedable Alea PRNG used as the injected random source for terrain generation.

Alea (Johannes Baagøe) is small, fast and fully determined by its seed, so a
terrain can be regenerated bit-for-bit from the seed string alone.
"""

from typing import Sequence, TypeVar, Union

T = TypeVar("T")

SeedLike = Union[str, int, float, Sequence]


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class _Mash:
    """Alea's string hash; stateful across calls for a single seeding."""

    def __init__(self):
        self.n = 0xEFC8249D

    def __call__(self, data) -> float:
        n = self.n
        for char in str(data):
            n += ord(char)
            h = 0.02519603282416938 * n
            n = _uint32(h)
            h -= n
            h *= n
            n = _uint32(h)
            h -= n
            n += h * 0x100000000  # 2^32
        self.n = n
        return _uint32(n) * 2.3283064365386963e-10  # 2^-32


class AleaPRNG:
    """
    Alea pseudo-random generator.

    Produces floats in [0, 1). Every terrain draw goes through ``random()``,
    so ``call_count`` tells exactly how much randomness a generation consumed.
    """

    def __init__(self, seed: SeedLike):
        self.seed = seed
        self.call_count = 0

        if isinstance(seed, (list, tuple)):
            parts = list(seed)
        else:
            parts = [seed]

        mash = _Mash()
        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for part in parts:
            self.s0 = self._fold(self.s0 - mash(part))
            self.s1 = self._fold(self.s1 - mash(part))
            self.s2 = self._fold(self.s2 - mash(part))

    @staticmethod
    def _fold(value: float) -> float:
        return value + 1 if value < 0 else value

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * 2.3283064365386963e-10  # 2^-32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def randrange(self, n: int) -> int:
        """Integer in [0, n) using a single draw."""
        if n <= 0:
            raise ValueError("randrange() needs a positive bound")
        return int(self.random() * n)

    def choice(self, seq: Sequence[T]) -> T:
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.randrange(len(seq))]

    def __repr__(self):
        return f"AleaPRNG(seed={self.seed!r}, calls={self.call_count})"
