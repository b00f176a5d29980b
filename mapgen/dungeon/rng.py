"""Seeded 16-bit generator used by every generation phase.

Algorithm (kept stable so seeds reproduce across releases):

    state = (state * 25173 + 13849) mod 65536

Each step yields the high byte of the new state. ``rnd(max)`` draws one byte
(two, big-endian, when max > 256) and rejects values at or above the largest
multiple of ``max`` so results stay uniform. Seed 0 is mapped to 1.
"""
from __future__ import annotations

import random
from typing import Optional

MULTIPLIER = 25173
INCREMENT = 13849
STATE_MASK = 0xFFFF


def normalize_seed(seed: int) -> int:
    value = int(seed) & STATE_MASK
    return value or 1


class Rng16:
    def __init__(self, seed: int = 1):
        self.seed = normalize_seed(seed)
        self.state = self.seed

    def reset(self) -> None:
        """Restart the sequence from the stored seed."""
        self.state = self.seed

    def reseed(self, seed: int) -> None:
        self.seed = normalize_seed(seed)
        self.state = self.seed

    def next_byte(self) -> int:
        self.state = (self.state * MULTIPLIER + INCREMENT) & STATE_MASK
        return self.state >> 8

    def rnd(self, max_value: int) -> int:
        """Return an integer in [0, max_value)."""
        if max_value <= 1:
            return 0
        if max_value > 0x10000:
            raise ValueError(f"rnd() bound {max_value} exceeds 16 bits")
        if max_value <= 0x100:
            space = 0x100
            draw = self.next_byte
        else:
            space = 0x10000

            def draw():
                return (self.next_byte() << 8) | self.next_byte()

        limit = space - space % max_value
        while True:
            value = draw()
            if value < limit:
                return value % max_value


def init_rnd(seed: Optional[int] = None) -> Rng16:
    """Build a generator from a caller seed, or from the host RNG when None."""
    if seed is None:
        seed = random.randint(1, STATE_MASK)
    return Rng16(seed)


__all__ = ["Rng16", "init_rnd", "normalize_seed"]
