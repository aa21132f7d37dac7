"""
simulation/rng.py
-----------------
Seeded linear-congruential generator for reproducible crack patterns.

A fresh generator is created per render so identical inputs always draw the
same sequence; the global ``random`` module is never touched.
"""

from __future__ import annotations

from typing import Protocol

DEFAULT_SEED = 42


class UniformSource(Protocol):
    def next_float(self) -> float:
        """Return the next value in [0, 1]."""


class LinearCongruentialGenerator:
    """``state = (state * 1103515245 + 12345) mod 2**31``."""

    MULTIPLIER = 1103515245
    INCREMENT = 12345
    MODULUS_MASK = 0x7FFFFFFF

    def __init__(self, seed: int = DEFAULT_SEED) -> None:
        self._state = seed & self.MODULUS_MASK

    @property
    def state(self) -> int:
        return self._state

    def next_int(self) -> int:
        self._state = (self._state * self.MULTIPLIER + self.INCREMENT) & self.MODULUS_MASK
        return self._state

    def next_float(self) -> float:
        return self.next_int() / self.MODULUS_MASK
