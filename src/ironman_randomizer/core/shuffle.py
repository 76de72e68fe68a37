"""Deterministic character shuffling.

The permutation is a Fisher-Yates shuffle driven by a 32-bit linear congruential
generator (the Numerical Recipes constants).  The same ``(length, seed)`` pair
always yields the same order, on any platform, so runs can be reproduced from
their seed alone.  The generator is an explicit value created per call; nothing
here keeps module state.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

__all__ = [
    "LCG_INCREMENT",
    "LCG_MULTIPLIER",
    "Lcg32",
    "U32_MASK",
    "now_millis",
    "random_seed",
    "shuffle_characters",
    "shuffled_indices",
]

U32_MASK = 0xFFFFFFFF
LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223


@dataclass
class Lcg32:
    """32-bit LCG: ``state = state * 1664525 + 1013904223 (mod 2**32)``."""

    state: int

    def __post_init__(self) -> None:
        self.state &= U32_MASK

    def next_u32(self) -> int:
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) & U32_MASK
        return self.state


def shuffled_indices(length: int, seed: int) -> list[int]:
    """Return a permutation of ``range(length)`` determined entirely by ``seed``."""

    indices = list(range(length))
    if len(indices) <= 1:
        return indices

    rng = Lcg32(seed)
    for i in range(len(indices) - 1, 0, -1):
        j = rng.next_u32() % (i + 1)
        indices[i], indices[j] = indices[j], indices[i]
    return indices


def now_millis() -> int:
    return time.time_ns() // 1_000_000


def random_seed() -> int:
    # Wall-clock derived; only used when the caller does not pin a seed.
    return now_millis() & U32_MASK


def shuffle_characters(length: int, seed: int | None = None) -> list[int]:
    actual_seed = seed if seed is not None else random_seed()
    return shuffled_indices(length, actual_seed)
