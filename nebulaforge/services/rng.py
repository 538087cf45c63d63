"""Seed derivation and the deterministic random stream used by the generator."""

import hashlib
import math
from typing import Optional, Sequence, TypeVar

DEFAULT_PROMPT = "abstract artifact"

# Park-Miller minimal standard generator
MULTIPLIER = 16807
MODULUS = 2147483647

T = TypeVar("T")


def normalize_prompt(prompt: Optional[str]) -> str:
    """Substitute the default prompt for absent or blank input.

    Non-blank prompts are returned untouched; the seed is derived from the
    text exactly as given.
    """
    if prompt is None or not prompt.strip():
        return DEFAULT_PROMPT
    return prompt


def derive_seed(prompt: str) -> int:
    """Unsigned 32-bit seed from the first 8 hex chars of the SHA-256 digest."""
    digest = hashlib.sha256(prompt.encode("utf-8")).hexdigest()
    return int(digest[:8], 16)


class SeededRandom:
    """Linear congruential stream: state = state * 16807 mod (2**31 - 1).

    Every helper consumes exactly one draw, so the order of calls is part of
    the output contract.

    A seed that is a multiple of 2**31 - 1 (0 included) pins the state at 0
    and every draw returns -1 / (2**31 - 2). Only the digest prefixes
    00000000, 7fffffff and fffffffe produce one; the output is kept as is so
    seeds reproduce across implementations.
    """

    def __init__(self, seed: int):
        self.seed = seed
        self._state = seed

    def random(self) -> float:
        self._state = (self._state * MULTIPLIER) % MODULUS
        return (self._state - 1) / (MODULUS - 1)

    __call__ = random

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.random()

    def below(self, n: int) -> int:
        """Integer in [0, n)."""
        return math.floor(self.random() * n)

    def choice(self, items: Sequence[T]) -> T:
        return items[self.below(len(items))]

    def suffix(self, scale: int = 1_000_000) -> int:
        """Numeric id suffix, rounded half up."""
        return math.floor(self.random() * scale + 0.5)
