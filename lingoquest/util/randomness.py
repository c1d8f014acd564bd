from __future__ import annotations

"""Randomness helpers for reward flavour text and seeding."""

import os
import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


def seed_from_env() -> Optional[int]:
    """Return the integer SEED env var, or None if unset or invalid."""
    seed = os.environ.get("SEED")
    if seed is None:
        return None
    try:
        return int(seed)
    except ValueError:
        return None


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Build a private RNG; falls back to the SEED env var when no seed is given."""
    if seed is None:
        seed = seed_from_env()
    return random.Random(seed)


def choose(rng: random.Random, options: Sequence[T]) -> T:
    return rng.choice(list(options))
