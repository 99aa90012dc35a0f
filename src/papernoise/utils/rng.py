"""
rng.py
------

Thread-safe random generator shared by the sketch building blocks.

Every randomized routine in the package accepts any object with a `random()`
method (a `random.Random`, a `numpy.random.Generator`, or a test double);
`RNG` is the default provider and `get_rng()` returns the shared instance
used when no source is passed.
"""

from __future__ import annotations

__all__ = ["RNGBackend", "RandomSource", "RNG", "get_rng", "set_global_seed",]

import os
import time
import random
import threading
from typing import Protocol, TypeAlias, Union

import numpy as np


# ---------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------
class RandomSource(Protocol):
    """Anything providing uniform floats in [0, 1)."""

    def random(self) -> float: ...


RNGBackend: TypeAlias = Union[random.Random, np.random.Generator, "RNG", RandomSource]


def _entropy_seed() -> int:
    return os.getpid() ^ (time.time_ns() & 0xFFFFFFFF) ^ random.getrandbits(32)


# ---------------------------------------------------------------------
# RNG class
# ---------------------------------------------------------------------
class RNG:
    """Encapsulated, thread-safe random generator.

    Attributes:
        _rng:  Backend `random.Random`.
        _lock: threading.Lock for safe concurrent access.
    """

    def __init__(self, seed: int = None):
        self._lock = threading.Lock()
        self._rng = random.Random(_entropy_seed() if seed is None else seed)

    def seed(self, seed: int = None) -> None:
        """Reinitialize the RNG in place (preserves object identity)."""
        with self._lock:
            self._rng.seed(_entropy_seed() if seed is None else seed)

    def random(self) -> float:
        with self._lock:
            return self._rng.random()

    def __repr__(self) -> str:
        return f"<RNG pid={os.getpid()} id={id(self)}>"


# =============================================================================
# GLOBAL ACCESSORS
# =============================================================================
_global_rng = RNG()


def get_rng() -> RNG:
    """Return the shared RNG instance."""
    return _global_rng


def set_global_seed(seed: int) -> None:
    """Re-seed the shared RNG for deterministic replay of a whole run."""
    _global_rng.seed(seed)
