"""
Random Source Module
====================

Pluggable uniform random generator for the sensor simulation.

Every stochastic decision in the engine (initial temperature, drift,
volatility walk) draws from a RandomSource passed in by the caller, so a
seeded source replays the exact same reading sequence.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import secrets
import threading
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np


class RandomSource(ABC):
    """Uniform random draws over a closed interval."""

    @abstractmethod
    def uniform(self, low: float, high: float) -> float:
        """Return a value drawn uniformly from [low, high]."""


class NumpyRandomSource(RandomSource):
    """
    RandomSource backed by numpy's PCG64 generator.

    Safe to share between sensors: draws are serialized with a lock.

    >>> rng = NumpyRandomSource(seed=42)
    >>> 0.0 <= rng.uniform(0.0, 1.0) <= 1.0
    True
    """

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = secrets.randbits(128)
        self.seed = seed
        self._rng_lock = threading.Lock()
        self._rng = np.random.default_rng(seed=seed)

    def uniform(self, low: float, high: float) -> float:
        if low > high:
            raise ValueError(f"Invalid interval: [{low}, {high}]")
        with self._rng_lock:
            return float(self._rng.uniform(low, high))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(seed={self.seed})"
