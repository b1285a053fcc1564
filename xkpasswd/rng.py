"""
Random number sources.

An RNG hands out batches of floats in [0, 1]. The requested count is a
hint: a source may return more or fewer, but never none.
"""

from __future__ import annotations

import os
import random
import struct
from abc import ABC, abstractmethod
from typing import Sequence

from loguru import logger

from .errors import RngError

UINT32_RANGE = 4294967296


class RNG(ABC):
    @abstractmethod
    def random_numbers(self, count: int) -> Sequence[float]:
        """Roughly `count` floats in [0, 1]."""

    def source(self) -> str:
        return type(self).__name__


class BasicRNG(RNG):
    """
    Python's Mersenne Twister. Seedable, which makes it handy for tests,
    but not suitable for real passwords.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._random = random.Random(seed)

    def random_numbers(self, count: int) -> list[float]:
        return [self._random.random() for _ in range(max(1, count))]


class SystemRNG(RNG):
    """The operating system's CSPRNG: 4 bytes of os.urandom per number."""

    def random_numbers(self, count: int) -> list[float]:
        count = max(1, count)
        try:
            data = os.urandom(4 * count)
        except NotImplementedError as exc:
            raise RngError(f"no OS randomness source available: {exc}") from exc
        return [value / UINT32_RANGE for value in struct.unpack(f">{count}I", data)]


def best_available_rng() -> RNG:
    """
    The strongest RNG that works on this machine: SystemRNG, or BasicRNG
    (with a warning) when the OS source is unusable.
    """
    rng = SystemRNG()
    try:
        rng.random_numbers(1)
    except RngError as exc:
        logger.warning(f"falling back to BasicRNG: {exc}")
        return BasicRNG()
    return rng
