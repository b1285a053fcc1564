"""
A FIFO of random floats, refilled from an RNG in batches sized to one
password's worth of draws.
"""

from __future__ import annotations

import math
from collections import deque

from loguru import logger

from .errors import RngError
from .rng import RNG


def _is_valid_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value) and 0 <= value <= 1


class RandomCache:
    def __init__(self, rng: RNG, batch_size: int = 1) -> None:
        self._rng = rng
        self.batch_size = batch_size
        self._queue: deque[float] = deque()

    @property
    def rng(self) -> RNG:
        return self._rng

    @rng.setter
    def rng(self, rng: RNG) -> None:
        # numbers from the old source are not carried over
        self._rng = rng
        self._queue.clear()

    def __len__(self) -> int:
        return len(self._queue)

    def _refill(self) -> None:
        numbers = list(self._rng.random_numbers(self.batch_size))
        if not numbers:
            raise RngError(f"{self._rng.source()} returned no random numbers")
        for number in numbers:
            if not _is_valid_number(number):
                raise RngError(
                    f"{self._rng.source()} returned an invalid random number: {number!r}"
                )
        logger.debug(f"cached {len(numbers)} random numbers from {self._rng.source()}")
        self._queue.extend(float(number) for number in numbers)

    def next_float(self) -> float:
        if not self._queue:
            self._refill()
        return self._queue.popleft()

    def next_int(self, maximum: int) -> int:
        """
        An integer in [0, maximum). The float is scaled to 1,000,000 before
        the modulo, so the result is only close to uniform when `maximum`
        does not divide 1,000,000 evenly.
        """
        if maximum < 1:
            raise ValueError(f"maximum must be at least 1, got {maximum}")
        return int(self.next_float() * 1_000_000) % maximum

    def random_digits(self, count: int) -> str:
        return "".join(str(self.next_int(10)) for _ in range(count))

    def clear(self) -> None:
        self._queue.clear()
