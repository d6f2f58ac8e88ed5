"""Bounded window of heartbeat inter-arrival intervals."""

from __future__ import annotations

import math
from collections import deque
from collections.abc import Iterator


__all__ = ["SampleHistory"]


class SampleHistory:
    """Fixed-capacity FIFO of interval samples with running aggregates.

    Sum and sum of squares are updated on every insert and eviction, so
    :meth:`mean`, :meth:`variance` and :meth:`standard_deviation` cost O(1)
    whatever the window size.

    Parameters
    ----------
    max_sample_size : int
        Window capacity.  Once full, each insert evicts the oldest sample.

    Examples
    --------
    >>> history = SampleHistory(max_sample_size=3)
    >>> for value in (100.0, 200.0, 300.0, 400.0):
    ...     history.add(value)
    >>> list(history)
    [200.0, 300.0, 400.0]
    >>> history.mean()
    300.0
    """

    def __init__(self, max_sample_size: int) -> None:
        if max_sample_size < 1:
            msg = f"max_sample_size must be at least 1, got {max_sample_size}"
            raise ValueError(msg)
        self._max_sample_size = max_sample_size
        self._samples: deque[float] = deque()
        self._sum = 0.0
        self._sum_of_squares = 0.0

    @property
    def max_sample_size(self) -> int:
        """Window capacity fixed at construction."""
        return self._max_sample_size

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[float]:
        return iter(self._samples)

    def __repr__(self) -> str:
        return (
            f"SampleHistory(samples={len(self._samples)}, "
            f"max_sample_size={self._max_sample_size})"
        )

    def add(self, value: float) -> None:
        """Append *value*, evicting the oldest sample when the window is full."""
        if len(self._samples) == self._max_sample_size:
            evicted = self._samples.popleft()
            self._sum -= evicted
            self._sum_of_squares -= evicted * evicted
        self._samples.append(value)
        self._sum += value
        self._sum_of_squares += value * value

    def mean(self) -> float:
        """Arithmetic mean of the window, ``0.0`` when empty."""
        if not self._samples:
            return 0.0
        return self._sum / len(self._samples)

    def variance(self) -> float:
        """Population variance; ``0.0`` with fewer than two samples."""
        n = len(self._samples)
        if n < 2:
            return 0.0
        mean = self._sum / n
        # running aggregates can drift a hair below zero
        return max(self._sum_of_squares / n - mean * mean, 0.0)

    def standard_deviation(self) -> float:
        """Square root of :meth:`variance`."""
        return math.sqrt(self.variance())
