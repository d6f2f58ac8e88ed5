"""Phi accrual failure detection for a single monitored peer.

Implements the phi accrual failure detector described by Hayashibara et al.,
which outputs a continuous suspicion level rather than a binary alive/dead
decision.  This allows each consumer to choose its own threshold.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass, replace
from typing import Any

from phi_accrual import numeric
from phi_accrual.config import FailureDetectorConfig
from phi_accrual.errors import ClockRewindError, InvalidTimestampError
from phi_accrual.history import SampleHistory


__all__ = ["DetectorSnapshot", "PhiAccrualFailureDetector"]


logger = logging.getLogger("phi_accrual.detector")


@dataclass(frozen=True)
class DetectorSnapshot:
    """Point-in-time view of a detector.

    ``mean_ms`` and ``std_deviation_ms`` are the values the phi formula
    actually used, after the first-heartbeat fallback and the std floor.
    """

    last_heartbeat: float | None
    sample_count: int
    mean_ms: float
    std_deviation_ms: float
    phi: float


class PhiAccrualFailureDetector:
    """Phi accrual failure detector for one peer (Hayashibara et al.).

    Outputs a continuous suspicion level (phi) instead of a binary alive/dead
    signal.  ``phi = -log10(1 - CDF(elapsed))`` where CDF is the normal
    distribution fitted to the observed heartbeat interval history.

    Timestamps are monotonic seconds; passing ``now=None`` reads
    ``time.monotonic()``.  Durations are milliseconds.  One lock serializes
    heartbeats against phi reads, so a detector may be shared between a
    thread feeding heartbeats and another polling suspicion.

    Parameters
    ----------
    config : FailureDetectorConfig | None
        Base configuration, defaults to ``FailureDetectorConfig()``.
    **overrides
        Individual ``FailureDetectorConfig`` fields replacing those of
        *config*.

    Examples
    --------
    >>> fd = PhiAccrualFailureDetector(first_heartbeat_estimate_ms=500.0)
    >>> fd.phi(0.0)
    0.0
    >>> fd.heartbeat(0.0)
    >>> fd.is_available(0.5, threshold=5.0)
    True
    """

    def __init__(
        self, config: FailureDetectorConfig | None = None, **overrides: Any
    ) -> None:
        config = config or FailureDetectorConfig()
        if overrides:
            config = replace(config, **overrides)
        self._config = config
        self._history = SampleHistory(config.max_sample_size)
        self._last_heartbeat: float | None = None
        self._lock = threading.Lock()

    @property
    def config(self) -> FailureDetectorConfig:
        """The immutable configuration this detector was built with."""
        return self._config

    @property
    def last_heartbeat(self) -> float | None:
        """Timestamp of the last accepted heartbeat, ``None`` before the first."""
        with self._lock:
            return self._last_heartbeat

    @property
    def sample_count(self) -> int:
        """Number of intervals currently held in the history window."""
        with self._lock:
            return len(self._history)

    def heartbeat(self, now: float | None = None) -> None:
        """Record arrival of a heartbeat.

        A rejected heartbeat leaves the detector unchanged.

        Parameters
        ----------
        now : float | None
            Monotonic arrival time in seconds.

        Raises
        ------
        ClockRewindError
            If *now* precedes the last recorded heartbeat.
        InvalidTimestampError
            If *now* is NaN or infinite.
        """
        if now is None:
            now = time.monotonic()
        if not math.isfinite(now):
            logger.warning("Rejected heartbeat with non-finite timestamp %r", now)
            raise InvalidTimestampError(now)
        with self._lock:
            last = self._last_heartbeat
            if last is None:
                logger.debug("First heartbeat at %.6f, tracking started", now)
                self._last_heartbeat = now
                return
            if now < last:
                logger.warning(
                    "Rejected heartbeat at %.6f: clock rewound %.3fms",
                    now,
                    (last - now) * 1000.0,
                )
                raise ClockRewindError(last_heartbeat=last, now=now)
            interval_ms = (now - last) * 1000.0
            self._history.add(interval_ms + self._config.acceptable_heartbeat_pause_ms)
            self._last_heartbeat = now

    def phi(self, now: float | None = None) -> float:
        """Calculate the suspicion level.

        Parameters
        ----------
        now : float | None
            Monotonic time in seconds at which to evaluate.

        Returns
        -------
        float
            The phi value.  ``0.0`` if no heartbeat was ever recorded; a large
            finite value when the peer is almost certainly down.  A NaN
            *now* reads as maximal suspicion.
        """
        if now is None:
            now = time.monotonic()
        with self._lock:
            return self._evaluate(now)[2]

    def is_available(
        self, now: float | None = None, threshold: float | None = None
    ) -> bool:
        """Check if the peer is considered available (phi below threshold).

        Parameters
        ----------
        now : float | None
            Monotonic time in seconds at which to evaluate.
        threshold : float | None
            Phi threshold, defaults to the configured one.

        Returns
        -------
        bool
            ``True`` if ``phi(now) < threshold``.
        """
        if threshold is None:
            threshold = self._config.threshold
        return self.phi(now) < threshold

    def snapshot(self, now: float | None = None) -> DetectorSnapshot:
        """Capture timestamp, window size, formula inputs and phi in one read.

        Parameters
        ----------
        now : float | None
            Monotonic time in seconds at which to evaluate phi.

        Returns
        -------
        DetectorSnapshot
        """
        if now is None:
            now = time.monotonic()
        with self._lock:
            mean, std, phi = self._evaluate(now)
            return DetectorSnapshot(
                last_heartbeat=self._last_heartbeat,
                sample_count=len(self._history),
                mean_ms=mean,
                std_deviation_ms=std,
                phi=phi,
            )

    def _evaluate(self, now: float) -> tuple[float, float, float]:
        """Return ``(mean_ms, std_ms, phi)``; the caller holds the lock."""
        if self._history:
            mean = self._history.mean()
        else:
            mean = self._config.first_heartbeat_estimate_ms
        std = max(self._history.standard_deviation(), self._config.min_std_deviation_ms)

        if self._last_heartbeat is None:
            return mean, std, 0.0

        elapsed_ms = (now - self._last_heartbeat) * 1000.0
        return mean, std, numeric.phi(elapsed_ms, mean, std)

    def __repr__(self) -> str:
        return (
            f"PhiAccrualFailureDetector(samples={len(self._history)}, "
            f"last_heartbeat={self._last_heartbeat})"
        )
