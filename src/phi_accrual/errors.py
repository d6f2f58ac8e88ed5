"""Exception hierarchy for the phi accrual failure detector."""

from __future__ import annotations


__all__ = [
    "ClockRewindError",
    "ConfigurationError",
    "InvalidTimestampError",
    "PhiAccrualError",
]


class PhiAccrualError(Exception):
    """Base class for every error raised by ``phi_accrual``."""


class ClockRewindError(PhiAccrualError):
    """A heartbeat timestamp precedes the last recorded one.

    The rejected call leaves the detector untouched; the caller decides
    whether to drop the sample, retry with a corrected clock, or start a
    fresh detector.

    Parameters
    ----------
    last_heartbeat : float
        Monotonic timestamp (seconds) of the last accepted heartbeat.
    now : float
        The rejected timestamp.

    Examples
    --------
    >>> err = ClockRewindError(last_heartbeat=10.0, now=9.5)
    >>> err.rewind_ms
    500.0
    """

    def __init__(self, last_heartbeat: float, now: float) -> None:
        self.last_heartbeat = last_heartbeat
        self.now = now
        super().__init__(
            f"Heartbeat at {now:.6f} precedes last heartbeat at {last_heartbeat:.6f}"
        )

    @property
    def rewind_ms(self) -> float:
        return (self.last_heartbeat - self.now) * 1000.0


class ConfigurationError(PhiAccrualError, ValueError):
    """Invalid failure detector configuration."""


class InvalidTimestampError(PhiAccrualError, ValueError):
    """A heartbeat timestamp is NaN or infinite."""

    def __init__(self, now: float) -> None:
        self.now = now
        super().__init__(f"Heartbeat timestamp must be finite, got {now!r}")
