"""TOML-based configuration for the phi accrual failure detector.

Provides ``load_config`` / ``discover_config`` for loading
``phi-accrual.toml`` into a frozen :class:`FailureDetectorConfig`.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, NoReturn

from phi_accrual.errors import ConfigurationError


__all__ = [
    "CONFIG_FILENAME",
    "FailureDetectorConfig",
    "discover_config",
    "load_config",
]


CONFIG_FILENAME = "phi-accrual.toml"


@dataclass(frozen=True)
class FailureDetectorConfig:
    """Phi accrual failure detector tuning (Hayashibara et al.).

    Parameters
    ----------
    threshold : float
        Phi value at or above which a node is considered unreachable.
        Higher values tolerate more jitter but detect failures more slowly.
    max_sample_size : int
        Maximum heartbeat interval samples to retain per node.
    min_std_deviation_ms : float
        Floor for the standard deviation estimate (ms), preventing overly
        aggressive detection when intervals are very stable.
    acceptable_heartbeat_pause_ms : float
        Grace period added to every observed interval (ms), accounting for
        expected pauses such as GC or network latency.
    first_heartbeat_estimate_ms : float
        Assumed interval (ms) before any real sample arrives.

    Raises
    ------
    ConfigurationError
        If any field is out of range.

    Examples
    --------
    >>> FailureDetectorConfig(threshold=12.0, max_sample_size=500)
    FailureDetectorConfig(threshold=12.0, max_sample_size=500, ...)
    """

    threshold: float = 8.0
    max_sample_size: int = 1000
    min_std_deviation_ms: float = 50.0
    acceptable_heartbeat_pause_ms: float = 0.0
    first_heartbeat_estimate_ms: float = 500.0

    def __post_init__(self) -> None:
        if self.threshold <= 0.0:
            _invalid("threshold", self.threshold, "must be positive")
        if self.max_sample_size < 1:
            _invalid("max_sample_size", self.max_sample_size, "must be at least 1")
        if self.min_std_deviation_ms <= 0.0:
            _invalid("min_std_deviation_ms", self.min_std_deviation_ms, "must be positive")
        if self.acceptable_heartbeat_pause_ms < 0.0:
            _invalid(
                "acceptable_heartbeat_pause_ms",
                self.acceptable_heartbeat_pause_ms,
                "must not be negative",
            )
        if self.first_heartbeat_estimate_ms <= 0.0:
            _invalid(
                "first_heartbeat_estimate_ms",
                self.first_heartbeat_estimate_ms,
                "must be positive",
            )


def _invalid(name: str, value: Any, reason: str) -> NoReturn:
    msg = f"{name} {reason}, got {value!r}"
    raise ConfigurationError(msg)


def discover_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for ``phi-accrual.toml``.

    Parameters
    ----------
    start : Path | None
        Directory to start searching from.

    Returns
    -------
    Path | None
        Path to the discovered config file, or ``None`` if not found.
    """
    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None) -> FailureDetectorConfig:
    """Load a ``FailureDetectorConfig`` from the ``[failure_detector]`` table.

    If *path* is ``None``, auto-discovers ``phi-accrual.toml`` by walking up
    from the current working directory.  Returns the default config if no
    file is found or the file has no ``[failure_detector]`` table.

    Parameters
    ----------
    path : Path | None
        Explicit path to a TOML config file.

    Returns
    -------
    FailureDetectorConfig

    Raises
    ------
    FileNotFoundError
        If an explicit *path* is given but does not exist.
    ConfigurationError
        If the table holds unknown keys or out-of-range values.

    Examples
    --------
    >>> config = load_config(Path("phi-accrual.toml"))
    >>> config.threshold
    8.0
    """
    if path is None:
        discovered = discover_config()
        if discovered is None:
            return FailureDetectorConfig()
        path = discovered

    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open("rb") as f:
        raw = tomllib.load(f)

    detector_raw: dict[str, Any] = raw.get("failure_detector", {})
    known = {fld.name for fld in fields(FailureDetectorConfig)}
    unknown = sorted(set(detector_raw) - known)
    if unknown:
        msg = f"Unknown failure_detector keys in {path}: {', '.join(unknown)}"
        raise ConfigurationError(msg)

    return FailureDetectorConfig(**detector_raw)
