"""Normal-distribution helpers behind the phi formula.

All functions here are pure: no clock, no state.  The detector reduces its
history to ``(mean, std)`` and hands the elapsed time to :func:`phi`.
"""

from __future__ import annotations

import math
import sys


__all__ = [
    "MIN_SURVIVAL",
    "normal_cdf",
    "normal_survival",
    "phi",
]


# Smallest positive normal float; caps phi at roughly 307.65.
MIN_SURVIVAL = sys.float_info.min

_SQRT2 = math.sqrt(2.0)


def _standardize(x: float, mean: float, std: float) -> float:
    if std <= 0.0:
        msg = f"std must be positive, got {std}"
        raise ValueError(msg)
    return (x - mean) / (std * _SQRT2)


def normal_cdf(x: float, mean: float, std: float) -> float:
    """Probability that ``N(mean, std)`` is less than or equal to *x*.

    Parameters
    ----------
    x : float
        Point at which to evaluate the distribution.
    mean : float
        Mean of the distribution.
    std : float
        Standard deviation, strictly positive.

    Returns
    -------
    float

    Raises
    ------
    ValueError
        If *std* is not positive.

    Examples
    --------
    >>> normal_cdf(500.0, 500.0, 50.0)
    0.5
    """
    return 0.5 * (1.0 + math.erf(_standardize(x, mean, std)))


def normal_survival(x: float, mean: float, std: float) -> float:
    """``1 - normal_cdf(x, mean, std)``, evaluated through ``erfc``.

    Subtracting the CDF from one loses every significant digit once the CDF
    rounds to 1.0; the complementary error function keeps the tail down to
    about ``1e-308``.
    """
    return 0.5 * math.erfc(_standardize(x, mean, std))


def phi(elapsed: float, mean: float, std: float) -> float:
    """Suspicion level for *elapsed* under ``N(mean, std)``.

    ``phi = -log10(1 - cdf(elapsed))``, with ``1 - cdf`` clamped to
    :data:`MIN_SURVIVAL` so the result is always finite.  A NaN *elapsed*
    clamps the same way and yields the maximal phi.

    Parameters
    ----------
    elapsed : float
        Time since the last heartbeat, in the same unit as *mean* and *std*.
    mean : float
        Expected inter-arrival interval.
    std : float
        Standard deviation of the interval, strictly positive.

    Returns
    -------
    float
        A non-negative, finite suspicion level.

    Examples
    --------
    >>> round(phi(500.0, 500.0, 50.0), 5)
    0.30103
    """
    survival = normal_survival(elapsed, mean, std)
    # NaN fails the comparison and clamps too
    if not survival > MIN_SURVIVAL:
        survival = MIN_SURVIVAL
    return -math.log10(survival)
