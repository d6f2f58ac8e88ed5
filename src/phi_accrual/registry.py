"""Per-node bookkeeping on top of :class:`PhiAccrualFailureDetector`."""

from __future__ import annotations

import logging
import threading
import time

from phi_accrual.config import FailureDetectorConfig
from phi_accrual.detector import PhiAccrualFailureDetector


__all__ = ["FailureDetectorRegistry"]


logger = logging.getLogger("phi_accrual.registry")


class FailureDetectorRegistry:
    """One failure detector per monitored node, created on first heartbeat.

    Every detector shares the registry's configuration; availability is
    judged against ``config.threshold``.

    Parameters
    ----------
    config : FailureDetectorConfig | None
        Configuration shared by every node's detector.

    Examples
    --------
    >>> registry = FailureDetectorRegistry()
    >>> registry.heartbeat("10.0.0.1:25520", now=0.0)
    >>> registry.tracked_nodes
    frozenset({'10.0.0.1:25520'})
    >>> registry.phi("unknown-node")
    0.0
    """

    def __init__(self, config: FailureDetectorConfig | None = None) -> None:
        self._config = config or FailureDetectorConfig()
        self._detectors: dict[str, PhiAccrualFailureDetector] = {}
        self._lock = threading.Lock()

    @property
    def config(self) -> FailureDetectorConfig:
        """Configuration shared by every tracked node's detector."""
        return self._config

    @property
    def tracked_nodes(self) -> frozenset[str]:
        """Return the set of node keys that have received at least one heartbeat."""
        with self._lock:
            return frozenset(self._detectors)

    def detector(self, node: str) -> PhiAccrualFailureDetector | None:
        """Return the detector tracking *node*, or ``None`` if it is untracked."""
        with self._lock:
            return self._detectors.get(node)

    def heartbeat(self, node: str, now: float | None = None) -> None:
        """Record arrival of a heartbeat from *node*.

        Raises
        ------
        ClockRewindError
            If *now* precedes the node's last recorded heartbeat.
        InvalidTimestampError
            If *now* is NaN or infinite.
        """
        # remove() cannot run between lookup and update
        with self._lock:
            detector = self._detectors.get(node)
            if detector is not None:
                detector.heartbeat(now)
                return
            detector = PhiAccrualFailureDetector(self._config)
            detector.heartbeat(now)
            self._detectors[node] = detector
            logger.debug("Tracking node %s", node)

    def phi(self, node: str, now: float | None = None) -> float:
        """Suspicion level for *node*, ``0.0`` if it never sent a heartbeat."""
        detector = self.detector(node)
        if detector is None:
            return 0.0
        return detector.phi(now)

    def is_available(self, node: str, now: float | None = None) -> bool:
        """``True`` if *node*'s phi is below ``config.threshold``."""
        return self.phi(node, now) < self._config.threshold

    def unreachable(self, now: float | None = None) -> frozenset[str]:
        """Tracked nodes whose phi is at or above the threshold.

        Every node is evaluated against the same *now*.
        """
        if now is None:
            now = time.monotonic()
        with self._lock:
            detectors = list(self._detectors.items())
        return frozenset(
            node
            for node, detector in detectors
            if not detector.is_available(now, self._config.threshold)
        )

    def remove(self, node: str) -> None:
        """Stop tracking *node* entirely.

        Called when a node is marked down so it no longer accumulates stale
        history.  Unknown nodes are ignored.
        """
        with self._lock:
            removed = self._detectors.pop(node, None)
        if removed is not None:
            logger.info("Stopped tracking node %s", node)
