from phi_accrual.config import (
    CONFIG_FILENAME,
    FailureDetectorConfig,
    discover_config,
    load_config,
)
from phi_accrual.detector import DetectorSnapshot, PhiAccrualFailureDetector
from phi_accrual.errors import (
    ClockRewindError,
    ConfigurationError,
    InvalidTimestampError,
    PhiAccrualError,
)
from phi_accrual.history import SampleHistory
from phi_accrual.numeric import normal_cdf, normal_survival, phi
from phi_accrual.registry import FailureDetectorRegistry

__all__ = [
    "CONFIG_FILENAME",
    "ClockRewindError",
    "ConfigurationError",
    "DetectorSnapshot",
    "FailureDetectorConfig",
    "FailureDetectorRegistry",
    "InvalidTimestampError",
    "PhiAccrualError",
    "PhiAccrualFailureDetector",
    "SampleHistory",
    "discover_config",
    "load_config",
    "normal_cdf",
    "normal_survival",
    "phi",
]
