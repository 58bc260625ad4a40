"""
Argon2TheMax Calibration Module.

Provides the adaptive hash-timing engine and its search policies.
"""

from .engine import (
    CalibrationEngine,
    OnSample,
    SampleAction,
)
from .policies import (
    CalibrationPolicy,
    CalibrationPolicyType,
    ClosestMatchPolicy,
    MarchState,
    MaxMemoryMarchPolicy,
    SearchContext,
    StaircaseState,
    get_calibration_policy,
)

__all__ = [
    "CalibrationEngine",
    "OnSample",
    "SampleAction",
    "CalibrationPolicy",
    "CalibrationPolicyType",
    "ClosestMatchPolicy",
    "MarchState",
    "MaxMemoryMarchPolicy",
    "SearchContext",
    "StaircaseState",
    "get_calibration_policy",
]
