"""
Argon2TheMax Core Module - Schemas, parameter space, errors, and utilities.
"""

from argon2themax.core.schema import (
    CostParameters,
    Limit,
    ParameterLimits,
    Sample,
    SampleSeries,
    Variant,
)
from argon2themax.core.space import (
    ARGON2_DEFAULTS,
    ARGON2_LIMITS,
    ParameterSpace,
    in_bounds,
)
from argon2themax.core.errors import (
    ConfigError,
    EmptySeriesError,
    InvalidBudgetError,
    NoSampleWithinBudgetError,
    SelectionNotInitializedError,
    TuningError,
    UnknownPolicyError,
)
from argon2themax.core.config import TuningConfig, load_config

__all__ = [
    "CostParameters",
    "Limit",
    "ParameterLimits",
    "Sample",
    "SampleSeries",
    "Variant",
    "ARGON2_DEFAULTS",
    "ARGON2_LIMITS",
    "ParameterSpace",
    "in_bounds",
    "ConfigError",
    "EmptySeriesError",
    "InvalidBudgetError",
    "NoSampleWithinBudgetError",
    "SelectionNotInitializedError",
    "TuningError",
    "UnknownPolicyError",
    "TuningConfig",
    "load_config",
]
