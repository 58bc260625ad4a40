"""
Argon2TheMax

Copyright (c) 2026 Sudheer Ibrahim Daniel Devu. All rights reserved.

Auto-tunes Argon2 cost parameters so that a single hash takes as long as
possible without exceeding an operator-chosen time budget.

Author: Sudheer Ibrahim Daniel Devu
Email: sudheeridevu@gmail.com
GitHub: https://github.com/SID-Devu

Licensed under the MIT License. See LICENSE file for details.
"""

__version__ = "1.0.0"
__author__ = "Sudheer Ibrahim Daniel Devu"
__email__ = "sudheeridevu@gmail.com"
__copyright__ = "Copyright (c) 2026 Sudheer Ibrahim Daniel Devu"

from argon2themax.core.schema import (
    CostParameters,
    Limit,
    ParameterLimits,
    Sample,
    SampleSeries,
    Variant,
)
from argon2themax.core.space import ARGON2_DEFAULTS, ARGON2_LIMITS, ParameterSpace, in_bounds
from argon2themax.core.errors import (
    EmptySeriesError,
    InvalidBudgetError,
    NoSampleWithinBudgetError,
    TuningError,
    UnknownPolicyError,
)
from argon2themax.core.config import TuningConfig, load_config

from argon2themax.primitive import Argon2Primitive, HashPrimitive, generate_salt, hash, verify

# Calibration
from argon2themax.calibration import (
    CalibrationEngine,
    CalibrationPolicyType,
    ClosestMatchPolicy,
    MaxMemoryMarchPolicy,
    SampleAction,
    get_calibration_policy,
)

# Selection
from argon2themax.selection import (
    SelectionEngine,
    SelectionPolicyType,
    get_selection_engine,
    select_parameters,
)

from argon2themax.tuner import (
    CacheKey,
    ParameterCache,
    Tuner,
    get_default_tuner,
    get_max_parameters,
    run_calibration,
)

defaults = ARGON2_DEFAULTS
limits = ARGON2_LIMITS
