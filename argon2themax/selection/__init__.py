"""
Argon2TheMax Selection Module.

Provides budget-constrained selection over calibration samples.
"""

from .engine import (
    SelectionEngine,
    SelectionPolicyType,
    describe_selection,
    get_selection_engine,
    select_parameters,
)

__all__ = [
    "SelectionEngine",
    "SelectionPolicyType",
    "describe_selection",
    "get_selection_engine",
    "select_parameters",
]
