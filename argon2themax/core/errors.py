"""
Argon2TheMax Exceptions
"""

from typing import Any, Optional


class TuningError(Exception):
    """Base class for calibration and selection errors."""


class UnknownPolicyError(TuningError, ValueError):
    """Raised when a policy factory receives an unrecognized policy."""

    def __init__(self, kind: str, policy: Any):
        self.kind = kind
        self.policy = policy
        super().__init__(f"Unknown {kind} policy: {policy!r}")


class EmptySeriesError(TuningError, ValueError):
    """Raised when selection is initialized with no samples."""

    def __init__(self, message: str = "No samples found in series."):
        super().__init__(message)


class NoSampleWithinBudgetError(TuningError):
    """
    Raised when no measured sample fits the requested budget.

    The fastest recorded sample is attached so callers can fall back to it
    explicitly.
    """

    def __init__(self, budget_ms: float, fastest: Optional[Any] = None):
        self.budget_ms = budget_ms
        self.fastest = fastest
        super().__init__(f"No samples found within {budget_ms}ms compute time.")


class SelectionNotInitializedError(TuningError, RuntimeError):
    """Raised when a selection engine is queried before initialize()."""


class ConfigError(TuningError):
    """Raised for malformed configuration files."""


class InvalidBudgetError(TuningError, ValueError):
    """Raised when a time budget is zero or negative."""

    def __init__(self, budget_ms: float):
        self.budget_ms = budget_ms
        super().__init__(f"budget_ms must be positive, got {budget_ms}")
