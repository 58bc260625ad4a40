"""
Selection Engine.

Picks the best recorded sample for a time budget from a calibration
series. Each policy ranks the series best-first; selection returns the
highest-ranked sample whose hash time fits the budget.

Ranking (stable, so ties keep measurement order):
- MaxCost:      derived_cost, then elapsed_ms, descending
- ClosestMatch: elapsed_ms, descending
- MaxMemory:    memory_cost, then elapsed_ms, descending

When nothing fits, NoSampleWithinBudgetError is raised with the fastest
sample attached; there is no silent fallback.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from argon2themax.core.errors import (
    EmptySeriesError,
    NoSampleWithinBudgetError,
    SelectionNotInitializedError,
    UnknownPolicyError,
)
from argon2themax.core.schema import Sample, SampleSeries

logger = logging.getLogger(__name__)


class SelectionPolicyType(str, Enum):
    """Available selection ranking policies."""

    MAX_COST = "max_cost"
    CLOSEST_MATCH = "closest_match"
    MAX_MEMORY = "max_memory"


def _max_cost_key(sample: Sample) -> Tuple[float, ...]:
    return (sample.derived_cost, sample.elapsed_ms)


def _closest_match_key(sample: Sample) -> Tuple[float, ...]:
    return (sample.elapsed_ms,)


def _max_memory_key(sample: Sample) -> Tuple[float, ...]:
    return (sample.parameters.memory_cost, sample.elapsed_ms)


_RANK_KEYS = {
    SelectionPolicyType.MAX_COST: _max_cost_key,
    SelectionPolicyType.CLOSEST_MATCH: _closest_match_key,
    SelectionPolicyType.MAX_MEMORY: _max_memory_key,
}


class SelectionEngine:
    """
    Budget-constrained lookup over one sample series.

    Usage:
        selector = get_selection_engine(SelectionPolicyType.MAX_COST)
        selector.initialize(series)
        best = selector.select(250)
    """

    def __init__(self, policy_type: SelectionPolicyType):
        self.policy_type = policy_type
        self._rank_key = _RANK_KEYS[policy_type]
        self._ranked: Optional[List[Sample]] = None
        self._fastest: Optional[Sample] = None
        self._slowest: Optional[Sample] = None
        self._selected: Dict[float, Sample] = {}

    @property
    def name(self) -> str:
        return self.policy_type.value

    @property
    def initialized(self) -> bool:
        return self._ranked is not None

    def initialize(self, series: Union[SampleSeries, List[Sample]]) -> None:
        """
        Rank the series and record its fastest and slowest samples.

        Raises:
            EmptySeriesError: If the series has no samples
        """
        samples = list(series) if series is not None else []
        if not samples:
            raise EmptySeriesError()

        self._ranked = sorted(samples, key=self._rank_key, reverse=True)
        self._selected = {}

        # min/max return the first of equal elements, i.e. the earliest measured
        self._fastest = min(samples, key=lambda s: s.elapsed_ms)
        self._slowest = max(samples, key=lambda s: s.elapsed_ms)

        logger.debug(f"{self.name}: ranked {len(samples)} samples")

    def select(self, budget_ms: float) -> Sample:
        """
        Highest-ranked sample with elapsed_ms <= budget_ms.

        Raises:
            NoSampleWithinBudgetError: If every sample exceeds the budget
        """
        ranked = self._require_initialized()

        cached = self._selected.get(budget_ms)
        if cached is not None:
            return cached

        for sample in ranked:
            if sample.elapsed_ms <= budget_ms:
                self._selected[budget_ms] = sample
                return sample

        raise NoSampleWithinBudgetError(budget_ms, fastest=self._fastest)

    def fastest(self) -> Sample:
        self._require_initialized()
        return self._fastest

    def slowest(self) -> Sample:
        self._require_initialized()
        return self._slowest

    def ranked(self) -> List[Sample]:
        """Ranked ordering, best first."""
        return list(self._require_initialized())

    def _require_initialized(self) -> List[Sample]:
        if self._ranked is None:
            raise SelectionNotInitializedError(f"{self.name} selection used before initialize()")
        return self._ranked


def get_selection_engine(policy: Union[SelectionPolicyType, str]) -> SelectionEngine:
    """
    Create a fresh selection engine for a policy enum member or name.

    Raises:
        UnknownPolicyError: If the policy is not recognized
    """
    try:
        policy_type = SelectionPolicyType(policy)
    except ValueError:
        raise UnknownPolicyError("selection", policy) from None

    return SelectionEngine(policy_type)


def select_parameters(
    series: SampleSeries,
    budget_ms: float,
    policy: Union[SelectionPolicyType, str] = SelectionPolicyType.MAX_COST,
) -> Sample:
    """One-shot selection from a series."""
    selector = get_selection_engine(policy)
    selector.initialize(series)
    return selector.select(budget_ms)


def describe_selection(selector: SelectionEngine, budget_ms: float) -> Dict[str, Any]:
    """Summary of a selection for reporting."""
    chosen = selector.select(budget_ms)
    return {
        "policy": selector.name,
        "budget_ms": budget_ms,
        "selected": chosen.to_dict(),
        "fastest": selector.fastest().to_dict(),
        "slowest": selector.slowest().to_dict(),
    }
