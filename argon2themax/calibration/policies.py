"""
Calibration Search Policies.

Each policy decides how to walk the cost parameter space between
measurements. Policies are stateless objects; all per-run scratch data
lives in a frozen, policy-specific state value that the calibration
engine threads through every step.

- ClosestMatchPolicy: staircase search, spends spare budget on memory first
- MaxMemoryMarchPolicy: push memory to the ceiling, then add iterations
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
from typing import Generic, Optional, Tuple, TypeVar, Union

from argon2themax.core.errors import UnknownPolicyError
from argon2themax.core.schema import CostParameters, ParameterLimits, Sample
from argon2themax.core.utils import (
    SystemResources,
    default_parallelism,
    memory_ceiling_exponent,
)
from argon2themax.core.space import MIN_KIB_PER_LANE

logger = logging.getLogger(__name__)

S = TypeVar("S")


class CalibrationPolicyType(str, Enum):
    """Available calibration search policies."""

    CLOSEST_MATCH = "closest_match"
    MAX_MEMORY_MARCH = "max_memory_march"


# ============================================================================
# Search State
# ============================================================================


@dataclass(frozen=True)
class SearchContext:
    """Read-only facts about one calibration run."""

    budget_ms: float
    baseline: CostParameters  # starting parameters, before any step
    limits: ParameterLimits
    accumulated_ms: float = 0.0

    def add_elapsed(self, elapsed_ms: float) -> "SearchContext":
        return replace(self, accumulated_ms=self.accumulated_ms + elapsed_ms)


@dataclass(frozen=True)
class MarchState:
    """MaxMemoryMarchPolicy scratch data."""

    memory_ceiling: int


@dataclass(frozen=True)
class StaircaseState:
    """ClosestMatchPolicy scratch data."""

    memory_ceiling: int
    max_samples: int
    samples_taken: int = 0
    last_overshot: bool = False


# ============================================================================
# Policy Interface
# ============================================================================


class CalibrationPolicy(ABC, Generic[S]):
    """
    Decision points of a calibration run.

    prepare() fixes the starting parameters and initial state,
    next_parameters() proposes the following measurement (or None when
    the space is exhausted), and is_done() ends the run after a step.
    """

    policy_type: CalibrationPolicyType

    @property
    def name(self) -> str:
        return self.policy_type.value

    @abstractmethod
    def prepare(
        self,
        start: CostParameters,
        limits: ParameterLimits,
        resources: SystemResources,
    ) -> Tuple[CostParameters, S]:
        pass

    @abstractmethod
    def next_parameters(
        self,
        context: SearchContext,
        state: S,
        last_sample: Sample,
        params: CostParameters,
    ) -> Optional[Tuple[CostParameters, S]]:
        pass

    def is_done(self, context: SearchContext, state: S, last_sample: Sample) -> bool:
        return last_sample.elapsed_ms >= context.budget_ms


def _bounded_start(
    start: CostParameters, limits: ParameterLimits, resources: SystemResources
) -> Tuple[CostParameters, int]:
    """Shared setup: lanes from CPU count, memory ceiling from free memory."""
    parallelism = default_parallelism(limits.parallelism, resources.cpus)
    # Keep enough memory per lane for the starting memory cost.
    parallelism = max(limits.parallelism.min, min(parallelism, start.memory_kib // MIN_KIB_PER_LANE))

    ceiling = memory_ceiling_exponent(limits.memory_cost, resources.available_memory_bytes)
    return start.with_changes(parallelism=parallelism), ceiling


# ============================================================================
# Policies
# ============================================================================


class MaxMemoryMarchPolicy(CalibrationPolicy[MarchState]):
    """
    Raise memory one step at a time up to the ceiling, then raise time.

    Stops when both memory and time are at their ceilings, or (via the
    default is_done) as soon as a hash reaches the budget.
    """

    policy_type = CalibrationPolicyType.MAX_MEMORY_MARCH

    def prepare(self, start, limits, resources):
        params, ceiling = _bounded_start(start, limits, resources)
        logger.debug(
            f"{self.name}: parallelism={params.parallelism}, memory ceiling=2^{ceiling} KiB"
        )
        return params, MarchState(memory_ceiling=ceiling)

    def next_parameters(self, context, state, last_sample, params):
        if params.memory_cost < state.memory_ceiling:
            return params.with_changes(memory_cost=params.memory_cost + 1), state

        if params.time_cost < context.limits.time_cost.max:
            return params.with_changes(time_cost=params.time_cost + 1), state

        # Memory and time both maxed out.
        return None


class ClosestMatchPolicy(CalibrationPolicy[StaircaseState]):
    """
    Staircase search over (memory, time).

    At each memory level, add iterations until the budget is overshot.
    Then reset iterations to the baseline and step up memory. The search
    ends when the first attempt at a new memory level also overshoots,
    when memory reaches its ceiling, or after as many samples as there
    are memory and time values combined.
    """

    policy_type = CalibrationPolicyType.CLOSEST_MATCH

    def prepare(self, start, limits, resources):
        params, ceiling = _bounded_start(start, limits, resources)
        max_samples = limits.memory_cost.span + limits.time_cost.span + 2
        logger.debug(
            f"{self.name}: parallelism={params.parallelism}, memory ceiling=2^{ceiling} KiB, "
            f"at most {max_samples} samples"
        )
        return params, StaircaseState(memory_ceiling=ceiling, max_samples=max_samples)

    def next_parameters(self, context, state, last_sample, params):
        state = replace(state, samples_taken=state.samples_taken + 1)
        if state.samples_taken >= state.max_samples:
            logger.debug(f"{self.name}: sample cap of {state.max_samples} reached")
            return None

        if last_sample.elapsed_ms >= context.budget_ms:
            # Even the baseline time cost overshot at this memory level.
            if state.last_overshot:
                return None

            if params.memory_cost >= state.memory_ceiling:
                return None

            next_params = params.with_changes(
                time_cost=context.baseline.time_cost,
                memory_cost=params.memory_cost + 1,
            )
            return next_params, replace(state, last_overshot=True)

        if params.time_cost >= context.limits.time_cost.max:
            return None

        next_params = params.with_changes(time_cost=params.time_cost + 1)
        return next_params, replace(state, last_overshot=False)

    def is_done(self, context, state, last_sample):
        # Overshooting only moves the staircase; next_parameters ends the run.
        return False


_POLICIES = {
    CalibrationPolicyType.CLOSEST_MATCH: ClosestMatchPolicy,
    CalibrationPolicyType.MAX_MEMORY_MARCH: MaxMemoryMarchPolicy,
}


def get_calibration_policy(
    policy: Union[CalibrationPolicyType, str, CalibrationPolicy],
) -> CalibrationPolicy:
    """
    Resolve a policy enum member or name to a policy instance.

    Raises:
        UnknownPolicyError: If the policy is not recognized
    """
    if isinstance(policy, CalibrationPolicy):
        return policy

    try:
        policy_type = CalibrationPolicyType(policy)
    except ValueError:
        raise UnknownPolicyError("calibration", policy) from None

    return _POLICIES[policy_type]()
