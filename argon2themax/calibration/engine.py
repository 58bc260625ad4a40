"""
Calibration Engine.

Times repeated Argon2 hashes while a search policy walks the cost
parameter space. Measurements are strictly sequential: a hash finishes
before the next one starts, so runs never contend with themselves for
CPU or memory.
"""

import logging
from enum import Enum
from typing import Callable, Optional, Union

from argon2themax.calibration.policies import (
    CalibrationPolicy,
    CalibrationPolicyType,
    SearchContext,
    get_calibration_policy,
)
from argon2themax.core.errors import InvalidBudgetError
from argon2themax.core.schema import CostParameters, Sample, SampleSeries, Variant
from argon2themax.core.space import ParameterSpace
from argon2themax.core.utils import SystemResources, Timer, get_monotonic_ns
from argon2themax.primitive import Argon2Primitive, HashPrimitive

logger = logging.getLogger(__name__)

DEFAULT_WARMUP_ROUNDS = 3
DEFAULT_PLAIN_INPUT = "this is a super cool password"
DEFAULT_SALT_LENGTH = 16


class SampleAction(str, Enum):
    """Callback verdict after each measurement."""

    CONTINUE = "continue"
    STOP = "stop"


OnSample = Callable[[Sample], Optional[Union[bool, SampleAction]]]


def _should_stop(verdict: Optional[Union[bool, SampleAction]]) -> bool:
    return verdict is False or verdict == SampleAction.STOP


class CalibrationEngine:
    """
    Adaptive benchmark driver.

    Features:
    - Untimed warm-up hashes before measuring
    - Policy-driven parameter stepping with bounded iterations
    - Cooperative cancellation via the on_sample callback

    Usage:
        engine = CalibrationEngine()
        series = engine.run(250, CalibrationPolicyType.CLOSEST_MATCH)
        print(f"{len(series)} samples in {series.accumulated_ms:.0f}ms")
    """

    def __init__(
        self,
        primitive: Optional[HashPrimitive] = None,
        warmup_rounds: int = DEFAULT_WARMUP_ROUNDS,
        clock: Callable[[], int] = get_monotonic_ns,
        resources: Optional[Callable[[], SystemResources]] = None,
    ):
        self.primitive = primitive or Argon2Primitive()
        self.warmup_rounds = warmup_rounds
        self.clock = clock
        self.resources = resources or SystemResources.probe

    def run(
        self,
        budget_ms: float,
        policy: Union[CalibrationPolicyType, str, CalibrationPolicy] = CalibrationPolicyType.CLOSEST_MATCH,
        variant: Variant = Variant.ARGON2ID,
        salt_length: int = DEFAULT_SALT_LENGTH,
        plain_input: Union[str, bytes] = DEFAULT_PLAIN_INPUT,
        on_sample: Optional[OnSample] = None,
    ) -> SampleSeries:
        """
        Run one calibration.

        Args:
            budget_ms: Time budget for a single hash
            policy: Search policy (enum, name, or instance)
            variant: Argon2 variant to time
            salt_length: Length of the random salt in bytes
            plain_input: Password to hash
            on_sample: Called after every measurement; returning False or
                SampleAction.STOP ends the run

        Returns:
            Samples in measurement order

        Raises:
            UnknownPolicyError: If the policy is not recognized
            InvalidBudgetError: If the budget is not positive
        """
        if budget_ms <= 0:
            raise InvalidBudgetError(budget_ms)

        search = get_calibration_policy(policy)
        variant = Variant(variant)
        limits = self.primitive.limits()

        params, state = search.prepare(
            self.primitive.default_parameters(variant), limits, self.resources()
        )
        if not ParameterSpace(limits).in_bounds(params):
            raise ValueError(f"Starting parameters out of bounds: {params}")

        context = SearchContext(budget_ms=budget_ms, baseline=params, limits=limits)
        series = SampleSeries(budget_ms=budget_ms, policy=search.name, variant=variant)

        logger.info(f"Starting calibration: policy={search.name}, budget={budget_ms}ms, variant={variant.value}")

        salt = self.primitive.generate_salt(salt_length)

        # Warm up so the first timing is not skewed by cold caches
        for _ in range(self.warmup_rounds):
            self.primitive.hash(plain_input, salt, params)

        while True:
            sample = self._measure(plain_input, salt, params)
            series.append(sample)
            context = context.add_elapsed(sample.elapsed_ms)

            logger.debug(
                f"Took {sample.elapsed_ms:.2f}ms. Parallelism: {params.parallelism}. "
                f"MemoryCost: {params.memory_cost} ({params.memory_kib / 1024:g}MB). "
                f"TimeCost: {params.time_cost}."
            )

            if on_sample is not None and _should_stop(on_sample(sample)):
                logger.info("Calibration cancelled by callback")
                break

            step = search.next_parameters(context, state, sample, params)
            if step is None:
                logger.debug("Search space exhausted")
                break
            params, state = step

            if search.is_done(context, state, sample):
                break

        logger.info(
            f"Calibration complete: {len(series)} samples, "
            f"{context.accumulated_ms:.1f}ms spent hashing"
        )
        return series

    def _measure(self, plain_input: Union[str, bytes], salt: bytes, params: CostParameters) -> Sample:
        try:
            with Timer(clock=self.clock) as timer:
                self.primitive.hash(plain_input, salt, params)
        except Exception as e:
            logger.error(f"Hash failed with {params}: {e}")
            raise

        return Sample(parameters=params, elapsed_ms=timer.duration_ms)
