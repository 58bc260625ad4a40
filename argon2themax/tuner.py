"""
Argon2 Parameter Tuner.

Wires calibration and selection together behind a memoization cache:

    budget -> cache lookup -> (miss) calibrate -> select -> cache -> parameters

The cache is keyed by (budget, calibration policy, selection policy,
variant). Concurrent misses on the same key are serialized so an
expensive calibration runs at most once per key.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterator, MutableMapping, Optional, Union

from argon2themax.calibration import (
    CalibrationEngine,
    CalibrationPolicy,
    CalibrationPolicyType,
    OnSample,
    get_calibration_policy,
)
from argon2themax.core.config import DEFAULT_CONFIG, TuningConfig
from argon2themax.core.schema import CostParameters, SampleSeries, Variant
from argon2themax.primitive import HashPrimitive
from argon2themax.selection import SelectionPolicyType, get_selection_engine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheKey:
    """Identity of one tuning request."""

    budget_ms: float
    calibration_policy: str
    selection_policy: str
    variant: str = Variant.ARGON2ID.value


class ParameterCache:
    """
    Content-addressed store of chosen parameters.

    The backing store is any mutable mapping (a plain dict by default), so
    tests can inject a clean store. Entries never expire; the first value
    written for a key wins.
    """

    def __init__(self, store: Optional[MutableMapping[CacheKey, CostParameters]] = None):
        self._store = {} if store is None else store
        self._guard = threading.Lock()
        self._key_locks: Dict[CacheKey, threading.Lock] = {}

    def get(self, key: CacheKey) -> Optional[CostParameters]:
        with self._guard:
            return self._store.get(key)

    def put(self, key: CacheKey, params: CostParameters) -> CostParameters:
        """Store params unless the key is already present; return the stored value."""
        with self._guard:
            existing = self._store.get(key)
            if existing is not None:
                return existing
            self._store[key] = params
            return params

    def lock_for(self, key: CacheKey) -> threading.Lock:
        with self._guard:
            return self._key_locks.setdefault(key, threading.Lock())

    def clear(self) -> None:
        """Drop stored parameters. Per-key locks survive so in-flight calibrations stay serialized."""
        with self._guard:
            self._store.clear()

    def keys(self) -> Iterator[CacheKey]:
        with self._guard:
            return iter(list(self._store.keys()))

    def __contains__(self, key: CacheKey) -> bool:
        with self._guard:
            return key in self._store

    def __len__(self) -> int:
        with self._guard:
            return len(self._store)


class Tuner:
    """
    Finds the strongest Argon2 parameters that hash within a time budget.

    Usage:
        tuner = Tuner()
        params = tuner.get_max_parameters(250)
        digest = tuner.primitive.hash("hunter2", salt, params)
    """

    def __init__(
        self,
        primitive: Optional[HashPrimitive] = None,
        cache: Optional[ParameterCache] = None,
        config: TuningConfig = DEFAULT_CONFIG,
        engine: Optional[CalibrationEngine] = None,
    ):
        if primitive is not None and engine is not None:
            raise ValueError("Pass either primitive or engine, not both; an engine carries its own primitive")

        self.config = config
        self.engine = engine or CalibrationEngine(primitive, warmup_rounds=config.warmup_rounds)
        self.cache = cache if cache is not None else ParameterCache()

    @property
    def primitive(self) -> HashPrimitive:
        return self.engine.primitive

    def get_max_parameters(
        self,
        budget_ms: Optional[float] = None,
        calibration_policy: Union[CalibrationPolicyType, str, CalibrationPolicy, None] = None,
        selection_policy: Union[SelectionPolicyType, str, None] = None,
        variant: Optional[Variant] = None,
    ) -> CostParameters:
        """
        Parameters of the best sample that hashes within budget_ms.

        Cached per (budget, policies, variant); a hit performs no hashing.

        Raises:
            UnknownPolicyError: If either policy is not recognized
            NoSampleWithinBudgetError: If no measured sample fits the budget
        """
        budget_ms = self.config.default_budget_ms if budget_ms is None else budget_ms
        variant = Variant(variant or self.config.variant)
        search = get_calibration_policy(calibration_policy or self.config.calibration_policy)
        selector = get_selection_engine(selection_policy or self.config.selection_policy)

        key = CacheKey(float(budget_ms), search.name, selector.name, variant.value)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {key}")
            return cached

        with self.cache.lock_for(key):
            # Another thread may have finished the same calibration meanwhile
            cached = self.cache.get(key)
            if cached is not None:
                return cached

            series = self.run_calibration(budget_ms, search, variant)
            selector.initialize(series)
            chosen = selector.select(budget_ms)

            logger.info(
                f"Selected {selector.name}: {chosen.elapsed_ms:.1f}ms, "
                f"memory_cost={chosen.parameters.memory_cost}, "
                f"time_cost={chosen.parameters.time_cost}, "
                f"parallelism={chosen.parameters.parallelism}"
            )
            return self.cache.put(key, chosen.parameters)

    async def get_max_parameters_async(
        self,
        budget_ms: Optional[float] = None,
        calibration_policy: Union[CalibrationPolicyType, str, CalibrationPolicy, None] = None,
        selection_policy: Union[SelectionPolicyType, str, None] = None,
        variant: Optional[Variant] = None,
    ) -> CostParameters:
        """Same as get_max_parameters, hashing in a worker thread."""
        return await asyncio.to_thread(
            self.get_max_parameters, budget_ms, calibration_policy, selection_policy, variant
        )

    def run_calibration(
        self,
        budget_ms: Optional[float] = None,
        policy: Union[CalibrationPolicyType, str, CalibrationPolicy, None] = None,
        variant: Optional[Variant] = None,
        plain_input: Optional[Union[str, bytes]] = None,
        salt_length: Optional[int] = None,
        on_sample: Optional[OnSample] = None,
    ) -> SampleSeries:
        """Run one uncached calibration; useful for persisting raw samples."""
        return self.engine.run(
            budget_ms=self.config.default_budget_ms if budget_ms is None else budget_ms,
            policy=policy or self.config.calibration_policy,
            variant=Variant(variant or self.config.variant),
            salt_length=salt_length or self.config.salt_length,
            plain_input=self.config.plain_input if plain_input is None else plain_input,
            on_sample=on_sample,
        )


# ============================================================================
# Process-wide Entry Points
# ============================================================================

_default_tuner: Optional[Tuner] = None
_default_tuner_lock = threading.Lock()


def get_default_tuner() -> Tuner:
    """Shared tuner whose cache lives for the whole process."""
    global _default_tuner
    with _default_tuner_lock:
        if _default_tuner is None:
            _default_tuner = Tuner()
        return _default_tuner


def get_max_parameters(
    budget_ms: float = DEFAULT_CONFIG.default_budget_ms,
    calibration_policy: Union[CalibrationPolicyType, str] = CalibrationPolicyType.CLOSEST_MATCH,
    selection_policy: Union[SelectionPolicyType, str] = SelectionPolicyType.MAX_COST,
    variant: Optional[Variant] = None,
) -> CostParameters:
    """Strongest parameters that hash within budget_ms on this machine."""
    return get_default_tuner().get_max_parameters(
        budget_ms, calibration_policy, selection_policy, variant
    )


def run_calibration(
    budget_ms: float,
    policy: Union[CalibrationPolicyType, str] = CalibrationPolicyType.CLOSEST_MATCH,
    variant: Variant = Variant.ARGON2ID,
    plain_input: Union[str, bytes] = DEFAULT_CONFIG.plain_input,
    salt_length: int = DEFAULT_CONFIG.salt_length,
    on_sample: Optional[OnSample] = None,
) -> SampleSeries:
    """Run a calibration with the shared tuner's engine."""
    return get_default_tuner().run_calibration(
        budget_ms, policy, variant, plain_input, salt_length, on_sample
    )
