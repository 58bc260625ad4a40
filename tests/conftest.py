"""
Argon2TheMax Test Configuration and Fixtures
=============================================
Shared fixtures and configuration for all tests.

© 2026 Sudheer Ibrahim Daniel Devu. All Rights Reserved.
"""

import pytest
from typing import Callable, List, Optional

from argon2themax.calibration import CalibrationEngine
from argon2themax.core.schema import CostParameters, ParameterLimits, Sample, Variant
from argon2themax.core.space import ParameterSpace
from argon2themax.core.utils import SystemResources
from argon2themax.primitive import HashPrimitive
from argon2themax.tuner import ParameterCache, Tuner


# =============================================================================
# Fakes
# =============================================================================

class FakeClock:
    """Nanosecond clock that only moves when a fake hash runs."""

    def __init__(self):
        self.now_ns = 0

    def __call__(self) -> int:
        return self.now_ns

    def advance_ms(self, ms: float) -> None:
        self.now_ns += int(round(ms * 1_000_000))


def doubling_cost(base_ms: float = 10.0) -> Callable[[CostParameters], float]:
    """Hash time doubles per memory step and grows linearly with time_cost."""
    def elapsed(params: CostParameters) -> float:
        return base_ms * 2 ** (params.memory_cost - 12) * params.time_cost
    return elapsed


class FakePrimitive(HashPrimitive):
    """Deterministic primitive: hashing advances a fake clock."""

    def __init__(
        self,
        clock: FakeClock,
        elapsed: Optional[Callable[[CostParameters], float]] = None,
        limits: Optional[ParameterLimits] = None,
        fail_when: Optional[Callable[[CostParameters], bool]] = None,
    ):
        self.clock = clock
        self.elapsed = elapsed or doubling_cost()
        self.space = ParameterSpace(limits) if limits else ParameterSpace()
        self.fail_when = fail_when
        self.calls: List[CostParameters] = []
        self.salts: List[int] = []

    def hash(self, plain, salt, params):
        if self.fail_when and self.fail_when(params):
            raise MemoryError(f"cannot allocate 2^{params.memory_cost} KiB")
        self.calls.append(params)
        self.clock.advance_ms(self.elapsed(params))
        return b"$fake$" + bytes(params.hash_length)

    def verify(self, digest, plain):
        return digest.startswith(b"$fake$")

    def generate_salt(self, length):
        self.salts.append(length)
        return b"\x00" * length

    def default_parameters(self, variant=Variant.ARGON2ID):
        return self.space.defaults(variant)

    def limits(self):
        return self.space.limits


def make_sample(
    elapsed_ms: float,
    memory_cost: int = 10,
    time_cost: int = 1,
    parallelism: int = 1,
) -> Sample:
    """Build a sample with explicit cost knobs."""
    params = CostParameters(
        memory_cost=memory_cost,
        time_cost=time_cost,
        parallelism=parallelism,
    )
    return Sample(parameters=params, elapsed_ms=elapsed_ms)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_primitive(fake_clock) -> FakePrimitive:
    return FakePrimitive(fake_clock)


@pytest.fixture
def resources() -> SystemResources:
    """Two CPUs and 1 GiB free (memory ceiling 2^20 KiB)."""
    return SystemResources(cpus=2, available_memory_bytes=2**30)


@pytest.fixture
def engine(fake_primitive, fake_clock, resources) -> CalibrationEngine:
    return CalibrationEngine(
        fake_primitive,
        clock=fake_clock,
        resources=lambda: resources,
    )


@pytest.fixture
def tuner(engine) -> Tuner:
    """Tuner with a clean, private cache."""
    return Tuner(engine=engine, cache=ParameterCache({}))


# =============================================================================
# Test Markers
# =============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow running")
    config.addinivalue_line("markers", "integration: marks tests that run real Argon2 hashes")
