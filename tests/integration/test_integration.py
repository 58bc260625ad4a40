"""
Argon2TheMax Integration Tests
Calibration, selection and hashing with real Argon2.
"""

import pytest

from argon2themax.calibration import CalibrationEngine, CalibrationPolicyType
from argon2themax.core.schema import CostParameters, Limit, ParameterLimits, SampleSeries
from argon2themax.core.space import ARGON2_LIMITS, ParameterSpace
from argon2themax.core.utils import SystemResources
from argon2themax.primitive import Argon2Primitive
from argon2themax.selection import SelectionPolicyType, select_parameters
from argon2themax.tuner import ParameterCache, Tuner

pytestmark = [pytest.mark.integration, pytest.mark.slow]


@pytest.fixture
def small_space():
    """At most 4 MiB and 4 passes so runs stay short."""
    limits = ParameterLimits(
        hash_length=ARGON2_LIMITS.hash_length,
        memory_cost=Limit(3, 12),
        time_cost=Limit(1, 4),
        parallelism=Limit(1, 2),
    )
    return ParameterSpace(limits, CostParameters(memory_cost=6, time_cost=1))


@pytest.fixture
def real_engine(small_space):
    resources = SystemResources(cpus=1, available_memory_bytes=2**30)
    return CalibrationEngine(Argon2Primitive(small_space), warmup_rounds=1, resources=lambda: resources)


class TestRealCalibration:
    """End-to-end runs against argon2-cffi."""

    @pytest.mark.parametrize("policy", list(CalibrationPolicyType))
    def test_series_within_limits(self, real_engine, small_space, policy):
        series = real_engine.run(1e6, policy)

        assert len(series) >= 1
        assert all(small_space.in_bounds(s.parameters) for s in series)
        assert all(s.elapsed_ms > 0 for s in series)

    def test_march_reaches_ceiling(self, real_engine):
        """With an unreachable budget the march covers the whole space."""
        series = real_engine.run(1e6, CalibrationPolicyType.MAX_MEMORY_MARCH)

        last = series[-1].parameters
        assert (last.memory_cost, last.time_cost) == (12, 4)

    def test_selected_parameters_hash_and_verify(self, real_engine, tmp_path):
        series = real_engine.run(1e6, CalibrationPolicyType.CLOSEST_MATCH)
        path = tmp_path / "series.json"
        series.save(path)

        loaded = SampleSeries.load(path)
        budget = loaded.samples[len(loaded) // 2].elapsed_ms
        chosen = select_parameters(loaded, budget, SelectionPolicyType.CLOSEST_MATCH)

        primitive = real_engine.primitive
        digest = primitive.hash("correct horse", primitive.generate_salt(16), chosen.parameters)

        assert chosen.elapsed_ms <= budget
        assert primitive.verify(digest, "correct horse")
        assert not primitive.verify(digest, "battery staple")

    def test_tuner_caches(self, real_engine):
        tuner = Tuner(engine=real_engine, cache=ParameterCache({}))

        first = tuner.get_max_parameters(1e6, "max_memory_march")
        assert tuner.get_max_parameters(1e6, "max_memory_march") is first
        assert first.memory_cost == 12
