"""
Argon2 Parameter Space
Variant defaults, hard limits, and bounds validation.
"""

from typing import Dict

from argon2themax.core.schema import CostParameters, Limit, ParameterLimits, Variant


# Minimum memory per lane, in KiB (Argon2 needs 2 blocks per sync point).
MIN_KIB_PER_LANE = 8

ARGON2_LIMITS = ParameterLimits(
    hash_length=Limit(4, 2**32 - 1),
    memory_cost=Limit(3, 31),  # 8 KiB .. 2 TiB
    time_cost=Limit(1, 2**32 - 1),
    parallelism=Limit(1, 2**24 - 1),
)

ARGON2_DEFAULTS = CostParameters(
    hash_length=32,
    time_cost=3,
    memory_cost=12,
    parallelism=1,
    variant=Variant.ARGON2ID,
    raw=False,
)


class ParameterSpace:
    """
    Read-only view of the tunable space for one primitive.

    Usage:
        space = ParameterSpace()
        params = space.defaults(Variant.ARGON2I)
        assert space.in_bounds(params)
    """

    def __init__(
        self,
        limits: ParameterLimits = ARGON2_LIMITS,
        defaults: CostParameters = ARGON2_DEFAULTS,
    ):
        self._limits = limits
        self._defaults = defaults

    @property
    def limits(self) -> ParameterLimits:
        return self._limits

    def defaults(self, variant: Variant = ARGON2_DEFAULTS.variant) -> CostParameters:
        return self._defaults.with_changes(variant=Variant(variant))

    def field_limits(self) -> Dict[str, Limit]:
        return {
            "hash_length": self._limits.hash_length,
            "memory_cost": self._limits.memory_cost,
            "time_cost": self._limits.time_cost,
            "parallelism": self._limits.parallelism,
        }

    def in_bounds(self, params: CostParameters) -> bool:
        for name, limit in self.field_limits().items():
            if not limit.contains(getattr(params, name)):
                return False

        # Every lane needs its own minimum block allocation.
        return params.memory_kib >= MIN_KIB_PER_LANE * params.parallelism


DEFAULT_SPACE = ParameterSpace()


def in_bounds(params: CostParameters, space: ParameterSpace = DEFAULT_SPACE) -> bool:
    """Check params against the space's limits."""
    return space.in_bounds(params)
