"""
Argon2TheMax Data Schemas
Cost parameters, limits, measured samples, and calibration series.
"""

import json
from dataclasses import dataclass, field, asdict, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List

import numpy as np


class Variant(str, Enum):
    """Argon2 hash variants."""

    ARGON2D = "argon2d"
    ARGON2I = "argon2i"
    ARGON2ID = "argon2id"


@dataclass(frozen=True)
class Limit:
    """Inclusive bounds for one tunable field."""

    min: int
    max: int

    def contains(self, value: int) -> bool:
        return self.min <= value <= self.max

    def clamp(self, value: int) -> int:
        return max(self.min, min(value, self.max))

    @property
    def span(self) -> int:
        return self.max - self.min


@dataclass(frozen=True)
class ParameterLimits:
    """Per-field limits supplied by the hashing primitive."""

    hash_length: Limit
    memory_cost: Limit
    time_cost: Limit
    parallelism: Limit

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CostParameters:
    """
    Cost knobs for one Argon2 hash.

    memory_cost is the log2 of the memory size in KiB, never a byte count.
    """

    hash_length: int = 32
    time_cost: int = 3
    memory_cost: int = 12
    parallelism: int = 1
    variant: Variant = Variant.ARGON2ID
    raw: bool = False

    @property
    def memory_kib(self) -> int:
        return 2 ** self.memory_cost

    @property
    def derived_cost(self) -> int:
        """Unit-less proxy for the work an attacker spends per guess."""
        return self.memory_cost * self.parallelism * self.time_cost

    def with_changes(self, **changes: Any) -> "CostParameters":
        return replace(self, **changes)

    def to_argon2_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for argon2.low_level.hash_secret (minus secret, salt, type)."""
        return {
            "time_cost": self.time_cost,
            "memory_cost": self.memory_kib,
            "parallelism": self.parallelism,
            "hash_len": self.hash_length,
        }

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["variant"] = self.variant.value
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CostParameters":
        return cls(
            hash_length=int(data.get("hash_length", 32)),
            time_cost=int(data.get("time_cost", 3)),
            memory_cost=int(data.get("memory_cost", 12)),
            parallelism=int(data.get("parallelism", 1)),
            variant=Variant(data.get("variant", Variant.ARGON2ID.value)),
            raw=bool(data.get("raw", False)),
        )


@dataclass(frozen=True)
class Sample:
    """A single timed hash computation."""

    parameters: CostParameters
    elapsed_ms: float

    @property
    def derived_cost(self) -> int:
        return self.parameters.derived_cost

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parameters": self.parameters.to_dict(),
            "elapsed_ms": self.elapsed_ms,
            "derived_cost": self.derived_cost,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Sample":
        return cls(
            parameters=CostParameters.from_dict(data["parameters"]),
            elapsed_ms=float(data["elapsed_ms"]),
        )


@dataclass
class SampleSeries:
    """
    Samples produced by one calibration run, in measurement order.

    The series only grows; recorded samples are never reordered or replaced.
    """

    samples: List[Sample] = field(default_factory=list)
    budget_ms: float = 0.0
    policy: str = ""
    variant: Variant = Variant.ARGON2ID
    accumulated_ms: float = 0.0

    def append(self, sample: Sample) -> None:
        self.samples.append(sample)
        self.accumulated_ms += sample.elapsed_ms

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self):
        return iter(self.samples)

    def __getitem__(self, index: int) -> Sample:
        return self.samples[index]

    def summary(self) -> Dict[str, float]:
        """Distribution of measured hash times."""
        if not self.samples:
            return {"count": 0}

        times = np.array([s.elapsed_ms for s in self.samples], dtype=float)
        return {
            "count": int(times.size),
            "min_ms": float(np.min(times)),
            "max_ms": float(np.max(times)),
            "mean_ms": float(np.mean(times)),
            "median_ms": float(np.median(times)),
            "p95_ms": float(np.percentile(times, 95)),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "budget_ms": self.budget_ms,
            "policy": self.policy,
            "variant": self.variant.value,
            "accumulated_ms": self.accumulated_ms,
            "samples": [s.to_dict() for s in self.samples],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SampleSeries":
        series = cls(
            samples=[Sample.from_dict(s) for s in data.get("samples", [])],
            budget_ms=float(data.get("budget_ms", 0.0)),
            policy=data.get("policy", ""),
            variant=Variant(data.get("variant", Variant.ARGON2ID.value)),
        )
        series.accumulated_ms = float(
            data.get("accumulated_ms", sum(s.elapsed_ms for s in series.samples))
        )
        return series

    def save(self, path: Path) -> None:
        """Save series to JSON file."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> "SampleSeries":
        """Load series from JSON file."""
        with open(path) as f:
            return cls.from_dict(json.load(f))
