"""
Argon2TheMax Utilities
Common utilities for timing, system inspection, and file I/O.
"""

import json
import logging
import math
import time
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union

import psutil

from argon2themax.core.schema import Limit

logger = logging.getLogger(__name__)


def get_monotonic_ns() -> int:
    """Get monotonic clock time in nanoseconds."""
    return time.perf_counter_ns()


def ns_to_ms(ns: int) -> float:
    """Convert nanoseconds to milliseconds."""
    return ns / 1_000_000


def ms_to_ns(ms: float) -> int:
    """Convert milliseconds to nanoseconds."""
    return int(ms * 1_000_000)


def cpu_count() -> int:
    """Logical CPU count, never less than 1."""
    return psutil.cpu_count(logical=True) or 1


def available_memory_bytes() -> int:
    """Memory that can be handed out without swapping."""
    return int(psutil.virtual_memory().available)


def memory_ceiling_exponent(limit: Limit, available_bytes: Optional[int] = None) -> int:
    """
    Largest log2(KiB) memory cost that fits in available memory.

    Clamped to the memory_cost limit.
    """
    if available_bytes is None:
        available_bytes = available_memory_bytes()

    available_kib = available_bytes / 1024
    if available_kib < 1:
        return limit.min

    return limit.clamp(int(math.floor(math.log2(available_kib))))


def default_parallelism(limit: Limit, cpus: Optional[int] = None) -> int:
    """Two lanes per logical CPU, clamped to the parallelism limit."""
    if cpus is None:
        cpus = cpu_count()
    return limit.clamp(cpus * 2)


def format_size(bytes: int) -> str:
    """Format bytes as human-readable string."""
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if abs(bytes) < 1024.0:
            return f"{bytes:.1f} {unit}"
        bytes /= 1024.0
    return f"{bytes:.1f} PB"


def safe_json_dump(data: Any, path: Union[str, Path], indent: int = 2) -> None:
    """Safely write JSON to file with atomic write pattern."""
    path = Path(path)
    temp_path = path.with_suffix(".tmp")

    try:
        with open(temp_path, "w") as f:
            json.dump(data, f, indent=indent, default=str)
        temp_path.replace(path)
    except Exception as e:
        logger.error(f"Failed to write JSON to {path}: {e}")
        if temp_path.exists():
            temp_path.unlink()
        raise


class Timer:
    """Context manager for timing code blocks."""

    def __init__(self, name: str = "", clock=get_monotonic_ns):
        self.name = name
        self.clock = clock
        self.start_ns = 0
        self.end_ns = 0
        self.duration_ns = 0
        self.duration_ms = 0.0

    def __enter__(self) -> "Timer":
        self.start_ns = self.clock()
        return self

    def __exit__(self, *args) -> None:
        self.end_ns = self.clock()
        self.duration_ns = self.end_ns - self.start_ns
        self.duration_ms = ns_to_ms(self.duration_ns)

        if self.name:
            logger.debug(f"{self.name}: {self.duration_ms:.2f} ms")


@dataclass(frozen=True)
class SystemResources:
    """Host capacity snapshot used to bound a calibration run."""

    cpus: int
    available_memory_bytes: int

    @classmethod
    def probe(cls) -> "SystemResources":
        return cls(cpus=cpu_count(), available_memory_bytes=available_memory_bytes())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
