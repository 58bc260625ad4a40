"""
Tuning Configuration - defaults for calibration runs, loadable from YAML.
"""

import logging
from dataclasses import dataclass, fields, asdict, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from argon2themax.core.errors import ConfigError
from argon2themax.core.schema import Variant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TuningConfig:
    """Defaults applied when callers omit an argument."""

    default_budget_ms: float = 100.0
    warmup_rounds: int = 3
    salt_length: int = 16
    plain_input: str = "this is a super cool password"
    variant: Variant = Variant.ARGON2ID
    calibration_policy: str = "closest_match"
    selection_policy: str = "max_cost"

    def __post_init__(self):
        if self.default_budget_ms <= 0:
            raise ConfigError(f"default_budget_ms must be positive, got {self.default_budget_ms}")
        if self.warmup_rounds < 0:
            raise ConfigError(f"warmup_rounds must be >= 0, got {self.warmup_rounds}")
        if self.salt_length < 8:
            raise ConfigError(f"salt_length must be >= 8, got {self.salt_length}")

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["variant"] = self.variant.value
        return d


DEFAULT_CONFIG = TuningConfig()


def config_from_dict(data: Dict[str, Any], base: TuningConfig = DEFAULT_CONFIG) -> TuningConfig:
    """Overlay a mapping onto a base config."""
    known = {f.name for f in fields(TuningConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown tuning option(s): {', '.join(unknown)}")

    overrides = dict(data)
    if "variant" in overrides:
        try:
            overrides["variant"] = Variant(overrides["variant"])
        except ValueError as e:
            raise ConfigError(str(e)) from e

    return replace(base, **overrides)


def load_config(config_path: Optional[Union[str, Path]]) -> TuningConfig:
    """Load tuning configuration from a YAML file with a top-level ``tuning`` mapping."""
    if not config_path:
        return DEFAULT_CONFIG

    path = Path(config_path)
    if not path.exists():
        logger.warning(f"Tuning config not found: {config_path}")
        return DEFAULT_CONFIG

    with open(path, "r") as f:
        raw = yaml.safe_load(f) or {}

    section = raw.get("tuning", {}) if isinstance(raw, dict) else None
    if not isinstance(section, dict):
        raise ConfigError(f"Expected a 'tuning' mapping in {config_path}")

    config = config_from_dict(section)
    logger.info(f"Loaded tuning config from {config_path}")
    return config
