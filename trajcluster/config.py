"""Configuration helpers for back-trajectory clustering.

Provides the :class:`ClusterConfig` defaults, field-by-field overrides, YAML
loading and small utilities for accessing nested configuration values.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from numbers import Integral
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Union

import yaml

from trajcluster.exceptions import ConfigurationError

METHODS = ("euclid", "angle")
STRATA_TYPES = ("default", "year", "month", "season", "weekday", "weekend", "hour")
HEMISPHERES = ("northern", "southern")

StratumType = Union[str, Callable[[Any], str]]


@dataclass(frozen=True)
class ClusterConfig:
    """Strongly-typed settings for one clustering call."""

    method: str = "Euclid"
    n_cluster: int = 5
    type: StratumType = "default"
    split_after: bool = False
    traj_length: int = 97
    n_jobs: int = 1
    hemisphere: str = "northern"
    max_iter: int = 100
    evaluate: bool = False
    plot: bool = False
    cols: str = "Set1"

    def update(self, **overrides: Any) -> "ClusterConfig":
        """Return a copy with the supplied fields overridden."""

        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {unknown}")
        return replace(self, **overrides)

    def validate(self) -> "ClusterConfig":
        """Fail fast on settings that would only break mid-computation."""

        if str(self.method).lower() not in METHODS:
            raise ConfigurationError(f"Unsupported distance method: {self.method!r} (expected 'Euclid' or 'Angle')")
        if isinstance(self.n_cluster, bool) or not isinstance(self.n_cluster, Integral) or self.n_cluster < 1:
            raise ConfigurationError(f"n_cluster must be a positive integer, got {self.n_cluster!r}")
        if self.traj_length < 2:
            raise ConfigurationError(f"traj_length must be at least 2, got {self.traj_length}")
        if isinstance(self.type, str) and self.type not in STRATA_TYPES:
            raise ConfigurationError(f"Unsupported type: {self.type!r}; expected one of {list(STRATA_TYPES)}")
        if not isinstance(self.type, str) and not callable(self.type):
            raise ConfigurationError("type must be a type name or a callable mapping a date to a label")
        if self.hemisphere not in HEMISPHERES:
            raise ConfigurationError(f"hemisphere must be one of {list(HEMISPHERES)}, got {self.hemisphere!r}")
        return self

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: str | Path) -> Dict[str, Any]:
    """Load a YAML configuration file."""

    with Path(path).open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def get_nested(config: Dict[str, Any], keys: list[str], default: Any) -> Any:
    """Retrieve a nested value from a config dict with a default."""

    current: Any = config
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current


def config_from_dict(section: Mapping[str, Any] | None) -> ClusterConfig:
    """Build a validated config from the ``clustering`` section of a YAML file."""

    return ClusterConfig().update(**dict(section or {})).validate()
