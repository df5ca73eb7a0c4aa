from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

logger = logging.getLogger(__name__)

DEFAULT_HORIZONTAL_NM = 5.0
DEFAULT_VERTICAL_FT = 2000.0


@dataclass(frozen=True)
class SeparationMinima:
    """Loss of separation requires both distances to be strictly below these."""

    horizontal_nm: float = DEFAULT_HORIZONTAL_NM
    vertical_ft: float = DEFAULT_VERTICAL_FT

    def __post_init__(self) -> None:
        if self.horizontal_nm <= 0 or self.vertical_ft <= 0:
            raise ValueError("Separation minima must be positive")


@dataclass(frozen=True)
class SimulationConfig:
    """Tunables shared by the enrichment and safety-scan pipelines."""

    trajectory_step_sec: float = 60.0
    scan_step_sec: float = 60.0
    horizontal_nm: float = DEFAULT_HORIZONTAL_NM
    vertical_ft: float = DEFAULT_VERTICAL_FT
    heading_lookahead_sec: float = 60.0

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"{item.name} must be numeric, got {value!r}")
            if value <= 0:
                raise ValueError(f"{item.name} must be positive, got {value!r}")

    @property
    def minima(self) -> SeparationMinima:
        return SeparationMinima(horizontal_nm=self.horizontal_nm, vertical_ft=self.vertical_ft)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SimulationConfig":
        known = {item.name for item in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown simulation config keys: %s", ", ".join(unknown))
        kwargs: Dict[str, Any] = {key: data[key] for key in known if data.get(key) is not None}
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "SimulationConfig":
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Simulation config YAML not found at {config_path}")
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        if not isinstance(data, Mapping):
            raise TypeError("Simulation config YAML must contain a mapping at the top level")
        return cls.from_mapping(data)

    def to_yaml(self, path: str | Path) -> None:
        dest = Path(path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        with dest.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(asdict(self), handle, sort_keys=True)


__all__ = [
    "DEFAULT_HORIZONTAL_NM",
    "DEFAULT_VERTICAL_FT",
    "SeparationMinima",
    "SimulationConfig",
]
