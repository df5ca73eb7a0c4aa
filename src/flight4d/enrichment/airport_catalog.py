"""ICAO airport lookup used to anchor flight paths."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping

from flight4d.trajectory.domain_types import Airport, Point2D

logger = logging.getLogger(__name__)


class MissingAirportError(KeyError):
    """Raised when a flight references an airport absent from the catalog."""

    def __init__(self, icao: str, flight_id: str | None = None):
        self.icao = icao
        self.flight_id = flight_id
        super().__init__(icao)

    def __str__(self) -> str:
        if self.flight_id:
            return f"Missing airport {self.icao!r} for flight {self.flight_id!r}"
        return f"Missing airport {self.icao!r}"


def _normalize_icao(code: object) -> str:
    return str(code or "").strip().upper()


@dataclass
class AirportCatalog:
    """Mapping from ICAO code to aerodrome reference position."""

    positions: Dict[str, Point2D] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.positions)

    def __contains__(self, icao: object) -> bool:
        return _normalize_icao(icao) in self.positions

    def lookup(self, icao: str, flight_id: str | None = None) -> Airport:
        code = _normalize_icao(icao)
        position = self.positions.get(code)
        if position is None:
            raise MissingAirportError(code, flight_id)
        return Airport(icao=code, position=position)

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "AirportCatalog":
        positions: Dict[str, Point2D] = {}
        for raw_code, entry in data.items():
            code = _normalize_icao(raw_code)
            if not code:
                raise ValueError("Airport codes cannot be empty")
            if not isinstance(entry, Mapping):
                raise TypeError(f"Airport entry for {code} must be a mapping with lat/lon")
            try:
                positions[code] = Point2D(lat=float(entry["lat"]), lon=float(entry["lon"]))
            except KeyError as exc:
                raise ValueError(f"Airport entry for {code} missing {exc.args[0]!r}") from exc
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Airport entry for {code} has non-numeric lat/lon") from exc
        return cls(positions=positions)

    @classmethod
    def from_json(cls, path: str | Path) -> "AirportCatalog":
        airports_path = Path(path)
        if not airports_path.exists():
            raise FileNotFoundError(f"Airport JSON not found at {airports_path}")
        with airports_path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        if not isinstance(payload, Mapping):
            raise TypeError("Airport JSON must contain a mapping of ICAO codes at the top level")
        catalog = cls.from_mapping(payload)
        logger.info("Loaded %d airports from %s", len(catalog), airports_path)
        return catalog


__all__ = ["AirportCatalog", "MissingAirportError"]
