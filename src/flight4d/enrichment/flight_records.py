"""Strict schema for raw flight-plan records.

Each canonical field lists the keys it accepts (first match wins), how the
value is coerced and what happens when every key is absent. Keys outside this
table are ignored; nothing else is consulted.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

_REQUIRED = object()


class FlightRecordError(ValueError):
    """Raised when a raw flight record violates the input schema."""


def _to_str(value: Any) -> str:
    return str(value).strip()


def _to_icao(value: Any) -> str:
    return str(value).strip().upper()


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("booleans are not integers here")
    number = float(value)
    if not number.is_integer():
        raise ValueError(f"{value!r} is not a whole number")
    return int(number)


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers here")
    return float(value)


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "yes", "1"):
            return True
        if text in ("false", "no", "0", ""):
            return False
        raise ValueError(f"{value!r} is not a boolean")
    return bool(value)


@dataclass(frozen=True)
class FieldSpec:
    keys: Tuple[str, ...]
    coerce: Callable[[Any], Any]
    default: Any = _REQUIRED


FLIGHT_FIELDS: Dict[str, FieldSpec] = {
    "acid": FieldSpec(("ACID", "id", "callsign"), _to_str),
    "plane_type": FieldSpec(("Plane type", "type"), _to_str, ""),
    "departure": FieldSpec(("departure airport",), _to_icao),
    "arrival": FieldSpec(("arrival airport",), _to_icao),
    "departure_time": FieldSpec(("departure time",), _to_int),
    "arrival_time": FieldSpec(("arrival time",), _to_int, None),
    "speed_kts": FieldSpec(("aircraft speed",), _to_float),
    "cruise_alt_ft": FieldSpec(("altitude",), _to_float),
    "route": FieldSpec(("route",), _to_str, ""),
    "passengers": FieldSpec(("passengers",), _to_int, 0),
    "is_cargo": FieldSpec(("is_cargo",), _to_bool, False),
}


@dataclass(frozen=True)
class FlightRecord:
    """Validated flight-plan record prior to enrichment."""

    acid: str
    plane_type: str
    departure: str
    arrival: str
    departure_time: int
    arrival_time: Optional[int]
    speed_kts: float
    cruise_alt_ft: float
    route: str
    passengers: int
    is_cargo: bool


def _label(raw: Mapping[str, Any], index: int | None) -> str:
    for key in FLIGHT_FIELDS["acid"].keys:
        if raw.get(key) not in (None, ""):
            return f"flight {str(raw[key]).strip()!r}"
    return f"record #{index}" if index is not None else "record"


def parse_flight_record(raw: Mapping[str, Any], index: int | None = None) -> FlightRecord:
    """Validate ``raw`` against :data:`FLIGHT_FIELDS`."""
    if not isinstance(raw, Mapping):
        raise FlightRecordError(f"Record #{index} must be a JSON object")
    label = _label(raw, index)
    values: Dict[str, Any] = {}
    for name, spec in FLIGHT_FIELDS.items():
        key = next((k for k in spec.keys if raw.get(k) not in (None, "")), None)
        if key is None:
            if spec.default is _REQUIRED:
                raise FlightRecordError(
                    f"{label}: missing required field {name!r} (accepted keys: {', '.join(spec.keys)})"
                )
            values[name] = spec.default
            continue
        try:
            values[name] = spec.coerce(raw[key])
        except (TypeError, ValueError) as exc:
            raise FlightRecordError(f"{label}: invalid value for {key!r}: {raw[key]!r}") from exc

    if not values["acid"]:
        raise FlightRecordError(f"{label}: flight id cannot be blank")
    if values["speed_kts"] <= 0:
        raise FlightRecordError(f"{label}: aircraft speed must be positive")
    if values["cruise_alt_ft"] < 0:
        raise FlightRecordError(f"{label}: altitude cannot be negative")
    if values["passengers"] < 0:
        raise FlightRecordError(f"{label}: passengers cannot be negative")
    return FlightRecord(**values)


def parse_flight_records(raw_records: Sequence[Mapping[str, Any]]) -> List[FlightRecord]:
    return [parse_flight_record(raw, index) for index, raw in enumerate(raw_records)]


def load_flight_records(path: str | Path) -> List[FlightRecord]:
    """Read and validate a JSON array of raw flight plans."""
    records_path = Path(path)
    if not records_path.exists():
        raise FileNotFoundError(f"Flight plan JSON not found at {records_path}")
    with records_path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, list):
        raise FlightRecordError(f"{records_path} must contain a JSON array of flights")
    records = parse_flight_records(payload)
    logger.info("Loaded %d flight plans from %s", len(records), records_path)
    return records


__all__ = [
    "FLIGHT_FIELDS",
    "FieldSpec",
    "FlightRecord",
    "FlightRecordError",
    "load_flight_records",
    "parse_flight_record",
    "parse_flight_records",
]
