"""Serialise enriched flights to and from the ``flights_4d.json`` contract.

Field names and units are fixed: altitudes in feet, speed in knots, distance
in metres, times in epoch seconds.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

from flight4d.trajectory.domain_types import (
    Airport,
    Flight,
    Point2D,
    TrajectoryPoint,
    require_trajectory,
)

logger = logging.getLogger(__name__)


def _number(value: float) -> int | float:
    # Keep whole numbers as JSON integers.
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _airport_to_record(airport: Airport) -> Dict[str, Any]:
    return {"icao": airport.icao, "lat": airport.position.lat, "lon": airport.position.lon}


def _airport_from_record(data: Mapping[str, Any]) -> Airport:
    return Airport(
        icao=str(data["icao"]),
        position=Point2D(lat=float(data["lat"]), lon=float(data["lon"])),
    )


def flight_to_record(flight: Flight) -> Dict[str, Any]:
    return {
        "ACID": flight.id,
        "planeType": flight.plane_type,
        "passengers": flight.passengers,
        "isCargo": bool(flight.is_cargo),
        "departure": _airport_to_record(flight.departure),
        "arrival": _airport_to_record(flight.arrival),
        "cruiseAltFt": _number(flight.cruise_alt_ft),
        "speedKts": _number(flight.speed_kts),
        "depTime": _number(flight.dep_time),
        "arrTime": _number(flight.arr_time),
        "durationSec": _number(flight.duration_sec),
        "distanceMeters": int(flight.distance_meters),
        "waypoints": [{"lat": p.lat, "lon": p.lon} for p in flight.waypoints],
        "trajectory": [
            {"t": _number(p.t), "lat": p.lat, "lon": p.lon, "altFt": _number(p.alt_ft)}
            for p in flight.trajectory
        ],
    }


def flight_from_record(data: Mapping[str, Any]) -> Flight:
    """Rebuild a :class:`Flight` from an output record.

    Raises ``ValueError`` for structurally broken records and
    :class:`TrajectoryError` when the trajectory has fewer than two points.
    """
    if not isinstance(data, Mapping):
        raise ValueError("Enriched flight records must be JSON objects")
    flight_id = str(data.get("ACID") or "").strip()
    if not flight_id:
        raise ValueError("Enriched flight record is missing 'ACID'")
    try:
        flight = Flight(
            id=flight_id,
            plane_type=str(data.get("planeType") or ""),
            departure=_airport_from_record(data["departure"]),
            arrival=_airport_from_record(data["arrival"]),
            dep_time=float(data["depTime"]),
            arr_time=float(data["arrTime"]),
            cruise_alt_ft=float(data["cruiseAltFt"]),
            speed_kts=float(data["speedKts"]),
            passengers=int(data.get("passengers") or 0),
            is_cargo=bool(data.get("isCargo", False)),
            distance_meters=int(data.get("distanceMeters") or 0),
            waypoints=tuple(
                Point2D(lat=float(p["lat"]), lon=float(p["lon"]))
                for p in data.get("waypoints") or []
            ),
            trajectory=tuple(
                TrajectoryPoint(
                    t=float(p["t"]),
                    lat=float(p["lat"]),
                    lon=float(p["lon"]),
                    alt_ft=float(p["altFt"]),
                )
                for p in data.get("trajectory") or []
            ),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Malformed enriched record for flight {flight_id!r}: {exc}") from exc
    require_trajectory(flight)
    return flight


def write_enriched_flights(path: str | Path, flights: Sequence[Flight]) -> Path:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as handle:
        json.dump([flight_to_record(f) for f in flights], handle, indent=2)
    return output_path


def load_flights(path: str | Path) -> List[Flight]:
    """Load an enriched ``flights_4d.json`` array."""
    flights_path = Path(path)
    if not flights_path.exists():
        raise FileNotFoundError(f"Enriched flights JSON not found at {flights_path}")
    with flights_path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, list):
        raise ValueError(f"{flights_path} must contain a JSON array of flights")
    flights = [flight_from_record(entry) for entry in payload]
    logger.info("Loaded %d enriched flights from %s", len(flights), flights_path)
    return flights


__all__ = [
    "flight_from_record",
    "flight_to_record",
    "load_flights",
    "write_enriched_flights",
]
