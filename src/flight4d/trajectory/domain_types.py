"""Core dataclasses shared across the trajectory and safety packages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class Point2D:
    """Geographic position in decimal degrees."""

    lat: float
    lon: float


@dataclass(frozen=True)
class TrajectoryPoint:
    """Single 4D sample: epoch seconds, position and altitude in feet."""

    t: float
    lat: float
    lon: float
    alt_ft: float

    @property
    def position(self) -> Point2D:
        return Point2D(self.lat, self.lon)


Trajectory = Tuple[TrajectoryPoint, ...]


@dataclass(frozen=True)
class Airport:
    """Departure or arrival aerodrome resolved from the airport lookup."""

    icao: str
    position: Point2D


@dataclass(frozen=True)
class Flight:
    """Enriched flight plan with its planned 4D trajectory."""

    id: str
    plane_type: str
    departure: Airport
    arrival: Airport
    dep_time: float
    arr_time: float
    cruise_alt_ft: float
    speed_kts: float
    passengers: int = 0
    is_cargo: bool = False
    distance_meters: int = 0
    waypoints: Tuple[Point2D, ...] = field(default_factory=tuple)
    trajectory: Trajectory = field(default_factory=tuple)

    @property
    def duration_sec(self) -> float:
        return self.arr_time - self.dep_time


class TrajectoryError(ValueError):
    """Raised when a flight's trajectory cannot be sampled."""


def require_trajectory(flight: Flight, min_points: int = 2) -> None:
    """Reject flights whose trajectory is too short to interpolate."""
    if len(flight.trajectory) < min_points:
        raise TrajectoryError(
            f"Flight {flight.id!r} has {len(flight.trajectory)} trajectory points; "
            f"at least {min_points} are required"
        )


@dataclass(frozen=True)
class SampledPosition:
    """Interpolated state of one flight at a single instant."""

    id: str
    lat: float
    lon: float
    alt_ft: float

    @property
    def position(self) -> Point2D:
        return Point2D(self.lat, self.lon)


__all__ = [
    "Airport",
    "Flight",
    "Point2D",
    "SampledPosition",
    "Trajectory",
    "TrajectoryError",
    "TrajectoryPoint",
    "require_trajectory",
]
