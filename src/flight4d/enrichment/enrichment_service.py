"""Library API for turning flight plans into 4D trajectories without the CLI."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from flight4d.safety.separation_config import SimulationConfig
from flight4d.trajectory.domain_types import Flight
from flight4d.trajectory.geodesy import KNOT_TO_MPS
from flight4d.trajectory.path_builder import PathBuilder
from flight4d.trajectory.synthesizer import build_trajectory

from .airport_catalog import AirportCatalog
from .flight_records import FlightRecord, load_flight_records
from .route_parser import RouteParseError, parse_route

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnrichmentInputs:
    """Filesystem configuration for an enrichment run."""

    flights_path: str | Path
    airports_path: str | Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "flights_path", Path(self.flights_path))
        object.__setattr__(self, "airports_path", Path(self.airports_path))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def enrich_record(record: FlightRecord, airports: AirportCatalog, *, step_sec: float = 60) -> Flight:
    """Resolve airports, parse the route and synthesise the trajectory.

    Without an explicit arrival time the trip duration is derived from the
    path length and the filed speed, rounded to whole seconds.
    """
    departure = airports.lookup(record.departure, record.acid)
    arrival = airports.lookup(record.arrival, record.acid)
    try:
        route_fixes = parse_route(record.route)
    except RouteParseError as exc:
        raise RouteParseError(exc.token, f"Flight {record.acid!r}: {exc}") from exc

    waypoints = (departure.position, *route_fixes, arrival.position)
    path = PathBuilder(waypoints)
    distance_m = path.total_length

    dep_time = record.departure_time
    if record.arrival_time is not None:
        arr_time = record.arrival_time
    else:
        arr_time = dep_time + _round_half_up(distance_m / (record.speed_kts * KNOT_TO_MPS))

    trajectory = build_trajectory(path, dep_time, arr_time, record.cruise_alt_ft, step_sec)
    if not trajectory:
        logger.warning(
            "Flight %s has non-positive duration (%s -> %s); trajectory is empty",
            record.acid,
            dep_time,
            arr_time,
        )

    return Flight(
        id=record.acid,
        plane_type=record.plane_type,
        departure=departure,
        arrival=arrival,
        dep_time=dep_time,
        arr_time=arr_time,
        cruise_alt_ft=record.cruise_alt_ft,
        speed_kts=record.speed_kts,
        passengers=record.passengers,
        is_cargo=record.is_cargo,
        distance_meters=_round_half_up(distance_m),
        waypoints=waypoints,
        trajectory=trajectory,
    )


class EnrichmentService:
    """All-or-nothing enrichment of a flight-plan batch."""

    def __init__(
        self,
        airports: AirportCatalog,
        config: SimulationConfig | None = None,
        flights_path: str | Path | None = None,
    ):
        self._airports = airports
        self._config = config or SimulationConfig()
        self._flights_path = Path(flights_path) if flights_path is not None else None

    @classmethod
    def from_inputs(
        cls, inputs: EnrichmentInputs, config: SimulationConfig | None = None
    ) -> "EnrichmentService":
        if not inputs.flights_path.exists():
            raise FileNotFoundError(f"Flights JSON not found at {inputs.flights_path}")
        airports = AirportCatalog.from_json(inputs.airports_path)
        return cls(airports, config, flights_path=inputs.flights_path)

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def flights_path(self) -> Path | None:
        return self._flights_path

    def load_records(self) -> List[FlightRecord]:
        """Parse the flight plans at the service's configured ``flights_path``."""
        if self._flights_path is None:
            raise ValueError("EnrichmentService was built without a flights_path")
        return load_flight_records(self._flights_path)

    def enrich(self, records: Iterable[FlightRecord]) -> List[Flight]:
        """Enrich every record; the first failure aborts the whole batch."""
        step = self._config.trajectory_step_sec
        flights = [enrich_record(record, self._airports, step_sec=step) for record in records]
        seen: set[str] = set()
        for flight in flights:
            if flight.id in seen:
                logger.warning("Duplicate flight id %s in enrichment batch", flight.id)
            seen.add(flight.id)
        logger.info("Enriched %d flights", len(flights))
        return flights

    def run(self) -> List[Flight]:
        return self.enrich(self.load_records())


__all__ = ["EnrichmentInputs", "EnrichmentService", "enrich_record"]
