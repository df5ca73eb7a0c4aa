"""Read-only flight set that sampling, detection and scans operate on."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Set, Union

from flight4d.trajectory.domain_types import Flight, SampledPosition, require_trajectory
from flight4d.trajectory.geodesy import bearing
from flight4d.trajectory.sampler import sample_trajectory

from .conflict_detector import detect_conflicts
from .safety_scanner import SafetyReport, scan
from .separation_config import SeparationMinima

logger = logging.getLogger(__name__)

FlightRef = Union[Flight, str]


class SimulationContext:
    """Owns an immutable set of enriched flights and the simulated time window.

    ``sim_start`` is the earliest departure and ``sim_end`` the latest arrival.
    Every query is a pure function of the flight set and the given time.
    """

    def __init__(
        self,
        flights: Iterable[Flight],
        minima: SeparationMinima | None = None,
        heading_lookahead_sec: float = 60.0,
    ):
        self._flights: Dict[str, Flight] = {}
        for flight in flights:
            if flight.id in self._flights:
                raise ValueError(f"Duplicate flight id {flight.id!r} in simulation context")
            require_trajectory(flight)
            self._flights[flight.id] = flight
        if not self._flights:
            raise ValueError("Simulation context requires at least one flight")
        self.minima = minima or SeparationMinima()
        self.heading_lookahead_sec = heading_lookahead_sec
        self.sim_start = min(f.dep_time for f in self._flights.values())
        self.sim_end = max(f.arr_time for f in self._flights.values())
        if self.sim_end <= self.sim_start:
            raise ValueError(
                f"Bad depTime/arrTime: simulation window [{self.sim_start}, {self.sim_end}] is empty"
            )
        logger.debug(
            "Simulation context with %d flights over [%s, %s]",
            len(self._flights),
            self.sim_start,
            self.sim_end,
        )

    # ---------------------------------------------------------------- accessors
    @property
    def flights(self) -> List[Flight]:
        return list(self._flights.values())

    @property
    def flight_ids(self) -> List[str]:
        return list(self._flights.keys())

    def __len__(self) -> int:
        return len(self._flights)

    def get_flight(self, flight_id: str) -> Flight:
        key = str(flight_id)
        if key not in self._flights:
            raise KeyError(f"Unknown flight {key}")
        return self._flights[key]

    def _resolve(self, flight: FlightRef) -> Flight:
        if isinstance(flight, Flight):
            # Flights from outside the context have not been validated yet.
            require_trajectory(flight)
            return flight
        return self.get_flight(flight)

    # ------------------------------------------------------------------ queries
    @staticmethod
    def is_active(flight: Flight, t: float) -> bool:
        return flight.dep_time <= t <= flight.arr_time

    def sample(self, flight: FlightRef, t: float) -> SampledPosition:
        resolved = self._resolve(flight)
        point = sample_trajectory(resolved.trajectory, t)
        return SampledPosition(id=resolved.id, lat=point.lat, lon=point.lon, alt_ft=point.alt_ft)

    def active_flights_at(self, t: float) -> List[SampledPosition]:
        return [self.sample(f, t) for f in self._flights.values() if self.is_active(f, t)]

    def detect_conflicts(self, t: float) -> Set[str]:
        return detect_conflicts(self.active_flights_at(t), self.minima)

    def heading_at(
        self, flight: FlightRef, t: float, lookahead_sec: Optional[float] = None
    ) -> float:
        """Bearing from the position at ``t`` towards the one ``lookahead_sec`` later."""
        if lookahead_sec is None:
            lookahead_sec = self.heading_lookahead_sec
        here = self.sample(flight, t)
        ahead = self.sample(flight, t + lookahead_sec)
        return bearing(here.position, ahead.position)

    def snapshot(self, t: float, lookahead_sec: Optional[float] = None) -> List[Dict[str, object]]:
        """Plain-data frame for a renderer: one entry per flight, active or not."""
        in_conflict = self.detect_conflicts(t)
        frame: List[Dict[str, object]] = []
        for flight in self._flights.values():
            position = self.sample(flight, t)
            frame.append(
                {
                    "id": flight.id,
                    "lat": position.lat,
                    "lon": position.lon,
                    "altFt": position.alt_ft,
                    "heading": self.heading_at(flight, t, lookahead_sec),
                    "active": self.is_active(flight, t),
                    "inConflict": flight.id in in_conflict,
                }
            )
        return frame

    def scan(
        self,
        step_sec: float = 60.0,
        *,
        times: Optional[Iterable[float]] = None,
        should_continue: Optional[Callable[[], bool]] = None,
        record_timeline: bool = False,
    ) -> SafetyReport:
        return scan(
            self,
            step_sec,
            self.minima,
            times=times,
            should_continue=should_continue,
            record_timeline=record_timeline,
        )


__all__ = ["SimulationContext"]
