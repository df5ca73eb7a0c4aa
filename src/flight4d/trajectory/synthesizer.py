"""Build time-stamped 4D trajectories from a waypoint path."""

from __future__ import annotations

import logging
import math
from typing import List, Sequence, Union

from .domain_types import Point2D, Trajectory, TrajectoryPoint
from .path_builder import PathBuilder

logger = logging.getLogger(__name__)

CLIMB_FRACTION = 0.15
DESCENT_FRACTION = 0.15
DEFAULT_STEP_SEC = 60


def altitude_at_fraction(cruise_alt_ft: float, frac: float) -> float:
    """Climb/cruise/descent profile as a linear function of trip fraction."""
    if frac < CLIMB_FRACTION:
        return cruise_alt_ft * (frac / CLIMB_FRACTION)
    if frac > 1.0 - DESCENT_FRACTION:
        return cruise_alt_ft * ((1.0 - frac) / DESCENT_FRACTION)
    return cruise_alt_ft


def _round_feet(value: float) -> int:
    # Half-up rounding; ``round`` would use banker's rounding.
    return max(int(math.floor(value + 0.5)), 0)


def build_trajectory(
    path: Union[PathBuilder, Sequence[Point2D]],
    dep_time: float,
    arr_time: float,
    cruise_alt_ft: float,
    step_sec: float = DEFAULT_STEP_SEC,
) -> Trajectory:
    """Sample ``path`` every ``step_sec`` seconds between departure and arrival.

    The last sample is always placed exactly at ``arr_time`` on the final
    waypoint with zero altitude, so the final interval may be shorter than
    ``step_sec``. A non-positive trip duration yields an empty trajectory.
    """
    if step_sec <= 0:
        raise ValueError("step_sec must be positive.")
    builder = path if isinstance(path, PathBuilder) else PathBuilder(path)
    duration = arr_time - dep_time
    if duration <= 0:
        logger.debug(
            "Non-positive trip duration (%s -> %s); returning empty trajectory",
            dep_time,
            arr_time,
        )
        return ()

    samples: List[TrajectoryPoint] = []
    step_index = 0
    t = dep_time
    # A step landing exactly on arr_time is left to the touchdown sample below.
    while t < arr_time:
        frac = (t - dep_time) / duration
        pos = builder.position_at_fraction(frac)
        samples.append(
            TrajectoryPoint(
                t=t,
                lat=pos.lat,
                lon=pos.lon,
                alt_ft=_round_feet(altitude_at_fraction(cruise_alt_ft, frac)),
            )
        )
        step_index += 1
        t = dep_time + step_index * step_sec

    touchdown = builder.position_at_fraction(1.0)
    samples.append(TrajectoryPoint(t=arr_time, lat=touchdown.lat, lon=touchdown.lon, alt_ft=0))
    return tuple(samples)


__all__ = [
    "CLIMB_FRACTION",
    "DEFAULT_STEP_SEC",
    "DESCENT_FRACTION",
    "altitude_at_fraction",
    "build_trajectory",
]
