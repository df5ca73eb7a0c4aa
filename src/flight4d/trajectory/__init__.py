"""Trajectory package exports."""

from .domain_types import (
    Airport,
    Flight,
    Point2D,
    SampledPosition,
    Trajectory,
    TrajectoryError,
    TrajectoryPoint,
    require_trajectory,
)
from .geodesy import bearing, distance, distance_nm
from .path_builder import PathBuilder
from .sampler import sample_trajectory
from .synthesizer import altitude_at_fraction, build_trajectory

__all__ = [
    "Airport",
    "Flight",
    "PathBuilder",
    "Point2D",
    "SampledPosition",
    "Trajectory",
    "TrajectoryError",
    "TrajectoryPoint",
    "altitude_at_fraction",
    "bearing",
    "build_trajectory",
    "distance",
    "distance_nm",
    "require_trajectory",
    "sample_trajectory",
]
