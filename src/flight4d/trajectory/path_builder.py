"""Polyline over sparse waypoints, parameterised by fraction of path length."""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from .domain_types import Point2D
from .geodesy import distance


class PathBuilder:
    """Measures a waypoint polyline and maps trip fractions onto it.

    Segment lengths are great-circle distances, but positions inside a segment
    are a planar blend of raw lat/lon. That is adequate at airport-to-airport
    segment scale; intermediate points are not exact geodesic positions.
    """

    def __init__(self, waypoints: Sequence[Point2D]):
        if not waypoints:
            raise ValueError("PathBuilder requires at least one waypoint.")
        self._waypoints: Tuple[Point2D, ...] = tuple(waypoints)
        self._segment_lengths = np.array(
            [distance(a, b) for a, b in zip(self._waypoints, self._waypoints[1:])],
            dtype=float,
        )
        # cumulative[i] is the path length before segment i; cumulative[-1] is the total.
        self._cumulative = np.concatenate(([0.0], np.cumsum(self._segment_lengths)))

    # ---------------------------------------------------------------- properties
    @property
    def waypoints(self) -> Tuple[Point2D, ...]:
        return self._waypoints

    @property
    def segment_lengths(self) -> Tuple[float, ...]:
        return tuple(float(length) for length in self._segment_lengths)

    @property
    def cumulative_lengths(self) -> Tuple[float, ...]:
        return tuple(float(length) for length in self._cumulative)

    @property
    def total_length(self) -> float:
        return float(self._cumulative[-1])

    # ------------------------------------------------------------------- lookup
    def position_at_fraction(self, frac: float) -> Point2D:
        """Return the interpolated position ``frac`` of the way along the path."""
        frac = min(max(float(frac), 0.0), 1.0)
        first, last = self._waypoints[0], self._waypoints[-1]
        total = self.total_length
        if len(self._waypoints) == 1 or total <= 0.0:
            return first
        if frac == 0.0:
            return first
        if frac == 1.0:
            return last

        target = frac * total
        # First segment whose end lies at or beyond the target distance.
        seg_idx = int(np.searchsorted(self._cumulative[1:], target, side="left"))
        if seg_idx >= len(self._segment_lengths):
            return last

        seg_len = float(self._segment_lengths[seg_idx])
        u = 0.0 if seg_len == 0.0 else (target - float(self._cumulative[seg_idx])) / seg_len
        u = min(max(u, 0.0), 1.0)
        a = self._waypoints[seg_idx]
        b = self._waypoints[seg_idx + 1]
        return Point2D(
            lat=a.lat + (b.lat - a.lat) * u,
            lon=a.lon + (b.lon - a.lon) * u,
        )


__all__ = ["PathBuilder"]
