"""Time-indexed lookups into sampled trajectories."""

from __future__ import annotations

from typing import Optional, Sequence

from .domain_types import TrajectoryPoint


def sample_trajectory(
    trajectory: Sequence[TrajectoryPoint], t: float
) -> Optional[TrajectoryPoint]:
    """Interpolate ``trajectory`` at time ``t``.

    Queries before the first or after the last sample return that endpoint
    unchanged. Inside the range the bracketing pair is found by bisection and
    lat, lon and altitude are blended linearly; the result carries ``t``.
    Returns ``None`` for an empty trajectory.
    """
    if not trajectory:
        return None
    first, last = trajectory[0], trajectory[-1]
    if t <= first.t:
        return first
    if t >= last.t:
        return last

    # invariant: trajectory[lo].t <= t < trajectory[hi].t
    lo, hi = 0, len(trajectory) - 1
    while lo + 1 < hi:
        mid = (lo + hi) // 2
        if trajectory[mid].t <= t:
            lo = mid
        else:
            hi = mid

    a, b = trajectory[lo], trajectory[hi]
    span = b.t - a.t
    u = 0.0 if span == 0 else (t - a.t) / span
    return TrajectoryPoint(
        t=t,
        lat=a.lat + (b.lat - a.lat) * u,
        lon=a.lon + (b.lon - a.lon) * u,
        alt_ft=a.alt_ft + (b.alt_ft - a.alt_ft) * u,
    )


__all__ = ["sample_trajectory"]
