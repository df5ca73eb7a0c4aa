from __future__ import annotations

import pytest

from flight4d.trajectory.domain_types import TrajectoryPoint
from flight4d.trajectory.sampler import sample_trajectory

TRAJECTORY = (
    TrajectoryPoint(t=0, lat=0.0, lon=0.0, alt_ft=0),
    TrajectoryPoint(t=100, lat=1.0, lon=1.0, alt_ft=1000),
    TrajectoryPoint(t=200, lat=2.0, lon=2.0, alt_ft=2000),
    TrajectoryPoint(t=300, lat=3.0, lon=3.0, alt_ft=1000),
)


def test_empty_trajectory_returns_none():
    assert sample_trajectory((), 10) is None


@pytest.mark.parametrize("t", [-1000, -1, 0])
def test_clamps_before_first_sample(t):
    assert sample_trajectory(TRAJECTORY, t) is TRAJECTORY[0]


@pytest.mark.parametrize("t", [300, 301, 10_000])
def test_clamps_after_last_sample(t):
    assert sample_trajectory(TRAJECTORY, t) is TRAJECTORY[-1]


def test_interpolates_between_bracketing_samples():
    point = sample_trajectory(TRAJECTORY, 150)
    assert point.t == 150
    assert point.lat == pytest.approx(1.5)
    assert point.lon == pytest.approx(1.5)
    assert point.alt_ft == pytest.approx(1500)

    descending = sample_trajectory(TRAJECTORY, 275)
    assert descending.alt_ft == pytest.approx(1250)


@pytest.mark.parametrize("index", [1, 2])
def test_exact_timestamps_reproduce_interior_points(index):
    point = sample_trajectory(TRAJECTORY, TRAJECTORY[index].t)
    expected = TRAJECTORY[index]
    assert (point.lat, point.lon, point.alt_ft) == pytest.approx(
        (expected.lat, expected.lon, expected.alt_ft)
    )


def test_duplicate_timestamps_do_not_divide_by_zero():
    trajectory = (
        TrajectoryPoint(t=0, lat=0.0, lon=0.0, alt_ft=0),
        TrajectoryPoint(t=100, lat=1.0, lon=1.0, alt_ft=100),
        TrajectoryPoint(t=100, lat=1.0, lon=1.0, alt_ft=0),
        TrajectoryPoint(t=200, lat=2.0, lon=2.0, alt_ft=0),
    )
    point = sample_trajectory(trajectory, 100)
    assert point.lat == pytest.approx(1.0)
    assert point.alt_ft == pytest.approx(0)


def test_single_point_trajectory_always_returns_it():
    only = (TrajectoryPoint(t=50, lat=5.0, lon=6.0, alt_ft=0),)
    assert sample_trajectory(only, 0) is only[0]
    assert sample_trajectory(only, 100) is only[0]
