"""Tests for the reference line."""

import math
import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dp_poly_path.core.data_structures import SLPoint
from dp_poly_path.core.exceptions import ProjectionFailure
from dp_poly_path.planning.reference_line import ReferenceLine


RADIUS = 50.0


@pytest.fixture
def straight_line():
    """Straight line from (0,0) to (100,0), 3.5m road on each side."""
    return ReferenceLine.straight(100.0)


@pytest.fixture
def arc_line():
    """Left-turning arc of radius 50m, 60m long."""
    s = np.linspace(0.0, 60.0, 61)
    return ReferenceLine(RADIUS * np.sin(s / RADIUS), RADIUS * (1.0 - np.cos(s / RADIUS)))


def test_straight_geometry(straight_line):
    assert np.isclose(straight_line.length, 100.0)

    ref = straight_line.reference_point_at(42.0)
    assert np.isclose(ref.x, 42.0)
    assert np.isclose(ref.y, 0.0, atol=1e-9)
    assert np.isclose(ref.heading, 0.0, atol=1e-9)
    assert np.isclose(ref.kappa, 0.0, atol=1e-9)


def test_reference_point_is_clamped(straight_line):
    ref = straight_line.reference_point_at(150.0)
    assert np.isclose(ref.x, 100.0)


def test_project_to_frenet(straight_line):
    """Test projection of a point left of the line."""
    sl = straight_line.project_to_frenet(10.0, 2.0)
    assert np.isclose(sl.s, 10.0, atol=1e-6)
    assert np.isclose(sl.l, 2.0, atol=1e-6)

    sl = straight_line.project_to_frenet(33.3, -1.2)
    assert np.isclose(sl.s, 33.3, atol=1e-6)
    assert np.isclose(sl.l, -1.2, atol=1e-6)


def test_project_outside_line_fails(straight_line):
    with pytest.raises(ProjectionFailure):
        straight_line.project_to_frenet(-5.0, 0.0)
    with pytest.raises(ProjectionFailure):
        straight_line.project_to_frenet(150.0, 1.0)
    with pytest.raises(ProjectionFailure):
        straight_line.project_to_frenet(float('nan'), 0.0)


def test_to_cartesian(straight_line):
    x, y = straight_line.to_cartesian(SLPoint(s=20.0, l=-1.0))
    assert np.isclose(x, 20.0)
    assert np.isclose(y, -1.0)

    with pytest.raises(ProjectionFailure):
        straight_line.to_cartesian(SLPoint(s=120.0, l=0.0))


def test_is_on_road(straight_line):
    assert straight_line.is_on_road(SLPoint(s=50.0, l=3.0))
    assert straight_line.is_on_road(SLPoint(s=50.0, l=-3.5))
    assert not straight_line.is_on_road(SLPoint(s=50.0, l=4.0))
    assert not straight_line.is_on_road(SLPoint(s=-1.0, l=0.0))
    assert not straight_line.is_on_road(SLPoint(s=101.0, l=0.0))


def test_arc_curvature(arc_line):
    """Curvature and heading in the middle of the arc match the circle."""
    ref = arc_line.reference_point_at(30.0)
    assert np.isclose(ref.kappa, 1.0 / RADIUS, atol=1e-3)
    assert np.isclose(ref.heading, 30.0 / RADIUS, atol=1e-3)
    assert abs(ref.dkappa) < 1e-3


def test_arc_round_trip(arc_line):
    """Frenet -> Cartesian -> Frenet recovers s and l."""
    for s, l in [(10.0, 1.5), (30.0, -2.0), (45.0, 0.5)]:
        x, y = arc_line.to_cartesian(SLPoint(s=s, l=l))
        sl = arc_line.project_to_frenet(x, y)
        assert np.isclose(sl.s, s, atol=1e-3)
        assert np.isclose(sl.l, l, atol=1e-3)


def test_offset_point_distance(arc_line):
    """A point at lateral offset l lies |l| away from its reference point."""
    ref = arc_line.reference_point_at(20.0)
    x, y = arc_line.to_cartesian(SLPoint(s=20.0, l=2.0))
    assert np.isclose(math.hypot(x - ref.x, y - ref.y), 2.0)


def test_invalid_waypoints():
    with pytest.raises(ValueError):
        ReferenceLine([0.0], [0.0])
    with pytest.raises(ValueError):
        ReferenceLine([0.0, 0.0, 1.0], [0.0, 0.0, 0.0])
    with pytest.raises(ValueError):
        ReferenceLine([0.0, 1.0], [0.0, 0.0], left_width=-1.0)
