"""Tests for the DP road graph: search, stitching and Cartesian conversion."""

import math
import pytest
import numpy as np
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

sys.path.insert(0, str(Path(__file__).parent.parent))

from dp_poly_path.config import DpPolyPathConfig
from dp_poly_path.core.data_structures import (
    GraphNode,
    PathData,
    PathPoint,
    SLPoint,
    TrajectoryPoint,
)
from dp_poly_path.core.exceptions import EmptySampling, ProjectionFailure, SearchFailure
from dp_poly_path.decision.decision_data import DecisionData
from dp_poly_path.decision.obstacle import Obstacle
from dp_poly_path.planning.dp_road_graph import DPRoadGraph, ZERO_DDL, ZERO_DL
from dp_poly_path.planning.quintic_polynomial import QuinticPolynomialCurve1d
from dp_poly_path.planning.reference_line import ReferenceLine
from dp_poly_path.planning.speed_data import SpeedData
from dp_poly_path.planning.trajectory_cost import TrajectoryCost


@pytest.fixture
def config():
    return DpPolyPathConfig(sample_level=3, sample_points_num_each_level=5,
                            lateral_sample_offset=0.5, path_resolution=1.0)


@pytest.fixture
def reference_line():
    return ReferenceLine.straight(100.0)


@pytest.fixture
def arc_line():
    s = np.linspace(0.0, 60.0, 61)
    return ReferenceLine(50.0 * np.sin(s / 50.0), 50.0 * (1.0 - np.cos(s / 50.0)))


@pytest.fixture
def speed_data():
    return SpeedData.constant_speed(10.0, total_time=8.0)


def make_init_point(x=0.0, y=0.0, theta=0.0, v=10.0):
    return TrajectoryPoint(path_point=PathPoint(x=x, y=y, theta=theta), v=v)


def end_lateral_cost(target_l):
    """Mock cost evaluator: unit cost per edge plus the squared end offset error."""
    evaluator = MagicMock()
    evaluator.calculate.side_effect = \
        lambda curve, start_s, end_s: 1.0 + (curve.evaluate(0, curve.param_length) - target_l) ** 2
    return evaluator


def test_init_frenet_point(config, reference_line, speed_data):
    graph = DPRoadGraph(config, make_init_point(x=5.0, y=0.5, theta=0.1), speed_data)
    init_point = graph.init(reference_line)

    assert np.isclose(init_point.s, 5.0, atol=1e-6)
    assert np.isclose(init_point.l, 0.5, atol=1e-6)
    assert np.isclose(init_point.dl, math.tan(0.1), atol=1e-6)
    assert np.isclose(init_point.ddl, 0.0, atol=1e-6)


def test_min_cost_chain_follows_cheapest_stations(config, reference_line, speed_data):
    """The chain starts at the root and visits exactly one node per level."""
    evaluator = end_lateral_cost(0.5)
    graph = DPRoadGraph(config, make_init_point(), speed_data, cost_evaluator=evaluator)
    graph.init(reference_line)
    chain = graph.generate(reference_line)

    assert len(chain) == 4
    assert chain[0] is graph.graph_nodes[0][0]
    assert chain[0].min_cost == 0.0
    assert chain[0].prev_index is None
    assert [node.sl_point.l for node in chain[1:]] == [0.5, 0.5, 0.5]
    assert [node.sl_point.s for node in chain] == pytest.approx([0.0, 10.0, 20.0, 30.0], abs=1e-6)
    assert np.isclose(chain[-1].min_cost, 3.0)
    # 3 levels x 5 nodes, each relaxed through every predecessor
    assert evaluator.calculate.call_count == 5 + 5 * 5 + 5 * 5


def test_chain_cost_is_sum_of_edge_costs(config, reference_line, speed_data):
    """The goal cost equals the recomputed sum of edge costs along the chain."""
    obstacle = Obstacle('static_0', 20.0, 0.3, 0.0, 4.0, 2.0)
    decision_data = DecisionData([obstacle])
    evaluator = TrajectoryCost(config, reference_line, config.vehicle_param, decision_data)

    graph = DPRoadGraph(config, make_init_point(), speed_data, cost_evaluator=evaluator)
    graph.init(reference_line)
    chain = graph.generate(reference_line, decision_data)

    total = 0.0
    for prev_node, cur_node in zip(chain[:-1], chain[1:]):
        total += evaluator.calculate(cur_node.min_cost_curve,
                                     prev_node.sl_point.s, cur_node.sl_point.s)
    assert np.isclose(total, chain[-1].min_cost)

    costs = [node.min_cost for node in chain]
    assert all(a <= b for a, b in zip(costs[:-1], costs[1:]))


def test_edges_use_zero_station_derivatives(config, reference_line, speed_data):
    graph = DPRoadGraph(config, make_init_point(), speed_data,
                        cost_evaluator=end_lateral_cost(1.0))
    graph.init(reference_line)
    chain = graph.generate(reference_line)

    for node in chain[1:]:
        curve = node.min_cost_curve
        assert np.isclose(curve.evaluate(1, 0.0), ZERO_DL)
        assert np.isclose(curve.evaluate(2, 0.0), ZERO_DDL)
        assert np.isclose(curve.evaluate(1, curve.param_length), ZERO_DL, atol=1e-9)
        assert np.isclose(curve.evaluate(2, curve.param_length), ZERO_DDL, atol=1e-9)
        assert np.isclose(curve.evaluate(0, curve.param_length), node.sl_point.l)


def test_ties_keep_first_predecessor(config, reference_line, speed_data):
    """With equal costs every node keeps the first predecessor it saw."""
    evaluator = MagicMock()
    evaluator.calculate.return_value = 1.0
    graph = DPRoadGraph(config, make_init_point(), speed_data, cost_evaluator=evaluator)
    graph.init(reference_line)
    chain = graph.generate(reference_line)

    for level in graph.graph_nodes[1:]:
        assert all(node.prev_index == 0 for node in level)
    assert [node.sl_point.l for node in chain[1:]] == [-1.0, -1.0, -1.0]
    assert chain[-1].min_cost == 3.0


def test_unreachable_levels_raise_search_failure(config, reference_line, speed_data):
    evaluator = MagicMock()
    evaluator.calculate.return_value = float('inf')
    graph = DPRoadGraph(config, make_init_point(), speed_data, cost_evaluator=evaluator)
    graph.init(reference_line)

    with pytest.raises(SearchFailure):
        graph.generate(reference_line)


def test_empty_sampling(config, reference_line, speed_data):
    graph = DPRoadGraph(config, make_init_point(), speed_data)
    graph.init(reference_line)

    with patch.object(graph.path_sampler, 'sample_path_waypoints', return_value=[]):
        with pytest.raises(EmptySampling):
            graph.generate(reference_line)


def test_stitch_skips_segment_end_points(speed_data):
    """Each segment is sampled strictly below its length."""
    config = DpPolyPathConfig(path_resolution=2.0)
    graph = DPRoadGraph(config, make_init_point(), speed_data)

    root = GraphNode(sl_point=SLPoint(s=0.0, l=0.0), min_cost=0.0)
    mid = GraphNode(sl_point=SLPoint(s=10.0, l=1.0), min_cost=1.0, prev_index=0,
                    min_cost_curve=QuinticPolynomialCurve1d(0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 10.0))
    goal = GraphNode(sl_point=SLPoint(s=25.0, l=1.0), min_cost=2.0, prev_index=0,
                     min_cost_curve=QuinticPolynomialCurve1d(1.0, 0.0, 0.0, 1.0, 0.0, 0.0, 15.0))

    frenet_path = graph.stitch_frenet_path([root, mid, goal])

    expected_s = [0.0, 2.0, 4.0, 6.0, 8.0] + [10.0 + 2.0 * k for k in range(8)]
    assert [p.s for p in frenet_path] == pytest.approx(expected_s)
    assert np.isclose(frenet_path[0].l, 0.0)
    assert np.isclose(frenet_path[5].l, 1.0)
    assert all(np.isclose(p.l, 1.0) for p in frenet_path.points[5:])


def test_find_path_tunnel_on_free_road(config, reference_line, speed_data):
    """Without obstacles the tunnel follows the reference line."""
    graph = DPRoadGraph(config, make_init_point(), speed_data)
    path_data = PathData()
    graph.find_path_tunnel(reference_line, DecisionData(), path_data)

    assert len(path_data.frenet_path) == 30
    assert len(path_data.discretized_path) == 30
    assert [p.s for p in path_data.frenet_path] == pytest.approx(list(range(30)))
    assert all(abs(p.l) < 1e-9 for p in path_data.frenet_path)

    for k, point in enumerate(path_data.discretized_path):
        assert np.isclose(point.x, float(k))
        assert np.isclose(point.y, 0.0, atol=1e-9)
        assert np.isclose(point.theta, 0.0, atol=1e-9)
        assert np.isclose(point.s, float(k))


def test_find_path_tunnel_is_deterministic(config, arc_line, speed_data):
    first, second = PathData(), PathData()
    DPRoadGraph(config, make_init_point(), speed_data,
                cost_evaluator=end_lateral_cost(1.0)).find_path_tunnel(
        arc_line, DecisionData(), first)
    DPRoadGraph(config, make_init_point(), speed_data,
                cost_evaluator=end_lateral_cost(1.0)).find_path_tunnel(
        arc_line, DecisionData(), second)

    assert first.frenet_path == second.frenet_path
    assert first.discretized_path == second.discretized_path


def test_discretized_path_properties(config, arc_line, speed_data):
    """Cartesian samples project back to their s; s is the running distance."""
    path_data = PathData()
    graph = DPRoadGraph(config, make_init_point(), speed_data,
                        cost_evaluator=end_lateral_cost(1.0))
    graph.find_path_tunnel(arc_line, DecisionData(), path_data)

    assert not path_data.is_empty
    for frenet_point, path_point in zip(path_data.frenet_path, path_data.discretized_path):
        sl = arc_line.project_to_frenet(path_point.x, path_point.y)
        assert np.isclose(sl.s, frenet_point.s, atol=1e-3)
        assert np.isclose(sl.l, frenet_point.l, atol=1e-3)

    points = path_data.discretized_path
    assert points[0].s == 0.0
    for prev, cur in zip(points[:-1], points[1:]):
        assert np.isclose(cur.s - prev.s, math.hypot(cur.x - prev.x, cur.y - prev.y))


def test_default_cost_steers_around_static_obstacle(reference_line, speed_data):
    config = DpPolyPathConfig(sample_level=3, sample_points_num_each_level=9,
                              lateral_sample_offset=1.0)
    obstacle = Obstacle('static_0', 25.0, 0.0, 0.0, 4.0, 2.0)
    decision_data = DecisionData([obstacle])

    path_data = PathData()
    DPRoadGraph(config, make_init_point(), speed_data).find_path_tunnel(
        reference_line, decision_data, path_data)

    margin = config.vehicle_param.width / 2.0 + config.obstacle_collision_buffer
    for point in path_data.frenet_path:
        if 24.0 <= point.s <= 26.0:
            assert abs(point.l) > 1.0 + margin
    assert len(obstacle.decisions) == 1


def test_obstacle_over_line_end_keeps_full_extent(config, speed_data):
    short_line = ReferenceLine.straight(60.0)
    decision_data = DecisionData([Obstacle('static_end', 59.0, 0.0, 0.0, 4.0, 2.0)])

    cost = TrajectoryCost(config, short_line, config.vehicle_param, decision_data)

    assert len(cost.obstacle_boundaries) == 1
    boundary = cost.obstacle_boundaries[0]
    assert np.isclose(boundary.start_s, 57.0, atol=1e-6)
    assert np.isclose(boundary.end_s, 61.0, atol=1e-6)
    assert np.isclose(boundary.start_l, -1.0, atol=1e-6)
    assert np.isclose(boundary.end_l, 1.0, atol=1e-6)


def test_default_cost_steers_around_obstacle_at_line_end(speed_data):
    """An obstacle sticking out past the end of the line still repels the path."""
    config = DpPolyPathConfig(sample_level=2, sample_points_num_each_level=9,
                              lateral_sample_offset=1.0)
    short_line = ReferenceLine.straight(60.0)
    obstacle = Obstacle('static_end', 59.0, 0.0, 0.0, 4.0, 2.0)

    path_data = PathData()
    DPRoadGraph(config, make_init_point(x=40.0), speed_data).find_path_tunnel(
        short_line, DecisionData([obstacle]), path_data)

    margin = config.vehicle_param.width / 2.0 + config.obstacle_collision_buffer
    near_obstacle = [p for p in path_data.frenet_path if 58.0 <= p.s <= 59.5]
    assert near_obstacle
    assert all(abs(p.l) > 1.0 + margin for p in near_obstacle)


def test_init_off_reference_line(config, reference_line, speed_data):
    """A start that cannot be projected leaves the path untouched."""
    graph = DPRoadGraph(config, make_init_point(x=-10.0), speed_data)
    path_data = PathData()

    with pytest.raises(ProjectionFailure):
        graph.find_path_tunnel(reference_line, DecisionData(), path_data)

    assert path_data.is_empty
    assert len(path_data.frenet_path) == 0
