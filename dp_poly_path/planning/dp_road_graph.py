"""Dynamic-programming road graph.

Searches a road-aligned lattice for the minimum-cost chain of quintic
lateral curves, densifies it into a Frenet path tunnel, maps the tunnel to
Cartesian path points and derives obstacle decisions from the result.
"""

import math
from typing import List, Optional

from loguru import logger

from ..config import DpPolyPathConfig, VehicleParam
from ..core.data_structures import (
    FrenetFramePath,
    FrenetFramePoint,
    GraphNode,
    PathData,
    PathPoint,
    SLPoint,
    TrajectoryPoint,
)
from ..core.exceptions import EmptySampling, ProjectionFailure, SearchFailure
from ..core.sl_analytic_transformation import SLAnalyticTransformation
from ..decision.object_decider import ObjectDecider
from .lattice_sampler import PathSampler
from .quintic_polynomial import QuinticPolynomialCurve1d
from .speed_data import SpeedData
from .trajectory_cost import TrajectoryCost


# Lateral slope and second derivative imposed at every lattice station
ZERO_DL = 0.0
ZERO_DDL = 0.0

# Tolerance of the segment sampling loop
SEGMENT_EPSILON = 1e-10


class DPRoadGraph:
    """Lattice DP search producing a path tunnel for one planning cycle.

    Args:
        config: Planner configuration
        init_point: Current vehicle state
        speed_data: Heuristic speed profile
        vehicle_param: Ego dimensions (defaults to config.vehicle_param)
        cost_evaluator: Object with ``calculate(curve, start_s, end_s)``;
            a TrajectoryCost is built per cycle when omitted
    """

    def __init__(
        self,
        config: DpPolyPathConfig,
        init_point: TrajectoryPoint,
        speed_data: SpeedData,
        vehicle_param: Optional[VehicleParam] = None,
        cost_evaluator=None
    ):
        self.config = config
        self.init_point = init_point
        self.speed_data = speed_data
        self.vehicle_param = vehicle_param if vehicle_param is not None else config.vehicle_param
        self.cost_evaluator = cost_evaluator

        self.path_sampler = PathSampler(config)
        self.object_decider = ObjectDecider(config, self.vehicle_param)

        self.init_sl_point: Optional[SLPoint] = None
        self.init_frenet_point: Optional[FrenetFramePoint] = None
        self.graph_nodes: List[List[GraphNode]] = []

    def find_path_tunnel(self, reference_line, decision_data, path_data: PathData) -> None:
        """Search the lattice and fill path_data with the resulting tunnel.

        path_data is only modified once the whole path has been built.

        Args:
            reference_line: Reference line of the cycle
            decision_data: Obstacles; decisions are appended to them
            path_data: Output container

        Raises:
            ProjectionFailure: Start or a path sample cannot be mapped
            EmptySampling: No drivable lattice level
            SearchFailure: No feasible chain through the lattice
        """
        self.init(reference_line)
        min_cost_path = self.generate(reference_line, decision_data)

        frenet_path = self.stitch_frenet_path(min_cost_path)
        discretized_path = self.to_discretized_path(frenet_path, reference_line)
        path_data.set_path(frenet_path, discretized_path)
        logger.info(f"Path tunnel found: {len(min_cost_path)} nodes, "
                    f"{len(frenet_path)} samples, cost={min_cost_path[-1].min_cost:.3f}")

        if self.object_decider.compute_object_decision_from_path(
                path_data, self.speed_data, reference_line, decision_data):
            logger.info("Computing decision data in dp path success")
        else:
            logger.info("Computing decision data in dp path fail")

    def init(self, reference_line) -> FrenetFramePoint:
        """Project the vehicle state into the Frenet frame of the reference line."""
        path_point = self.init_point.path_point
        try:
            self.init_sl_point = reference_line.project_to_frenet(path_point.x, path_point.y)
        except ProjectionFailure:
            logger.error("Fail to map init point from cartesian to sl coordinate")
            raise

        ref_point = reference_line.reference_point_at(self.init_sl_point.s)
        init_dl = SLAnalyticTransformation.calculate_lateral_derivative(
            ref_point.heading, path_point.theta, self.init_sl_point.l, ref_point.kappa
        )
        init_ddl = SLAnalyticTransformation.calculate_second_order_lateral_derivative(
            ref_point.heading, path_point.theta, ref_point.kappa,
            path_point.kappa, ref_point.dkappa, self.init_sl_point.l
        )
        self.init_frenet_point = FrenetFramePoint(
            s=self.init_sl_point.s, l=self.init_sl_point.l, dl=init_dl, ddl=init_ddl
        )
        logger.debug(f"Init frenet point: {self.init_frenet_point}")
        return self.init_frenet_point

    def generate(self, reference_line, decision_data=None) -> List[GraphNode]:
        """Run the DP over the sampled levels and backtrack the best chain.

        Returns:
            Optimal nodes ordered from the root to the goal
        """
        if self.init_sl_point is None:
            self.init(reference_line)

        path_waypoints = self.path_sampler.sample_path_waypoints(reference_line, self.init_point)
        if not path_waypoints:
            logger.error("Fail to sample path waypoints")
            raise EmptySampling(
                f"No drivable lattice level ahead of s={self.init_sl_point.s:.2f}"
            )
        path_waypoints.insert(0, [self.init_sl_point])

        cost_evaluator = self.cost_evaluator
        if cost_evaluator is None:
            cost_evaluator = TrajectoryCost(self.config, reference_line,
                                            self.vehicle_param, decision_data)

        self.graph_nodes = [[GraphNode(sl_point=self.init_sl_point, min_cost=0.0)]]
        for level in range(1, len(path_waypoints)):
            prev_nodes = self.graph_nodes[level - 1]
            level_nodes = []
            for cur_sl_point in path_waypoints[level]:
                cur_node = GraphNode(sl_point=cur_sl_point)
                for prev_index, prev_node in enumerate(prev_nodes):
                    prev_sl_point = prev_node.sl_point
                    curve = QuinticPolynomialCurve1d(
                        prev_sl_point.l, ZERO_DL, ZERO_DDL,
                        cur_sl_point.l, ZERO_DL, ZERO_DDL,
                        cur_sl_point.s - prev_sl_point.s
                    )
                    cost = cost_evaluator.calculate(curve, prev_sl_point.s, cur_sl_point.s) + \
                        prev_node.min_cost
                    cur_node.update_cost(prev_index, curve, cost)
                level_nodes.append(cur_node)
            self.graph_nodes.append(level_nodes)
            logger.debug(f"Level {level}: {len(level_nodes)} nodes at "
                         f"s={path_waypoints[level][0].s:.2f}")

        # Synthetic sink over the last level
        sink = GraphNode(sl_point=None)
        for index, node in enumerate(self.graph_nodes[-1]):
            sink.update_cost(index, node.min_cost_curve, node.min_cost)
        if sink.prev_index is None:
            logger.error("No node of the last level is reachable")
            raise SearchFailure("No feasible path through the road graph")

        min_cost_path = []
        level = len(self.graph_nodes) - 1
        index = sink.prev_index
        while index is not None:
            node = self.graph_nodes[level][index]
            min_cost_path.append(node)
            index = node.prev_index
            level -= 1
        if level != -1:
            raise SearchFailure(f"Backtracking stopped at level {level + 1} before the root")

        min_cost_path.reverse()
        return min_cost_path

    def stitch_frenet_path(self, min_cost_path: List[GraphNode]) -> FrenetFramePath:
        """Densify the optimal chain into Frenet samples every path_resolution.

        Each segment is sampled while the local arc length is strictly below
        the segment length, so the end point of a segment is not emitted.
        """
        resolution = self.config.path_resolution
        accumulated_s = min_cost_path[0].sl_point.s
        frenet_points = []
        for prev_node, cur_node in zip(min_cost_path[:-1], min_cost_path[1:]):
            path_length = cur_node.sl_point.s - prev_node.sl_point.s
            curve = cur_node.min_cost_curve
            step = 0
            current_s = 0.0
            while current_s + SEGMENT_EPSILON < path_length:
                frenet_points.append(FrenetFramePoint(
                    s=accumulated_s + current_s,
                    l=curve.evaluate(0, current_s),
                    dl=curve.evaluate(1, current_s),
                    ddl=curve.evaluate(2, current_s),
                ))
                step += 1
                current_s = step * resolution
            accumulated_s += path_length
        return FrenetFramePath(frenet_points)

    @staticmethod
    def to_discretized_path(frenet_path: FrenetFramePath, reference_line) -> List[PathPoint]:
        """Map Frenet samples to Cartesian path points.

        Heading and curvature come from the analytic Frenet transform; the
        arc length is the running Euclidean distance between samples.

        Raises:
            ProjectionFailure: If a sample cannot be mapped
        """
        path_points: List[PathPoint] = []
        for frenet_point in frenet_path:
            try:
                x, y = reference_line.to_cartesian(SLPoint(s=frenet_point.s, l=frenet_point.l))
            except ProjectionFailure:
                logger.error("Fail to convert sl point to xy point")
                raise

            ref_point = reference_line.reference_point_at(frenet_point.s)
            theta = SLAnalyticTransformation.calculate_theta(
                ref_point.heading, ref_point.kappa, frenet_point.l, frenet_point.dl
            )
            kappa = SLAnalyticTransformation.calculate_kappa(
                ref_point.kappa, ref_point.dkappa,
                frenet_point.l, frenet_point.dl, frenet_point.ddl
            )

            s = 0.0
            if path_points:
                last = path_points[-1]
                s = last.s + math.hypot(x - last.x, y - last.y)
            path_points.append(PathPoint(x=x, y=y, theta=theta, kappa=kappa, s=s))
        return path_points
