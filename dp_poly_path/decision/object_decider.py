"""Obstacle decisions derived from a finished path tunnel.

Static obstacles are classified into stop, nudge or ignore by comparing the
ego footprint along the path with the obstacle footprint in both the
Cartesian and the Frenet frame. Dynamic obstacles get a follow decision
when the ego footprint, advanced along the path with the heuristic speed
profile, comes too close to the predicted obstacle footprint.
"""

import math
from typing import List, Optional, Tuple

from loguru import logger

from ..config import DpPolyPathConfig, VehicleParam
from ..core.data_structures import FrenetFramePath, PathData, SLPoint
from ..core.decisions import (
    NudgeType,
    ObjectDecision,
    ObjectFollow,
    ObjectIgnore,
    ObjectNudge,
    ObjectStop,
    StopReasonCode,
)
from ..core.exceptions import ProjectionFailure, TimeSeriesMismatch
from ..core.geometry import OrientedBox
from ..core.sl_analytic_transformation import SLAnalyticTransformation
from .obstacle import Obstacle


class ObjectDecider:
    """Assigns per-obstacle decisions relative to a planned path.

    Args:
        config: Planner configuration (thresholds and buffers)
        vehicle_param: Ego dimensions
    """

    def __init__(self, config: DpPolyPathConfig, vehicle_param: VehicleParam):
        self.config = config
        self.vehicle_param = vehicle_param

    def ego_box_size(self) -> Tuple[float, float]:
        """Length and width of the ego footprint."""
        length = self.vehicle_param.length
        if self.config.ego_width_from_length:
            return length, length
        return length, self.vehicle_param.width

    def compute_object_decision_from_path(
        self,
        path_data: PathData,
        speed_data,
        reference_line,
        decision_data
    ) -> bool:
        """Append one decision per static and per interacting dynamic obstacle.

        Args:
            path_data: Finished path of the cycle
            speed_data: Heuristic speed profile
            reference_line: Reference line of the cycle
            decision_data: Obstacle container, decisions are appended in place

        Returns:
            True if decisions were computed
        """
        if path_data.is_empty:
            logger.warning("Empty path, no obstacle decision computed")
            return False

        ego_length, ego_width = self.ego_box_size()
        ego_samples: List[Tuple[SLPoint, OrientedBox]] = []
        for path_point in path_data.discretized_path:
            try:
                ego_sl = reference_line.project_to_frenet(path_point.x, path_point.y)
            except ProjectionFailure as e:
                logger.warning(f"Ego path point ({path_point.x:.2f}, {path_point.y:.2f}) "
                               f"skipped: {e}")
                continue
            ego_samples.append((ego_sl, OrientedBox(
                path_point.x, path_point.y, path_point.theta, ego_length, ego_width
            )))

        for obstacle in decision_data.static_obstacles:
            decision = self.make_static_decision(obstacle, ego_samples, reference_line)
            if decision is not None:
                obstacle.add_decision(decision)
                logger.debug(f"Static obstacle {obstacle.id}: {decision}")

        total_time = min(speed_data.total_time, self.config.prediction_total_time)
        evaluate_times = int(math.floor(total_time / self.config.eval_time_interval + 1e-9))
        ego_by_time = self.fill_ego_by_time(
            path_data.frenet_path, reference_line, speed_data, evaluate_times
        )

        for obstacle in decision_data.dynamic_obstacles:
            obstacle_by_time = [
                obstacle.get_bounding_box(
                    obstacle.get_point_at_time(k * self.config.eval_time_interval)
                )
                for k in range(evaluate_times)
            ]
            try:
                follow = self.should_follow(ego_by_time, obstacle_by_time)
            except TimeSeriesMismatch as e:
                logger.warning(f"Dynamic obstacle {obstacle.id} skipped: {e}")
                continue
            if follow:
                decision = ObjectFollow(distance_s=self.config.dp_path_decision_buffer)
                obstacle.add_decision(decision)
                logger.debug(f"Dynamic obstacle {obstacle.id}: {decision}")

        return True

    def make_static_decision(
        self,
        obstacle: Obstacle,
        ego_samples: List[Tuple[SLPoint, OrientedBox]],
        reference_line
    ) -> Optional[ObjectDecision]:
        """Decision for one static obstacle; the first qualifying ego sample wins.

        Returns:
            Stop, nudge or ignore; None if the obstacle cannot be projected
        """
        obstacle_box = obstacle.perception_bounding_box
        try:
            obs_sl = reference_line.project_to_frenet(obstacle_box.center_x, obstacle_box.center_y)
        except ProjectionFailure as e:
            logger.warning(f"Fail to map obstacle {obstacle.id} in frenet frame: {e}")
            return None

        buffer = self.config.dp_path_decision_buffer
        ignore_range = self.config.static_decision_ignore_range
        for ego_sl, ego_box in ego_samples:
            if ego_sl.s < obs_sl.s - obstacle_box.half_length or \
                    ego_sl.s > obs_sl.s + obstacle_box.half_length:
                continue

            if obstacle_box.has_overlap(ego_box) and \
                    abs(obs_sl.l) < self.config.static_decision_stop_buffer:
                return ObjectStop(distance_s=buffer,
                                  reason_code=StopReasonCode.STOP_REASON_OBSTACLE)

            diff_l = obs_sl.l - ego_sl.l
            if 0 < diff_l < ignore_range:
                return ObjectNudge(distance_l=buffer, type=NudgeType.RIGHT_NUDGE)
            if diff_l < 0 and abs(diff_l) < ignore_range:
                return ObjectNudge(distance_l=buffer, type=NudgeType.LEFT_NUDGE)

        return ObjectIgnore()

    def should_follow(
        self,
        ego_by_time: List[OrientedBox],
        obstacle_by_time: List[OrientedBox]
    ) -> bool:
        """Whether ego and obstacle come within the follow range at a shared time.

        Raises:
            TimeSeriesMismatch: If the two series have different lengths
        """
        if len(ego_by_time) != len(obstacle_by_time):
            raise TimeSeriesMismatch(
                f"obstacle_by_time size[{len(obstacle_by_time)}] != "
                f"ego_by_time size[{len(ego_by_time)}]"
            )
        for ego_box, obstacle_box in zip(ego_by_time, obstacle_by_time):
            if ego_box.distance_to(obstacle_box) < self.config.dynamic_decision_follow_range:
                return True
        return False

    def fill_ego_by_time(
        self,
        frenet_path: FrenetFramePath,
        reference_line,
        speed_data,
        evaluate_times: int
    ) -> List[OrientedBox]:
        """Ego footprints at t = k * eval_time_interval for k < evaluate_times.

        The series stops early when the speed profile or the reference line
        cannot provide a sample.
        """
        ego_length, ego_width = self.ego_box_size()
        ego_by_time: List[OrientedBox] = []
        if len(frenet_path) == 0:
            return ego_by_time

        for i in range(evaluate_times):
            time_stamp = i * self.config.eval_time_interval
            speed_point = speed_data.get_speed_point_with_time(time_stamp)
            if speed_point is None:
                logger.warning(f"No speed point for time_stamp[{time_stamp:.2f}]")
                break

            frenet_point = frenet_path.interpolate(speed_point.s)
            try:
                x, y = reference_line.to_cartesian(SLPoint(s=frenet_point.s, l=frenet_point.l))
            except ProjectionFailure as e:
                logger.warning(f"Ego position at time_stamp[{time_stamp:.2f}] unavailable: {e}")
                break

            ref_point = reference_line.reference_point_at(frenet_point.s)
            theta = SLAnalyticTransformation.calculate_theta(
                ref_point.heading, ref_point.kappa, frenet_point.l, frenet_point.dl
            )
            ego_by_time.append(OrientedBox(x, y, theta, ego_length, ego_width))

        return ego_by_time
