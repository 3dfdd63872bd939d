#!/usr/bin/env python3
"""Example script running one DP poly path planning cycle.

Builds a gently curved road, one static obstacle ahead of the vehicle and
one slower vehicle, plans the path tunnel and prints the decisions.
"""

import argparse
import math
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from dp_poly_path.config import load_config
from dp_poly_path.core import PathData, PathPoint, TrajectoryPoint
from dp_poly_path.decision import DecisionData, Obstacle
from dp_poly_path.planning import DpPolyPathOptimizer, ReferenceLine, SpeedData


def build_reference_line(length: float, curvature: float) -> ReferenceLine:
    """Arc of constant curvature (straight when curvature is 0)."""
    n = max(2, int(length / 5.0) + 1)
    xs, ys = [], []
    for i in range(n):
        s = length * i / (n - 1)
        if abs(curvature) < 1e-9:
            xs.append(s)
            ys.append(0.0)
        else:
            xs.append(math.sin(curvature * s) / curvature)
            ys.append((1.0 - math.cos(curvature * s)) / curvature)
    return ReferenceLine(xs, ys, left_width=3.5, right_width=3.5)


def main():
    """Main function."""
    parser = argparse.ArgumentParser(
        description='Run one DP poly path planning cycle'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=str(Path(__file__).parent.parent / 'config' / 'dp_poly_path_config.yaml'),
        help='Path to planner configuration file'
    )
    parser.add_argument(
        '--speed',
        type=float,
        default=10.0,
        help='Initial vehicle speed [m/s]'
    )
    parser.add_argument(
        '--curvature',
        type=float,
        default=0.005,
        help='Reference line curvature [1/m]'
    )
    parser.add_argument(
        '--obstacle-l',
        type=float,
        default=0.3,
        help='Lateral offset of the static obstacle [m]'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level'
    )

    args = parser.parse_args()

    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level=args.log_level
    )

    logger.info(f"Loading configuration from {args.config}")
    config = load_config(args.config)

    reference_line = build_reference_line(150.0, args.curvature)
    init_point = TrajectoryPoint(
        path_point=PathPoint(x=0.0, y=0.0, theta=0.0, kappa=args.curvature),
        v=args.speed,
    )
    speed_data = SpeedData.constant_speed(args.speed, total_time=8.0)

    static_ref = reference_line.reference_point_at(40.0)
    static_obstacle = Obstacle(
        'static_0',
        static_ref.x - math.sin(static_ref.heading) * args.obstacle_l,
        static_ref.y + math.cos(static_ref.heading) * args.obstacle_l,
        static_ref.heading, 4.0, 2.0
    )
    lead_ref = reference_line.reference_point_at(20.0)
    lead_vehicle = Obstacle.constant_velocity(
        'vehicle_0', lead_ref.x, lead_ref.y, lead_ref.heading,
        speed=args.speed * 0.5, length=4.5, width=2.0
    )
    decision_data = DecisionData([static_obstacle, lead_vehicle])

    optimizer = DpPolyPathOptimizer()
    if not optimizer.init(config):
        sys.exit(1)

    path_data = PathData()
    status = optimizer.process(speed_data, reference_line, init_point, decision_data, path_data)
    if not status:
        logger.error(f"Planning failed: {status.message}")
        sys.exit(1)

    last = path_data.discretized_path[-1]
    logger.success(f"Path with {len(path_data.discretized_path)} points, "
                   f"length {last.s:.1f}m, end=({last.x:.1f}, {last.y:.1f})")
    for obstacle in decision_data.all_obstacles:
        decisions = ", ".join(d.decision_type.name for d in obstacle.decisions) or "none"
        logger.info(f"{obstacle.id}: {decisions}")


if __name__ == '__main__':
    main()
