"""Path optimizer entry point wrapping the DP road graph."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from ..config import DpPolyPathConfig, load_config, validate_config
from ..core.data_structures import PathData, TrajectoryPoint
from ..core.exceptions import PlanningError
from .dp_road_graph import DPRoadGraph
from .speed_data import SpeedData


@dataclass
class PlanningStatus:
    """Outcome of one optimizer call."""
    ok: bool
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok


class DpPolyPathOptimizer:
    """Runs one DP poly path search per planning cycle.

    Args:
        name: Optimizer name used in log messages
    """

    def __init__(self, name: str = "DpPolyPathOptimizer"):
        self.name = name
        self.config: Optional[DpPolyPathConfig] = None
        self.cost_evaluator = None

    @property
    def is_init(self) -> bool:
        return self.config is not None

    def init(self, config: Union[DpPolyPathConfig, str, Path], cost_evaluator=None) -> bool:
        """Load and validate the configuration.

        Args:
            config: Configuration object or path to a YAML file
            cost_evaluator: Optional replacement for the default edge cost

        Returns:
            True on success
        """
        try:
            if isinstance(config, DpPolyPathConfig):
                validate_config(config)
            else:
                config = load_config(config)
        except (OSError, ValueError) as e:
            logger.error(f"{self.name}: failed to load config: {e}")
            return False

        self.config = config
        self.cost_evaluator = cost_evaluator
        logger.info(f"{self.name} initialized with sample_level={config.sample_level}, "
                    f"points_per_level={config.sample_points_num_each_level}, "
                    f"path_resolution={config.path_resolution}m")
        return True

    def process(
        self,
        speed_data: SpeedData,
        reference_line,
        init_point: TrajectoryPoint,
        decision_data,
        path_data: PathData
    ) -> PlanningStatus:
        """Plan the path of the current cycle into path_data.

        Returns:
            Status of the cycle; path_data is untouched on failure
        """
        if not self.is_init:
            logger.error("Please call init() before process()")
            return PlanningStatus(ok=False, message="Not inited.")

        dp_road_graph = DPRoadGraph(self.config, init_point, speed_data,
                                    cost_evaluator=self.cost_evaluator)
        try:
            dp_road_graph.find_path_tunnel(reference_line, decision_data, path_data)
        except PlanningError as e:
            logger.error(f"Failed to find tunnel in road graph: {e}")
            return PlanningStatus(ok=False, message=f"dp_road_graph failed: {e}")

        return PlanningStatus(ok=True)


__all__ = ['DpPolyPathOptimizer', 'PlanningStatus']
