"""Configuration management module."""

import yaml
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union
from loguru import logger


@dataclass
class VehicleParam:
    """Ego vehicle dimensions.

    Attributes:
        length: Overall length [m]
        width: Overall width [m]
        front_edge_to_center: Front bumper to reference point [m]
        back_edge_to_center: Rear bumper to reference point [m]
    """
    length: float = 4.933
    width: float = 2.11
    front_edge_to_center: float = 3.89
    back_edge_to_center: float = 1.043


@dataclass
class DpPolyPathConfig:
    """Configuration for the DP poly path planner.

    Attributes:
        # Lattice sampling
        sample_level: Maximum number of longitudinal levels
        sample_points_num_each_level: Lateral candidates per level
        step_length_min: Lower bound of the level spacing [m]
        step_length_max: Upper bound of the level spacing [m]
        lateral_sample_offset: Lateral spacing of candidates [m]

        # Path stitching
        path_resolution: Arc length between dense Frenet samples [m]

        # Dynamic obstacle decisions
        eval_time_interval: Time between ego/obstacle comparisons [s]
        prediction_total_time: Prediction horizon cap [s]

        # Decision thresholds
        static_decision_stop_buffer: |l| of an overlapping obstacle below which we stop [m]
        static_decision_ignore_range: Lateral gap below which we nudge [m]
        dynamic_decision_follow_range: Box distance below which we follow [m]
        dp_path_decision_buffer: Buffer written into stop/nudge/follow decisions [m]
        ego_width_from_length: Size the ego box as length x length

        # Default trajectory cost
        path_l_cost, path_dl_cost, path_ddl_cost: Weights of l², dl², ddl²
        obstacle_collision_cost: Cost added per sample inside an obstacle corridor
        obstacle_collision_buffer: Lateral margin around obstacles [m]
        cost_eval_resolution: Arc length between cost samples [m]

        vehicle_param: Ego vehicle dimensions
    """
    # Lattice sampling
    sample_level: int = 8
    sample_points_num_each_level: int = 9
    step_length_min: float = 8.0
    step_length_max: float = 15.0
    lateral_sample_offset: float = 0.5

    # Path stitching
    path_resolution: float = 1.0

    # Dynamic obstacle decisions
    eval_time_interval: float = 0.1
    prediction_total_time: float = 5.0

    # Decision thresholds
    static_decision_stop_buffer: float = 0.5
    static_decision_ignore_range: float = 3.0
    dynamic_decision_follow_range: float = 1.0
    dp_path_decision_buffer: float = 0.5
    ego_width_from_length: bool = True

    # Default trajectory cost
    path_l_cost: float = 6.5
    path_dl_cost: float = 8e3
    path_ddl_cost: float = 5e1
    obstacle_collision_cost: float = 1e8
    obstacle_collision_buffer: float = 0.3
    cost_eval_resolution: float = 1.0

    vehicle_param: VehicleParam = field(default_factory=VehicleParam)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'DpPolyPathConfig':
        """Build a configuration from a plain dictionary (e.g. parsed YAML)."""
        values = dict(config_dict)
        vehicle = values.pop('vehicle_param', None) or {}
        if not isinstance(vehicle, dict):
            raise TypeError(f"vehicle_param must be a mapping, got {type(vehicle).__name__}")
        return cls(vehicle_param=VehicleParam(**vehicle), **values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ConfigValidationError(ValueError):
    """Raised when configuration validation fails."""
    pass


def validate_config(config: DpPolyPathConfig) -> None:
    """Validate configuration values for consistency and correctness.

    Args:
        config: Configuration to validate

    Raises:
        ConfigValidationError: If validation fails
    """
    errors: List[str] = []

    # Lattice sampling
    if config.sample_level <= 0:
        errors.append(f"sample_level must be positive, got {config.sample_level}")
    if config.sample_points_num_each_level <= 0:
        errors.append(f"sample_points_num_each_level must be positive, got {config.sample_points_num_each_level}")
    if config.step_length_min <= 0:
        errors.append(f"step_length_min must be positive, got {config.step_length_min}")
    if config.step_length_max < config.step_length_min:
        errors.append(f"step_length_max ({config.step_length_max}) must be >= step_length_min ({config.step_length_min})")
    if config.lateral_sample_offset <= 0:
        errors.append(f"lateral_sample_offset must be positive, got {config.lateral_sample_offset}")

    # Stitching
    if config.path_resolution <= 0:
        errors.append(f"path_resolution must be positive, got {config.path_resolution}")

    # Dynamic decisions
    if config.eval_time_interval <= 0:
        errors.append(f"eval_time_interval must be positive, got {config.eval_time_interval}")
    if config.prediction_total_time < 0:
        errors.append(f"prediction_total_time must be non-negative, got {config.prediction_total_time}")

    # Decision thresholds
    thresholds = {
        'static_decision_stop_buffer': config.static_decision_stop_buffer,
        'static_decision_ignore_range': config.static_decision_ignore_range,
        'dynamic_decision_follow_range': config.dynamic_decision_follow_range,
        'dp_path_decision_buffer': config.dp_path_decision_buffer,
    }
    for name, value in thresholds.items():
        if value < 0:
            errors.append(f"{name} must be non-negative, got {value}")

    # Cost weights (allow 0 for disabling)
    cost_weights = {
        'path_l_cost': config.path_l_cost,
        'path_dl_cost': config.path_dl_cost,
        'path_ddl_cost': config.path_ddl_cost,
        'obstacle_collision_cost': config.obstacle_collision_cost,
        'obstacle_collision_buffer': config.obstacle_collision_buffer,
    }
    for name, value in cost_weights.items():
        if value < 0:
            errors.append(f"{name} must be non-negative, got {value}")
    if config.cost_eval_resolution <= 0:
        errors.append(f"cost_eval_resolution must be positive, got {config.cost_eval_resolution}")

    # Vehicle
    vehicle = config.vehicle_param
    if vehicle.length <= 0:
        errors.append(f"vehicle_param.length must be positive, got {vehicle.length}")
    if vehicle.width <= 0:
        errors.append(f"vehicle_param.width must be positive, got {vehicle.width}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigValidationError(error_msg)


def load_config(config_path: Union[str, Path]) -> DpPolyPathConfig:
    """Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Loaded configuration
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML file {config_path}: {e}") from e

    if config_dict is None:
        raise ValueError(f"YAML file {config_path} is empty or contains no valid content")

    try:
        config = DpPolyPathConfig.from_dict(config_dict)
    except TypeError as e:
        raise ValueError(f"Invalid configuration structure in {config_path}: {e}") from e

    try:
        validate_config(config)
    except ConfigValidationError:
        logger.error(f"Configuration validation failed for {config_path}")
        raise

    logger.info(f"Configuration loaded and validated from {config_path}")

    return config


def save_config(config: DpPolyPathConfig, config_path: Union[str, Path]):
    """Save configuration to YAML file.

    Args:
        config: Configuration to save
        config_path: Path to save YAML file
    """
    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, indent=2, sort_keys=False)

    logger.info(f"Configuration saved to {config_path}")


__all__ = [
    'VehicleParam',
    'DpPolyPathConfig',
    'ConfigValidationError',
    'validate_config',
    'load_config',
    'save_config',
]
