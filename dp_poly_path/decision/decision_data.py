"""Container of the obstacles that receive path decisions."""

from typing import Iterable, List, Optional

from .obstacle import Obstacle


class DecisionData:
    """Borrowed obstacle collection, split into static and dynamic obstacles.

    The planner reads obstacle geometry and appends decisions; it never
    removes or reorders obstacles.

    Args:
        obstacles: Obstacles of the current planning cycle
    """

    def __init__(self, obstacles: Iterable[Obstacle] = ()):
        self.static_obstacles: List[Obstacle] = []
        self.dynamic_obstacles: List[Obstacle] = []
        for obstacle in obstacles:
            if obstacle.is_static:
                self.static_obstacles.append(obstacle)
            else:
                self.dynamic_obstacles.append(obstacle)

    @property
    def all_obstacles(self) -> List[Obstacle]:
        return self.static_obstacles + self.dynamic_obstacles

    def find_obstacle(self, obstacle_id: str) -> Optional[Obstacle]:
        for obstacle in self.all_obstacles:
            if obstacle.id == obstacle_id:
                return obstacle
        return None

    def __len__(self) -> int:
        return len(self.static_obstacles) + len(self.dynamic_obstacles)
