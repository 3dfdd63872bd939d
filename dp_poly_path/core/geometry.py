"""Oriented bounding boxes for ego and obstacle footprints."""

import math
from typing import List, Tuple

from shapely.geometry import Polygon


class OrientedBox:
    """Rectangle centred at (center_x, center_y), rotated by heading.

    Args:
        center_x, center_y: Box centre [m]
        heading: Orientation of the length axis [rad]
        length: Extent along heading [m]
        width: Extent across heading [m]
    """

    def __init__(
        self,
        center_x: float,
        center_y: float,
        heading: float,
        length: float,
        width: float
    ):
        if length <= 0 or width <= 0:
            raise ValueError(f"Box dimensions must be positive, got {length}x{width}")
        self.center_x = center_x
        self.center_y = center_y
        self.heading = heading
        self.length = length
        self.width = width
        self._polygon = Polygon(self.corners)

    @property
    def half_length(self) -> float:
        return self.length / 2.0

    @property
    def half_width(self) -> float:
        return self.width / 2.0

    @property
    def corners(self) -> List[Tuple[float, float]]:
        """Corners in counter-clockwise order, starting front-left."""
        l2, w2 = self.half_length, self.half_width
        c, s = math.cos(self.heading), math.sin(self.heading)
        corners = []
        for cx, cy in [(l2, w2), (-l2, w2), (-l2, -w2), (l2, -w2)]:
            corners.append((
                cx * c - cy * s + self.center_x,
                cx * s + cy * c + self.center_y,
            ))
        return corners

    @property
    def polygon(self) -> Polygon:
        return self._polygon

    def has_overlap(self, other: 'OrientedBox') -> bool:
        """Whether the two boxes share any area or boundary point."""
        return self._polygon.intersects(other.polygon)

    def distance_to(self, other: 'OrientedBox') -> float:
        """Minimum distance between the two boxes, 0 when they overlap."""
        return float(self._polygon.distance(other.polygon))

    def __repr__(self) -> str:
        return (f"OrientedBox(center=({self.center_x:.2f}, {self.center_y:.2f}), "
                f"heading={self.heading:.3f}, length={self.length:.2f}, width={self.width:.2f})")
