"""Pointer snapshot shared between the input handler and the physics step."""

import math
import numpy as np
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class PointerState:
    """
    Last known pointer position on the ring plane.

    Attributes:
        x, y: Pointer position in world units (z = 0 plane)
        active: False while the pointer is outside the window
        last_update: Clock reading of the last move
    """
    x: float = 0.0
    y: float = 0.0
    active: bool = False
    last_update: float = -math.inf

    def move(self, x: float, y: float, now: float):
        self.x = float(x)
        self.y = float(y)
        self.active = True
        self.last_update = now

    def leave(self):
        self.active = False

    def enter(self):
        # Entering does not refresh the timestamp; only movement does
        self.active = True

    def is_engaged(self, now: float, timeout: float) -> bool:
        """True when active and moved less than `timeout` seconds ago."""
        return self.active and (now - self.last_update) < timeout


def ray_plane_intersection(origin: np.ndarray, direction: np.ndarray,
                           plane_z: float = 0.0) -> Optional[Tuple[float, float]]:
    """
    Intersect a ray with the horizontal plane z = plane_z.

    Returns:
        (x, y) of the hit, or None when the ray is parallel to or points away from the plane
    """
    dz = float(direction[2])
    if abs(dz) < 1e-9:
        return None
    s = (plane_z - float(origin[2])) / dz
    if s < 0.0:
        return None
    return (float(origin[0] + direction[0] * s), float(origin[1] + direction[1] * s))
