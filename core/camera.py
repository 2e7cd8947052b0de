"""Camera orbiting the ring normal (z axis) and looking at the ring center."""

import math
import numpy as np
from OpenGL.GL import *
from OpenGL.GLU import *
from typing import Optional, Tuple

from config import swarm as config
from swarm.pointer import ray_plane_intersection


class Camera:
    """
    Tilt is measured from the ring normal: 0 looks straight down onto the
    rings, larger values lean toward an edge-on view. Azimuth spins the view
    around the normal.
    """

    def __init__(self):
        self.distance = config.CAMERA["initial_radius"]
        self.target_distance = self.distance
        self.azimuth = config.CAMERA["initial_azimuth"]
        self.tilt = config.CAMERA["initial_tilt"]
        self.center = np.zeros(3)
        self.zoom_smoothing = 8.0

    def _offset_and_up(self) -> Tuple[np.ndarray, np.ndarray]:
        az = math.radians(self.azimuth)
        tilt = math.radians(self.tilt)
        offset = np.array([
            math.sin(tilt) * math.cos(az),
            math.sin(tilt) * math.sin(az),
            math.cos(tilt),
        ])
        # Opposite of the direction of increasing tilt; never parallel to offset
        up = np.array([
            -math.cos(tilt) * math.cos(az),
            -math.cos(tilt) * math.sin(az),
            math.sin(tilt),
        ])
        return offset, up

    def get_position(self) -> np.ndarray:
        offset, _ = self._offset_and_up()
        return self.center + self.distance * offset

    def get_camera_axes(self) -> tuple:
        """(forward, right, up) unit vectors; forward points at the center."""
        offset, up = self._offset_and_up()
        forward = -offset
        right = np.cross(forward, up)
        return forward, right, up

    def pointer_to_plane(self, ndc_x: float, ndc_y: float, aspect: float) -> Optional[Tuple[float, float]]:
        """
        Cast a ray through a normalized pointer position (-1..1 on both axes)
        and return where it meets the z = 0 ring plane.
        """
        forward, right, up = self.get_camera_axes()
        half_height = math.tan(math.radians(config.CAMERA["fov"]) / 2)
        direction = forward + right * (ndc_x * half_height * aspect) + up * (ndc_y * half_height)
        return ray_plane_intersection(self.get_position(), direction)

    def rotate(self, d_azimuth: float, d_tilt: float):
        """Rotate by the given angles in degrees."""
        self.azimuth = (self.azimuth + d_azimuth) % 360
        self.tilt = min(config.CAMERA["max_tilt"], max(config.CAMERA["min_tilt"], self.tilt + d_tilt))

    def zoom_smooth(self, delta: float):
        self.target_distance = min(
            config.CAMERA["max_radius"],
            max(config.CAMERA["min_radius"], self.target_distance + delta)
        )

    def reset(self):
        self.azimuth = config.CAMERA["initial_azimuth"]
        self.tilt = config.CAMERA["initial_tilt"]
        self.target_distance = config.CAMERA["initial_radius"]

    def update(self, dt: float):
        """Ease the distance toward the zoom target (called each frame)."""
        self.distance += (self.target_distance - self.distance) * min(1.0, self.zoom_smoothing * dt)

    def apply(self):
        """Load the view transform into the modelview matrix."""
        eye = self.get_position()
        _, up = self._offset_and_up()
        glLoadIdentity()
        gluLookAt(*eye, *self.center, *up)
