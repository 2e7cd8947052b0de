"""
Area-weighted random sampling over a triangle soup.

Each sample picks a triangle with probability proportional to its area
(binary search over the cumulative-area table), then a point inside it from
asymmetric barycentric weights u ~ U(0,1), v ~ U(0,1-u), w = 1-u-v.
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Optional, Tuple

from config import swarm as config


logger = logging.getLogger(__name__)

AREA_EPSILON = config.MORPH["area_epsilon"]


@dataclass(frozen=True)
class Pose:
    """Rigid placement applied to sampled points: rotate (XYZ Euler, radians), then translate."""
    rotation: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    translation: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    @classmethod
    def from_degrees(cls, rotation, translation=(0.0, 0.0, 0.0)) -> "Pose":
        return cls(tuple(float(np.radians(a)) for a in rotation), tuple(float(t) for t in translation))

    def matrix(self) -> np.ndarray:
        """Rotation matrix R = Rz @ Ry @ Rx."""
        rx, ry, rz = self.rotation
        cx, sx = np.cos(rx), np.sin(rx)
        cy, sy = np.cos(ry), np.sin(ry)
        cz, sz = np.cos(rz), np.sin(rz)
        mx = np.array([[1, 0, 0], [0, cx, -sx], [0, sx, cx]], dtype=np.float64)
        my = np.array([[cy, 0, sy], [0, 1, 0], [-sy, 0, cy]], dtype=np.float64)
        mz = np.array([[cz, -sz, 0], [sz, cz, 0], [0, 0, 1]], dtype=np.float64)
        return mz @ my @ mx

    def apply(self, points: np.ndarray) -> np.ndarray:
        return points @ self.matrix().T + np.asarray(self.translation, dtype=np.float64)


def as_triangles(triangles) -> np.ndarray:
    """Coerce a triangle soup into a (k, 3, 3) float64 array."""
    tris = np.asarray(triangles, dtype=np.float64)
    if tris.size == 0:
        return np.zeros((0, 3, 3), dtype=np.float64)
    if tris.size % 9 != 0:
        raise ValueError(f"Triangle data of size {tris.size} is not a multiple of 9 coordinates")
    return tris.reshape(-1, 3, 3)


def triangle_areas(triangles) -> np.ndarray:
    """Half the cross-product magnitude of two edges, per triangle."""
    tris = as_triangles(triangles)
    edge_ab = tris[:, 1] - tris[:, 0]
    edge_ac = tris[:, 2] - tris[:, 0]
    return 0.5 * np.linalg.norm(np.cross(edge_ab, edge_ac), axis=1)


class SurfaceSampler:
    """
    Cumulative-area distribution over a triangle list.

    Triangles below the area epsilon carry zero weight. When no triangle
    carries weight the sampler is invalid and every sample call returns an
    empty (0, 3) array.
    """

    def __init__(self, triangles, epsilon: float = AREA_EPSILON):
        self.triangles = as_triangles(triangles)
        self.areas = triangle_areas(self.triangles)
        self.areas[~np.isfinite(self.areas)] = 0.0

        self._valid_faces = np.nonzero(self.areas >= epsilon)[0]
        self.cumulative = np.cumsum(self.areas[self._valid_faces])
        self.total_area = float(self.cumulative[-1]) if self.cumulative.size else 0.0

        skipped = len(self.triangles) - len(self._valid_faces)
        if skipped:
            logger.debug(f"Skipped {skipped} degenerate triangles (area < {epsilon:g})")

    @property
    def is_valid(self) -> bool:
        return self.total_area > 0.0

    @property
    def face_count(self) -> int:
        return len(self._valid_faces)

    def choose_faces(self, r: np.ndarray) -> np.ndarray:
        """First face whose cumulative area is >= r; the last face when none is."""
        slots = np.searchsorted(self.cumulative, r, side="left")
        np.minimum(slots, len(self.cumulative) - 1, out=slots)
        return self._valid_faces[slots]

    def draw(self, count: int, rng: np.random.Generator) -> Tuple[np.ndarray, np.ndarray]:
        """
        Draw face indices and barycentric weights for `count` samples.

        Returns:
            (faces, weights) with shapes (count,) and (count, 3); empty when invalid.
        """
        if not self.is_valid or count <= 0:
            return np.zeros(0, dtype=np.int64), np.zeros((0, 3), dtype=np.float64)

        faces = self.choose_faces(rng.uniform(0.0, self.total_area, count))

        u = rng.uniform(0.0, 1.0, count)
        v = rng.uniform(0.0, 1.0, count) * (1.0 - u)
        w = 1.0 - u - v
        np.maximum(w, 0.0, out=w)
        weights = np.stack((u, v, w), axis=1)
        return faces, weights

    def sample(self, count: int, rng: Optional[np.random.Generator] = None,
               pose: Optional[Pose] = None) -> np.ndarray:
        """Return `count` area-uniform surface points (or an empty array)."""
        rng = rng if rng is not None else np.random.default_rng()
        if not self.is_valid:
            logger.warning(f"No sampleable triangles among {len(self.triangles)}; returning no points")
            return np.zeros((0, 3), dtype=np.float64)

        faces, weights = self.draw(count, rng)
        tris = self.triangles[faces]
        points = (
            tris[:, 0] * weights[:, 0:1]
            + tris[:, 1] * weights[:, 1:2]
            + tris[:, 2] * weights[:, 2:3]
        )
        if pose is not None:
            points = pose.apply(points)
        logger.debug(f"Sampled {len(points)} points over {self.face_count} faces (area {self.total_area:.4f})")
        return points


def sample_surface(triangles, count: int, rng: Optional[np.random.Generator] = None,
                   pose: Optional[Pose] = None, epsilon: float = AREA_EPSILON) -> np.ndarray:
    """Convenience wrapper: build a sampler and draw once."""
    return SurfaceSampler(triangles, epsilon=epsilon).sample(count, rng, pose)
