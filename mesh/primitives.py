"""Procedural triangle soups used as built-in morph targets."""

import math
import numpy as np


def torus_triangles(major_radius: float = 6.0, minor_radius: float = 2.0,
                    segments: int = 48, sides: int = 24) -> np.ndarray:
    """
    Torus around the Z axis, lying in the XY (ring) plane.

    Returns:
        (segments * sides * 2, 3, 3) float64 triangle array
    """
    if segments < 3 or sides < 3:
        raise ValueError("torus needs at least 3 segments and 3 sides")

    u = np.linspace(0.0, 2.0 * np.pi, segments, endpoint=False)
    v = np.linspace(0.0, 2.0 * np.pi, sides, endpoint=False)
    uu, vv = np.meshgrid(u, v, indexing="ij")

    ring = major_radius + minor_radius * np.cos(vv)
    grid = np.stack((ring * np.cos(uu), ring * np.sin(uu), minor_radius * np.sin(vv)), axis=-1)

    i = np.arange(segments)
    j = np.arange(sides)
    ii, jj = np.meshgrid(i, j, indexing="ij")
    i1 = (ii + 1) % segments
    j1 = (jj + 1) % sides

    a = grid[ii, jj]
    b = grid[i1, jj]
    c = grid[i1, j1]
    d = grid[ii, j1]

    upper = np.stack((a, b, c), axis=-2).reshape(-1, 3, 3)
    lower = np.stack((a, c, d), axis=-2).reshape(-1, 3, 3)
    return np.concatenate((upper, lower), axis=0)


_PHI = (1.0 + math.sqrt(5.0)) / 2.0

_ICOSAHEDRON_VERTS = [
    (-1, _PHI, 0), (1, _PHI, 0), (-1, -_PHI, 0), (1, -_PHI, 0),
    (0, -1, _PHI), (0, 1, _PHI), (0, -1, -_PHI), (0, 1, -_PHI),
    (_PHI, 0, -1), (_PHI, 0, 1), (-_PHI, 0, -1), (-_PHI, 0, 1),
]

_ICOSAHEDRON_FACES = [
    (0, 11, 5), (0, 5, 1), (0, 1, 7), (0, 7, 10), (0, 10, 11),
    (1, 5, 9), (5, 11, 4), (11, 10, 2), (10, 7, 6), (7, 1, 8),
    (3, 9, 4), (3, 4, 2), (3, 2, 6), (3, 6, 8), (3, 8, 9),
    (4, 9, 5), (2, 4, 11), (6, 2, 10), (8, 6, 7), (9, 8, 1),
]


def icosphere_triangles(radius: float = 6.0, subdivisions: int = 2) -> np.ndarray:
    """
    Geodesic sphere from a midpoint-subdivided icosahedron.

    Returns:
        (20 * 4**subdivisions, 3, 3) float64 triangle array
    """
    if subdivisions < 0:
        raise ValueError("subdivisions must be non-negative")

    verts = np.asarray(_ICOSAHEDRON_VERTS, dtype=np.float64)
    verts /= np.linalg.norm(verts, axis=1, keepdims=True)
    tris = verts[np.asarray(_ICOSAHEDRON_FACES)]

    for _ in range(subdivisions):
        a, b, c = tris[:, 0], tris[:, 1], tris[:, 2]
        ab = a + b
        bc = b + c
        ca = c + a
        for m in (ab, bc, ca):
            m /= np.linalg.norm(m, axis=1, keepdims=True)
        tris = np.concatenate((
            np.stack((a, ab, ca), axis=1),
            np.stack((ab, b, bc), axis=1),
            np.stack((ca, bc, c), axis=1),
            np.stack((ab, bc, ca), axis=1),
        ), axis=0)

    return tris * radius


PRIMITIVES = {
    "torus": lambda scale: torus_triangles(major_radius=scale, minor_radius=scale / 3.0),
    "icosphere": lambda scale: icosphere_triangles(radius=scale, subdivisions=3),
}
