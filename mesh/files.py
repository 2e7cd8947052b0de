"""Mesh files (OBJ, STL, PLY, glTF/GLB, ...) read through trimesh into a world-space triangle soup."""

import logging
import numpy as np
import trimesh
from pathlib import Path
from typing import Union


logger = logging.getLogger(__name__)


def mesh_to_triangles(mesh: trimesh.Trimesh) -> np.ndarray:
    """Index the vertex table by the face table: (k, 3, 3) float64."""
    faces = np.asarray(mesh.faces, dtype=np.int64).reshape(-1, 3)
    vertices = np.asarray(mesh.vertices, dtype=np.float64).reshape(-1, 3)
    return vertices[faces]


def load_mesh_triangles(path: Union[str, Path]) -> np.ndarray:
    """
    Load any mesh format trimesh understands and flatten it to triangles.

    Scenes (glTF/GLB, multi-object OBJ) are baked into one mesh with their
    node transforms applied; non-mesh geometry in them is dropped. Faces are
    kept exactly as stored (no vertex merging or degenerate-face removal),
    so the sampler sees the file's own triangles.

    Raises:
        FileNotFoundError: path does not exist
    Unsupported or corrupt files raise whatever trimesh raises for them.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Mesh file not found: {path}")

    mesh = trimesh.load_mesh(str(path), process=False)
    triangles = mesh_to_triangles(mesh)
    if len(triangles) == 0:
        logger.warning(f"{path.name} contains no faces")
    else:
        logger.info(f"Loaded {len(triangles)} triangles from {path.name}")
    return triangles
