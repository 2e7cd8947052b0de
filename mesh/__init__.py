"""Triangle-soup sources for morph targets."""

from .files import load_mesh_triangles, mesh_to_triangles
from .primitives import PRIMITIVES, torus_triangles, icosphere_triangles
from .loader import (
    TargetPointLoader, mesh_source_from_config, pose_from_config, load_target_points
)

__all__ = [
    "load_mesh_triangles", "mesh_to_triangles",
    "PRIMITIVES", "torus_triangles", "icosphere_triangles",
    "TargetPointLoader", "mesh_source_from_config", "pose_from_config", "load_target_points",
]
