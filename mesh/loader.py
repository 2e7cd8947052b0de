"""
Asynchronous morph-target loading.

A daemon worker thread loads the triangle soup and samples it; the result
is handed over through a single-assignment Future that the frame loop
polls once per tick without blocking.
"""

import logging
import threading
import numpy as np
from concurrent.futures import Future, TimeoutError as FutureTimeout
from pathlib import Path
from typing import Callable, Optional, Union

from config import swarm as config
from swarm.sampler import Pose, SurfaceSampler
from .files import load_mesh_triangles
from .primitives import PRIMITIVES


logger = logging.getLogger(__name__)

MeshSource = Callable[[], np.ndarray]


def mesh_source_from_config(path: Optional[Union[str, Path]] = None,
                            primitive: Optional[str] = None,
                            scale: Optional[float] = None) -> MeshSource:
    """
    Pick the triangle-soup source: a mesh file if given, else a built-in primitive.
    """
    path = config.MORPH["mesh_path"] if path is None else path
    if path:
        return lambda: load_mesh_triangles(path)

    name = config.MORPH["primitive"] if primitive is None else primitive
    if name not in PRIMITIVES:
        raise ValueError(f"Unknown primitive {name!r}; choose from {', '.join(sorted(PRIMITIVES))}")
    size = float(config.MORPH["primitive_scale"] if scale is None else scale)
    return lambda: PRIMITIVES[name](size)


def pose_from_config() -> Pose:
    pose = config.MORPH["pose"]
    return Pose.from_degrees(pose["rotation"], pose["translation"])


def load_target_points(source: MeshSource, count: int,
                       rng: Optional[np.random.Generator] = None,
                       pose: Optional[Pose] = None) -> np.ndarray:
    """Load a mesh and sample `count` surface points from it (blocking)."""
    triangles = source()
    return SurfaceSampler(triangles).sample(count, rng, pose)


class TargetPointLoader:
    """One-shot background load-and-sample of morph target points."""

    def __init__(self, source: MeshSource, count: int,
                 rng: Optional[np.random.Generator] = None,
                 pose: Optional[Pose] = None):
        self.source = source
        self.count = int(count)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.pose = pose
        self.future: Optional[Future] = None
        self.thread = None
        self.failed = False
        self._delivered = False

    def start(self):
        """Launch the worker thread; a running or finished load is left alone."""
        if self.future is not None:
            return
        self.future = Future()
        self.future.set_running_or_notify_cancel()
        self.thread = threading.Thread(target=self._worker, name="mesh-loader", daemon=True)
        self.thread.start()
        logger.info(f"Loading morph target ({self.count} points) in the background...")

    def _worker(self):
        try:
            points = load_target_points(self.source, self.count, self.rng, self.pose)
        except Exception as e:
            self.future.set_exception(e)
        else:
            self.future.set_result(points)

    def poll(self) -> Optional[np.ndarray]:
        """
        Non-blocking check. Returns the sampled points exactly once, None otherwise.
        """
        if self.future is None or self._delivered or self.failed:
            return None
        if not self.future.done():
            return None

        error = self.future.exception()
        if error is not None:
            self.failed = True
            logger.error(f"Morph target load failed: {error}")
            return None

        points = self.future.result()
        if len(points) == 0:
            self.failed = True
            logger.warning("Morph target mesh produced no surface points; morph unavailable")
            return None

        self._delivered = True
        logger.info(f"Morph target ready: {len(points)} points")
        return points

    def retry(self):
        """Restart after a failure."""
        if not self.failed:
            return
        self.failed = False
        self.future = None
        self.start()

    def wait(self, timeout: Optional[float] = None) -> Optional[np.ndarray]:
        """Block until the load finishes, then poll. Used by headless tools and tests."""
        if self.future is None:
            self.start()
        try:
            self.future.exception(timeout=timeout)
        except FutureTimeout:
            return None
        return self.poll()
