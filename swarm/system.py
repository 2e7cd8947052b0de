"""SwarmSystem - owns every ring, the morph state and the per-frame update."""

import dataclasses
import logging
import time
import numpy as np
from typing import Callable, List, Optional, Sequence, Tuple

from config import swarm as config
from .morph import MorphController, MorphState
from .physics import PhysicsStepper
from .pointer import PointerState
from .presets import build_ring_specs, save_ring_specs
from .ring import ParticleSwarm, RingSpec


logger = logging.getLogger(__name__)


class SwarmSystem:
    """
    All rings of the simulation.

    Rings are kept in order; offsets[r] is the number of particles in the
    rings before r, which maps a ring-local index onto the shared target
    point array during a morph.
    """

    def __init__(
        self,
        specs: Optional[Sequence[RingSpec]] = None,
        physics: Optional[PhysicsStepper] = None,
        morph: Optional[MorphController] = None,
        rng: Optional[np.random.Generator] = None,
        clock: Callable[[], float] = time.monotonic,
        time_step: Optional[float] = None,
    ):
        self.rng = rng if rng is not None else np.random.default_rng(config.SWARM["seed"])
        self.physics = physics if physics is not None else PhysicsStepper(rng=self.rng)
        self.morph = morph if morph is not None else MorphController()
        self.clock = clock
        self.time_step = float(config.SWARM["time_step"] if time_step is None else time_step)
        self.pointer = PointerState()

        self.time = 0.0
        self.frame = 0
        self.target_points: Optional[np.ndarray] = None
        self.loader = None

        self.specs: List[RingSpec] = []
        self.rings: List[ParticleSwarm] = []
        self.offsets = np.zeros(0, dtype=np.int64)

        if specs is None:
            specs = build_ring_specs(config.SWARM["ring_count"])
        self.rebuild(specs)

    # ------------------------------------------------------------------ rings

    def rebuild(self, specs: Sequence[RingSpec]):
        """Regenerate every ring from scratch and return the morph to Idle."""
        specs = list(specs)
        self.specs = specs
        self.rings = [ParticleSwarm(spec, self.rng) for spec in specs]

        counts = np.array([ring.count for ring in self.rings], dtype=np.int64)
        self.offsets = np.concatenate(([0], np.cumsum(counts)[:-1])) if len(counts) else counts

        self.morph.reset()
        logger.info(f"Built {len(self.rings)} rings with {self.total_particles} particles")

    def set_ring_count(self, ring_count: int, total_particles: Optional[int] = None):
        """Rebuild with a new ring count, keeping the current particle budget by default."""
        total = self.total_particles if total_particles is None else total_particles
        self.rebuild(build_ring_specs(ring_count, total_particles=total))

    def update_ring(self, index: int, **changes):
        """Replace fields of one ring's spec and rebuild."""
        if not 0 <= index < len(self.specs):
            raise IndexError(f"Ring index {index} out of range ({len(self.specs)} rings)")
        specs = list(self.specs)
        specs[index] = dataclasses.replace(specs[index], **changes)
        self.rebuild(specs)

    def save_specs(self, path):
        """Persist the current ring list; load it back with --rings-file."""
        save_ring_specs(path, self.specs)

    @property
    def ring_count(self) -> int:
        return len(self.rings)

    @property
    def total_particles(self) -> int:
        return sum(ring.count for ring in self.rings)

    # ------------------------------------------------------------------ morph

    def set_target_points(self, points: np.ndarray):
        """Assign the morph target once; the array is read-only afterwards."""
        if self.target_points is not None:
            raise RuntimeError("Morph target points are already assigned")
        points = np.array(points, dtype=np.float64).reshape(-1, 3)
        points.setflags(write=False)
        self.target_points = points

    def attach_loader(self, loader):
        """Poll `loader` every tick until it delivers target points."""
        self.loader = loader

    @property
    def morph_available(self) -> bool:
        return self.target_points is not None and len(self.target_points) > 0

    def request_morph(self) -> bool:
        """Start morphing if target points are ready and the swarm is Idle."""
        if not self.morph_available:
            logger.info("Morph requested but no target points are loaded yet")
            return False
        if not self.morph.start():
            return False
        overflow = self.total_particles - len(self.target_points)
        if overflow > 0:
            logger.info(f"{overflow} particles exceed the {len(self.target_points)} target points and will stay in orbit")
        return True

    def retry_target_load(self) -> bool:
        """Restart a failed morph-target load. Returns True if a retry was started."""
        if self.loader is None or self.target_points is not None or not self.loader.failed:
            return False
        logger.info("Retrying morph target load")
        self.loader.retry()
        return True

    def _poll_loader(self):
        if self.loader is None or self.target_points is not None:
            return
        points = self.loader.poll()
        if points is not None:
            self.set_target_points(points)

    # ------------------------------------------------------------------ frame

    def tick(self):
        """Advance the simulation by one frame."""
        self._poll_loader()
        self.time += self.time_step
        self.frame += 1

        state = self.morph.state
        if state is MorphState.MORPHING:
            self.morph.advance()
            for ring, offset in zip(self.rings, self.offsets):
                self.morph.apply(ring, self.target_points, int(offset))
            self.morph.finish()
        elif state is MorphState.IDLE:
            now = self.clock()
            for ring in self.rings:
                self.physics.step(ring, self.time, self.pointer, now)

    def render_buffers(self) -> List[Tuple[np.ndarray, np.ndarray]]:
        """(positions, colors) per ring, for drawing only."""
        return [(ring.positions, ring.colors) for ring in self.rings]

    def stats(self) -> dict:
        return {
            "frame": self.frame,
            "time": self.time,
            "rings": self.ring_count,
            "particles": self.total_particles,
            "state": self.morph.state.value,
            "progress": self.morph.progress,
            "targets": 0 if self.target_points is None else len(self.target_points),
        }
