"""Morph state machine: blend ring positions onto sampled surface points, then freeze."""

import logging
import numpy as np
from enum import Enum
from numba import njit, prange
from typing import Optional

from config import swarm as config
from .ring import ParticleSwarm


logger = logging.getLogger(__name__)

# Accumulated progress this close to 1 counts as complete
PROGRESS_SNAP = 1e-9


class MorphState(Enum):
    IDLE = "idle"
    MORPHING = "morphing"
    FROZEN = "frozen"


@njit(parallel=True, cache=True)
def morph_ring_numba(
    positions: np.ndarray,
    targets: np.ndarray,
    start_index: int,
    progress: float,
    num_particles: int
):
    """Lerp each particle toward its target; particles past the target list are left alone."""
    num_targets = targets.shape[0]
    keep = 1.0 - progress
    for i in prange(num_particles):
        gi = start_index + i
        if gi >= num_targets:
            continue
        positions[i, 0] = keep * positions[i, 0] + progress * targets[gi, 0]
        positions[i, 1] = keep * positions[i, 1] + progress * targets[gi, 1]
        positions[i, 2] = keep * positions[i, 2] + progress * targets[gi, 2]


class MorphController:
    """
    Idle -> Morphing -> Frozen.

    Frozen is terminal; only reset() (issued by a swarm rebuild) returns to Idle.
    """

    def __init__(self, rate: Optional[float] = None):
        self.rate = float(config.MORPH["rate"] if rate is None else rate)
        if self.rate <= 0.0:
            raise ValueError(f"Morph rate must be positive, got {self.rate}")
        self.state = MorphState.IDLE
        self.progress = 0.0

    @property
    def morphing(self) -> bool:
        return self.state is MorphState.MORPHING

    @property
    def frozen(self) -> bool:
        return self.state is MorphState.FROZEN

    @property
    def idle(self) -> bool:
        return self.state is MorphState.IDLE

    def start(self) -> bool:
        """Begin morphing from Idle; any other state ignores the trigger."""
        if self.state is not MorphState.IDLE:
            logger.debug(f"Morph trigger ignored in state {self.state.value}")
            return False
        self.state = MorphState.MORPHING
        self.progress = 0.0
        logger.info(f"Morph started (rate {self.rate}/tick)")
        return True

    def advance(self) -> float:
        """Step progress by one tick's worth and return it."""
        if self.state is not MorphState.MORPHING:
            return self.progress
        progress = self.progress + self.rate
        if progress >= 1.0 - PROGRESS_SNAP:
            progress = 1.0
        self.progress = progress
        return progress

    def apply(self, swarm: ParticleSwarm, targets: np.ndarray, start_index: int):
        """Blend one ring toward targets[start_index:start_index + count]."""
        if self.state is not MorphState.MORPHING or swarm.count == 0:
            return
        morph_ring_numba(swarm.positions, targets, int(start_index), float(self.progress), swarm.count)

    def finish(self) -> bool:
        """Freeze once progress is complete. Returns True on the transition."""
        if self.state is MorphState.MORPHING and self.progress >= 1.0:
            self.state = MorphState.FROZEN
            logger.info("Morph complete; swarm frozen")
            return True
        return False

    def reset(self):
        self.state = MorphState.IDLE
        self.progress = 0.0
