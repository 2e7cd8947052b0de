"""Per-frame orbital physics for one ring - Numba JIT kernel plus a thin stepper."""

import math
import numpy as np
from numba import njit, prange
from typing import Optional

from config import swarm as config
from .pointer import PointerState
from .ring import ParticleSwarm


# Below this planar distance a direction is undefined; the force is zero.
MIN_DISTANCE = 1e-3

RETURN_GAIN_BASE = 0.03


# ============================================================================
# NUMBA JIT-COMPILED KERNEL
# ============================================================================

@njit(parallel=True, cache=True)
def step_ring_numba(
    positions: np.ndarray,
    velocities: np.ndarray,
    initial_positions: np.ndarray,
    wobble_phases: np.ndarray,
    wobble_speeds: np.ndarray,
    pointer_jitter: np.ndarray,
    t: float,
    wobble_period: float,
    wobble_amplitude: float,
    orbit_speed: float,
    modulation_amplitude: float,
    modulation_frequency: float,
    return_gain: float,
    friction: float,
    pointer_engaged: bool,
    pointer_x: float,
    pointer_y: float,
    pointer_radius: float,
    pointer_force: float,
    pointer_sign: float,
    num_particles: int
):
    """Advance every particle of a ring by one tick (z is never touched)."""
    for i in prange(num_particles):
        x = positions[i, 0]
        y = positions[i, 1]
        ix = initial_positions[i, 0]
        iy = initial_positions[i, 1]

        # Spring toward the (modulated) ideal radius
        distance = math.sqrt(x * x + y * y)
        ideal_radius = math.sqrt(ix * ix + iy * iy)
        angle = math.atan2(y, x)
        target_radius = ideal_radius + math.sin(t * modulation_frequency + angle) * modulation_amplitude
        radius_diff = target_radius - distance

        return_x = 0.0
        return_y = 0.0
        if distance >= MIN_DISTANCE:
            return_x = x * radius_diff * return_gain / distance
            return_y = y * radius_diff * return_gain / distance

        # Wobble
        phase_shift = math.sin(t * wobble_period + i * 0.3) * 0.5
        wobble_x = math.sin(t * wobble_speeds[i] + wobble_phases[i] + phase_shift) * wobble_amplitude
        wobble_y = math.cos(t * wobble_speeds[i] * 1.1 + wobble_phases[i]) * wobble_amplitude

        # Pointer push / pull
        pointer_dx = 0.0
        pointer_dy = 0.0
        if pointer_engaged and pointer_radius > 0.0:
            dx = x - pointer_x
            dy = y - pointer_y
            pointer_distance = math.sqrt(dx * dx + dy * dy)
            if pointer_distance < pointer_radius and pointer_distance >= MIN_DISTANCE:
                force = (1.0 - pointer_distance / pointer_radius) * pointer_force
                scale = force * pointer_jitter[i] * pointer_sign / pointer_distance
                pointer_dx = dx * scale
                pointer_dy = dy * scale

        nx = x + velocities[i, 0] + return_x + wobble_x + pointer_dx
        ny = y + velocities[i, 1] + return_y + wobble_y + pointer_dy
        positions[i, 0] = nx
        positions[i, 1] = ny

        # Orbital velocity from the updated position, +-5% periodic variation
        speed_variation = 1.0 + math.sin(t * 0.3 + i * 0.02) * 0.05
        velocities[i, 0] = -ny * orbit_speed * speed_variation * friction
        velocities[i, 1] = nx * orbit_speed * speed_variation * friction
        velocities[i, 2] = 0.0


def warmup_kernels():
    """Pre-compile the Numba kernel with a tiny ring."""
    n = 16
    pos = np.random.default_rng(0).random((n, 3)) + 1.0
    vel = np.zeros((n, 3), dtype=np.float64)
    init = pos.copy()
    phases = np.arange(n, dtype=np.float64) * 0.05
    speeds = np.full(n, 0.02, dtype=np.float64)
    jitter = np.ones(n, dtype=np.float64)
    step_ring_numba(
        pos, vel, init, phases, speeds, jitter,
        0.0, 0.02, 0.0, 0.0004, 0.1, 1.0, 0.03, 0.98,
        True, 1.0, 1.0, 2.0, 0.05, 1.0, n
    )


# ============================================================================
# STEPPER
# ============================================================================

class PhysicsStepper:
    """
    Advances a ParticleSwarm by one tick of orbital motion, spring return,
    wobble and pointer interaction.

    Pointer jitter is drawn from the injected Generator every tick the
    pointer is engaged; pass a seeded Generator for reproducible runs.
    """

    def __init__(
        self,
        friction: Optional[float] = None,
        return_speed: Optional[float] = None,
        pointer_enabled: Optional[bool] = None,
        pointer_force: Optional[float] = None,
        pointer_radius: Optional[float] = None,
        repel: Optional[bool] = None,
        pointer_timeout: Optional[float] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.friction = float(config.SWARM["friction"] if friction is None else friction)
        return_speed = config.SWARM["return_speed"] if return_speed is None else return_speed
        self.return_gain = RETURN_GAIN_BASE * float(return_speed)

        self.pointer_enabled = config.POINTER["enabled"] if pointer_enabled is None else bool(pointer_enabled)
        self.pointer_force = float(config.POINTER["force"] if pointer_force is None else pointer_force)
        self.pointer_radius = float(config.POINTER["radius"] if pointer_radius is None else pointer_radius)
        self.repel = config.POINTER["repel"] if repel is None else bool(repel)
        self.pointer_timeout = float(config.POINTER["timeout"] if pointer_timeout is None else pointer_timeout)
        self.rng = rng if rng is not None else np.random.default_rng()

    def pointer_engaged(self, pointer: Optional[PointerState], now: float) -> bool:
        return (
            self.pointer_enabled
            and pointer is not None
            and pointer.is_engaged(now, self.pointer_timeout)
        )

    def step(self, swarm: ParticleSwarm, t: float,
             pointer: Optional[PointerState] = None, now: float = 0.0):
        """Advance `swarm` in place to simulated time `t`."""
        n = swarm.count
        if n == 0:
            return

        spec = swarm.spec
        engaged = self.pointer_engaged(pointer, now)
        if engaged:
            jitter = self.rng.uniform(0.8, 1.2, n)
            px, py = pointer.x, pointer.y
        else:
            jitter = np.ones(n, dtype=np.float64)
            px, py = 0.0, 0.0

        step_ring_numba(
            swarm.positions,
            swarm.velocities,
            swarm.initial_positions,
            swarm.wobble_phases,
            swarm.wobble_speeds,
            jitter,
            float(t),
            float(spec.wobble_period),
            float(spec.wobble_amplitude),
            float(spec.orbit_speed),
            float(spec.orbit_modulation_amplitude),
            float(spec.orbit_modulation_frequency),
            self.return_gain,
            self.friction,
            engaged,
            float(px),
            float(py),
            self.pointer_radius,
            self.pointer_force,
            1.0 if self.repel else -1.0,
            n
        )
