"""Ring configuration and the per-ring particle arena."""

import math
import numpy as np
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Optional

from config import swarm as config


@dataclass(frozen=True)
class RingSpec:
    """
    Static configuration for one ring's procedural motion.

    Attributes:
        radius: Base orbit radius
        wobble_period: Base angular rate of the periodic jitter
        wobble_amplitude: Jitter magnitude (0 disables wobble)
        radius_variation: Angular frequency of the placement-radius wave
        wave_amplitude: Magnitude of the placement-radius wave
        orbit_speed: Tangential angular rate
        orbit_modulation_amplitude: Amplitude of the spring target modulation
        orbit_modulation_frequency: Time frequency of the spring target modulation
        scatter_factor: Fraction of radius used as uniform placement noise
        particle_count: Number of particles in the ring
    """
    radius: float = 8.0
    wobble_period: float = 0.02
    wobble_amplitude: float = 0.0
    radius_variation: float = 0.031
    wave_amplitude: float = 1.2
    orbit_speed: float = 0.0004
    orbit_modulation_amplitude: float = 0.0
    orbit_modulation_frequency: float = 0.0
    scatter_factor: float = 0.05
    particle_count: int = 600

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "particle_count":
                continue
            if not math.isfinite(float(value)):
                raise ValueError(f"RingSpec.{f.name} must be finite, got {value!r}")
        if int(self.particle_count) != self.particle_count or self.particle_count < 0:
            raise ValueError(f"RingSpec.particle_count must be a non-negative integer, got {self.particle_count!r}")
        if self.radius < 0:
            raise ValueError(f"RingSpec.radius must be non-negative, got {self.radius!r}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RingSpec":
        """Build a spec from a persisted record, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        if "particle_count" in kwargs:
            kwargs["particle_count"] = int(kwargs["particle_count"])
        return cls(**kwargs)


_STOP_POSITIONS = np.array([pos for pos, _ in config.GRADIENT_STOPS], dtype=np.float64)
_STOP_COLORS = np.array([color for _, color in config.GRADIENT_STOPS], dtype=np.float64)


def gradient_colors(angles: np.ndarray) -> np.ndarray:
    """Map placement angles onto the cyclic color gradient."""
    t = np.mod(np.asarray(angles, dtype=np.float64) / (2.0 * np.pi), 1.0)
    colors = np.empty((t.shape[0], 3), dtype=np.float32)
    for channel in range(3):
        colors[:, channel] = np.interp(t, _STOP_POSITIONS, _STOP_COLORS[:, channel])
    return colors


class ParticleSwarm:
    """
    All particles of one ring, stored as contiguous NumPy arrays.

    Arrays are indexed by local particle id. Physics and morph kernels
    mutate positions and velocities in place; everything else is fixed at
    construction. A rebuild creates a new swarm rather than patching this one.
    """

    def __init__(self, spec: RingSpec, rng: Optional[np.random.Generator] = None):
        self.spec = spec
        rng = rng if rng is not None else np.random.default_rng()
        n = int(spec.particle_count)

        angles = rng.uniform(0.0, 2.0 * np.pi, n)
        radii = (
            spec.radius
            + np.sin(angles * spec.radius_variation) * spec.wave_amplitude
            + rng.uniform(-0.5, 0.5, n) * spec.radius * spec.scatter_factor
        )

        self.positions = np.zeros((n, 3), dtype=np.float64)
        self.positions[:, 0] = radii * np.cos(angles)
        self.positions[:, 1] = radii * np.sin(angles)
        self.positions[:, 2] = rng.uniform(-0.025, 0.025, n)
        self.initial_positions = self.positions.copy()

        # Tangential: (-y, x) is the z-axis cross the radius vector
        speed = spec.orbit_speed * rng.uniform(0.8, 1.2, n)
        self.velocities = np.zeros((n, 3), dtype=np.float64)
        self.velocities[:, 0] = -self.positions[:, 1] * speed
        self.velocities[:, 1] = self.positions[:, 0] * speed

        self.wobble_phases = np.arange(n, dtype=np.float64) * 0.05
        self.wobble_speeds = spec.wobble_period * rng.uniform(0.95, 1.05, n)
        self.colors = gradient_colors(angles)

    @property
    def count(self) -> int:
        return self.positions.shape[0]

    def radii(self) -> np.ndarray:
        """Current planar distance of every particle from the ring center."""
        return np.hypot(self.positions[:, 0], self.positions[:, 1])
