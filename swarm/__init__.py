"""Ring swarm simulation: rings, physics, surface sampling and morphing."""

from .ring import RingSpec, ParticleSwarm
from .sampler import Pose, SurfaceSampler, sample_surface
from .physics import PhysicsStepper
from .morph import MorphController, MorphState
from .pointer import PointerState
from .system import SwarmSystem

__all__ = [
    "RingSpec", "ParticleSwarm",
    "Pose", "SurfaceSampler", "sample_surface",
    "PhysicsStepper",
    "MorphController", "MorphState",
    "PointerState",
    "SwarmSystem",
]
