"""
Ring Presets
============

Builds RingSpec lists from the explicit per-ring settings in the config and
persists ring configurations as JSON.

Saved file layout:
    {
        "ring_count": 5,
        "rings": [ {RingSpec fields...}, ... ]
    }
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from config import swarm as config
from .ring import RingSpec


logger = logging.getLogger(__name__)


def preset_for_ring(index: int) -> dict:
    """Return the explicit settings for a ring, cycling past the last preset."""
    return config.RING_PRESETS[index % len(config.RING_PRESETS)]


def build_ring_specs(
    ring_count: int,
    total_particles: Optional[int] = None,
    base_radius: Optional[float] = None,
    orbit_speed: Optional[float] = None,
    wobble_strength: Optional[float] = None,
) -> List[RingSpec]:
    """
    Create one RingSpec per ring from the config presets.

    Args:
        ring_count: Number of rings (>= 1)
        total_particles: Particles shared between rings (floor-divided)
        base_radius: Radius shared by every ring
        orbit_speed: Tangential rate for every ring
        wobble_strength: Global scale applied to each preset's wobble amplitude

    Returns:
        Ordered list of RingSpec
    """
    if ring_count < 1:
        raise ValueError(f"ring_count must be at least 1, got {ring_count}")

    total = config.SWARM["particle_count"] if total_particles is None else int(total_particles)
    if total < 0:
        raise ValueError(f"total_particles must be non-negative, got {total}")

    radius = config.SWARM["base_radius"] if base_radius is None else float(base_radius)
    speed = config.SWARM["orbit_speed"] if orbit_speed is None else float(orbit_speed)
    strength = config.SWARM["wobble_strength"] if wobble_strength is None else float(wobble_strength)
    per_ring = total // ring_count

    specs = []
    for i in range(ring_count):
        preset = preset_for_ring(i)
        specs.append(RingSpec(
            radius=radius,
            wobble_period=preset["wobble_period"],
            wobble_amplitude=preset["wobble_amplitude"] * strength,
            radius_variation=preset["radius_variation"],
            wave_amplitude=radius * config.SWARM["wave_amplitude_ratio"],
            orbit_speed=speed,
            orbit_modulation_amplitude=preset["orbit_modulation_amplitude"],
            orbit_modulation_frequency=preset["orbit_modulation_frequency"],
            scatter_factor=config.SWARM["scatter_factor"],
            particle_count=per_ring,
        ))
    return specs


def save_ring_specs(path: Union[str, Path], specs: Sequence[RingSpec]):
    """Write a ring configuration to disk."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "ring_count": len(specs),
        "rings": [spec.to_dict() for spec in specs],
    }
    with open(path, "w") as f:
        json.dump(payload, f, indent=2)
    logger.info(f"Saved {len(specs)} rings to {path}")


def load_ring_specs(path: Union[str, Path]) -> List[RingSpec]:
    """
    Read a ring configuration written by save_ring_specs.

    A file listing fewer rings than its ring_count is padded with presets;
    extra records beyond ring_count are dropped.
    """
    path = Path(path)
    logger.info(f"Loading ring configuration from {path}...")
    try:
        with open(path, "r") as f:
            payload = json.load(f)
    except FileNotFoundError:
        logger.error(f"Ring configuration not found at {path}.")
        raise
    except json.JSONDecodeError as e:
        logger.error(f"Error decoding JSON from {path}.")
        raise ValueError(f"Malformed ring configuration {path}: {e}") from e

    if not isinstance(payload, dict) or not isinstance(payload.get("rings"), list):
        raise ValueError(f"Ring configuration {path} has no 'rings' list")

    records = payload["rings"]
    ring_count = int(payload.get("ring_count", len(records)))
    if ring_count < 1:
        raise ValueError(f"Ring configuration {path} has ring_count {ring_count}")

    specs = [RingSpec.from_dict(record) for record in records[:ring_count]]
    if len(specs) < ring_count:
        per_ring = specs[-1].particle_count if specs else None
        padding = build_ring_specs(ring_count)[len(specs):]
        if per_ring is not None:
            padding = [RingSpec.from_dict({**s.to_dict(), "particle_count": per_ring}) for s in padding]
        specs.extend(padding)
    logger.info(f"Loaded {len(specs)} rings ({sum(s.particle_count for s in specs)} particles).")
    return specs
