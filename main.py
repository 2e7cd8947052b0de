"""
Ring Swarm
==========

Concentric particle rings that orbit, ripple, react to the pointer and
morph onto the surface of a 3D mesh.

Usage:
    python main.py                            # Defaults from config/swarm.py
    python main.py --rings 3 --particles 6000
    python main.py --mesh bunny.obj           # Morph target from a mesh file
    python main.py --primitive icosphere --attract
    python main.py --rings-file rings.json    # Ring settings saved earlier

Controls:
    - Pointer: push particles away (T toggles pull)
    - M: Morph onto the target mesh
    - R: Rebuild rings
    - Up/Down: Change ring count
    - W/S/A/D: Rotate camera
    - Q/E: Zoom in/out
    - Right-drag: Rotate camera
    - Mouse wheel: Zoom
    - H: Toggle HUD
    - F5: Save ring settings (to --rings-file, or rings.json)
    - L: Retry a failed morph target load
    - ESC: Quit
"""

import argparse
import logging
import numpy as np

from config import swarm as config
from core import Application
from utils import setup_logging
from mesh import TargetPointLoader, mesh_source_from_config, pose_from_config
from swarm import PhysicsStepper, SwarmSystem
from swarm.presets import build_ring_specs, load_ring_specs


logger = logging.getLogger("main")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Ring swarm morph simulation")
    parser.add_argument("--rings", "-r", type=int, help="Number of rings")
    parser.add_argument("--particles", "-n", type=int, help="Total particle count, split between rings")
    parser.add_argument("--seed", type=int, help="Random seed for a reproducible run")
    parser.add_argument("--mesh", type=str, help="Mesh file (OBJ, STL, PLY, GLB, ...) used as the morph target")
    parser.add_argument("--primitive", type=str, help="Built-in morph target (torus, icosphere)")
    parser.add_argument("--rings-file", type=str, help="JSON ring settings to load; F5 saves back to it")
    parser.add_argument("--attract", action="store_true", help="Pointer pulls particles instead of pushing")
    parser.add_argument("--log-level", type=str, help="DEBUG, INFO, WARNING, ...")
    args = parser.parse_args(argv)
    if args.rings is not None and args.rings < 1:
        parser.error("--rings must be at least 1")
    if args.particles is not None and args.particles < 0:
        parser.error("--particles must not be negative")
    return args


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level)

    seed = config.SWARM["seed"] if args.seed is None else args.seed
    ring_seed, loader_seed = np.random.SeedSequence(seed).spawn(2)
    rng = np.random.default_rng(ring_seed)

    if args.rings_file:
        specs = load_ring_specs(args.rings_file)
    else:
        specs = build_ring_specs(
            config.SWARM["ring_count"] if args.rings is None else args.rings,
            total_particles=args.particles,
        )

    physics = PhysicsStepper(repel=False if args.attract else None, rng=rng)
    system = SwarmSystem(specs, physics=physics, rng=rng)

    source = mesh_source_from_config(args.mesh, args.primitive)
    # Generators are not thread-safe; the loader thread draws from its own
    loader = TargetPointLoader(source, system.total_particles,
                               rng=np.random.default_rng(loader_seed), pose=pose_from_config())

    logger.info(f"Starting with {system.ring_count} rings, {system.total_particles} particles (seed {seed})")
    app = Application(system, loader, rings_path=args.rings_file or config.SWARM["rings_file"])
    app.run()


if __name__ == "__main__":
    main()
