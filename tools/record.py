"""
Ring Swarm Headless Recorder
============================

Runs the swarm without a window and saves every frame to disk.

Usage:
    python -m tools.record --frames 600
    python -m tools.record --frames 900 --morph-at 200 --primitive icosphere
    python -m tools.record --frames 900 --morph-at 100 --mesh bunny.obj --seed 7
    python -m tools.record --list

Output:
    recordings/<session_name>/
        metadata.json     - Recording settings
        frame_0000.npz    - positions, colors (float32, all rings concatenated)
        ...
"""

import sys
import json
import time
import shutil
import argparse
import logging
import numpy as np
from datetime import datetime, timedelta
from pathlib import Path

# Get project root (parent of tools/)
PROJECT_ROOT = Path(__file__).parent.parent

from config import swarm as swarm_config
from utils import setup_logging
from mesh import load_target_points, mesh_source_from_config, pose_from_config
from swarm import SwarmSystem
from swarm.physics import warmup_kernels
from swarm.presets import build_ring_specs


logger = logging.getLogger(__name__)


def get_recording_dir(session_name: str, base: Path = None) -> Path:
    """Get the directory for a recording session."""
    base = (PROJECT_ROOT / "recordings") if base is None else Path(base)
    rec_dir = base / session_name
    rec_dir.mkdir(parents=True, exist_ok=True)
    return rec_dir


def save_metadata(rec_dir: Path, config: dict, start_time: float):
    """Save recording metadata."""
    metadata = {
        **config,
        "start_time": start_time,
        "start_datetime": datetime.fromtimestamp(start_time).isoformat(),
    }
    with open(rec_dir / "metadata.json", "w") as f:
        json.dump(metadata, f, indent=2)


def load_metadata(rec_dir: Path) -> dict:
    """Load recording metadata."""
    with open(rec_dir / "metadata.json", "r") as f:
        return json.load(f)


def save_frame(rec_dir: Path, frame_idx: int, positions: np.ndarray, colors: np.ndarray):
    """Save a single frame to disk."""
    np.savez(
        rec_dir / f"frame_{frame_idx:04d}.npz",
        positions=positions.astype(np.float32),
        colors=colors.astype(np.float32),
    )


def load_frame(rec_dir: Path, frame_idx: int) -> tuple:
    """Load a single frame as a (positions, colors) tuple."""
    with np.load(rec_dir / f"frame_{frame_idx:04d}.npz") as data:
        return data["positions"].copy(), data["colors"].copy()


def frame_arrays(system: SwarmSystem) -> tuple:
    """Concatenate every ring's buffers into one (positions, colors) pair."""
    buffers = system.render_buffers()
    if not buffers:
        return np.zeros((0, 3), dtype=np.float32), np.zeros((0, 3), dtype=np.float32)
    positions = np.concatenate([p for p, _ in buffers])
    colors = np.concatenate([c for _, c in buffers])
    return positions, colors


def format_eta(seconds: float) -> str:
    """Format ETA - stays in seconds until 90s, then switches to hh:mm:ss."""
    if seconds < 0:
        return "calculating..."
    if seconds < 90:
        return f"{seconds:.0f}s"
    return str(timedelta(seconds=int(seconds)))


def print_progress(frame: int, total: int, elapsed: float, state: str):
    """Single-line progress bar, redrawn in place."""
    pct = (frame + 1) / total * 100
    term_width = shutil.get_terminal_size((80, 20)).columns
    bar_width = max(10, term_width - 60)
    filled = int(bar_width * (frame + 1) / total)
    bar = "█" * filled + "░" * (bar_width - filled)

    eta = elapsed / (frame + 1) * (total - frame - 1)
    sys.stdout.write(
        f"\r\033[K[{bar}] {pct:5.1f}% | Frame {frame + 1}/{total} | "
        f"{state:<8s} | ETA: {format_eta(eta)}"
    )
    sys.stdout.flush()


def record(config: dict, out_dir: Path = None, quiet: bool = False) -> Path:
    """
    Run the simulation headless for config["frames"] ticks.

    Args:
        config: Recording settings (see build_config)
        out_dir: Base directory for sessions; defaults to <project>/recordings
        quiet: Skip the progress bar

    Returns:
        The session directory
    """
    rec_dir = get_recording_dir(config["session_name"], out_dir)
    # Ring layout and target sampling draw from independent streams
    ring_seed, target_seed = np.random.SeedSequence(config["seed"]).spawn(2)
    rng = np.random.default_rng(ring_seed)

    specs = build_ring_specs(config["rings"], total_particles=config["particles"])
    system = SwarmSystem(specs, rng=rng, clock=lambda: 0.0)

    morph_at = config.get("morph_at")
    if morph_at is not None:
        # Sampled up front so the morph can trigger on an exact frame
        source = mesh_source_from_config(config.get("mesh"), config.get("primitive"))
        target_rng = np.random.default_rng(target_seed)
        points = load_target_points(source, system.total_particles, target_rng, pose_from_config())
        if len(points) == 0:
            logger.warning("Target mesh produced no points; recording without a morph")
        else:
            system.set_target_points(points)

    warmup_kernels()
    start_time = time.time()
    save_metadata(rec_dir, config, start_time)
    logger.info(f"Recording {config['frames']} frames to {rec_dir}")

    for frame in range(config["frames"]):
        if morph_at is not None and frame == morph_at:
            system.request_morph()
        system.tick()

        positions, colors = frame_arrays(system)
        save_frame(rec_dir, frame, positions, colors)

        if not quiet:
            print_progress(frame, config["frames"], time.time() - start_time, system.morph.state.value)

    if not quiet and config["frames"]:
        sys.stdout.write("\n")
    logger.info(f"Done in {time.time() - start_time:.1f}s ({system.morph.state.value})")
    return rec_dir


def list_recordings(base: Path = None):
    """List all recordings."""
    recordings_dir = (PROJECT_ROOT / "recordings") if base is None else Path(base)
    if not recordings_dir.exists():
        print("[Record] No recordings directory found")
        return

    sessions = sorted(d for d in recordings_dir.iterdir() if (d / "metadata.json").exists())
    if not sessions:
        print("[Record] No recordings found")
        return

    print("[Record] Recordings:")
    for rec_dir in sessions:
        meta = load_metadata(rec_dir)
        frames = len(list(rec_dir.glob("frame_*.npz")))
        points = len(load_frame(rec_dir, frames - 1)[0]) if frames else 0
        print(f"  {rec_dir.name}: {frames}/{meta['frames']} frames, "
              f"{meta['rings']} rings, {points} particles")


def build_config(args) -> dict:
    """Merge command-line overrides with the config defaults."""
    session = args.session or datetime.now().strftime("swarm_%Y%m%d_%H%M%S")
    return {
        "session_name": session,
        "frames": args.frames,
        "morph_at": args.morph_at,
        "mesh": args.mesh,
        "primitive": args.primitive,
        "rings": swarm_config.SWARM["ring_count"] if args.rings is None else args.rings,
        "particles": swarm_config.SWARM["particle_count"] if args.particles is None else args.particles,
        "seed": swarm_config.SWARM["seed"] if args.seed is None else args.seed,
        "time_step": swarm_config.SWARM["time_step"],
    }


def main(argv=None):
    parser = argparse.ArgumentParser(description="Ring swarm headless recorder")
    parser.add_argument("--frames", "-f", type=int, default=600, help="Number of frames to record")
    parser.add_argument("--morph-at", type=int, metavar="FRAME", help="Start the morph at this frame")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--mesh", type=str, help="Mesh file morph target (OBJ, STL, PLY, GLB, ...)")
    source.add_argument("--primitive", type=str, help="Built-in morph target (torus, icosphere)")
    parser.add_argument("--rings", "-r", type=int, help="Number of rings")
    parser.add_argument("--particles", "-n", type=int, help="Total particle count")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--session", type=str, help="Session name")
    parser.add_argument("--list", action="store_true", help="List all recordings")
    parser.add_argument("--log-level", type=str, help="DEBUG, INFO, WARNING, ...")
    args = parser.parse_args(argv)

    if args.frames < 1:
        parser.error("--frames must be at least 1")
    if args.rings is not None and args.rings < 1:
        parser.error("--rings must be at least 1")
    if args.particles is not None and args.particles < 0:
        parser.error("--particles must not be negative")

    setup_logging(args.log_level)

    if args.list:
        list_recordings()
        return

    record(build_config(args))


if __name__ == "__main__":
    main()
