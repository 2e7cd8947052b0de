"""Configuration for the ring swarm morph simulation."""

WINDOW = {
    "width": 1280,
    "height": 720,
    "title": "Ring Swarm",
    "fps": 60
}

CAMERA = {
    "fov": 75.0,
    "near_clip": 0.1,
    "far_clip": 500.0,
    "initial_radius": 20.0,
    "initial_azimuth": -90.0,   # Screen up is +y at zero tilt
    "initial_tilt": 0.0,        # Degrees from the ring normal; 0 = top-down
    "min_radius": 2.0,
    "max_radius": 200.0,
    "min_tilt": 0.0,
    "max_tilt": 85.0,
    "keyboard_rotate_speed": 60.0,
    "keyboard_zoom_speed": 10.0,
    "mouse_sensitivity": 0.3
}

SWARM = {
    "particle_count": 3000,     # Split evenly between rings
    "ring_count": 5,
    "base_radius": 8.0,         # Shared by every ring
    "orbit_speed": 0.0004,
    "wobble_strength": 0.0,     # 0.008 gives the classic wobbly look; 0 keeps rings crisp for morphing
    "wave_amplitude_ratio": 0.15,
    "scatter_factor": 0.05,
    "time_step": 0.005,         # Simulated seconds per tick
    "friction": 0.98,
    "return_speed": 1.0,        # Spring gain is 0.03 * return_speed
    "seed": None,               # None = fresh entropy every run
    "rings_file": "rings.json", # Written by F5 in the viewer

    # Rendering
    "point_size": 2.0,
    "point_alpha": 0.9,
}

# Explicit per-ring settings; rings past the fifth cycle through the list.
RING_PRESETS = [
    {"wobble_period": 0.02, "radius_variation": 0.031, "wobble_amplitude": 1.2,
     "orbit_modulation_amplitude": 0.20, "orbit_modulation_frequency": 0.7},
    {"wobble_period": 0.03, "radius_variation": 0.043, "wobble_amplitude": 0.8,
     "orbit_modulation_amplitude": 0.15, "orbit_modulation_frequency": 1.1},
    {"wobble_period": 0.05, "radius_variation": 0.059, "wobble_amplitude": 1.5,
     "orbit_modulation_amplitude": 0.25, "orbit_modulation_frequency": 1.3},
    {"wobble_period": 0.07, "radius_variation": 0.067, "wobble_amplitude": 0.7,
     "orbit_modulation_amplitude": 0.10, "orbit_modulation_frequency": 1.7},
    {"wobble_period": 0.11, "radius_variation": 0.071, "wobble_amplitude": 1.0,
     "orbit_modulation_amplitude": 0.18, "orbit_modulation_frequency": 1.9},
]

POINTER = {
    "enabled": True,
    "force": 0.05,
    "radius": 2.0,
    "repel": True,              # False pulls particles toward the pointer
    "timeout": 5.0,             # Seconds since the last move before the pointer goes idle
}

MORPH = {
    "rate": 0.002,              # Progress per tick; 500 ticks to complete
    "area_epsilon": 1e-10,      # Triangles smaller than this are ignored
    "mesh_path": None,          # Any trimesh-readable file; falls back to the primitive below
    "primitive": "torus",       # "torus" or "icosphere"
    "primitive_scale": 6.0,
    "pose": {
        "rotation": (0.0, 0.0, 0.0),    # XYZ Euler angles, degrees
        "translation": (0.0, 0.0, 0.0),
    },
}

# Cyclic gradient sampled by placement angle, (position, (r, g, b)).
GRADIENT_STOPS = [
    (0.0, (1.0, 0.251, 0.251)),     # Red
    (0.2, (1.0, 0.188, 0.502)),     # Red-violet
    (0.4, (0.753, 0.125, 1.0)),     # Purple
    (0.6, (0.251, 0.251, 1.0)),     # Blue
    (0.8, (0.125, 0.627, 0.753)),   # Teal
    (1.0, (1.0, 0.251, 0.251)),     # Red (wraps)
]

COLORS = {
    "background": (0.925, 0.941, 0.945, 1.0),
    "text": (40, 40, 48),
    "pointer": (1.0, 0.0, 0.0, 0.5)
}

LOGGING = {
    "level": "INFO",
    "format": "%(asctime)s - %(levelname)s - [%(name)s] %(message)s",
    "log_file": "logs/swarm.log",
    "throttle_frames": 300,
}
