import numpy as np
import pytest

from mesh.primitives import icosphere_triangles
from swarm import RingSpec


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def unit_square():
    """Two right triangles covering [0, 1] x [0, 1] at z = 0."""
    return np.array([
        [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0]],
        [[0.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 1.0, 0.0]],
    ])


@pytest.fixture
def small_sphere():
    return icosphere_triangles(radius=2.0, subdivisions=1)


@pytest.fixture
def still_spec():
    """A ring with every time-dependent term switched off."""
    return RingSpec(
        radius=8.0,
        wobble_amplitude=0.0,
        orbit_speed=0.0,
        orbit_modulation_amplitude=0.0,
        particle_count=200,
    )
