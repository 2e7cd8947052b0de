import numpy as np
import pytest

from swarm import MorphController, PhysicsStepper, RingSpec, SwarmSystem
from swarm.presets import build_ring_specs, load_ring_specs


class StubLoader:
    """Delivers its points on the n-th poll."""

    def __init__(self, points, ready_after=1):
        self.points = points
        self.ready_after = ready_after
        self.polls = 0

    def poll(self):
        self.polls += 1
        if self.polls < self.ready_after:
            return None
        points, self.points = self.points, None
        return points


@pytest.fixture
def system(rng):
    specs = build_ring_specs(3, total_particles=300)
    physics = PhysicsStepper(rng=rng)
    return SwarmSystem(specs, physics=physics, morph=MorphController(rate=0.002), rng=rng,
                       clock=lambda: 0.0, time_step=0.005)


def test_offsets_and_totals(system):
    assert system.ring_count == 3
    assert system.total_particles == 300
    np.testing.assert_array_equal(system.offsets, [0, 100, 200])


def test_uneven_ring_sizes(rng):
    specs = [RingSpec(particle_count=n) for n in (5, 0, 12)]
    system = SwarmSystem(specs, rng=rng)
    np.testing.assert_array_equal(system.offsets, [0, 5, 5])
    assert system.total_particles == 17


def test_tick_advances_time_and_moves_particles(system):
    before = system.rings[0].positions.copy()
    system.tick()
    assert system.frame == 1
    assert system.time == pytest.approx(0.005)
    assert not np.allclose(system.rings[0].positions, before)


def test_morph_needs_targets(system):
    assert not system.morph_available
    assert not system.request_morph()
    assert system.morph.idle


def test_target_points_are_single_assignment(system):
    system.set_target_points(np.zeros((300, 3)))
    assert not system.target_points.flags.writeable
    with pytest.raises(RuntimeError):
        system.set_target_points(np.ones((300, 3)))


def test_empty_targets_keep_morph_unavailable(system):
    system.set_target_points(np.zeros((0, 3)))
    assert not system.morph_available
    assert not system.request_morph()


def test_full_morph_then_frozen(system, rng):
    targets = rng.uniform(-5.0, 5.0, (300, 3))
    system.set_target_points(targets)
    assert system.request_morph()

    for _ in range(500):
        system.tick()
    assert system.morph.frozen

    positions = np.concatenate([ring.positions for ring in system.rings])
    np.testing.assert_allclose(positions, targets, atol=1e-12)

    system.tick()
    np.testing.assert_array_equal(np.concatenate([ring.positions for ring in system.rings]), positions)


def test_overflow_particles_keep_orbit_positions(system, rng):
    system.set_target_points(rng.uniform(-5.0, 5.0, (250, 3)))
    system.request_morph()
    last_ring = system.rings[2]
    untouched = last_ring.positions[50:].copy()

    for _ in range(500):
        system.tick()

    np.testing.assert_array_equal(last_ring.positions[50:], untouched)


def test_rebuild_resets_morph(system, rng):
    system.set_target_points(rng.uniform(-1.0, 1.0, (300, 3)))
    system.request_morph()
    for _ in range(10):
        system.tick()

    system.rebuild(system.specs)
    assert system.morph.idle
    assert system.morph.progress == 0.0
    assert system.total_particles == 300
    np.testing.assert_array_equal(system.offsets, [0, 100, 200])

    # Rebuilding twice gives the same bookkeeping
    system.rebuild(system.specs)
    assert system.morph.idle
    np.testing.assert_array_equal(system.offsets, [0, 100, 200])


def test_set_ring_count_keeps_particle_budget(system):
    system.set_ring_count(4)
    assert system.ring_count == 4
    assert system.total_particles == 300
    np.testing.assert_array_equal(system.offsets, [0, 75, 150, 225])


def test_update_ring(system):
    system.update_ring(1, radius=3.0)
    assert system.specs[1].radius == 3.0
    with pytest.raises(IndexError):
        system.update_ring(5, radius=1.0)


def test_loader_is_polled_until_ready(system):
    loader = StubLoader(np.zeros((300, 3)), ready_after=3)
    system.attach_loader(loader)

    system.tick()
    system.tick()
    assert not system.morph_available
    system.tick()
    assert system.morph_available

    system.tick()
    assert loader.polls == 3


def test_render_buffers_and_stats(system):
    buffers = system.render_buffers()
    assert len(buffers) == 3
    assert all(pos.shape == (100, 3) and col.shape == (100, 3) for pos, col in buffers)

    stats = system.stats()
    assert stats["rings"] == 3
    assert stats["particles"] == 300
    assert stats["state"] == "idle"
    assert stats["targets"] == 0


def test_pointer_uses_injected_clock(rng):
    now = [100.0]
    specs = [RingSpec(particle_count=1, orbit_speed=0.0)]
    system = SwarmSystem(specs, physics=PhysicsStepper(pointer_timeout=5.0, rng=rng), rng=rng,
                         clock=lambda: now[0])
    ring = system.rings[0]
    ring.positions[0] = ring.initial_positions[0] = (8.0, 0.0, 0.0)
    ring.velocities[:] = 0.0

    system.pointer.move(7.0, 0.0, now=100.0)
    now[0] = 110.0
    system.tick()
    np.testing.assert_allclose(ring.positions[0], (8.0, 0.0, 0.0), atol=1e-12)

    now[0] = 111.0
    system.pointer.move(7.0, 0.0, now=110.5)
    system.tick()
    assert ring.positions[0, 0] > 8.0


class FailedLoader:
    """Reports a failed load until retried, then delivers its points."""

    def __init__(self, points):
        self.points = points
        self.failed = True
        self.retries = 0

    def retry(self):
        self.retries += 1
        self.failed = False

    def poll(self):
        if self.failed:
            return None
        points, self.points = self.points, None
        return points


def test_retry_target_load(system):
    assert not system.retry_target_load()

    loader = FailedLoader(np.zeros((300, 3)))
    system.attach_loader(loader)
    system.tick()
    assert not system.morph_available

    assert system.retry_target_load()
    assert loader.retries == 1
    system.tick()
    assert system.morph_available

    # Nothing left to retry once the target is in
    loader.failed = True
    assert not system.retry_target_load()
    assert loader.retries == 1


def test_save_specs_round_trip(system, tmp_path):
    system.update_ring(1, orbit_speed=0.001)
    path = tmp_path / "saved" / "rings.json"
    system.save_specs(path)

    assert load_ring_specs(path) == list(system.specs)
