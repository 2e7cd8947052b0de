import numpy as np
import pytest

from swarm import MorphController, MorphState, ParticleSwarm, RingSpec


def test_rate_must_be_positive():
    with pytest.raises(ValueError):
        MorphController(rate=0.0)


def test_completes_after_exactly_500_ticks():
    morph = MorphController(rate=0.002)
    assert morph.start()

    for _ in range(499):
        morph.advance()
        assert not morph.finish()
    assert morph.morphing
    assert morph.progress < 1.0

    morph.advance()
    assert morph.progress == 1.0
    assert morph.finish()
    assert morph.frozen


def test_frozen_is_terminal():
    morph = MorphController(rate=0.5)
    morph.start()
    morph.advance()
    morph.advance()
    morph.finish()
    assert morph.state is MorphState.FROZEN

    assert not morph.start()
    assert morph.advance() == 1.0
    assert morph.frozen


def test_start_ignored_while_morphing():
    morph = MorphController(rate=0.1)
    morph.start()
    morph.advance()
    assert not morph.start()
    assert morph.progress == pytest.approx(0.1)


def test_reset_returns_to_idle():
    morph = MorphController(rate=0.5)
    morph.start()
    morph.advance()
    morph.reset()
    assert morph.idle
    assert morph.progress == 0.0


def test_apply_blends_toward_targets(rng):
    swarm = ParticleSwarm(RingSpec(particle_count=10), rng)
    start = swarm.positions.copy()
    targets = rng.uniform(-1.0, 1.0, (10, 3))

    morph = MorphController(rate=0.25)
    morph.start()
    morph.advance()
    morph.apply(swarm, targets, 0)

    np.testing.assert_allclose(swarm.positions, 0.75 * start + 0.25 * targets)


def test_full_morph_lands_on_targets(rng):
    swarm = ParticleSwarm(RingSpec(particle_count=30), rng)
    targets = rng.uniform(-3.0, 3.0, (30, 3))

    morph = MorphController(rate=0.002)
    morph.start()
    while not morph.frozen:
        morph.advance()
        morph.apply(swarm, targets, 0)
        morph.finish()

    np.testing.assert_allclose(swarm.positions, targets, atol=1e-12)


def test_start_index_selects_the_slice(rng):
    swarm = ParticleSwarm(RingSpec(particle_count=4), rng)
    targets = np.arange(30, dtype=np.float64).reshape(10, 3)

    morph = MorphController(rate=1.0)
    morph.start()
    morph.advance()
    morph.apply(swarm, targets, 5)

    np.testing.assert_allclose(swarm.positions, targets[5:9])


def test_overflow_particles_are_untouched(rng):
    swarm = ParticleSwarm(RingSpec(particle_count=10), rng)
    start = swarm.positions.copy()
    targets = np.zeros((7, 3))

    morph = MorphController(rate=1.0)
    morph.start()
    morph.advance()
    morph.apply(swarm, targets, 3)

    np.testing.assert_allclose(swarm.positions[:4], 0.0)
    np.testing.assert_array_equal(swarm.positions[4:], start[4:])


def test_apply_outside_morphing_does_nothing(rng):
    swarm = ParticleSwarm(RingSpec(particle_count=5), rng)
    start = swarm.positions.copy()

    MorphController().apply(swarm, np.zeros((5, 3)), 0)
    np.testing.assert_array_equal(swarm.positions, start)
