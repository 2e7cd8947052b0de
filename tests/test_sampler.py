import logging

import numpy as np
import pytest

from swarm.sampler import Pose, SurfaceSampler, as_triangles, sample_surface, triangle_areas


def test_triangle_areas(unit_square):
    np.testing.assert_allclose(triangle_areas(unit_square), [0.5, 0.5])


def test_as_triangles_rejects_ragged_data():
    with pytest.raises(ValueError):
        as_triangles(np.zeros(10))


def test_samples_lie_on_the_surface(unit_square, rng):
    points = sample_surface(unit_square, 2000, rng)
    assert points.shape == (2000, 3)
    assert np.all(np.isfinite(points))
    assert np.all(points[:, :2] >= -1e-12)
    assert np.all(points[:, :2] <= 1.0 + 1e-12)
    np.testing.assert_array_equal(points[:, 2], 0.0)


def test_barycentric_weights_are_valid(small_sphere, rng):
    sampler = SurfaceSampler(small_sphere)
    faces, weights = sampler.draw(5000, rng)

    assert faces.shape == (5000,)
    assert weights.shape == (5000, 3)
    assert np.all(weights >= 0.0)
    np.testing.assert_allclose(weights.sum(axis=1), 1.0, atol=1e-12)
    assert np.all((faces >= 0) & (faces < len(small_sphere)))


def test_face_choice_is_area_proportional(rng):
    # One triangle with three times the area of the other
    small = [[0, 0, 0], [1, 0, 0], [0, 1, 0]]
    large = [[0, 0, 5], [3, 0, 5], [0, 1, 5]]
    sampler = SurfaceSampler(np.array([small, large], dtype=np.float64))

    n = 40000
    faces, _ = sampler.draw(n, rng)
    share = np.mean(faces == 1)
    assert abs(share - 0.75) < 5.0 / np.sqrt(n)


def test_choose_faces_boundaries(unit_square):
    sampler = SurfaceSampler(unit_square)
    np.testing.assert_array_equal(sampler.choose_faces(np.array([0.0, 0.5, 0.50001, 1.0, 2.0])), [0, 0, 1, 1, 1])


def test_degenerate_triangles_are_skipped(rng):
    tris = np.array([
        [[0, 0, 0], [1, 0, 0], [2, 0, 0]],        # collinear
        [[0, 0, 0], [1, 0, 0], [0, 1, 0]],
        [[5, 5, 5], [5, 5, 5], [5, 5, 5]],        # a point
    ], dtype=np.float64)
    sampler = SurfaceSampler(tris)
    assert sampler.face_count == 1

    faces, _ = sampler.draw(500, rng)
    assert np.all(faces == 1)


def test_degenerate_mesh_returns_empty(rng, caplog):
    tris = np.zeros((4, 3, 3))
    sampler = SurfaceSampler(tris)
    assert not sampler.is_valid

    with caplog.at_level(logging.WARNING):
        points = sampler.sample(100, rng)
    assert points.shape == (0, 3)
    assert "No sampleable triangles" in caplog.text


def test_empty_mesh_returns_empty(rng):
    points = sample_surface(np.zeros((0, 3, 3)), 50, rng)
    assert points.shape == (0, 3)


def test_zero_count(unit_square, rng):
    assert sample_surface(unit_square, 0, rng).shape == (0, 3)


def test_seeded_sampling_is_reproducible(small_sphere):
    a = sample_surface(small_sphere, 300, np.random.default_rng(7))
    b = sample_surface(small_sphere, 300, np.random.default_rng(7))
    np.testing.assert_array_equal(a, b)


def test_pose_is_applied_after_sampling(unit_square):
    pose = Pose.from_degrees((0.0, 0.0, 90.0), (10.0, 0.0, 0.0))
    plain = sample_surface(unit_square, 200, np.random.default_rng(3))
    posed = sample_surface(unit_square, 200, np.random.default_rng(3), pose=pose)

    # 90 degrees about z maps (x, y) to (-y, x), then translates
    expected = np.column_stack((10.0 - plain[:, 1], plain[:, 0], plain[:, 2]))
    np.testing.assert_allclose(posed, expected, atol=1e-12)


def test_pose_matrix_is_a_rotation():
    m = Pose.from_degrees((30.0, -45.0, 120.0)).matrix()
    np.testing.assert_allclose(m @ m.T, np.eye(3), atol=1e-12)
    assert np.linalg.det(m) == pytest.approx(1.0)
