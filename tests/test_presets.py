import json

import pytest

from config import swarm as config
from swarm.presets import build_ring_specs, load_ring_specs, preset_for_ring, save_ring_specs


def test_particles_split_evenly():
    specs = build_ring_specs(3, total_particles=1000)
    assert len(specs) == 3
    assert [s.particle_count for s in specs] == [333, 333, 333]


def test_shared_settings():
    specs = build_ring_specs(4, total_particles=400, base_radius=5.0, orbit_speed=0.001)
    assert {s.radius for s in specs} == {5.0}
    assert {s.orbit_speed for s in specs} == {0.001}
    assert specs[0].wave_amplitude == pytest.approx(5.0 * config.SWARM["wave_amplitude_ratio"])


def test_presets_cycle():
    count = len(config.RING_PRESETS)
    assert preset_for_ring(count) == preset_for_ring(0)
    specs = build_ring_specs(count + 1, total_particles=0)
    assert specs[count].wobble_period == specs[0].wobble_period


def test_wobble_strength_scales_amplitude():
    specs = build_ring_specs(2, total_particles=10, wobble_strength=0.5)
    assert specs[1].wobble_amplitude == pytest.approx(config.RING_PRESETS[1]["wobble_amplitude"] * 0.5)
    muted = build_ring_specs(2, total_particles=10, wobble_strength=0.0)
    assert all(s.wobble_amplitude == 0.0 for s in muted)


def test_ring_count_must_be_positive():
    with pytest.raises(ValueError):
        build_ring_specs(0)


def test_save_and_load(tmp_path):
    specs = build_ring_specs(3, total_particles=90, base_radius=6.0)
    path = tmp_path / "nested" / "rings.json"
    save_ring_specs(path, specs)

    payload = json.loads(path.read_text())
    assert payload["ring_count"] == 3
    assert load_ring_specs(path) == specs


def test_short_file_is_padded_from_presets(tmp_path):
    specs = build_ring_specs(2, total_particles=100)
    path = tmp_path / "rings.json"
    path.write_text(json.dumps({"ring_count": 4, "rings": [s.to_dict() for s in specs]}))

    loaded = load_ring_specs(path)
    assert len(loaded) == 4
    assert loaded[:2] == specs
    assert loaded[3].particle_count == 50


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_ring_specs(tmp_path / "absent.json")


def test_malformed_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(ValueError):
        load_ring_specs(path)


def test_invalid_ring_values(tmp_path):
    path = tmp_path / "rings.json"
    path.write_text(json.dumps({"ring_count": 1, "rings": [{"radius": -3.0}]}))
    with pytest.raises(ValueError):
        load_ring_specs(path)
