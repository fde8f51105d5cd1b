#!/usr/bin/env python3
"""
Tests for the resolver, gradients and heatmap configuration.
"""

import numpy as np
import pytest

from particle_heatmap.colormaps import (
    GRADIENTS, apply_gradient, get_gradient, normalize, resolve, thermal,
    to_image, to_uint8,
)
from particle_heatmap.config import ConfigError, HeatmapConfig
from particle_heatmap.presets import PRESETS, PRESET_ORDER, list_presets


def test_zero_intensity_resolves_to_cold():
    frame = resolve(np.zeros((3, 5)), ceiling=5.0, gradient="thermal", alpha=0.75)
    assert frame.shape == (3, 5, 4)
    assert frame.dtype == np.float32
    assert np.all(frame[..., 0] == 0.0)
    assert np.all(frame[..., 1] == 0.0)
    assert np.all(frame[..., 2] == 1.0)
    assert np.all(frame[..., 3] == 0.75)


def test_alpha_is_uniform():
    values = np.linspace(0.0, 20.0, 40).reshape(5, 8)
    frame = resolve(values, ceiling=5.0, alpha=0.4)
    assert np.all(frame[..., 3] == np.float32(0.4))


def test_normalize_curve_and_saturation():
    n = normalize([0.0, 5.0, 10.0, 100.0], ceiling=5.0)
    assert n[0] == 0.0
    assert n[1] == 1.0
    assert n[2] == 1.0
    assert n[3] == 1.0
    # Sub-linear: a tenth of the ceiling is brighter than 0.1
    assert normalize([0.5], 5.0)[0] == pytest.approx(0.1 ** 0.6)
    assert normalize([0.5], 5.0)[0] > 0.1


def test_two_segment_interpolation():
    stops = thermal()
    rgb = apply_gradient(np.array([0.0, 0.25, 0.5, 0.75, 1.0]), stops)
    assert np.allclose(rgb[0], (0.0, 0.0, 1.0))
    assert np.allclose(rgb[1], (0.0, 0.5, 0.5))
    assert np.allclose(rgb[2], (0.0, 1.0, 0.0))
    assert np.allclose(rgb[3], (0.5, 0.5, 0.0))
    assert np.allclose(rgb[4], (1.0, 0.0, 0.0))


def test_color_monotonic_then_saturates():
    ceiling = 5.0
    values = np.linspace(0.0, 2.0 * ceiling, 201)
    frame = resolve(values.reshape(1, -1), ceiling)[0]

    # Thermal: red only grows, blue only shrinks as intensity rises
    assert np.all(np.diff(frame[:, 0]) >= 0)
    assert np.all(np.diff(frame[:, 2]) <= 0)

    at_or_above = frame[values >= ceiling]
    assert np.all(at_or_above == at_or_above[0])
    assert np.allclose(at_or_above[0, :3], (1.0, 0.0, 0.0))

    mid_value = ceiling * 0.5 ** (1.0 / 0.6)
    mid = resolve(np.array([[mid_value]]), ceiling)[0, 0]
    assert np.allclose(mid[:3], (0.0, 1.0, 0.0), atol=1e-6)


def test_resolve_writes_into_buffer():
    out = np.zeros((2, 2, 4), dtype=np.float32)
    frame = resolve(np.full((2, 2), 5.0), 5.0, out=out)
    assert frame is out
    assert np.allclose(out[0, 0], (1.0, 0.0, 0.0, 0.75))


def test_gradient_registry():
    for name in GRADIENTS:
        stops = get_gradient(name)
        assert [s[0] for s in stops] == [0.0, 0.5, 1.0]
    with pytest.raises(KeyError):
        get_gradient("nope")


def test_uint8_and_image_conversion():
    frame = resolve(np.array([[0.0, 5.0, 1.0]]), 5.0)
    rgba = to_uint8(frame)
    assert rgba.dtype == np.uint8
    assert tuple(rgba[0, 0]) == (0, 0, 255, 191)
    assert tuple(rgba[0, 1]) == (255, 0, 0, 191)

    img = to_image(resolve(np.zeros((3, 7)), 5.0))
    assert img.size == (7, 3)
    assert img.mode == "RGBA"


def test_default_preset_matches_floor_plan():
    config = HeatmapConfig.from_preset("default")
    assert (config.width, config.height) == (256, 256)
    assert config.world_min == (-5.0, -7.0)
    assert config.world_max == (14.0, 9.0)
    assert config.intensity == 10.0
    assert config.radius == 100
    assert config.sigma == 2.0
    assert config.decay == 0.99
    assert config.ceiling == 5.0
    assert config.alpha == 0.75


def test_all_presets_are_valid():
    for key in PRESET_ORDER:
        HeatmapConfig.from_preset(key)
    assert [k for k, _, _ in list_presets()] == PRESET_ORDER
    assert set(PRESET_ORDER) == set(PRESETS)


def test_preset_overrides():
    config = HeatmapConfig.from_preset("compact", ceiling=9.0, gradient="mono")
    assert config.ceiling == 9.0
    assert config.gradient == "mono"
    assert config.as_dict()["ceiling"] == 9.0


@pytest.mark.parametrize("overrides", [
    {"ceiling": 0.0},
    {"ceiling": -1.0},
    {"sigma": 0.0},
    {"radius": -1},
    {"radius": 2.5},
    {"decay": 0.0},
    {"decay": 1.0},
    {"width": 0},
    {"intensity": -1.0},
    {"world_min": (0.0, 0.0), "world_max": (0.0, 4.0)},
    {"gradient": "nope"},
    {"alpha": 1.5},
    {"max_samples": -1},
])
def test_misconfiguration_rejected(overrides):
    with pytest.raises(ConfigError):
        HeatmapConfig(**overrides)


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        HeatmapConfig.from_preset("does_not_exist")


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-v"]))
