import itertools
import math

import numpy as np
import pytest

from voxelworld.colormath import (
    djb2_hash,
    hsl_to_rgb,
    ivec3_hash,
    make_inf_reversed_z_proj_rh,
    map_range,
    noise,
    rgb_to_hsl,
)

COLORS = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (12, 200, 99), (250, 250, 10), (128, 64, 32)]


@pytest.mark.parametrize("rgb", COLORS)
def test_rgb_hsl_round_trip(rgb):
    back = hsl_to_rgb(rgb_to_hsl(rgb))
    assert back == pytest.approx(rgb, abs=1e-6)


@pytest.mark.parametrize("rgb", COLORS)
def test_hsl_components_in_unit_range(rgb):
    assert all(0.0 <= c <= 1.0 for c in rgb_to_hsl(rgb))


def test_pure_red():
    assert rgb_to_hsl((255, 0, 0)) == pytest.approx((0.0, 1.0, 0.5))


def test_grey_is_achromatic():
    h, s, l = rgb_to_hsl((100, 100, 100))
    assert (h, s) == (0.0, 0.0)
    assert hsl_to_rgb((0.3, 0.0, l)) == pytest.approx((100, 100, 100))


def test_projection_layout():
    m = make_inf_reversed_z_proj_rh(math.pi / 2, 2.0, 0.1)
    f = 1.0 / math.tan(math.pi / 4)
    assert m[0, 0] == pytest.approx(f / 2.0)
    assert m[1, 1] == pytest.approx(f)
    assert m[3, 2] == -1.0
    assert m[2, 3] == pytest.approx(0.1)
    assert m[2, 2] == 0.0


def test_projection_reverses_depth():
    m = make_inf_reversed_z_proj_rh(1.0, 1.0, 0.5)
    near = m @ np.array([0.0, 0.0, -0.5, 1.0])
    far = m @ np.array([0.0, 0.0, -1000.0, 1.0])
    assert near[2] / near[3] == pytest.approx(1.0)
    assert far[2] / far[3] < near[2] / near[3]


def test_noise_range_and_determinism():
    points = [(x * 0.37, y * 1.1, z * -0.73) for x, y, z in itertools.product(range(-3, 4), repeat=3)]
    for p in points:
        v = noise(p)
        assert 0.0 <= v <= 1.0
        assert noise(p) == v


def test_noise_is_continuous():
    base = (3.2, -1.7, 8.4)
    assert abs(noise(base) - noise((3.2 + 1e-6, -1.7, 8.4))) < 1e-3


def test_map_range():
    assert map_range(5.0, 0.0, 10.0, 0.0, 100.0) == 50.0
    assert map_range(0.0, 0.0, 10.0, -1.0, 1.0) == -1.0
    assert map_range(10.0, 0.0, 10.0, -1.0, 1.0) == 1.0


def test_djb2_empty_is_seed():
    assert djb2_hash("") == 5381
    assert djb2_hash(b"abc\0def") == djb2_hash("abc")
    assert djb2_hash("abc") != djb2_hash("abd")
    assert 0 <= djb2_hash("x" * 100) < 2**64


def test_ivec3_hash():
    assert ivec3_hash((0, 0, 0)) == 0
    assert ivec3_hash((1, 0, 0)) == 5209
    assert ivec3_hash((0, 1, 0)) == 1811
    assert ivec3_hash((0, 0, 1)) == 7297
    assert 0 <= ivec3_hash((-5, 7, -9)) < 2**64