"""Shading helpers: normal encoding, depth conversion, hash noise and PBR terms."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

PHI = 1.61803398874989484820459
M_PI = 3.1415926536
_INV_2_POW_32 = 2.3283064365386963e-10

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]


def _fract(x: float) -> float:
    return x - math.floor(x)


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return sum(x * y for x, y in zip(a, b))


def _normalize(v: Sequence[float]) -> Vec3:
    length = math.sqrt(_dot(v, v))
    return tuple(c / length for c in v)  # type: ignore[return-value]


def _cross(a: Sequence[float], b: Sequence[float]) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _distance(a: Sequence[float], b: Sequence[float]) -> float:
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a, b)))


def sign_not_zero(v: Sequence[float]) -> Vec2:
    """Per-component sign of a 2-vector, with zero counted as positive."""
    x, y = v
    return (1.0 if x >= 0.0 else -1.0, 1.0 if y >= 0.0 else -1.0)


def float32x3_to_oct(v: Sequence[float]) -> Vec2:
    """Encode a unit vector into octahedral coordinates on [-1, 1]^2."""
    x, y, z = v
    scale = 1.0 / (abs(x) + abs(y) + abs(z))
    p = (x * scale, y * scale)
    if z <= 0.0:
        sx, sy = sign_not_zero(p)
        return ((1.0 - abs(p[1])) * sx, (1.0 - abs(p[0])) * sy)
    return p


def oct_to_float32x3(e: Sequence[float]) -> Vec3:
    """Decode octahedral coordinates back into a unit vector."""
    ex, ey = e
    vx, vy, vz = ex, ey, 1.0 - abs(ex) - abs(ey)
    if vz < 0:
        sx, sy = sign_not_zero((vx, vy))
        vx, vy = (1.0 - abs(ey)) * sx, (1.0 - abs(ex)) * sy
    return _normalize((vx, vy, vz))


def unproject_uv(depth: float, uv: Sequence[float], inv_x_proj) -> Vec3:
    """Turn a [0, 1] depth and screen UV back into a position.

    ``inv_x_proj`` is a 4x4 matrix applied as ``matrix @ column_vector``.
    Depth is taken to already lie in clip space ([0, 1] depth convention).
    """
    u, v = uv
    clip = np.array([u * 2.0 - 1.0, v * 2.0 - 1.0, depth, 1.0])
    world = np.asarray(inv_x_proj, dtype=float) @ clip
    world = world / world[3]
    return (float(world[0]), float(world[1]), float(world[2]))


def linearize_depth_zo(d: float, zn: float, zf: float) -> float:
    """Map a [0, 1] depth buffer value to a linear depth."""
    return zn / (zf + d * (zn - zf))


def invert_depth_zo(l: float, zn: float, zf: float) -> float:
    """Inverse of linearize_depth_zo."""
    return (zn - zf * l) / (l * (zn - zf))


def gold_noise(xy: Sequence[float], seed: float) -> float:
    """Hash noise in [0, 1) built on tan."""
    scaled = (xy[0] * PHI, xy[1] * PHI)
    return _fract(math.tan(_distance(scaled, xy) * seed) * xy[0])


def silver_noise(xy: Sequence[float], seed: float) -> float:
    """Hash noise in [0, 1) built on sin."""
    scaled = (xy[0] * PHI, xy[1] * PHI)
    return _fract(math.sin(_distance(scaled, xy) * seed) * xy[0])


def rand(co: Sequence[float]) -> float:
    """Classic sine-hash random value in [0, 1)."""
    return _fract(math.sin(_dot(co, (12.9898, 78.233))) * 43758.5453)


def random3(c: Sequence[float]) -> Vec3:
    """Pseudo-random 3-vector with components in [-0.5, 0.5)."""
    j = 4096.0 * math.sin(_dot(c, (17.0, 59.4, 15.0)))
    rz = _fract(512.0 * j)
    j *= 0.125
    rx = _fract(512.0 * j)
    j *= 0.125
    ry = _fract(512.0 * j)
    return (rx - 0.5, ry - 0.5, rz - 0.5)


def d_ggx(n: Sequence[float], h: Sequence[float], roughness: float) -> float:
    """GGX normal distribution term."""
    a = roughness * roughness
    cos_theta = max(_dot(n, h), 0.0)
    tmp = (cos_theta * (a * a - 1.0) + 1.0) ** 2
    return (a * a) / (M_PI * tmp)


def _reverse_bits32(i: int) -> int:
    return int(f"{i:032b}"[::-1], 2)


def hammersley(i: int, n: int) -> Vec2:
    """The i-th point of an n-point Hammersley sequence."""
    if not 0 <= i <= 0xFFFFFFFF:
        raise ValueError(f"sample index must fit in 32 unsigned bits: {i}")
    if n <= 0:
        raise ValueError(f"sample count must be positive: {n}")
    return (i / n, _reverse_bits32(i) * _INV_2_POW_32)


def importance_sample_ggx(xi: Sequence[float], n: Sequence[float], roughness: float) -> Vec3:
    """Sample a GGX half vector around normal n for a 2D random point xi."""
    a = roughness * roughness
    phi = 2.0 * M_PI * xi[0]
    cos_theta = math.sqrt((1.0 - xi[1]) / (1.0 + (a * a - 1.0) * xi[1]))
    sin_theta = math.sqrt(max(1.0 - cos_theta * cos_theta, 0.0))

    hx = math.cos(phi) * sin_theta
    hy = math.sin(phi) * sin_theta
    hz = cos_theta

    up = (0.0, 0.0, 1.0) if abs(n[2]) < 0.999 else (1.0, 0.0, 0.0)
    tangent = _normalize(_cross(up, n))
    bitangent = _cross(n, tangent)

    sample = tuple(t * hx + b * hy + nc * hz for t, b, nc in zip(tangent, bitangent, n))
    return _normalize(sample)


def fresnel_schlick(cos_theta: float, f0: Sequence[float]) -> Vec3:
    """Schlick's Fresnel approximation."""
    weight = max(1.0 - cos_theta, 0.0) ** 5.0
    return tuple(f + (1.0 - f) * weight for f in f0)  # type: ignore[return-value]


def fresnel_schlick_roughness(cos_theta: float, f0: Sequence[float], roughness: float) -> Vec3:
    """Schlick's Fresnel approximation damped by roughness."""
    weight = max(1.0 - cos_theta, 0.0) ** 5.0
    return tuple(f + (max(1.0 - roughness, f) - f) * weight for f in f0)  # type: ignore[return-value]


def g_schlick_ggx(n: Sequence[float], i: Sequence[float], roughness: float) -> float:
    """Schlick-GGX geometry term for one direction."""
    k = (roughness + 1.0) ** 2 / 8.0
    cos_theta = max(_dot(n, i), 0.0)
    return cos_theta / (cos_theta * (1.0 - k) + k)


def g_smith(n: Sequence[float], v: Sequence[float], l: Sequence[float], roughness: float) -> float:
    """Smith geometry term for view and light directions."""
    return g_schlick_ggx(n, v, roughness) * g_schlick_ggx(n, l, roughness)