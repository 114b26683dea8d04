"""Colour conversion, projection, noise and hashing helpers."""

from __future__ import annotations

import math

import numpy as np

_U64 = (1 << 64) - 1


def rgb_to_hsl(rgb):
    """Convert RGB in [0, 255] to HSL in [0, 1]."""
    r, g, b = (c / 255.0 for c in rgb)
    hi = max(r, g, b)
    lo = min(r, g, b)
    l = (hi + lo) / 2.0
    if hi == lo:
        return (0.0, 0.0, l)
    d = hi - lo
    s = d / (2.0 - hi - lo) if l > 0.5 else d / (hi + lo)
    if hi == r:
        h = (g - b) / d + (6.0 if g < b else 0.0)
    elif hi == g:
        h = (b - r) / d + 2.0
    else:
        h = (r - g) / d + 4.0
    return (h / 6.0, s, l)


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1.0 / 6.0:
        return p + (q - p) * 6.0 * t
    if t < 1.0 / 2.0:
        return q
    if t < 2.0 / 3.0:
        return p + (q - p) * (2.0 / 3.0 - t) * 6.0
    return p


def hsl_to_rgb(hsl):
    """Convert HSL in [0, 1] to RGB in [0, 255]."""
    h, s, l = hsl
    if s == 0:
        r = g = b = l
    else:
        q = l * (1 + s) if l < 0.5 else l + s - l * s
        p = 2 * l - q
        r = _hue_to_rgb(p, q, h + 1.0 / 3.0)
        g = _hue_to_rgb(p, q, h)
        b = _hue_to_rgb(p, q, h - 1.0 / 3.0)
    return (r * 255.0, g * 255.0, b * 255.0)


def make_inf_reversed_z_proj_rh(fov_y, aspect, z_near):
    """Right-handed infinite reversed-Z projection matrix (row-major indexing)."""
    f = 1.0 / math.tan(fov_y / 2.0)
    return np.array(
        [
            [f / aspect, 0.0, 0.0, 0.0],
            [0.0, f, 0.0, 0.0],
            [0.0, 0.0, 0.0, z_near],
            [0.0, 0.0, -1.0, 0.0],
        ]
    )


def _fract(x: float) -> float:
    return x - math.floor(x)


def _mod289(x: float) -> float:
    return x - math.floor(x * (1.0 / 289.0)) * 289.0


def _perm(v):
    return [_mod289((x * 34.0 + 1.0) * x) for x in v]


def noise(p):
    """Smooth 3D value noise in [0, 1]."""
    a = [math.floor(c) for c in p]
    d = [c - ac for c, ac in zip(p, a)]
    d = [t * t * (3.0 - 2.0 * t) for t in d]

    b = (a[0], a[0] + 1.0, a[1], a[1] + 1.0)
    k1 = _perm((b[0], b[1], b[0], b[1]))
    k2 = _perm((k1[0] + b[2], k1[1] + b[2], k1[0] + b[3], k1[1] + b[3]))

    c = [k + a[2] for k in k2]
    k3 = _perm(c)
    k4 = _perm([x + 1.0 for x in c])

    o1 = [_fract(k * (1.0 / 41.0)) for k in k3]
    o2 = [_fract(k * (1.0 / 41.0)) for k in k4]

    o3 = [y * d[2] + x * (1.0 - d[2]) for x, y in zip(o1, o2)]
    o4 = (
        o3[1] * d[0] + o3[0] * (1.0 - d[0]),
        o3[3] * d[0] + o3[2] * (1.0 - d[0]),
    )
    return o4[1] * d[1] + o4[0] * (1.0 - d[1])


def map_range(val, r1s, r1e, r2s, r2e):
    """Linearly map val from range [r1s, r1e] to [r2s, r2e]."""
    return (val - r1s) / (r1e - r1s) * (r2e - r2s) + r2s


def djb2_hash(text) -> int:
    """djb2 (xor variant) over the bytes of text, up to the first NUL, as a 64-bit value."""
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    data = data.split(b"\0", 1)[0]
    h = 5381
    for byte in data:
        h = ((33 * h) ^ byte) & _U64
    return h


def _wrap_i32(x: int) -> int:
    x &= 0xFFFFFFFF
    return x - (1 << 32) if x & 0x80000000 else x


def ivec3_hash(vec) -> int:
    """Condense an integer 3-vector into a 64-bit hash value."""
    x, y, z = vec
    combined = _wrap_i32(x * 5209) ^ _wrap_i32(y * 1811) ^ _wrap_i32(z * 7297)
    return combined & _U64