"""Conversions between world, chunk and in-chunk block coordinates."""

from __future__ import annotations

from dataclasses import dataclass

CHUNK_SIZE = 32
CHUNK_SIZE_LOG2 = 5

Vec3i = tuple[int, int, int]


@dataclass(frozen=True)
class LocalPos:
    """A world position split into chunk position and block position in that chunk."""

    chunk_pos: Vec3i = (0, 0, 0)
    block_pos: Vec3i = (0, 0, 0)


def world_to_local(wpos: Vec3i) -> LocalPos:
    """Split a world block position into its chunk and in-chunk positions."""
    block = tuple(c & (CHUNK_SIZE - 1) for c in wpos)
    chunk = tuple(c >> CHUNK_SIZE_LOG2 for c in wpos)
    return LocalPos(chunk, block)  # type: ignore[arg-type]


def local_to_world(local: Vec3i, cpos: Vec3i) -> Vec3i:
    """Combine an in-chunk position with a chunk position into a world position."""
    return tuple(l + c * CHUNK_SIZE for l, c in zip(local, cpos))  # type: ignore[return-value]


def index_from_3d(x, y, z, h, w):
    """Flatten a 3D coordinate with x varying fastest."""
    return x + h * (y + w * z)


def index_from_2d(x, y, w):
    """Flatten a 2D coordinate with x varying fastest."""
    return w * y + x