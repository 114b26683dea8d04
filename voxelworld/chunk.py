"""Chunk block storage and the chunk value holding it."""

from __future__ import annotations

import threading
from collections.abc import Sequence

import numpy as np

from voxelworld.block import Block, BlockType
from voxelworld.coords import CHUNK_SIZE, CHUNK_SIZE_LOG2, Vec3i, index_from_3d
from voxelworld.light import Light
from voxelworld.shapes import AABB

CHUNK_SIZE_SQRED = CHUNK_SIZE * CHUNK_SIZE
CHUNK_SIZE_CUBED = CHUNK_SIZE * CHUNK_SIZE * CHUNK_SIZE
BLOCKS_PER_X = 1
BLOCKS_PER_Y = CHUNK_SIZE
BLOCKS_PER_Z = CHUNK_SIZE_SQRED
BLOCKS_PER_DIM: Vec3i = (BLOCKS_PER_X, BLOCKS_PER_Y, BLOCKS_PER_Z)


def _vec3i(v: Sequence[int]) -> Vec3i:
    x, y, z = v
    return (int(x), int(y), int(z))


class ArrayBlockStorage:
    """Uncompressed storage of block types and light levels, one entry per block."""

    def __init__(self, size: int = CHUNK_SIZE_CUBED) -> None:
        if size < 0:
            raise ValueError(f"storage size must be non-negative, got {size}")
        self._types = np.zeros(size, dtype=np.uint16)
        self._lights = np.zeros(size, dtype=np.uint16)

    def __len__(self) -> int:
        return len(self._types)

    def _check(self, index: int) -> int:
        index = int(index)
        if not 0 <= index < len(self._types):
            raise IndexError(f"block index out of range: {index}")
        return index

    def get_block(self, index: int) -> Block:
        index = self._check(index)
        return Block(BlockType(int(self._types[index])), Light(int(self._lights[index])))

    def get_block_type(self, index: int) -> BlockType:
        return BlockType(int(self._types[self._check(index)]))

    def set_block_type(self, index: int, block_type: BlockType) -> None:
        self._types[self._check(index)] = BlockType(block_type)

    def get_light(self, index: int) -> Light:
        return Light(int(self._lights[self._check(index)]))

    def set_light(self, index: int, light: Light) -> None:
        self._lights[self._check(index)] = light.raw

    def copy(self) -> "ArrayBlockStorage":
        """Return an independent copy of this storage."""
        other = ArrayBlockStorage(0)
        other._types = self._types.copy()
        other._lights = self._lights.copy()
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArrayBlockStorage):
            return NotImplemented
        return bool(
            np.array_equal(self._types, other._types)
            and np.array_equal(self._lights, other._lights)
        )

    __hash__ = None  # type: ignore[assignment]


class Chunk:
    """A cube of CHUNK_SIZE^3 blocks at a chunk position in the world.

    Positions passed to the accessors are either a flat block index or an
    in-chunk (x, y, z) position.  Every accessor takes the chunk's lock; the
    lock is reentrant, so a thread holding it through ``lock()`` may keep
    calling the accessors.
    """

    SIZE = CHUNK_SIZE
    SIZE_SQRED = CHUNK_SIZE_SQRED
    SIZE_CUBED = CHUNK_SIZE_CUBED
    SIZE_LOG2 = CHUNK_SIZE_LOG2

    def __init__(self, pos: Sequence[int] = (0, 0, 0), storage: ArrayBlockStorage | None = None) -> None:
        self.pos: Vec3i = _vec3i(pos)
        self.storage = storage if storage is not None else ArrayBlockStorage()
        self._mutex = threading.RLock()

    def __repr__(self) -> str:
        return f"Chunk(pos={self.pos})"

    @staticmethod
    def _index(p) -> int:
        if isinstance(p, (int, np.integer)) and not isinstance(p, bool):
            return int(p)
        x, y, z = _vec3i(p)
        for c in (x, y, z):
            if not 0 <= c < CHUNK_SIZE:
                raise IndexError(f"block position out of chunk bounds: {(x, y, z)}")
        return index_from_3d(x, y, z, CHUNK_SIZE, CHUNK_SIZE)

    def block_at(self, p) -> Block:
        index = self._index(p)
        with self._mutex:
            return self.storage.get_block(index)

    def block_type_at(self, p) -> BlockType:
        index = self._index(p)
        with self._mutex:
            return self.storage.get_block_type(index)

    def light_at(self, p) -> Light:
        index = self._index(p)
        with self._mutex:
            return self.storage.get_light(index)

    def set_block_type_at(self, p, block_type: BlockType) -> None:
        index = self._index(p)
        with self._mutex:
            self.storage.set_block_type(index, block_type)

    def set_light_at(self, p, light: Light) -> None:
        index = self._index(p)
        with self._mutex:
            self.storage.set_light(index, light)

    def aabb(self) -> AABB:
        """World-space bounds of this chunk."""
        low = tuple(float(c * CHUNK_SIZE) for c in self.pos)
        high = tuple(float(c * CHUNK_SIZE + CHUNK_SIZE) for c in self.pos)
        return AABB(low, high)  # type: ignore[arg-type]

    def lock(self) -> None:
        self._mutex.acquire()

    def unlock(self) -> None:
        self._mutex.release()

    def copy(self) -> "Chunk":
        """Return a chunk with the same position and an independent copy of the blocks."""
        with self._mutex:
            return Chunk(self.pos, self.storage.copy())