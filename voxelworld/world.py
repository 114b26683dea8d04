"""A bounded grid of chunks addressed by chunk and world positions."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from voxelworld.block import Block, BlockType
from voxelworld.chunk import Chunk
from voxelworld.coords import LocalPos, Vec3i, world_to_local
from voxelworld.light import Light


def _vec3i(v: Sequence[int]) -> Vec3i:
    x, y, z = v
    return (int(x), int(y), int(z))


class VoxelWorld:
    """Holds the chunks of a world.

    A world of dimension ``dim`` keeps a one-chunk border of empty slots on
    every side: chunks are created at chunk positions from 1 to ``dim``
    inclusive, while slots exist from 0 to ``dim + 1``.
    """

    def __init__(self, dim: Sequence[int] | None = None) -> None:
        self._chunks: list[Chunk | None] = []
        self.virtual_dim: Vec3i = (0, 0, 0)
        self.actual_dim: Vec3i = (0, 0, 0)
        if dim is not None:
            self.set_dim(dim)

    def _flatten(self, p: Vec3i) -> int:
        ax, ay, _ = self.actual_dim
        return p[0] + ax * (p[1] + ay * p[2])

    def _in_bounds(self, p: Vec3i) -> bool:
        return all(0 <= c < d for c, d in zip(p, self.actual_dim))

    def set_dim(self, dim: Sequence[int]) -> None:
        """Size the world and create a chunk at every interior chunk position."""
        if self._chunks:
            raise RuntimeError("world dimensions have already been set")
        self.virtual_dim = _vec3i(dim)
        if any(c < 0 for c in self.virtual_dim):
            raise ValueError(f"world dimensions must be non-negative: {self.virtual_dim}")
        self.actual_dim = tuple(c + 2 for c in self.virtual_dim)  # type: ignore[assignment]
        ax, ay, az = self.actual_dim
        self._chunks = [None] * (ax * ay * az)
        for z in range(az):
            for y in range(ay):
                for x in range(ax):
                    cpos = (x, y, z)
                    if all(0 < c <= v for c, v in zip(cpos, self.virtual_dim)):
                        self._chunks[self._flatten(cpos)] = Chunk(cpos)

    def get_chunk(self, cpos: Sequence[int]) -> Chunk | None:
        """Return the chunk at a chunk position, or None if absent or out of bounds."""
        p = _vec3i(cpos)
        if self._in_bounds(p):
            return self._chunks[self._flatten(p)]
        return None

    def get_chunk_no_check(self, cpos: Sequence[int]) -> Chunk | None:
        """Return the slot at a chunk position that must lie inside the world."""
        p = _vec3i(cpos)
        if not self._in_bounds(p):
            raise IndexError(f"chunk position outside the world: {p}")
        return self._chunks[self._flatten(p)]

    def create_chunk(self, cpos: Sequence[int]) -> Chunk:
        """Put a new empty chunk into the slot at a chunk position and return it."""
        p = _vec3i(cpos)
        if not self._in_bounds(p):
            raise IndexError(f"chunk position outside the world: {p}")
        chunk = Chunk(p)
        self._chunks[self._flatten(p)] = chunk
        return chunk

    def chunks(self) -> Iterator[Chunk]:
        """Iterate over every existing chunk."""
        return (c for c in self._chunks if c is not None)

    def get_chunks_region(self, low: Sequence[int], high: Sequence[int]) -> list[Chunk]:
        """Existing chunks in the inclusive box between two chunk positions, x fastest."""
        a, b = _vec3i(low), _vec3i(high)
        lo = tuple(min(i, j) for i, j in zip(a, b))
        hi = tuple(max(i, j) for i, j in zip(a, b))
        region = []
        for z in range(lo[2], hi[2] + 1):
            for y in range(lo[1], hi[1] + 1):
                for x in range(lo[0], hi[0] + 1):
                    found = self.get_chunk((x, y, z))
                    if found is not None:
                        region.append(found)
        return region

    def get_chunks_region_world_space(self, low: Sequence[int], high: Sequence[int]) -> list[Chunk]:
        """Existing chunks covering the box between two world block positions."""
        return self.get_chunks_region(
            world_to_local(_vec3i(low)).chunk_pos,
            world_to_local(_vec3i(high)).chunk_pos,
        )

    def _locate(self, wpos) -> tuple[Chunk | None, LocalPos]:
        local = wpos if isinstance(wpos, LocalPos) else world_to_local(_vec3i(wpos))
        return self.get_chunk(local.chunk_pos), local

    def get_block(self, wpos) -> Block:
        """Block at a world position (or LocalPos); raises LookupError if no chunk holds it."""
        chunk, local = self._locate(wpos)
        if chunk is None:
            raise LookupError(f"no chunk at chunk position {local.chunk_pos}")
        return chunk.block_at(local.block_pos)

    def try_get_block(self, wpos) -> Block | None:
        """Block at a world position, or None if no chunk holds it."""
        chunk, local = self._locate(wpos)
        if chunk is None:
            return None
        return chunk.block_at(local.block_pos)

    def set_block(self, wpos, block: Block) -> bool:
        """Set type and light at a world position; False if no chunk holds it."""
        chunk, local = self._locate(wpos)
        if chunk is None:
            return False
        chunk.set_block_type_at(local.block_pos, block.type)
        chunk.set_light_at(local.block_pos, block.light)
        return True

    def set_block_type(self, wpos, block_type: BlockType) -> bool:
        """Set the block type at a world position; False if no chunk holds it."""
        chunk, local = self._locate(wpos)
        if chunk is None:
            return False
        chunk.set_block_type_at(local.block_pos, block_type)
        return True

    def set_block_light(self, wpos, light: Light) -> bool:
        """Set the light at a world position; False if no chunk holds it."""
        chunk, local = self._locate(wpos)
        if chunk is None:
            return False
        chunk.set_light_at(local.block_pos, light)
        return True