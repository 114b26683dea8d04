"""Chunk meshing: packed quad encoding, face culling and ambient occlusion."""

from __future__ import annotations

import itertools
import math
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import IntEnum

from voxelworld.block import BlockType, Visibility, properties_of
from voxelworld.chunk import CHUNK_SIZE_CUBED, CHUNK_SIZE_SQRED, Chunk
from voxelworld.coords import CHUNK_SIZE, Vec3i, local_to_world, world_to_local
from voxelworld.light import Light
from voxelworld.shapes import AABB
from voxelworld.vertices import cube_face_corners

AO_MIN = 0
AO_MAX = 3

HEADER_PADDING = 0xDEADBEEF
BYTES_PER_ELEMENT = 4

_U32 = 0xFFFFFFFF
_QUAD_INDICES = (0, 1, 3, 3, 1, 2)


class Face(IntEnum):
    """Block faces, in the order used by the packed quad normal index."""

    FAR = 0  # +z
    NEAR = 1  # -z
    LEFT = 2  # -x
    RIGHT = 3  # +x
    TOP = 4  # +y
    BOTTOM = 5  # -y

    @property
    def normal(self) -> Vec3i:
        return FACE_NORMALS[self]


FACE_NORMALS: tuple[Vec3i, ...] = (
    (0, 0, 1),
    (0, 0, -1),
    (-1, 0, 0),
    (1, 0, 0),
    (0, 1, 0),
    (0, -1, 0),
)

# Counterclockwise from bottom right.
TEX_CORNERS: tuple[tuple[int, int], ...] = ((1, 0), (1, 1), (0, 1), (0, 0))


def encode_quad(block_pos: Sequence[int], normal_idx: int, tex_idx: int) -> int:
    """Pack a block position (5 bits each), face (3 bits) and texture (10 bits)."""
    x, y, z = (int(c) for c in block_pos)
    for c in (x, y, z):
        if not 0 <= c < CHUNK_SIZE:
            raise ValueError(f"block position component out of range: {(x, y, z)}")
    if not 0 <= normal_idx < len(Face):
        raise ValueError(f"face index out of range: {normal_idx}")
    if not 0 <= tex_idx < 1 << 10:
        raise ValueError(f"texture index does not fit in 10 bits: {tex_idx}")
    return x | (y << 5) | (z << 10) | (int(normal_idx) << 15) | (int(tex_idx) << 18)


def decode_quad(encoded: int) -> tuple[Vec3i, int, int]:
    """Unpack a quad into (block position, face index, texture index)."""
    pos = (encoded & 0x1F, (encoded >> 5) & 0x1F, (encoded >> 10) & 0x1F)
    face = (encoded >> 15) & 0x7
    if face >= len(Face):
        raise ValueError(f"encoded face index out of range: {face}")
    tex = (encoded >> 18) & 0x3FF
    return pos, face, tex


def encode_quad_light(light_encoding: int, ao: int) -> int:
    """Pack a 16-bit light value with 8 bits of per-vertex ambient occlusion."""
    if not 0 <= light_encoding < 1 << 16:
        raise ValueError(f"light encoding does not fit in 16 bits: {light_encoding}")
    if not 0 <= ao < 1 << 8:
        raise ValueError(f"ambient occlusion does not fit in 8 bits: {ao}")
    return light_encoding | (ao << 16)


class MeshAllocator:
    """Hands out handles for uploaded chunk meshes.

    Handles are non-zero; 0 means no allocation.  When a byte capacity is
    given, an allocation that would exceed it fails and returns 0.
    """

    def __init__(self, capacity: int | None = None) -> None:
        self.capacity = capacity
        self.dirty = True
        self._allocs: dict[int, tuple[tuple[int, ...], AABB]] = {}
        self._next = itertools.count(1)
        self._used = 0

    def __len__(self) -> int:
        return len(self._allocs)

    def __contains__(self, handle: object) -> bool:
        return handle in self._allocs

    @property
    def used_bytes(self) -> int:
        return self._used

    def data(self, handle: int) -> tuple[int, ...]:
        return self._allocs[handle][0]

    def bounds(self, handle: int) -> AABB:
        return self._allocs[handle][1]

    def alloc(self, data: Sequence[int], aabb: AABB) -> int:
        size = len(data) * BYTES_PER_ELEMENT
        if self.capacity is not None and self._used + size > self.capacity:
            return 0
        handle = next(self._next)
        self._allocs[handle] = (tuple(data), aabb)
        self._used += size
        self.dirty = True
        return handle

    def free(self, handle: int) -> None:
        """Release an allocation; unknown handles are ignored."""
        entry = self._allocs.pop(handle, None)
        if entry is None:
            return
        self._used -= len(entry[0]) * BYTES_PER_ELEMENT
        self.dirty = True


def _in_chunk(p: Sequence[int]) -> bool:
    return all(0 <= c < CHUNK_SIZE for c in p)


def _add(a: Sequence[int], b: Sequence[int]) -> Vec3i:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])  # type: ignore[return-value]


@dataclass
class _MeshBuilder:
    parent: Chunk
    near: list[Chunk | None]
    interleaved: list[int] = field(default_factory=list)
    vertices: list[Vec3i] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)
    quad_count: int = 0

    def run(self) -> None:
        ax, ay, az = (c * CHUNK_SIZE for c in self.parent.pos)
        self.interleaved.extend((ax & _U32, ay & _U32, az & _U32, HEADER_PADDING))
        for index in range(CHUNK_SIZE_CUBED):
            block = self.parent.block_type_at(index)
            if properties_of(block).visibility == Visibility.INVISIBLE:
                continue
            pos = (index % CHUNK_SIZE, (index // CHUNK_SIZE) % CHUNK_SIZE, index // CHUNK_SIZE_SQRED)
            for face in Face:
                self._block_face(face, pos, block)

    def _block_face(self, face: Face, block_pos: Vec3i, block: BlockType) -> None:
        near_pos = _add(block_pos, face.normal)
        near_chunk: Chunk | None = self.parent
        if not _in_chunk(near_pos):
            near_pos = world_to_local(local_to_world(near_pos, self.parent.pos)).block_pos
            near_chunk = self.near[face]

        # Faces against missing chunks are built as if lit by full sunlight.
        if near_chunk is None:
            self._add_quad(block_pos, block, face, Light.from_channels(0, 0, 0, 15))
            return

        other = near_chunk.block_at(near_pos)
        light = other.light
        water_surface = (
            other.type != BlockType.WATER
            and block == BlockType.WATER
            and near_pos[1] - block_pos[1] > 0
        )
        if water_surface or other.visibility > Visibility.OPAQUE:
            self._add_quad(block_pos, block, face, light)
            return
        if other.type not in (BlockType.AIR, BlockType.WATER):
            return
        if other.type == BlockType.WATER and block == BlockType.WATER:
            return
        if properties_of(block).visibility == Visibility.INVISIBLE:
            return
        self._add_quad(block_pos, block, face, light)

    def _add_quad(self, lpos: Vec3i, block: BlockType, face: Face, light: Light) -> None:
        self.quad_count += 1
        ao_values = 0
        for vertex_index, corner in enumerate(cube_face_corners(face)):
            self.vertices.append(tuple(math.ceil(c) + p for c, p in zip(corner, lpos)))  # type: ignore[arg-type]
            ao = self._vertex_face_ao(lpos, corner, face.normal)
            ao_values |= ao << (2 * vertex_index)

        self.interleaved.append(encode_quad(lpos, int(face), int(block)))
        self.interleaved.append(encode_quad_light(light.raw, ao_values))
        base = len(self.vertices) - 4
        self.indices.extend(base + i for i in _QUAD_INDICES)

    def _occupied(self, p: Vec3i) -> bool:
        return _in_chunk(p) and self.parent.block_type_at(p) != BlockType.AIR

    def _vertex_face_ao(self, lpos: Vec3i, corner: Sequence[float], norm: Vec3i) -> int:
        corner2 = tuple(int(round(c * 2)) for c in corner)
        sides = tuple(c - n for c, n in zip(corner2, norm))
        occluded = 0
        for axis, amount in enumerate(sides):
            if amount == 0:
                continue
            side = [0, 0, 0]
            side[axis] = amount
            if self._occupied(_add(_add(lpos, side), norm)):
                occluded += 1
        if occluded == 2:
            return AO_MIN
        if self._occupied(_add(lpos, corner2)):
            occluded += 1
        return AO_MAX - occluded


class ChunkMesh:
    """The mesh of one chunk: built from a snapshot, then handed to an allocator."""

    def __init__(self, chunk: Chunk, world, allocator: MeshAllocator) -> None:
        self.chunk = chunk
        self.world = world
        self.allocator = allocator
        self.quad_count = 0
        self.interleaved: list[int] = []
        self.collider_vertices: list[Vec3i] = []
        self.collider_indices: list[int] = []
        self.handle = 0
        self.needs_buffering = False
        self._lock = threading.Lock()

    def build_mesh(self) -> None:
        """Rebuild the quads from copies of the chunk and its six neighbours."""
        with self._lock:
            self.needs_buffering = True
            parent = self.chunk.copy()
            near: list[Chunk | None] = []
            for face in Face:
                found = self.world.get_chunk(_add(parent.pos, face.normal))
                near.append(found.copy() if found is not None else None)
            builder = _MeshBuilder(parent, near)
            builder.run()
            self.quad_count = builder.quad_count
            self.interleaved = builder.interleaved
            self.collider_vertices = builder.vertices
            self.collider_indices = builder.indices

    def build_buffers(self) -> None:
        """Hand a freshly built mesh to the allocator, replacing any previous one."""
        with self._lock:
            if not self.needs_buffering:
                return
            self.needs_buffering = False
            self.allocator.free(self.handle)
            self.handle = 0
            if self.quad_count == 0:
                return
            self.handle = self.allocator.alloc(self.interleaved, self.chunk.aabb())
            self.interleaved = []
            self.collider_vertices = []
            self.collider_indices = []

    def close(self) -> None:
        """Release the mesh's allocation."""
        with self._lock:
            self.allocator.free(self.handle)
            self.handle = 0