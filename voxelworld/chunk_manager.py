"""Block and lighting updates that decide when chunks must be remeshed."""

from __future__ import annotations

import logging
import queue
import threading
from collections import deque
from collections.abc import Iterable, Iterator, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from contextlib import contextmanager

from voxelworld.block import Block, Visibility
from voxelworld.chunk import Chunk
from voxelworld.coords import CHUNK_SIZE, Vec3i, world_to_local
from voxelworld.light import CHANNEL_COUNT, MAX_LEVEL, Light
from voxelworld.mesh import ChunkMesh, MeshAllocator

logger = logging.getLogger(__name__)

SUN = 3
_DOWN: Vec3i = (0, -1, 0)

# Neighbour order used while propagating light.
_LIGHT_DIRS: tuple[Vec3i, ...] = (
    (1, 0, 0),
    (-1, 0, 0),
    (0, 1, 0),
    (0, -1, 0),
    (0, 0, 1),
    (0, 0, -1),
)

# Neighbour order used when checking adjacent chunks after a block change.
_ADJACENT_DIRS: tuple[Vec3i, ...] = (
    (-1, 0, 0),
    (1, 0, 0),
    (0, -1, 0),
    (0, 1, 0),
    (0, 0, -1),
    (0, 0, 1),
)


def _vec3i(v: Sequence[int]) -> Vec3i:
    x, y, z = v
    return (int(x), int(y), int(z))


def _add(a: Sequence[int], b: Sequence[int]) -> Vec3i:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def _offset(a: Sequence[int], amount: int) -> Vec3i:
    return (a[0] + amount, a[1] + amount, a[2] + amount)


@contextmanager
def _locked(chunks: Iterable[Chunk]) -> Iterator[None]:
    held = list(chunks)
    for chunk in held:
        chunk.lock()
    try:
        yield
    finally:
        for chunk in held:
            chunk.unlock()


class ChunkManager:
    """Applies block and light changes to a world and schedules chunk remeshing.

    Meshes are built on a pool of ``workers`` threads; with ``workers=0`` they
    are built on the calling thread.  Built meshes wait in a queue until
    ``update()`` hands them to the allocator.
    """

    def __init__(self, world, allocator: MeshAllocator | None = None, workers: int = 8) -> None:
        if workers < 0:
            raise ValueError(f"worker count must be non-negative, got {workers}")
        self.world = world
        self.allocator = allocator if allocator is not None else MeshAllocator()
        self._executor = (
            ThreadPoolExecutor(max_workers=workers, thread_name_prefix="mesher") if workers else None
        )
        self._buffer_queue: queue.SimpleQueue[ChunkMesh] = queue.SimpleQueue()
        self._meshes: dict[Chunk, ChunkMesh] = {}
        self._meshes_lock = threading.Lock()
        self._pending: set[Future] = set()
        self._pending_lock = threading.Lock()

    def __enter__(self) -> "ChunkManager":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Stop the mesher threads, dropping jobs that have not started."""
        if self._executor is not None:
            self._executor.shutdown(wait=True, cancel_futures=True)

    def wait(self) -> None:
        """Block until every scheduled mesh job has finished; re-raise any failure."""
        with self._pending_lock:
            pending = list(self._pending)
        done, _ = wait_futures(pending)
        for future in done:
            if not future.cancelled():
                future.result()

    def mesh(self, chunk: Chunk) -> ChunkMesh:
        """The mesh belonging to a chunk, created on first use."""
        with self._meshes_lock:
            found = self._meshes.get(chunk)
            if found is None:
                found = self._meshes[chunk] = ChunkMesh(chunk, self.world, self.allocator)
            return found

    def update(self) -> None:
        """Hand every mesh built since the last call to the allocator."""
        while True:
            try:
                mesh = self._buffer_queue.get_nowait()
            except queue.Empty:
                return
            mesh.build_buffers()

    def update_chunk(self, chunk: Chunk) -> None:
        """Schedule a chunk to be remeshed."""
        if chunk is None:
            raise ValueError("cannot update a missing chunk")
        mesh = self.mesh(chunk)

        def job() -> None:
            mesh.build_mesh()
            self._buffer_queue.put(mesh)

        if self._executor is None:
            job()
            return
        future = self._executor.submit(job)
        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)

    def _forget(self, future: Future) -> None:
        with self._pending_lock:
            self._pending.discard(future)

    def update_chunk_at(self, wpos: Sequence[int]) -> None:
        """Schedule the chunk holding a world block position, if it exists."""
        chunk = self.world.get_chunk(world_to_local(_vec3i(wpos)).chunk_pos)
        if chunk is not None:
            self.update_chunk(chunk)

    def update_block(self, wpos: Sequence[int], block: Block) -> None:
        """Change a block, fix up lighting and remesh every affected chunk.

        A missing chunk inside the world is created first; a position outside
        the world raises IndexError.
        """
        wpos = _vec3i(wpos)
        local = world_to_local(wpos)
        chunk = self.world.get_chunk(local.chunk_pos)
        if chunk is None:
            chunk = self.world.create_chunk(local.chunk_pos)
        removed = chunk.block_at(local.block_pos)

        chunk.set_block_type_at(local.block_pos, block.type)

        modified: list[Chunk] = []
        if block.visibility == Visibility.OPAQUE or removed.visibility == Visibility.OPAQUE:
            modified.extend(self.propagate_light_remove(wpos))

        emittance = block.emittance
        if any(emittance[:3]):
            modified.extend(self.propagate_light_add(wpos, Light.from_channels(*emittance)))

        self.update_chunk(chunk)

        unique = list(dict.fromkeys(modified))
        logger.debug("Updating %d chunks", len(unique))
        for modified_chunk in unique:
            self.update_chunk(modified_chunk)

        for direction in _ADJACENT_DIRS:
            self._update_chunk_near_block(wpos, direction)

    def update_block_cheap(self, wpos: Sequence[int], block: Block) -> None:
        """Set a block's type without lighting or remeshing; its chunk must exist."""
        local = world_to_local(_vec3i(wpos))
        chunk = self.world.get_chunk(local.chunk_pos)
        if chunk is None:
            raise LookupError(f"no chunk at chunk position {local.chunk_pos}")
        chunk.set_block_type_at(local.block_pos, block.type)

    def reload_all_chunks(self) -> None:
        """Schedule every chunk in the world to be remeshed."""
        for chunk in list(self.world.chunks()):
            self.update_chunk(chunk)

    def _update_chunk_near_block(self, pos: Vec3i, near: Vec3i) -> None:
        here = world_to_local(pos)
        there = world_to_local(_add(pos, near))
        if here.chunk_pos == there.chunk_pos:
            return
        chunk = self.world.get_chunk(there.chunk_pos)
        if chunk is not None:
            self.update_chunk(chunk)

    def _region_around(self, wpos: Vec3i) -> list[Chunk]:
        return self.world.get_chunks_region_world_space(
            _offset(wpos, -CHUNK_SIZE), _offset(wpos, CHUNK_SIZE)
        )

    def propagate_light_add(self, wpos: Sequence[int], light: Light) -> list[Chunk]:
        """Flood light outwards from a position; returns the chunks written to."""
        wpos = _vec3i(wpos)
        modified: list[Chunk] = []

        with _locked(self._region_around(wpos)):
            local = world_to_local(wpos)
            chunk = self.world.get_chunk(local.chunk_pos)
            if chunk is not None:
                existing = chunk.light_at(local.block_pos).channels()
                combined = (max(a, b) for a, b in zip(existing, light.channels()))
                chunk.set_light_at(local.block_pos, Light.from_channels(*combined))

            pending: deque[Vec3i] = deque([wpos])
            while pending:
                pos = pending.popleft()
                pos_local = world_to_local(pos)
                source_chunk = self.world.get_chunk(pos_local.chunk_pos)
                if source_chunk is None:
                    continue
                level = source_chunk.light_at(pos_local.block_pos).channels()

                for direction in _LIGHT_DIRS:
                    npos = _add(pos, direction)
                    nlocal = world_to_local(npos)
                    nchunk = self.world.get_chunk(nlocal.chunk_pos)
                    if nchunk is None:
                        continue
                    nblock = nchunk.block_at(nlocal.block_pos)
                    if nblock.visibility == Visibility.OPAQUE:
                        continue
                    nlight = nblock.light.channels()
                    going_down = direction == _DOWN

                    enqueue = False
                    for ci in range(CHANNEL_COUNT):
                        sun_falling = ci == SUN and nlight[SUN] + 1 == level[SUN] and going_down
                        if nlight[ci] + 2 > level[ci] and not sun_falling:
                            continue
                        value = level[ci] - 1
                        if ci == SUN and level[SUN] == MAX_LEVEL and going_down:
                            value = MAX_LEVEL
                        current = nchunk.light_at(nlocal.block_pos)
                        nchunk.set_light_at(nlocal.block_pos, current.with_channel(ci, value))
                        modified.append(nchunk)
                        enqueue = True

                    if enqueue:
                        pending.append(npos)

        return modified

    def propagate_light_remove(self, wpos: Sequence[int]) -> list[Chunk]:
        """Remove the light at a position and everything it fed, then re-flood
        from brighter neighbours; returns the chunks written to."""
        wpos = _vec3i(wpos)
        modified: list[Chunk] = []
        readd: deque[tuple[Vec3i, Light]] = deque()

        with _locked(self._region_around(wpos)):
            local = world_to_local(wpos)
            chunk = self.world.get_chunk_no_check(local.chunk_pos)
            if chunk is None:
                raise LookupError(f"no chunk at chunk position {local.chunk_pos}")
            removal: deque[tuple[Vec3i, Light]] = deque([(wpos, chunk.block_at(local.block_pos).light)])
            chunk.set_light_at(local.block_pos, Light())

            while removal:
                pos, removed_light = removal.popleft()
                lightv = removed_light.channels()

                for direction in _LIGHT_DIRS:
                    npos = _add(pos, direction)
                    nlocal = world_to_local(npos)
                    nchunk = self.world.get_chunk(nlocal.chunk_pos)
                    if nchunk is None:
                        continue

                    near_light = nchunk.light_at(nlocal.block_pos)
                    nlightv = list(near_light.channels())
                    nue = [0] * CHANNEL_COUNT
                    going_down = direction == _DOWN
                    enqueue_remove = False
                    enqueue_readd = False

                    for ci in range(CHANNEL_COUNT):
                        fed_by_this = nlightv[ci] > 0 and nlightv[ci] == lightv[ci] - 1
                        full_sun_below = ci == SUN and going_down and nlightv[SUN] == MAX_LEVEL
                        if fed_by_this or full_sun_below:
                            enqueue_remove = True
                            nlightv[ci] = 0
                            nchunk.set_light_at(nlocal.block_pos, Light.from_channels(*nlightv))
                            modified.append(nchunk)
                        elif nlightv[ci] > lightv[ci] or (
                            ci == SUN and nlightv[SUN] > 0 and not going_down
                        ):
                            enqueue_readd = True
                            nue[ci] = nlightv[ci]

                    if enqueue_remove:
                        removal.append((npos, near_light))
                    if enqueue_readd:
                        readd.append((npos, Light.from_channels(*nue)))

        while readd:
            pos, light = readd.popleft()
            modified.extend(self.propagate_light_add(pos, light))

        return modified