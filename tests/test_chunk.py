import threading

import pytest

from voxelworld.block import Block, BlockType
from voxelworld.chunk import CHUNK_SIZE_CUBED, ArrayBlockStorage, Chunk
from voxelworld.coords import CHUNK_SIZE, index_from_3d
from voxelworld.light import Light


def test_storage_defaults_to_dark_air():
    storage = ArrayBlockStorage(8)
    assert len(storage) == 8
    assert storage.get_block(3) == Block(BlockType.AIR, Light(0))


def test_storage_default_size_is_chunk_volume():
    assert len(ArrayBlockStorage()) == CHUNK_SIZE_CUBED


def test_storage_set_and_get_round_trip():
    storage = ArrayBlockStorage(16)
    light = Light.from_channels(1, 2, 3, 4)
    storage.set_block_type(5, BlockType.STONE)
    storage.set_light(5, light)
    assert storage.get_block_type(5) == BlockType.STONE
    assert storage.get_light(5) == light
    assert storage.get_block(5) == Block(BlockType.STONE, light)
    assert storage.get_block_type(4) == BlockType.AIR


@pytest.mark.parametrize("index", [-1, 16, 100])
def test_storage_index_out_of_range(index):
    storage = ArrayBlockStorage(16)
    with pytest.raises(IndexError):
        storage.get_block(index)


def test_storage_copy_is_independent():
    storage = ArrayBlockStorage(4)
    storage.set_block_type(0, BlockType.DIRT)
    dup = storage.copy()
    assert dup == storage
    dup.set_block_type(0, BlockType.SAND)
    assert storage.get_block_type(0) == BlockType.DIRT
    assert dup != storage


def test_chunk_position_and_index_agree():
    chunk = Chunk((1, 2, 3))
    chunk.set_block_type_at((4, 5, 6), BlockType.WATER)
    index = index_from_3d(4, 5, 6, CHUNK_SIZE, CHUNK_SIZE)
    assert chunk.block_type_at(index) == BlockType.WATER
    assert chunk.block_at((4, 5, 6)).type == BlockType.WATER


def test_chunk_x_varies_fastest():
    chunk = Chunk()
    chunk.set_block_type_at((1, 0, 0), BlockType.ORE)
    assert chunk.block_type_at(1) == BlockType.ORE


def test_chunk_light_round_trip():
    chunk = Chunk()
    light = Light.from_channels(15, 0, 7, 15)
    chunk.set_light_at((31, 31, 31), light)
    assert chunk.light_at((31, 31, 31)) == light
    assert chunk.block_at((31, 31, 31)).light == light


def test_chunk_position_out_of_bounds():
    chunk = Chunk()
    with pytest.raises(IndexError):
        chunk.block_at((CHUNK_SIZE, 0, 0))
    with pytest.raises(IndexError):
        chunk.set_block_type_at((0, -1, 0), BlockType.STONE)


def test_chunk_aabb():
    box = Chunk((1, 0, -1)).aabb()
    assert box.min == (32.0, 0.0, -32.0)
    assert box.max == (64.0, 32.0, 0.0)


def test_chunk_copy_is_independent():
    chunk = Chunk((2, 2, 2))
    chunk.set_block_type_at((0, 0, 0), BlockType.GRASS)
    dup = chunk.copy()
    assert dup.pos == chunk.pos
    assert dup.block_type_at((0, 0, 0)) == BlockType.GRASS
    dup.set_block_type_at((0, 0, 0), BlockType.SNOW)
    assert chunk.block_type_at((0, 0, 0)) == BlockType.GRASS


def test_chunk_lock_is_reentrant_for_owner():
    chunk = Chunk()
    chunk.lock()
    try:
        chunk.set_block_type_at((0, 0, 0), BlockType.METAL)
        assert chunk.block_type_at((0, 0, 0)) == BlockType.METAL
    finally:
        chunk.unlock()


def test_chunk_lock_blocks_other_threads():
    chunk = Chunk()
    results = []

    def writer():
        chunk.set_block_type_at((0, 0, 0), BlockType.STONE)
        results.append(chunk.block_type_at((0, 0, 0)))

    chunk.lock()
    worker = threading.Thread(target=writer)
    try:
        worker.start()
        worker.join(timeout=0.05)
        assert chunk.block_type_at((0, 0, 0)) == BlockType.AIR
        assert results == []
    finally:
        chunk.unlock()
    worker.join()
    assert results == [BlockType.STONE]


def test_chunk_unlock_without_lock_raises():
    with pytest.raises(RuntimeError):
        Chunk().unlock()