import pytest

from voxelworld.block import Block, BlockType
from voxelworld.coords import CHUNK_SIZE, LocalPos
from voxelworld.light import Light
from voxelworld.world import VoxelWorld


@pytest.fixture
def world():
    return VoxelWorld((2, 2, 2))


def test_set_dim_creates_interior_chunks(world):
    chunks = list(world.chunks())
    assert len(chunks) == 8
    assert all(all(1 <= c <= 2 for c in ch.pos) for ch in chunks)
    assert world.actual_dim == (4, 4, 4)


def test_border_slots_are_empty(world):
    assert world.get_chunk((0, 0, 0)) is None
    assert world.get_chunk((3, 1, 1)) is None
    assert world.get_chunk((1, 1, 1)).pos == (1, 1, 1)


def test_out_of_bounds_chunk_is_none(world):
    assert world.get_chunk((4, 1, 1)) is None
    assert world.get_chunk((-1, 1, 1)) is None


def test_get_chunk_no_check_rejects_out_of_bounds(world):
    assert world.get_chunk_no_check((2, 2, 2)) is world.get_chunk((2, 2, 2))
    with pytest.raises(IndexError):
        world.get_chunk_no_check((4, 0, 0))


def test_set_dim_twice_raises(world):
    with pytest.raises(RuntimeError):
        world.set_dim((1, 1, 1))


def test_create_chunk_fills_slot(world):
    chunk = world.create_chunk((0, 0, 0))
    assert world.get_chunk((0, 0, 0)) is chunk
    assert len(list(world.chunks())) == 9
    with pytest.raises(IndexError):
        world.create_chunk((9, 0, 0))


def test_block_round_trip(world):
    wpos = (CHUNK_SIZE + 3, CHUNK_SIZE + 4, 2 * CHUNK_SIZE + 5)
    block = Block(BlockType.STONE, Light.from_channels(1, 2, 3, 4))
    assert world.set_block(wpos, block) is True
    assert world.get_block(wpos) == block
    assert world.try_get_block(wpos) == block
    chunk = world.get_chunk((1, 1, 2))
    assert chunk.block_at((3, 4, 5)) == block


def test_get_block_accepts_local_pos(world):
    world.set_block_type((CHUNK_SIZE, CHUNK_SIZE, CHUNK_SIZE), BlockType.SAND)
    local = LocalPos((1, 1, 1), (0, 0, 0))
    assert world.get_block(local).type == BlockType.SAND


def test_set_block_type_and_light_separately(world):
    wpos = (CHUNK_SIZE, CHUNK_SIZE, CHUNK_SIZE)
    light = Light.from_channels(15, 15, 15, 15)
    assert world.set_block_type(wpos, BlockType.DIRT)
    assert world.set_block_light(wpos, light)
    assert world.get_block(wpos) == Block(BlockType.DIRT, light)


def test_missing_chunk_access(world):
    assert world.try_get_block((0, 0, 0)) is None
    with pytest.raises(LookupError):
        world.get_block((0, 0, 0))
    assert world.set_block((0, 0, 0), Block(BlockType.STONE)) is False
    assert world.set_block_type((0, 0, 0), BlockType.STONE) is False
    assert world.set_block_light((0, 0, 0), Light()) is False


def test_region_orders_x_fastest(world):
    region = world.get_chunks_region((2, 2, 2), (0, 0, 0))
    assert len(region) == 8
    assert region[0].pos == (1, 1, 1)
    assert region[1].pos == (2, 1, 1)
    assert region[-1].pos == (2, 2, 2)


def test_region_world_space_matches_chunk_region(world):
    low = (CHUNK_SIZE, CHUNK_SIZE, CHUNK_SIZE)
    high = (2 * CHUNK_SIZE - 1, 2 * CHUNK_SIZE, CHUNK_SIZE)
    by_world = world.get_chunks_region_world_space(low, high)
    by_chunk = world.get_chunks_region((1, 1, 1), (1, 2, 1))
    assert [c.pos for c in by_world] == [c.pos for c in by_chunk]
    assert len(by_world) == 2


def test_empty_world_has_no_chunks():
    empty = VoxelWorld()
    assert list(empty.chunks()) == []
    assert empty.get_chunk((0, 0, 0)) is None