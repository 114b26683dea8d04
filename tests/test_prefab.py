from itertools import product

import pytest

from voxelworld.block import Block, BlockType
from voxelworld.light import Light
from voxelworld.prefab import PlacementType, Prefab, PrefabManager


@pytest.fixture
def manager(tmp_path):
    mgr = PrefabManager(tmp_path)
    mgr.init_prefabs()
    return mgr


def _positions(prefab, block_type):
    return {pos for pos, block in prefab.blocks if block.type == block_type}


def test_add_appends_in_order():
    pf = Prefab()
    pf.add((1, 2, 3), Block(BlockType.STONE))
    pf.add([4, 5, 6], Block(BlockType.DIRT))
    assert pf.blocks == [((1, 2, 3), Block(BlockType.STONE)), ((4, 5, 6), Block(BlockType.DIRT))]
    assert pf.placement_type == PlacementType.NO_RESTRICTIONS


def test_oak_tree(manager):
    tree = manager.get_prefab("OakTree")
    assert tree.name == "Oak Tree"
    assert tree.placement_type == PlacementType.NO_RESTRICTIONS
    assert _positions(tree, BlockType.OAK_WOOD) == {(0, i, 0) for i in range(5)}
    assert (0, 5, 0) in _positions(tree, BlockType.OAK_LEAVES)
    assert all(pos[1] >= 3 for pos in _positions(tree, BlockType.OAK_LEAVES))


def test_oak_tree_big(manager):
    tree = manager.get_prefab("OakTreeBig")
    assert tree.name == "Oak Tree Big"
    assert tree.placement_type == PlacementType.PRIORITY_REQUIRED
    assert _positions(tree, BlockType.OAK_WOOD) == {(0, i, 0) for i in range(7)}
    leaves = _positions(tree, BlockType.OAK_LEAVES)
    assert (0, 7, 0) in leaves
    assert all(pos[1] >= 5 for pos in leaves)


def test_error_prefab(manager, tmp_path):
    error = manager.get_prefab("Error")
    assert error.name == "Error"
    assert error.placement_type == PlacementType.NO_OVERWRITING
    assert _positions(error, BlockType.ERROR) == set(product(range(3), repeat=3))
    assert (tmp_path / "Error.bin").is_file()


def test_saved_error_prefab_loads_back(manager):
    loaded = manager.load_prefab_from_file("Error")
    assert loaded.name == "Error"
    assert loaded.blocks == manager.get_prefab("Error").blocks


def test_round_trip_drops_light_and_placement(manager):
    pf = Prefab(placement_type=PlacementType.NO_OVERWRITING, name="tower")
    pf.add((-3, 0, 7), Block(BlockType.WATER, Light.from_channels(1, 2, 3, 4)))
    pf.add((0, 100, -2), Block(BlockType.DEV_VALUE_00))
    manager.save_prefab_to_file(pf, "tower")
    loaded = manager.load_prefab_from_file("tower")
    assert loaded.name == "tower"
    assert loaded.placement_type == PlacementType.NO_RESTRICTIONS
    assert loaded.blocks == [((-3, 0, 7), Block(BlockType.WATER)), ((0, 100, -2), Block(BlockType.DEV_VALUE_00))]


def test_missing_file_gives_error_prefab(manager):
    loaded = manager.load_prefab_from_file("nowhere")
    assert loaded.name == "Error"
    assert loaded.blocks == manager.get_prefab("Error").blocks


def test_missing_file_before_init_gives_empty_prefab(tmp_path):
    mgr = PrefabManager(tmp_path)
    loaded = mgr.load_prefab_from_file("nowhere")
    assert loaded.blocks == []
    assert loaded.name == ""


def test_corrupt_file_gives_error_prefab(manager, tmp_path):
    (tmp_path / "broken.bin").write_bytes(b"\xff\x00\x01")
    assert manager.load_prefab_from_file("broken").name == "Error"


def test_unknown_block_type_gives_error_prefab(manager, tmp_path):
    pf = Prefab(name="odd")
    pf.add((0, 0, 0), Block(BlockType.STONE))
    manager.save_prefab_to_file(pf, "odd")
    path = tmp_path / "odd.bin"
    data = bytearray(path.read_bytes())
    data[8 + 12] = 0xFF  # low byte of the block type
    path.write_bytes(bytes(data))
    assert manager.load_prefab_from_file("odd").name == "Error"


def test_get_prefab_caches_loaded_file(manager, tmp_path):
    pf = Prefab(name="hut")
    pf.add((0, 0, 0), Block(BlockType.SAND))
    manager.save_prefab_to_file(pf, "hut")
    first = manager.get_prefab("hut")
    (tmp_path / "hut.bin").unlink()
    assert manager.get_prefab("hut") is first
    assert first.name == "hut"


def test_save_to_missing_directory_does_not_raise(tmp_path):
    mgr = PrefabManager(tmp_path / "absent")
    mgr.save_prefab_to_file(Prefab(name="x"), "x")
    assert not (tmp_path / "absent").exists()