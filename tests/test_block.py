import pytest

from voxelworld.block import (
    PROPERTIES_TABLE,
    Block,
    BlockProperties,
    BlockType,
    Visibility,
    properties_of,
)
from voxelworld.light import Light


def test_every_type_has_properties():
    assert len(BlockType) == 33
    assert len(PROPERTIES_TABLE) >= len(BlockType)
    for bt in BlockType:
        assert properties_of(bt) is PROPERTIES_TABLE[int(bt)]


def test_air_is_invisible_and_indestructible():
    props = properties_of(BlockType.AIR)
    assert props.name == "air"
    assert props.visibility is Visibility.INVISIBLE
    assert props.destructible is False
    assert props.priority == 0


def test_light_emitters():
    assert Block(BlockType.O_LIGHT).emittance == (15, 8, 0, 0)
    assert Block(BlockType.SM_LIGHT).emittance == (15, 15, 15, 0)
    assert Block(BlockType.STONE).emittance == (0, 0, 0, 0)


def test_defaults_applied():
    props = properties_of(BlockType.METAL)
    assert props == BlockProperties("metal", (0, 0, 0, 0), 1)
    assert props.ttk == 0.5
    assert props.texture == "<null>"
    assert props.visibility is Visibility.OPAQUE


def test_partial_visibility():
    assert Block(BlockType.OAK_LEAVES).visibility is Visibility.PARTIAL
    assert Block(BlockType.R_GLASS).visibility is Visibility.PARTIAL


def test_table_offset_after_duplicate_glass():
    assert properties_of(BlockType.DEV_VALUE_100).name == "BGlass"
    assert properties_of(BlockType.DEV_VALUE_00).name == "DevValue10"


def test_block_defaults_and_equality():
    block = Block()
    assert block.type is BlockType.AIR
    assert block.light == Light()
    assert Block(BlockType.DIRT, Light.from_channels(1, 1, 1, 1)) == Block(
        BlockType.DIRT, Light.from_channels(1, 1, 1, 1)
    )
    assert block.name == "air"


def test_block_accessors_match_properties():
    block = Block(BlockType.STONE)
    props = block.properties()
    assert (block.name, block.priority, block.ttk, block.destructible) == (
        props.name,
        props.priority,
        props.ttk,
        props.destructible,
    )
    assert block.ttk == 2.0


def test_unknown_type_rejected():
    with pytest.raises(ValueError):
        properties_of(99)