import pytest

from voxelworld.block import BlockType
from voxelworld.hud import Hud


def test_default_selection_is_error_block():
    assert Hud().selected == BlockType.ERROR


def test_scroll_up_moves_to_next_type():
    hud = Hud()
    assert hud.update(1) == BlockType.DRY_GRASS
    assert hud.selected == BlockType.DRY_GRASS


def test_scroll_down_moves_to_previous_type():
    hud = Hud()
    hud.update(-1)
    assert hud.selected == BlockType.OAK_LEAVES


def test_zero_scroll_keeps_selection():
    hud = Hud(BlockType.SAND)
    hud.update(0)
    assert hud.selected == BlockType.SAND


@pytest.mark.parametrize("offset", [0.9, -0.9])
def test_fractional_scroll_is_truncated(offset):
    hud = Hud(BlockType.SAND)
    hud.update(offset)
    assert hud.selected == BlockType.SAND


def test_fractional_scroll_truncates_toward_zero():
    hud = Hud(BlockType.SAND)
    hud.update(-1.5)
    assert hud.selected == BlockType.GRASS


def test_scroll_clamps_low():
    hud = Hud()
    hud.update(-100)
    assert hud.selected == BlockType.AIR


def test_scroll_clamps_high():
    hud = Hud()
    hud.update(100)
    assert hud.selected == BlockType.DEV_VALUE_00


def test_selection_can_be_set_directly():
    hud = Hud()
    hud.selected = BlockType.STONE
    hud.update(2)
    assert hud.selected == BlockType.METAL