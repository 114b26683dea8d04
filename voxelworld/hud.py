"""Head-up display state: the block type currently held by the player."""

from __future__ import annotations

from dataclasses import dataclass

from voxelworld.block import BlockType

_LAST_TYPE = max(BlockType)


@dataclass
class Hud:
    """Tracks the selected block type, changed by scrolling."""

    selected: BlockType = BlockType.ERROR

    def update(self, scroll_offset: float) -> BlockType:
        """Step the selection by the (truncated) scroll offset, clamped to valid types."""
        offset = int(scroll_offset)
        if offset:
            target = int(self.selected) + offset
            self.selected = BlockType(min(max(target, 0), int(_LAST_TYPE)))
        return self.selected