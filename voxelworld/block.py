"""Block types, their static properties, and the block value type."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from voxelworld.light import Light


class Visibility(IntEnum):
    OPAQUE = 0
    PARTIAL = 1
    INVISIBLE = 2


@dataclass(frozen=True)
class BlockProperties:
    """Static properties shared by every block of a type."""

    name: str
    emittance: tuple[int, int, int, int]
    priority: int
    ttk: float = 0.5
    destructible: bool = True
    visibility: Visibility = Visibility.OPAQUE
    texture: str = "<null>"


class BlockType(IntEnum):
    AIR = 0
    STONE = 1
    DIRT = 2
    METAL = 3
    ORE = 4
    GRASS = 5
    SAND = 6
    SNOW = 7
    WATER = 8
    OAK_WOOD = 9
    OAK_LEAVES = 10
    ERROR = 11
    DRY_GRASS = 12
    O_LIGHT = 13
    R_LIGHT = 14
    G_LIGHT = 15
    B_LIGHT = 16
    SM_LIGHT = 17
    Y_LIGHT = 18
    R_GLASS = 19
    G_GLASS = 20
    B_GLASS = 21
    DEV_VALUE_100 = 22
    DEV_VALUE_90 = 23
    DEV_VALUE_80 = 24
    DEV_VALUE_70 = 25
    DEV_VALUE_60 = 26
    DEV_VALUE_50 = 27
    DEV_VALUE_40 = 28
    DEV_VALUE_30 = 29
    DEV_VALUE_20 = 30
    DEV_VALUE_10 = 31
    DEV_VALUE_00 = 32


_DARK = (0, 0, 0, 0)

# Indexed by BlockType value. The table carries one more entry than there are
# types (a repeated glass entry), so later types read the entry after theirs.
PROPERTIES_TABLE: tuple[BlockProperties, ...] = (
    BlockProperties("air", _DARK, 0, 0.0, False, Visibility.INVISIBLE),
    BlockProperties("stone", _DARK, 1, 2.0, False),
    BlockProperties("dirt", _DARK, 1, 0.5, True, Visibility.OPAQUE),
    BlockProperties("metal", _DARK, 1),
    BlockProperties("ore", _DARK, 1),
    BlockProperties("grass", _DARK, 1, 0.25),
    BlockProperties("sand", _DARK, 1),
    BlockProperties("snow", _DARK, 1),
    BlockProperties("water", _DARK, 1),
    BlockProperties("oak wood", _DARK, 1),
    BlockProperties("oak leaves", _DARK, 0, 0.1, True, Visibility.PARTIAL),
    BlockProperties("error", _DARK, 1),
    BlockProperties("dry grass", _DARK, 1),
    BlockProperties("Olight", (15, 8, 0, 0), 1, 0.1),
    BlockProperties("Rlight", (15, 0, 0, 0), 1, 0.1),
    BlockProperties("Glight", (0, 15, 0, 0), 1, 0.1),
    BlockProperties("Blight", (0, 0, 15, 0), 1, 0.1),
    BlockProperties("Smlight", (15, 15, 15, 0), 1, 0.1),
    BlockProperties("Ylight", (15, 15, 0, 0), 1, 0.1),
    BlockProperties("RGlass", _DARK, 1, 0.1, True, Visibility.PARTIAL),
    BlockProperties("GGlass", _DARK, 1, 0.1, True, Visibility.PARTIAL),
    BlockProperties("BGlass", _DARK, 1, 0.1, True, Visibility.PARTIAL),
    BlockProperties("BGlass", _DARK, 1, 0.1, True, Visibility.PARTIAL),
    BlockProperties("DevValue100", _DARK, 1, 0.1),
    BlockProperties("DevValue90", _DARK, 1, 0.1),
    BlockProperties("DevValue80", _DARK, 1, 0.1),
    BlockProperties("DevValue70", _DARK, 1, 0.1),
    BlockProperties("DevValue60", _DARK, 1, 0.1),
    BlockProperties("DevValue50", _DARK, 1, 0.1),
    BlockProperties("DevValue40", _DARK, 1, 0.1),
    BlockProperties("DevValue30", _DARK, 1, 0.1),
    BlockProperties("DevValue20", _DARK, 1, 0.1),
    BlockProperties("DevValue10", _DARK, 1, 0.1),
    BlockProperties("DevValue00", _DARK, 1, 0.1),
)


def properties_of(block_type: BlockType) -> BlockProperties:
    """Look up the static properties for a block type."""
    return PROPERTIES_TABLE[BlockType(block_type)]


@dataclass(frozen=True)
class Block:
    """A block: its type plus the light level stored at its position."""

    type: BlockType = BlockType.AIR
    light: Light = field(default_factory=Light)

    def properties(self) -> BlockProperties:
        return properties_of(self.type)

    @property
    def name(self) -> str:
        return self.properties().name

    @property
    def priority(self) -> int:
        return self.properties().priority

    @property
    def ttk(self) -> float:
        return self.properties().ttk

    @property
    def destructible(self) -> bool:
        return self.properties().destructible

    @property
    def emittance(self) -> tuple[int, int, int, int]:
        return self.properties().emittance

    @property
    def visibility(self) -> Visibility:
        return self.properties().visibility