"""Prefabs: block arrangements to paste into the world, and their storage."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from enum import IntEnum
from itertools import product
from pathlib import Path

from voxelworld.block import Block, BlockType
from voxelworld.coords import Vec3i

logger = logging.getLogger(__name__)

DEFAULT_PREFAB_DIR = Path("./Resources/Prefabs")

_COUNT = struct.Struct("<Q")
_ENTRY = struct.Struct("<3iHB")


class PlacementType(IntEnum):
    NO_RESTRICTIONS = 0  # no spawning restrictions
    PRIORITY_REQUIRED = 1  # all spawned blocks must pass priority checks
    NO_OVERWRITING = 2  # spawned blocks may not overwrite existing blocks


@dataclass
class Prefab:
    """Blocks positioned relative to the prefab's spawn point."""

    blocks: list[tuple[Vec3i, Block]] = field(default_factory=list)
    placement_type: PlacementType = PlacementType.NO_RESTRICTIONS
    name: str = ""

    def add(self, pos, block: Block) -> None:
        x, y, z = pos
        self.blocks.append(((int(x), int(y), int(z)), block))

    def _copy(self) -> "Prefab":
        return Prefab(list(self.blocks), self.placement_type, self.name)


def _encode(prefab: Prefab) -> bytes:
    # Only the blocks' positions and types and the name are stored.
    parts = [_COUNT.pack(len(prefab.blocks))]
    parts.extend(_ENTRY.pack(*pos, int(block.type), 0) for pos, block in prefab.blocks)
    name = prefab.name.encode("utf-8")
    parts.append(_COUNT.pack(len(name)))
    parts.append(name)
    return b"".join(parts)


def _decode(data: bytes) -> Prefab:
    view = memoryview(data)
    (count,) = _COUNT.unpack_from(view, 0)
    offset = _COUNT.size
    if count * _ENTRY.size > len(view) - offset:
        raise ValueError("prefab data truncated")
    prefab = Prefab()
    for _ in range(count):
        x, y, z, type_id, _pad = _ENTRY.unpack_from(view, offset)
        offset += _ENTRY.size
        prefab.add((x, y, z), Block(BlockType(type_id)))
    (name_len,) = _COUNT.unpack_from(view, offset)
    offset += _COUNT.size
    if offset + name_len != len(view):
        raise ValueError("prefab name length does not match data")
    prefab.name = bytes(view[offset:]).decode("utf-8")
    return prefab


def _oak_tree() -> Prefab:
    tree = Prefab(name="Oak Tree")
    for i in range(5):
        tree.add((0, i, 0), Block(BlockType.OAK_WOOD))
        if i > 2:
            for pos in ((-1, i, 0), (1, i, 0), (0, i, -1), (0, i, 1)):
                tree.add(pos, Block(BlockType.OAK_LEAVES))
        if i == 4:
            tree.add((0, i + 1, 0), Block(BlockType.OAK_LEAVES))
    tree.placement_type = PlacementType.NO_RESTRICTIONS
    return tree


def _oak_tree_big() -> Prefab:
    tree = Prefab(name="Oak Tree Big")
    for i in range(8):
        trunk = BlockType.OAK_WOOD if i < 7 else BlockType.OAK_LEAVES
        tree.add((0, i, 0), Block(trunk))
        if i > 4:
            for pos in (
                (-1, i, 0), (1, i, 0), (0, i, -1), (0, i, 1),
                (-1, i, -1), (1, i, 1), (1, i, -1), (-1, i, 1),
            ):
                tree.add(pos, Block(BlockType.OAK_LEAVES))
    tree.placement_type = PlacementType.PRIORITY_REQUIRED
    return tree


def _error_prefab() -> Prefab:
    error = Prefab(name="Error")
    for x, y, z in product(range(3), repeat=3):
        error.add((x, y, z), Block(BlockType.ERROR))
    error.placement_type = PlacementType.NO_OVERWRITING
    return error


class PrefabManager:
    """Named prefabs, built in or loaded lazily from files in a directory."""

    def __init__(self, directory=DEFAULT_PREFAB_DIR) -> None:
        self.directory = Path(directory)
        self._prefabs: dict[str, Prefab] = {}

    def _path(self, filename: str) -> Path:
        return self.directory / f"{filename}.bin"

    def init_prefabs(self) -> None:
        """Register the built-in prefabs and write the error prefab to disk."""
        self._prefabs["OakTree"] = _oak_tree()
        self._prefabs["OakTreeBig"] = _oak_tree_big()
        error = _error_prefab()
        self._prefabs["Error"] = error
        self.save_prefab_to_file(error, "Error")

    def get_prefab(self, name: str) -> Prefab:
        """Return a registered prefab, loading and caching it from file if unknown."""
        found = self._prefabs.get(name)
        if found is None:
            found = self._prefabs[name] = self.load_prefab_from_file(name)
        return found

    def load_prefab_from_file(self, filename: str) -> Prefab:
        """Read a prefab file; on any failure return a copy of the error prefab."""
        try:
            return _decode(self._path(filename).read_bytes())
        except (OSError, ValueError, struct.error, UnicodeDecodeError):
            return self._prefabs.setdefault("Error", Prefab())._copy()

    def save_prefab_to_file(self, prefab: Prefab, filename: str) -> None:
        """Write a prefab file; failures are logged, not raised."""
        try:
            self._path(filename).write_bytes(_encode(prefab))
        except (OSError, ValueError, struct.error):
            logger.warning("Error saving prefab.")