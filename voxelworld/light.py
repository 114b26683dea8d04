"""Packed light levels: four 4-bit channels (red, green, blue, sunlight)."""

from __future__ import annotations

from dataclasses import dataclass

MAX_LEVEL = 15
CHANNEL_COUNT = 4

_SHIFTS = (12, 8, 4, 0)


@dataclass(frozen=True)
class Light:
    """The lighting level at a point in space, packed into 16 bits."""

    raw: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.raw <= 0xFFFF:
            raise ValueError(f"raw light value out of range: {self.raw}")

    @classmethod
    def from_channels(cls, r: int, g: int, b: int, s: int) -> "Light":
        """Pack four channel levels, each in [0, 15]."""
        raw = 0
        for value, shift in zip((r, g, b, s), _SHIFTS):
            _check_level(value)
            raw |= value << shift
        return cls(raw)

    def channels(self) -> tuple[int, int, int, int]:
        """Return (red, green, blue, sunlight)."""
        return tuple((self.raw >> shift) & 0xF for shift in _SHIFTS)  # type: ignore[return-value]

    def with_channel(self, index: int, value: int) -> "Light":
        """Return a copy with one channel (0=R, 1=G, 2=B, 3=sun) replaced."""
        if not 0 <= index < CHANNEL_COUNT:
            raise IndexError(f"light channel index out of range: {index}")
        _check_level(value)
        shift = _SHIFTS[index]
        return Light((self.raw & ~(0xF << shift) & 0xFFFF) | (value << shift))

    @property
    def r(self) -> int:
        return self.channels()[0]

    @property
    def g(self) -> int:
        return self.channels()[1]

    @property
    def b(self) -> int:
        return self.channels()[2]

    @property
    def s(self) -> int:
        return self.channels()[3]


def _check_level(value: int) -> None:
    if not 0 <= value <= MAX_LEVEL:
        raise ValueError(f"light level must be in [0, {MAX_LEVEL}], got {value}")