"""Axis-aligned boxes and frame timesteps."""

from __future__ import annotations

from dataclasses import dataclass

Vec3 = tuple[float, float, float]
Vec4 = tuple[float, float, float, float]


@dataclass(frozen=True)
class AABB:
    """Axis-aligned bounding box with 3-component corners."""

    min: Vec3 = (0.0, 0.0, 0.0)
    max: Vec3 = (0.0, 0.0, 0.0)

    @classmethod
    def from_aabb16(cls, box: "AABB16") -> "AABB":
        return cls(tuple(box.min[:3]), tuple(box.max[:3]))  # type: ignore[arg-type]


@dataclass(frozen=True)
class AABB16:
    """Bounding box with 4-component corners for GPU layout; w is unused."""

    min: Vec4 = (0.0, 0.0, 0.0, 0.0)
    max: Vec4 = (0.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_aabb(cls, box: AABB) -> "AABB16":
        return cls((*box.min, 0.0), (*box.max, 0.0))  # type: ignore[arg-type]


@dataclass(frozen=True)
class Timestep:
    """Frame delta times: real time and time affected by the timescale."""

    dt_actual: float = 0.0
    dt_effective: float = 0.0