"""Chunked voxel world with packed lighting, light propagation, quad meshing and prefabs."""

__version__ = "0.1.0"