"""Static vertex and index tables for cubes and simple shapes."""

from __future__ import annotations

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]

# Cube corners grouped by face (far, near, left, right, top, bottom), 4 per face.
CUBE_VERTICES_LIGHT: tuple[Vec3, ...] = (
    # far
    (-0.5, -0.5, 0.5),
    (0.5, -0.5, 0.5),
    (-0.5, 0.5, 0.5),
    (0.5, 0.5, 0.5),
    # near
    (-0.5, -0.5, -0.5),
    (0.5, -0.5, -0.5),
    (-0.5, 0.5, -0.5),
    (0.5, 0.5, -0.5),
    # left
    (-0.5, -0.5, -0.5),
    (-0.5, -0.5, 0.5),
    (-0.5, 0.5, -0.5),
    (-0.5, 0.5, 0.5),
    # right
    (0.5, -0.5, -0.5),
    (0.5, -0.5, 0.5),
    (0.5, 0.5, -0.5),
    (0.5, 0.5, 0.5),
    # top
    (-0.5, 0.5, -0.5),
    (-0.5, 0.5, 0.5),
    (0.5, 0.5, -0.5),
    (0.5, 0.5, 0.5),
    # bottom
    (-0.5, -0.5, -0.5),
    (-0.5, -0.5, 0.5),
    (0.5, -0.5, -0.5),
    (0.5, -0.5, 0.5),
)

# Unindexed cube, two triangles per face.
CUBE: tuple[Vec3, ...] = (
    # back (-z)
    (-0.5, -0.5, -0.5),
    (0.5, 0.5, -0.5),
    (0.5, -0.5, -0.5),
    (0.5, 0.5, -0.5),
    (-0.5, -0.5, -0.5),
    (-0.5, 0.5, -0.5),
    # front (+z)
    (-0.5, -0.5, 0.5),
    (0.5, -0.5, 0.5),
    (0.5, 0.5, 0.5),
    (0.5, 0.5, 0.5),
    (-0.5, 0.5, 0.5),
    (-0.5, -0.5, 0.5),
    # left (-x)
    (-0.5, 0.5, 0.5),
    (-0.5, 0.5, -0.5),
    (-0.5, -0.5, -0.5),
    (-0.5, -0.5, -0.5),
    (-0.5, -0.5, 0.5),
    (-0.5, 0.5, 0.5),
    # right (+x)
    (0.5, 0.5, 0.5),
    (0.5, -0.5, -0.5),
    (0.5, 0.5, -0.5),
    (0.5, -0.5, -0.5),
    (0.5, 0.5, 0.5),
    (0.5, -0.5, 0.5),
    # bottom (-y)
    (-0.5, -0.5, -0.5),
    (0.5, -0.5, -0.5),
    (0.5, -0.5, 0.5),
    (0.5, -0.5, 0.5),
    (-0.5, -0.5, 0.5),
    (-0.5, -0.5, -0.5),
    # top (+y)
    (-0.5, 0.5, -0.5),
    (0.5, 0.5, 0.5),
    (0.5, 0.5, -0.5),
    (0.5, 0.5, 0.5),
    (-0.5, 0.5, -0.5),
    (-0.5, 0.5, 0.5),
)

SKYBOX: tuple[Vec3, ...] = (
    (-1.0, 1.0, -1.0),
    (-1.0, -1.0, -1.0),
    (1.0, -1.0, -1.0),
    (1.0, -1.0, -1.0),
    (1.0, 1.0, -1.0),
    (-1.0, 1.0, -1.0),

    (-1.0, -1.0, 1.0),
    (-1.0, -1.0, -1.0),
    (-1.0, 1.0, -1.0),
    (-1.0, 1.0, -1.0),
    (-1.0, 1.0, 1.0),
    (-1.0, -1.0, 1.0),

    (1.0, -1.0, -1.0),
    (1.0, -1.0, 1.0),
    (1.0, 1.0, 1.0),
    (1.0, 1.0, 1.0),
    (1.0, 1.0, -1.0),
    (1.0, -1.0, -1.0),

    (-1.0, -1.0, 1.0),
    (-1.0, 1.0, 1.0),
    (1.0, 1.0, 1.0),
    (1.0, 1.0, 1.0),
    (1.0, -1.0, 1.0),
    (-1.0, -1.0, 1.0),

    (-1.0, 1.0, -1.0),
    (1.0, 1.0, -1.0),
    (1.0, 1.0, 1.0),
    (1.0, 1.0, 1.0),
    (-1.0, 1.0, 1.0),
    (-1.0, 1.0, -1.0),

    (-1.0, -1.0, -1.0),
    (-1.0, -1.0, 1.0),
    (1.0, -1.0, -1.0),
    (1.0, -1.0, -1.0),
    (-1.0, -1.0, 1.0),
    (1.0, -1.0, 1.0),
)

# Per vertex: position (3), normal (3), texture coordinate (2).
CUBE_NORM_TEX: tuple[tuple[float, ...], ...] = (
    (-0.5, -0.5, -0.5, 0.0, 0.0, -1.0, 0.0, 0.0),
    (0.5, 0.5, -0.5, 0.0, 0.0, -1.0, 1.0, 1.0),
    (0.5, -0.5, -0.5, 0.0, 0.0, -1.0, 1.0, 0.0),
    (0.5, 0.5, -0.5, 0.0, 0.0, -1.0, 1.0, 1.0),
    (-0.5, -0.5, -0.5, 0.0, 0.0, -1.0, 0.0, 0.0),
    (-0.5, 0.5, -0.5, 0.0, 0.0, -1.0, 0.0, 1.0),

    (-0.5, -0.5, 0.5, 0.0, 0.0, 1.0, 0.0, 0.0),
    (0.5, -0.5, 0.5, 0.0, 0.0, 1.0, 1.0, 0.0),
    (0.5, 0.5, 0.5, 0.0, 0.0, 1.0, 1.0, 1.0),
    (0.5, 0.5, 0.5, 0.0, 0.0, 1.0, 1.0, 1.0),
    (-0.5, 0.5, 0.5, 0.0, 0.0, 1.0, 0.0, 1.0),
    (-0.5, -0.5, 0.5, 0.0, 0.0, 1.0, 0.0, 0.0),

    (-0.5, 0.5, 0.5, -1.0, 0.0, 0.0, 1.0, 0.0),
    (-0.5, 0.5, -0.5, -1.0, 0.0, 0.0, 1.0, 1.0),
    (-0.5, -0.5, -0.5, -1.0, 0.0, 0.0, 0.0, 1.0),
    (-0.5, -0.5, -0.5, -1.0, 0.0, 0.0, 0.0, 1.0),
    (-0.5, -0.5, 0.5, -1.0, 0.0, 0.0, 0.0, 0.0),
    (-0.5, 0.5, 0.5, -1.0, 0.0, 0.0, 1.0, 0.0),

    (0.5, 0.5, 0.5, 1.0, 0.0, 0.0, 1.0, 0.0),
    (0.5, -0.5, -0.5, 1.0, 0.0, 0.0, 0.0, 1.0),
    (0.5, 0.5, -0.5, 1.0, 0.0, 0.0, 1.0, 1.0),
    (0.5, -0.5, -0.5, 1.0, 0.0, 0.0, 0.0, 1.0),
    (0.5, 0.5, 0.5, 1.0, 0.0, 0.0, 1.0, 0.0),
    (0.5, -0.5, 0.5, 1.0, 0.0, 0.0, 0.0, 0.0),

    (-0.5, -0.5, -0.5, 0.0, -1.0, 0.0, 0.0, 1.0),
    (0.5, -0.5, -0.5, 0.0, -1.0, 0.0, 1.0, 1.0),
    (0.5, -0.5, 0.5, 0.0, -1.0, 0.0, 1.0, 0.0),
    (0.5, -0.5, 0.5, 0.0, -1.0, 0.0, 1.0, 0.0),
    (-0.5, -0.5, 0.5, 0.0, -1.0, 0.0, 0.0, 0.0),
    (-0.5, -0.5, -0.5, 0.0, -1.0, 0.0, 0.0, 1.0),

    (-0.5, 0.5, -0.5, 0.0, 1.0, 0.0, 0.0, 1.0),
    (0.5, 0.5, 0.5, 0.0, 1.0, 0.0, 1.0, 0.0),
    (0.5, 0.5, -0.5, 0.0, 1.0, 0.0, 1.0, 1.0),
    (0.5, 0.5, 0.5, 0.0, 1.0, 0.0, 1.0, 0.0),
    (-0.5, 0.5, -0.5, 0.0, 1.0, 0.0, 0.0, 1.0),
    (-0.5, 0.5, 0.5, 0.0, 1.0, 0.0, 0.0, 0.0),
)

CUBE_NORMALS_DIVISOR2: tuple[Vec3, ...] = (
    (0.0, 0.0, -1.0),
    (0.0, 0.0, 1.0),
    (-1.0, 0.0, 0.0),
    (1.0, 0.0, 0.0),
    (0.0, -1.0, 0.0),
    (0.0, 1.0, 0.0),
)

# Per vertex: position (3), texture coordinate (2).
CUBE_TEX: tuple[tuple[float, ...], ...] = (
    # back
    (-0.5, -0.5, -0.5, 0.0, 0.0),
    (0.5, 0.5, -0.5, 1.0, 1.0),
    (0.5, -0.5, -0.5, 1.0, 0.0),
    (0.5, 0.5, -0.5, 1.0, 1.0),
    (-0.5, -0.5, -0.5, 0.0, 0.0),
    (-0.5, 0.5, -0.5, 0.0, 1.0),
    # front
    (-0.5, -0.5, 0.5, 0.0, 0.0),
    (0.5, -0.5, 0.5, 1.0, 0.0),
    (0.5, 0.5, 0.5, 1.0, 1.0),
    (0.5, 0.5, 0.5, 1.0, 1.0),
    (-0.5, 0.5, 0.5, 0.0, 1.0),
    (-0.5, -0.5, 0.5, 0.0, 0.0),
    # left
    (-0.5, 0.5, 0.5, 1.0, 0.0),
    (-0.5, 0.5, -0.5, 1.0, 1.0),
    (-0.5, -0.5, -0.5, 0.0, 1.0),
    (-0.5, -0.5, -0.5, 0.0, 1.0),
    (-0.5, -0.5, 0.5, 0.0, 0.0),
    (-0.5, 0.5, 0.5, 1.0, 0.0),
    # right
    (0.5, 0.5, 0.5, 1.0, 0.0),
    (0.5, -0.5, -0.5, 0.0, 1.0),
    (0.5, 0.5, -0.5, 1.0, 1.0),
    (0.5, -0.5, -0.5, 0.0, 1.0),
    (0.5, 0.5, 0.5, 1.0, 0.0),
    (0.5, -0.5, 0.5, 0.0, 0.0),
    # bottom
    (-0.5, -0.5, -0.5, 0.0, 1.0),
    (0.5, -0.5, -0.5, 1.0, 1.0),
    (0.5, -0.5, 0.5, 1.0, 0.0),
    (0.5, -0.5, 0.5, 1.0, 0.0),
    (-0.5, -0.5, 0.5, 0.0, 0.0),
    (-0.5, -0.5, -0.5, 0.0, 1.0),
    # top
    (-0.5, 0.5, -0.5, 0.0, 1.0),
    (0.5, 0.5, 0.5, 1.0, 0.0),
    (0.5, 0.5, -0.5, 1.0, 1.0),
    (0.5, 0.5, 0.5, 1.0, 0.0),
    (-0.5, 0.5, -0.5, 0.0, 1.0),
    (-0.5, 0.5, 0.5, 0.0, 0.0),
)

PYRAMID_SQUARE: tuple[Vec3, ...] = (
    (0.0, 1.0, 0.0),
    (-1.0, -1.0, 1.0),
    (1.0, -1.0, 1.0),

    (0.0, 1.0, 0.0),
    (1.0, -1.0, 1.0),
    (1.0, -1.0, -1.0),

    (0.0, 1.0, 0.0),
    (1.0, -1.0, -1.0),
    (-1.0, -1.0, -1.0),

    (0.0, 1.0, 0.0),
    (-1.0, -1.0, -1.0),
    (-1.0, -1.0, 1.0),
)

SQUARE_VERTICES: tuple[Vec2, ...] = (
    (0.0, 0.5),
    (0.5, -0.5),
    (-0.5, -0.5),
)

SQUARE_VERTICES_3D: tuple[Vec3, ...] = (
    (-0.5, -0.5, 0.0),
    (0.5, -0.5, 0.0),
    (-0.5, 0.5, 0.0),
    (0.5, 0.5, 0.0),
)

# Six indices per face, faces in order far, near, left, right, top, bottom.
CUBE_INDICES_LIGHT_CCW: tuple[int, ...] = (
    0, 2, 1, 2, 3, 1,
    0, 1, 2, 1, 3, 2,
    0, 2, 1, 1, 2, 3,
    0, 1, 2, 1, 3, 2,
    0, 2, 1, 2, 3, 1,
    0, 1, 2, 1, 3, 2,
)

CUBE_INDICES_LIGHT_CW: tuple[int, ...] = (0, 1, 3, 3, 1, 2) * 6

CUBE_INDICES_LIGHT_CW_ANISOTROPIC: tuple[int, ...] = (0, 1, 2, 2, 3, 0) * 6

# Counterclockwise quad corners per face: far, near, left, right, top, bottom.
CUBE_LIGHT: tuple[Vec3, ...] = (
    # far
    (0.5, -0.5, 0.5),
    (0.5, 0.5, 0.5),
    (-0.5, 0.5, 0.5),
    (-0.5, -0.5, 0.5),
    # near
    (-0.5, -0.5, -0.5),
    (-0.5, 0.5, -0.5),
    (0.5, 0.5, -0.5),
    (0.5, -0.5, -0.5),
    # left
    (-0.5, -0.5, 0.5),
    (-0.5, 0.5, 0.5),
    (-0.5, 0.5, -0.5),
    (-0.5, -0.5, -0.5),
    # right
    (0.5, -0.5, -0.5),
    (0.5, 0.5, -0.5),
    (0.5, 0.5, 0.5),
    (0.5, -0.5, 0.5),
    # top
    (-0.5, 0.5, -0.5),
    (-0.5, 0.5, 0.5),
    (0.5, 0.5, 0.5),
    (0.5, 0.5, -0.5),
    # bottom
    (-0.5, -0.5, 0.5),
    (-0.5, -0.5, -0.5),
    (0.5, -0.5, -0.5),
    (0.5, -0.5, 0.5),
)

# Indices into the eight corners of a cube, two triangles per face.
CUBE_INDICES_BUFFERLESS: tuple[int, ...] = (
    0, 2, 1, 2, 3, 1,
    5, 4, 1, 1, 4, 0,
    0, 4, 6, 0, 6, 2,
    6, 5, 7, 6, 4, 5,
    2, 6, 3, 6, 7, 3,
    7, 1, 3, 7, 5, 1,
)

FACE_COUNT = 6
CORNERS_PER_FACE = 4


def cube_face_corners(face: int) -> tuple[Vec3, Vec3, Vec3, Vec3]:
    """The four corners of one cube face (0=far, 1=near, 2=left, 3=right, 4=top, 5=bottom)."""
    if not 0 <= face < FACE_COUNT:
        raise IndexError(f"cube face index out of range: {face}")
    start = face * CORNERS_PER_FACE
    return CUBE_LIGHT[start:start + CORNERS_PER_FACE]  # type: ignore[return-value]