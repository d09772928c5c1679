"""
Small vector helpers shared by the geometry kernel.

Points and vectors are plain tuples of floats: ``(x, y)`` in the plane
and ``(x, y, z)`` in space.  The helpers are free pure functions so that
the plane fitter, the triangulator and the clipper can share them
without depending on any container type.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]


def dot(a: Vec3, b: Vec3) -> float:
    """Compute the dot product of two 3D vectors.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        The scalar dot product ``a·b``.
    """
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def sub(a: Vec3, b: Vec3) -> Vec3:
    """Subtract two 3D vectors (a - b)."""
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def add(a: Vec3, b: Vec3) -> Vec3:
    """Add two 3D vectors."""
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def scale(a: Vec3, s: float) -> Vec3:
    """Scale a 3D vector by ``s``."""
    return (a[0] * s, a[1] * s, a[2] * s)


def cross(a: Vec3, b: Vec3) -> Vec3:
    """Return the cross product ``a × b``."""
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def length_sq(a: Vec3) -> float:
    return dot(a, a)


def normalize(a: Vec3) -> Vec3:
    """Return ``a`` scaled to unit length.

    A zero vector is returned unchanged; callers that cannot accept a
    null result check ``length_sq`` first.
    """
    length = math.sqrt(length_sq(a))
    if length == 0.0:
        return a
    return scale(a, 1.0 / length)


def mean_point(points: Sequence[Sequence[float]]) -> Tuple[float, ...]:
    """Arithmetic mean of a non-empty sequence of equally sized points."""
    n = len(points)
    dims = len(points[0])
    return tuple(sum(p[k] for p in points) / n for k in range(dims))


# --- 2D helpers ---


def sub2(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def dot2(a: Vec2, b: Vec2) -> float:
    return a[0] * b[0] + a[1] * b[1]


def cross2(a: Vec2, b: Vec2) -> float:
    """Return the z component of the 2D cross product ``a × b``.

    Positive when ``b`` lies counter-clockwise of ``a``.
    """
    return a[0] * b[1] - a[1] * b[0]


def dist_sq2(a: Vec2, b: Vec2) -> float:
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return dx * dx + dy * dy
