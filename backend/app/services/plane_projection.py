"""
Best‑fit plane estimation and 3D ⇄ 2D projection for area rings.

Area boundaries are snapped onto an undulating terrain, so their points
are near‑planar but almost never exactly planar.  This module fits a
plane to such a ring with Newell's method, derives a deterministic
orthonormal ``(u, v)`` basis on it and maps points between world space
and the plane's 2D coordinate system.

A ``PlaneBasis`` uses the ring's own centroid as its origin, so the
projected polygon is well conditioned regardless of where the ring sits
in world space.  The inverse mapping ``lift`` is the exact algebraic
inverse of ``project`` for points lying on the plane.

The module also provides the axis‑aligned ``ground plane`` projection
(``"xy"``, ``"xz"`` or ``"yz"``) used to put world‑space features into a
shared 2D frame for labels and intersections.  Debug logging is enabled
via the ``AREA_DEBUG`` environment variable.
"""

from __future__ import annotations

import os
import logging
from dataclasses import dataclass
from typing import Iterable, List, Literal, Sequence, Tuple

from .errors import DegenerateGeometry
from .vectors import Vec2, Vec3, add, cross, dot, length_sq, mean_point, normalize, scale, sub

logger = logging.getLogger(__name__)

GroundPlane = Literal["xy", "xz", "yz"]

# Squared normal length below which a ring is considered collinear or empty.
DEGENERATE_NORMAL_EPS = 1e-10
# Squared distance under which the last point duplicates the first.
CLOSING_DUPLICATE_EPS = 1e-10
# |dot(normal, right)| above which "right" is too close to the normal.
PARALLEL_AXIS_LIMIT = 0.9

WORLD_RIGHT: Vec3 = (1.0, 0.0, 0.0)
WORLD_UP: Vec3 = (0.0, 1.0, 0.0)


@dataclass(frozen=True)
class PlaneBasis:
    """Orthonormal frame on a best‑fit plane.

    Attributes:
        origin: Reference point on the plane, the arithmetic mean of the
            ring the basis was fitted to.
        normal: Unit normal of the plane.
        u: Unit in‑plane axis mapped to the 2D x coordinate.
        v: Unit in‑plane axis mapped to the 2D y coordinate.  ``u × v``
            equals ``normal`` so counter‑clockwise in 2D faces the normal.
    """

    origin: Vec3
    normal: Vec3
    u: Vec3
    v: Vec3


def strip_closing_duplicate(ring: Sequence[Sequence[float]]) -> List[Tuple[float, ...]]:
    """Return ``ring`` as a list of tuples without a closing duplicate point.

    The last point is dropped when its squared distance to the first is
    below ``CLOSING_DUPLICATE_EPS``.  Works for 2D and 3D points.
    """
    points = [tuple(float(c) for c in p) for p in ring]
    if len(points) >= 2:
        first, last = points[0], points[-1]
        d2 = sum((a - b) ** 2 for a, b in zip(first, last))
        if d2 < CLOSING_DUPLICATE_EPS:
            points.pop()
    return points


def newell_normal(ring: Sequence[Vec3]) -> Vec3:
    """Accumulate the (unnormalised) polygon normal with Newell's method.

    Every consecutive pair of points contributes, including the wrap from
    the last point back to the first.  The result's length is twice the
    area of the polygon projected onto its plane, so a near‑zero length
    flags a collinear or zero‑area ring.
    """
    nx = ny = nz = 0.0
    count = len(ring)
    for i in range(count):
        cx, cy, cz = ring[i]
        px, py, pz = ring[(i + 1) % count]
        nx += (cy - py) * (cz + pz)
        ny += (cz - pz) * (cx + px)
        nz += (cx - px) * (cy + py)
    return (nx, ny, nz)


def plane_basis_from_normal(normal: Vec3, origin: Vec3) -> PlaneBasis:
    """Build a deterministic in‑plane basis for a unit ``normal``.

    World right is projected onto the plane unless it is nearly parallel
    to the normal, in which case world up is used instead.
    """
    axis = WORLD_RIGHT if abs(dot(normal, WORLD_RIGHT)) <= PARALLEL_AXIS_LIMIT else WORLD_UP
    u = normalize(cross(normal, cross(axis, normal)))
    v = normalize(cross(normal, u))
    return PlaneBasis(origin=origin, normal=normal, u=u, v=v)


def fit_plane(ring: Sequence[Vec3]) -> PlaneBasis:
    """Fit a best‑fit plane and 2D basis to a ring of 3D points.

    Args:
        ring: Ordered ring of at least three 3D points without a closing
            duplicate.

    Returns:
        The fitted :class:`PlaneBasis`.

    Raises:
        DegenerateGeometry: If fewer than three points are supplied or the
            points are collinear (null Newell normal).
    """
    points = [(float(p[0]), float(p[1]), float(p[2])) for p in ring]
    if len(points) < 3:
        raise DegenerateGeometry(f"plane fit needs at least 3 points, got {len(points)}")
    n = newell_normal(points)
    if length_sq(n) < DEGENERATE_NORMAL_EPS:
        raise DegenerateGeometry("degenerate polygon normal (collinear or zero-area ring)")
    origin = mean_point(points)
    basis = plane_basis_from_normal(normalize(n), (origin[0], origin[1], origin[2]))
    if os.getenv("AREA_DEBUG"):
        logger.debug(
            "fit_plane: points=%d origin=%s normal=%s u=%s v=%s",
            len(points),
            basis.origin,
            basis.normal,
            basis.u,
            basis.v,
        )
    return basis


def project(ring: Iterable[Vec3], basis: PlaneBasis) -> List[Vec2]:
    """Project 3D points into the 2D coordinate system of ``basis``."""
    result: List[Vec2] = []
    for p in ring:
        rel = sub((float(p[0]), float(p[1]), float(p[2])), basis.origin)
        result.append((dot(rel, basis.u), dot(rel, basis.v)))
    return result


def lift(points_uv: Iterable[Vec2], basis: PlaneBasis) -> List[Vec3]:
    """Map 2D plane coordinates back to 3D: ``origin + x*u + y*v``."""
    result: List[Vec3] = []
    for x, y in points_uv:
        result.append(add(basis.origin, add(scale(basis.u, x), scale(basis.v, y))))
    return result


def ground_axes(plane: str) -> Tuple[int, int, int]:
    """Return ``(axis0, axis1, up_axis)`` indices for a ground plane.

    Raises:
        ValueError: If ``plane`` is not one of ``"xy"``, ``"xz"``, ``"yz"``.
    """
    pl = (plane or "xz").strip().lower()
    if pl == "xy":
        return 0, 1, 2
    elif pl == "xz":
        return 0, 2, 1
    elif pl == "yz":
        return 1, 2, 0
    raise ValueError(f"Unsupported ground plane: {plane}")


def project_to_ground(points: Iterable[Sequence[float]], plane: GroundPlane = "xz") -> List[Vec2]:
    """Drop the up coordinate of world points to get ground‑plane (u, v) pairs.

    For a Y‑up world the default ``"xz"`` plane keeps x and z.
    """
    ax0, ax1, _ = ground_axes(plane)
    return [(float(p[ax0]), float(p[ax1])) for p in points]


def lift_from_ground(points_uv: Iterable[Vec2], plane: GroundPlane, height: float) -> List[Vec3]:
    """Place ground‑plane (u, v) pairs back in 3D at a constant ``height``."""
    ax0, ax1, up = ground_axes(plane)
    result: List[Vec3] = []
    for u, v in points_uv:
        coord = [0.0, 0.0, 0.0]
        coord[ax0] = u
        coord[ax1] = v
        coord[up] = height
        result.append((coord[0], coord[1], coord[2]))
    return result
