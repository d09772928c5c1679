"""
Planar polygon primitives used by the triangulator and the clipper.

All functions operate on sequences of ``(x, y)`` tuples and never
mutate their input.  The sign convention is counter‑clockwise (CCW)
positive: the shoelace area of a CCW ring is positive, and a point is
"inside" a directed edge when it lies on the edge's left.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .vectors import Vec2, cross2, dot2, sub2

# Convexity threshold for ear tips.
CONVEX_EPS = 1e-8
# Triangles whose doubled area is below this are treated as degenerate.
DEGENERATE_TRIANGLE_EPS = 1e-10
# Barycentric tolerance for the inclusive point‑in‑triangle test.
BARYCENTRIC_EPS = 1e-6
# Segment/edge pairs whose direction cross product is below this are parallel.
PARALLEL_EPS = 1e-8


def polygon_area_2d(points: Sequence[Vec2]) -> float:
    """Compute the signed area of a 2D polygon using the shoelace formula.

    The polygon is assumed to be closed (the last point is implicitly
    connected to the first).  The area is positive for counter‑clockwise
    rings and negative for clockwise ones.

    Args:
        points: Sequence of (x, y) points defining the polygon.

    Returns:
        The signed area, or 0.0 for fewer than three points.
    """
    n = len(points)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        x0, y0 = points[i]
        x1, y1 = points[(i + 1) % n]
        area += x0 * y1 - x1 * y0
    return 0.5 * area


def ccw_order(points: Sequence[Vec2]) -> List[int]:
    """Return the index permutation that walks ``points`` counter‑clockwise.

    The identity order is returned when the signed area is non‑negative,
    otherwise the reversed order.  The caller's sequence is left untouched
    so that results can be mapped back to the original numbering.
    """
    n = len(points)
    if polygon_area_2d(points) >= 0.0:
        return list(range(n))
    return list(range(n - 1, -1, -1))


def ensure_ccw(points: Sequence[Vec2]) -> List[Vec2]:
    """Return a copy of ``points`` in counter‑clockwise order.

    Rings with fewer than three points are copied unchanged.
    """
    ring = [(float(p[0]), float(p[1])) for p in points]
    if len(ring) < 3:
        return ring
    if polygon_area_2d(ring) < 0.0:
        ring.reverse()
    return ring


def is_convex(a: Vec2, b: Vec2, c: Vec2) -> bool:
    """True when the turn a→b→c is strictly counter‑clockwise."""
    return cross2(sub2(b, a), sub2(c, b)) > CONVEX_EPS


def triangle_area_2(a: Vec2, b: Vec2, c: Vec2) -> float:
    """Twice the signed area of triangle ``abc`` (``cross(b-a, c-a)``)."""
    return cross2(sub2(b, a), sub2(c, a))


def point_in_triangle(p: Vec2, a: Vec2, b: Vec2, c: Vec2) -> bool:
    """Inclusive barycentric point‑in‑triangle test.

    Points on the boundary (within ``BARYCENTRIC_EPS``) count as inside.
    A degenerate triangle contains nothing.
    """
    v0 = sub2(c, a)
    v1 = sub2(b, a)
    v2 = sub2(p, a)
    dot00 = dot2(v0, v0)
    dot01 = dot2(v0, v1)
    dot02 = dot2(v0, v2)
    dot11 = dot2(v1, v1)
    dot12 = dot2(v1, v2)
    denom = dot00 * dot11 - dot01 * dot01
    if abs(denom) < 1e-12:
        return False
    u = (dot11 * dot02 - dot01 * dot12) / denom
    v = (dot00 * dot12 - dot01 * dot02) / denom
    return u >= -BARYCENTRIC_EPS and v >= -BARYCENTRIC_EPS and u + v <= 1.0 + BARYCENTRIC_EPS


def is_left_of(p: Vec2, a: Vec2, b: Vec2) -> bool:
    """True when ``p`` lies on or to the left of the directed edge a→b."""
    return cross2(sub2(b, a), sub2(p, a)) >= 0.0


def line_intersection(p1: Vec2, p2: Vec2, p3: Vec2, p4: Vec2) -> Optional[Vec2]:
    """Intersect the line through p1–p2 with the line through p3–p4.

    Uses the cross‑product parametrisation ``p1 + t * (p2 - p1)``.  Lines
    that are parallel or nearly so (``|cross(d1, d2)| < PARALLEL_EPS``)
    yield ``None``.
    """
    d1 = sub2(p2, p1)
    d2 = sub2(p4, p3)
    denom = cross2(d1, d2)
    if abs(denom) < PARALLEL_EPS:
        return None
    t = cross2(sub2(p3, p1), d2) / denom
    return (p1[0] + d1[0] * t, p1[1] + d1[1] * t)


def bounding_box_2d(points: Sequence[Vec2]) -> Tuple[Vec2, Vec2]:
    """Return ``(min_xy, max_xy)`` of a non‑empty point sequence."""
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return (min(xs), min(ys)), (max(xs), max(ys))
