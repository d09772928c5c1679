"""
Ramer–Douglas–Peucker simplification for closed rings.

Layers may carry a line simplification tolerance.  Dense boundaries
coming from terrain snapping are thinned with this module before they
reach the plane fitter and the triangulator.  The helpers work on 2D and
3D points alike; distances are measured perpendicular to the chord in
whatever dimension the points have.

Rings are open (no closing duplicate) on input and output.
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

Point = Tuple[float, ...]


def _point_segment_distance(p: Point, a: Point, b: Point) -> float:
    """Distance from ``p`` to the infinite line through ``a`` and ``b``.

    Falls back to the distance to ``a`` when ``a`` and ``b`` coincide.
    """
    ab = [bi - ai for ai, bi in zip(a, b)]
    ap = [pi - ai for ai, pi in zip(a, p)]
    ab_len_sq = sum(c * c for c in ab)
    if ab_len_sq == 0.0:
        return math.sqrt(sum(c * c for c in ap))
    t = sum(x * y for x, y in zip(ap, ab)) / ab_len_sq
    perp = [x - t * y for x, y in zip(ap, ab)]
    return math.sqrt(sum(c * c for c in perp))


def _rdp_rec(points: Sequence[Point], first: int, last: int, tol: float, keep: List[bool]) -> None:
    """Recursive helper for Ramer–Douglas–Peucker simplification.

    Marks points to keep in the ``keep`` list.  The point with the maximum
    distance to the chord ``first``–``last`` is kept when that distance
    exceeds the tolerance, and both halves are processed recursively.
    """
    max_dist = 0.0
    index = -1
    a = points[first]
    b = points[last]
    for i in range(first + 1, last):
        dist = _point_segment_distance(points[i], a, b)
        if dist > max_dist:
            max_dist = dist
            index = i
    if max_dist > tol and index != -1:
        keep[index] = True
        _rdp_rec(points, first, index, tol, keep)
        _rdp_rec(points, index, last, tol, keep)


def simplify_ring(points: Sequence[Sequence[float]], tolerance: float) -> List[Point]:
    """Simplify a closed ring with the Ramer–Douglas–Peucker algorithm.

    The ring is split at the vertex farthest from the first vertex; both
    halves are simplified as open polylines and joined again so that the
    closing edge is treated like any other edge.

    Args:
        points: Open ring of 2D or 3D points.
        tolerance: Maximum allowed deviation.  Values ``<= 0`` disable
            simplification.

    Returns:
        The simplified open ring.  If simplification would leave fewer
        than three points the input ring is returned unchanged.
    """
    pts: List[Point] = [tuple(float(c) for c in p) for p in points]
    n = len(pts)
    if n < 4 or tolerance <= 0.0:
        return pts
    # Split at the vertex farthest from the start so the ring becomes two chains
    origin = pts[0]
    split = max(
        range(1, n),
        key=lambda i: sum((x - y) ** 2 for x, y in zip(pts[i], origin)),
    )
    chain = pts + [pts[0]]
    keep = [False] * (n + 1)
    keep[0] = True
    keep[split] = True
    keep[n] = True
    _rdp_rec(chain, 0, split, tolerance, keep)
    _rdp_rec(chain, split, n, tolerance, keep)
    simplified = [chain[i] for i in range(n) if keep[i]]
    if len(simplified) < 3:
        return pts
    return simplified
