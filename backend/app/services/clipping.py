"""
Centroids and N‑way intersections of planar rings.

Rings are sequences of ``(x, y)`` points in a shared planar frame, for
example longitude/latitude or the ground plane of world space.  They are
open: the last point connects back to the first without a duplicate.

``intersect_polygons`` normalises every input to counter‑clockwise
winding and folds them with Sutherland–Hodgman clipping.  The algorithm
is exact only when each clip polygon is convex.  For non‑convex clip
polygons it returns the Sutherland–Hodgman approximation; this is an
accepted limitation of the clipper, and callers needing exact results
for concave areas must decompose them first.

An empty result ring means the polygons do not overlap.  It is a normal
outcome, not an error.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from .errors import DegenerateGeometry
from .plane_projection import CLOSING_DUPLICATE_EPS, strip_closing_duplicate
from .polygon2d import ensure_ccw, is_left_of, line_intersection, polygon_area_2d
from .vectors import Vec2, dist_sq2

logger = logging.getLogger(__name__)

# Absolute area below which the centroid falls back to the vertex mean.
CENTROID_AREA_EPS = 1e-6
# Intersections with an absolute area below this are reported as empty.
MIN_INTERSECTION_AREA = 1e-12


def polygon_centroid(ring: Sequence[Vec2]) -> Vec2:
    """Compute the area‑weighted centroid of a ring.

    The standard shoelace centroid formula is used.  When the ring's
    absolute area is below ``CENTROID_AREA_EPS`` (collinear or tiny
    rings) the arithmetic mean of the points is returned instead.

    Args:
        ring: Ring of at least one (x, y) point.  A closing duplicate of
            the first point is ignored.

    Returns:
        The centroid as an (x, y) tuple.

    Raises:
        DegenerateGeometry: If ``ring`` is empty.
    """
    pts = [(p[0], p[1]) for p in strip_closing_duplicate(ring)]
    n = len(pts)
    if n == 0:
        raise DegenerateGeometry("centroid of an empty ring")
    if n == 1:
        return pts[0]

    area = 0.0
    cx = 0.0
    cy = 0.0
    for i in range(n):
        x0, y0 = pts[i]
        x1, y1 = pts[(i + 1) % n]
        cross = x0 * y1 - x1 * y0
        area += cross
        cx += (x0 + x1) * cross
        cy += (y0 + y1) * cross
    area *= 0.5

    if abs(area) < CENTROID_AREA_EPS:
        return (sum(p[0] for p in pts) / n, sum(p[1] for p in pts) / n)
    return (cx / (6.0 * area), cy / (6.0 * area))


def clip_polygon_with_polygon(subject: Sequence[Vec2], clip: Sequence[Vec2]) -> List[Vec2]:
    """Clip ``subject`` against every edge of ``clip`` (Sutherland–Hodgman).

    Both polygons must be counter‑clockwise.  A point is inside an edge
    A→B when it lies on or left of it.  For each consecutive subject pair
    (S, E): both inside keeps E; entering keeps the crossing then E;
    leaving keeps the crossing only; both outside keeps nothing.  Crossings
    with a nearly parallel edge are skipped.

    Args:
        subject: CCW polygon being clipped.
        clip: CCW clip polygon, exact when convex.

    Returns:
        The clipped ring, empty when nothing remains.
    """
    if not subject or not clip:
        return []

    output: List[Vec2] = list(subject)
    count = len(clip)
    for i in range(count):
        clip_a = clip[i]
        clip_b = clip[(i + 1) % count]

        input_list = output
        output = []
        if not input_list:
            break

        s = input_list[-1]
        for e in input_list:
            e_inside = is_left_of(e, clip_a, clip_b)
            s_inside = is_left_of(s, clip_a, clip_b)
            if e_inside:
                if not s_inside:
                    inter = line_intersection(s, e, clip_a, clip_b)
                    if inter is not None:
                        output.append(inter)
                output.append(e)
            elif s_inside:
                inter = line_intersection(s, e, clip_a, clip_b)
                if inter is not None:
                    output.append(inter)
            s = e
    return output


def _drop_repeated_points(ring: Sequence[Vec2]) -> List[Vec2]:
    """Remove consecutive repeats, including the wrap from last to first."""
    cleaned: List[Vec2] = []
    for p in ring:
        if cleaned and dist_sq2(cleaned[-1], p) < CLOSING_DUPLICATE_EPS:
            continue
        cleaned.append(p)
    while len(cleaned) > 1 and dist_sq2(cleaned[-1], cleaned[0]) < CLOSING_DUPLICATE_EPS:
        cleaned.pop()
    return cleaned


def intersect_polygons(polygons: Sequence[Sequence[Vec2]]) -> List[Vec2]:
    """Compute the common intersection of any number of polygons.

    Closing duplicates are stripped and every polygon is normalised to
    CCW first.  The first one becomes the running subject and is clipped
    by each following polygon in turn, stopping as soon as the subject is
    empty.

    Args:
        polygons: Rings of (x, y) points.  An empty sequence yields an
            empty ring; a single polygon yields its CCW copy.

    Returns:
        The intersection as a single outer ring without repeated points
        or a closing duplicate, or an empty list when the polygons do not
        overlap.  Remnants with fewer than three points or an area below
        ``MIN_INTERSECTION_AREA`` (polygons that only touch) are reported
        as empty.

    Raises:
        DegenerateGeometry: If any polygon has fewer than three points.
    """
    if not polygons:
        return []
    rings: List[List[Vec2]] = []
    for idx, poly in enumerate(polygons):
        ring = [(p[0], p[1]) for p in strip_closing_duplicate(poly)]
        if len(ring) < 3:
            raise DegenerateGeometry(
                f"polygon {idx} needs at least 3 points, got {len(ring)}"
            )
        rings.append(ensure_ccw(ring))

    result = rings[0]
    for clip in rings[1:]:
        result = clip_polygon_with_polygon(result, clip)
        if not result:
            break
    result = _drop_repeated_points(result)
    if len(result) < 3 or abs(polygon_area_2d(result)) < MIN_INTERSECTION_AREA:
        logger.debug("intersect_polygons: %d polygons have no common area", len(rings))
        return []
    return result
