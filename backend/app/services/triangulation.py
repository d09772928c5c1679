"""
Ear‑clipping triangulation of simple 2D polygons.

``triangulate`` accepts a simple, possibly non‑convex polygon in any
winding and returns a triangle index list over the caller's original
point order together with planar UV coordinates.  The steps are:

1. Normalise winding once.  The shoelace area decides whether the
   working copy walks the input forwards or backwards; the permutation
   is kept in ``order`` and the input is never reordered.
2. Clip ears.  Every pass scans all active vertices and, among the valid
   ears, removes the one whose diagonal is shortest.  Preferring short
   diagonals gives better shaped triangles and fewer slivers than taking
   the first valid ear.
3. Force each triangle counter‑clockwise in the working frame.
4. Generate UVs by normalising the working polygon's bounding box.

Index buffers use ``uint16`` up to 65535 vertices and ``uint32`` above
that, so large rings are never truncated.
"""

from __future__ import annotations

import os
import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .errors import TriangulationFailed
from .plane_projection import strip_closing_duplicate
from .polygon2d import (
    DEGENERATE_TRIANGLE_EPS,
    bounding_box_2d,
    ccw_order,
    is_convex,
    point_in_triangle,
    polygon_area_2d,
    triangle_area_2,
)
from .vectors import Vec2, dist_sq2

logger = logging.getLogger(__name__)

# Largest vertex count addressable with 16‑bit indices.
MAX_UINT16_VERTICES = 65535
# Polygons with |shoelace area| below this cannot be triangulated.
MIN_POLYGON_AREA = 1e-12
# UV extents below this are replaced by 1.0 to avoid dividing by zero.
MIN_UV_EXTENT = 1e-6


@dataclass
class Triangulation:
    """Result of :func:`triangulate`.

    Attributes:
        triangles: ``(T, 3)`` index array into the caller's original
            points.  ``T == N - 2`` for a simple polygon with ``N``
            vertices.
        uvs: ``(N, 2)`` float array, one planar UV per original vertex.
        order: Permutation mapping working (CCW) positions to original
            indices.
    """

    triangles: np.ndarray
    uvs: np.ndarray
    order: List[int]

    @property
    def index_format(self) -> str:
        return "uint32" if self.triangles.dtype == np.uint32 else "uint16"


def index_dtype(vertex_count: int) -> type:
    """Pick the narrowest index dtype able to address ``vertex_count`` vertices."""
    return np.uint32 if vertex_count > MAX_UINT16_VERTICES else np.uint16


def _contains_any_point(poly: Sequence[Vec2], active: Sequence[int], i0: int, i1: int, i2: int) -> bool:
    """True if triangle (i0, i1, i2) is degenerate or holds another active vertex."""
    a, b, c = poly[i0], poly[i1], poly[i2]
    if abs(triangle_area_2(a, b, c)) < DEGENERATE_TRIANGLE_EPS:
        return True
    for idx in active:
        if idx == i0 or idx == i1 or idx == i2:
            continue
        if point_in_triangle(poly[idx], a, b, c):
            return True
    return False


def ear_clip_shortest_diagonal(poly: Sequence[Vec2]) -> List[Tuple[int, int, int]]:
    """Triangulate a counter‑clockwise simple polygon by ear clipping.

    At every step all active vertices are scanned and the valid ear with
    the smallest squared diagonal ``|a - c|²`` is clipped.  Ties keep the
    first ear found.

    Args:
        poly: CCW polygon with at least three vertices.

    Returns:
        Triangles as index triples into ``poly``.

    Raises:
        TriangulationFailed: If a full scan finds no valid ear.
    """
    n = len(poly)
    if n < 3:
        raise TriangulationFailed(f"polygon needs at least 3 points, got {n}")
    active = list(range(n))
    tris: List[Tuple[int, int, int]] = []
    while len(active) > 3:
        count = len(active)
        best_k = -1
        best_diag2 = float("inf")
        for k in range(count):
            i0 = active[(k + count - 1) % count]
            i1 = active[k]
            i2 = active[(k + 1) % count]
            a, b, c = poly[i0], poly[i1], poly[i2]
            if not is_convex(a, b, c):
                continue
            if _contains_any_point(poly, active, i0, i1, i2):
                continue
            d2 = dist_sq2(a, c)
            if d2 < best_diag2:
                best_diag2 = d2
                best_k = k
        if best_k == -1:
            raise TriangulationFailed(
                f"no valid ear among {count} remaining vertices; "
                "check that the polygon is simple and without self-intersections"
            )
        tris.append((
            active[(best_k + count - 1) % count],
            active[best_k],
            active[(best_k + 1) % count],
        ))
        active.pop(best_k)
    tris.append((active[0], active[1], active[2]))
    return tris


def ensure_triangles_ccw(poly: Sequence[Vec2], tris: List[Tuple[int, int, int]]) -> List[Tuple[int, int, int]]:
    """Swap the last two indices of every clockwise triangle."""
    fixed: List[Tuple[int, int, int]] = []
    for a, b, c in tris:
        if triangle_area_2(poly[a], poly[b], poly[c]) < 0.0:
            fixed.append((a, c, b))
        else:
            fixed.append((a, b, c))
    return fixed


def planar_uvs(poly: Sequence[Vec2], order: Sequence[int]) -> np.ndarray:
    """Normalise the working polygon into its bounding box and scatter to original order."""
    (min_x, min_y), (max_x, max_y) = bounding_box_2d(poly)
    size_x = max_x - min_x
    size_y = max_y - min_y
    if size_x < MIN_UV_EXTENT:
        size_x = 1.0
    if size_y < MIN_UV_EXTENT:
        size_y = 1.0
    uvs = np.zeros((len(poly), 2), dtype=np.float64)
    for k, (x, y) in enumerate(poly):
        uvs[order[k]] = ((x - min_x) / size_x, (y - min_y) / size_y)
    return uvs


def triangulate(points: Sequence[Vec2]) -> Triangulation:
    """Triangulate a simple 2D polygon and compute planar UVs.

    Args:
        points: Ring of (x, y) points in either winding.  A closing
            duplicate of the first point is dropped.  The sequence is not
            modified.

    Returns:
        A :class:`Triangulation` whose indices refer to ``points``; a
        dropped closing duplicate is never referenced and has no UV.

    Raises:
        TriangulationFailed: If fewer than three points are given, the
            polygon has no area, or no valid ear can be found.
    """
    pts = [(p[0], p[1]) for p in strip_closing_duplicate(points)]
    n = len(pts)
    if n < 3:
        raise TriangulationFailed(f"polygon needs at least 3 points, got {n}")
    area = polygon_area_2d(pts)
    if abs(area) < MIN_POLYGON_AREA:
        raise TriangulationFailed("degenerate polygon with zero area")
    order = ccw_order(pts)
    poly = [pts[i] for i in order]

    work_tris = ensure_triangles_ccw(poly, ear_clip_shortest_diagonal(poly))

    dtype = index_dtype(n)
    triangles = np.array(
        [(order[a], order[b], order[c]) for a, b, c in work_tris],
        dtype=dtype,
    ).reshape(-1, 3)
    uvs = planar_uvs(poly, order)
    if os.getenv("AREA_DEBUG"):
        logger.debug(
            "triangulate: vertices=%d triangles=%d area=%.6g reversed=%s dtype=%s",
            n,
            len(triangles),
            area,
            area < 0.0,
            np.dtype(dtype).name,
        )
    return Triangulation(triangles=triangles, uvs=uvs, order=order)
