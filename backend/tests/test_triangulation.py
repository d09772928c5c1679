"""
Tests for ear‑clipping triangulation.

These tests exercise convex and concave polygons in both windings and
check the invariants the renderer relies on: ``n - 2`` triangles that
use every vertex, area conservation, consistent winding and UVs inside
the unit square.  Non‑simple and degenerate input must fail loudly.
"""

from __future__ import annotations

import math
import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from app.services.errors import TriangulationFailed
from app.services.polygon2d import polygon_area_2d, triangle_area_2
from app.services.triangulation import ear_clip_shortest_diagonal, index_dtype, triangulate

L_SHAPE = [(0.0, 0.0), (2.0, 0.0), (2.0, 1.0), (1.0, 1.0), (1.0, 2.0), (0.0, 2.0)]


def _circle(n: int, radius: float = 1.0) -> list:
    return [
        (radius * math.cos(2 * math.pi * k / n), radius * math.sin(2 * math.pi * k / n))
        for k in range(n)
    ]


def _triangle_area_sum(points: list, triangles: np.ndarray) -> float:
    return sum(
        abs(triangle_area_2(points[a], points[b], points[c])) * 0.5 for a, b, c in triangles
    )


@pytest.mark.parametrize("n", [3, 4, 7, 32])
def test_convex_polygon_triangle_count(n: int) -> None:
    """A simple n‑gon yields n‑2 triangles covering every index."""
    pts = _circle(n)
    result = triangulate(pts)
    assert result.triangles.shape == (n - 2, 3)
    assert set(result.triangles.reshape(-1).tolist()) == set(range(n))


def test_concave_l_shape() -> None:
    """The L shape is triangulated without covering its notch."""
    result = triangulate(L_SHAPE)
    assert len(result.triangles) == 4
    assert math.isclose(_triangle_area_sum(L_SHAPE, result.triangles), 3.0, rel_tol=1e-4)
    for a, b, c in result.triangles:
        assert triangle_area_2(L_SHAPE[a], L_SHAPE[b], L_SHAPE[c]) >= 0.0


def test_area_is_conserved() -> None:
    """Triangle areas add up to the shoelace area of the ring."""
    star = []
    for k in range(10):
        r = 2.0 if k % 2 == 0 else 0.8
        angle = 2 * math.pi * k / 10
        star.append((r * math.cos(angle), r * math.sin(angle)))
    result = triangulate(star)
    expected = abs(polygon_area_2d(star))
    assert math.isclose(_triangle_area_sum(star, result.triangles), expected, rel_tol=1e-4)


def test_clockwise_input_keeps_original_indices() -> None:
    """Clockwise input is walked in reverse but indices refer to the caller's order."""
    cw = list(reversed(L_SHAPE))
    result = triangulate(cw)
    assert result.order == list(range(len(cw) - 1, -1, -1))
    assert len(result.triangles) == len(cw) - 2
    # Indices are remapped, so triangles stay counter‑clockwise in the plane
    for a, b, c in result.triangles:
        assert triangle_area_2(cw[a], cw[b], cw[c]) >= 0.0
    assert math.isclose(_triangle_area_sum(cw, result.triangles), 3.0, rel_tol=1e-4)


def test_uvs_cover_unit_square() -> None:
    """UVs are the bounding‑box normalised coordinates, one per vertex."""
    rect = [(0.0, 0.0), (4.0, 0.0), (4.0, 2.0), (0.0, 2.0)]
    result = triangulate(rect)
    assert result.uvs.shape == (4, 2)
    assert result.uvs.tolist() == [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]]


def test_two_points_fail() -> None:
    with pytest.raises(TriangulationFailed):
        triangulate([(0.0, 0.0), (1.0, 0.0)])


def test_zero_area_fails() -> None:
    """Collinear points have no area to fill."""
    with pytest.raises(TriangulationFailed):
        triangulate([(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)])


def test_bowtie_fails() -> None:
    """A self‑intersecting ring cannot be triangulated."""
    with pytest.raises(TriangulationFailed):
        triangulate([(0.0, 0.0), (2.0, 2.0), (2.0, 0.0), (0.0, 2.0)])


def test_no_ear_raises() -> None:
    """A clockwise ring handed directly to the ear clipper has no convex ear."""
    cw_square = [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)]
    with pytest.raises(TriangulationFailed):
        ear_clip_shortest_diagonal(cw_square)


def test_shortest_diagonal_is_preferred() -> None:
    """For a long thin quad the first ear clipped uses the short diagonal."""
    quad = [(0.0, 0.0), (10.0, 0.0), (10.5, 1.0), (0.0, 1.0)]
    tris = ear_clip_shortest_diagonal(quad)
    first = tris[0]
    # The short diagonal joins vertices 1 and 3 through the ear at vertex 0 or 2
    assert {first[0], first[2]} == {1, 3}


def test_index_dtype_switches_above_uint16_range() -> None:
    assert index_dtype(3) is np.uint16
    assert index_dtype(65535) is np.uint16
    assert index_dtype(65536) is np.uint32


def test_small_polygon_uses_uint16() -> None:
    result = triangulate(_circle(8))
    assert result.triangles.dtype == np.uint16
    assert result.index_format == "uint16"


def test_closed_ring_is_triangulated() -> None:
    """A ring repeating its first point at the end triangulates like the open ring."""
    square = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
    result = triangulate(square + [square[0]])
    assert result.triangles.shape == (2, 3)
    assert set(result.triangles.reshape(-1).tolist()) == {0, 1, 2, 3}
    assert result.uvs.shape == (4, 2)
    assert math.isclose(_triangle_area_sum(square, result.triangles), 1.0, rel_tol=1e-9)
