"""Tests for polygon orientation normalisation in the planar primitives."""

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from app.services.polygon2d import (  # type: ignore
    ccw_order,
    ensure_ccw,
    is_left_of,
    line_intersection,
    point_in_triangle,
    polygon_area_2d,
)


def test_ensure_ccw_reverses_clockwise_rings() -> None:
    """Clockwise rings should be reversed to counter-clockwise order."""

    cw_ring = [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)]

    oriented = ensure_ccw(cw_ring)

    assert oriented == list(reversed(cw_ring))
    assert polygon_area_2d(oriented) > 0.0
    # The caller's list is not modified
    assert cw_ring[1] == (0.0, 1.0)


def test_ensure_ccw_leaves_degenerate_rings_unchanged() -> None:
    """Rings with fewer than three points should be copied as-is."""

    degenerate = [(0.0, 0.0), (1.0, 0.0)]

    assert ensure_ccw(degenerate) == degenerate


def test_ccw_order_is_a_permutation() -> None:
    ccw = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]
    assert ccw_order(ccw) == [0, 1, 2]
    assert ccw_order(list(reversed(ccw))) == [2, 1, 0]


def test_point_in_triangle_is_inclusive() -> None:
    a, b, c = (0.0, 0.0), (2.0, 0.0), (0.0, 2.0)
    assert point_in_triangle((0.5, 0.5), a, b, c)
    assert point_in_triangle((1.0, 0.0), a, b, c)
    assert not point_in_triangle((2.0, 2.0), a, b, c)
    # A degenerate triangle contains nothing
    assert not point_in_triangle((1.0, 0.0), a, b, (4.0, 0.0))


def test_edge_side_and_intersection() -> None:
    assert is_left_of((0.5, 1.0), (0.0, 0.0), (1.0, 0.0))
    assert is_left_of((0.5, 0.0), (0.0, 0.0), (1.0, 0.0))
    assert not is_left_of((0.5, -1.0), (0.0, 0.0), (1.0, 0.0))
    assert line_intersection((0.0, -1.0), (0.0, 1.0), (-1.0, 0.0), (1.0, 0.0)) == (0.0, 0.0)
    assert line_intersection((0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (1.0, 1.0)) is None
