"""
Label placement for areas.

A label sits at the area‑weighted centroid of the boundary as seen on
the ground plane and is sized from the boundary's extent, so large areas
get larger text.  Snapping the anchor onto the terrain surface is left
to the viewer; the anchor height here is the mean elevation of the ring.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .clipping import polygon_centroid
from .plane_projection import ground_axes, lift_from_ground, project_to_ground, strip_closing_duplicate
from .vectors import Vec2, Vec3

DEFAULT_LABEL_BASE_SIZE = 0.2
DEFAULT_LABEL_EXTENT_FACTOR = 0.02
MIN_LABEL_SIZE = 1e-5


@dataclass
class LabelPlacement:
    """Where and how large to draw an area's label."""

    anchor: Vec3
    anchor_uv: Vec2
    size: float


def compute_label_size(
    points_uv: Sequence[Vec2],
    base_size: float = DEFAULT_LABEL_BASE_SIZE,
    extent_factor: float = DEFAULT_LABEL_EXTENT_FACTOR,
) -> float:
    """Return a character size that grows linearly with the ring's extent.

    The extent is the larger side of the ground‑plane bounding box.  Rings
    with no extent get ``base_size``.
    """
    if not points_uv:
        return base_size
    us = [p[0] for p in points_uv]
    vs = [p[1] for p in points_uv]
    extent = max(max(us) - min(us), max(vs) - min(vs))
    if extent <= 1e-6:
        return base_size
    return max(base_size + extent * extent_factor, MIN_LABEL_SIZE)


def place_label(
    ring: Sequence[Sequence[float]],
    plane: str = "xz",
    base_size: float = DEFAULT_LABEL_BASE_SIZE,
    extent_factor: float = DEFAULT_LABEL_EXTENT_FACTOR,
) -> LabelPlacement:
    """Compute the label anchor and size for a world‑space ring.

    A closing duplicate of the first point is ignored.

    Raises:
        DegenerateGeometry: If ``ring`` is empty.
    """
    ring = strip_closing_duplicate(ring)
    points_uv = project_to_ground(ring, plane)
    centroid = polygon_centroid(points_uv)
    _, _, up = ground_axes(plane)
    height = sum(float(p[up]) for p in ring) / len(ring)
    anchor = lift_from_ground([centroid], plane, height)[0]
    return LabelPlacement(
        anchor=anchor,
        anchor_uv=centroid,
        size=compute_label_size(points_uv, base_size, extent_factor),
    )
