"""
Filled mesh construction for area boundaries.

``build_area_mesh`` turns the world‑space boundary ring of an area into
a renderable surface: the closing duplicate is removed, the ring is
optionally simplified, a plane is fitted with Newell's method, the ring
is projected to 2D and triangulated, and the triangles are reattached to
the original 3D points.  Mesh vertices are exactly the (simplified)
boundary points in their original order.

The builder works in whatever coordinate frame the caller hands in.
Snapping to terrain and converting from lon/lat happen before this
module is called; attaching the result to a scene happens after.
"""

from __future__ import annotations

import os
import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .errors import DegenerateGeometry
from .plane_projection import PlaneBasis, fit_plane, project, strip_closing_duplicate
from .simplify import simplify_ring
from .triangulation import triangulate
from .vectors import Vec3

logger = logging.getLogger(__name__)


@dataclass
class AreaMesh:
    """Triangulated, UV‑mapped surface of one area.

    Attributes:
        vertices: ``(N, 3)`` float array of boundary points.
        triangles: ``(T, 3)`` index array; every triangle is
            counter‑clockwise when seen from ``basis.normal``.
        uvs: ``(N, 2)`` planar UVs in ``[0, 1]``.
        normals: ``(N, 3)`` per‑vertex normals (the plane normal).
        basis: Plane frame used for the triangulation.
    """

    vertices: np.ndarray
    triangles: np.ndarray
    uvs: np.ndarray
    normals: np.ndarray
    basis: PlaneBasis

    @property
    def index_format(self) -> str:
        return "uint32" if self.triangles.dtype == np.uint32 else "uint16"

    @property
    def bbox_min(self) -> List[float]:
        return self.vertices.min(axis=0).tolist()

    @property
    def bbox_max(self) -> List[float]:
        return self.vertices.max(axis=0).tolist()

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def triangle_count(self) -> int:
        return int(self.triangles.shape[0])


def build_area_mesh(ring: Sequence[Sequence[float]], simplify_tolerance: float = 0.0) -> AreaMesh:
    """Build a filled mesh from an area's 3D boundary ring.

    Args:
        ring: Ordered 3D boundary points.  A duplicated closing point is
            tolerated and removed.
        simplify_tolerance: Optional RDP tolerance applied before
            triangulation; ``0`` keeps every point.

    Returns:
        The assembled :class:`AreaMesh`.

    Raises:
        DegenerateGeometry: If fewer than three distinct points remain or
            the points are collinear.
        TriangulationFailed: If the projected polygon is not simple.
    """
    points = strip_closing_duplicate(ring)
    if any(len(p) != 3 for p in points):
        raise DegenerateGeometry("area rings must contain 3D points")
    if simplify_tolerance > 0.0:
        before = len(points)
        points = simplify_ring(points, simplify_tolerance)
        if os.getenv("AREA_DEBUG"):
            logger.debug(
                "build_area_mesh: simplified ring %d -> %d points (tolerance=%s)",
                before,
                len(points),
                simplify_tolerance,
            )
    if len(points) < 3:
        raise DegenerateGeometry(f"area ring needs at least 3 points, got {len(points)}")

    pts3d: List[Vec3] = [(p[0], p[1], p[2]) for p in points]
    basis = fit_plane(pts3d)
    pts2d = project(pts3d, basis)
    tri = triangulate(pts2d)

    vertices = np.array(pts3d, dtype=np.float64).reshape(-1, 3)
    normals = np.tile(np.array(basis.normal, dtype=np.float64), (len(pts3d), 1))
    mesh = AreaMesh(
        vertices=vertices,
        triangles=tri.triangles,
        uvs=tri.uvs,
        normals=normals,
        basis=basis,
    )
    if os.getenv("AREA_DEBUG"):
        logger.debug(
            "build_area_mesh: V=%d T=%d index_format=%s",
            mesh.vertex_count,
            mesh.triangle_count,
            mesh.index_format,
        )
    return mesh
