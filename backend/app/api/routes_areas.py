"""
API routes exposing the area geometry kernel.

These endpoints accept rings directly in the request body: a 3D boundary
ring for triangulation, and 2D rings (lon/lat or ground‑plane
coordinates) for centroids and intersections.  Geometry failures are
caller errors and are reported as ``422`` responses.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from .models import (
    AreaMeshRequest,
    AreaMeshResponse,
    CentroidRequest,
    IntersectionRequest,
    IntersectionResponse,
    MeshBBox,
    PlanarPoint,
)
from ..services.area_mesh import AreaMesh, build_area_mesh
from ..services.clipping import intersect_polygons, polygon_centroid
from ..services.errors import GeometryError
from ..services.polygon2d import polygon_area_2d

logger = logging.getLogger(__name__)

router = APIRouter()


def area_mesh_response(mesh: AreaMesh) -> AreaMeshResponse:
    """Flatten an :class:`AreaMesh` into the API response schema."""
    return AreaMeshResponse(
        vertices=mesh.vertices.reshape(-1).tolist(),
        indices=mesh.triangles.reshape(-1).astype(int).tolist(),
        uvs=mesh.uvs.reshape(-1).tolist(),
        normals=mesh.normals.reshape(-1).tolist(),
        indexFormat=mesh.index_format,
        bbox=MeshBBox(min=mesh.bbox_min, max=mesh.bbox_max),
    )


def intersection_response(ring: list) -> IntersectionResponse:
    return IntersectionResponse(
        points=[PlanarPoint(x=x, y=y) for x, y in ring],
        empty=not ring,
        area=abs(polygon_area_2d(ring)),
    )


@router.post("/areas/mesh", response_model=AreaMeshResponse)
async def create_area_mesh(body: AreaMeshRequest) -> AreaMeshResponse:
    """Triangulate an area boundary into a filled, UV‑mapped mesh."""
    ring = [(p.x, p.y, p.z) for p in body.points]
    try:
        mesh = build_area_mesh(ring, simplify_tolerance=body.simplifyTolerance)
    except GeometryError as exc:
        logger.warning("area mesh rejected (%d points): %s", len(ring), exc)
        raise HTTPException(status_code=422, detail=str(exc))
    return area_mesh_response(mesh)


@router.post("/areas/centroid", response_model=PlanarPoint)
async def compute_centroid(body: CentroidRequest) -> PlanarPoint:
    """Return the area‑weighted centroid of a ring."""
    try:
        x, y = polygon_centroid([(p.x, p.y) for p in body.points])
    except GeometryError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return PlanarPoint(x=x, y=y)


@router.post("/areas/intersection", response_model=IntersectionResponse)
async def compute_intersection(body: IntersectionRequest) -> IntersectionResponse:
    """Intersect two or more rings into their common region."""
    rings = [[(p.x, p.y) for p in poly] for poly in body.polygons]
    try:
        result = intersect_polygons(rings)
    except GeometryError as exc:
        logger.warning("intersection rejected: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc))
    return intersection_response(result)
