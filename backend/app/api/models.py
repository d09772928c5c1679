"""
Pydantic data models for the area geometry API.

These models define the shapes of requests and responses used by the
backend.  Rings are lists of point objects; mesh buffers are flat lists
so clients can upload them to the GPU without reshaping.  Field names
are camelCase to match the frontend.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal

from pydantic import BaseModel, Field


class WorldPoint(BaseModel):
    """Single 3D point in world space."""

    x: float
    y: float
    z: float


class PlanarPoint(BaseModel):
    """Single 2D point, e.g. longitude/latitude or ground‑plane (u, v)."""

    x: float
    y: float


class MeshBBox(BaseModel):
    """Axis‑aligned bounding box for a mesh."""

    min: List[float] = Field(..., description="Minimum x, y, z coordinates of the mesh")
    max: List[float] = Field(..., description="Maximum x, y, z coordinates of the mesh")


class AreaMeshRequest(BaseModel):
    """Request body for triangulating a single area boundary."""

    points: List[WorldPoint] = Field(..., description="Ordered 3D boundary ring of the area")
    simplifyTolerance: float = Field(
        default=0.0,
        ge=0.0,
        description="Ramer–Douglas–Peucker tolerance applied before triangulation (0 disables)",
    )


class AreaMeshResponse(BaseModel):
    """Filled mesh of one area."""

    vertices: List[float] = Field(..., description="Flat list of vertex positions (x, y, z …)")
    indices: List[int] = Field(..., description="Index buffer defining the mesh triangles")
    uvs: List[float] = Field(..., description="Flat list of planar UVs (u, v …), one per vertex")
    normals: List[float] = Field(..., description="Flat list of vertex normals (x, y, z …)")
    indexFormat: Literal["uint16", "uint32"] = Field(
        ..., description="Index width required by the renderer (uint32 above 65535 vertices)"
    )
    bbox: MeshBBox = Field(..., description="Bounding box around the mesh")


class CentroidRequest(BaseModel):
    """Request body for computing the centroid of a ring."""

    points: List[PlanarPoint] = Field(..., description="Open ring of 2D points")


class IntersectionRequest(BaseModel):
    """Request body for intersecting two or more rings."""

    polygons: List[List[PlanarPoint]] = Field(
        ..., description="Rings to intersect, each an open list of 2D points"
    )


class IntersectionResponse(BaseModel):
    """Common region of a set of rings."""

    points: List[PlanarPoint] = Field(
        default_factory=list, description="Counter‑clockwise intersection ring (empty when disjoint)"
    )
    empty: bool = Field(..., description="True when the polygons have no common area")
    area: float = Field(..., description="Unsigned area of the intersection ring")


class AreaFeature(BaseModel):
    """A feature of an area layer.

    ``rings[0]`` is the exterior boundary; further rings are holes, kept
    for completeness but not triangulated.
    """

    id: str = Field(..., description="Feature identifier, unique within the layer")
    name: str = Field(default="", description="Display name used for the label")
    geometryType: Literal["Point", "LineString", "Polygon"] = Field(default="Polygon")
    rings: List[List[WorldPoint]] = Field(
        default_factory=list, description="World‑space rings; the first is the exterior"
    )
    properties: Dict[str, str] = Field(default_factory=dict)


class AreaLayerCreate(BaseModel):
    """Request body for storing a new area layer."""

    displayName: str = Field(..., description="Human readable layer name")
    color: str = Field(default="#ffffff", description="Layer colour as a CSS hex string")
    lineWidth: float = Field(default=1.0, ge=0.0, description="Outline width multiplier")
    lineSimplifyTolerance: float = Field(
        default=0.0,
        ge=0.0,
        description="Simplification tolerance applied to each ring before meshing (0 disables)",
    )
    groundPlane: Literal["xy", "xz", "yz"] = Field(
        default="xz",
        description="Principal plane used as the shared 2D frame for labels and intersections",
    )
    features: List[AreaFeature] = Field(default_factory=list)


class AreaLayer(AreaLayerCreate):
    """A stored area layer."""

    layerId: str = Field(..., description="Unique identifier for the layer")


class AreaLayerInfo(BaseModel):
    """Summary of a stored layer."""

    layerId: str
    displayName: str
    color: str
    featureCount: int
    createdAt: datetime


class LabelInfo(BaseModel):
    """Label anchor and character size for an area."""

    anchor: WorldPoint
    size: float


class FeatureMesh(BaseModel):
    """Mesh and label built for one feature."""

    featureId: str
    name: str
    mesh: AreaMeshResponse
    label: LabelInfo


class SkippedFeature(BaseModel):
    """A feature that could not be meshed, with the reason."""

    featureId: str
    reason: str


class LayerMeshesResponse(BaseModel):
    """Batch meshing result for a layer."""

    layerId: str
    meshes: List[FeatureMesh] = Field(default_factory=list)
    skipped: List[SkippedFeature] = Field(default_factory=list)


class LayerIntersectionRequest(BaseModel):
    """Request body for intersecting features of a stored layer."""

    featureIds: List[str] = Field(..., min_length=1, description="Identifiers of the features to intersect")
