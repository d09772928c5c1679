"""
Routes for storing area layers and meshing their features.

A layer is uploaded once with all of its features in world coordinates.
The meshes endpoint triangulates every polygon feature in a worker pool
and reports features that could not be meshed instead of failing the
whole request.  Results are cached per layer.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from .models import (
    AreaLayer,
    AreaLayerCreate,
    AreaLayerInfo,
    FeatureMesh,
    IntersectionResponse,
    LabelInfo,
    LayerIntersectionRequest,
    LayerMeshesResponse,
    SkippedFeature,
    WorldPoint,
)
from .routes_areas import area_mesh_response, intersection_response
from ..services.area_cache import (
    LayerMeshCacheKey,
    get_layer_meshes_from_cache,
    invalidate_layer,
    put_layer_meshes_in_cache,
)
from ..services.area_layers import build_layer_meshes, intersect_layer_features
from ..services.errors import GeometryError
from ..services.layers_store import (
    LayerRecord,
    delete_layer as delete_layer_record,
    get_layer_record,
    insert_layer,
    list_layers as list_layer_records,
    load_layer,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _layer_info(record: LayerRecord) -> AreaLayerInfo:
    return AreaLayerInfo(
        layerId=record.layer_id,
        displayName=record.display_name,
        color=record.color,
        featureCount=record.feature_count,
        createdAt=record.created_at,
    )


def _require_layer(layer_id: str) -> AreaLayer:
    record = get_layer_record(layer_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Layer not found")
    return load_layer(record)


@router.post("/layers", response_model=AreaLayerInfo, status_code=201)
async def create_layer(body: AreaLayerCreate) -> AreaLayerInfo:
    """Store a layer and its features."""
    return _layer_info(insert_layer(body))


@router.get("/layers", response_model=list[AreaLayerInfo])
async def list_layers() -> list[AreaLayerInfo]:
    """Return summaries of all stored layers."""
    return [_layer_info(r) for r in list_layer_records()]


@router.get("/layers/{layer_id}", response_model=AreaLayer)
async def get_layer(layer_id: str) -> AreaLayer:
    """Return a stored layer with all of its features."""
    return _require_layer(layer_id)


@router.delete("/layers/{layer_id}", status_code=204)
async def delete_layer(layer_id: str) -> None:
    """Delete a layer and drop its cached meshes."""
    if not delete_layer_record(layer_id):
        raise HTTPException(status_code=404, detail="Layer not found")
    invalidate_layer(layer_id)


@router.get("/layers/{layer_id}/meshes", response_model=LayerMeshesResponse)
def get_layer_meshes(layer_id: str) -> LayerMeshesResponse:
    """Mesh every polygon feature of a layer.

    Declared as a plain function so FastAPI runs it in its threadpool;
    the meshing itself fans out to a separate worker pool.
    """
    layer = _require_layer(layer_id)
    key = LayerMeshCacheKey(layer_id=layer_id, simplify_tolerance=layer.lineSimplifyTolerance)
    result = get_layer_meshes_from_cache(key)
    if result is None:
        result = build_layer_meshes(layer)
        put_layer_meshes_in_cache(key, result)
    meshes = []
    for built in result.built:
        ax, ay, az = built.label.anchor
        meshes.append(
            FeatureMesh(
                featureId=built.feature_id,
                name=built.name,
                mesh=area_mesh_response(built.mesh),
                label=LabelInfo(anchor=WorldPoint(x=ax, y=ay, z=az), size=built.label.size),
            )
        )
    return LayerMeshesResponse(
        layerId=layer_id,
        meshes=meshes,
        skipped=[SkippedFeature(featureId=fid, reason=reason) for fid, reason in result.skipped],
    )


@router.post("/layers/{layer_id}/intersection", response_model=IntersectionResponse)
async def intersect_layer(layer_id: str, body: LayerIntersectionRequest) -> IntersectionResponse:
    """Intersect selected features of a layer on its ground plane."""
    layer = _require_layer(layer_id)
    try:
        ring = intersect_layer_features(layer, body.featureIds)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Feature {exc.args[0]} not found in layer")
    except GeometryError as exc:
        logger.warning("Layer[%s]: intersection rejected: %s", layer_id, exc)
        raise HTTPException(status_code=422, detail=str(exc))
    return intersection_response(ring)
