"""
Batch operations over the features of an area layer.

``build_layer_meshes`` meshes every polygon feature of a layer on a
thread pool.  The kernel is stateless, so the plane fits and
triangulations run in parallel; the results are gathered on the calling
thread once every job has finished, which is where the caller attaches
them to its scene or response.  A malformed feature never aborts the
batch: geometry failures are logged and reported as skipped features.

``intersect_layer_features`` intersects the exterior rings of selected
features in the layer's ground plane.

The pool size comes from the ``AREA_MESH_WORKERS`` environment variable
(default 4).
"""

from __future__ import annotations

import os
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..api.models import AreaFeature, AreaLayer
from .area_mesh import AreaMesh, build_area_mesh
from .clipping import intersect_polygons
from .errors import GeometryError
from .labels import LabelPlacement, place_label
from .plane_projection import project_to_ground, strip_closing_duplicate
from .vectors import Vec2

logger = logging.getLogger(__name__)

DEFAULT_MESH_WORKERS = 4


@dataclass
class BuiltFeature:
    """Mesh and label produced for one feature."""

    feature_id: str
    name: str
    mesh: AreaMesh
    label: LabelPlacement


@dataclass
class LayerMeshes:
    """Outcome of meshing a layer.

    Attributes:
        layer_id: Identifier of the processed layer.
        built: Successfully meshed features, in layer order.
        skipped: ``(feature_id, reason)`` pairs for features that were
            not meshed.
    """

    layer_id: str
    built: List[BuiltFeature] = field(default_factory=list)
    skipped: List[Tuple[str, str]] = field(default_factory=list)


def mesh_worker_count() -> int:
    """Read the worker pool size from ``AREA_MESH_WORKERS``."""
    raw = os.getenv("AREA_MESH_WORKERS")
    if not raw:
        return DEFAULT_MESH_WORKERS
    try:
        return max(1, int(raw))
    except ValueError:
        logger.warning("Ignoring invalid AREA_MESH_WORKERS=%r", raw)
        return DEFAULT_MESH_WORKERS


def exterior_ring(feature: AreaFeature) -> List[Tuple[float, float, float]]:
    """Return the feature's exterior ring as tuples (empty if it has none).

    A closing duplicate of the first point is dropped.
    """
    if not feature.rings:
        return []
    ring = strip_closing_duplicate([(p.x, p.y, p.z) for p in feature.rings[0]])
    return [(p[0], p[1], p[2]) for p in ring]


def _skip_reason(feature: AreaFeature) -> Optional[str]:
    if feature.geometryType != "Polygon":
        return f"unsupported geometry type {feature.geometryType}"
    if not feature.rings:
        return "feature has no exterior ring"
    count = len(exterior_ring(feature))
    if count < 3:
        return f"exterior ring has {count} points, at least 3 are required"
    return None


def _build_feature(
    feature: AreaFeature,
    simplify_tolerance: float,
    plane: str,
) -> BuiltFeature:
    ring = exterior_ring(feature)
    mesh = build_area_mesh(ring, simplify_tolerance=simplify_tolerance)
    label = place_label(ring, plane)
    return BuiltFeature(feature_id=feature.id, name=feature.name, mesh=mesh, label=label)


def build_layer_meshes(layer: AreaLayer, max_workers: Optional[int] = None) -> LayerMeshes:
    """Mesh every polygon feature of ``layer``.

    Args:
        layer: The layer whose features should be meshed.
        max_workers: Thread pool size; defaults to ``AREA_MESH_WORKERS``.

    Returns:
        A :class:`LayerMeshes` listing built and skipped features in layer
        order.
    """
    start = time.perf_counter()
    result = LayerMeshes(layer_id=layer.layerId)
    jobs = []
    workers = max_workers or mesh_worker_count()
    with ThreadPoolExecutor(max_workers=workers) as executor:
        for feature in layer.features:
            reason = _skip_reason(feature)
            if reason is not None:
                jobs.append((feature, None, reason))
                continue
            future = executor.submit(
                _build_feature,
                feature,
                layer.lineSimplifyTolerance,
                layer.groundPlane,
            )
            jobs.append((feature, future, None))

        for feature, future, reason in jobs:
            if future is None:
                logger.info("Layer[%s]: skipping feature %s: %s", layer.layerId, feature.id, reason)
                result.skipped.append((feature.id, reason))
                continue
            try:
                result.built.append(future.result())
            except GeometryError as exc:
                logger.warning(
                    "Layer[%s]: feature %s could not be meshed: %s", layer.layerId, feature.id, exc
                )
                result.skipped.append((feature.id, str(exc)))
    logger.debug(
        "Layer[%s]: built=%d skipped=%d workers=%d in %.3f s",
        layer.layerId,
        len(result.built),
        len(result.skipped),
        workers,
        time.perf_counter() - start,
    )
    return result


def intersect_layer_features(layer: AreaLayer, feature_ids: Sequence[str]) -> List[Vec2]:
    """Intersect the exterior rings of the given features on the ground plane.

    Args:
        layer: Layer holding the features.
        feature_ids: Identifiers of the features, in clipping order.

    Returns:
        The intersection ring in ground‑plane coordinates, empty when the
        features do not overlap.

    Raises:
        KeyError: If a feature identifier is not part of the layer.
        DegenerateGeometry: If a selected feature has fewer than three
            exterior points.
    """
    by_id = {f.id: f for f in layer.features}
    rings: List[List[Vec2]] = []
    for fid in feature_ids:
        feature = by_id.get(fid)
        if feature is None:
            raise KeyError(fid)
        rings.append(project_to_ground(exterior_ring(feature), layer.groundPlane))
    return intersect_polygons(rings)
