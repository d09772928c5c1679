"""
Tests for batch meshing and intersections over layer features.

A layer may contain features that cannot be meshed.  These must be
reported as skipped while the rest of the layer is still built.
"""

from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from app.api.models import AreaFeature, AreaLayer
from app.services.area_cache import (
    LayerMeshCacheKey,
    clear_cache,
    get_layer_meshes_from_cache,
    invalidate_layer,
    put_layer_meshes_in_cache,
)
from app.services.area_layers import (
    LayerMeshes,
    build_layer_meshes,
    exterior_ring,
    intersect_layer_features,
    mesh_worker_count,
)
from app.services.polygon2d import polygon_area_2d


def _square(x0: float, z0: float, size: float, height: float = 0.0) -> list:
    return [
        {"x": x0, "y": height, "z": z0},
        {"x": x0 + size, "y": height, "z": z0},
        {"x": x0 + size, "y": height, "z": z0 + size},
        {"x": x0, "y": height, "z": z0 + size},
    ]


def _layer() -> AreaLayer:
    return AreaLayer(
        layerId="parks",
        displayName="Parks",
        features=[
            AreaFeature(id="a", name="North park", rings=[_square(0.0, 0.0, 10.0)]),
            AreaFeature(id="bad", name="Broken", rings=[_square(0.0, 0.0, 1.0)[:2]]),
            AreaFeature(
                id="line",
                name="Collinear",
                rings=[[{"x": float(i), "y": 0.0, "z": 0.0} for i in range(3)]],
            ),
            AreaFeature(id="pt", geometryType="Point", rings=[_square(0.0, 0.0, 1.0)]),
            AreaFeature(id="b", name="South park", rings=[_square(5.0, 5.0, 10.0, height=1.0)]),
        ],
    )


@pytest.mark.parametrize("workers", [1, 4])
def test_malformed_features_are_skipped(workers: int) -> None:
    """Bad features are listed as skipped and the others are still meshed."""
    result = build_layer_meshes(_layer(), max_workers=workers)
    assert [b.feature_id for b in result.built] == ["a", "b"]
    skipped = dict(result.skipped)
    assert set(skipped) == {"bad", "line", "pt"}
    assert "3 are required" in skipped["bad"]
    assert "Point" in skipped["pt"]


def test_built_features_carry_mesh_and_label() -> None:
    result = build_layer_meshes(_layer(), max_workers=2)
    north = result.built[0]
    assert north.name == "North park"
    assert north.mesh.vertex_count == 4
    assert north.mesh.triangle_count == 2
    assert north.label.anchor == pytest.approx((5.0, 0.0, 5.0))
    assert math.isclose(north.label.size, 0.2 + 10.0 * 0.02, rel_tol=1e-9)


def test_intersect_layer_features() -> None:
    """Overlapping parks share a 5 × 5 region on the ground plane."""
    ring = intersect_layer_features(_layer(), ["a", "b"])
    assert math.isclose(polygon_area_2d(ring), 25.0, rel_tol=1e-9)


def test_intersect_unknown_feature_raises() -> None:
    with pytest.raises(KeyError):
        intersect_layer_features(_layer(), ["a", "missing"])


def test_mesh_worker_count_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("AREA_MESH_WORKERS", raising=False)
    assert mesh_worker_count() == 4
    monkeypatch.setenv("AREA_MESH_WORKERS", "8")
    assert mesh_worker_count() == 8
    monkeypatch.setenv("AREA_MESH_WORKERS", "lots")
    assert mesh_worker_count() == 4


def test_layer_cache_lru_and_invalidation() -> None:
    clear_cache()
    key = LayerMeshCacheKey(layer_id="parks", simplify_tolerance=0.0)
    other = LayerMeshCacheKey(layer_id="roads", simplify_tolerance=0.0)
    put_layer_meshes_in_cache(key, LayerMeshes(layer_id="parks"))
    put_layer_meshes_in_cache(other, LayerMeshes(layer_id="roads"))
    assert get_layer_meshes_from_cache(key).layer_id == "parks"
    invalidate_layer("parks")
    assert get_layer_meshes_from_cache(key) is None
    assert get_layer_meshes_from_cache(other) is not None
    clear_cache()


def test_closed_feature_rings_are_opened() -> None:
    """Stored rings that repeat their first point are intersected as open rings."""
    north = _square(0.0, 0.0, 4.0)
    south = _square(2.0, 2.0, 4.0)
    layer = AreaLayer(
        layerId="closed",
        displayName="Closed",
        features=[
            AreaFeature(id="n", rings=[north + [north[0]]]),
            AreaFeature(id="s", rings=[south + [south[0]]]),
        ],
    )
    assert exterior_ring(layer.features[0]) == [(p["x"], p["y"], p["z"]) for p in north]
    ring = intersect_layer_features(layer, ["n", "s"])
    assert len(ring) == 4
    assert ring[0] != ring[-1]
    assert math.isclose(polygon_area_2d(ring), 4.0, rel_tol=1e-9)

    built = build_layer_meshes(layer, max_workers=1)
    assert [b.mesh.vertex_count for b in built.built] == [4, 4]
