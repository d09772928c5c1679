"""
Tests for the layer endpoints.

A layer is uploaded with a mix of valid and malformed features, then
listed, fetched, meshed, intersected and deleted through the API.
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add the backend directory to sys.path so we can import the app
sys.path.append(str(Path(__file__).resolve().parents[1]))

from app.main import app  # type: ignore


@pytest.fixture
def client() -> TestClient:
    with TestClient(app) as c:
        yield c


def _square(x0: float, z0: float, size: float) -> list:
    return [
        {"x": x0, "y": 0.0, "z": z0},
        {"x": x0 + size, "y": 0.0, "z": z0},
        {"x": x0 + size, "y": 0.0, "z": z0 + size},
        {"x": x0, "y": 0.0, "z": z0 + size},
    ]


def _create_layer(client: TestClient) -> str:
    payload = {
        "displayName": "Lakes",
        "color": "#3366ff",
        "features": [
            {"id": "north", "name": "North lake", "rings": [_square(0.0, 0.0, 4.0)]},
            {"id": "south", "name": "South lake", "rings": [_square(2.0, 2.0, 4.0)]},
            {"id": "broken", "name": "Broken", "rings": [_square(0.0, 0.0, 1.0)[:2]]},
        ],
    }
    resp = client.post("/api/layers", json=payload)
    assert resp.status_code == 201
    info = resp.json()
    assert info["displayName"] == "Lakes"
    assert info["featureCount"] == 3
    return info["layerId"]


def test_create_list_get_delete_layer(client: TestClient) -> None:
    layer_id = _create_layer(client)

    listing = client.get("/api/layers")
    assert listing.status_code == 200
    assert layer_id in [item["layerId"] for item in listing.json()]

    layer = client.get(f"/api/layers/{layer_id}")
    assert layer.status_code == 200
    data = layer.json()
    assert data["groundPlane"] == "xz"
    assert [f["id"] for f in data["features"]] == ["north", "south", "broken"]

    assert client.delete(f"/api/layers/{layer_id}").status_code == 204
    assert client.get(f"/api/layers/{layer_id}").status_code == 404
    assert client.delete(f"/api/layers/{layer_id}").status_code == 404


def test_layer_meshes_skip_malformed_feature(client: TestClient) -> None:
    layer_id = _create_layer(client)
    resp = client.get(f"/api/layers/{layer_id}/meshes")
    assert resp.status_code == 200
    data = resp.json()
    assert data["layerId"] == layer_id
    assert [m["featureId"] for m in data["meshes"]] == ["north", "south"]
    assert [s["featureId"] for s in data["skipped"]] == ["broken"]
    north = data["meshes"][0]
    assert len(north["mesh"]["indices"]) == 6
    assert north["label"]["anchor"] == {"x": 2.0, "y": 0.0, "z": 2.0}

    # Served from the cache the second time, with the same content
    again = client.get(f"/api/layers/{layer_id}/meshes")
    assert again.json() == data
    client.delete(f"/api/layers/{layer_id}")


def test_layer_intersection(client: TestClient) -> None:
    layer_id = _create_layer(client)
    resp = client.post(f"/api/layers/{layer_id}/intersection", json={"featureIds": ["north", "south"]})
    assert resp.status_code == 200
    data = resp.json()
    assert data["empty"] is False
    assert abs(data["area"] - 4.0) < 1e-9

    missing = client.post(f"/api/layers/{layer_id}/intersection", json={"featureIds": ["north", "nope"]})
    assert missing.status_code == 404

    degenerate = client.post(
        f"/api/layers/{layer_id}/intersection", json={"featureIds": ["north", "broken"]}
    )
    assert degenerate.status_code == 422
    client.delete(f"/api/layers/{layer_id}")


def test_unknown_layer_returns_404(client: TestClient) -> None:
    assert client.get("/api/layers/does-not-exist").status_code == 404
    assert client.get("/api/layers/does-not-exist/meshes").status_code == 404
    resp = client.post("/api/layers/does-not-exist/intersection", json={"featureIds": ["a"]})
    assert resp.status_code == 404


def test_invalid_ground_plane_is_rejected(client: TestClient) -> None:
    resp = client.post("/api/layers", json={"displayName": "Bad", "groundPlane": "uv"})
    assert resp.status_code == 422
