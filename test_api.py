"""
Tests for the HTTP service.
"""

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from tilemap.server import create_app


@pytest.fixture
def client():
    return TestClient(create_app(cors_origins=["*"]))


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "dual-continents" in data["modes"]


def test_parameters(client):
    response = client.get("/parameters")
    assert response.status_code == 200
    data = response.json()
    assert data["aliases"]["iki-kita"] == "dual-continents"
    assert data["defaults"]["tiles"] == "2x2*4000,2x1*3000,1x1*1200"
    assert data["default_tiles"][0] == {"w": 2, "h": 2, "count": 400}


def test_generate_returns_png(client):
    response = client.post(
        "/api/generate",
        json={"w": 32, "h": 24, "tiles": "2x2*20,1x1*10", "mode": "islands", "seed": "api"}
    )
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.headers["cache-control"] == "no-store"
    assert response.headers["x-tile-batches"] == "2"
    assert response.headers["x-tile-count"] == "30"
    assert int(response.headers["x-seed"]) >= 0

    image = Image.open(io.BytesIO(response.content))
    assert image.size == (32, 24)
    assert image.mode == "RGBA"


def test_generate_is_deterministic_for_seed(client):
    body = {"w": 20, "h": 20, "tiles": "1x1*30", "mode": "ring", "seed": "same", "polish": True}
    first = client.post("/api/generate", json=body)
    second = client.post("/api/generate", json=body)
    assert first.content == second.content
    assert first.headers["x-seed"] == second.headers["x-seed"]


def test_generate_with_empty_body_uses_defaults(client):
    response = client.post("/api/generate", json={})
    assert response.status_code == 200
    image = Image.open(io.BytesIO(response.content))
    assert image.size == (100, 100)
    assert response.headers["x-tile-count"] == "800"


def test_invalid_json(client):
    response = client.post(
        "/api/generate", content=b"{not json", headers={"content-type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["error"].startswith("invalid JSON: ")


def test_unsupported_mode(client):
    response = client.post("/api/generate", json={"mode": "spiral"})
    assert response.status_code == 400
    assert response.json() == {"error": "unsupported mode spiral"}


@pytest.mark.parametrize(
    "body",
    [
        {"tiles": "2x2*0"},
        {"tiles": "axb*3"},
        {"ringStart": 1, "ringEnd": 0},
        {"w": "wide"},
        [1, 2, 3],
    ]
)
def test_bad_requests_return_json_errors(client, body):
    response = client.post("/api/generate", json=body)
    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.parametrize(
    "raw",
    [
        b'{"tiles": "1x1*2", "ka": 1e400}',
        b'{"cap": 1e400}',
        b'{"tiles": "1x1*1e308,1x1*1e308"}',
        b'{"mode": "islands", "islandRFrac": 1e400}',
        b'{"n11": 1e400}',
        b'{"tiles": "1x1*1e308", "ka": 1e10}',
    ]
)
def test_overflowing_numbers_return_json_errors(raw):
    client = TestClient(create_app(cors_origins=["*"]), raise_server_exceptions=False)
    response = client.post("/api/generate", content=raw, headers={"content-type": "application/json"})
    assert response.status_code == 400
    assert "error" in response.json()
