import pytest
from fastapi.testclient import TestClient

from laserdxx.api.endpoints import app


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_root_lists_endpoints(client):
    data = client.get("/").json()

    assert set(data["endpoints"]) == {"process", "export", "health"}


def test_process_upload(client, concentric_squares_dxf):
    response = client.post(
        "/process",
        files={"file": ("squares.dxf", concentric_squares_dxf, "application/dxf")},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["filename"] == "squares.dxf"
    assert [p["layer"] for p in data["polylines"]] == ["CUT", "BOARDS"]
    assert data["stats"]["bounds"]["max_x"] == 100.0


def test_process_rejects_other_extensions(client):
    response = client.post("/process", files={"file": ("squares.txt", "0\nEOF\n", "text/plain")})

    assert response.status_code == 400


def test_process_rejects_malformed_dxf(client):
    response = client.post("/process", files={"file": ("broken.dxf", "garbage\ntext", "application/dxf")})

    assert response.status_code == 400


def test_export_cut_only(client):
    """Edited contours come back as an R12 attachment with the mode suffix"""
    square = [{"x": 0, "y": 0}, {"x": 10, "y": 0}, {"x": 10, "y": 10}, {"x": 0, "y": 10}, {"x": 0, "y": 0}]
    payload = {
        "filename": "part.dxf",
        "mode": "CUT",
        "polylines": [
            {"id": 0, "points": square, "closed": True, "layer": "CUT"},
            {"id": 1, "points": square[:2], "closed": False, "layer": "BOARDS"},
        ],
        "labels": [{"x": 5, "y": 11, "text": "M"}],
    }

    response = client.post("/export", json=payload)

    assert response.status_code == 200
    assert response.headers["content-disposition"] == "attachment; filename=part_CUT_ONLY.dxf"
    body = response.text
    assert body.count("0\nPOLYLINE\n") == 1
    assert "0\nTEXT\n" not in body
    assert body.endswith("0\nEOF\n")
