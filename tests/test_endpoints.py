import pytest
from fastapi.testclient import TestClient

from line_extractor.api.endpoints import app

from conftest import png_bytes


@pytest.fixture
def client():
    with TestClient(app) as client:
        yield client


def _upload(rgb, name="page.png"):
    return {"file": (name, png_bytes(rgb), "image/png")}


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "healthy"
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["services"]["pipeline"] == "working"


def test_extract_returns_intervals(client, two_band_page):
    res = client.post(
        "/extract",
        files=_upload(two_band_page),
        params={"cutoff": 0.5, "stddev": 0.01, "above": 0, "below": 0, "include_profile": True},
    )

    assert res.status_code == 200
    body = res.json()
    assert body["ok"] is True
    assert body["height"] == 100 and body["width"] == 10
    assert body["n_lines"] == 2
    assert [(ln["start"], ln["end"]) for ln in body["lines"]] == [(10, 19), (30, 39)]
    assert len(body["profile"]) == 100


def test_extract_white_page_is_422(client, white_page):
    res = client.post("/extract", files=_upload(white_page))
    assert res.status_code == 422
    assert res.json()["detail"].startswith("NoBlocksFound")


def test_extract_bad_upload_is_422(client):
    res = client.post("/extract", files={"file": ("page.png", b"garbage", "image/png")})
    assert res.status_code == 422
    assert res.json()["detail"].startswith("InvalidImage")


def test_extract_bad_option_is_422(client, two_band_page):
    res = client.post("/extract", files=_upload(two_band_page), params={"cutoff": 1.2})
    assert res.status_code == 422
    assert res.json()["detail"].startswith("InvalidOptions")


def test_metrics(client, two_band_page):
    client.post("/extract", files=_upload(two_band_page), params={"cutoff": 0.5})
    res = client.get("/metrics")
    assert res.status_code == 200
    assert "line_extract_requests_total" in res.text
