"""Tests for API endpoints."""

from __future__ import annotations

import asyncio
import base64
import json

from fastapi.testclient import TestClient

import uisight.api.analyze as analyze_module
from uisight.main import app
from tests.conftest import card_grid_array, nav_strip_array, png_base64, truncated_ihdr_png


client = TestClient(app)


def _sse_events(body: str) -> list[tuple[str, dict]]:
    events = []
    for block in body.strip().split("\n\n"):
        lines = dict(line.split(": ", 1) for line in block.splitlines())
        events.append((lines["event"], json.loads(lines["data"])))
    return events


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == "0.1.0"
    assert data["transforms_registered"] == 13


def test_analyze_card_grid():
    response = client.post("/api/analyze", json={"image": png_base64(card_grid_array())})
    assert response.status_code == 200
    data = response.json()
    assert data["transforms_completed"] == 13
    assert data["transforms_failed"] == 0
    assert data["errors"] == {}
    assert data["processing_time_ms"] > 0
    result = data["result"]
    assert (result["width"], result["height"]) == (1200, 800)
    assert [c["type"] for c in result["components"]] == ["card"] * 4
    assert [p["name"] for p in result["patterns"]] == ["Card Grid"]


def test_analyze_accepts_data_url():
    image = "data:image/png;base64," + png_base64(nav_strip_array())
    response = client.post("/api/analyze", json={"image": image})
    assert response.status_code == 200
    patterns = response.json()["result"]["patterns"]
    assert [p["name"] for p in patterns] == ["Horizontal Navigation"]


def test_analyze_with_options():
    response = client.post(
        "/api/analyze",
        json={"image": png_base64(card_grid_array()), "options": {"skip_patterns": True}},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["transforms_completed"] == 12
    assert data["result"]["patterns"] == []


def test_analyze_runs_pipeline_off_the_event_loop(monkeypatch):
    seen = []
    run_pipeline = analyze_module.run_pipeline

    def recording_run(ctx):
        try:
            asyncio.get_running_loop()
            seen.append("loop")
        except RuntimeError:
            seen.append("worker")
        return run_pipeline(ctx)

    monkeypatch.setattr(analyze_module, "run_pipeline", recording_run)
    response = client.post("/api/analyze", json={"image": png_base64(card_grid_array())})
    assert response.status_code == 200
    assert seen == ["worker"]
    assert len(response.json()["result"]["components"]) == 4


def test_analyze_invalid_image():
    response = client.post("/api/analyze", json={"image": "bm90IGFuIGltYWdl"})
    assert response.status_code == 422
    assert "cannot decode image" in response.json()["detail"]


def _corrupt_png_base64() -> str:
    return base64.b64encode(truncated_ihdr_png(card_grid_array())).decode("ascii")


def test_analyze_corrupt_png():
    response = client.post("/api/analyze", json={"image": _corrupt_png_base64()})
    assert response.status_code == 422
    assert "cannot decode image" in response.json()["detail"]


def test_analyze_invalid_base64():
    response = client.post("/api/analyze", json={"image": "%%%"})
    assert response.status_code == 422


def test_analyze_missing_image():
    response = client.post("/api/analyze", json={})
    assert response.status_code == 422


def test_analyze_stream():
    response = client.post("/api/analyze/stream", json={"image": png_base64(card_grid_array())})
    assert response.status_code == 200
    events = _sse_events(response.text)

    kinds = [kind for kind, _ in events]
    assert kinds[-2:] == ["result", "done"]
    progress = [data for kind, data in events if kind == "progress"]
    assert len(progress) == 2 * 13
    assert progress[0]["status"] == "running"
    assert {p["status"] for p in progress[1::2]} == {"ok"}

    result = events[-2][1]
    assert result["transforms_completed"] == 13
    assert len(result["result"]["components"]) == 4


def test_analyze_stream_decode_error():
    response = client.post("/api/analyze/stream", json={"image": "bm90IGFuIGltYWdl"})
    assert response.status_code == 200
    events = _sse_events(response.text)
    assert [kind for kind, _ in events] == ["error"]
    assert events[0][1]["type"] == "error"


def test_analyze_stream_corrupt_png():
    response = client.post("/api/analyze/stream", json={"image": _corrupt_png_base64()})
    events = _sse_events(response.text)
    assert [kind for kind, _ in events] == ["error"]
    assert "cannot decode image" in events[0][1]["message"]
