"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from api_server import app

from poses import as_payload, jump_clip

MARKED = {"start": 10, "peak": 20, "contact": 21, "end": 30}


@pytest.fixture(scope="module")
def client():
    return TestClient(app)


@pytest.fixture(scope="module")
def frames():
    return as_payload(jump_clip())


def analyze(client, frames, **overrides):
    body = {"sport": "basketball", "action": "jump_shot", "fps": 30, "frames": frames, "keyframes": MARKED}
    body.update(overrides)
    return client.post("/api/analyze", json=body)


class TestInfoEndpoints:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "biome-sports-analysis-api"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["benchmarks"] == "12/12 loaded"

    def test_sports(self, client):
        sports = client.get("/api/sports").json()["sports"]
        assert set(sports) == {"basketball", "volleyball", "badminton"}
        assert "release_angle" in sports["basketball"]["jump_shot"]
        assert "wrist_speed" in sports["badminton"]["smash"]


class TestAnalyzeEndpoint:
    def test_success(self, client, frames):
        response = analyze(client, frames, session_id="session-1")
        assert response.status_code == 200
        data = response.json()
        assert data["session_id"] == "session-1"
        assert data["status"] == "success"
        assert data["score"]["overall"] == 100
        assert data["keyframes"]["contact"] == 21

    def test_session_id_is_generated(self, client, frames):
        data = analyze(client, frames).json()
        assert data["session_id"]

    def test_unsupported_selector(self, client, frames):
        response = analyze(client, frames, sport="cricket", action="cover_drive")
        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["step"] == "selector"
        assert "basketball" in detail["supported"]

    def test_too_few_frames(self, client, frames):
        response = analyze(client, frames[:3], keyframes=None)
        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["step"] == "validation"
        assert "Insufficient frames: 3 < 10 required" in detail["issues"]

    def test_wrong_keypoint_count(self, client, frames):
        bad = [dict(frame, keypoints=frame["keypoints"][:5]) for frame in frames]
        assert analyze(client, bad).status_code == 422

    def test_non_positive_fps(self, client, frames):
        assert analyze(client, frames, fps=0).status_code == 422

    def test_visibility_out_of_range(self, client, frames):
        first = dict(frames[0])
        first["keypoints"] = [dict(kp, visibility=1.5) for kp in first["keypoints"]]
        assert analyze(client, [first] + frames[1:]).status_code == 422
