"""Tests for the roastreel HTTP API."""

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_roast_pipeline, reset_dependencies
from api.server import app
from utils.retry import NetworkError

from conftest import DEMO_VIDEO_BYTES, SCRIPT_JSON, SCRIPT_LINES, FakeAIService, FakeVideoService
from pipeline_helpers import build_pipeline


@pytest.fixture
def make_client(sample_config):
    pipelines = []

    def _make(ai_service):
        pipeline = build_pipeline(sample_config, ai_service)
        pipelines.append(pipeline)
        app.dependency_overrides[get_roast_pipeline] = lambda: pipeline
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
    reset_dependencies()
    for pipeline in pipelines:
        pipeline.store.close()


class TestRoastEndpoint:
    """Tests for POST /api/roasts."""

    @pytest.mark.unit
    def test_generates_then_serves_from_cache(self, make_client, sample_payload):
        ai = FakeAIService(SCRIPT_JSON)
        client = make_client(ai)

        first = client.post("/api/roasts", json=sample_payload)
        second = client.post("/api/roasts", json={**sample_payload, "tweetId": "other"})

        assert first.status_code == 200
        body = first.json()
        assert body["ok"] is True
        assert body["lines"] == SCRIPT_LINES
        assert body["from_cache"] is False
        assert body["video_url"] == f"/roasts/{body['fingerprint']}.mp4"
        assert body["max_words"] == 36

        assert second.status_code == 200
        assert second.json()["from_cache"] is True
        assert second.json()["tweet_id"] == "other"
        assert second.json()["script"] == body["script"]
        assert ai.call_count == 1

    @pytest.mark.unit
    def test_missing_field_is_422(self, make_client, sample_payload):
        client = make_client(FakeAIService())
        payload = dict(sample_payload)
        del payload["startupName"]

        response = client.post("/api/roasts", json=payload)

        assert response.status_code == 422
        assert response.json()["ok"] is False

    @pytest.mark.unit
    def test_blank_field_is_422(self, make_client, sample_payload):
        client = make_client(FakeAIService())

        response = client.post("/api/roasts", json={**sample_payload, "tweetText": "   "})

        assert response.status_code == 422
        assert response.json() == {"ok": False, "error": "Missing required field: tweetText"}

    @pytest.mark.unit
    def test_unknown_energy_mode_is_422(self, make_client, sample_payload):
        client = make_client(FakeAIService())
        response = client.post("/api/roasts", json={**sample_payload, "energyMode": "LOUD"})
        assert response.status_code == 422

    @pytest.mark.unit
    def test_provider_failure_is_502(self, make_client, sample_payload):
        ai = FakeAIService(NetworkError("down"), NetworkError("down"), NetworkError("down"))
        client = make_client(ai)

        response = client.post("/api/roasts", json=sample_payload)

        assert response.status_code == 502
        assert response.json()["ok"] is False
        assert "Script generation failed" in response.json()["error"]
        assert ai.call_count == 3


class TestVideoEndpoint:
    """Tests for GET /roasts/{file}."""

    @pytest.mark.unit
    def test_serves_stored_video(self, make_client, sample_payload):
        client = make_client(FakeAIService(SCRIPT_JSON))
        video_url = client.post("/api/roasts", json=sample_payload).json()["video_url"]

        response = client.get(video_url)

        assert response.status_code == 200
        assert response.content == DEMO_VIDEO_BYTES
        assert response.headers["content-type"] == "video/mp4"
        assert response.headers["cache-control"] == "no-store"

    @pytest.mark.unit
    def test_streams_from_disk(self, make_client, sample_payload, monkeypatch):
        client = make_client(FakeAIService(SCRIPT_JSON))
        video_url = client.post("/api/roasts", json=sample_payload).json()["video_url"]
        pipeline = app.dependency_overrides[get_roast_pipeline]()

        def no_buffering(name):
            raise AssertionError("video should be served from its file")

        monkeypatch.setattr(pipeline.store, "read_video", no_buffering)
        response = client.get(video_url)

        assert response.status_code == 200
        assert response.content == DEMO_VIDEO_BYTES

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["nope.mp4", "A" * 64 + ".mp4", "a" * 64 + ".mov", "b" * 64 + ".mp4"])
    def test_unknown_or_malformed_is_404(self, make_client, name):
        client = make_client(FakeAIService())
        assert client.get(f"/roasts/{name}").status_code == 404


class TestCacheEndpoints:
    @pytest.mark.unit
    def test_clear_cache(self, make_client, sample_payload):
        client = make_client(FakeAIService(SCRIPT_JSON))
        client.post("/api/roasts", json=sample_payload)

        response = client.delete("/api/roasts/cache")

        assert response.status_code == 200
        assert response.json() == {"success": True, "count": 1, "error": None}

    @pytest.mark.unit
    def test_stats(self, make_client, sample_payload):
        client = make_client(FakeAIService(SCRIPT_JSON))
        client.post("/api/roasts", json=sample_payload)
        client.post("/api/roasts", json=sample_payload)

        stats = client.get("/api/roasts/cache/stats").json()

        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["entry_count"] == 1


class TestCoreEndpoints:
    @pytest.mark.unit
    def test_health(self, make_client):
        response = make_client(FakeAIService()).get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.unit
    def test_root(self, make_client):
        assert make_client(FakeAIService()).get("/").json()["message"] == "roastreel API"


class TestDependencies:
    """Tests for the pipeline singleton wiring."""

    @pytest.mark.unit
    def test_invalid_config_refuses_to_build(self, monkeypatch, sample_config):
        import api.dependencies as deps

        sample_config["gemini_api_key"] = None
        monkeypatch.setattr(deps, "_config", sample_config)
        monkeypatch.setattr(deps, "_pipeline", None)

        with pytest.raises(ValueError, match="GEMINI_API_KEY"):
            deps.get_roast_pipeline()

    @pytest.mark.unit
    def test_builds_once_and_preloads_demo_video(self, monkeypatch, sample_config):
        import api.dependencies as deps

        monkeypatch.setattr(deps, "_config", sample_config)
        monkeypatch.setattr(deps, "_pipeline", None)

        pipeline = deps.get_roast_pipeline()

        assert pipeline.video_acquirer.fallback.loaded
        assert pipeline.shot_planner is None
        assert deps.get_roast_pipeline() is pipeline
        pipeline.store.close()

    @pytest.mark.unit
    def test_shutdown_closes_pipeline(self, monkeypatch, sample_config):
        import api.dependencies as deps

        service = FakeVideoService()
        pipeline = build_pipeline(sample_config, FakeAIService(), video_service=service)
        monkeypatch.setattr(deps, "_pipeline", pipeline)

        with TestClient(app) as client:
            assert client.get("/api/health").status_code == 200

        assert service.closed is True
        assert deps._pipeline is None
