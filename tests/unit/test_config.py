"""Tests for environment configuration."""

from pathlib import Path

import pytest

from utils.config import PROJECT_ROOT, load_config, validate_config

_ENV_VARS = [
    "GEMINI_API_KEY", "VIDEO_MODE", "VIDEO_API_KEY", "OPENAI_API_KEY", "VIDEO_API_BASE_URLS",
    "ROAST_STORAGE_DIR", "DEMO_VIDEO_PATH", "VIDEO_FALLBACK_ON_ERROR", "ASPECT_RATIO",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestLoadConfig:
    """Tests for load_config()."""

    @pytest.mark.unit
    def test_defaults(self, clean_env):
        config = load_config()

        assert config["video_mode"] == "fallback"
        assert config["gemini_model"] == "gemini-2.5-flash"
        assert config["storage_dir"] == str(PROJECT_ROOT / ".data/roasts")
        assert config["script_retry_attempts"] == 3
        assert config["script_retry_base_ms"] == 600
        assert config["video_retry_attempts"] == 2
        assert config["video_retry_base_ms"] == 800
        assert config["video_fallback_on_error"] is True

    @pytest.mark.unit
    def test_overrides(self, clean_env, tmp_path):
        clean_env.setenv("VIDEO_MODE", "GENERATE")
        clean_env.setenv("OPENAI_API_KEY", "sk-openai")
        clean_env.setenv("VIDEO_API_BASE_URLS", "https://a.test/v1/, https://b.test/v1")
        clean_env.setenv("ROAST_STORAGE_DIR", str(tmp_path / "roasts"))

        config = load_config()

        assert config["video_mode"] == "generate"
        assert config["video_api_key"] == "sk-openai"
        assert config["video_api_base_urls"] == ["https://a.test/v1", "https://b.test/v1"]
        assert config["storage_dir"] == str(tmp_path / "roasts")

    @pytest.mark.unit
    def test_relative_paths_resolve_under_project_root(self, clean_env):
        clean_env.setenv("DEMO_VIDEO_PATH", "media/clip.mp4")
        assert Path(load_config()["demo_video_path"]) == PROJECT_ROOT / "media/clip.mp4"


class TestValidateConfig:
    """Tests for validate_config()."""

    @pytest.mark.unit
    def test_valid(self, sample_config):
        assert validate_config(sample_config) == []

    @pytest.mark.unit
    def test_missing_gemini_key(self, sample_config):
        sample_config["gemini_api_key"] = None
        assert any("GEMINI_API_KEY" in e for e in validate_config(sample_config))

    @pytest.mark.unit
    def test_generate_mode_needs_key(self, sample_config):
        sample_config["video_mode"] = "generate"
        assert any("VIDEO_API_KEY" in e for e in validate_config(sample_config))

    @pytest.mark.unit
    def test_unknown_mode(self, sample_config):
        sample_config["video_mode"] = "magic"
        assert any("VIDEO_MODE" in e for e in validate_config(sample_config))

    @pytest.mark.unit
    def test_missing_demo_video(self, sample_config, tmp_path):
        sample_config["demo_video_path"] = str(tmp_path / "absent.mp4")
        assert any("Demo video not found" in e for e in validate_config(sample_config))

    @pytest.mark.unit
    def test_demo_video_optional_when_generating_without_fallback(self, sample_config, tmp_path):
        sample_config.update({
            "video_mode": "generate",
            "video_api_key": "sk",
            "video_fallback_on_error": False,
            "demo_video_path": str(tmp_path / "absent.mp4"),
        })
        assert validate_config(sample_config) == []

    @pytest.mark.unit
    def test_bad_aspect_ratio_and_retries(self, sample_config):
        sample_config["aspect_ratio"] = "4:3"
        sample_config["script_retry_attempts"] = 0
        errors = validate_config(sample_config)
        assert any("ASPECT_RATIO" in e for e in errors)
        assert any("script_retry_attempts" in e for e in errors)
