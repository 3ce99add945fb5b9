"""Shared pytest fixtures for roastreel tests."""

import json
import sys
from pathlib import Path
from typing import Dict, Generator

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from roast_agent.models import RoastRequest, VideoJob, VideoJobStatus  # noqa: E402
from services.roast_store import RoastStore  # noqa: E402

DEMO_VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42demo-video"

SCRIPT_LINES = [
    "Acme wants plants ordering their own water.",
    "Relativity says your runway is shrinking fast.",
    "Even photosynthesis has a better business model.",
    "Series A stands for Absolutely Not.",
    "Water your cap table instead, genius.",
]

SCRIPT_JSON = json.dumps({"lines": SCRIPT_LINES, "caption": "Einstein reviews Acme"})

SHOT_PLAN_JSON = json.dumps({
    "shots": [
        {"dur": 3, "visual": "Einstein at chalkboard", "action": "push-in", "onscreen_text": "plants ordering water", "sfx": "whoosh"},
        {"dur": 3, "visual": "chalk equations", "action": "scribble", "onscreen_text": "runway shrinking", "sfx": "chalk"},
        {"dur": 6, "visual": "wide lab", "action": "mic drop", "onscreen_text": "absolutely not", "sfx": "boom"},
    ],
    "video_prompt": "Vertical video, Einstein-like presenter in a chalkboard lab, quick push-ins.",
})


class FakeAIService:
    """Stands in for AIService. Returns (or raises) queued responses in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    async def generate_json(self, request):
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected text generation call: {request.name}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def call_count(self) -> int:
        return len(self.requests)


class FakeVideoService:
    """Stands in for VideoGenService with a scripted sequence of job states."""

    def __init__(self, statuses=(VideoJobStatus.COMPLETED,), data=b"generated-mp4", create_error=None):
        self.statuses = list(statuses)
        self.data = data
        self.create_error = create_error
        self.created = []
        self.polled = 0
        self.closed = False

    def is_configured(self) -> bool:
        return True

    async def create_job(self, prompt, seconds, size, seed=None):
        self.created.append({"prompt": prompt, "seconds": seconds, "size": size, "seed": seed})
        if self.create_error is not None:
            raise self.create_error
        return VideoJob(id="video_123", status=VideoJobStatus.QUEUED)

    async def get_job(self, job_id):
        self.polled += 1
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        error = "content policy" if status == VideoJobStatus.FAILED else None
        return VideoJob(id=job_id, status=status, progress=50.0, error=error)

    async def download(self, job_id):
        return self.data

    async def close(self):
        self.closed = True


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self, clock=None):
        self.delays = []
        self.clock = clock

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        if self.clock is not None:
            self.clock.now += seconds


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def demo_video(tmp_path) -> Path:
    """Write a small stand-in for the demo mp4."""
    path = tmp_path / "assets" / "demo.mp4"
    path.parent.mkdir(parents=True)
    path.write_bytes(DEMO_VIDEO_BYTES)
    return path


@pytest.fixture
def sample_config(tmp_path, demo_video) -> Dict:
    """Sample configuration for testing."""
    return {
        "gemini_api_key": "test_gemini_key",
        "gemini_model": "gemini-2.5-flash",
        "script_temperature": 0.9,
        "shot_temperature": 0.7,
        "storage_dir": str(tmp_path / "roasts"),
        "video_mode": "fallback",
        "video_api_key": None,
        "video_api_base_urls": ["https://api.openai.com/v1"],
        "video_model": "sora-2",
        "video_send_seed": False,
        "video_poll_interval_seconds": 5.0,
        "video_max_wait_seconds": 600.0,
        "video_fallback_on_error": True,
        "demo_video_path": str(demo_video),
        "demo_video_seconds": 12.0,
        "aspect_ratio": "9:16",
        "script_retry_attempts": 3,
        "script_retry_base_ms": 600,
        "video_retry_attempts": 2,
        "video_retry_base_ms": 800,
        "shot_planning_enabled": False,
        "log_level": "INFO",
        "log_json": False,
    }


@pytest.fixture
def store(tmp_path) -> Generator[RoastStore, None, None]:
    """Roast store rooted in a temp directory."""
    roast_store = RoastStore(tmp_path / "store")
    yield roast_store
    roast_store.close()


@pytest.fixture
def sample_request() -> RoastRequest:
    """A typical roast request."""
    return RoastRequest(
        tweet_id="1790000000000000000",
        startup_name="Acme",
        tweet_text="We just raised $4M to let plants order their own water.",
        author_handle="@founder",
    )


@pytest.fixture
def sample_payload() -> Dict:
    """The same request as the web UI sends it."""
    return {
        "tweetId": "1790000000000000000",
        "startupName": "Acme",
        "tweetText": "We just raised $4M to let plants order their own water.",
        "authorHandle": "@founder",
    }
