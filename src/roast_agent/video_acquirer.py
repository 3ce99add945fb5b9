"""Video acquisition: generate a clip through the provider or use the demo asset."""

import asyncio
import logging
import threading
import time
from pathlib import Path
from typing import Awaitable, Callable, Optional

from roast_agent.models import AcquiredVideo, VideoJob, VideoJobStatus
from services.video_gen_service import (
    VideoGenService,
    VideoGenServiceError,
    VideoGenTimeoutError,
    size_for_aspect_ratio,
)

logger = logging.getLogger(__name__)


class FallbackVideo:
    """Demo clip read from disk once and kept in memory for the process lifetime."""

    def __init__(self, path: Path | str, duration_seconds: float = 12.0) -> None:
        self.path = Path(path)
        self.duration_seconds = duration_seconds
        self._data: Optional[bytes] = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._data is not None

    def load(self) -> bytes:
        """Return the asset bytes, reading the file only on the first call."""
        if self._data is not None:
            return self._data
        with self._lock:
            if self._data is None:
                if not self.path.is_file():
                    raise VideoGenServiceError(f"Demo video missing at {self.path}")
                self._data = self.path.read_bytes()
                logger.info(f"Loaded demo video from {self.path} ({len(self._data)} bytes)")
        return self._data

    def acquire(self) -> AcquiredVideo:
        return AcquiredVideo(data=self.load(), duration_seconds=self.duration_seconds, source="fallback")


def build_video_prompt(script: str) -> str:
    """Prompt used when no shot plan is available."""
    spoken = " ".join(line.strip() for line in script.split("\n") if line.strip())
    return (
        "Vertical meme-style video. An Einstein-like presenter with wild white hair "
        "stands at a chalkboard in a cluttered physics lab, warm practical lighting, "
        "quick push-ins and handheld energy. He delivers these lines to camera with "
        f"high-energy comedic timing: \"{spoken}\""
    )


class VideoAcquirer:
    """Resolves a script to video bytes.

    Generation mode polls the provider job on a fixed interval until it is
    terminal or the wall-clock ceiling is hit. Fallback mode returns the demo
    asset.
    """

    def __init__(
        self,
        fallback: FallbackVideo,
        video_service: Optional[VideoGenService] = None,
        *,
        generate: bool = False,
        poll_interval_seconds: float = 5.0,
        max_wait_seconds: float = 600.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.fallback = fallback
        self.video_service = video_service
        self.generate = generate
        self.poll_interval_seconds = poll_interval_seconds
        self.max_wait_seconds = max_wait_seconds
        self._sleep = sleep
        self._clock = clock

    @property
    def generation_enabled(self) -> bool:
        return bool(self.generate and self.video_service and self.video_service.is_configured())

    def fallback_video(self) -> AcquiredVideo:
        return self.fallback.acquire()

    async def acquire(
        self,
        script: str,
        seed: int,
        video_prompt: Optional[str] = None,
        target_seconds: int = 12,
        aspect_ratio: str = "9:16",
    ) -> AcquiredVideo:
        """Produce video bytes for a script.

        Raises:
            VideoGenServiceError: Job failed, timed out, or the provider rejected it
        """
        if not self.generation_enabled:
            logger.info("Video generation disabled, using demo video")
            return self.fallback_video()

        prompt = video_prompt or build_video_prompt(script)
        job = await self.video_service.create_job(
            prompt, target_seconds, size_for_aspect_ratio(aspect_ratio), seed=seed
        )
        job = await self._wait_for_completion(job)
        data = await self.video_service.download(job.id)
        return AcquiredVideo(data=data, duration_seconds=float(target_seconds), source="generated")

    async def _wait_for_completion(self, job: VideoJob) -> VideoJob:
        started = self._clock()
        while not job.status.is_terminal:
            elapsed = self._clock() - started
            if elapsed >= self.max_wait_seconds:
                # The provider-side job keeps running; only this wait is abandoned
                raise VideoGenTimeoutError(
                    f"Video job {job.id} not finished after {self.max_wait_seconds:.0f}s"
                )
            await self._sleep(self.poll_interval_seconds)
            job = await self.video_service.get_job(job.id)
            progress = f" {job.progress:.0f}%" if job.progress is not None else ""
            logger.debug(f"Video job {job.id} status: {job.status.value}{progress}")

        if job.status == VideoJobStatus.FAILED:
            raise VideoGenServiceError(f"Video job {job.id} failed: {job.error or 'unknown error'}")
        return job
