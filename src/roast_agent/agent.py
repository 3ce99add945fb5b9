"""Roast pipeline: tweet in, cached video + script + subtitles out.

normalize -> fingerprint -> store lookup -> script (retried) -> subtitles
-> optional shot plan -> video (retried, polled) -> persist -> result
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from roast_agent.budget import compute_budget
from roast_agent.fingerprint import compute_fingerprint, seed_from_fingerprint
from roast_agent.models import (
    AcquiredVideo,
    CachedArtifact,
    ClearResult,
    EnergyMode,
    RoastRequest,
    RoastResult,
    ValidationError,
)
from roast_agent.script_generator import ScriptGenerator
from roast_agent.shot_planner import ShotPlanner
from roast_agent.subtitle_engine import SubtitleEngine
from roast_agent.video_acquirer import FallbackVideo, VideoAcquirer
from services.ai_service import AIService
from services.roast_store import CacheWriteError, RoastStore
from services.video_gen_service import VideoGenService
from utils.logging import roast_log_context
from utils.retry import with_retry

logger = logging.getLogger(__name__)


class RoastPipelineError(Exception):
    """A provider step failed after its retries were exhausted."""


def request_from_payload(payload: RoastRequest | dict[str, Any]) -> RoastRequest:
    """Build a RoastRequest from a camelCase or snake_case mapping."""
    if isinstance(payload, RoastRequest):
        return payload
    if not isinstance(payload, dict):
        raise ValidationError("Request payload must be an object")

    def pick(*keys: str) -> Any:
        for key in keys:
            if payload.get(key) is not None:
                return payload[key]
        return None

    target_seconds = pick("target_seconds", "targetSeconds", "targetSec")
    return RoastRequest(
        tweet_id=pick("tweet_id", "tweetId"),
        startup_name=pick("startup_name", "startupName"),
        tweet_text=pick("tweet_text", "tweetText"),
        author_handle=pick("author_handle", "authorHandle"),
        website=pick("website"),
        angle=pick("angle"),
        target_seconds=12 if target_seconds is None else target_seconds,
        energy_mode=pick("energy_mode", "energyMode", "energy") or EnergyMode.HYPER,
    )


class RoastPipeline:
    """Runs one roast request end to end.

    Services are injected so tests can swap in fakes; ``from_config`` wires
    the real ones.
    """

    def __init__(
        self,
        config: dict,
        *,
        store: RoastStore,
        script_generator: ScriptGenerator,
        video_acquirer: VideoAcquirer,
        subtitle_engine: Optional[SubtitleEngine] = None,
        shot_planner: Optional[ShotPlanner] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config
        self.store = store
        self.script_generator = script_generator
        self.video_acquirer = video_acquirer
        self.subtitle_engine = subtitle_engine or SubtitleEngine()
        self.shot_planner = shot_planner if config.get("shot_planning_enabled", True) else None
        self.aspect_ratio = config.get("aspect_ratio", "9:16")
        self._sleep = sleep

    @classmethod
    def from_config(cls, config: dict) -> "RoastPipeline":
        ai_service = AIService(
            api_key=config.get("gemini_api_key") or "",
            model_name=config.get("gemini_model", "gemini-2.5-flash"),
        )
        video_service = None
        if config.get("video_mode") == "generate":
            video_service = VideoGenService(
                api_key=config.get("video_api_key") or "",
                base_urls=config.get("video_api_base_urls"),
                model=config.get("video_model", "sora-2"),
                send_seed=config.get("video_send_seed", False),
            )
        acquirer = VideoAcquirer(
            FallbackVideo(config["demo_video_path"], config.get("demo_video_seconds", 12.0)),
            video_service,
            generate=video_service is not None,
            poll_interval_seconds=config.get("video_poll_interval_seconds", 5.0),
            max_wait_seconds=config.get("video_max_wait_seconds", 600.0),
        )
        return cls(
            config,
            store=RoastStore(config["storage_dir"]),
            script_generator=ScriptGenerator(ai_service, temperature=config.get("script_temperature", 0.9)),
            video_acquirer=acquirer,
            shot_planner=ShotPlanner(ai_service, temperature=config.get("shot_temperature", 0.7)),
        )

    async def run(self, payload: RoastRequest | dict[str, Any]) -> RoastResult:
        """Produce (or recall) the roast for one request.

        Raises:
            ValidationError: Missing or malformed request fields
            RoastPipelineError: Script or video step failed after retries
        """
        request = request_from_payload(payload).normalized()
        fingerprint = compute_fingerprint(request)
        with roast_log_context(fingerprint, request.tweet_id):
            return await self._run(request, fingerprint)

    async def _run(self, request: RoastRequest, fingerprint: str) -> RoastResult:
        budget = compute_budget(request.target_seconds, request.energy_mode)

        cached = await asyncio.to_thread(self.store.read, fingerprint)
        if cached is not None:
            logger.info(f"Cache hit for {fingerprint[:12]}, skipping generation")
            return RoastResult(
                tweet_id=request.tweet_id,
                script=cached.script,
                lines=cached.lines,
                caption=cached.caption,
                video_url=cached.video_url,
                fingerprint=fingerprint,
                duration_seconds=cached.duration_seconds,
                words_per_second=budget.words_per_second,
                max_words=budget.max_words,
                srt=cached.srt,
                video_prompt=cached.video_prompt,
                from_cache=True,
            )

        logger.info(f"Cache miss for {fingerprint[:12]}, generating roast for '{request.startup_name}'")

        try:
            script = await with_retry(
                lambda _attempt: self.script_generator.generate(request, budget),
                self.config.get("script_retry_attempts", 3),
                self.config.get("script_retry_base_ms", 600),
                label="Script generation",
                sleep=self._sleep,
            )
        except Exception as e:
            raise RoastPipelineError(f"Script generation failed: {e}") from e

        srt = self.subtitle_engine.srt_from_lines(script.lines, budget.words_per_second)

        shot_plan = None
        if self.shot_planner is not None:
            shot_plan = await self.shot_planner.plan(
                script.lines, self.aspect_ratio, request.target_seconds, request.energy_mode
            )
        video_prompt = shot_plan.video_prompt if shot_plan else None

        video = await self._acquire_video(script.text, fingerprint, video_prompt, request.target_seconds)

        # video_url must resolve, so a failed video save fails the roast
        try:
            video_url = await asyncio.to_thread(self.store.save_video, fingerprint, video.data)
        except CacheWriteError as e:
            raise RoastPipelineError(f"Video could not be stored: {e}") from e

        cache_write_error = None
        try:
            artifact = CachedArtifact(
                fingerprint=fingerprint,
                script=script.text,
                caption=script.caption,
                duration_seconds=video.duration_seconds,
                video_url=video_url,
                srt=srt,
                video_prompt=video_prompt,
            )
            await asyncio.to_thread(self.store.write, fingerprint, artifact)
        except CacheWriteError as e:
            logger.error(f"Roast computed but not cached: {e}")
            cache_write_error = str(e)

        return RoastResult(
            tweet_id=request.tweet_id,
            script=script.text,
            lines=script.lines,
            caption=script.caption,
            video_url=video_url,
            fingerprint=fingerprint,
            duration_seconds=video.duration_seconds,
            words_per_second=budget.words_per_second,
            max_words=budget.max_words,
            srt=srt,
            video_prompt=video_prompt,
            from_cache=False,
            cache_write_error=cache_write_error,
        )

    async def _acquire_video(
        self, script: str, fingerprint: str, video_prompt: Optional[str], target_seconds: int
    ) -> AcquiredVideo:
        seed = seed_from_fingerprint(fingerprint)
        try:
            return await with_retry(
                lambda _attempt: self.video_acquirer.acquire(
                    script, seed, video_prompt, target_seconds, self.aspect_ratio
                ),
                self.config.get("video_retry_attempts", 2),
                self.config.get("video_retry_base_ms", 800),
                label="Video acquisition",
                sleep=self._sleep,
            )
        except Exception as e:
            if not (self.video_acquirer.generation_enabled and self.config.get("video_fallback_on_error", True)):
                raise RoastPipelineError(f"Video acquisition failed: {e}") from e
            logger.warning(f"Video generation failed, using demo video: {e}")

        try:
            return self.video_acquirer.fallback_video()
        except Exception as e:
            raise RoastPipelineError(f"Video acquisition failed: {e}") from e

    async def clear_cache(self) -> ClearResult:
        """Administrative reset. Never raises."""
        try:
            count = await asyncio.to_thread(self.store.clear)
            return ClearResult(success=True, count=count)
        except Exception as e:
            logger.error(f"Failed to clear roast store: {e}")
            return ClearResult(success=False, count=0, error=str(e))

    async def close(self) -> None:
        """Close the video provider client and the store."""
        video_service = self.video_acquirer.video_service
        if video_service is not None:
            await video_service.close()
        self.store.close()
