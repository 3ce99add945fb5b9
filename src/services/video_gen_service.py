"""Video generation service - OpenAI-style /videos job API over httpx.

The provider contract is create / get / download. Job creation walks an
ordered list of base URLs: a 404 means "this deployment does not serve the
videos API, try the next one"; access-denied and bad-request answers stop the
walk because another base URL will not fix them. The base URL that accepted
a job is remembered for polling and download.
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from roast_agent.models import VideoJob, VideoJobStatus
from utils.retry import APIRateLimitError, NetworkError, TemporaryServiceError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URLS = ("https://api.openai.com/v1",)

ASPECT_RATIO_SIZES = {
    "9:16": "720x1280",
    "16:9": "1280x720",
}

# Status spellings seen across provider versions (OpenAI, RunPod, Replicate)
_STATUS_ALIASES = {
    "queued": VideoJobStatus.QUEUED,
    "in_queue": VideoJobStatus.QUEUED,
    "pending": VideoJobStatus.QUEUED,
    "starting": VideoJobStatus.QUEUED,
    "in_progress": VideoJobStatus.IN_PROGRESS,
    "processing": VideoJobStatus.IN_PROGRESS,
    "running": VideoJobStatus.IN_PROGRESS,
    "completed": VideoJobStatus.COMPLETED,
    "succeeded": VideoJobStatus.COMPLETED,
    "success": VideoJobStatus.COMPLETED,
    "failed": VideoJobStatus.FAILED,
    "error": VideoJobStatus.FAILED,
    "cancelled": VideoJobStatus.FAILED,
    "canceled": VideoJobStatus.FAILED,
    "timed_out": VideoJobStatus.FAILED,
}


class VideoGenServiceError(Exception):
    """Raised when video generation fails."""


class VideoGenTimeoutError(VideoGenServiceError):
    """Raised when a job does not reach a terminal state in time."""


class VideoGenNotFound(VideoGenServiceError):
    """No configured base URL serves the requested resource."""


class VideoGenAccessDenied(VideoGenServiceError):
    """Provider rejected the credentials (401/403)."""


class VideoGenBadRequest(VideoGenServiceError):
    """Provider rejected the request body (400/422)."""


def size_for_aspect_ratio(aspect_ratio: str) -> str:
    return ASPECT_RATIO_SIZES.get(aspect_ratio, ASPECT_RATIO_SIZES["9:16"])


def _error_message(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        value = value.get("message") or value.get("detail")
    if value is None:
        return None
    return str(value)


def parse_video_job(data: Any) -> VideoJob:
    """Normalize a provider job payload. Never raises.

    Unknown or missing status is treated as a failed job so the caller stops
    polling instead of looping on garbage.
    """
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        data = data["data"]
    if not isinstance(data, dict):
        return VideoJob(id="", status=VideoJobStatus.FAILED, error=f"Unexpected job payload: {data!r}"[:200])

    job_id = str(data.get("id") or data.get("job_id") or "")
    raw_status = str(data.get("status") or "").strip().lower()
    status = _STATUS_ALIASES.get(raw_status)
    error = _error_message(data.get("error"))

    if status is None:
        status = VideoJobStatus.FAILED
        error = error or f"Unknown job status: {raw_status or 'missing'}"

    progress = data.get("progress")
    try:
        progress = float(progress) if progress is not None else None
    except (TypeError, ValueError):
        progress = None

    return VideoJob(id=job_id, status=status, progress=progress, error=error)


def _response_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_detail(response: httpx.Response) -> str:
    data = _response_json(response)
    if isinstance(data, dict):
        detail = _error_message(data.get("error")) or _error_message(data.get("detail"))
        if detail:
            return detail
    return response.text[:200] or f"HTTP {response.status_code}"


def raise_for_provider_status(response: httpx.Response, action: str) -> None:
    """Map an HTTP error status to the uniform error classes."""
    code = response.status_code
    if code < 400:
        return
    detail = _error_detail(response)
    if code == 404:
        raise VideoGenNotFound(f"{action}: not found ({detail})")
    if code in (401, 403):
        raise VideoGenAccessDenied(f"{action}: access denied ({detail})")
    if code in (400, 422):
        raise VideoGenBadRequest(f"{action}: bad request ({detail})")
    if code == 429:
        raise APIRateLimitError(f"{action}: rate limited ({detail})")
    if code >= 500:
        raise TemporaryServiceError(f"{action}: provider error {code} ({detail})")
    raise VideoGenServiceError(f"{action}: HTTP {code} ({detail})")


class VideoGenService:
    """Client for an OpenAI-style video job API."""

    def __init__(
        self,
        api_key: str = "",
        base_urls: Optional[list[str]] = None,
        model: str = "sora-2",
        send_seed: bool = False,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_key = api_key or ""
        self.base_urls = [u.rstrip("/") for u in (base_urls or DEFAULT_BASE_URLS) if u]
        self.model = model
        self.send_seed = send_seed
        self.client = client or httpx.AsyncClient(timeout=120.0)
        self._job_base_urls: dict[str, str] = {}

    def is_configured(self) -> bool:
        return bool(self.api_key and self.base_urls)

    @property
    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _base_url_for(self, job_id: str) -> str:
        return self._job_base_urls.get(job_id, self.base_urls[0])

    async def _request(self, method: str, url: str, action: str, **kwargs) -> httpx.Response:
        try:
            return await self.client.request(method, url, headers=self._headers, **kwargs)
        except httpx.TimeoutException as e:
            raise NetworkError(f"{action}: request timed out") from e
        except httpx.TransportError as e:
            raise NetworkError(f"{action}: {e}") from e

    async def create_job(
        self,
        prompt: str,
        seconds: int,
        size: str,
        seed: Optional[int] = None,
    ) -> VideoJob:
        """Start a generation job on the first base URL that serves the API.

        Raises:
            VideoGenServiceError: Not configured, rejected, or no base URL matched
        """
        if not self.is_configured():
            raise VideoGenServiceError(
                "Video generation not configured. Set VIDEO_API_KEY and VIDEO_API_BASE_URLS."
            )

        payload: dict = {
            "model": self.model,
            "prompt": prompt,
            "seconds": str(int(seconds)),
            "size": size,
        }
        if self.send_seed and seed is not None:
            payload["seed"] = seed

        last_not_found: Optional[VideoGenNotFound] = None
        for base_url in self.base_urls:
            response = await self._request("POST", f"{base_url}/videos", "create video job", json=payload)
            try:
                raise_for_provider_status(response, f"create video job at {base_url}")
            except VideoGenNotFound as e:
                logger.info(f"Video API not found at {base_url}, trying next endpoint")
                last_not_found = e
                continue

            job = parse_video_job(_response_json(response))
            if not job.id:
                raise VideoGenServiceError(f"Video provider returned no job id: {job.error}")
            self._job_base_urls[job.id] = base_url
            logger.info(f"Video job {job.id} created at {base_url} ({seconds}s, {size})")
            return job

        raise last_not_found or VideoGenNotFound("No video endpoint configured")

    async def get_job(self, job_id: str) -> VideoJob:
        base_url = self._base_url_for(job_id)
        response = await self._request("GET", f"{base_url}/videos/{quote(job_id, safe='')}", "get video job")
        raise_for_provider_status(response, f"get video job {job_id}")
        job = parse_video_job(_response_json(response))
        if not job.id:
            job.id = job_id
        if job.status == VideoJobStatus.FAILED:
            self._job_base_urls.pop(job_id, None)
        return job

    async def download(self, job_id: str) -> bytes:
        base_url = self._base_url_for(job_id)
        response = await self._request(
            "GET", f"{base_url}/videos/{quote(job_id, safe='')}/content", "download video"
        )
        raise_for_provider_status(response, f"download video {job_id}")
        data = response.content
        if not data:
            raise VideoGenServiceError(f"Video provider returned empty content for job {job_id}")
        self._job_base_urls.pop(job_id, None)
        logger.info(f"Downloaded video for job {job_id}: {len(data)} bytes")
        return data

    async def close(self) -> None:
        await self.client.aclose()
