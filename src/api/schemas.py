"""Pydantic request/response models for the roastreel API."""

from pydantic import BaseModel, ConfigDict, Field

from roast_agent.models import RoastRequest


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    video_mode: str | None = None
    shot_planning: bool | None = None

    model_config = {
        "json_schema_extra": {"examples": [{"status": "healthy", "video_mode": "fallback", "shot_planning": True}]}
    }


class RootResponse(BaseModel):
    """Root endpoint response."""

    message: str
    version: str


class RoastRequestModel(BaseModel):
    """Roast request body. Accepts camelCase (as sent by the web UI) or snake_case."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "tweetId": "1790000000000000000",
                    "startupName": "Uber for Houseplants",
                    "tweetText": "We just raised $4M to let plants order their own water.",
                    "authorHandle": "@founder",
                    "targetSeconds": 12,
                    "energyMode": "HYPER",
                }
            ]
        },
    )

    tweet_id: str = Field(alias="tweetId")
    startup_name: str = Field(alias="startupName")
    tweet_text: str = Field(alias="tweetText")
    author_handle: str | None = Field(default=None, alias="authorHandle")
    website: str | None = None
    angle: str | None = None
    target_seconds: int = Field(default=12, alias="targetSeconds")
    energy_mode: str | None = Field(default=None, alias="energyMode")

    def to_request(self) -> RoastRequest:
        return RoastRequest(
            tweet_id=self.tweet_id,
            startup_name=self.startup_name,
            tweet_text=self.tweet_text,
            author_handle=self.author_handle,
            website=self.website,
            angle=self.angle,
            target_seconds=self.target_seconds,
            energy_mode=self.energy_mode,
        )


class RoastResponse(BaseModel):
    """Finished roast."""

    ok: bool = True
    tweet_id: str
    script: str
    lines: list[str]
    caption: str
    video_url: str
    fingerprint: str
    duration_seconds: float
    words_per_second: float
    max_words: int
    srt: str
    video_prompt: str | None = None
    from_cache: bool
    cache_write_error: str | None = None


class ErrorResponse(BaseModel):
    """Single error message; the pipeline never returns partial results."""

    ok: bool = False
    error: str


class ClearCacheResponse(BaseModel):
    """Result of clearing the roast store."""

    success: bool
    count: int
    error: str | None = None

    model_config = {"json_schema_extra": {"examples": [{"success": True, "count": 3}]}}


class CacheStatsResponse(BaseModel):
    """Roast store statistics."""

    total_requests: int
    hits: int
    misses: int
    hit_rate: float
    entry_count: int
    metadata_bytes: int
    video_mb: float
    storage_dir: str
