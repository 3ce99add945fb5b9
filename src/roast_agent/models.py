"""Data models for the roast video pipeline."""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class ValidationError(ValueError):
    """Raised when a request is missing a required field or has a bad value."""


class EnergyMode(str, Enum):
    """Delivery pace. Controls words-per-second."""

    HYPER = "HYPER"
    NORMAL = "NORMAL"

    @classmethod
    def parse(cls, value: "EnergyMode | str | None") -> "EnergyMode":
        """Accept an enum member or a case-insensitive name. None means HYPER."""
        if value is None:
            return cls.HYPER
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValidationError(f"Unknown energy mode: {value!r}")


def _required(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"Missing required field: {field_name}")
    return str(value).strip()


def _optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip() or None


@dataclass
class RoastRequest:
    """One request to roast a startup tweet."""

    tweet_id: str
    startup_name: str
    tweet_text: str
    author_handle: Optional[str] = None
    website: Optional[str] = None
    angle: Optional[str] = None
    target_seconds: int = 12
    energy_mode: EnergyMode = EnergyMode.HYPER

    def normalized(self) -> "RoastRequest":
        """Return a trimmed copy, raising ValidationError on missing fields.

        Blank optional fields become None, never an empty string.
        """
        try:
            target_seconds = int(self.target_seconds if self.target_seconds is not None else 12)
        except (TypeError, ValueError):
            raise ValidationError(f"target_seconds must be an integer, got {self.target_seconds!r}")

        return RoastRequest(
            tweet_id=_required(self.tweet_id, "tweetId"),
            startup_name=_required(self.startup_name, "startupName"),
            tweet_text=_required(self.tweet_text, "tweetText"),
            author_handle=_optional(self.author_handle),
            website=_optional(self.website),
            angle=_optional(self.angle),
            target_seconds=target_seconds,
            energy_mode=EnergyMode.parse(self.energy_mode),
        )


@dataclass(frozen=True)
class Budget:
    """Pace and word ceiling for one request. Derived, never cached."""

    words_per_second: float
    max_words: int


@dataclass
class ScriptResult:
    """Line-structured roast script plus social caption."""

    lines: list[str]
    caption: str

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def word_count(self) -> int:
        from roast_agent.budget import total_words

        return total_words(self.lines)


@dataclass
class SubtitleBlock:
    """One timed caption block. Times are in seconds."""

    index: int
    start: float
    end: float
    text: str

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass
class Shot:
    """One beat of the shot plan."""

    duration: float
    visual: str
    action: str
    onscreen_text: str
    sfx: str


@dataclass
class ShotPlan:
    """Timed shot breakdown plus a single prompt for video generation."""

    shots: list[Shot]
    video_prompt: str

    @property
    def total_duration(self) -> float:
        return sum(s.duration for s in self.shots)


class VideoJobStatus(str, Enum):
    """Lifecycle of a video generation job."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (VideoJobStatus.COMPLETED, VideoJobStatus.FAILED)


@dataclass
class VideoJob:
    """Provider-neutral view of a video generation job."""

    id: str
    status: VideoJobStatus
    progress: Optional[float] = None
    error: Optional[str] = None


@dataclass
class AcquiredVideo:
    """Raw video bytes and how they were obtained."""

    data: bytes
    duration_seconds: float
    source: str  # "generated" or "fallback"


@dataclass
class TextGenerationRequest:
    """Instruction object sent to the text generator.

    Keeps prompt wording separate from the output contract so the contract
    can be tested without caring about the exact wording.
    """

    name: str
    system: str
    user: str
    schema: dict
    temperature: float = 0.7

    def validate(self) -> "TextGenerationRequest":
        if not self.system.strip():
            raise ValueError(f"{self.name}: system instructions are empty")
        if not self.user.strip():
            raise ValueError(f"{self.name}: user instructions are empty")
        if self.schema.get("type") != "object" or not self.schema.get("required"):
            raise ValueError(f"{self.name}: output schema must be an object with required keys")
        missing = [k for k in self.schema["required"] if k not in self.schema.get("properties", {})]
        if missing:
            raise ValueError(f"{self.name}: schema requires undeclared keys {missing}")
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"{self.name}: temperature {self.temperature} out of range")
        return self


_ARTIFACT_FIELDS = {
    "script": str,
    "caption": str,
    "duration_seconds": (int, float),
    "video_url": str,
    "srt": str,
}


@dataclass
class CachedArtifact:
    """Everything stored for one fingerprint."""

    fingerprint: str
    script: str
    caption: str
    duration_seconds: float
    video_url: str
    srt: str
    video_prompt: Optional[str] = None
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def lines(self) -> list[str]:
        return [line.strip() for line in self.script.split("\n") if line.strip()]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> Optional["CachedArtifact"]:
        """Rebuild an artifact, or None if the stored shape is not valid."""
        if not isinstance(data, dict):
            return None
        for key, expected in _ARTIFACT_FIELDS.items():
            value = data.get(key)
            if not isinstance(value, expected) or isinstance(value, bool):
                return None
        fingerprint = data.get("fingerprint")
        video_prompt = data.get("video_prompt")
        if not isinstance(fingerprint, str):
            return None
        if video_prompt is not None and not isinstance(video_prompt, str):
            video_prompt = None
        return cls(
            fingerprint=fingerprint,
            script=data["script"],
            caption=data["caption"],
            duration_seconds=float(data["duration_seconds"]),
            video_url=data["video_url"],
            srt=data["srt"],
            video_prompt=video_prompt,
            created_at=str(data.get("created_at", "")),
        )


@dataclass
class RoastResult:
    """What the pipeline hands back to its caller."""

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
    video_prompt: Optional[str] = None
    from_cache: bool = False
    cache_write_error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ClearResult:
    """Outcome of the administrative cache reset."""

    success: bool
    count: int
    error: Optional[str] = None
