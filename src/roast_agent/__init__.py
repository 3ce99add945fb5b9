"""Roast Agent - tweet to roast video pipeline.

The pipeline itself (``roast_agent.agent.RoastPipeline``) and the
service-backed steps are imported from their modules directly.
"""

from .budget import compute_budget, total_words, word_count
from .fingerprint import compute_fingerprint, is_valid_fingerprint, seed_from_fingerprint
from .models import (
    AcquiredVideo,
    Budget,
    CachedArtifact,
    ClearResult,
    EnergyMode,
    RoastRequest,
    RoastResult,
    ScriptResult,
    Shot,
    ShotPlan,
    SubtitleBlock,
    TextGenerationRequest,
    ValidationError,
    VideoJob,
    VideoJobStatus,
)
from .subtitle_engine import SubtitleEngine

__all__ = [
    "EnergyMode",
    "RoastRequest",
    "Budget",
    "ScriptResult",
    "SubtitleBlock",
    "Shot",
    "ShotPlan",
    "VideoJob",
    "VideoJobStatus",
    "AcquiredVideo",
    "TextGenerationRequest",
    "CachedArtifact",
    "RoastResult",
    "ClearResult",
    "ValidationError",
    "compute_budget",
    "word_count",
    "total_words",
    "compute_fingerprint",
    "is_valid_fingerprint",
    "seed_from_fingerprint",
    "SubtitleEngine",
]
