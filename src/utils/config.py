"""Configuration loading and validation for roastreel."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from rich.logging import RichHandler

# Get the project root directory (parent of src)
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Load environment variables from .env file in project root
load_dotenv(PROJECT_ROOT / ".env")

VIDEO_MODES = ("generate", "fallback")
ASPECT_RATIOS = ("9:16", "16:9")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def load_config() -> dict:
    """Load configuration from environment variables."""

    # Helper function to resolve paths relative to project root
    def resolve_path(path: str | None, default_relative: str) -> str:
        if not path:
            return str(PROJECT_ROOT / default_relative)
        if Path(path).is_absolute():
            return path
        return str(PROJECT_ROOT / path)

    base_urls = os.getenv("VIDEO_API_BASE_URLS", "https://api.openai.com/v1")

    config = {
        # Text generation (Gemini)
        "gemini_api_key": os.getenv("GEMINI_API_KEY"),
        "gemini_model": os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
        "script_temperature": float(os.getenv("SCRIPT_TEMPERATURE", "0.9")),
        "shot_temperature": float(os.getenv("SHOT_TEMPERATURE", "0.7")),
        # Artifact storage
        "storage_dir": resolve_path(os.getenv("ROAST_STORAGE_DIR"), ".data/roasts"),
        # Video acquisition
        "video_mode": os.getenv("VIDEO_MODE", "fallback").lower(),
        "video_api_key": os.getenv("VIDEO_API_KEY") or os.getenv("OPENAI_API_KEY"),
        "video_api_base_urls": [u.strip().rstrip("/") for u in base_urls.split(",") if u.strip()],
        "video_model": os.getenv("VIDEO_MODEL", "sora-2"),
        "video_send_seed": _env_bool("VIDEO_SEND_SEED", "false"),
        "video_poll_interval_seconds": float(os.getenv("VIDEO_POLL_INTERVAL_SECONDS", "5")),
        "video_max_wait_seconds": float(os.getenv("VIDEO_MAX_WAIT_SECONDS", "600")),
        "video_fallback_on_error": _env_bool("VIDEO_FALLBACK_ON_ERROR", "true"),
        "demo_video_path": resolve_path(os.getenv("DEMO_VIDEO_PATH"), "assets/demo.mp4"),
        "demo_video_seconds": float(os.getenv("DEMO_VIDEO_SECONDS", "12")),
        "aspect_ratio": os.getenv("ASPECT_RATIO", "9:16"),
        # Retry policy (script: more attempts, shorter delay; video: fewer, longer)
        "script_retry_attempts": int(os.getenv("SCRIPT_RETRY_ATTEMPTS", "3")),
        "script_retry_base_ms": int(os.getenv("SCRIPT_RETRY_BASE_MS", "600")),
        "video_retry_attempts": int(os.getenv("VIDEO_RETRY_ATTEMPTS", "2")),
        "video_retry_base_ms": int(os.getenv("VIDEO_RETRY_BASE_MS", "800")),
        # Optional shot planning
        "shot_planning_enabled": _env_bool("SHOT_PLANNING_ENABLED", "true"),
        # Logging
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "log_json": _env_bool("LOG_JSON", "false"),
    }

    return config


def validate_config(config: dict) -> list[str]:
    """Validate configuration and return list of errors."""
    errors = []

    if not config.get("gemini_api_key"):
        errors.append("GEMINI_API_KEY is required")

    video_mode = config.get("video_mode", "fallback")
    if video_mode not in VIDEO_MODES:
        errors.append(f"VIDEO_MODE must be one of {', '.join(VIDEO_MODES)}, got '{video_mode}'")

    if video_mode == "generate":
        if not config.get("video_api_key"):
            errors.append("VIDEO_API_KEY (or OPENAI_API_KEY) is required when VIDEO_MODE=generate")
        if not config.get("video_api_base_urls"):
            errors.append("VIDEO_API_BASE_URLS must list at least one base URL")

    # The fallback asset backs both fallback mode and generation failures
    if video_mode == "fallback" or config.get("video_fallback_on_error", True):
        demo_path = Path(config.get("demo_video_path", ""))
        if not demo_path.is_file():
            errors.append(f"Demo video not found at {demo_path} (set DEMO_VIDEO_PATH)")

    if config.get("aspect_ratio", "9:16") not in ASPECT_RATIOS:
        errors.append(f"ASPECT_RATIO must be one of {', '.join(ASPECT_RATIOS)}")

    for key in ("script_retry_attempts", "video_retry_attempts"):
        if int(config.get(key, 1)) < 1:
            errors.append(f"{key} must be at least 1")

    if float(config.get("video_poll_interval_seconds", 5)) <= 0:
        errors.append("VIDEO_POLL_INTERVAL_SECONDS must be positive")

    storage_dir = config.get("storage_dir")
    if storage_dir:
        try:
            Path(storage_dir).mkdir(parents=True, exist_ok=True)
        except Exception as e:
            errors.append(f"Cannot create storage folder: {e}")

    return errors


def setup_logging(log_level: str = "INFO") -> None:
    """Set up logging configuration with Rich for terminal output (CLI)."""
    # Clear any existing handlers
    logging.root.handlers.clear()

    rich_handler = RichHandler(
        show_time=True,
        show_level=True,
        show_path=False,
        rich_tracebacks=True,
        markup=False,  # Disable markup to avoid conflicts
    )

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        handlers=[rich_handler],
        format="%(message)s",
    )

    # Suppress noisy third-party loggers
    for logger_name in ("httpx", "httpcore", "google_genai", "google_genai.models"):
        logging.getLogger(logger_name).setLevel(logging.WARNING)
