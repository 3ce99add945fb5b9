"""Service singletons and dependency injection for the roastreel API."""

import logging

from roast_agent.agent import RoastPipeline
from utils.config import load_config, validate_config

logger = logging.getLogger(__name__)

# Service singletons
_config: dict | None = None
_pipeline: RoastPipeline | None = None


def get_config() -> dict:
    """Get or load the application configuration."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_roast_pipeline() -> RoastPipeline:
    """Get or create the roast pipeline instance.

    The demo video is loaded here so the per-request fallback path never
    reads from disk.
    """
    global _pipeline
    if _pipeline is None:
        config = get_config()
        errors = validate_config(config)
        if errors:
            error_msg = "Configuration errors: " + "; ".join(errors)
            logger.error(error_msg)
            raise ValueError(error_msg)
        _pipeline = RoastPipeline.from_config(config)
        if config.get("video_mode") != "generate" or config.get("video_fallback_on_error", True):
            _pipeline.video_acquirer.fallback.load()
    return _pipeline


def reset_dependencies() -> None:
    """Drop cached singletons (used by tests and config reloads)."""
    global _config, _pipeline
    _config = None
    _pipeline = None


async def close_roast_pipeline() -> None:
    """Close the pipeline's HTTP client and store.

    Call this during application shutdown.
    """
    global _pipeline
    if _pipeline is not None:
        await _pipeline.close()
        _pipeline = None
