"""Structured logging for roastreel.

stdlib loggers (``logging.getLogger(__name__)``) and structlog share one
processor chain. Every event emitted while a roast is running carries the
shortened request fingerprint and the tweet id.
"""

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

import structlog

FINGERPRINT_LOG_CHARS = 12

current_fingerprint: ContextVar[Optional[str]] = ContextVar("current_fingerprint", default=None)
current_tweet_id: ContextVar[Optional[str]] = ContextVar("current_tweet_id", default=None)

NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "google_genai.models")


def add_roast_context(_logger, _method_name, event_dict):
    """Structlog processor that tags events with the roast being built."""
    fingerprint = current_fingerprint.get()
    if fingerprint:
        event_dict.setdefault("fingerprint", fingerprint[:FINGERPRINT_LOG_CHARS])
    tweet_id = current_tweet_id.get()
    if tweet_id:
        event_dict.setdefault("tweet_id", tweet_id)
    return event_dict


def setup_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """Route all logging through structlog.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_output: JSON lines (LOG_JSON=true) instead of the colored console renderer
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_roast_context,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # foreign_pre_chain gives stdlib records the same context as structlog events
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper()))

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


@contextmanager
def roast_log_context(fingerprint: str, tweet_id: Optional[str] = None) -> Iterator[None]:
    """Tag every log event inside the block with this roast's identifiers."""
    fingerprint_token = current_fingerprint.set(fingerprint)
    tweet_token = current_tweet_id.set(tweet_id)
    try:
        yield
    finally:
        current_tweet_id.reset(tweet_token)
        current_fingerprint.reset(fingerprint_token)
