"""Script generator for the roast video pipeline.

Uses the text generation service to write a line-structured roast within a
word budget. A first draft that runs long gets exactly one compression pass;
whatever comes back from that pass is used as-is.
"""

import logging
from typing import Any

from roast_agent.models import Budget, RoastRequest, ScriptResult
from services.prompts import (
    MAX_CAPTION_CHARS,
    build_compression_instructions,
    build_script_instructions,
    load_json_object,
)

logger = logging.getLogger(__name__)

DEFAULT_LINES = [
    "Einstein tried to roast this startup, but even relativity could not bend this pitch into shape.",
]
DEFAULT_CAPTION = "Einstein reviewed your startup. The results are relative."


def _truncate_caption(caption: str) -> str:
    caption = " ".join(caption.split())
    if len(caption) <= MAX_CAPTION_CHARS:
        return caption
    return caption[: MAX_CAPTION_CHARS - 3].rstrip() + "..."


def _clean_lines(raw: Any) -> list[str]:
    if isinstance(raw, str):
        raw = raw.split("\n")
    if not isinstance(raw, list):
        return []
    lines = []
    for item in raw:
        if isinstance(item, str):
            lines.extend(part.strip() for part in item.split("\n") if part.strip())
    return lines


def default_script() -> ScriptResult:
    return ScriptResult(lines=list(DEFAULT_LINES), caption=DEFAULT_CAPTION)


def parse_script_response(raw: str) -> ScriptResult:
    """Normalize a model response into a ScriptResult. Never raises.

    Accepts the current ``{"lines": [...], "caption": ...}`` contract and the
    older ``{"script": "line\\nline", "caption": ...}`` shape. Anything else
    yields the default script.
    """
    data = load_json_object(raw)
    if data is None:
        logger.warning("Script response is not a JSON object, using default script")
        return default_script()

    lines = _clean_lines(data.get("lines"))
    if not lines:
        lines = _clean_lines(data.get("script_lines"))
    if not lines:
        lines = _clean_lines(data.get("script"))
    if not lines:
        logger.warning("Script response has no usable lines, using default script")
        return default_script()

    caption = data.get("caption")
    if not isinstance(caption, str) or not caption.strip():
        caption = lines[0]
    return ScriptResult(lines=lines, caption=_truncate_caption(caption))


class ScriptGenerator:
    """Generates budgeted roast scripts.

    Takes an AIService (or anything with an async ``generate_json``).
    """

    def __init__(self, ai_service, temperature: float = 0.9, compress_temperature: float = 0.5):
        """Initialize with a text generation service.

        Args:
            ai_service: Service exposing ``async generate_json(request) -> str``
            temperature: Sampling temperature for the first draft
            compress_temperature: Sampling temperature for the compression pass
        """
        self.ai = ai_service
        self.temperature = temperature
        self.compress_temperature = compress_temperature

    async def generate(self, request: RoastRequest, budget: Budget) -> ScriptResult:
        """Write a roast script for a normalized request.

        Transport errors from the service propagate so the caller's retry
        policy can re-run the whole step.
        """
        logger.info(
            f"Generating roast script: startup='{request.startup_name[:60]}', "
            f"max_words={budget.max_words}, wps={budget.words_per_second}"
        )

        draft = parse_script_response(
            await self.ai.generate_json(
                build_script_instructions(request, budget, temperature=self.temperature)
            )
        )
        draft_words = draft.word_count
        if draft_words <= budget.max_words:
            logger.info(f"Script within budget: {draft_words}/{budget.max_words} words, {len(draft.lines)} lines")
            return draft

        logger.info(f"Script over budget ({draft_words}/{budget.max_words} words), compressing")
        compressed = parse_script_response(
            await self.ai.generate_json(
                build_compression_instructions(
                    request,
                    budget,
                    draft.lines,
                    draft_words,
                    temperature=self.compress_temperature,
                )
            )
        )

        compressed_words = compressed.word_count
        if compressed_words > budget.max_words:
            logger.warning(
                f"Compressed script still over budget ({compressed_words}/{budget.max_words} words), using it anyway"
            )
        else:
            logger.info(f"Compressed script: {compressed_words}/{budget.max_words} words")
        return compressed
