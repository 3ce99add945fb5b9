"""Prompts module - centralized prompt templates for the roast pipeline.

Re-exports prompt builders and utilities for easy importing:
    from services.prompts import build_script_instructions, load_json_object
"""

from services.prompts._base import load_json_object, strip_markdown_code_blocks
from services.prompts.roast import (
    BEATS,
    MAX_CAPTION_CHARS,
    ROAST_SCRIPT_SCHEMA,
    SHOT_PLAN_SCHEMA,
    build_compression_instructions,
    build_script_instructions,
    build_shot_plan_instructions,
)

__all__ = [
    # Utilities
    "strip_markdown_code_blocks",
    "load_json_object",
    # Output contracts
    "BEATS",
    "MAX_CAPTION_CHARS",
    "ROAST_SCRIPT_SCHEMA",
    "SHOT_PLAN_SCHEMA",
    # Builders
    "build_script_instructions",
    "build_compression_instructions",
    "build_shot_plan_instructions",
]
