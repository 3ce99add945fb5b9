"""Roast prompt templates and instruction builders.

Contains prompts for:
- ROAST_SCRIPT_SYSTEM_V1 / ROAST_SCRIPT_USER_V1: first-pass roast script
- ROAST_COMPRESS_USER_V1: single compression pass for over-budget scripts
- SHOT_PLAN_SYSTEM_V1 / SHOT_PLAN_USER_V1: shot breakdown and video prompt

Builders return a validated TextGenerationRequest so the output contract
(schema, required keys) can be checked independently of the wording.
"""

import json

from roast_agent.models import Budget, EnergyMode, RoastRequest, TextGenerationRequest

BEATS = ("Hook", "Twist", "Punchline", "Tag", "Button")
MAX_CAPTION_CHARS = 160

ROAST_SCRIPT_SCHEMA = {
    "type": "object",
    "properties": {
        "lines": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Spoken lines in order, one beat per line",
        },
        "caption": {
            "type": "string",
            "maxLength": MAX_CAPTION_CHARS,
            "description": "Social caption for the video",
        },
    },
    "required": ["lines", "caption"],
    "additionalProperties": False,
}

SHOT_PLAN_SCHEMA = {
    "type": "object",
    "properties": {
        "shots": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "dur": {"type": "number"},
                    "visual": {"type": "string"},
                    "action": {"type": "string"},
                    "onscreen_text": {"type": "string"},
                    "sfx": {"type": "string"},
                },
                "required": ["dur", "visual", "action", "onscreen_text", "sfx"],
            },
        },
        "video_prompt": {"type": "string"},
    },
    "required": ["shots", "video_prompt"],
    "additionalProperties": False,
}

# Roast Script v1 system prompt
# Template placeholders: {beats}, {max_words}, {target_seconds}, {wps}, {max_caption}
ROAST_SCRIPT_SYSTEM_V1 = """You are Albert Einstein hosting a high-energy roast of startup ideas.

STRUCTURE
Write exactly one line per beat, in this order: {beats}.
Each line is 8-12 words, written to be spoken aloud.

TONE
- Playful and sharp, never mean.
- Roast the idea, positioning or market angle, never the person.
- Brand-safe: no slurs, no defamation, no personal data, nothing stronger than mild TV-PG.
- Einstein references (relativity, speed of light, chalkboards) sparingly.

HARD LIMITS
- Total words across all lines: at most {max_words}.
- The clip runs {target_seconds} seconds at {wps} words per second.

OUTPUT
Return ONLY a JSON object: {{"lines": [string, ...], "caption": string}}
The caption is at most {max_caption} characters and pairs with the video."""

# Template placeholders: {startup_name}, {tweet_text}, {extras}
ROAST_SCRIPT_USER_V1 = """Startup: {startup_name}

Tweet text:
{tweet_text}
{extras}
Roast it."""

# Template placeholders: {word_count}, {max_words}, {beat_count}, {lines_json}
ROAST_COMPRESS_USER_V1 = """This roast script is {word_count} words. The limit is {max_words}.

Shorten it to {max_words} words or fewer. Keep Einstein's voice, keep the
{beat_count} beats in the same order, keep the best jokes, cut filler words.

Current script lines:
{lines_json}

Return the same JSON shape: {{"lines": [string, ...], "caption": string}}"""

# Shot Plan v1 system prompt
SHOT_PLAN_SYSTEM_V1 = """You convert a short script into a 4-6 shot plan for a meme-style vertical video
with an Einstein-like presenter in a chalkboard lab. No real logos or faces.

OUTPUT
Return ONLY a JSON object:
{
  "shots": [
    {"dur": number, "visual": string, "action": string, "onscreen_text": string, "sfx": string}
  ],
  "video_prompt": string
}"""

# Template placeholders: {lines_json}, {energy}, {aspect_ratio}, {target_seconds}
SHOT_PLAN_USER_V1 = """Script lines:
{lines_json}

Energy: {energy}
Aspect: {aspect_ratio}
Total duration target: {target_seconds}s

Rules:
- Allocate shot durations ("dur", seconds) that sum to {target_seconds}s.
- Dynamic cuts, quick push-ins, chalk scribbles appearing, meme captions.
- Onscreen text is 6 words or fewer, big, uppercased, one per beat.
- "video_prompt" is a single coherent description including camera, setting,
  lighting, motion, and that the actor speaks the script with energetic delivery."""


def _request_extras(request: RoastRequest) -> str:
    extras = []
    if request.author_handle:
        extras.append(f"Author handle: {request.author_handle}")
    if request.website:
        extras.append(f"Website: {request.website}")
    if request.angle:
        extras.append(f"Requested angle: {request.angle}")
    if not extras:
        return ""
    return "\n" + "\n".join(extras) + "\n"


def _system_prompt(request: RoastRequest, budget: Budget) -> str:
    return ROAST_SCRIPT_SYSTEM_V1.format(
        beats=", ".join(BEATS),
        max_words=budget.max_words,
        target_seconds=request.target_seconds,
        wps=budget.words_per_second,
        max_caption=MAX_CAPTION_CHARS,
    )


def build_script_instructions(
    request: RoastRequest, budget: Budget, temperature: float = 0.9
) -> TextGenerationRequest:
    """First-pass instructions for a roast script."""
    user = ROAST_SCRIPT_USER_V1.format(
        startup_name=request.startup_name,
        tweet_text=request.tweet_text,
        extras=_request_extras(request),
    )
    return TextGenerationRequest(
        name="roast_script_v1",
        system=_system_prompt(request, budget),
        user=user,
        schema=ROAST_SCRIPT_SCHEMA,
        temperature=temperature,
    ).validate()


def build_compression_instructions(
    request: RoastRequest,
    budget: Budget,
    lines: list[str],
    word_count: int,
    temperature: float = 0.5,
) -> TextGenerationRequest:
    """Instructions for the one compression pass over an over-budget script."""
    user = ROAST_COMPRESS_USER_V1.format(
        word_count=word_count,
        max_words=budget.max_words,
        beat_count=len(BEATS),
        lines_json=json.dumps(lines, ensure_ascii=False, indent=2),
    )
    return TextGenerationRequest(
        name="roast_compress_v1",
        system=_system_prompt(request, budget),
        user=user,
        schema=ROAST_SCRIPT_SCHEMA,
        temperature=temperature,
    ).validate()


def build_shot_plan_instructions(
    lines: list[str],
    aspect_ratio: str,
    target_seconds: int,
    energy_mode: EnergyMode,
    temperature: float = 0.7,
) -> TextGenerationRequest:
    """Instructions for the optional shot plan."""
    user = SHOT_PLAN_USER_V1.format(
        lines_json=json.dumps(lines, ensure_ascii=False),
        energy=EnergyMode.parse(energy_mode).value,
        aspect_ratio=aspect_ratio,
        target_seconds=target_seconds,
    )
    return TextGenerationRequest(
        name="shot_plan_v1",
        system=SHOT_PLAN_SYSTEM_V1,
        user=user,
        schema=SHOT_PLAN_SCHEMA,
        temperature=temperature,
    ).validate()
