"""Optional shot planning for roast videos.

Breaks the script into timed visual beats and writes a single descriptive
prompt for the video generator. Nothing here is allowed to fail the
pipeline: any error means "no shot plan".
"""

import logging
from typing import Any, Optional

from roast_agent.models import EnergyMode, Shot, ShotPlan
from services.prompts import build_shot_plan_instructions, load_json_object

logger = logging.getLogger(__name__)

MAX_ONSCREEN_WORDS = 6


def _parse_shot(data: Any) -> Optional[Shot]:
    if not isinstance(data, dict):
        return None
    try:
        duration = float(data.get("dur", data.get("duration")))
    except (TypeError, ValueError):
        return None
    if duration <= 0:
        return None

    onscreen = " ".join(str(data.get("onscreen_text", "")).split()[:MAX_ONSCREEN_WORDS])
    return Shot(
        duration=duration,
        visual=str(data.get("visual", "")).strip(),
        action=str(data.get("action", "")).strip(),
        onscreen_text=onscreen.upper(),
        sfx=str(data.get("sfx", "none")).strip() or "none",
    )


def parse_shot_plan(raw: str) -> Optional[ShotPlan]:
    """Normalize a shot plan response. Returns None instead of raising."""
    data = load_json_object(raw)
    if data is None:
        return None

    prompt = data.get("video_prompt") or data.get("sora_prompt")
    if not isinstance(prompt, str) or not prompt.strip():
        return None

    raw_shots = data.get("shots")
    if not isinstance(raw_shots, list):
        return None
    shots = [shot for shot in (_parse_shot(item) for item in raw_shots) if shot is not None]
    if not shots:
        return None

    return ShotPlan(shots=shots, video_prompt=" ".join(prompt.split()))


class ShotPlanner:
    """Turns script lines into a ShotPlan via the text generation service."""

    def __init__(self, ai_service, temperature: float = 0.7):
        self.ai = ai_service
        self.temperature = temperature

    async def plan(
        self,
        lines: list[str],
        aspect_ratio: str = "9:16",
        target_seconds: int = 12,
        energy_mode: EnergyMode = EnergyMode.HYPER,
    ) -> Optional[ShotPlan]:
        try:
            instructions = build_shot_plan_instructions(
                lines, aspect_ratio, target_seconds, energy_mode, temperature=self.temperature
            )
            raw = await self.ai.generate_json(instructions)
        except Exception as e:
            logger.warning(f"Shot planning failed, continuing without a shot plan: {e}")
            return None

        plan = parse_shot_plan(raw)
        if plan is None:
            logger.info("Shot plan response unusable, continuing without a shot plan")
            return None

        if abs(plan.total_duration - target_seconds) > 0.5:
            logger.debug(
                f"Shot durations sum to {plan.total_duration:.1f}s, target was {target_seconds}s"
            )
        logger.info(f"Shot plan ready: {len(plan.shots)} shots")
        return plan
