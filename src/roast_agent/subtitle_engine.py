"""Deterministic SRT subtitle generator for roast scripts.

There is no audio to align against, so timing is synthesized from the
script itself: each line is on screen for as long as it takes to say it at
the requested words-per-second, rounded up to a tenth of a second with a
floor so short lines stay readable.
"""

import logging
import math
from pathlib import Path

from roast_agent.budget import word_count
from roast_agent.models import SubtitleBlock

logger = logging.getLogger(__name__)

MIN_BLOCK_MS = 800
BLOCK_GAP_MS = 50


def block_duration_ms(words: int, words_per_second: float) -> int:
    """On-screen time for a line of ``words`` words, in milliseconds."""
    # round() first so 12 / 2.4 lands on 5.0 rather than 5.000000000000001
    tenths = math.ceil(round(words / words_per_second * 10, 6))
    return max(MIN_BLOCK_MS, tenths * 100)


def format_timecode(seconds: float) -> str:
    """Format seconds as ``HH:MM:SS,mmm``."""
    total_ms = max(0, int(round(seconds * 1000)))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, millis = divmod(rem, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


class SubtitleEngine:
    """Turns script lines into back-to-back timed caption blocks."""

    def synthesize(self, lines: list[str], words_per_second: float) -> list[SubtitleBlock]:
        """Lay out one block per non-blank line.

        Args:
            lines: Script lines in speaking order.
            words_per_second: Delivery pace.

        Returns:
            Blocks with 1-based contiguous indices. Each block starts 0.05s
            after the previous one ends.
        """
        if words_per_second <= 0:
            raise ValueError(f"words_per_second must be positive, got {words_per_second}")

        blocks: list[SubtitleBlock] = []
        cursor_ms = 0
        for line in lines:
            text = line.strip()
            if not text:
                continue
            start_ms = cursor_ms
            end_ms = start_ms + block_duration_ms(word_count(text), words_per_second)
            blocks.append(SubtitleBlock(
                index=len(blocks) + 1,
                start=start_ms / 1000,
                end=end_ms / 1000,
                text=text,
            ))
            cursor_ms = end_ms + BLOCK_GAP_MS

        logger.debug("Synthesized %d subtitle blocks at %.1f wps", len(blocks), words_per_second)
        return blocks

    def render_srt(self, blocks: list[SubtitleBlock]) -> str:
        """Render blocks as SRT, one blank line between blocks."""
        return "\n".join(
            f"{b.index}\n{format_timecode(b.start)} --> {format_timecode(b.end)}\n{b.text}\n"
            for b in blocks
        )

    def srt_from_lines(self, lines: list[str], words_per_second: float) -> str:
        return self.render_srt(self.synthesize(lines, words_per_second))

    def save_srt_file(self, srt_content: str, output_path: Path) -> Path:
        """Save SRT content to a file.

        Args:
            srt_content: The SRT file content string.
            output_path: Where to write the file.

        Returns:
            The path to the written file.
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(srt_content, encoding="utf-8")
        logger.info("Saved SRT subtitle file: %s", output_path)
        return output_path
