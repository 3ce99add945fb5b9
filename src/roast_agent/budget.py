"""Word budget for roast scripts.

The same tokenizer is used to size the budget and to check a generated
script against it.
"""

import math
import re

from roast_agent.models import Budget, EnergyMode

WORDS_PER_SECOND = {
    EnergyMode.HYPER: 3.0,
    EnergyMode.NORMAL: 2.4,
}
MIN_WORDS = 18

# Letters, digits, underscores, apostrophes (straight and curly) and hyphens
_WORD_PATTERN = re.compile(r"\b[\w'’-]+\b")


def word_count(text: str) -> int:
    return len(_WORD_PATTERN.findall(text.strip()))


def total_words(lines: list[str]) -> int:
    return sum(word_count(line) for line in lines)


def compute_budget(target_seconds: float, energy_mode: EnergyMode | str = EnergyMode.HYPER) -> Budget:
    """Derive words-per-second and the word ceiling.

    Non-positive durations still get the MIN_WORDS floor. Rounding is half-up.
    """
    wps = WORDS_PER_SECOND[EnergyMode.parse(energy_mode)]
    max_words = max(MIN_WORDS, math.floor(target_seconds * wps + 0.5))
    return Budget(words_per_second=wps, max_words=int(max_words))
