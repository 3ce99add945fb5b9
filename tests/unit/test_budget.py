"""Tests for the word budget and tokenizer."""

import pytest

from roast_agent.budget import MIN_WORDS, compute_budget, total_words, word_count
from roast_agent.models import EnergyMode, ValidationError


class TestWordCount:
    """Tests for word_count() and total_words()."""

    @pytest.mark.unit
    def test_counts_plain_words(self):
        assert word_count("Hello, world!") == 2

    @pytest.mark.unit
    def test_apostrophes_and_hyphens_stay_in_one_word(self):
        assert word_count("don't stop-believing now") == 3
        assert word_count("it’s fine") == 2

    @pytest.mark.unit
    def test_punctuation_only_is_zero(self):
        assert word_count("") == 0
        assert word_count("   ...  — !") == 0

    @pytest.mark.unit
    def test_total_words_sums_lines(self):
        assert total_words(["one two", "three", ""]) == 3


class TestComputeBudget:
    """Tests for compute_budget()."""

    @pytest.mark.unit
    def test_hyper_twelve_seconds(self):
        budget = compute_budget(12, EnergyMode.HYPER)
        assert budget.words_per_second == 3.0
        assert budget.max_words == 36

    @pytest.mark.unit
    def test_normal_twelve_seconds(self):
        budget = compute_budget(12, EnergyMode.NORMAL)
        assert budget.words_per_second == 2.4
        assert budget.max_words == 29

    @pytest.mark.unit
    def test_normal_short_clip_hits_floor(self):
        budget = compute_budget(4, EnergyMode.NORMAL)
        assert (budget.words_per_second, budget.max_words) == (2.4, 18)

    @pytest.mark.unit
    def test_rounds_half_up(self):
        assert compute_budget(10.5, EnergyMode.HYPER).max_words == 32

    @pytest.mark.unit
    def test_floor_applies_to_short_and_non_positive_durations(self):
        assert compute_budget(5, EnergyMode.HYPER).max_words == MIN_WORDS
        assert compute_budget(0).max_words == MIN_WORDS
        assert compute_budget(-3).max_words == MIN_WORDS

    @pytest.mark.unit
    def test_accepts_mode_names(self):
        assert compute_budget(12, "normal").words_per_second == 2.4

    @pytest.mark.unit
    def test_unknown_mode_rejected(self):
        with pytest.raises(ValidationError):
            compute_budget(12, "LUDICROUS")
