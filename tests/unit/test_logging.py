"""Tests for roast-scoped structured logging."""

import pytest

from utils.logging import add_roast_context, current_fingerprint, current_tweet_id, roast_log_context

FP = "abcdef0123456789" * 4


class TestRoastLogContext:
    @pytest.mark.unit
    def test_events_tagged_inside_block(self):
        with roast_log_context(FP, "1790"):
            event = add_roast_context(None, "info", {"event": "hello"})

        assert event == {"event": "hello", "fingerprint": FP[:12], "tweet_id": "1790"}

    @pytest.mark.unit
    def test_context_reset_after_block(self):
        with pytest.raises(RuntimeError):
            with roast_log_context(FP, "1790"):
                raise RuntimeError("boom")

        assert current_fingerprint.get() is None
        assert current_tweet_id.get() is None
        assert add_roast_context(None, "info", {"event": "x"}) == {"event": "x"}

    @pytest.mark.unit
    def test_explicit_fields_win(self):
        with roast_log_context(FP):
            event = add_roast_context(None, "info", {"event": "x", "fingerprint": "custom"})
        assert event["fingerprint"] == "custom"
        assert "tweet_id" not in event
