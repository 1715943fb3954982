import re

import pytest

from inventory_assistant.models import Intent
from inventory_assistant.pattern_matcher import IntentPattern, PatternMatcher


class TestPatternMatcher:
    """Regex rule scanning."""

    @pytest.fixture
    def matcher(self):
        return PatternMatcher()

    def test_empty_message(self, matcher):
        result = matcher.match("   ")
        assert result.intent == Intent.OTHER
        assert result.confidence == 0.0
        assert result.explanation == "Empty message"

    def test_no_rule_matches(self, matcher):
        result = matcher.match("qwerty")
        assert result.intent == Intent.OTHER
        assert result.explanation == "No pattern matched"

    def test_capture_groups_earn_bonus(self, matcher):
        result = matcher.match("stock levels")
        assert result.intent == Intent.STOCK_SUMMARY
        assert result.confidence == pytest.approx(1.05)
        assert result.is_high_confidence

    def test_conversational_rule_has_no_bonus(self, matcher):
        result = matcher.match("hello")
        assert result.intent == Intent.GREETING
        assert result.confidence == pytest.approx(0.85)

    def test_filtered_beats_recent(self, matcher):
        result = matcher.match("show me recent stok movements by Ivan")
        assert result.intent == Intent.FILTERED_TRANSACTIONS
        assert result.matched_text == "movements by Ivan"

    def test_deterministic(self, matcher):
        message = "what needs restocking and when will we run out"
        assert matcher.match(message) == matcher.match(message)

    def test_first_declared_rule_wins_ties(self):
        matcher = PatternMatcher([
            IntentPattern(Intent.LOW_STOCK, re.compile(r"stock", re.IGNORECASE), 0.8),
            IntentPattern(Intent.STOCK_SUMMARY, re.compile(r"stock", re.IGNORECASE), 0.8),
        ])
        assert matcher.match("stock").intent == Intent.LOW_STOCK

    def test_all_matches_and_matches_intent(self, matcher):
        hits = matcher.all_matches("low stock items")
        assert {hit.intent for hit in hits} >= {Intent.LOW_STOCK}
        assert matcher.matches_intent("low stock items", Intent.LOW_STOCK)
        assert not matcher.matches_intent("low stock items", Intent.FORECAST_QUERIES)
        assert matcher.all_matches("") == []
