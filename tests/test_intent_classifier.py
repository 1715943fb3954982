import pytest

from inventory_assistant.classifiers import FuzzyClassifier, PatternClassifier, SynonymClassifier
from inventory_assistant.intent_classifier import IntentClassifier
from inventory_assistant.keyword_classifier import KeywordClassifier, classify_keywords
from inventory_assistant.models import ClassificationSource, Intent


class TestClassifierVariants:
    """Individual fusion inputs."""

    def test_pattern_confidence_is_capped(self):
        result = PatternClassifier().classify("stock levels")
        assert result.intent == Intent.STOCK_SUMMARY
        assert result.confidence == 1.0
        assert result.source == ClassificationSource.PATTERN

    def test_synonym_confidence_grows_with_expansion(self):
        result = SynonymClassifier().classify("projection please")
        assert result.intent == Intent.FORECAST_QUERIES
        assert result.confidence == pytest.approx(0.8)
        assert result.source == ClassificationSource.SYNONYM

    def test_fuzzy_needs_a_correction(self):
        assert FuzzyClassifier().classify("stock").intent == Intent.OTHER

    def test_fuzzy_corrected_keyword(self):
        result = FuzzyClassifier().classify("stok")
        assert result.intent == Intent.STOCK_SUMMARY
        assert result.confidence == pytest.approx(0.6)

    def test_keyword_fallback(self):
        result = KeywordClassifier().classify("thank you so much")
        assert result.intent == Intent.THANKS
        assert result.confidence == pytest.approx(0.4)

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("hey there", Intent.GREETING),
            ("what is the capital of France", Intent.OTHER),
            ("where am i", Intent.SMALL_TALK),
            ("when will widgets run out", Intent.FORECAST_QUERIES),
            ("transactions by ivan", Intent.FILTERED_TRANSACTIONS),
            ("need to restock", Intent.LOW_STOCK),
        ],
    )
    def test_keyword_rules(self, text, expected):
        assert classify_keywords(text) == expected


class TestIntentClassifier:
    """Confidence fusion over classifier variants."""

    @pytest.fixture
    def classifier(self):
        return IntentClassifier()

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_input(self, text, make_stub):
        stub = make_stub(Intent.LOW_STOCK, 0.9)
        result = IntentClassifier([stub]).classify_detailed(text)
        assert result.intent == Intent.OTHER
        assert result.confidence == 0.0
        assert result.source == ClassificationSource.KEYWORD
        stub.classify.assert_not_called()

    def test_filtered_request_with_typo(self, classifier):
        result = classifier.classify_detailed("show me recent stok movements by Ivan")
        assert result.intent == Intent.FILTERED_TRANSACTIONS
        assert result.confidence == 1.0
        assert result.source == ClassificationSource.PATTERN

    def test_greeting(self, classifier):
        assert classifier.classify("hello") == Intent.GREETING

    def test_highest_confidence_wins(self, make_stub):
        classifier = IntentClassifier([
            make_stub(Intent.LOW_STOCK, 0.6),
            make_stub(Intent.FORECAST_QUERIES, 0.9),
        ])
        assert classifier.classify("anything") == Intent.FORECAST_QUERIES

    def test_tie_keeps_first_classifier(self, make_stub):
        classifier = IntentClassifier([
            make_stub(Intent.LOW_STOCK, 0.7),
            make_stub(Intent.STOCK_SUMMARY, 0.7),
        ])
        assert classifier.classify("anything") == Intent.LOW_STOCK

    def test_gate_drops_weak_answers(self, make_stub):
        classifier = IntentClassifier([
            make_stub(Intent.LOW_STOCK, 0.75, min_confidence=0.8),
            make_stub(Intent.STOCK_SUMMARY, 0.4),
        ])
        assert classifier.classify("anything") == Intent.STOCK_SUMMARY

    def test_failing_classifier_is_skipped(self, make_stub):
        broken = make_stub(Intent.LOW_STOCK, 0.9)
        broken.classify.side_effect = RuntimeError("boom")
        classifier = IntentClassifier([broken, make_stub(Intent.STOCK_SUMMARY, 0.5)])
        assert classifier.classify("anything") == Intent.STOCK_SUMMARY

    def test_nothing_matched(self, make_stub):
        result = IntentClassifier([make_stub(Intent.OTHER, 0.0)]).classify_detailed("qwerty")
        assert result.intent == Intent.OTHER
        assert result.explanation == "No classifier matched"

    def test_conversational_check(self):
        assert IntentClassifier.is_conversational_intent(Intent.THANKS)
        assert not IntentClassifier.is_conversational_intent(Intent.LOW_STOCK)


class TestFusionOnRealMessages:
    """Fusion behaviour with the default, model-free classifier stack."""

    @pytest.fixture
    def classifier(self):
        return IntentClassifier()

    def test_synonym_match_outranks_keyword_fallback(self, classifier):
        message = "they have a stock shortage"

        keyword = KeywordClassifier().classify(message)
        synonym = SynonymClassifier().classify(message)
        assert keyword.intent == Intent.GREETING
        assert keyword.confidence == pytest.approx(0.4)
        assert synonym.intent == Intent.LOW_STOCK
        assert synonym.confidence >= 0.6

        result = classifier.classify_detailed(message)

        assert result.intent == Intent.LOW_STOCK
        assert result.source == ClassificationSource.SYNONYM

    def test_equal_scores_keep_the_classifier_checked_first(self, classifier):
        message = "days remaining stok"

        synonym = SynonymClassifier().classify(message)
        fuzzy = FuzzyClassifier().classify(message)
        assert synonym.intent == Intent.FORECAST_QUERIES
        assert fuzzy.intent == Intent.STOCK_SUMMARY
        assert synonym.confidence == fuzzy.confidence == pytest.approx(0.6)

        result = classifier.classify_detailed(message)
        assert result.intent == Intent.FORECAST_QUERIES
        assert result.source == ClassificationSource.SYNONYM

        reversed_order = IntentClassifier([FuzzyClassifier(), SynonymClassifier()])
        assert reversed_order.classify(message) == Intent.STOCK_SUMMARY
