"""Heuristic classifier variants combined by the fusion engine.

Each variant exposes ``classify(message) -> ClassificationResult`` plus a
``min_confidence`` gate below which the engine ignores its answer.
"""

from typing import Optional, Protocol, Sequence

import structlog

from .fuzzy_matcher import FuzzyMatcher
from .keyword_classifier import classify_operational_keywords
from .lexicon import SYNONYM_INTENT_ORDER
from .models import ClassificationResult, ClassificationSource, Intent
from .pattern_matcher import PatternMatcher
from .synonym_expander import SynonymExpander

logger = structlog.get_logger(__name__)

SYNONYM_BASE_CONFIDENCE = 0.6
SYNONYM_MAX_BONUS = 0.2
SYNONYM_BONUS_PER_TOKEN = 0.05

FUZZY_BASE_CONFIDENCE = 0.5
FUZZY_BONUS_PER_HIT = 0.1


class Classifier(Protocol):
    source: ClassificationSource
    min_confidence: float

    def classify(self, message: str) -> ClassificationResult:
        ...


def no_match(source: ClassificationSource, explanation: str) -> ClassificationResult:
    return ClassificationResult(
        intent=Intent.OTHER, confidence=0.0, explanation=explanation, source=source,
    )


class PatternClassifier:
    """Regex rules; only high confidence hits count"""

    source = ClassificationSource.PATTERN

    def __init__(self, matcher: PatternMatcher = None, min_confidence: float = 0.8):
        self.matcher = matcher or PatternMatcher()
        self.min_confidence = min_confidence

    def classify(self, message: str) -> ClassificationResult:
        result = self.matcher.match(message)
        if result.intent == Intent.OTHER:
            return no_match(self.source, result.explanation)
        return ClassificationResult(
            intent=result.intent,
            confidence=min(1.0, result.confidence),
            explanation=result.explanation,
            source=self.source,
        )


class SynonymClassifier:
    """Intent trigger phrases looked up in the synonym-expanded message"""

    source = ClassificationSource.SYNONYM
    min_confidence = 0.0

    def __init__(
        self,
        expander: SynonymExpander = None,
        intent_order: Sequence[Intent] = SYNONYM_INTENT_ORDER,
    ):
        self.expander = expander or SynonymExpander()
        self.intent_order = tuple(intent_order)

    def classify(self, message: str) -> ClassificationResult:
        for intent in self.intent_order:
            if self.expander.contains_intent_keywords(message, intent.value):
                expanded = self.expander.expand(message) or ""
                extra_tokens = max(0, len(expanded.split()) - len(message.split()))
                confidence = SYNONYM_BASE_CONFIDENCE + min(
                    SYNONYM_MAX_BONUS, SYNONYM_BONUS_PER_TOKEN * extra_tokens
                )
                return ClassificationResult(
                    intent=intent,
                    confidence=round(confidence, 4),
                    explanation=f"Synonym-enhanced keyword match ({extra_tokens} expansion tokens)",
                    source=self.source,
                )
        return no_match(self.source, "No intent keywords after synonym expansion")


class FuzzyClassifier:
    """Keyword rules over a typo-corrected copy of the message"""

    source = ClassificationSource.FUZZY
    min_confidence = 0.0

    def __init__(self, matcher: FuzzyMatcher = None):
        self.matcher = matcher or FuzzyMatcher()

    def classify(self, message: str) -> ClassificationResult:
        hits = self.matcher.count_fuzzy_corrections(message)
        if hits == 0:
            return no_match(self.source, "No fuzzy corrections")

        expanded = self.matcher.expand_with_fuzzy_matching(message)
        intent = classify_operational_keywords(expanded)
        if intent == Intent.OTHER:
            return no_match(self.source, f"No keywords after {hits} fuzzy corrections")

        return ClassificationResult(
            intent=intent,
            confidence=round(min(1.0, FUZZY_BASE_CONFIDENCE + FUZZY_BONUS_PER_HIT * hits), 4),
            explanation=f"Fuzzy keyword match ({hits} corrections)",
            source=self.source,
        )


def gated(result: Optional[ClassificationResult], min_confidence: float) -> bool:
    """Whether a classifier answer may compete in fusion"""
    return (
        result is not None
        and result.intent != Intent.OTHER
        and result.confidence >= min_confidence
    )
