"""Intent classification by confidence fusion of independent classifiers"""

from typing import List, Optional, Sequence

import structlog

from .classifiers import (
    Classifier,
    FuzzyClassifier,
    PatternClassifier,
    SynonymClassifier,
    gated,
)
from .config import settings
from .keyword_classifier import KeywordClassifier
from .models import ClassificationResult, ClassificationSource, Intent

logger = structlog.get_logger(__name__)


def default_classifiers(semantic: Optional[Classifier] = None) -> List[Classifier]:
    """Fusion inputs in their tie-break order"""
    classifiers: List[Classifier] = []
    if semantic is not None:
        classifiers.append(semantic)
    classifiers.extend([
        PatternClassifier(min_confidence=settings.pattern_confidence_threshold),
        SynonymClassifier(),
        FuzzyClassifier(),
        KeywordClassifier(),
    ])
    return classifiers


class IntentClassifier:
    """Runs every classifier and keeps the most confident accepted answer.

    The running best is only replaced on strictly greater confidence, so
    when two classifiers agree on a score the one listed first wins.
    """

    def __init__(
        self,
        classifiers: Optional[Sequence[Classifier]] = None,
        semantic: Optional[Classifier] = None,
    ):
        if classifiers is None:
            classifiers = default_classifiers(semantic)
        self.classifiers = tuple(classifiers)

    def classify(self, message: Optional[str]) -> Intent:
        return self.classify_detailed(message).intent

    def classify_detailed(self, message: Optional[str]) -> ClassificationResult:
        if message is None or not message.strip():
            return ClassificationResult(
                intent=Intent.OTHER,
                confidence=0.0,
                explanation="Empty message",
                source=ClassificationSource.KEYWORD,
            )

        best: Optional[ClassificationResult] = None
        for classifier in self.classifiers:
            try:
                result = classifier.classify(message)
            except Exception as e:
                logger.error(
                    "Classifier failed",
                    classifier=type(classifier).__name__, error=str(e), text=message[:100],
                )
                continue

            if not gated(result, classifier.min_confidence):
                continue
            if best is None or result.confidence > best.confidence:
                best = result

        if best is None:
            best = ClassificationResult(
                intent=Intent.OTHER,
                confidence=0.0,
                explanation="No classifier matched",
                source=ClassificationSource.KEYWORD,
            )

        logger.info(
            "Classified message",
            text=message[:100],
            intent=best.intent.value,
            confidence=best.confidence,
            method=best.source.value,
        )
        return best

    @staticmethod
    def is_conversational_intent(intent: Intent) -> bool:
        return intent.is_conversational
