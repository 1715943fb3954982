"""Last-resort substring keyword rules"""

from typing import Optional

import structlog

from .models import ClassificationResult, ClassificationSource, Intent

logger = structlog.get_logger(__name__)

KEYWORD_CONFIDENCE = 0.4

_INVENTORY_TERMS = (
    "stock", "inventory", "transaction", "forecast", "run out", "items",
    "by", "for", "history", "weather", "time", "capital",
)
_FILTER_WORDS = ("by", "for", "of", "from")


def _matches_any(message: str, *keywords: str) -> bool:
    return any(keyword in message for keyword in keywords)


def classify_operational_keywords(message: str) -> Intent:
    """Operational intent from plain substring checks, OTHER if none apply"""
    m = message.lower()

    if _matches_any(m, "forecast", "predict", "run out", "when will", "future"):
        return Intent.FORECAST_QUERIES
    if _matches_any(m, "transaction", "movement") and _matches_any(m, *_FILTER_WORDS):
        return Intent.FILTERED_TRANSACTIONS
    if "history" in m and _matches_any(m, *_FILTER_WORDS):
        return Intent.FILTERED_TRANSACTIONS
    if _matches_any(m, "recent", "latest", "history", "activity", "what's been happening") and \
            _matches_any(m, "transaction", "movement", "change", "inventory"):
        return Intent.RECENT_TRANSACTIONS
    if _matches_any(m, "low stock", "restock", "reorder", "running low", "depleted"):
        return Intent.LOW_STOCK
    if _matches_any(m, "stock", "inventory", "what do i have", "current", "available"):
        return Intent.STOCK_SUMMARY

    return Intent.OTHER


def classify_keywords(message: str) -> Intent:
    """Conversational checks first, then the operational rules"""
    m = message.lower()

    if _matches_any(m, "hello", "hi ", "hey", "good morning", "good afternoon", "good evening"):
        return Intent.GREETING
    if _matches_any(m, "bye", "goodbye", "see you", "farewell", "later"):
        return Intent.FAREWELL
    if _matches_any(m, "thank", "appreciate", "grateful"):
        return Intent.THANKS
    if _matches_any(m, "help", "what can you do", "how do you work", "assist"):
        return Intent.HELP
    if _matches_any(m, "don't understand", "clarify", "rephrase", "confused", "not sure"):
        return Intent.CLARIFICATION
    if _matches_any(m, "how are you", "who are you", "weather", "time"):
        return Intent.SMALL_TALK
    if _matches_any(m, "joke", "game"):
        return Intent.OTHER
    if _matches_any(m, "what", "who", "where", "when", "how", "why") and \
            not _matches_any(m, *_INVENTORY_TERMS):
        return Intent.SMALL_TALK

    return classify_operational_keywords(m)


class KeywordClassifier:
    """Substring fallback at a fixed, deliberately low confidence"""

    source = ClassificationSource.KEYWORD
    min_confidence = 0.0

    def classify(self, message: Optional[str]) -> ClassificationResult:
        if message is None or not message.strip():
            return ClassificationResult(
                intent=Intent.OTHER, confidence=0.0,
                explanation="Empty message", source=self.source,
            )

        intent = classify_keywords(message)
        if intent == Intent.OTHER:
            return ClassificationResult(
                intent=Intent.OTHER, confidence=0.0,
                explanation="No keyword matched", source=self.source,
            )

        logger.debug("Keyword fallback matched", intent=intent.value)
        return ClassificationResult(
            intent=intent,
            confidence=KEYWORD_CONFIDENCE,
            explanation="Basic keyword matching",
            source=self.source,
        )
