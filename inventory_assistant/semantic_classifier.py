"""Chat-model backed intent classifier used as one fusion input"""

from typing import Optional, Tuple

import structlog

from .chat_client import ChatModelClient
from .config import settings
from .models import ClassificationResult, ClassificationSource, Intent
from .utils.cache import TTLCache

logger = structlog.get_logger(__name__)

INTENT_CLASSIFICATION_PROMPT = """You are an inventory management AI assistant. Classify the user's intent into one of these categories:

CATEGORIES:
- STOCK_SUMMARY: User wants to see current inventory levels, stock status, what items are available
- RECENT_TRANSACTIONS: User wants to see recent stock movements, transaction history, recent activity
- LOW_STOCK: User wants to see items that need restocking, are running low, need to be reordered
- FORECAST_QUERIES: User wants to see predictions, forecasts, when items will run out, future stock needs
- FILTERED_TRANSACTIONS: User wants to see transactions filtered by person or item
- OTHER: Request doesn't match any inventory-related intent

EXAMPLES:
User: "show me stock levels" -> STOCK_SUMMARY
User: "what do I have in inventory" -> STOCK_SUMMARY
User: "current inventory status" -> STOCK_SUMMARY
User: "show me recent transactions" -> RECENT_TRANSACTIONS
User: "recent stock movements" -> RECENT_TRANSACTIONS
User: "what's been happening with inventory" -> RECENT_TRANSACTIONS
User: "low stock items" -> LOW_STOCK
User: "what needs to be restocked" -> LOW_STOCK
User: "items running low" -> LOW_STOCK
User: "forecast predictions" -> FORECAST_QUERIES
User: "when will items run out" -> FORECAST_QUERIES
User: "future inventory needs" -> FORECAST_QUERIES
User: "transactions by John" -> FILTERED_TRANSACTIONS
User: "history for product X" -> FILTERED_TRANSACTIONS
User: "what's the weather" -> OTHER

Classify this user message: "{message}"

Respond with only the intent name (e.g., STOCK_SUMMARY)."""

# Checked in this order so longer names win over their substrings
_REPLY_INTENTS = (
    Intent.FILTERED_TRANSACTIONS,
    Intent.RECENT_TRANSACTIONS,
    Intent.FORECAST_QUERIES,
    Intent.STOCK_SUMMARY,
    Intent.LOW_STOCK,
    Intent.OTHER,
)
_OPERATIONAL_NAMES = {intent.value for intent in _REPLY_INTENTS if intent != Intent.OTHER}
_PARTIAL_MARKERS = ("STOCK", "TRANSACTION", "LOW", "FORECAST", "FILTER")


def parse_intent_reply(reply: Optional[str]) -> Tuple[Intent, float]:
    """Intent named in a free-text reply and how cleanly it was named"""
    if reply is None:
        return Intent.OTHER, 0.0

    clean = reply.strip().upper()

    intent = Intent.OTHER
    for candidate in _REPLY_INTENTS:
        if clean == candidate.value:
            intent = candidate
            break
    else:
        for candidate in _REPLY_INTENTS:
            if candidate.value in clean:
                intent = candidate
                break

    if clean in _OPERATIONAL_NAMES:
        confidence = 0.9
    elif any(marker in clean for marker in _PARTIAL_MARKERS):
        confidence = 0.7
    else:
        confidence = 0.3

    return intent, confidence


class SemanticClassifier:
    """Few-shot prompt classification; fails closed to OTHER at zero confidence"""

    source = ClassificationSource.SEMANTIC

    def __init__(
        self,
        client: ChatModelClient,
        enabled: bool = None,
        min_confidence: float = None,
        cache: Optional[TTLCache] = None,
    ):
        self.client = client
        self.enabled = settings.semantic_enabled if enabled is None else enabled
        self.min_confidence = (
            settings.semantic_confidence_threshold if min_confidence is None else min_confidence
        )
        self.cache = cache if cache is not None else TTLCache(
            ttl=settings.semantic_cache_ttl, max_size=settings.semantic_cache_size,
        )

    def classify(self, message: str) -> ClassificationResult:
        if message is None or not message.strip():
            return self._failed("Empty message")
        if not self.enabled:
            return self._failed("Semantic classification disabled")

        key = message.strip().lower()
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            reply = self.client.complete(INTENT_CLASSIFICATION_PROMPT.format(message=message.strip()))
        except Exception as e:
            logger.warning("Semantic classification failed", error=str(e), text=message[:100])
            return self._failed(f"Semantic classification failed: {e}")

        intent, confidence = parse_intent_reply(reply)
        logger.info(
            "Semantic classifier result",
            text=message[:100], intent=intent.value, confidence=confidence,
        )
        result = ClassificationResult(
            intent=intent,
            confidence=confidence,
            explanation="Semantic classification successful",
            source=self.source,
        )
        self.cache.set(key, result)
        return result

    def _failed(self, explanation: str) -> ClassificationResult:
        return ClassificationResult(
            intent=Intent.OTHER, confidence=0.0, explanation=explanation, source=self.source,
        )
