"""AI-first intent classification with heuristic verification and fallback"""

import json
import math
import random
from typing import Optional, Tuple

import structlog

from .chat_client import ChatModelClient
from .config import settings
from .intent_classifier import IntentClassifier
from .metrics import record_ai_fallback
from .models import AssistedClassification, ClassificationSource, Intent
from .utils.cache import TTLCache

logger = structlog.get_logger(__name__)

CONFLICT_CONFIDENCE = 0.75
DISABLED_CONFIDENCE = 0.7
FALLBACK_CONFIDENCE_MIN = 0.6
FALLBACK_CONFIDENCE_SPAN = 0.2

CLASSIFICATION_PROMPT = """You are an intent classification expert for an inventory management system. Classify the user's message into one of these intents:

INTENTS:
- GREETING: Hello, hi, hey, good morning, etc.
- FAREWELL: Goodbye, bye, see you later, etc.
- THANKS: Thank you, thanks, appreciate it, etc.
- HELP: What can you do, how do you work, assistance needed, etc.
- CLARIFICATION: I don't understand, can you clarify, etc.
- SMALL_TALK: How are you, what's your name, weather, time, etc.
- STOCK_SUMMARY: Show stock levels, what do I have, inventory status, current goods, etc.
- RECENT_TRANSACTIONS: Recent transactions, latest movements, activity history, etc.
- LOW_STOCK: Low stock items, need to restock, running low, depleted, etc.
- FORECAST_QUERIES: Forecast, predict, when will items run out, future needs, etc.
- FILTERED_TRANSACTIONS: Transactions by person, history for item, filtered views, etc.
- OTHER: Anything not related to inventory management

EXAMPLES:
"Hello" -> GREETING
"Show me current stock levels" -> STOCK_SUMMARY
"What needs to be restocked" -> LOW_STOCK
"When will we run out of widgets" -> FORECAST_QUERIES
"Recent transactions by John" -> FILTERED_TRANSACTIONS
"What's the weather" -> OTHER

Classify this message: "{message}"

Respond with JSON format: {{"intent": "INTENT_NAME", "confidence": 0.95}}"""


def parse_ai_response(response: Optional[str]) -> Optional[Tuple[Intent, float]]:
    """Pull ``{"intent", "confidence"}`` out of a model reply, None if unusable"""
    if not response:
        return None

    cleaned = response.strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return None

    try:
        payload = json.loads(cleaned[start:end + 1])
        intent_name = payload.get("intent")
        confidence = float(payload.get("confidence", 0.0))
    except (ValueError, TypeError, AttributeError) as e:
        logger.warning("Failed to parse AI response", error=str(e))
        return None

    if not math.isfinite(confidence):
        logger.warning("Non-finite AI confidence", confidence=confidence)
        return None

    intent = Intent.parse(intent_name)
    if intent == Intent.OTHER and str(intent_name or "").strip().upper() != Intent.OTHER.value:
        logger.warning("Unknown intent string", intent=intent_name)

    return intent, max(0.0, min(1.0, confidence))


class AIIntentClassifier:
    """Trusts the chat model when it is sure, cross-checks it when it is not.

    Any failure of the model call resolves to the heuristic engine's intent
    at a randomized 0.6-0.8 confidence; the explanation records why.
    """

    def __init__(
        self,
        rule_based: IntentClassifier,
        client: Optional[ChatModelClient] = None,
        enabled: bool = None,
        high_threshold: float = None,
        medium_threshold: float = None,
        cache: Optional[TTLCache] = None,
        rng: Optional[random.Random] = None,
    ):
        self.rule_based = rule_based
        self.client = client
        self.enabled = settings.semantic_enabled if enabled is None else enabled
        self.high_threshold = (
            settings.high_confidence_threshold if high_threshold is None else high_threshold
        )
        self.medium_threshold = (
            settings.medium_confidence_threshold if medium_threshold is None else medium_threshold
        )
        self.cache = cache if cache is not None else TTLCache(
            ttl=settings.semantic_cache_ttl, max_size=settings.semantic_cache_size,
        )
        self.rng = rng or random.Random()

    @property
    def ai_enabled(self) -> bool:
        return self.enabled and self.client is not None

    def classify_intent(self, message: Optional[str]) -> AssistedClassification:
        if message is None or not message.strip():
            return AssistedClassification(
                intent=Intent.OTHER,
                confidence=0.0,
                explanation="Empty message",
                source=ClassificationSource.KEYWORD,
            )

        key = message.strip().lower()
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        if not self.ai_enabled:
            logger.debug("AI classification disabled, using rule-based classifier", text=message[:100])
            rule = self.rule_based.classify_detailed(message)
            result = AssistedClassification(
                intent=rule.intent,
                confidence=DISABLED_CONFIDENCE,
                explanation="Rule-based classification (AI disabled)",
                source=rule.source,
            )
            self.cache.set(key, result)
            return result

        try:
            result, cacheable = self._classify_with_ai(message)
        except Exception as e:
            logger.error("AI classification failed", text=message[:100], error=str(e), exc_info=True)
            record_ai_fallback("error")
            return self._fallback(message, f"AI classification error: {e}")

        if result is None:
            record_ai_fallback("unparseable")
            return self._fallback(message, "Failed to parse AI response")

        if cacheable:
            self.cache.set(key, result)
        return result

    def _classify_with_ai(self, message: str) -> Tuple[Optional[AssistedClassification], bool]:
        """Model verdict resolved against the rules, and whether it may be cached.

        Only deterministic outcomes are cacheable; the low confidence band
        draws a random confidence and is recomputed on every call.
        """
        logger.debug("Classifying intent with AI", text=message[:100])
        reply = self.client.complete(CLASSIFICATION_PROMPT.format(message=message))
        logger.debug("AI classification response", response=reply)

        parsed = parse_ai_response(reply)
        if parsed is None:
            return None, False
        ai_intent, confidence = parsed

        if confidence >= self.high_threshold:
            logger.info("AI classified with high confidence",
                        text=message[:100], intent=ai_intent.value, confidence=confidence)
            return AssistedClassification(
                intent=ai_intent,
                confidence=confidence,
                explanation="AI classification (high confidence)",
                source=ClassificationSource.SEMANTIC,
                used_ai=True,
            ), True

        rule = self.rule_based.classify_detailed(message)

        if confidence >= self.medium_threshold:
            if rule.intent == ai_intent:
                logger.info("AI classification verified by rules",
                            text=message[:100], intent=ai_intent.value, confidence=confidence)
                return AssistedClassification(
                    intent=ai_intent,
                    confidence=confidence,
                    explanation="AI classification (medium confidence, verified)",
                    source=ClassificationSource.SEMANTIC,
                    used_ai=True,
                ), True
            logger.info("AI and rules disagree, using rules",
                        text=message[:100], ai_intent=ai_intent.value, rule_intent=rule.intent.value)
            return AssistedClassification(
                intent=rule.intent,
                confidence=CONFLICT_CONFIDENCE,
                explanation="Rule-based classification (AI conflict)",
                source=rule.source,
            ), True

        record_ai_fallback("low_confidence")
        return AssistedClassification(
            intent=rule.intent,
            confidence=self._fallback_confidence(),
            explanation="Rule-based classification (AI low confidence)",
            source=rule.source,
        ), False

    def _fallback(self, message: str, reason: str) -> AssistedClassification:
        rule = self.rule_based.classify_detailed(message)
        return AssistedClassification(
            intent=rule.intent,
            confidence=self._fallback_confidence(),
            explanation=f"Rule-based classification ({reason})",
            source=rule.source,
        )

    def _fallback_confidence(self) -> float:
        return FALLBACK_CONFIDENCE_MIN + self.rng.random() * FALLBACK_CONFIDENCE_SPAN

    def is_conversational_intent(self, intent: Intent) -> bool:
        return self.rule_based.is_conversational_intent(intent)

    def is_high_confidence(self, result: AssistedClassification) -> bool:
        return result.confidence >= self.high_threshold
