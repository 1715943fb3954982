"""One chat turn: classify, extract, remember, answer"""

import time
from typing import Any, Dict, Optional, Protocol

import structlog

from .ai_classifier import AIIntentClassifier
from .config import settings
from .context_manager import ConversationContextManager, utcnow
from .entity_extractor import EntityExtractor
from .intent_classifier import IntentClassifier
from .metrics import record_classification
from .models import ChatTurn, Intent
from .responder import ConversationResponder
from .semantic_classifier import SemanticClassifier

logger = structlog.get_logger(__name__)

DEFAULT_SUMMARIES = {
    Intent.STOCK_SUMMARY: "Current inventory status:",
    Intent.RECENT_TRANSACTIONS: "Here are the recent stock movements:",
    Intent.FORECAST_QUERIES: "Inventory forecasts:",
    Intent.LOW_STOCK: "Low stock items:",
    Intent.FILTERED_TRANSACTIONS: "Filtered transactions:",
}

OTHER_REPLY = ("Please ask about stock levels, recent movements, low stock items, "
               "forecasts, or recording a stock adjustment.")
MISSING_FILTER_REPLY = ("Please specify what to filter by "
                        "(e.g., 'transactions by Ivan' or 'history for Apple Watch').")
FAILURE_REPLY = "Sorry, I couldn't process that request right now."


class QueryHandler(Protocol):
    """Fetches inventory data for an operational intent; None if not handled"""

    def handle(self, tenant_id: str, intent: Intent, entities: Dict[str, str]) -> Optional[Dict[str, Any]]:
        ...


class InventoryAssistant:
    """Natural-language front door to the inventory backend"""

    def __init__(
        self,
        classifier: AIIntentClassifier,
        context_manager: ConversationContextManager,
        entity_extractor: EntityExtractor = None,
        responder: ConversationResponder = None,
        query_handler: Optional[QueryHandler] = None,
    ):
        self.classifier = classifier
        self.context_manager = context_manager
        self.entity_extractor = entity_extractor or EntityExtractor()
        self.responder = responder or ConversationResponder()
        self.query_handler = query_handler

    def chat(self, tenant_id: str, message: str) -> ChatTurn:
        start_time = time.perf_counter()

        result = self.classifier.classify_intent(message)
        entities = self.entity_extractor.extract(message)
        intent = result.intent

        record_classification(
            "success",
            time.perf_counter() - start_time,
            confidence=result.confidence,
            intent=intent.value,
            source=result.source.value,
        )
        logger.info(
            "Detected intent",
            tenant_id=tenant_id, intent=intent.value,
            confidence=result.confidence, entities=entities,
        )

        is_follow_up = self.context_manager.is_follow_up_question(tenant_id, message)
        self.context_manager.add_user_message(tenant_id, message or "", intent, entities)

        turn = ChatTurn(
            tenant_id=tenant_id,
            message=message or "",
            intent=intent,
            confidence=result.confidence,
            explanation=result.explanation,
            source=result.source,
            used_ai=result.used_ai,
            entities=entities,
            is_follow_up=is_follow_up,
        )

        if self.classifier.is_conversational_intent(intent):
            reply = self.responder.respond(intent, message)
            self.context_manager.add_assistant_response(tenant_id, reply, intent)
            turn.reply = reply
        else:
            turn.data = self._answer(tenant_id, intent, entities)
            turn.reply = turn.data.get("summary")

        turn.suggestions = self.context_manager.get_contextual_suggestions(tenant_id)
        return turn

    def _answer(self, tenant_id: str, intent: Intent, entities: Dict[str, str]) -> Dict[str, Any]:
        if intent == Intent.OTHER:
            return {"summary": OTHER_REPLY}

        if intent == Intent.FILTERED_TRANSACTIONS and not entities.get("filterValue", "").strip():
            return {"summary": MISSING_FILTER_REPLY, "data": []}

        if self.query_handler is None:
            return {"summary": DEFAULT_SUMMARIES.get(intent, ""), "data": []}

        try:
            data = self.query_handler.handle(tenant_id, intent, entities)
        except Exception as e:
            logger.warning("Chat query failed", tenant_id=tenant_id, intent=intent.value, error=str(e))
            return {"summary": FAILURE_REPLY}

        if data is None:
            return {"summary": DEFAULT_SUMMARIES.get(intent, ""), "data": []}
        data.setdefault("summary", DEFAULT_SUMMARIES.get(intent, ""))
        return data


def build_assistant(
    chat_client=None,
    query_handler: Optional[QueryHandler] = None,
    expiry_minutes: int = None,
    clock=utcnow,
    rng=None,
    ai_wrapper: bool = None,
) -> InventoryAssistant:
    """Wire the default classifier stack around an optional chat model client.

    The chat model is consulted in exactly one place. With the AI wrapper on,
    the wrapper owns it and cross-checks against a model-free engine. With it
    off, the model joins fusion as the semantic classifier.
    """
    responder = ConversationResponder(rng=rng)
    if ai_wrapper is None:
        ai_wrapper = settings.ai_wrapper_enabled

    if ai_wrapper or chat_client is None:
        rule_based = IntentClassifier()
        classifier = AIIntentClassifier(rule_based, client=chat_client, rng=rng)
    else:
        rule_based = IntentClassifier(semantic=SemanticClassifier(chat_client))
        classifier = AIIntentClassifier(rule_based, client=None, rng=rng)
    context_manager = ConversationContextManager(
        expiry_minutes=expiry_minutes,
        clock=clock,
        conversational_suggestions=responder.suggestions_for,
    )
    return InventoryAssistant(
        classifier,
        context_manager,
        responder=responder,
        query_handler=query_handler,
    )
