"""Per-tenant conversation memory with inactivity expiry"""

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

import structlog

from .config import settings
from .lexicon import CONTEXT_SUGGESTIONS, DEFAULT_SUGGESTIONS, FOLLOW_UP_INDICATORS
from .models import ConversationMessage, Intent, MessageRole

logger = structlog.get_logger(__name__)

FOLLOW_UP_MAX_WORDS = 3


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConversationContext:
    """Ordered message history for one tenant"""

    def __init__(self, created_at: datetime):
        self._messages: List[ConversationMessage] = []
        self.message_count = 0
        self.last_activity = created_at

    def add_message(self, message: ConversationMessage, now: datetime):
        self._messages.append(message)
        # never move backwards, even if the clock does
        if now > self.last_activity:
            self.last_activity = now

    def increment_message_count(self):
        self.message_count += 1

    @property
    def messages(self) -> List[ConversationMessage]:
        return list(self._messages)

    def is_empty(self) -> bool:
        return not self._messages

    def last_intent(self) -> Intent:
        for message in reversed(self._messages):
            if message.role == MessageRole.USER:
                return message.intent
        return Intent.OTHER


class ContextStore:
    """Thread-safe tenant -> context map.

    ``get_or_create`` creates at most one context per tenant and
    ``remove_if`` re-checks its predicate under the lock, so an eviction
    never drops a context that was refreshed or recreated meanwhile.
    """

    def __init__(self, factory: Callable[[], ConversationContext]):
        self._factory = factory
        self._contexts: Dict[str, ConversationContext] = {}
        self._lock = threading.Lock()

    def get(self, tenant_id: str) -> Optional[ConversationContext]:
        with self._lock:
            return self._contexts.get(tenant_id)

    def get_or_create(self, tenant_id: str) -> ConversationContext:
        with self._lock:
            context = self._contexts.get(tenant_id)
            if context is None:
                context = self._factory()
                self._contexts[tenant_id] = context
            return context

    def remove(self, tenant_id: str) -> Optional[ConversationContext]:
        with self._lock:
            return self._contexts.pop(tenant_id, None)

    def remove_if(self, tenant_id: str, predicate: Callable[[ConversationContext], bool]) -> bool:
        with self._lock:
            context = self._contexts.get(tenant_id)
            if context is not None and predicate(context):
                del self._contexts[tenant_id]
                return True
            return False

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._contexts)

    def __len__(self) -> int:
        with self._lock:
            return len(self._contexts)


class ConversationContextManager:
    """Remembers recent turns per tenant to resolve follow-ups and suggest next steps"""

    def __init__(
        self,
        expiry_minutes: int = None,
        clock: Callable[[], datetime] = utcnow,
        conversational_suggestions: Callable[[Intent], Optional[List[str]]] = None,
    ):
        minutes = settings.context_expiry_minutes if expiry_minutes is None else expiry_minutes
        self.expiry = timedelta(minutes=minutes)
        self._clock = clock
        self._conversational_suggestions = conversational_suggestions
        self.store = ContextStore(lambda: ConversationContext(self._clock()))

    def add_user_message(
        self,
        tenant_id: str,
        message: str,
        intent: Intent,
        entities: Optional[Dict[str, str]] = None,
    ):
        context = self.store.get_or_create(tenant_id)
        now = self._clock()
        context.add_message(
            ConversationMessage(
                content=message,
                role=MessageRole.USER,
                intent=intent,
                entities=dict(entities or {}),
                timestamp=now,
            ),
            now,
        )
        context.increment_message_count()
        logger.debug("Added user message to context", tenant_id=tenant_id, intent=intent.value)

    def add_assistant_response(self, tenant_id: str, response: str, intent: Intent):
        context = self.store.get_or_create(tenant_id)
        now = self._clock()
        context.add_message(
            ConversationMessage(
                content=response,
                role=MessageRole.ASSISTANT,
                intent=intent,
                entities={},
                timestamp=now,
            ),
            now,
        )
        logger.debug("Added assistant response to context", tenant_id=tenant_id)

    def get_context(self, tenant_id: str) -> Optional[ConversationContext]:
        return self.store.get(tenant_id)

    def get_recent_messages(self, tenant_id: str, count: int) -> List[ConversationMessage]:
        context = self.store.get(tenant_id)
        if context is None or count <= 0:
            return []
        return context.messages[-count:]

    def get_last_intent(self, tenant_id: str) -> Intent:
        context = self.store.get(tenant_id)
        if context is None:
            return Intent.OTHER
        return context.last_intent()

    def is_follow_up_question(self, tenant_id: str, message: Optional[str]) -> bool:
        context = self.store.get(tenant_id)
        if context is None or context.is_empty() or not message:
            return False

        lowered = message.lower()
        if any(indicator in lowered for indicator in FOLLOW_UP_INDICATORS):
            return True

        return len(message.split()) <= FOLLOW_UP_MAX_WORDS and context.message_count > 1

    def get_contextual_suggestions(self, tenant_id: str) -> List[str]:
        context = self.store.get(tenant_id)
        if context is None or context.is_empty():
            return list(DEFAULT_SUGGESTIONS)

        last_intent = context.last_intent()
        if last_intent in CONTEXT_SUGGESTIONS:
            return list(CONTEXT_SUGGESTIONS[last_intent])

        if self._conversational_suggestions is not None:
            suggestions = self._conversational_suggestions(last_intent)
            if suggestions:
                return list(suggestions)

        return list(DEFAULT_SUGGESTIONS)

    def clear_context(self, tenant_id: str):
        self.store.remove(tenant_id)
        logger.debug("Cleared conversation context", tenant_id=tenant_id)

    def cleanup_expired_contexts(self) -> int:
        """Evict contexts idle longer than the expiry window, returns how many"""
        cutoff = self._clock() - self.expiry
        removed = 0
        for tenant_id in self.store.keys():
            if self.store.remove_if(tenant_id, lambda context: context.last_activity < cutoff):
                removed += 1
                logger.debug("Removed expired context", tenant_id=tenant_id)

        if removed:
            logger.info("Cleaned up expired contexts", count=removed)
        return removed

    def active_context_count(self) -> int:
        return len(self.store)
