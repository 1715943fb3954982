import pytest

from inventory_assistant.context_manager import ContextStore, ConversationContext, ConversationContextManager
from inventory_assistant.lexicon import CONTEXT_SUGGESTIONS, DEFAULT_SUGGESTIONS
from inventory_assistant.models import Intent, MessageRole
from inventory_assistant.responder import CONVERSATIONAL_SUGGESTIONS, ConversationResponder


class TestConversationContextManager:
    """Per-tenant conversation memory."""

    @pytest.fixture
    def manager(self, clock):
        return ConversationContextManager(
            expiry_minutes=30,
            clock=clock,
            conversational_suggestions=ConversationResponder().suggestions_for,
        )

    def test_unknown_tenant_defaults(self, manager):
        assert manager.get_context("nobody") is None
        assert manager.get_recent_messages("nobody", 5) == []
        assert manager.get_last_intent("nobody") == Intent.OTHER
        assert manager.get_contextual_suggestions("nobody") == list(DEFAULT_SUGGESTIONS)

    def test_messages_are_kept_in_order(self, manager):
        manager.add_user_message("t1", "show stock", Intent.STOCK_SUMMARY, {"itemName": "Apple"})
        manager.add_assistant_response("t1", "Current inventory status:", Intent.STOCK_SUMMARY)
        manager.add_user_message("t1", "low stock", Intent.LOW_STOCK)

        recent = manager.get_recent_messages("t1", 2)

        assert [message.content for message in recent] == ["Current inventory status:", "low stock"]
        assert recent[0].role == MessageRole.ASSISTANT
        assert manager.get_context("t1").message_count == 2

    def test_last_intent_skips_assistant_messages(self, manager):
        manager.add_user_message("t1", "show stock", Intent.STOCK_SUMMARY)
        manager.add_assistant_response("t1", "Hello!", Intent.GREETING)

        assert manager.get_last_intent("t1") == Intent.STOCK_SUMMARY

    def test_messages_are_a_copy(self, manager):
        manager.add_user_message("t1", "show stock", Intent.STOCK_SUMMARY)
        context = manager.get_context("t1")

        context.messages.clear()

        assert len(manager.get_recent_messages("t1", 10)) == 1

    def test_non_positive_count(self, manager):
        manager.add_user_message("t1", "show stock", Intent.STOCK_SUMMARY)
        assert manager.get_recent_messages("t1", 0) == []

    def test_follow_up_needs_history(self, manager):
        assert not manager.is_follow_up_question("t1", "and the forecast?")

    def test_follow_up_indicator(self, manager):
        manager.add_user_message("t1", "show stock levels", Intent.STOCK_SUMMARY)
        assert manager.is_follow_up_question("t1", "and the forecast?")

    def test_short_message_needs_two_user_messages(self, manager):
        manager.add_user_message("t1", "show stock levels", Intent.STOCK_SUMMARY)
        assert not manager.is_follow_up_question("t1", "forecast please")

        manager.add_user_message("t1", "low stock", Intent.LOW_STOCK)
        assert manager.is_follow_up_question("t1", "forecast please")

    def test_follow_up_blank_message(self, manager):
        manager.add_user_message("t1", "show stock levels", Intent.STOCK_SUMMARY)
        assert not manager.is_follow_up_question("t1", "")
        assert not manager.is_follow_up_question("t1", None)

    def test_suggestions_follow_last_operational_intent(self, manager):
        manager.add_user_message("t1", "low stock", Intent.LOW_STOCK)
        assert manager.get_contextual_suggestions("t1") == list(CONTEXT_SUGGESTIONS[Intent.LOW_STOCK])

    def test_suggestions_for_conversational_intent(self, manager):
        manager.add_user_message("t1", "hello", Intent.GREETING)
        assert manager.get_contextual_suggestions("t1") == list(CONVERSATIONAL_SUGGESTIONS[Intent.GREETING])

    def test_suggestions_without_conversational_menu(self, clock):
        manager = ConversationContextManager(expiry_minutes=30, clock=clock)
        manager.add_user_message("t1", "bye", Intent.FAREWELL)
        assert manager.get_contextual_suggestions("t1") == list(DEFAULT_SUGGESTIONS)

    def test_clear_context(self, manager):
        manager.add_user_message("t1", "show stock", Intent.STOCK_SUMMARY)
        manager.clear_context("t1")
        manager.clear_context("t1")
        assert manager.get_context("t1") is None

    def test_context_kept_before_expiry(self, manager, clock):
        manager.add_user_message("t1", "show stock", Intent.STOCK_SUMMARY)
        clock.advance(minutes=29)

        assert manager.cleanup_expired_contexts() == 0
        assert manager.get_context("t1") is not None

    def test_context_evicted_after_expiry(self, manager, clock):
        manager.add_user_message("t1", "show stock", Intent.STOCK_SUMMARY)
        clock.advance(minutes=31)

        assert manager.cleanup_expired_contexts() == 1
        assert manager.get_context("t1") is None
        assert manager.active_context_count() == 0

    def test_activity_refreshes_expiry(self, manager, clock):
        manager.add_user_message("t1", "show stock", Intent.STOCK_SUMMARY)
        clock.advance(minutes=20)
        manager.add_user_message("t1", "low stock", Intent.LOW_STOCK)
        clock.advance(minutes=20)

        assert manager.cleanup_expired_contexts() == 0

    def test_last_activity_never_moves_backwards(self, manager, clock):
        manager.add_user_message("t1", "show stock", Intent.STOCK_SUMMARY)
        before = manager.get_context("t1").last_activity
        clock.advance(minutes=-5)
        manager.add_user_message("t1", "low stock", Intent.LOW_STOCK)

        assert manager.get_context("t1").last_activity == before


class TestContextStore:
    """Locked tenant map with compare-and-remove."""

    def test_get_or_create_is_idempotent(self, clock):
        store = ContextStore(lambda: ConversationContext(clock()))
        assert store.get_or_create("t1") is store.get_or_create("t1")
        assert len(store) == 1

    def test_remove_if_checks_predicate(self, clock):
        store = ContextStore(lambda: ConversationContext(clock()))
        store.get_or_create("t1")

        assert not store.remove_if("t1", lambda context: False)
        assert store.remove_if("t1", lambda context: True)
        assert not store.remove_if("t1", lambda context: True)
        assert store.keys() == []
