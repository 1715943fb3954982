import pytest

from inventory_assistant.models import Intent
from inventory_assistant.responder import (
    DEFAULT_REPLY,
    FAREWELLS,
    HELP_TEXT,
    THANKS_REPLIES,
    ConversationResponder,
)


class TestConversationResponder:
    """Canned conversational replies."""

    @pytest.fixture
    def responder(self, rng):
        return ConversationResponder(rng=rng)

    def test_help(self, responder):
        assert responder.respond(Intent.HELP, "help") == HELP_TEXT

    def test_randomized_replies_come_from_their_pool(self, responder):
        assert responder.respond(Intent.FAREWELL, "bye") in FAREWELLS
        assert responder.respond(Intent.THANKS, "thanks") in THANKS_REPLIES

    @pytest.mark.parametrize(
        "message,fragment",
        [
            ("how are you?", "functioning perfectly"),
            ("who are you", "AI inventory assistant"),
            ("what's the weather like", "weather app"),
        ],
    )
    def test_small_talk_topics(self, responder, message, fragment):
        assert fragment in responder.respond(Intent.SMALL_TALK, message)

    def test_operational_intent_gets_default_reply(self, responder):
        assert responder.respond(Intent.LOW_STOCK, "low stock") == DEFAULT_REPLY

    def test_suggestions(self, responder):
        assert len(responder.suggestions_for(Intent.GREETING)) == 4
        assert responder.suggestions_for(Intent.FAREWELL) == []
