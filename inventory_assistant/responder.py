"""Canned replies for conversational intents"""

import random
from typing import Dict, List, Optional, Tuple

import structlog

from .models import Intent

logger = structlog.get_logger(__name__)

GREETINGS = (
    "Hello! I'm your inventory assistant. How can I help you today?",
    "Hi there! I can help you check stock levels, view transactions, see forecasts, and more. What would you like to do?",
    "Good day! I'm ready to assist with your inventory management needs. What can I help you with?",
    "Welcome! I'm here to help you manage your inventory. Ask me about stock levels, recent movements, or forecasts.",
)

FAREWELLS = (
    "Goodbye! Feel free to come back anytime you need inventory assistance.",
    "See you later! Don't hesitate to return if you need help with your inventory.",
    "Take care! I'm always here when you need inventory management help.",
    "Farewell! Have a great day and come back soon for any inventory needs.",
)

THANKS_REPLIES = (
    "You're welcome! Is there anything else I can help you with regarding your inventory?",
    "My pleasure! What other inventory questions do you have?",
    "Happy to help! Feel free to ask if you need anything else.",
    "No problem! I'm here to assist with all your inventory management needs.",
)

CLARIFICATIONS = (
    "I'm not sure I understand. Could you rephrase that? You can ask about stock levels, transactions, forecasts, or low stock items.",
    "I want to help but need clarification. Try asking about inventory status, recent movements, or stock forecasts.",
    "Could you be more specific? I can help with stock levels, transaction history, low stock alerts, or inventory forecasts.",
    "I'm not following. Try asking like 'show me inventory' or 'recent transactions' or 'what needs restocking?'",
)

SMALL_TALK_REPLIES = (
    "That's interesting! While I'm specialized in inventory management, I'm here to help you with stock levels, transactions, and forecasts. What inventory task can I assist with?",
    "I appreciate the conversation! I'm designed to help with inventory management - things like checking stock levels, viewing recent movements, or identifying low stock items. What would you like to know?",
    "Thanks for chatting! My expertise is in inventory management. I can help you track stock, view transactions, see forecasts, and more. What inventory question do you have?",
)

HELP_TEXT = """I can help you with various inventory management tasks:

- Stock Information: Check current inventory levels, see what's in stock
- Recent Activity: View recent stock movements and transaction history
- Low Stock Alerts: Identify items that need restocking
- Forecasts: Predict when items will run out and future stock needs
- Filtered Views: Search transactions by person or specific items

Just ask me naturally, like "show me stock levels" or "what needs to be restocked?\""""

DEFAULT_REPLY = "I'm here to help with your inventory management. What would you like to know?"

CONVERSATIONAL_SUGGESTIONS: Dict[Intent, Tuple[str, ...]] = {
    Intent.GREETING: (
        "Show current stock levels",
        "View recent transactions",
        "Check low stock items",
        "Get inventory forecasts",
    ),
    Intent.HELP: (
        "What's in stock?",
        "Recent movements",
        "Items to restock",
        "Stock forecasts",
    ),
    Intent.THANKS: (
        "Show inventory status",
        "Recent activity",
        "Low stock alerts",
        "Future predictions",
    ),
}


class ConversationResponder:
    """Answers greetings, thanks, help requests and small talk"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def respond(self, intent: Intent, message: str) -> str:
        logger.debug("Generating conversational reply", intent=intent.value)

        if intent == Intent.GREETING:
            return self.rng.choice(GREETINGS)
        if intent == Intent.FAREWELL:
            return self.rng.choice(FAREWELLS)
        if intent == Intent.THANKS:
            return self.rng.choice(THANKS_REPLIES)
        if intent == Intent.HELP:
            return HELP_TEXT
        if intent == Intent.CLARIFICATION:
            return self.rng.choice(CLARIFICATIONS)
        if intent == Intent.SMALL_TALK:
            return self._small_talk(message or "")
        return DEFAULT_REPLY

    def _small_talk(self, message: str) -> str:
        lowered = message.lower()

        if "how are you" in lowered:
            return ("I'm functioning perfectly and ready to help with your inventory management! "
                    "What can I assist you with today?")
        if "what can you do" in lowered:
            return HELP_TEXT
        if "who are you" in lowered:
            return ("I'm your AI inventory assistant, designed to help you manage stock levels, "
                    "track transactions, and provide forecasts.")
        if "weather" in lowered or "time" in lowered:
            return ("I'm focused on helping you with inventory management. For weather or time "
                    "information, you might want to check a weather app or clock. "
                    "How can I help with your inventory instead?")

        return self.rng.choice(SMALL_TALK_REPLIES)

    def suggestions_for(self, intent: Intent) -> List[str]:
        return list(CONVERSATIONAL_SUGGESTIONS.get(intent, ()))
