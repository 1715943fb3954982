"""Context-aware synonym expansion of user messages"""

from typing import FrozenSet, List, Mapping, Optional

from .lexicon import SYNONYM_GROUPS, INTENT_KEYWORDS

CONTEXT_WINDOW = 2


class SynonymExpander:
    """Expands a message into a bag of canonical inventory phrases.

    Each token that belongs to a synonym group looks at its +/-2 token
    neighbourhood to pick a canonical phrase ("stock" near "recent" leans
    towards movements, near "current" towards inventory levels). A phrase
    is appended at most once, deduplicated by substring containment of the
    text accumulated so far, so overlapping phrases may still repeat words.
    """

    def __init__(
        self,
        synonym_groups: Mapping[str, FrozenSet[str]] = SYNONYM_GROUPS,
        intent_keywords: Mapping[str, FrozenSet[str]] = INTENT_KEYWORDS,
        window: int = CONTEXT_WINDOW,
    ):
        self.synonym_groups = synonym_groups
        self.intent_keywords = intent_keywords
        self.window = window

    def expand(self, message: Optional[str]) -> Optional[str]:
        if message is None or not message.strip():
            return message

        expanded = message.lower()
        words = expanded.split()

        for index, word in enumerate(words):
            context = self._context_window(words, index)
            phrase = self._expand_with_context(word, context)
            if phrase != word and phrase not in expanded:
                expanded += " " + phrase

        return expanded

    def contains_intent_keywords(self, message: Optional[str], intent_name: Optional[str]) -> bool:
        """True if any trigger phrase of the intent is in the raw or expanded message"""
        if message is None or intent_name is None:
            return False

        keywords = self.intent_keywords.get(intent_name)
        if not keywords:
            return False

        lowered = message.lower()
        if any(keyword in lowered for keyword in keywords):
            return True

        expanded = self.expand(message) or ""
        return any(keyword in expanded for keyword in keywords)

    def intent_keywords_for(self, intent_name: str) -> FrozenSet[str]:
        return self.intent_keywords.get(intent_name, frozenset())

    def synonyms(self, term: str) -> FrozenSet[str]:
        return self.synonym_groups.get(term.lower(), frozenset())

    def _context_window(self, words: List[str], index: int) -> str:
        start = max(0, index - self.window)
        end = min(len(words) - 1, index + self.window)
        return " ".join(words[i] for i in range(start, end + 1) if i != index)

    def _in_group(self, word: str, group: str) -> bool:
        return word in self.synonym_groups.get(group, frozenset())

    def _expand_with_context(self, word: str, context: str) -> str:
        if self._in_group(word, "stock"):
            if _mentions(context, "current", "status", "level", "how many", "what", "show"):
                return "stock inventory items products goods"
            if _mentions(context, "recent", "movement", "history", "transaction"):
                return "stock inventory movements changes activity"
            return "stock inventory items products"

        if self._in_group(word, "transactions"):
            if _mentions(context, "recent", "latest", "new", "history"):
                return "transactions movements changes activity history records"
            return "transactions movements changes activity"

        if self._in_group(word, "low"):
            if _mentions(context, "stock", "inventory", "items", "products"):
                return "low reorder restock depleted insufficient needed"
            return "low reorder restock"

        if self._in_group(word, "forecast"):
            if _mentions(context, "when", "run", "out", "deplete"):
                return "forecast prediction runout depletion timeline when"
            return "forecast prediction outlook future projection"

        if self._in_group(word, "show"):
            return "show display list view get check see find"

        return word


def _mentions(context: str, *terms: str) -> bool:
    return any(term in context for term in terms)
