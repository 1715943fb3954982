"""Ordered regex rules mapping phrasings to intents"""

import re
from typing import List, NamedTuple, Optional, Pattern, Sequence

from .models import Intent, PatternMatchResult

CAPTURE_GROUP_BONUS = 0.1

_VERB = r"(show|tell|give|list|display|get|check|see)"
_ACTIVITY = r"(transactions|movements|changes|updates|activity|history|records|logs)"


class IntentPattern(NamedTuple):
    intent: Intent
    pattern: Pattern
    confidence: float


def _rule(intent: Intent, regex: str, confidence: float) -> IntentPattern:
    return IntentPattern(intent, re.compile(regex, re.IGNORECASE), confidence)


DEFAULT_PATTERNS: Sequence[IntentPattern] = (
    # Conversational. No capture groups, so these stay at their base value
    # and any operational rule hit in the same message outranks them.
    _rule(Intent.GREETING, r"^\s*(?:hello|hi|hey|good\s+(?:morning|afternoon|evening))\b", 0.85),
    _rule(Intent.FAREWELL, r"\b(?:bye|goodbye|see\s+you|farewell)\b", 0.85),
    _rule(Intent.THANKS, r"\b(?:thanks?|thank\s+you|appreciate\s+it|grateful)\b", 0.85),
    _rule(Intent.HELP, r"\b(?:help|what\s+can\s+you\s+do|how\s+do\s+you\s+work|assist(?:ance)?)\b", 0.85),
    _rule(Intent.CLARIFICATION, r"\b(?:don'?t\s+understand|clarify|rephrase|confused|not\s+sure)\b", 0.85),
    _rule(Intent.SMALL_TALK, r"\b(?:how\s+are\s+you|who\s+are\s+you|what'?s\s+your\s+name)\b", 0.85),

    _rule(Intent.STOCK_SUMMARY,
          r"(what|show|tell|give|list|display|get|check|see)\s+(do\s+I\s+have|is\s+my|are\s+my|current|present|existing)\s+"
          r"(inventory|stock|items|products|goods|supplies|materials|resources|assets|catalog)", 0.9),
    _rule(Intent.STOCK_SUMMARY,
          r"(how\s+many|what|which)\s+(items|products|goods|things)\s+"
          r"(do\s+I\s+have|are\s+available|are\s+in\s+stock|do\s+we\s+have)", 0.9),
    _rule(Intent.STOCK_SUMMARY,
          r"(current|present|existing|total|overall)\s+(inventory|stock|items|products)\s+(status|levels|count|quantity)", 0.9),
    _rule(Intent.STOCK_SUMMARY,
          _VERB + r"\s+(me\s+)?(my|your|our)?\s+(products|goods|items|inventory|stock)", 0.9),
    _rule(Intent.STOCK_SUMMARY, r"(inventory|stock)\s+(overview|summary|status|report|check)", 0.8),
    _rule(Intent.STOCK_SUMMARY, r"(stock|inventory)\s+(level|levels)", 0.9),
    _rule(Intent.STOCK_SUMMARY, r"^(stock|inventory)\s*(level|levels)?\s*$", 0.95),

    _rule(Intent.FILTERED_TRANSACTIONS,
          _VERB + r"\s+(me\s+)?" + _ACTIVITY + r"\s+(by|for|of|from|related\s+to)\s+([^\s]+)", 0.95),
    _rule(Intent.FILTERED_TRANSACTIONS,
          _ACTIVITY + r"\s+(by|for|of|from|related\s+to)\s+([^\s]+)", 0.95),
    _rule(Intent.FILTERED_TRANSACTIONS,
          r"(filter|show|list)\s+(transactions|movements|changes|updates|activity)\s+(by|for|of)\s+([^\s]+)", 0.95),

    _rule(Intent.RECENT_TRANSACTIONS,
          _VERB + r"\s+(me\s+)?(recent|latest|new|current)?\s*" + _ACTIVITY, 0.9),
    _rule(Intent.RECENT_TRANSACTIONS,
          r"(what\s+has|what\s+have|what's\s+been)\s+(happening|going\s+on|occurring|changing)\s+(with|in|to)\s+"
          r"(my|the)?\s*(inventory|stock)?\s*(movements|changes|activity|history|transactions)?", 0.9),
    _rule(Intent.RECENT_TRANSACTIONS,
          r"(recent|latest|new)?\s*(stock\s+movements|changes|activity|history|transactions)", 0.9),
    _rule(Intent.RECENT_TRANSACTIONS, r"(transaction|movement|activity)\s+(history|log|record)", 0.8),
    _rule(Intent.RECENT_TRANSACTIONS, r"^(transactions?|movements?|activity|history|logs?|records?)\s*$", 0.95),
    _rule(Intent.RECENT_TRANSACTIONS,
          r"^" + _VERB + r"\s+(me\s+)?(transactions?|movements?|activity|history|logs?|records?)\s*$", 0.95),

    _rule(Intent.LOW_STOCK,
          r"(show|tell|give|list|display|get|check|see|identify|find)\s+(me\s+)?(items|products|things)\s+(that|which)\s+"
          r"(need|require)\s+(restocking|reordering|to\s+be\s+ordered)", 0.9),
    _rule(Intent.LOW_STOCK,
          r"(what|which)\s+(items|products|things)\s+(are|is)\s+"
          r"(running\s+low|low\s+in\s+stock|out\s+of\s+stock|depleted|scarce|insufficient)", 0.9),
    _rule(Intent.LOW_STOCK, r"(low|reorder|restock)\s+(stock|inventory|items|products|levels)", 0.8),
    _rule(Intent.LOW_STOCK, r"(items|products)\s+(to\s+)?(reorder|restock|order)", 0.8),
    _rule(Intent.LOW_STOCK,
          r"(low\s+stock|restock|reorder|restocking|running\s+low|depleted|scarce|insufficient|out\s+of\s+stock|"
          r"need\s+to\s+order|time\s+to\s+restock|stock\s+alert|critical)", 0.9),

    _rule(Intent.FORECAST_QUERIES,
          r"(show|tell|give|list|display|get|check|see|calculate|predict)\s+(me\s+)?(forecast|prediction|projection|estimate|outlook)", 0.9),
    _rule(Intent.FORECAST_QUERIES,
          r"(when\s+will|when\s+do|predict\s+when|estimate\s+when)\s+(I|we)\s+(run\s+out|need\s+to\s+order|should\s+reorder)", 0.9),
    _rule(Intent.FORECAST_QUERIES,
          r"(how\s+many|how\s+much)\s+(days|time|long)\s+(until|before|remaining)\s+(run\s+out|depletion|empty)", 0.9),
    _rule(Intent.FORECAST_QUERIES, r"(future|upcoming|predicted)\s+(stock|inventory)\s+(needs|requirements|levels)", 0.8),
    _rule(Intent.FORECAST_QUERIES, r"(run\s+out|depletion|reorder)\s+(date|time|schedule|timeline)", 0.8),
)


class PatternMatcher:
    """Scans every rule and keeps the highest scoring hit.

    A hit on a rule with capture groups earns a small bonus over the rule's
    base confidence. Equal scores keep the rule declared first.
    """

    def __init__(self, patterns: Sequence[IntentPattern] = DEFAULT_PATTERNS):
        self.patterns = tuple(patterns)

    def match(self, message: Optional[str]) -> PatternMatchResult:
        if message is None or not message.strip():
            return PatternMatchResult(intent=Intent.OTHER, confidence=0.0, explanation="Empty message")

        best: Optional[PatternMatchResult] = None
        for hit in self._hits(message, "Matched pattern"):
            if best is None or hit.confidence > best.confidence:
                best = hit

        if best is None:
            return PatternMatchResult(intent=Intent.OTHER, confidence=0.0, explanation="No pattern matched")
        return best

    def all_matches(self, message: Optional[str]) -> List[PatternMatchResult]:
        if message is None or not message.strip():
            return []
        return list(self._hits(message, "Pattern"))

    def matches_intent(self, message: Optional[str], intent: Intent) -> bool:
        if message is None:
            return False
        return any(
            rule.intent == intent and rule.pattern.search(message)
            for rule in self.patterns
        )

    def _hits(self, message: str, label: str):
        for rule in self.patterns:
            found = rule.pattern.search(message)
            if not found:
                continue
            confidence = rule.confidence
            if rule.pattern.groups > 0:
                confidence += CAPTURE_GROUP_BONUS
            yield PatternMatchResult(
                intent=rule.intent,
                confidence=round(confidence, 4),
                matched_text=found.group(0),
                explanation=f"{label}: {rule.pattern.pattern}",
            )
