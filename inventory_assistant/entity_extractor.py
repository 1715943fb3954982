"""Filter target extraction for inventory chat messages"""

import re
from typing import Dict, Optional

import structlog

logger = structlog.get_logger(__name__)

NOISE_WORDS = frozenset({
    "only", "just", "show", "me", "made", "user", "please", "pls", "transactions",
    "transaction", "history", "movement", "movements", "performed", "by", "for", "of",
})

COMMAND_WORDS = frozenset({
    "transactions", "transaction", "history", "show", "stock", "levels", "movements",
})


class EntityExtractor:
    """Regex extraction of "by/for/of <phrase>" filters and capitalized item names"""

    def __init__(self):
        self._tail_patterns = {
            keyword: re.compile(rf"\b{re.escape(keyword)}\b\s+([^\n\r.!?;:]+)", re.IGNORECASE)
            for keyword in ("by", "for", "of")
        }

    def extract(self, text: Optional[str]) -> Dict[str, str]:
        entities: Dict[str, str] = {}
        if not text or not text.strip():
            return entities

        by_tail = self._tail_after(text, "by")
        if by_tail is not None:
            cleaned = self.clean_noise_phrase(by_tail)
            if cleaned:
                entities["filterType"] = "performedBy"
                entities["filterValue"] = cleaned
                entities["personName"] = cleaned

        if "filterValue" not in entities:
            tail = self._tail_after(text, "for")
            if tail is None:
                tail = self._tail_after(text, "of")
            if tail is not None:
                cleaned = self.clean_noise_phrase(tail)
                if cleaned:
                    entities["filterType"] = "itemName"
                    entities["filterValue"] = cleaned

        for word in text.split():
            if len(word) <= 2 or not word[0].isupper():
                continue
            cleaned = re.sub(r"[^A-Za-z]", "", word)
            if not cleaned or cleaned.lower() in COMMAND_WORDS:
                continue

            if "filterValue" not in entities:
                entities["filterType"] = "itemName"
                entities["filterValue"] = cleaned
            if len(cleaned) > len(entities.get("itemName", "")):
                entities["itemName"] = cleaned

        if entities:
            logger.debug("Extracted entities", entities=entities)
        return entities

    def _tail_after(self, text: str, keyword: str) -> Optional[str]:
        found = self._tail_patterns[keyword].search(text)
        if not found:
            return None
        return found.group(1).strip()

    @staticmethod
    def clean_noise_phrase(phrase: Optional[str]) -> str:
        if not phrase:
            return ""
        normalized = re.sub(r"[()\[\]{}]", " ", phrase)
        normalized = re.sub(r"[^A-Za-z0-9\s'-]", " ", normalized)
        kept = [token for token in normalized.split() if token.lower() not in NOISE_WORDS]
        return " ".join(kept).strip()
