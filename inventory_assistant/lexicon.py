"""Static lexical resources shared by the heuristic classifiers.

Everything here is built once at import time and exposed read-only
(``frozenset`` values behind ``MappingProxyType``), so classifier
instances can share these tables across threads without locking.
"""

from types import MappingProxyType
from typing import Iterable, Mapping, FrozenSet, Tuple

from .models import Intent


def _group(*terms: str) -> FrozenSet[str]:
    return frozenset(term.lower() for term in terms)


def _freeze(table: Mapping[str, Iterable[str]]) -> Mapping[str, FrozenSet[str]]:
    return MappingProxyType({key: _group(*values) for key, values in table.items()})


# Known misspellings per fuzzy category. The canonical spelling is the key.
FUZZY_VARIANTS: Mapping[str, FrozenSet[str]] = _freeze({
    "stock": ["stock", "stok", "stck", "stokc", "stoc", "stocke", "stokk"],
    "transaction": [
        "transaction", "transacton", "transactoin", "transaktion",
        "transactions", "transactons", "transactoins", "transaktions",
    ],
    "inventory": ["inventory", "inventry", "inventorry", "inventary", "inventroy"],
    "level": ["level", "lvl", "leval", "levl", "levels", "lvls"],
    "recent": ["recent", "recient", "rescent", "reacent", "recentt"],
    "forecast": ["forecast", "forcast", "forcaste", "forcastt"],
})

FUZZY_CATEGORIES: Tuple[str, ...] = tuple(FUZZY_VARIANTS)

MAX_EDIT_DISTANCE = 2


SYNONYM_GROUPS: Mapping[str, FrozenSet[str]] = _freeze({
    "stock": [
        "inventory", "stock", "items", "products", "goods", "merchandise",
        "supplies", "materials", "resources", "assets", "catalog",
    ],
    "current": [
        "current", "present", "existing", "available", "on hand", "in stock",
        "ready", "accessible", "presently", "now", "today",
    ],
    "levels": [
        "levels", "quantity", "amount", "count", "number", "total",
        "volume", "size", "how many", "how much",
    ],
    "recent": [
        "recent", "latest", "new", "newest", "fresh", "current",
        "today", "just now", "latest updates",
    ],
    "transactions": [
        "transactions", "movements", "changes", "updates", "activity",
        "history", "records", "logs", "entries", "actions", "operations",
    ],
    "low": [
        "low", "reorder", "restock", "running low", "depleted", "scarce",
        "insufficient", "needed", "required", "out of stock", "empty",
    ],
    "forecast": [
        "forecast", "prediction", "predict", "projection", "estimate",
        "outlook", "future", "run out", "depletion", "timeline", "when",
    ],
    "show": [
        "show", "display", "list", "view", "see", "get", "find",
        "check", "look at", "examine", "reveal", "present",
    ],
    "filter": [
        "by", "for", "of", "from", "related to", "about", "concerning",
        "regarding", "with", "containing", "involving",
    ],
})


INTENT_KEYWORDS: Mapping[str, FrozenSet[str]] = _freeze({
    Intent.STOCK_SUMMARY.value: [
        "stock levels", "inventory status", "current inventory", "what do i have",
        "available items", "in stock", "on hand", "stock count", "inventory count",
        "how many items", "what's available", "current stock", "inventory overview",
        "stock summary", "items available", "product count", "goods on hand",
        "current goods", "inventory levels", "stock status", "what's in stock",
    ],
    Intent.RECENT_TRANSACTIONS.value: [
        "recent transactions", "recent movements", "latest activity", "recent changes",
        "transaction history", "movement history", "recent updates", "latest transactions",
        "what's happening", "recent activity", "stock movements", "inventory changes",
        "recent records", "latest logs", "recent operations", "transaction updates",
        "show transactions", "show me transactions", "view transactions", "transactions",
        "recent stock movements", "what's been happening", "latest changes",
    ],
    Intent.LOW_STOCK.value: [
        "low stock", "reorder items", "restock needed", "running low", "depleted items",
        "items to reorder", "stock shortage", "insufficient stock", "out of stock",
        "need to order", "restock items", "low inventory", "critical stock",
        "items needed", "stock alert", "reorder point", "minimum stock",
    ],
    Intent.FORECAST_QUERIES.value: [
        "forecast", "prediction", "run out date", "when will", "future stock",
        "stock forecast", "inventory forecast", "depletion date", "days remaining",
        "future needs", "stock projection", "inventory outlook", "runout prediction",
        "when to reorder", "stock timeline", "future inventory", "prediction model",
    ],
    Intent.FILTERED_TRANSACTIONS.value: [
        "transactions by", "history for", "filter by", "show transactions for",
        "activity by", "records by", "movements for", "changes by", "updates for",
        "filter transactions", "specific transactions", "transaction filter",
        "history by person", "activity for item", "filtered history",
    ],
})

# Order in which the synonym classifier probes intents: most specific first.
SYNONYM_INTENT_ORDER: Tuple[Intent, ...] = (
    Intent.FILTERED_TRANSACTIONS,
    Intent.LOW_STOCK,
    Intent.FORECAST_QUERIES,
    Intent.RECENT_TRANSACTIONS,
    Intent.STOCK_SUMMARY,
)


FOLLOW_UP_INDICATORS: Tuple[str, ...] = (
    "what about", "how about", "and", "also", "what if", "what else",
    "tell me more", "show me", "can you", "could you", "would you",
    "what's the", "how many", "which one", "any", "some",
)


CONTEXT_SUGGESTIONS: Mapping[Intent, Tuple[str, ...]] = MappingProxyType({
    Intent.STOCK_SUMMARY: (
        "Show me low stock items",
        "What are the recent transactions?",
        "Get inventory forecasts",
    ),
    Intent.RECENT_TRANSACTIONS: (
        "Filter transactions by person",
        "Check current stock levels",
        "Show low stock items",
    ),
    Intent.LOW_STOCK: (
        "Show inventory forecasts",
        "View recent transactions",
        "Check current stock levels",
    ),
    Intent.FORECAST_QUERIES: (
        "Show low stock items",
        "Check recent transactions",
        "View current inventory",
    ),
    Intent.FILTERED_TRANSACTIONS: (
        "Show all recent transactions",
        "Check stock levels",
        "View inventory forecasts",
    ),
})

DEFAULT_SUGGESTIONS: Tuple[str, ...] = (
    "Show current stock levels",
    "View recent transactions",
    "Check low stock items",
    "Get inventory forecasts",
)
