"""Filtered views over a tenant's recent stock transactions"""

from typing import Any, Dict, List, Optional, Protocol

import structlog

from .models import Intent
from .performer_matcher import PerformerMatcher

logger = structlog.get_logger(__name__)


class TransactionSource(Protocol):
    """Read access to stock transactions, provided by the persistence layer"""

    def recent_transactions(self, tenant_id: str) -> List[Dict[str, Any]]:
        ...

    def distinct_performers(self, tenant_id: str) -> List[str]:
        ...


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    if value is None:
        return 0
    try:
        return int(str(value))
    except ValueError:
        return 0


def normalize_row(row: Dict[str, Any]) -> Dict[str, Any]:
    quantity_change = _to_int(row.get("quantityChange"))
    created_at = row.get("createdAt")
    row_id = row.get("id")
    return {
        "id": str(row_id) if row_id is not None else None,
        "itemName": row.get("itemName"),
        "type": row.get("type"),
        "quantityChange": quantity_change,
        "amount": abs(quantity_change),
        "reason": row.get("reason"),
        "performedBy": row.get("performedBy"),
        "createdAt": created_at.isoformat() if hasattr(created_at, "isoformat") else created_at,
    }


def _field_contains(row: Dict[str, Any], field: str, needle: str) -> bool:
    if not needle:
        return True
    value = row.get(field)
    return value is not None and needle in str(value).lower()


class TransactionFilterBuilder:
    """Builds ``{status, summary, data, total}`` payloads for transaction queries"""

    def __init__(self, source: TransactionSource, matcher: PerformerMatcher = None):
        self.source = source
        self.matcher = matcher or PerformerMatcher()

    def filter_by_item_name(self, tenant_id: str, item_name: Optional[str]) -> Dict[str, Any]:
        raw = self.source.recent_transactions(tenant_id) or []
        needle = (item_name or "").strip().lower()

        data = [
            normalize_row(row) for row in raw
            if row is not None and _field_contains(row, "itemName", needle)
        ]

        if needle:
            summary = (f"No transactions found for '{item_name}'." if not data
                       else f"Transactions for '{item_name}':")
        else:
            summary = "No recent transactions found." if not data else "Here are the recent stock movements:"
        return _payload(summary, data)

    def filter_by_performed_by(self, tenant_id: str, performer: Optional[str]) -> Dict[str, Any]:
        raw = self.source.recent_transactions(tenant_id) or []
        needle = (performer or "").strip().lower()
        logger.info("performedBy filter requested", tenant_id=tenant_id, filter=performer, raw_rows=len(raw))

        rows = self._rows_performed_by(raw, needle)

        if needle and not rows:
            matched = self.matcher.resolve(needle, self.source.distinct_performers(tenant_id))
            if matched and matched.strip().lower() != needle:
                logger.info("performedBy fuzzy match", tenant_id=tenant_id, input=performer, matched=matched)
                performer = matched
                needle = matched.strip().lower()
                rows = self._rows_performed_by(raw, needle)

        logger.info("performedBy filter applied", tenant_id=tenant_id, filter=needle, result_rows=len(rows))

        data = [normalize_row(row) for row in rows]
        if needle:
            summary = (f"No transactions found performed by '{performer}'." if not data
                       else f"Transactions performed by '{performer}':")
        else:
            summary = "No recent transactions found." if not data else "Here are the recent stock movements:"
        return _payload(summary, data)

    @staticmethod
    def _rows_performed_by(raw: List[Dict[str, Any]], needle: str) -> List[Dict[str, Any]]:
        return [row for row in raw if row is not None and _field_contains(row, "performedBy", needle)]


def _payload(summary: str, data: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"status": "success", "summary": summary, "data": data, "total": len(data)}


class TransactionQueryHandler:
    """Answers the transaction intents of a chat turn from a ``TransactionSource``"""

    def __init__(self, builder: TransactionFilterBuilder):
        self.builder = builder

    def handle(self, tenant_id: str, intent: Intent, entities: Dict[str, str]) -> Optional[Dict[str, Any]]:
        if intent == Intent.RECENT_TRANSACTIONS:
            return self.builder.filter_by_item_name(tenant_id, None)

        if intent == Intent.FILTERED_TRANSACTIONS:
            filter_value = entities.get("filterValue")
            if entities.get("filterType", "").lower() == "performedby":
                return self.builder.filter_by_performed_by(tenant_id, filter_value)
            return self.builder.filter_by_item_name(tenant_id, filter_value)

        return None
