"""Shared pytest fixtures for the inventory assistant tests."""

import random
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List
from unittest.mock import Mock

import pytest

from inventory_assistant.models import ClassificationResult, ClassificationSource, Intent


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class FakeTransactionSource:
    """In-memory transaction source keyed by tenant."""

    def __init__(self, rows: Dict[str, List[Dict[str, Any]]]):
        self.rows = rows

    def recent_transactions(self, tenant_id: str) -> List[Dict[str, Any]]:
        return list(self.rows.get(tenant_id, []))

    def distinct_performers(self, tenant_id: str) -> List[str]:
        seen = []
        for row in self.rows.get(tenant_id, []):
            performer = row.get("performedBy")
            if performer and performer not in seen:
                seen.append(performer)
        return seen


def stub_classifier(intent: Intent, confidence: float, source=ClassificationSource.KEYWORD,
                    min_confidence: float = 0.0):
    """Mock classifier that always answers with the given result."""
    classifier = Mock()
    classifier.source = source
    classifier.min_confidence = min_confidence
    classifier.classify.return_value = ClassificationResult(
        intent=intent, confidence=confidence, explanation="stub", source=source,
    )
    return classifier


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def transaction_rows():
    return {
        "tenant-1": [
            {
                "id": 1,
                "itemName": "Apple Watch",
                "type": "OUT",
                "quantityChange": -3,
                "reason": "sale",
                "performedBy": "Ivan Petrov",
                "createdAt": datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc),
            },
            {
                "id": 2,
                "itemName": "iPhone",
                "type": "IN",
                "quantityChange": "5",
                "reason": "delivery",
                "performedBy": "Maria Lopez",
                "createdAt": None,
            },
        ]
    }


@pytest.fixture
def transaction_source(transaction_rows):
    return FakeTransactionSource(transaction_rows)


@pytest.fixture
def make_stub():
    return stub_classifier
