from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Assistant metrics
classification_requests_total = Counter(
    'assistant_classification_requests_total', 'Total intent classification requests', ['status']
)
classification_duration_seconds = Histogram(
    'assistant_classification_duration_seconds', 'Intent classification duration'
)
classification_confidence_score = Histogram(
    'assistant_classification_confidence_score', 'Intent confidence scores',
    buckets=(0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0)
)
intents_detected_total = Counter(
    'assistant_intents_detected_total', 'Intents detected', ['intent', 'source']
)
ai_fallbacks_total = Counter(
    'assistant_ai_fallbacks_total', 'AI classifications that fell back to rules', ['reason']
)
active_contexts = Gauge(
    'assistant_active_conversation_contexts', 'Tenants with a live conversation context'
)
expired_contexts_total = Counter(
    'assistant_expired_contexts_total', 'Conversation contexts evicted by the sweep'
)


def record_classification(status: str, duration: float, confidence: float = None,
                          intent: str = None, source: str = None):
    """Record intent classification metrics"""
    classification_requests_total.labels(status=status).inc()
    classification_duration_seconds.observe(duration)
    if confidence is not None:
        classification_confidence_score.observe(confidence)
    if intent:
        intents_detected_total.labels(intent=intent, source=source or "unknown").inc()


def record_ai_fallback(reason: str):
    ai_fallbacks_total.labels(reason=reason).inc()


def record_context_sweep(active: int, expired: int):
    active_contexts.set(active)
    if expired:
        expired_contexts_total.inc(expired)


async def metrics_endpoint():
    """Prometheus metrics endpoint"""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
