"""
Inventory Assistant Service
Intent classification, entity extraction and per-tenant conversation context
"""

import asyncio
import time
from contextlib import asynccontextmanager
from functools import partial

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .assistant import build_assistant
from .chat_client import ChatModelClient
from .config import settings
from .metrics import metrics_endpoint, record_classification, record_context_sweep
from .models import (
    ChatRequest,
    ChatTurn,
    ClassifyRequest,
    ClassifyResponse,
    EntityResult,
    Intent,
)
from .utils.logging import setup_logging

logger = structlog.get_logger(__name__)


async def context_sweeper(assistant, interval: float):
    """Periodically evict idle conversation contexts"""
    loop = asyncio.get_running_loop()
    context_manager = assistant.context_manager

    while True:
        await asyncio.sleep(interval)
        try:
            expired = await loop.run_in_executor(None, context_manager.cleanup_expired_contexts)
            record_context_sweep(context_manager.active_context_count(), expired)
        except Exception as e:
            logger.error("Context sweep failed", error=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    setup_logging()
    logger.info("Starting Inventory Assistant Service", semantic_enabled=settings.semantic_enabled)

    app.state.chat_client = ChatModelClient() if settings.semantic_enabled else None
    app.state.assistant = build_assistant(chat_client=app.state.chat_client)

    app.state.sweeper = asyncio.create_task(
        context_sweeper(app.state.assistant, settings.context_sweep_interval_seconds)
    )

    yield

    logger.info("Shutting down Inventory Assistant Service")
    app.state.sweeper.cancel()
    if app.state.chat_client is not None:
        app.state.chat_client.close()


app = FastAPI(
    title="Inventory Assistant Service",
    description="Natural-language intent recognition for inventory management",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def run_blocking(func, *args):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(func, *args))


@app.post("/classify", response_model=ClassifyResponse)
async def classify_intent(request: ClassifyRequest):
    """Classify intent from text"""
    start_time = time.perf_counter()
    assistant = app.state.assistant
    try:
        result = await run_blocking(assistant.classifier.classify_intent, request.text)
        entities = assistant.entity_extractor.extract(request.text)
    except Exception as e:
        record_classification("error", time.perf_counter() - start_time)
        logger.error("Intent classification failed", error=str(e))
        raise HTTPException(status_code=500, detail="Intent classification failed")

    duration = time.perf_counter() - start_time
    record_classification(
        "success", duration,
        confidence=result.confidence, intent=result.intent.value, source=result.source.value,
    )
    return ClassifyResponse(
        intent=result.intent,
        confidence=result.confidence,
        explanation=result.explanation,
        source=result.source,
        used_ai=result.used_ai,
        entities=entities,
        processing_time_ms=duration * 1000,
    )


@app.post("/chat", response_model=ChatTurn)
async def chat(request: ChatRequest):
    """Run one conversation turn for a tenant"""
    try:
        return await run_blocking(app.state.assistant.chat, request.tenant_id, request.message)
    except Exception as e:
        logger.error("Chat turn failed", tenant_id=request.tenant_id, error=str(e))
        raise HTTPException(status_code=500, detail="Chat turn failed")


@app.post("/extract-entities", response_model=EntityResult)
async def extract_entities(request: ClassifyRequest):
    """Extract filter entities from text"""
    start_time = time.perf_counter()
    try:
        entities = app.state.assistant.entity_extractor.extract(request.text)
    except Exception as e:
        logger.error("Entity extraction failed", error=str(e))
        raise HTTPException(status_code=500, detail="Entity extraction failed")

    return EntityResult(
        entities=entities,
        processing_time_ms=(time.perf_counter() - start_time) * 1000,
    )


@app.get("/context/{tenant_id}/suggestions")
async def get_suggestions(tenant_id: str):
    """Follow-up suggestions for a tenant's conversation"""
    context_manager = app.state.assistant.context_manager
    return {
        "tenant_id": tenant_id,
        "last_intent": context_manager.get_last_intent(tenant_id),
        "suggestions": context_manager.get_contextual_suggestions(tenant_id),
    }


@app.get("/context/{tenant_id}/messages")
async def get_messages(tenant_id: str, count: int = 10):
    """Most recent messages of a tenant's conversation, oldest first"""
    messages = app.state.assistant.context_manager.get_recent_messages(tenant_id, count)
    return {
        "tenant_id": tenant_id,
        "messages": [message.model_dump(mode="json") for message in messages],
    }


@app.delete("/context/{tenant_id}")
async def clear_context(tenant_id: str):
    """Forget a tenant's conversation"""
    app.state.assistant.context_manager.clear_context(tenant_id)
    return {"tenant_id": tenant_id, "cleared": True}


@app.get("/intents")
async def get_supported_intents():
    """Get list of supported intents"""
    return {
        "intents": [intent.value for intent in Intent],
        "conversational": [intent.value for intent in Intent if intent.is_conversational],
        "entities": ["filterType", "filterValue", "personName", "itemName"],
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    assistant = app.state.assistant
    return {
        "status": "healthy",
        "service": "inventory-assistant",
        "ai_enabled": assistant.classifier.ai_enabled,
        "active_contexts": assistant.context_manager.active_context_count(),
    }


@app.get("/metrics")
async def get_metrics():
    """Get service metrics in Prometheus format"""
    record_context_sweep(app.state.assistant.context_manager.active_context_count(), 0)
    return await metrics_endpoint()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
