"""Data models for the inventory assistant"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Any, List, Optional
from datetime import datetime
from enum import Enum


class Intent(str, Enum):
    """Intent assigned to a user utterance"""
    # Conversational
    GREETING = "GREETING"
    FAREWELL = "FAREWELL"
    THANKS = "THANKS"
    HELP = "HELP"
    CLARIFICATION = "CLARIFICATION"
    SMALL_TALK = "SMALL_TALK"
    # Operational
    STOCK_SUMMARY = "STOCK_SUMMARY"
    RECENT_TRANSACTIONS = "RECENT_TRANSACTIONS"
    LOW_STOCK = "LOW_STOCK"
    FORECAST_QUERIES = "FORECAST_QUERIES"
    FILTERED_TRANSACTIONS = "FILTERED_TRANSACTIONS"
    OTHER = "OTHER"

    @property
    def is_conversational(self) -> bool:
        return self in CONVERSATIONAL_INTENTS

    @classmethod
    def parse(cls, value: Optional[str]) -> "Intent":
        """Map a free-form intent name to an Intent, OTHER when unknown"""
        if not value:
            return cls.OTHER
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.OTHER


CONVERSATIONAL_INTENTS = frozenset({
    Intent.GREETING,
    Intent.FAREWELL,
    Intent.THANKS,
    Intent.HELP,
    Intent.CLARIFICATION,
    Intent.SMALL_TALK,
})


class ClassificationSource(str, Enum):
    """Classifier that produced a result"""
    PATTERN = "pattern"
    SYNONYM = "synonym"
    FUZZY = "fuzzy"
    SEMANTIC = "semantic"
    KEYWORD = "keyword"


class ClassificationResult(BaseModel):
    """Outcome of a single classifier"""
    model_config = ConfigDict(frozen=True)

    intent: Intent
    confidence: float = Field(ge=0.0, le=1.0)
    explanation: str
    source: ClassificationSource


class AssistedClassification(ClassificationResult):
    """Classification produced by the AI-backed classifier"""
    used_ai: bool = False


class PatternMatchResult(BaseModel):
    """Best regex rule hit for a message"""
    model_config = ConfigDict(frozen=True)

    intent: Intent
    confidence: float
    matched_text: Optional[str] = None
    explanation: str

    @property
    def is_high_confidence(self) -> bool:
        return self.confidence >= 0.8

    @property
    def is_medium_confidence(self) -> bool:
        return 0.6 <= self.confidence < 0.8


class MessageRole(str, Enum):
    """Author of a conversation message"""
    USER = "user"
    ASSISTANT = "assistant"


class ConversationMessage(BaseModel):
    """Single turn stored in a tenant's conversation context"""
    model_config = ConfigDict(frozen=True)

    content: str
    role: MessageRole
    intent: Intent
    entities: Dict[str, str] = {}
    timestamp: datetime


class ChatTurn(BaseModel):
    """Result of one assistant chat turn"""
    tenant_id: str
    message: str
    intent: Intent
    confidence: float
    explanation: str
    source: ClassificationSource
    used_ai: bool = False
    entities: Dict[str, str] = {}
    is_follow_up: bool = False
    reply: Optional[str] = None
    data: Dict[str, Any] = {}
    suggestions: List[str] = []


# HTTP request / response models

class ClassifyRequest(BaseModel):
    """Intent classification request"""
    text: str


class ClassifyResponse(BaseModel):
    """Intent classification response"""
    intent: Intent
    confidence: float
    explanation: str
    source: ClassificationSource
    used_ai: bool
    entities: Dict[str, str] = {}
    processing_time_ms: float


class ChatRequest(BaseModel):
    """Assistant chat request"""
    tenant_id: str = Field(..., min_length=1)
    message: str


class EntityResult(BaseModel):
    """Entity extraction result"""
    entities: Dict[str, str]
    processing_time_ms: float
