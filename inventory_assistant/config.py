"""Configuration settings for the Inventory Assistant service"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    # Server
    port: int = 8010
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Semantic (chat model) classification
    semantic_enabled: bool = True
    semantic_cache_ttl: int = 300  # seconds
    semantic_cache_size: int = 512
    semantic_confidence_threshold: float = 0.7

    # AI-first wrapper; when off, the chat model only votes inside fusion
    ai_wrapper_enabled: bool = True

    # Confidence bands for the AI-backed classifier
    high_confidence_threshold: float = 0.8
    medium_confidence_threshold: float = 0.5

    # Pattern matcher acceptance
    pattern_confidence_threshold: float = 0.8

    # Chat model endpoint (Ollama-compatible /api/chat)
    chat_model_url: str = "http://localhost:11434"
    chat_model_name: str = "llama3.2"
    chat_model_timeout_seconds: float = 10.0

    # Conversation context
    context_expiry_minutes: int = 30
    context_sweep_interval_seconds: int = 300

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ASSISTANT_",
        case_sensitive=False,
    )


settings = Settings()
