"""Blocking client for an Ollama-compatible chat model endpoint"""

from typing import Optional

import httpx
import structlog

from .config import settings

logger = structlog.get_logger(__name__)


class ChatModelError(Exception):
    """Chat model call failed or returned an unusable payload"""


class ChatModelClient:
    """Sends a single user prompt and returns the model's text reply"""

    def __init__(
        self,
        base_url: str = None,
        model: str = None,
        timeout: float = None,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or settings.chat_model_url).rstrip("/")
        self.model = model or settings.chat_model_name
        timeout = timeout if timeout is not None else settings.chat_model_timeout_seconds
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(timeout, connect=min(5.0, timeout)),
        )

    def complete(self, prompt: str) -> str:
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "stream": False,
            "options": {"temperature": 0},
        }

        try:
            response = self._client.post(f"{self.base_url}/api/chat", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise ChatModelError(f"chat model request failed: {e}") from e
        except ValueError as e:
            raise ChatModelError("chat model returned invalid JSON") from e

        message = data.get("message") if isinstance(data, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not content:
            raise ChatModelError("chat model returned an empty reply")

        logger.debug("Chat model replied", model=self.model, length=len(content))
        return content

    def close(self):
        self._client.close()
