from __future__ import annotations

import logging
from typing import Optional, Sequence

from openai import AsyncOpenAI

from app.ai.types import AIConfigError, AIResponseError, ChatMessage

logger = logging.getLogger(__name__)


class OpenAICompatibleProvider:
    """Chat completions against any OpenAI-compatible endpoint (OpenAI, xAI Grok)."""

    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_s: float = 60.0,
        max_retries: int = 2,
        temperature: Optional[float] = None,
    ):
        key = (api_key or "").strip()
        if not key:
            raise AIConfigError("LLM API key not configured")

        self._model = model
        self._temperature = temperature
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=base_url,
            timeout=timeout_s,
            max_retries=max_retries,
        )

    @property
    def model(self) -> str:
        return self._model

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]

        create_kwargs = {
            "model": self._model,
            "messages": payload,
            "stream": False,
        }
        if self._temperature is not None:
            create_kwargs["temperature"] = self._temperature

        response = await self._client.chat.completions.create(**create_kwargs)

        content = response.choices[0].message.content if response.choices else None
        if not content:
            logger.error("llm_empty_content model=%s", self._model)
            raise AIResponseError("No content received from model")
        return content
