"""
LLM Service - Sends prompts to the Anthropic Messages API.

One attempt per request: no retries, no backoff. Every failure is raised as
``LLMError`` with no partial result.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import anthropic
from anthropic import AsyncAnthropic

from review_assistant.api.middleware.error_handler import LLMError
from review_assistant.models.schemas import ChatMessage


logger = logging.getLogger(__name__)


@dataclass
class LLMServiceConfig:
    """Configuration for the LLM service."""
    api_key: str = ""
    model: str = "claude-3-5-sonnet-latest"
    max_tokens: int = 2000
    timeout_seconds: float = 120.0


class LLMService:
    """
    Text generation against a remote model.

    Usage:
        llm = LLMService(LLMServiceConfig(api_key="..."))
        text = await llm.request_analysis(prompt)
    """

    def __init__(
        self,
        config: Optional[LLMServiceConfig] = None,
        client: Optional[AsyncAnthropic] = None,
    ):
        self.config = config or LLMServiceConfig()
        self._client = client

    @property
    def client(self) -> AsyncAnthropic:
        """Lazy-create the API client on first use."""
        if self._client is None:
            self._client = AsyncAnthropic(
                api_key=self.config.api_key,
                max_retries=0,
                timeout=self.config.timeout_seconds,
            )
        return self._client

    @property
    def is_configured(self) -> bool:
        return bool(self.config.api_key) or self._client is not None

    async def request_analysis(
        self,
        prompt: str,
        history: Optional[List[ChatMessage]] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Send one prompt (optionally after earlier chat turns) and return the text.

        Raises:
            LLMError: On any API, network or payload failure.
        """
        messages = [
            {"role": message.role.value, "content": message.content}
            for message in history or []
        ]
        messages.append({"role": "user", "content": prompt})

        request = {
            "model": self.config.model,
            "max_tokens": max_tokens or self.config.max_tokens,
            "messages": messages,
        }

        try:
            response = await self.client.messages.create(**request)
        except anthropic.APIError as e:
            logger.exception("LLM request failed")
            raise LLMError(f"LLM request failed: {e}") from e

        text = "".join(
            block.text
            for block in getattr(response, "content", None) or []
            if getattr(block, "type", None) == "text"
        )
        if not text:
            raise LLMError("LLM returned no text content")
        return text
