"""
LLM client for the Anthropic Messages API.

Every call is a single user-role prompt with an explicit model and output
budget.  The first content block of the reply decides its shape: a text
block yields ``LLMReply.text``; anything else is a non-text reply that
callers handle with their own fallback.

Public API
----------
AnthropicLLMService.complete(prompt, max_tokens, model=None) -> LLMReply
AnthropicLLMService.check_health()                          -> bool
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Any, Optional

import httpx

from app.config import settings
from app.services.errors import ProviderError
from app.utils.helpers import truncate_text

logger = logging.getLogger(__name__)

PROVIDER_NAME = "anthropic"


# ---------------------------------------------------------------------------
# Result dataclass
# ---------------------------------------------------------------------------

@dataclasses.dataclass(frozen=True)
class LLMReply:
    """First content block of a model reply."""

    block_type: str
    text: Optional[str] = None

    @property
    def is_text(self) -> bool:
        return self.block_type == "text" and self.text is not None


# ---------------------------------------------------------------------------
# Main service class
# ---------------------------------------------------------------------------

class AnthropicLLMService:
    """
    LLM completion service via POST /v1/messages.

    Limits concurrency to MAX_CONCURRENT simultaneous calls per instance;
    the app shares one instance (``llm_service``).  No retries: a failed
    call raises ``ProviderError`` and aborts the caller's step.
    """

    MAX_CONCURRENT: int = 4

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.ANTHROPIC_API_KEY
        self.base_url = (base_url or settings.ANTHROPIC_BASE_URL).rstrip("/")
        self.model = model or settings.ANTHROPIC_MODEL
        self.llm_timeout = float(timeout if timeout is not None else settings.LLM_TIMEOUT)
        self.timeout = httpx.Timeout(self.llm_timeout, connect=10.0)
        self._transport = transport
        self._semaphore = asyncio.Semaphore(self.MAX_CONCURRENT)

    async def complete(
        self,
        prompt: str,
        max_tokens: int,
        model: Optional[str] = None,
    ) -> LLMReply:
        """Send *prompt* as a single user message and return the first content block."""
        body = {
            "model": model or self.model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": settings.ANTHROPIC_API_VERSION,
            "content-type": "application/json",
        }

        async with self._semaphore:
            try:
                async with httpx.AsyncClient(
                    timeout=self.timeout, transport=self._transport
                ) as client:
                    resp = await client.post(
                        f"{self.base_url}/v1/messages", json=body, headers=headers
                    )
            except httpx.TimeoutException as exc:
                logger.error("complete: request timed out after %.0f s", self.llm_timeout)
                raise ProviderError(
                    PROVIDER_NAME, f"request timed out after {self.llm_timeout:.0f}s"
                ) from exc
            except httpx.HTTPError as exc:
                logger.error("complete: connection error: %s", exc)
                raise ProviderError(PROVIDER_NAME, f"request failed: {exc}") from exc

        if resp.status_code != 200:
            logger.error(
                "complete: Anthropic returned HTTP %d: %s",
                resp.status_code,
                truncate_text(resp.text, 300),
            )
            raise ProviderError(PROVIDER_NAME, f"HTTP {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise ProviderError(PROVIDER_NAME, "response was not valid JSON") from exc

        reply = self._first_block(payload)
        logger.debug(
            "complete: model=%s max_tokens=%d → %s block",
            body["model"],
            max_tokens,
            reply.block_type,
        )
        return reply

    async def check_health(self) -> bool:
        """True when an API key is configured. No tokens are spent on it."""
        return bool(self.api_key)

    @staticmethod
    def _first_block(payload: Any) -> LLMReply:
        if not isinstance(payload, dict) or not isinstance(payload.get("content"), list):
            raise ProviderError(PROVIDER_NAME, "response has no content list")

        blocks = payload["content"]
        if not blocks:
            return LLMReply(block_type="empty")

        first = blocks[0]
        if not isinstance(first, dict):
            return LLMReply(block_type="unknown")

        block_type = str(first.get("type", "unknown"))
        if block_type == "text" and isinstance(first.get("text"), str):
            return LLMReply(block_type="text", text=first["text"])
        return LLMReply(block_type=block_type)


# ---------------------------------------------------------------------------
# Module-level singleton: one semaphore bounds calls across all requests
# ---------------------------------------------------------------------------
llm_service = AnthropicLLMService()
