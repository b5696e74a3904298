"""
Web search client for the Brave Search API.

Public API
----------
BraveSearchService.search(query, count)  -> List[ResearchSource]
BraveSearchService.check_health()        -> bool

Every failure (timeout, connection error, non-200 response, malformed
payload) is raised as ``ProviderError``; the research aggregator decides
whether a failed query is fatal.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from app.config import settings
from app.models.schemas import ResearchSource
from app.services.errors import ProviderError
from app.utils.helpers import truncate_text

logger = logging.getLogger(__name__)

PROVIDER_NAME = "brave-search"


class BraveSearchService:
    """Thin async client over ``GET /res/v1/web/search``."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.BRAVE_SEARCH_API_KEY
        self.base_url = base_url or settings.BRAVE_SEARCH_BASE_URL
        self.timeout = httpx.Timeout(
            float(timeout if timeout is not None else settings.SEARCH_TIMEOUT), connect=10.0
        )
        self._transport = transport

    async def search(self, query: str, count: int = 10) -> List[ResearchSource]:
        """Return up to *count* web results for *query*, in provider order."""
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip",
            "X-Subscription-Token": self.api_key,
        }
        params = {"q": query, "count": count, "search_lang": "en"}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.get(self.base_url, headers=headers, params=params)
        except httpx.TimeoutException as exc:
            raise ProviderError(
                PROVIDER_NAME, f"search for {query!r} timed out"
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(PROVIDER_NAME, f"search for {query!r} failed: {exc}") from exc

        if resp.status_code != 200:
            logger.error(
                "search: Brave returned HTTP %d for %r: %s",
                resp.status_code,
                query,
                truncate_text(resp.text, 300),
            )
            raise ProviderError(PROVIDER_NAME, f"HTTP {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise ProviderError(PROVIDER_NAME, "response was not valid JSON") from exc

        results = self._extract_results(payload)
        sources = [
            ResearchSource(
                title=str(item.get("title") or "").strip(),
                url=str(item["url"]).strip(),
                snippet=str(item.get("description") or "").strip(),
            )
            for item in results[:count]
            if isinstance(item, dict) and item.get("url")
        ]
        logger.info("search: %r → %d results", truncate_text(query, 80), len(sources))
        return sources

    async def check_health(self) -> bool:
        """True when an API key is configured. No request is spent on it."""
        return bool(self.api_key)

    @staticmethod
    def _extract_results(payload: Any) -> List[Dict[str, Any]]:
        """Pull ``web.results`` out of the payload; a missing section means no hits."""
        if not isinstance(payload, dict):
            raise ProviderError(PROVIDER_NAME, "unexpected response shape")
        web = payload.get("web") or {}
        if not isinstance(web, dict):
            raise ProviderError(PROVIDER_NAME, "unexpected 'web' section")
        results = web.get("results") or []
        if not isinstance(results, list):
            raise ProviderError(PROVIDER_NAME, "unexpected 'results' section")
        return results


# Module-level singleton shared by all requests
search_service = BraveSearchService()
