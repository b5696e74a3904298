"""
Research aggregator: fans one topic out into a fixed set of web searches.

Public API
----------
ResearchService.generate_queries(topic) -> List[str]
ResearchService.research(topic)         -> List[ResearchResult]
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Protocol

from app.models.schemas import ResearchResult, ResearchSource
from app.services.errors import ProviderError
from app.services.ranking import score

logger = logging.getLogger(__name__)


class SearchProvider(Protocol):
    async def search(self, query: str, count: int = 10) -> List[ResearchSource]:
        ...


class ResearchService:
    """Runs the five research queries for a topic and annotates each hit."""

    RESULTS_PER_QUERY: int = 5
    SUMMARY_SOURCES: int = 3
    NO_SOURCES_SUMMARY: str = "No sources found"

    QUERY_SUFFIXES = ("", " guide", " tutorial", " best practices", " examples")

    def __init__(self, search_provider: SearchProvider) -> None:
        self.search_provider = search_provider

    @classmethod
    def generate_queries(cls, topic: str) -> List[str]:
        """The bare topic followed by its guide/tutorial/best practices/examples variants."""
        return [f"{topic}{suffix}" for suffix in cls.QUERY_SUFFIXES]

    async def research(self, topic: str) -> List[ResearchResult]:
        """
        Search every query for *topic* and return one result per successful query.

        Queries run concurrently; the output keeps query order.  A query whose
        search raises ``ProviderError`` is logged and left out.
        """
        queries = self.generate_queries(topic)
        outcomes = await asyncio.gather(*(self._research_query(q) for q in queries))
        results = [r for r in outcomes if r is not None]

        logger.info(
            "research: topic=%r → %d/%d queries succeeded, %d sources",
            topic,
            len(results),
            len(queries),
            sum(len(r.sources) for r in results),
        )
        return results

    async def _research_query(self, query: str) -> Optional[ResearchResult]:
        try:
            hits = await self.search_provider.search(query, self.RESULTS_PER_QUERY)
        except ProviderError as exc:
            logger.error("research: search failed for query %r: %s", query, exc)
            return None

        sources = [
            hit.model_copy(update={"relevance_score": score(hit, query)})
            for hit in hits[: self.RESULTS_PER_QUERY]
        ]
        return ResearchResult(
            query=query,
            sources=sources,
            summary=self.summarize(sources),
        )

    @classmethod
    def summarize(cls, sources: List[ResearchSource]) -> str:
        """First three snippets joined by spaces; informational only."""
        if not sources:
            return cls.NO_SOURCES_SUMMARY
        return " ".join(s.snippet for s in sources[: cls.SUMMARY_SOURCES])
