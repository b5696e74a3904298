"""
Guide generation orchestrator: outline → title → content.

Public API
----------
ContentGenerationService.generate_guide(topic, research, preferences) -> GeneratedGuide

The outline and title are requested concurrently; the content prompt needs
the finished outline.  The returned guide is not persisted here.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Protocol, Sequence, Tuple

from app.config import settings
from app.models.schemas import (
    GeneratedGuide,
    GuideMetadata,
    GuidePreferences,
    ResearchResult,
    ResearchSource,
)
from app.services import prompts
from app.services.errors import GenerationFailedError, InsufficientResearchError, ProviderError
from app.services.llm import LLMReply
from app.services.parsing import clean_title, content_or_fallback, parse_outline
from app.services.ranking import deduplicate_by_url
from app.utils.helpers import count_words, generate_guide_id, reading_time_minutes, utcnow

logger = logging.getLogger(__name__)


class LLMProvider(Protocol):
    async def complete(
        self, prompt: str, max_tokens: int, model: Optional[str] = None
    ) -> LLMReply:
        ...


def build_metadata(content: str) -> GuideMetadata:
    """Word count and reading time derived from *content*."""
    word_count = count_words(content)
    return GuideMetadata(
        word_count=word_count,
        reading_time=reading_time_minutes(word_count),
    )


class ContentGenerationService:
    """Turns research plus preferences into a complete guide."""

    MAX_SOURCES: int = 10

    def __init__(self, llm: LLMProvider) -> None:
        self.llm = llm

    async def generate_guide(
        self,
        topic: str,
        research: Sequence[ResearchResult],
        preferences: GuidePreferences,
    ) -> GeneratedGuide:
        """
        Generate a complete guide.

        Raises:
            InsufficientResearchError: *research* is empty; no LLM call is made.
            GenerationFailedError: any LLM call failed.
        """
        if not research:
            raise InsufficientResearchError(topic)

        try:
            outline, title = await self._outline_and_title(topic, research, preferences)
            content = await self.generate_content(topic, outline, research, preferences)
        except ProviderError as exc:
            logger.error("generate_guide: topic=%r failed: %s", topic, exc)
            raise GenerationFailedError(f"Failed to generate guide: {exc}") from exc

        guide = GeneratedGuide(
            id=generate_guide_id(),
            topic=topic,
            title=title,
            content=content,
            outline=outline,
            metadata=build_metadata(content),
            sources=self.collect_sources(research),
            preferences=preferences,
            created_at=utcnow(),
        )
        logger.info(
            "generate_guide: %s topic=%r sections=%d words=%d sources=%d",
            guide.id,
            topic,
            len(outline),
            guide.metadata.word_count,
            len(guide.sources),
        )
        return guide

    async def _outline_and_title(
        self,
        topic: str,
        research: Sequence[ResearchResult],
        preferences: GuidePreferences,
    ) -> Tuple[List[str], str]:
        """Run outline and title concurrently; a failure in one cancels the other."""
        outline_task = asyncio.ensure_future(self.generate_outline(topic, research, preferences))
        title_task = asyncio.ensure_future(self.generate_title(topic, preferences))
        try:
            outline, title = await asyncio.gather(outline_task, title_task)
        except BaseException:
            for task in (outline_task, title_task):
                task.cancel()
            await asyncio.gather(outline_task, title_task, return_exceptions=True)
            raise
        return outline, title

    # ------------------------------------------------------------------
    # Generation steps
    # ------------------------------------------------------------------

    async def generate_outline(
        self,
        topic: str,
        research: Sequence[ResearchResult],
        preferences: GuidePreferences,
    ) -> List[str]:
        prompt = prompts.build_outline_prompt(topic, research, preferences)
        reply = await self.llm.complete(prompt, max_tokens=settings.OUTLINE_MAX_TOKENS)
        parsed = parse_outline(reply.text if reply.is_text else None)
        logger.info(
            "generate_outline: %d sections (%s)", len(parsed.sections), parsed.kind
        )
        return parsed.sections

    async def generate_title(self, topic: str, preferences: GuidePreferences) -> str:
        prompt = prompts.build_title_prompt(topic, preferences)
        reply = await self.llm.complete(prompt, max_tokens=settings.TITLE_MAX_TOKENS)
        return clean_title(reply.text if reply.is_text else None, topic)

    async def generate_content(
        self,
        topic: str,
        outline: List[str],
        research: Sequence[ResearchResult],
        preferences: GuidePreferences,
    ) -> str:
        prompt = prompts.build_content_prompt(topic, outline, research, preferences)
        reply = await self.llm.complete(prompt, max_tokens=settings.CONTENT_MAX_TOKENS)
        if not reply.is_text:
            logger.warning("generate_content: non-text reply (%s)", reply.block_type)
        return content_or_fallback(reply.text if reply.is_text else None)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @classmethod
    def collect_sources(cls, research: Sequence[ResearchResult]) -> List[ResearchSource]:
        """Flatten, deduplicate by url and keep the first ten, in research order."""
        all_sources = [source for result in research for source in result.sources]
        return deduplicate_by_url(all_sources)[: cls.MAX_SOURCES]
