"""
Service dependencies for FastAPI routes.

Provider clients are the process-wide singletons built from settings and
injected into the pipeline services, so tests can override ``get_llm_service``
and ``get_search_service`` with doubles.
"""
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.services.content_generation import ContentGenerationService, LLMProvider
from app.services.guide_editing import GuideEditingService
from app.services.guide_store import GuideService
from app.services.llm import llm_service
from app.services.research import ResearchService, SearchProvider
from app.services.search import search_service


async def get_llm_service() -> LLMProvider:
    return llm_service


async def get_search_service() -> SearchProvider:
    return search_service


async def get_research_service(
    search: SearchProvider = Depends(get_search_service),
) -> ResearchService:
    return ResearchService(search)


async def get_content_service(
    llm: LLMProvider = Depends(get_llm_service),
) -> ContentGenerationService:
    return ContentGenerationService(llm)


async def get_editing_service(
    llm: LLMProvider = Depends(get_llm_service),
) -> GuideEditingService:
    return GuideEditingService(llm)


async def get_guide_service(db: AsyncSession = Depends(get_db)) -> GuideService:
    return GuideService(db)
