"""
Guide generation and research endpoints.

POST /api/generate  — research a topic, generate a guide and store it
POST /api/research  — research only (preview of the material a guide would use)
"""
from __future__ import annotations

import logging
import time
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies.services import (
    get_content_service,
    get_guide_service,
    get_research_service,
)
from app.models.schemas import (
    GeneratedGuide,
    GenerateGuideRequest,
    ResearchRequest,
    ResearchResult,
)
from app.services.content_generation import ContentGenerationService
from app.services.errors import GenerationFailedError, InsufficientResearchError
from app.services.guide_store import GuideService
from app.services.research import ResearchService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/generate",
    response_model=GeneratedGuide,
    status_code=status.HTTP_201_CREATED,
)
async def generate_guide(
    body: GenerateGuideRequest,
    research_service: ResearchService = Depends(get_research_service),
    content_service: ContentGenerationService = Depends(get_content_service),
    guide_service: GuideService = Depends(get_guide_service),
) -> GeneratedGuide:
    """
    Generate a complete guide for *topic*.

    1. Research — five web searches for the topic.
    2. Generation — outline, title and content from the LLM.
    3. Persist the finished guide.

    Returns 400 when research finds nothing (no LLM call is made) and 502
    when a generation call fails.  Nothing is stored on failure.
    """
    t0 = time.monotonic()
    logger.info("Generating guide for topic=%r", body.topic)

    try:
        research = await research_service.research(body.topic)
        if not research:
            raise InsufficientResearchError(body.topic)
        guide = await content_service.generate_guide(body.topic, research, body.preferences)
    except InsufficientResearchError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except GenerationFailedError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))

    saved = await guide_service.save_guide(guide)
    logger.info(
        "Guide %s generated in %.1f s (%d words)",
        saved.id,
        time.monotonic() - t0,
        saved.metadata.word_count,
    )
    return saved


@router.post("/research", response_model=List[ResearchResult])
async def research_topic(
    body: ResearchRequest,
    research_service: ResearchService = Depends(get_research_service),
) -> List[ResearchResult]:
    """Research a topic without generating content."""
    logger.info("Researching topic=%r", body.topic)
    return await research_service.research(body.topic)
