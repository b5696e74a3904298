"""
Stored guide endpoints.

Route summary
-------------
GET    /api/guides                              — list guides, newest first
GET    /api/guides/{guide_id}                   — guide detail
DELETE /api/guides/{guide_id}                   — delete guide
PATCH  /api/guides/{guide_id}                   — partial update (id / created_at immutable)
POST   /api/guides/{guide_id}/edit              — AI edit from a free-text instruction
POST   /api/guides/{guide_id}/regenerate-section — AI rewrite of one section
PUT    /api/guides/{guide_id}/title             — replace the title
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies.services import get_editing_service, get_guide_service
from app.models.schemas import (
    EditGuideRequest,
    GeneratedGuide,
    GuidePatchRequest,
    RegenerateSectionRequest,
    UpdateTitleRequest,
)
from app.services.errors import GuideEditFailedError, GuideNotFoundError, InvalidPatchError
from app.services.guide_editing import GuideEditingService
from app.services.guide_store import GuideService

logger = logging.getLogger(__name__)

router = APIRouter()


# ─── Helpers ──────────────────────────────────────────────────────────────────

async def _load_guide(guide_service: GuideService, guide_id: str) -> GeneratedGuide:
    try:
        return await guide_service.get_guide(guide_id)
    except GuideNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


async def _write_back(
    guide_service: GuideService, guide_id: str, updates: dict
) -> GeneratedGuide:
    try:
        return await guide_service.update_guide(guide_id, updates)
    except GuideNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


# ═══════════════════════════════════════════════════════════════════════════════
# GUIDE CRUD
# ═══════════════════════════════════════════════════════════════════════════════

@router.get("", response_model=List[GeneratedGuide])
async def list_guides(
    guide_service: GuideService = Depends(get_guide_service),
) -> List[GeneratedGuide]:
    """List all stored guides, newest first."""
    return await guide_service.list_guides()


@router.get("/{guide_id}", response_model=GeneratedGuide)
async def get_guide(
    guide_id: str,
    guide_service: GuideService = Depends(get_guide_service),
) -> GeneratedGuide:
    """Get a guide by id."""
    return await _load_guide(guide_service, guide_id)


@router.delete(
    "/{guide_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_model=None,
)
async def delete_guide(
    guide_id: str,
    guide_service: GuideService = Depends(get_guide_service),
) -> None:
    """Delete a guide. Unknown ids return 404."""
    try:
        await guide_service.delete_guide(guide_id)
    except GuideNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.patch("/{guide_id}", response_model=GeneratedGuide)
async def patch_guide(
    guide_id: str,
    body: GuidePatchRequest,
    guide_service: GuideService = Depends(get_guide_service),
) -> GeneratedGuide:
    """Update selected fields. Metadata is recomputed from the resulting content."""
    updates = body.model_dump(exclude_unset=True)
    if not updates:
        return await _load_guide(guide_service, guide_id)

    try:
        return await guide_service.update_guide(guide_id, updates)
    except GuideNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except InvalidPatchError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


# ═══════════════════════════════════════════════════════════════════════════════
# EDITING
# ═══════════════════════════════════════════════════════════════════════════════

@router.post("/{guide_id}/edit", response_model=GeneratedGuide)
async def edit_guide(
    guide_id: str,
    body: EditGuideRequest,
    guide_service: GuideService = Depends(get_guide_service),
    editing_service: GuideEditingService = Depends(get_editing_service),
) -> GeneratedGuide:
    """
    Apply a free-text instruction to the guide body via the LLM.

    The stored guide is only written after the edit succeeds.
    """
    current = await _load_guide(guide_service, guide_id)
    logger.info("Editing guide %s: %r", guide_id, body.instruction[:120])

    try:
        edited = await editing_service.edit_guide(body.instruction, current)
    except GuideEditFailedError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))

    return await _write_back(guide_service, edited.id, {"content": edited.content})


@router.post("/{guide_id}/regenerate-section", response_model=GeneratedGuide)
async def regenerate_section(
    guide_id: str,
    body: RegenerateSectionRequest,
    guide_service: GuideService = Depends(get_guide_service),
    editing_service: GuideEditingService = Depends(get_editing_service),
) -> GeneratedGuide:
    """Rewrite one section of the guide with more detail."""
    current = await _load_guide(guide_service, guide_id)

    try:
        edited = await editing_service.regenerate_section(body.section_title, current)
    except GuideEditFailedError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))

    return await _write_back(guide_service, edited.id, {"content": edited.content})


@router.put("/{guide_id}/title", response_model=GeneratedGuide)
async def update_title(
    guide_id: str,
    body: UpdateTitleRequest,
    guide_service: GuideService = Depends(get_guide_service),
) -> GeneratedGuide:
    """Replace the guide title. No AI involved."""
    current = await _load_guide(guide_service, guide_id)
    renamed = GuideEditingService.update_title(body.title, current)
    return await _write_back(guide_service, guide_id, {"title": renamed.title})
