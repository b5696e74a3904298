"""
Guide persistence on top of the async SQLAlchemy session.

Public API
----------
GuideService.save_guide(guide)            -> GeneratedGuide
GuideService.get_guide(guide_id)          -> GeneratedGuide
GuideService.list_guides()                -> List[GeneratedGuide]   (newest first)
GuideService.delete_guide(guide_id)       -> None
GuideService.update_guide(guide_id, dict) -> GeneratedGuide

Partial updates go through a whitelist of patchable fields; ``id`` and
``created_at`` are rejected here for every caller.  Metadata is recomputed
from the stored content on every write.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import delete as sql_delete
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.database_models import Guide
from app.models.schemas import GeneratedGuide, GuidePreferences, ResearchSource
from app.services.content_generation import build_metadata
from app.services.errors import GuideNotFoundError, ImmutableFieldError, InvalidPatchError
from app.utils.helpers import ensure_utc, utcnow

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = frozenset({"id", "created_at"})
PATCHABLE_FIELDS = frozenset({"topic", "title", "content", "outline", "sources", "preferences"})

_sources_adapter = TypeAdapter(List[ResearchSource])
_outline_adapter = TypeAdapter(List[str])


class GuideService:
    """CRUD for guides keyed by id."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def save_guide(self, guide: GeneratedGuide) -> GeneratedGuide:
        now = utcnow()
        row = Guide(
            id=guide.id,
            topic=guide.topic,
            title=guide.title,
            content=guide.content,
            outline=list(guide.outline),
            metadata_json=build_metadata(guide.content).model_dump(),
            sources=[s.model_dump(mode="json") for s in guide.sources],
            preferences=guide.preferences.model_dump(mode="json"),
            created_at=guide.created_at,
            updated_at=now,
        )
        self.db.add(row)
        await self.db.flush()
        logger.info("Saved guide id=%s title=%r", guide.id, guide.title)
        return self._to_schema(row)

    async def get_guide(self, guide_id: str) -> GeneratedGuide:
        return self._to_schema(await self._load(guide_id))

    async def list_guides(self) -> List[GeneratedGuide]:
        result = await self.db.execute(select(Guide).order_by(Guide.created_at.desc()))
        return [self._to_schema(row) for row in result.scalars().all()]

    async def delete_guide(self, guide_id: str) -> None:
        result = await self.db.execute(sql_delete(Guide).where(Guide.id == guide_id))
        if result.rowcount == 0:
            raise GuideNotFoundError(guide_id)
        await self.db.flush()
        logger.info("Deleted guide id=%s", guide_id)

    async def update_guide(self, guide_id: str, updates: Mapping[str, Any]) -> GeneratedGuide:
        """
        Apply a partial update.

        Raises:
            ImmutableFieldError: *updates* names ``id`` or ``created_at``.
            InvalidPatchError: unknown field or a null value.
            GuideNotFoundError: no guide with *guide_id*.
        """
        values = self._validate_patch(updates)
        row = await self._load(guide_id)

        for name, value in values.items():
            setattr(row, name, value)
        row.metadata_json = build_metadata(row.content or "").model_dump()
        row.updated_at = utcnow()

        await self.db.flush()
        logger.info("Updated guide id=%s fields=%s", guide_id, sorted(values))
        return self._to_schema(row)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _load(self, guide_id: str) -> Guide:
        result = await self.db.execute(select(Guide).where(Guide.id == guide_id))
        row = result.scalar_one_or_none()
        if row is None:
            raise GuideNotFoundError(guide_id)
        return row

    @staticmethod
    def _validate_patch(updates: Mapping[str, Any]) -> Dict[str, Any]:
        immutable = IMMUTABLE_FIELDS.intersection(updates)
        if immutable:
            raise ImmutableFieldError(
                f"Fields cannot be changed: {', '.join(sorted(immutable))}"
            )
        unknown = set(updates) - PATCHABLE_FIELDS
        if unknown:
            raise InvalidPatchError(f"Fields cannot be patched: {', '.join(sorted(unknown))}")

        values: Dict[str, Any] = {}
        for name, value in updates.items():
            if value is None:
                raise InvalidPatchError(f"Field {name!r} cannot be null")
            try:
                if name == "sources":
                    value = [
                        s.model_dump(mode="json")
                        for s in _sources_adapter.validate_python(value)
                    ]
                elif name == "preferences":
                    value = GuidePreferences.model_validate(value).model_dump(mode="json")
                elif name == "outline":
                    value = _outline_adapter.validate_python(value)
            except ValidationError as exc:
                raise InvalidPatchError(f"Invalid value for {name!r}: {exc}") from exc
            values[name] = value
        return values

    @staticmethod
    def _to_schema(row: Guide) -> GeneratedGuide:
        return GeneratedGuide(
            id=row.id,
            topic=row.topic,
            title=row.title,
            content=row.content or "",
            outline=list(row.outline or []),
            metadata=build_metadata(row.content or ""),
            sources=[ResearchSource.model_validate(s) for s in row.sources or []],
            preferences=GuidePreferences.model_validate(row.preferences),
            created_at=ensure_utc(row.created_at),
        )
