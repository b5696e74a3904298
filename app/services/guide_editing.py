"""
Conversational guide editing.

Public API
----------
GuideEditingService.edit_guide(instruction, current_guide)           -> GeneratedGuide
GuideEditingService.regenerate_section(section_title, current_guide) -> GeneratedGuide
GuideEditingService.update_title(new_title, current_guide)           -> GeneratedGuide

Editing only ever replaces the body text and its derived metadata; id,
created_at, title, outline, sources and preferences are carried over.
"""
from __future__ import annotations

import logging

from app.config import settings
from app.models.schemas import GeneratedGuide
from app.services import prompts
from app.services.content_generation import LLMProvider, build_metadata
from app.services.errors import GuideEditFailedError, ProviderError, UnexpectedReplyShapeError

logger = logging.getLogger(__name__)

_REGENERATE_SECTION_INSTRUCTION = (
    'Regenerate and improve the section titled "{section_title}" '
    "with more detail and clarity."
)


class GuideEditingService:
    """Applies free-text edit instructions to a guide via the LLM."""

    def __init__(self, llm: LLMProvider) -> None:
        self.llm = llm

    async def edit_guide(self, instruction: str, current_guide: GeneratedGuide) -> GeneratedGuide:
        """
        Return *current_guide* with its content replaced by the model's rewrite.

        Raises:
            UnexpectedReplyShapeError: the model did not reply with text.
            GuideEditFailedError: the LLM call failed.
        """
        prompt = prompts.build_edit_prompt(instruction, current_guide)
        try:
            reply = await self.llm.complete(prompt, max_tokens=settings.EDIT_MAX_TOKENS)
        except ProviderError as exc:
            logger.error("edit_guide: %s failed: %s", current_guide.id, exc)
            raise GuideEditFailedError(f"Failed to edit guide: {exc}") from exc

        if not reply.is_text:
            raise UnexpectedReplyShapeError(
                f"Failed to get text response from AI (got {reply.block_type!r} block)"
            )

        updated_content = reply.text.strip()
        edited = current_guide.model_copy(
            update={
                "content": updated_content,
                "metadata": build_metadata(updated_content),
                "id": current_guide.id,
                "created_at": current_guide.created_at,
            }
        )
        logger.info(
            "edit_guide: %s words %d → %d",
            current_guide.id,
            current_guide.metadata.word_count,
            edited.metadata.word_count,
        )
        return edited

    async def regenerate_section(
        self, section_title: str, current_guide: GeneratedGuide
    ) -> GeneratedGuide:
        instruction = _REGENERATE_SECTION_INSTRUCTION.format(section_title=section_title)
        return await self.edit_guide(instruction, current_guide)

    @staticmethod
    def update_title(new_title: str, current_guide: GeneratedGuide) -> GeneratedGuide:
        """Plain field replacement; no model call."""
        return current_guide.model_copy(update={"title": new_title})
