"""
Exception taxonomy for the research-to-guide pipeline.

Routers translate these into HTTP responses; services raise them and let
them propagate.
"""
from __future__ import annotations


class GuideGeneratorError(Exception):
    """Base class for all pipeline errors."""


class GuideNotFoundError(GuideGeneratorError, LookupError):
    """No guide is stored under the requested id."""

    def __init__(self, guide_id: str) -> None:
        self.guide_id = guide_id
        super().__init__(f"Guide with id {guide_id} not found")


class InsufficientResearchError(GuideGeneratorError):
    """Research produced no results, so generation must not start."""

    def __init__(self, topic: str) -> None:
        self.topic = topic
        super().__init__("Could not find enough research material for this topic")


class ProviderError(GuideGeneratorError):
    """An outbound LLM or search call failed, timed out or returned an unexpected shape."""

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(f"{provider}: {message}")


class GenerationFailedError(GuideGeneratorError):
    """Guide generation aborted; wraps the underlying provider failure."""


class GuideEditFailedError(GuideGeneratorError):
    """Guide editing aborted; the stored guide is left untouched."""


class UnexpectedReplyShapeError(GuideEditFailedError):
    """The model replied with a non-text block where text was required."""


class InvalidPatchError(GuideGeneratorError, ValueError):
    """A partial update names fields that cannot be patched."""


class ImmutableFieldError(InvalidPatchError):
    """A partial update tried to change ``id`` or ``created_at``."""
