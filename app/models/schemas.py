"""
Pydantic schemas for request/response validation.

The guide, research and preference models double as the pipeline's value
objects: the research aggregator and the orchestrators produce and consume
them directly.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from enum import Enum


# Preference enums (closed sets; anything else is rejected at the boundary)
class GuideDepth(str, Enum):
    QUICK = "quick"
    STANDARD = "standard"
    COMPREHENSIVE = "comprehensive"
    DEEP_DIVE = "deep-dive"


class AudienceLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    MIXED = "mixed"


class GuideStyle(str, Enum):
    TUTORIAL = "tutorial"
    CONCEPTUAL = "conceptual"
    PRACTICAL = "practical"


class GuideLength(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class ImagePreference(str, Enum):
    WITH_AI_IMAGES = "with-ai-images"
    WITH_SOURCED_IMAGES = "with-sourced-images"
    WITHOUT_IMAGES = "without-images"


class OutputFormat(str, Enum):
    BLOG_POST = "blog-post"
    SOCIAL_MEDIA = "social-media"
    NEWSLETTER = "newsletter"
    DOCUMENTATION = "documentation"


class ToneStyle(str, Enum):
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    TECHNICAL = "technical"
    CONVERSATIONAL = "conversational"


# Preference Schemas
class GuidePreferences(BaseModel):
    """Stylistic preferences for a guide. Immutable once created."""

    depth: GuideDepth
    audience: AudienceLevel
    style: GuideStyle
    length: GuideLength
    images: ImagePreference
    format: OutputFormat
    tone: ToneStyle

    model_config = ConfigDict(frozen=True, extra="forbid")


# Research Schemas
class ResearchSource(BaseModel):
    """A single web search hit."""

    title: str
    url: str
    snippet: str = ""
    relevance_score: Optional[float] = None


class ResearchResult(BaseModel):
    """Sources found for one research query plus a lightweight summary."""

    query: str
    sources: List[ResearchSource] = []
    summary: str = ""


# Guide Schemas
class GuideMetadata(BaseModel):
    """Derived guide statistics, always recomputed from the content."""

    word_count: int = 0
    reading_time: int = 0  # minutes


class GeneratedGuide(BaseModel):
    """A generated guide with its provenance."""

    id: str
    topic: str
    title: str
    content: str
    outline: List[str]
    metadata: GuideMetadata
    sources: List[ResearchSource] = []
    preferences: GuidePreferences
    created_at: datetime


# Request Schemas
class GenerateGuideRequest(BaseModel):
    """Schema for POST /api/generate."""

    topic: str = Field(..., min_length=3, max_length=200)
    preferences: GuidePreferences


class ResearchRequest(BaseModel):
    """Schema for POST /api/research."""

    topic: str = Field(..., min_length=1, max_length=200)


class EditGuideRequest(BaseModel):
    """Schema for POST /api/guides/{guide_id}/edit."""

    instruction: str = Field(..., min_length=1, max_length=5000)


class RegenerateSectionRequest(BaseModel):
    """Schema for POST /api/guides/{guide_id}/regenerate-section."""

    section_title: str = Field(..., min_length=1, max_length=255)


class UpdateTitleRequest(BaseModel):
    """Schema for PUT /api/guides/{guide_id}/title."""

    title: str = Field(..., min_length=1, max_length=255)


class GuidePatchRequest(BaseModel):
    """
    Schema for PATCH /api/guides/{guide_id}.

    Only the patchable fields are accepted; ``id``, ``created_at`` and
    ``metadata`` are rejected as extra fields.
    """

    topic: Optional[str] = Field(None, min_length=3, max_length=200)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = None
    outline: Optional[List[str]] = None
    sources: Optional[List[ResearchSource]] = None
    preferences: Optional[GuidePreferences] = None

    model_config = ConfigDict(extra="forbid")


# Health Check Schemas
class HealthCheckResponse(BaseModel):
    """Schema for health check endpoint."""

    status: str
    database: str
    llm_provider: str
    search_provider: str
    timestamp: datetime
    version: str = "1.0.0"
