"""Database and schema models for the guide generator."""
from app.models.database_models import Guide
from app.models.schemas import (
    AudienceLevel,
    GeneratedGuide,
    GenerateGuideRequest,
    GuideDepth,
    GuideLength,
    GuideMetadata,
    GuidePatchRequest,
    GuidePreferences,
    GuideStyle,
    HealthCheckResponse,
    ImagePreference,
    OutputFormat,
    ResearchResult,
    ResearchSource,
    ToneStyle,
)

__all__ = [
    # Database models
    "Guide",
    # Pydantic schemas
    "AudienceLevel",
    "GeneratedGuide",
    "GenerateGuideRequest",
    "GuideDepth",
    "GuideLength",
    "GuideMetadata",
    "GuidePatchRequest",
    "GuidePreferences",
    "GuideStyle",
    "HealthCheckResponse",
    "ImagePreference",
    "OutputFormat",
    "ResearchResult",
    "ResearchSource",
    "ToneStyle",
]
