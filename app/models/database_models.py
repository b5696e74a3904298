"""
SQLAlchemy ORM models for the guide store.
"""
from sqlalchemy import (
    Column,
    String,
    Text,
    DateTime,
    JSON,
)
from sqlalchemy.sql import func

from app.database import Base


class Guide(Base):
    """Generated guide with its outline, sources and preference snapshot."""

    __tablename__ = "guides"

    id = Column(String(64), primary_key=True)  # guide_<millis>_<random>
    topic = Column(String(255), nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")

    outline = Column(JSON, nullable=False, default=list)  # ordered section titles
    metadata_json = Column(JSON, nullable=False, default=dict)  # word_count, reading_time
    sources = Column(JSON, nullable=False, default=list)  # capped, deduplicated by url
    preferences = Column(JSON, nullable=False)  # frozen at creation

    # created_at comes from the generation step, never from the database clock
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
