"""
Common utility functions and helpers.
"""
from datetime import datetime, timezone
import math
import secrets
import time

WORDS_PER_MINUTE = 200


def count_words(text: str) -> int:
    """
    Count whitespace-delimited, non-empty tokens.

    Args:
        text: Text to count

    Returns:
        Number of words
    """
    return len(text.split())


def reading_time_minutes(word_count: int) -> int:
    """
    Estimate reading time at an average of 200 words per minute.

    Args:
        word_count: Number of words

    Returns:
        Minutes, rounded up (0 for empty content)
    """
    return math.ceil(word_count / WORDS_PER_MINUTE)


def generate_guide_id() -> str:
    """Return a fresh id of the form ``guide_<epoch millis>_<9 hex chars>``."""
    millis = int(time.time() * 1000)
    return f"guide_{millis}_{secrets.token_hex(5)[:9]}"


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on round-trip)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def truncate_text(text: str, max_length: int = 200, suffix: str = "...") -> str:
    """
    Truncate text to maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
