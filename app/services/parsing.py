"""
Parsing of model replies into outline sections and titles.

The outline parser is an explicit chain: the first parser that yields at
least one section wins, and the result records which one it was.

    structured  — a JSON array of strings (bare, fenced, or embedded in prose)
    freeform    — one section per non-blank line, bullet/number markers removed
    fallback    — the fixed three-section outline
"""
from __future__ import annotations

import dataclasses
import json
import logging
import re
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

FALLBACK_OUTLINE: Tuple[str, ...] = ("Introduction", "Main Content", "Conclusion")
FALLBACK_CONTENT = "Failed to generate content."

_LIST_MARKER = re.compile(r"^[-*\d.]+\s*")


@dataclasses.dataclass(frozen=True)
class OutlineParse:
    """Tagged outline parse result."""

    kind: str  # "structured" | "freeform" | "fallback"
    sections: List[str]


# ---------------------------------------------------------------------------
# Outline parser chain
# ---------------------------------------------------------------------------

def parse_outline(reply_text: Optional[str]) -> OutlineParse:
    """Run the parser chain over *reply_text*; ``None`` means a non-text reply."""
    if reply_text is not None:
        parsers: List[Tuple[str, Callable[[str], Optional[List[str]]]]] = [
            ("structured", _parse_structured),
            ("freeform", _parse_freeform),
        ]
        for kind, parser in parsers:
            sections = parser(reply_text)
            if sections:
                return OutlineParse(kind=kind, sections=sections)

    logger.warning("parse_outline: falling back to the default outline")
    return OutlineParse(kind="fallback", sections=list(FALLBACK_OUTLINE))


def _parse_structured(text: str) -> Optional[List[str]]:
    """
    Try to read a JSON array of strings from *text*.

    Handles:
    - A bare JSON array
    - Markdown code fences (```json … ```)
    - Surrounding prose around the first balanced [...] block
    """
    text = text.strip()
    candidates = [text]
    stripped = strip_code_fences(text)
    if stripped != text:
        candidates.append(stripped)
    fragment = extract_json_structure(stripped, "[", "]")
    if fragment:
        candidates.append(fragment)

    for candidate in candidates:
        ok, value = _try_json(candidate)
        if not ok or not isinstance(value, list):
            continue
        if not all(isinstance(item, str) for item in value):
            continue
        sections = [item.strip() for item in value if item.strip()]
        if sections:
            return sections
    return None


def _parse_freeform(text: str) -> Optional[List[str]]:
    """One section per line with leading ``-``, ``*``, digits and dots stripped."""
    sections = []
    for line in text.splitlines():
        if not line.strip():
            continue
        cleaned = _LIST_MARKER.sub("", line.strip()).strip()
        if cleaned:
            sections.append(cleaned)
    return sections or None


# ---------------------------------------------------------------------------
# Title / content
# ---------------------------------------------------------------------------

def clean_title(reply_text: Optional[str], topic: str) -> str:
    """Trim the reply and drop surrounding quotes; fall back for non-text or empty replies."""
    if reply_text is not None:
        title = reply_text.strip().strip("\"'").strip()
        if title:
            return title
    return f"Complete Guide to {topic}"


def content_or_fallback(reply_text: Optional[str]) -> str:
    return reply_text if reply_text is not None else FALLBACK_CONTENT


# ---------------------------------------------------------------------------
# JSON helpers
# ---------------------------------------------------------------------------

def _try_json(text: str) -> Tuple[bool, Any]:
    try:
        return True, json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return False, None


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` delimiters that LLMs often wrap output in."""
    # Remove opening fence (with optional language tag)
    text = re.sub(r"^```(?:json|text|markdown)?\s*\n?", "", text, flags=re.IGNORECASE)
    # Remove closing fence
    text = re.sub(r"\n?```\s*$", "", text)
    return text.strip()


def extract_json_structure(text: str, open_b: str, close_b: str) -> str:
    """
    Find the first complete balanced open_b … close_b structure in *text*.
    Returns the matched fragment, or empty string if not found.
    """
    start = text.find(open_b)
    if start == -1:
        return ""

    depth = 0
    in_string = False
    escape_next = False

    for i, ch in enumerate(text[start:], start=start):
        if escape_next:
            escape_next = False
            continue
        if ch == "\\" and in_string:
            escape_next = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch == open_b:
            depth += 1
        elif ch == close_b:
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return ""
