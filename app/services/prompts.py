"""
Prompt templates for outline, title, content and edit generation.

All templates are module-level constants so they can be tuned without
touching the builders.  Every builder is a pure function of its inputs.
"""
from __future__ import annotations

import json
from typing import Dict, List, Sequence

from app.models.schemas import GeneratedGuide, GuidePreferences, ResearchResult

CONTEXT_SOURCES_PER_QUERY = 3

TARGET_WORDS: Dict[str, int] = {
    "short": 750,
    "medium": 1500,
    "long": 2500,
}
DEFAULT_TARGET_WORDS = 1500


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

_PREFERENCES_BLOCK = """\
- Depth: {depth}
- Audience: {audience}
- Style: {style}
- Tone: {tone}
- Length: {length}
- Format: {format}
- Images: {images}\
"""

_OUTLINE_PROMPT = """\
Based on the following research about "{topic}", create a comprehensive outline \
for a {depth} {style} guide targeting a {audience} audience.

Research Context:
{research_context}

Generate an outline with 5-8 main sections. Return ONLY a JSON array of section titles, like:
["Introduction", "Section 1", "Section 2", ...]

Requirements:
{preferences}\
"""

_TITLE_PROMPT = """\
Generate a compelling, SEO-friendly title for a {style} guide about "{topic}".

Requirements:
{preferences}
- Title length: 50-65 characters
- Should be engaging and descriptive

Return ONLY the title, no quotes or extra text.\
"""

_CONTENT_PROMPT = """\
Write a comprehensive {style} guide about "{topic}" following this outline:

{outline}

Research Context:
{research_context}

Requirements:
{preferences}
- Target length: ~{target_words} words

Guidelines:
1. Write in markdown format with proper headings (## for sections)
2. Include practical examples and actionable insights
3. Use the research context to ensure accuracy
4. Make it engaging and easy to follow
5. Include an introduction and conclusion
6. Add relevant code examples if applicable
7. Use bullet points and numbered lists where appropriate
8. Keep paragraphs concise and scannable

Write the complete guide now:\
"""

_EDIT_PROMPT = """\
You are editing an existing guide. The user wants you to apply the following instruction:

"{instruction}"

Current Guide:
Title: {title}
Topic: {topic}
Outline: {outline}

Current Content:
{content}

Please edit the guide according to the user's instruction. You should:
1. Apply the instruction while maintaining the overall structure and quality
2. Keep the same tone and style ({tone})
3. Preserve the outline structure unless the instruction specifically asks to change it
4. Maintain the same depth level ({depth})
5. Keep the same audience level ({audience})

Return the updated guide content in markdown format. \
Only return the content, not the title or metadata.\
"""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _preference_values(preferences: GuidePreferences) -> Dict[str, str]:
    return {name: value.value for name, value in preferences}


def format_preferences(preferences: GuidePreferences) -> str:
    return _PREFERENCES_BLOCK.format(**_preference_values(preferences))


def format_research_context(research: Sequence[ResearchResult]) -> str:
    """Each query followed by its first three sources as ``- title: snippet`` lines."""
    blocks = []
    for result in research:
        lines = [f"Query: {result.query}", "Sources:"]
        lines.extend(
            f"- {source.title}: {source.snippet}"
            for source in result.sources[:CONTEXT_SOURCES_PER_QUERY]
        )
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def format_outline(outline: Sequence[str]) -> str:
    return "\n".join(f"{i}. {section}" for i, section in enumerate(outline, start=1))


def target_word_count(length: str) -> int:
    """750 / 1500 / 2500 words for short / medium / long; 1500 otherwise."""
    return TARGET_WORDS.get(str(getattr(length, "value", length)), DEFAULT_TARGET_WORDS)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def build_outline_prompt(
    topic: str,
    research: Sequence[ResearchResult],
    preferences: GuidePreferences,
) -> str:
    values = _preference_values(preferences)
    return _OUTLINE_PROMPT.format(
        topic=topic,
        depth=values["depth"],
        style=values["style"],
        audience=values["audience"],
        research_context=format_research_context(research),
        preferences=format_preferences(preferences),
    )


def build_title_prompt(topic: str, preferences: GuidePreferences) -> str:
    return _TITLE_PROMPT.format(
        topic=topic,
        style=preferences.style.value,
        preferences=format_preferences(preferences),
    )


def build_content_prompt(
    topic: str,
    outline: List[str],
    research: Sequence[ResearchResult],
    preferences: GuidePreferences,
) -> str:
    return _CONTENT_PROMPT.format(
        topic=topic,
        style=preferences.style.value,
        outline=format_outline(outline),
        research_context=format_research_context(research),
        preferences=format_preferences(preferences),
        target_words=target_word_count(preferences.length),
    )


def build_edit_prompt(instruction: str, guide: GeneratedGuide) -> str:
    # tone/depth/audience are copied from the stored preferences, never re-derived
    return _EDIT_PROMPT.format(
        instruction=instruction,
        title=guide.title,
        topic=guide.topic,
        outline=json.dumps(guide.outline, indent=2),
        content=guide.content,
        tone=guide.preferences.tone.value,
        depth=guide.preferences.depth.value,
        audience=guide.preferences.audience.value,
    )
