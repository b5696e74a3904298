"""
Relevance scoring and deduplication for web search hits.

Scores are heuristic integer weights, not probabilities, and are left
unnormalised.
"""
from __future__ import annotations

from typing import Iterable, List

from app.models.schemas import ResearchSource

TITLE_PHRASE_WEIGHT = 10
TITLE_WORD_WEIGHT = 3
SNIPPET_PHRASE_WEIGHT = 5
SNIPPET_WORD_WEIGHT = 1


def score(candidate: ResearchSource, query: str) -> int:
    """
    Score *candidate* against *query*, case-insensitively.

    Full query in the title is worth 10, each query word in the title 3,
    full query in the snippet 5 and each query word in the snippet 1.
    """
    title = (candidate.title or "").lower()
    snippet = (candidate.snippet or "").lower()
    query_lower = query.lower().strip()
    if not query_lower:
        return 0
    query_words = query_lower.split()

    total = 0
    if query_lower in title:
        total += TITLE_PHRASE_WEIGHT
    total += TITLE_WORD_WEIGHT * sum(1 for word in query_words if word in title)

    if query_lower in snippet:
        total += SNIPPET_PHRASE_WEIGHT
    total += SNIPPET_WORD_WEIGHT * sum(1 for word in query_words if word in snippet)

    return total


def deduplicate_by_url(sources: Iterable[ResearchSource]) -> List[ResearchSource]:
    """Keep the first source per url, preserving relative order."""
    seen: set = set()
    unique: List[ResearchSource] = []
    for source in sources:
        if source.url in seen:
            continue
        seen.add(source.url)
        unique.append(source)
    return unique


def rank_and_deduplicate(sources: Iterable[ResearchSource]) -> List[ResearchSource]:
    """Deduplicate by url, then sort by relevance score, highest first.

    ``sorted`` is stable, so equal scores keep their input order.
    """
    unique = deduplicate_by_url(sources)
    return sorted(unique, key=lambda s: s.relevance_score or 0, reverse=True)
