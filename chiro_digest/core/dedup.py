"""
Link deduplication using URL matching and fuzzy title comparison.

Listing pages often link the same article twice (thumbnail and headline),
or syndicate one story under slightly different headlines. This module
removes:
1. Exact URL matches
2. Fuzzy title duplicates (same story, different URLs), when enabled
"""

from __future__ import annotations

from rapidfuzz import fuzz

from .types import CandidateLink


def dedup_links(
    links: list[CandidateLink],
    threshold: int = 92,
    compare_titles: bool = True,
) -> list[CandidateLink]:
    """Remove duplicate links, preserving document order.

    Args:
        links: Links in document order
        threshold: Similarity threshold (0-100) for fuzzy title matching
        compare_titles: When False only exact URL duplicates are removed

    Returns:
        The first occurrence of every distinct link
    """
    seen_urls: set[str] = set()
    kept: list[CandidateLink] = []
    titles: list[str] = []

    for link in links:
        url = link.url.rstrip("/")
        if url in seen_urls:
            continue
        if compare_titles and link.title and _is_similar_title(link.title, titles, threshold):
            continue
        seen_urls.add(url)
        if link.title:
            titles.append(link.title)
        kept.append(link)

    return kept


def _is_similar_title(title: str, titles: list[str], threshold: int) -> bool:
    """Check if a title is similar to any title in the given list.

    Uses rapidfuzz's ratio, a normalized Levenshtein similarity in 0-100.
    """
    for existing in titles:
        if fuzz.ratio(title, existing) >= threshold:
            return True
    return False
