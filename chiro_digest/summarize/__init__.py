"""
Extractive summarization.

This package turns an article body into ranked key sentences and a
short narrative, using heuristics only.
"""

from .composer import compose_narrative, summarize
from .scorer import extract_key_points, rank_sentences, score_sentences
from .text import normalize_text, segment_sentences

__all__ = [
    "compose_narrative",
    "extract_key_points",
    "normalize_text",
    "rank_sentences",
    "score_sentences",
    "segment_sentences",
    "summarize",
]
