"""
Heuristic sentence scoring and key point selection.

A sentence's score is the sum of four terms:
1. Title overlap: 2 points per title word longer than 3 characters that
   appears inside any word of the sentence
2. Domain keywords: 1 point per distinct lexicon term found in the sentence
3. Position: max(0, 5 - position), favoring the opening of the article
4. Length: 2 points when the sentence has 10 to 30 words

Matching is case-insensitive substring matching throughout.
"""

from __future__ import annotations

from ..config import SummaryConfig
from ..core.types import CONTENT_TOO_SHORT, NO_KEY_POINTS, ScoredSentence
from .text import normalize_text, segment_sentences

DEFAULT_SUMMARY_CONFIG = SummaryConfig()

_TITLE_WORD_MIN_CHARS = 3
_POSITION_BONUS_START = 5
_LENGTH_RANGE = (10, 30)


def score_sentence(
    sentence: str,
    position: int,
    title: str,
    keywords: tuple[str, ...] = DEFAULT_SUMMARY_CONFIG.keywords,
) -> int:
    lowered = sentence.lower()
    sentence_words = lowered.split()

    title_words = [word for word in title.lower().split() if len(word) > _TITLE_WORD_MIN_CHARS]
    title_matches = sum(
        1 for word in title_words if any(word in candidate for candidate in sentence_words)
    )
    keyword_matches = sum(1 for term in keywords if term in lowered)
    position_bonus = max(0, _POSITION_BONUS_START - position)
    low, high = _LENGTH_RANGE
    length_bonus = 2 if low <= len(sentence_words) <= high else 0

    return title_matches * 2 + keyword_matches + position_bonus + length_bonus


def score_sentences(
    sentences: tuple[str, ...],
    title: str,
    keywords: tuple[str, ...] = DEFAULT_SUMMARY_CONFIG.keywords,
) -> list[ScoredSentence]:
    """Score every sentence, keeping its index in the segmented sequence."""
    return [
        ScoredSentence(
            text=sentence,
            score=score_sentence(sentence, position, title, keywords),
            original_position=position,
        )
        for position, sentence in enumerate(sentences)
    ]


def rank_sentences(scored: list[ScoredSentence]) -> list[ScoredSentence]:
    """Sort by descending score; earlier sentences win exact ties."""
    return sorted(scored, key=lambda item: (-item.score, item.original_position))


def is_too_short(content: str, cfg: SummaryConfig = DEFAULT_SUMMARY_CONFIG) -> bool:
    return not content or len(content) < cfg.min_content_chars


def top_sentences(
    content: str,
    title: str,
    cfg: SummaryConfig = DEFAULT_SUMMARY_CONFIG,
) -> tuple[str, ...]:
    """Rank the sentences of a body and keep the best cfg.max_key_points.

    Returns an empty tuple when no sentence survives segmentation.
    """
    sentences = segment_sentences(normalize_text(content), cfg.min_sentence_chars)
    ranked = rank_sentences(score_sentences(sentences, title, cfg.keywords))
    return tuple(item.text for item in ranked[: cfg.max_key_points])


def extract_key_points(
    content: str,
    title: str,
    cfg: SummaryConfig = DEFAULT_SUMMARY_CONFIG,
) -> tuple[str, ...]:
    """Select the top-ranked sentences of an article body.

    Args:
        content: Raw article body
        title: Article title, used for the overlap bonus
        cfg: Summary thresholds and lexicon

    Returns:
        Up to cfg.max_key_points sentences in rank order, or a single
        sentinel when the body is too short or yields no sentences
    """
    if is_too_short(content, cfg):
        return (CONTENT_TOO_SHORT,)
    return top_sentences(content, title, cfg) or (NO_KEY_POINTS,)
