"""
Text normalization and sentence segmentation.

Both functions are pure. Normalization keeps only ASCII word characters,
whitespace and basic punctuation; segmentation splits on sentence-terminal
punctuation and drops fragments too short to carry a key point.
"""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_DISALLOWED_RE = re.compile(r"[^\w\s.,!?;:-]", re.ASCII)
_SENTENCE_END_RE = re.compile(r"[.!?]+")


def normalize_text(text: str) -> str:
    """Collapse whitespace, strip disallowed characters and trim.

    Examples:
        >>> normalize_text("  Spinal   care\\n\\u2014 works!  ")
        'Spinal care  works!'
    """
    if not text:
        return ""
    collapsed = _WHITESPACE_RE.sub(" ", text)
    return _DISALLOWED_RE.sub("", collapsed).strip()


def segment_sentences(text: str, min_chars: int = 30) -> tuple[str, ...]:
    """Split normalized text into candidate sentences.

    Args:
        text: Normalized text (see normalize_text)
        min_chars: Fragments must be strictly longer than this after trimming

    Returns:
        Trimmed sentences in source order
    """
    fragments = (fragment.strip() for fragment in _SENTENCE_END_RE.split(text))
    return tuple(fragment for fragment in fragments if len(fragment) > min_chars)
