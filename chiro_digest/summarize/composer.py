"""
Narrative composition from ranked key points.

The narrative is a small Markdown fragment: a bold title, a sentence
describing the article's length, one bullet per key point and, when the
body mentions research or treatment, a closing annotation in italics.
"""

from __future__ import annotations

import re

from ..config import SummaryConfig
from ..core.types import (
    CONTENT_TOO_SHORT,
    NO_INSIGHTS_NARRATIVE,
    NO_KEY_POINTS,
    SHORT_CONTENT_NARRATIVE,
    Summary,
)
from .scorer import DEFAULT_SUMMARY_CONFIG, is_too_short, top_sentences

_EDGE_NON_WORD_RE = re.compile(r"^\W+|\W+$")

RESEARCH_AND_TREATMENT_NOTE = "*This article discusses research findings related to treatments.*"
RESEARCH_NOTE = "*This article focuses on research and clinical studies.*"
TREATMENT_NOTE = "*This article covers treatment approaches and therapeutic methods.*"


def describe_length(content: str, cfg: SummaryConfig = DEFAULT_SUMMARY_CONFIG) -> str:
    word_count = len(content.split())
    if word_count > cfg.comprehensive_words:
        return "comprehensive"
    if word_count > cfg.detailed_words:
        return "detailed"
    return "brief"


def closing_note(content: str, cfg: SummaryConfig = DEFAULT_SUMMARY_CONFIG) -> str | None:
    """Pick the closing annotation from the research/treatment terms present."""
    lowered = content.lower()
    has_study = any(term in lowered for term in cfg.study_terms)
    has_treatment = any(term in lowered for term in cfg.treatment_terms)
    if has_study and has_treatment:
        return RESEARCH_AND_TREATMENT_NOTE
    if has_study:
        return RESEARCH_NOTE
    if has_treatment:
        return TREATMENT_NOTE
    return None


def compose_narrative(
    title: str,
    content: str,
    key_points: tuple[str, ...],
    cfg: SummaryConfig = DEFAULT_SUMMARY_CONFIG,
) -> str:
    """Build the narrative summary for one article.

    Args:
        title: Article title, used as the header
        content: Raw article body, used for the length descriptor and annotation
        key_points: Ranked key points
        cfg: Summary thresholds and term lists

    Returns:
        The narrative, or a fixed apology when the body is too short
    """
    if is_too_short(content, cfg):
        return SHORT_CONTENT_NARRATIVE

    lines = [
        f"**{title}**",
        "",
        f"This {describe_length(content, cfg)} article covers the following key insights:",
        "",
    ]
    for point in key_points:
        lines.append(f"• {_EDGE_NON_WORD_RE.sub('', point)}")

    note = closing_note(content, cfg)
    if note:
        lines.append("")
        lines.append(note)

    return "\n".join(lines)


def summarize(raw_body: str, title: str, cfg: SummaryConfig = DEFAULT_SUMMARY_CONFIG) -> Summary:
    """Produce key points and a narrative for an article body.

    Pure: identical inputs give identical output.
    """
    if is_too_short(raw_body, cfg):
        return Summary(key_points=(CONTENT_TOO_SHORT,), narrative=SHORT_CONTENT_NARRATIVE)
    key_points = top_sentences(raw_body, title, cfg)
    if not key_points:
        return Summary(key_points=(NO_KEY_POINTS,), narrative=NO_INSIGHTS_NARRATIVE)
    return Summary(key_points=key_points, narrative=compose_narrative(title, raw_body, key_points, cfg))
