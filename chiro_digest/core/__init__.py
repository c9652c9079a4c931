"""
Core domain models.

This package contains the records passed between pipeline stages and
logic that is independent of any specific stage.
"""

from .types import (
    ArticleRecord,
    CandidateLink,
    RunStats,
    ScoredSentence,
    Summary,
    SummaryResult,
)
from .dedup import dedup_links

__all__ = [
    "ArticleRecord",
    "CandidateLink",
    "RunStats",
    "ScoredSentence",
    "Summary",
    "SummaryResult",
    "dedup_links",
]
