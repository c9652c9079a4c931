"""
Core data types for the chiropractic news digest.

This module defines the records passed between pipeline stages:
- CandidateLink: A discovered (title, url) pair awaiting extraction
- ArticleRecord: Fields extracted from one article page
- ScoredSentence: A segmented sentence with its heuristic score
- Summary: Ranked key points plus the composed narrative
- SummaryResult: Final per-article output
- RunStats: Counters reported at the end of a run

Every record except RunStats is frozen; a stage builds a new record rather
than updating the one it received.
"""

from __future__ import annotations

from dataclasses import dataclass

NO_TITLE = "No Title"
UNKNOWN_AUTHOR = "Unknown Author"
UNKNOWN_DATE = "Unknown Date"

CONTENT_TOO_SHORT = "Content too short to summarize"
NO_KEY_POINTS = "No key points could be extracted"
SHORT_CONTENT_NARRATIVE = "Article content too short to generate meaningful summary."
NO_INSIGHTS_NARRATIVE = "Unable to extract key insights from this article."


@dataclass(frozen=True)
class CandidateLink:
    """A link found on the listing page.

    Attributes:
        title: Link text as shown on the listing
        url: Absolute article URL
    """

    title: str
    url: str


@dataclass(frozen=True)
class ArticleRecord:
    """Structured fields extracted from one article page.

    Any field whose selector cascade was exhausted holds its sentinel
    (NO_TITLE, UNKNOWN_AUTHOR, UNKNOWN_DATE, or an empty body).

    Attributes:
        title: Article headline
        author: Byline
        published_date: Publication date, ISO timestamp when the page exposes one
        url: Final page URL after redirects
        raw_body: Plain text of the main content
    """

    title: str
    author: str
    published_date: str
    url: str
    raw_body: str


@dataclass(frozen=True)
class ScoredSentence:
    text: str
    score: int
    original_position: int


@dataclass(frozen=True)
class Summary:
    key_points: tuple[str, ...]
    narrative: str


@dataclass(frozen=True)
class SummaryResult:
    """Final output for one article.

    Attributes:
        title: Article headline
        author: Byline or sentinel
        published_date: Publication date or sentinel
        url: Article URL
        key_points: Ranked key sentences, never empty
        narrative: Composed narrative summary
    """

    title: str
    author: str
    published_date: str
    url: str
    key_points: tuple[str, ...]
    narrative: str

    @classmethod
    def from_record(cls, record: ArticleRecord, summary: Summary) -> "SummaryResult":
        return cls(
            title=record.title,
            author=record.author,
            published_date=record.published_date,
            url=record.url,
            key_points=summary.key_points,
            narrative=summary.narrative,
        )


@dataclass
class RunStats:
    """Counters collected during a run.

    Attributes:
        discovered: Links returned by discovery
        processed: Articles that produced a SummaryResult
        failed: Articles dropped after an error
    """

    discovered: int = 0
    processed: int = 0
    failed: int = 0
