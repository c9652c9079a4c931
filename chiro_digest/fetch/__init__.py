"""
Page rendering, link discovery and article extraction.

This package loads pages through a rendering backend and turns them into
CandidateLinks and ArticleRecords using selector cascades.
"""

from .discovery import discover, find_links
from .document import Document
from .extractor import extract_article, parse_article
from .fetcher import (
    Crawl4AIRenderer,
    HttpxRenderer,
    RenderError,
    RenderTimeout,
    WaitCondition,
    build_renderer,
)

__all__ = [
    "Crawl4AIRenderer",
    "Document",
    "HttpxRenderer",
    "RenderError",
    "RenderTimeout",
    "WaitCondition",
    "build_renderer",
    "discover",
    "extract_article",
    "find_links",
    "parse_article",
]
