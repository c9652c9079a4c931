"""
Selector cascades: ordered extraction strategies for one logical field.

Every strategy implements `extract(document) -> value | None`, returning
None on a miss. `run_cascade` tries the strategies in order and returns
the first hit unchanged; results of different strategies are never
merged. A field's cascade is independent of every other field's.

Strategies:
- TextSelector: text of the first element matching a CSS selector
- AttributeSelector: an attribute of the first match (meta tags)
- TimeSelector: `datetime` attribute of the first match, else its text
- LinkSelector: every link matching a selector, as CandidateLinks
- HeuristicContainer: first div that looks like article content
- NamedExtractor: whole-page text extractor chosen by name
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol, Sequence, TypeVar
from urllib.parse import urljoin, urlparse

import trafilatura
from bs4 import BeautifulSoup
from readability import Document as ReadabilityDocument

from ..core.types import CandidateLink
from .document import Document

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

logger = logging.getLogger(__name__)


class Strategy(Protocol[T_co]):
    def extract(self, document: Document) -> T_co | None: ...


def run_cascade(document: Document, strategies: Sequence[Strategy[T]]) -> T | None:
    """Return the result of the first strategy that matches, or None.

    A strategy that raises (for example on a selector the parser rejects)
    counts as a miss.
    """
    for strategy in strategies:
        try:
            value = strategy.extract(document)
        except Exception as exc:  # noqa: BLE001
            logger.debug("Strategy %r failed: %s", strategy, exc)
            continue
        if value:
            return value
    return None


class TextSelector:
    def __init__(self, selector: str) -> None:
        self.selector = selector

    def extract(self, document: Document) -> str | None:
        element = document.query_one(self.selector)
        if element is None:
            return None
        return document.inline_text_of(element) or None

    def __repr__(self) -> str:
        return f"TextSelector({self.selector!r})"


class BlockTextSelector(TextSelector):
    """Like TextSelector but keeps one line per text block (article bodies)."""

    def extract(self, document: Document) -> str | None:
        element = document.query_one(self.selector)
        if element is None:
            return None
        return document.text_of(element) or None

    def __repr__(self) -> str:
        return f"BlockTextSelector({self.selector!r})"


class AttributeSelector:
    def __init__(self, selector: str, attribute: str = "content") -> None:
        self.selector = selector
        self.attribute = attribute

    def extract(self, document: Document) -> str | None:
        element = document.query_one(self.selector)
        if element is None:
            return None
        value = element.get(self.attribute)
        if isinstance(value, list):
            value = " ".join(value)
        return value.strip() if value and value.strip() else None

    def __repr__(self) -> str:
        return f"AttributeSelector({self.selector!r}, {self.attribute!r})"


class TimeSelector:
    """Prefer the machine-readable `datetime` attribute over display text."""

    def __init__(self, selector: str) -> None:
        self.selector = selector

    def extract(self, document: Document) -> str | None:
        element = document.query_one(self.selector)
        if element is None:
            return None
        stamp = element.get("datetime")
        if isinstance(stamp, str) and stamp.strip():
            return stamp.strip()
        return document.inline_text_of(element) or None

    def __repr__(self) -> str:
        return f"TimeSelector({self.selector!r})"


class LinkSelector:
    """Collect links in document order.

    With `within`, only the first container matching one of those
    selectors (tried in order) is searched.
    """

    def __init__(self, selector: str, within: Sequence[str] = ()) -> None:
        self.selector = selector
        self.within = tuple(within)

    def extract(self, document: Document) -> list[CandidateLink] | None:
        scope = None
        if self.within:
            scope = next(
                (found for found in (document.query_one(sel) for sel in self.within) if found),
                None,
            )
            if scope is None:
                return None

        links = []
        for element in document.query_all(self.selector, within=scope):
            url = _absolute_url(document.url, element.get("href"))
            if url is None:
                continue
            links.append(CandidateLink(title=document.inline_text_of(element), url=url))
        return links or None

    def __repr__(self) -> str:
        return f"LinkSelector({self.selector!r}, within={self.within!r})"


class HeuristicContainer:
    """Last-resort body finder.

    Picks the first div, in document order, whose text is longer than
    `min_chars` and that contains a paragraph or sub-heading.
    """

    def __init__(self, min_chars: int = 100, nested: Sequence[str] = ("p", "h2", "h3")) -> None:
        self.min_chars = min_chars
        self.nested = tuple(nested)

    def extract(self, document: Document) -> str | None:
        for div in document.query_all("div"):
            text = document.text_of(div)
            if len(text) > self.min_chars and div.find(list(self.nested)) is not None:
                return text
        return None

    def __repr__(self) -> str:
        return f"HeuristicContainer(min_chars={self.min_chars})"


class NamedExtractor:
    """Whole-page text extractor selected by configuration name."""

    def __init__(self, name: str, min_chars: int = 100) -> None:
        self.name = name
        self._extract = _get_extractor(name, min_chars)
        if self._extract is None:
            raise ValueError(f"Unsupported body extractor: {name}")

    def extract(self, document: Document) -> str | None:
        text = self._extract(document)
        return text.strip() if text and text.strip() else None

    def __repr__(self) -> str:
        return f"NamedExtractor({self.name!r})"


def _get_extractor(name: str, min_chars: int) -> Callable[[Document], str | None] | None:
    """Get the extractor function for a given method name.

    Args:
        name: "heuristic", "trafilatura" or "readability"
        min_chars: Minimum text length for the heuristic scan

    Returns:
        The extractor function, or None if the name is unrecognized
    """
    if name == "heuristic":
        return HeuristicContainer(min_chars=min_chars).extract
    if name == "trafilatura":
        return _extract_trafilatura
    if name == "readability":
        return _extract_readability
    return None


def _extract_trafilatura(document: Document) -> str | None:
    return trafilatura.extract(document.html, url=document.url or None)


def _extract_readability(document: Document) -> str | None:
    content_html = ReadabilityDocument(document.html).summary()
    soup = BeautifulSoup(content_html, "html.parser")
    text = soup.get_text(separator="\n")
    cleaned = "\n".join(line.strip() for line in text.splitlines() if line.strip())
    return cleaned or None


def _absolute_url(base: str, href: object) -> str | None:
    if not isinstance(href, str) or not href.strip():
        return None
    href = href.strip()
    if href.startswith(("#", "javascript:", "mailto:", "tel:")):
        return None
    url = urljoin(base, href)
    if urlparse(url).scheme not in ("http", "https"):
        return None
    return url
