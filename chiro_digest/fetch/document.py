"""
Queryable page documents.

A Document wraps the HTML of one rendered page together with the URL it
was finally served from, and answers CSS selector queries through
BeautifulSoup.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

_NON_CONTENT_TAGS = ["script", "style", "noscript"]


class Document:
    def __init__(self, html: str, url: str) -> None:
        self.html = html
        self.url = url
        self.soup = BeautifulSoup(html, "html.parser")
        for tag in self.soup(_NON_CONTENT_TAGS):
            tag.decompose()

    def query_all(self, selector: str, within: Tag | None = None) -> list[Tag]:
        root = within if within is not None else self.soup
        return root.select(selector)

    def query_one(self, selector: str, within: Tag | None = None) -> Tag | None:
        root = within if within is not None else self.soup
        return root.select_one(selector)

    @staticmethod
    def text_of(element: Tag) -> str:
        """Visible text of an element, one line per text block."""
        text = element.get_text(separator="\n")
        return "\n".join(line.strip() for line in text.splitlines() if line.strip())

    @staticmethod
    def inline_text_of(element: Tag) -> str:
        """Text of an element collapsed onto one line (titles, bylines)."""
        return " ".join(element.get_text(separator=" ").split())
