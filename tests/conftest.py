"""Shared fixtures: an in-memory renderer and sample pages."""

from __future__ import annotations

from contextlib import asynccontextmanager

import pytest

from chiro_digest.config import AppConfig, FetchConfig, LoggingConfig, SourceConfig
from chiro_digest.fetch.document import Document
from chiro_digest.fetch.fetcher import RenderError

LISTING_URL = "https://news.example.com/category/news/chiropractic-news/"

EXAMPLE_TITLE = "Study Shows Treatment Benefits"
EXAMPLE_BODY = (
    "Researchers conducted a clinical study on treatment effectiveness for patients. "
    "The results showed significant improvement in patient outcomes after therapy. "
    "This research confirms earlier findings about chiropractic treatment benefits. "
    "Further clinical trials are planned for next year."
)

LISTING_HTML = """
<html><body>
  <article><h2 class="entry-title"><a href="/2024/05/spinal-study/">Spinal Study Shows Benefits</a></h2></article>
  <article><h2 class="entry-title"><a href="https://news.example.com/2024/05/patient-care/">Patient Care Trends</a></h2></article>
  <article><h2 class="entry-title"><a href="/2024/04/posture-guide/">Posture Guide For Desk Workers</a></h2></article>
</body></html>
"""

ARTICLE_HTML = f"""
<html>
<head>
  <title>Fallback Title | Chiro News</title>
  <meta name="author" content="Meta Author">
  <meta property="article:published_time" content="2024-05-01T10:00:00+00:00">
</head>
<body>
  <h1 class="entry-title">{EXAMPLE_TITLE}</h1>
  <span class="entry-author-name">Jane Doe</span>
  <time class="entry-time" datetime="2024-05-02T08:00:00+00:00">May 2, 2024</time>
  <div class="entry-content">
    <p>{EXAMPLE_BODY}</p>
    <script>var tracking = "ignore me";</script>
  </div>
</body>
</html>
"""


class FakeSession:
    def __init__(self, renderer: "FakeRenderer") -> None:
        self._renderer = renderer

    async def render(self, url, wait):  # noqa: ANN001
        self._renderer.calls.append((url, wait))
        outcome = self._renderer.pages.get(url)
        if isinstance(outcome, list):
            outcome = outcome.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if outcome is None:
            raise RenderError(url, "HTTP 404", 404)
        return Document(outcome, url)


class FakeRenderer:
    """Serves HTML strings by URL.

    A page value may be an HTML string, an exception to raise, or a list
    of those consumed one per render call.
    """

    def __init__(self, pages: dict) -> None:
        self.pages = pages
        self.calls: list = []
        self.opened = 0
        self.closed = 0

    @asynccontextmanager
    async def session(self):
        self.opened += 1
        try:
            yield FakeSession(self)
        finally:
            self.closed += 1


@pytest.fixture
def fake_renderer():
    return FakeRenderer


@pytest.fixture
def cfg() -> AppConfig:
    return AppConfig(
        source=SourceConfig(listing_url=LISTING_URL),
        fetch=FetchConfig(scraping_delay_seconds=0),
        logging=LoggingConfig(console=False, file=False),
    )
