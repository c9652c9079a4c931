"""Tests for article field extraction."""

from __future__ import annotations

import asyncio
import logging

import pytest

from chiro_digest.config import ExtractConfig
from chiro_digest.core.types import NO_TITLE, UNKNOWN_AUTHOR, UNKNOWN_DATE
from chiro_digest.fetch.document import Document
from chiro_digest.fetch.extractor import extract_article, is_placeholder_text, parse_article
from chiro_digest.fetch.fetcher import RenderError, RenderTimeout

from conftest import ARTICLE_HTML, EXAMPLE_BODY, EXAMPLE_TITLE

ARTICLE_URL = "https://news.example.com/2024/05/spinal-study/"
LONG_BODY = "Chiropractors reviewed posture data from hundreds of office workers this year. " * 3


def test_parse_article_reads_visible_fields():
    record = parse_article(Document(ARTICLE_HTML, ARTICLE_URL), ExtractConfig())

    assert record.title == EXAMPLE_TITLE
    assert record.author == "Jane Doe"
    assert record.published_date == "2024-05-02T08:00:00+00:00"
    assert record.url == ARTICLE_URL
    assert record.raw_body == EXAMPLE_BODY
    assert "tracking" not in record.raw_body


def test_parse_article_sentinels_for_bare_page():
    record = parse_article(Document("<html><body></body></html>", ARTICLE_URL), ExtractConfig())

    assert record.title == NO_TITLE
    assert record.author == UNKNOWN_AUTHOR
    assert record.published_date == UNKNOWN_DATE
    assert record.raw_body == ""


def test_parse_article_meta_fallbacks_and_title_tag():
    html = f"""
    <html><head>
      <title>Fallback Title | Chiro News</title>
      <meta name="author" content="Meta Author">
      <meta property="article:published_time" content="2024-05-01T10:00:00+00:00">
    </head><body><div class="post-content"><p>{LONG_BODY}</p></div></body></html>
    """
    record = parse_article(Document(html, ARTICLE_URL), ExtractConfig())

    assert record.title == "Fallback Title | Chiro News"
    assert record.author == "Meta Author"
    assert record.published_date == "2024-05-01T10:00:00+00:00"
    assert record.raw_body == LONG_BODY.strip()


def test_visible_author_beats_meta_author():
    html = '<meta name="author" content="Meta Author"><p class="byline">Dr. Visible</p>'
    record = parse_article(Document(html, ARTICLE_URL), ExtractConfig())
    assert record.author == "Dr. Visible"


def test_body_falls_back_to_heuristic_container():
    html = f'<div class="sidebar">Links</div><div class="story"><p>{LONG_BODY}</p></div>'
    record = parse_article(Document(html, ARTICLE_URL), ExtractConfig())
    assert record.raw_body == LONG_BODY.strip()


def test_body_without_fallback_is_empty():
    html = f'<div class="story"><p>{LONG_BODY}</p></div>'
    record = parse_article(Document(html, ARTICLE_URL), ExtractConfig(body_fallback=()))
    assert record.raw_body == ""


def test_placeholder_body_is_discarded():
    html = '<div class="entry-content"><p>Please enable JavaScript to view this page.</p></div>'
    record = parse_article(Document(html, ARTICLE_URL), ExtractConfig())
    assert record.raw_body == ""


def test_requested_url_used_when_document_has_none():
    record = parse_article(Document(ARTICLE_HTML, ""), ExtractConfig(), requested_url=ARTICLE_URL)
    assert record.url == ARTICLE_URL


def test_missing_fields_logged(caplog):
    logger = logging.getLogger("test_missing_fields")
    with caplog.at_level(logging.DEBUG, logger="test_missing_fields"):
        parse_article(Document("<p>x</p>", ARTICLE_URL), ExtractConfig(), logger=logger)

    record = next(r for r in caplog.records if getattr(r, "event", None) == "field_missing")
    assert record.fields == ["title", "author", "date", "body"]


def test_is_placeholder_text():
    assert is_placeholder_text("Verifying you are human. This may take a few seconds.")
    assert is_placeholder_text("Just a moment...")
    assert not is_placeholder_text("Just a moment..." + " real article text" * 100)
    assert not is_placeholder_text(EXAMPLE_BODY)


def test_extract_article_renders_with_primary_wait(cfg, fake_renderer):
    renderer = fake_renderer({ARTICLE_URL: ARTICLE_HTML})

    record = asyncio.run(extract_article(ARTICLE_URL, renderer, cfg))

    assert record.title == EXAMPLE_TITLE
    (url, wait), = renderer.calls
    assert url == ARTICLE_URL
    assert wait.wait_until == "networkidle"
    assert wait.selector == cfg.fetch.article_wait_selector
    assert renderer.opened == renderer.closed == 1


def test_extract_article_retries_once_with_relaxed_wait(cfg, fake_renderer):
    renderer = fake_renderer({ARTICLE_URL: [RenderTimeout(ARTICLE_URL, "Timeout 10000ms exceeded"), ARTICLE_HTML]})

    record = asyncio.run(extract_article(ARTICLE_URL, renderer, cfg))

    assert record.author == "Jane Doe"
    assert len(renderer.calls) == 2
    relaxed = renderer.calls[1][1]
    assert relaxed.wait_until == "domcontentloaded"
    assert relaxed.selector is None
    assert relaxed.timeout_seconds == cfg.fetch.relaxed_wait_timeout_seconds


def test_extract_article_propagates_when_retry_fails(cfg, fake_renderer):
    renderer = fake_renderer(
        {ARTICLE_URL: [RenderTimeout(ARTICLE_URL, "Timeout"), RenderTimeout(ARTICLE_URL, "Timeout again")]}
    )

    with pytest.raises(RenderTimeout):
        asyncio.run(extract_article(ARTICLE_URL, renderer, cfg))

    assert len(renderer.calls) == 2
    assert renderer.closed == 1


def test_extract_article_does_not_retry_other_errors(cfg, fake_renderer):
    renderer = fake_renderer({})

    with pytest.raises(RenderError) as excinfo:
        asyncio.run(extract_article(ARTICLE_URL, renderer, cfg))

    assert excinfo.value.status_code == 404
    assert len(renderer.calls) == 1
    assert renderer.closed == 1
