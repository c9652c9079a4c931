"""Tests for listing page link discovery."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace

from chiro_digest.config import SourceConfig
from chiro_digest.core.types import CandidateLink
from chiro_digest.fetch.discovery import discover, find_links
from chiro_digest.fetch.document import Document
from chiro_digest.fetch.fetcher import RenderError, RenderTimeout

from conftest import LISTING_HTML, LISTING_URL


def test_find_links_uses_headline_selectors():
    links = find_links(Document(LISTING_HTML, LISTING_URL), SourceConfig())

    assert links == [
        CandidateLink("Spinal Study Shows Benefits", "https://news.example.com/2024/05/spinal-study/"),
        CandidateLink("Patient Care Trends", "https://news.example.com/2024/05/patient-care/"),
        CandidateLink("Posture Guide For Desk Workers", "https://news.example.com/2024/04/posture-guide/"),
    ]


def test_find_links_falls_back_to_dated_links_in_content():
    html = """
    <nav><a href="/about/">About</a></nav>
    <div class="entry-content">
      <a href="/contact/">Contact</a>
      <a href="/2023/11/neck-pain/">Neck Pain Update</a>
    </div>
    """
    links = find_links(Document(html, LISTING_URL), SourceConfig())
    assert links == [CandidateLink("Neck Pain Update", "https://news.example.com/2023/11/neck-pain/")]


def test_find_links_caps_in_document_order():
    links = find_links(Document(LISTING_HTML, LISTING_URL), SourceConfig(max_articles=2))
    assert [link.title for link in links] == ["Spinal Study Shows Benefits", "Patient Care Trends"]


def test_find_links_drops_repeated_urls_before_cap():
    html = """
    <h2 class="entry-title"><a href="/2024/05/a/">Spinal Study Shows Benefits</a></h2>
    <h2 class="entry-title"><a href="/2024/05/a">Spinal Study Shows Benefits</a></h2>
    <h2 class="entry-title"><a href="/2024/05/b/">Patient Care Trends</a></h2>
    <h2 class="entry-title"><a href="/2024/05/c/">Posture Guide</a></h2>
    """
    links = find_links(Document(html, LISTING_URL), SourceConfig(max_articles=2))
    assert [link.url for link in links] == [
        "https://news.example.com/2024/05/a/",
        "https://news.example.com/2024/05/b/",
    ]


def test_find_links_keeps_distinct_articles_with_similar_titles():
    html = """
    <h2 class="entry-title"><a href="/2024/03/roundup-week-12/">Chiropractic News Roundup: Week 12</a></h2>
    <h2 class="entry-title"><a href="/2024/03/roundup-week-13/">Chiropractic News Roundup: Week 13</a></h2>
    <h2 class="entry-title"><a href="/2024/04/roundup-week-14/">Chiropractic News Roundup: Week 14</a></h2>
    """
    links = find_links(Document(html, LISTING_URL), SourceConfig())

    assert [link.url.rsplit("/", 2)[-2] for link in links] == [
        "roundup-week-12",
        "roundup-week-13",
        "roundup-week-14",
    ]


def test_find_links_fuzzy_title_dedup_is_opt_in():
    html = """
    <h2 class="entry-title"><a href="/2024/05/a/">Spinal Study Shows Benefits</a></h2>
    <h2 class="entry-title"><a href="/2024/05/b/">Spinal Study Shows Benefits!</a></h2>
    <h2 class="entry-title"><a href="/2024/05/c/">Patient Care Trends</a></h2>
    """
    links = find_links(Document(html, LISTING_URL), SourceConfig(dedup_titles=True, max_articles=2))
    assert [link.url for link in links] == [
        "https://news.example.com/2024/05/a/",
        "https://news.example.com/2024/05/c/",
    ]


def test_find_links_empty_page():
    assert find_links(Document("<html></html>", LISTING_URL), SourceConfig()) == []


def test_discover_returns_links_and_closes_session(cfg, fake_renderer):
    renderer = fake_renderer({LISTING_URL: LISTING_HTML})

    links = asyncio.run(discover(renderer, cfg))

    assert len(links) == 3
    assert renderer.calls[0][1].selector == cfg.fetch.listing_wait_selector
    assert renderer.opened == renderer.closed == 1


def test_discover_respects_max_articles(cfg, fake_renderer):
    cfg = replace(cfg, source=replace(cfg.source, max_articles=1))
    links = asyncio.run(discover(fake_renderer({LISTING_URL: LISTING_HTML}), cfg))
    assert len(links) == 1


def test_discover_degrades_to_empty_on_render_error(cfg, fake_renderer):
    renderer = fake_renderer({LISTING_URL: RenderError(LISTING_URL, "HTTP 500", 500)})

    assert asyncio.run(discover(renderer, cfg)) == []
    assert renderer.closed == 1


def test_discover_degrades_to_empty_on_unexpected_error(cfg, fake_renderer):
    renderer = fake_renderer({LISTING_URL: OSError("browser crashed")})
    assert asyncio.run(discover(renderer, cfg)) == []


def test_discover_retries_after_timeout(cfg, fake_renderer):
    renderer = fake_renderer({LISTING_URL: [RenderTimeout(LISTING_URL, "Timeout"), LISTING_HTML]})

    links = asyncio.run(discover(renderer, cfg))

    assert len(links) == 3
    assert [wait.wait_until for _, wait in renderer.calls] == ["networkidle", "domcontentloaded"]


def test_discover_failure_logged_with_error_category(cfg, fake_renderer, caplog):
    renderer = fake_renderer({LISTING_URL: RenderError(LISTING_URL, "HTTP 403", 403)})
    logger = logging.getLogger("test_discovery_category")

    with caplog.at_level(logging.ERROR, logger="test_discovery_category"):
        assert asyncio.run(discover(renderer, cfg, logger)) == []

    (record,) = [r for r in caplog.records if getattr(r, "event", None) == "discovery_failed"]
    assert record.category == "blocked"
    assert record.status_code == 403
