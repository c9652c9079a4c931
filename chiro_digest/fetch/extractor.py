"""
Article field extraction with per-field fallback cascades.

Four independent cascades resolve the title, author, date and body of an
article page. A field whose cascade is exhausted gets its sentinel value;
markup that does not match any selector never raises. The body cascade
ends with the configured named extractors (by default the heuristic
content-container scan).
"""

from __future__ import annotations

import logging

from ..config import AppConfig, ExtractConfig
from ..core.types import NO_TITLE, UNKNOWN_AUTHOR, UNKNOWN_DATE, ArticleRecord
from ..logging_utils import log_event
from .cascade import (
    AttributeSelector,
    BlockTextSelector,
    NamedExtractor,
    Strategy,
    TextSelector,
    TimeSelector,
    run_cascade,
)
from .document import Document
from .fetcher import Renderer, primary_wait, relaxed_wait, render_with_retry


def title_strategies(cfg: ExtractConfig) -> list[Strategy[str]]:
    return [TextSelector(selector) for selector in cfg.title_selectors]


def author_strategies(cfg: ExtractConfig) -> list[Strategy[str]]:
    strategies: list[Strategy[str]] = [TextSelector(selector) for selector in cfg.author_selectors]
    strategies.extend(AttributeSelector(selector) for selector in cfg.author_meta_selectors)
    return strategies


def date_strategies(cfg: ExtractConfig) -> list[Strategy[str]]:
    strategies: list[Strategy[str]] = [TimeSelector(selector) for selector in cfg.date_selectors]
    strategies.extend(AttributeSelector(selector) for selector in cfg.date_meta_selectors)
    return strategies


def body_strategies(cfg: ExtractConfig) -> list[Strategy[str]]:
    strategies: list[Strategy[str]] = [BlockTextSelector(selector) for selector in cfg.body_selectors]
    strategies.extend(NamedExtractor(name, cfg.heuristic_min_chars) for name in cfg.body_fallback)
    return strategies


def parse_article(
    document: Document,
    cfg: ExtractConfig,
    requested_url: str | None = None,
    logger: logging.Logger | None = None,
) -> ArticleRecord:
    """Extract an ArticleRecord from a rendered article page.

    Args:
        document: Rendered article page
        cfg: Selector cascades
        requested_url: URL that was asked for; used when the page has no final URL
        logger: Optional logger for missing-field events

    Returns:
        A complete record, with sentinels for unresolved fields
    """
    url = document.url or requested_url or ""
    title = run_cascade(document, title_strategies(cfg))
    author = run_cascade(document, author_strategies(cfg))
    published = run_cascade(document, date_strategies(cfg))
    body = run_cascade(document, body_strategies(cfg))

    if body and is_placeholder_text(body):
        log_event(logger, "Placeholder body discarded", event="placeholder_body", url=url)
        body = None

    missing = [
        name
        for name, value in (("title", title), ("author", author), ("date", published), ("body", body))
        if not value
    ]
    if missing:
        log_event(
            logger,
            f"Fields not found: {', '.join(missing)}",
            level=logging.DEBUG,
            event="field_missing",
            url=url,
            fields=missing,
        )

    return ArticleRecord(
        title=title or NO_TITLE,
        author=author or UNKNOWN_AUTHOR,
        published_date=published or UNKNOWN_DATE,
        url=url,
        raw_body=body or "",
    )


async def extract_article(
    url: str,
    renderer: Renderer,
    cfg: AppConfig,
    logger: logging.Logger | None = None,
) -> ArticleRecord:
    """Render one article page and extract its fields.

    The page is loaded in its own session, closed on every exit path. A
    timeout on the primary wait is retried once with a relaxed wait.

    Raises:
        RenderError: The page could not be loaded even after the retry
    """
    async with renderer.session() as session:
        document = await render_with_retry(
            session,
            url,
            primary_wait(cfg.fetch.article_wait_selector, cfg.fetch),
            relaxed_wait(cfg.fetch),
            logger,
        )
    return parse_article(document, cfg.extract, requested_url=url, logger=logger)


def is_placeholder_text(text: str) -> bool:
    """Detect anti-bot interstitials and JavaScript-required notices.

    Args:
        text: The extracted body text

    Returns:
        True if the text looks like a placeholder rather than an article
    """
    lowered = text.lower()
    if "javascript is disabled" in lowered or "please enable javascript" in lowered:
        return True
    if "enable javascript to continue" in lowered:
        return True
    if "verifying you are human" in lowered:
        return True
    if "checking your browser before accessing" in lowered:
        return True
    # "Just a moment..." and a Ray ID only mean a challenge page on short pages
    if "just a moment..." in lowered and len(text.strip()) < 1000:
        return True
    if "ray id:" in lowered and len(text.strip()) < 1000:
        return True
    return False
