"""
Article link discovery on the listing page.

The link cascade tries the configured headline selectors over the whole
page, then falls back to dated links inside the main content area. The
result keeps document order and is capped at `source.max_articles`.
"""

from __future__ import annotations

import logging

from ..config import AppConfig, SourceConfig
from ..core.dedup import dedup_links
from ..core.types import CandidateLink
from ..logging_utils import log_event
from .cascade import LinkSelector, Strategy, run_cascade
from .document import Document
from .fetcher import (
    Renderer,
    RenderError,
    categorize_error,
    primary_wait,
    relaxed_wait,
    render_with_retry,
)


def link_strategies(cfg: SourceConfig) -> list[Strategy[list[CandidateLink]]]:
    strategies: list[Strategy[list[CandidateLink]]] = [
        LinkSelector(selector) for selector in cfg.link_selectors
    ]
    if cfg.link_containers:
        strategies.append(LinkSelector(cfg.container_link_selector, within=cfg.link_containers))
    return strategies


def find_links(document: Document, cfg: SourceConfig) -> list[CandidateLink]:
    """Run the link cascade over a listing document.

    Args:
        document: Rendered listing page
        cfg: Source settings (selectors, cap, dedup)

    Returns:
        At most cfg.max_articles links, in document order
    """
    links = run_cascade(document, link_strategies(cfg)) or []
    links = dedup_links(
        links,
        threshold=cfg.title_similarity_threshold,
        compare_titles=cfg.dedup_titles,
    )
    return links[: cfg.max_articles]


async def discover(
    renderer: Renderer,
    cfg: AppConfig,
    logger: logging.Logger | None = None,
) -> list[CandidateLink]:
    """Render the listing page and return the candidate links.

    A page that cannot be loaded yields an empty list; the caller treats
    that as "no work", not as an error.
    """
    url = cfg.source.listing_url
    log_event(logger, "Discovery start", event="discovery_start", url=url)

    try:
        async with renderer.session() as session:
            document = await render_with_retry(
                session,
                url,
                primary_wait(cfg.fetch.listing_wait_selector, cfg.fetch),
                relaxed_wait(cfg.fetch),
                logger,
            )
    except RenderError as exc:
        log_event(
            logger,
            "Discovery failed",
            level=logging.ERROR,
            event="discovery_failed",
            url=url,
            error=exc.message,
            status_code=exc.status_code,
            category=categorize_error(exc.message, exc.status_code),
        )
        return []
    except Exception as exc:  # noqa: BLE001
        # Browser start-up failures surface as backend-specific exceptions.
        error = f"{type(exc).__name__}: {exc}"
        log_event(
            logger,
            "Discovery failed",
            level=logging.ERROR,
            event="discovery_failed",
            url=url,
            error=error,
            category=categorize_error(error, None),
        )
        return []

    candidates = find_links(document, cfg.source)
    log_event(
        logger,
        f"Found {len(candidates)} articles",
        event="discovery_complete",
        url=url,
        count=len(candidates),
    )
    return candidates
