"""
Page rendering with multiple backend support.

This module provides two rendering backends behind one session interface:
1. crawl4ai: Headless Chromium (Playwright) rendering for JavaScript pages (default)
2. httpx: Static HTML fetching, no JavaScript

A renderer hands out sessions as async context managers; the browser or
HTTP client behind a session is closed on every exit path. A session
renders a URL under a WaitCondition and returns a queryable Document.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager, asynccontextmanager
from dataclasses import dataclass
import logging
from typing import AsyncIterator, Protocol

import httpx

from ..config import ConfigError, FetchConfig
from ..logging_utils import log_event
from .document import Document


@dataclass(frozen=True)
class WaitCondition:
    """What a navigation waits for before the page is read.

    Attributes:
        wait_until: Page lifecycle event ("networkidle", "load", "domcontentloaded")
        selector: CSS selector that must appear, or None
        timeout_seconds: How long to wait for the selector
    """

    wait_until: str = "networkidle"
    selector: str | None = None
    timeout_seconds: float = 10.0


class RenderError(Exception):
    """A page could not be loaded (network, HTTP status, browser failure)."""

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url
        self.message = message
        self.status_code = status_code


class RenderTimeout(RenderError):
    """Navigation or the wait condition did not finish in time."""


class PageSession(Protocol):
    async def render(self, url: str, wait: WaitCondition) -> Document: ...


class Renderer(Protocol):
    def session(self) -> AbstractAsyncContextManager[PageSession]: ...


def primary_wait(selector: str | None, cfg: FetchConfig) -> WaitCondition:
    return WaitCondition(
        wait_until="networkidle",
        selector=selector,
        timeout_seconds=cfg.wait_timeout_seconds,
    )


def relaxed_wait(cfg: FetchConfig) -> WaitCondition:
    return WaitCondition(
        wait_until="domcontentloaded",
        selector=None,
        timeout_seconds=cfg.relaxed_wait_timeout_seconds,
    )


async def render_with_retry(
    session: PageSession,
    url: str,
    primary: WaitCondition,
    relaxed: WaitCondition,
    logger: logging.Logger | None = None,
) -> Document:
    """Render a URL, retrying once with a relaxed wait after a timeout.

    Only RenderTimeout triggers the retry; other RenderErrors propagate
    immediately, as does a failure of the retry itself.
    """
    try:
        return await session.render(url, primary)
    except RenderTimeout as exc:
        log_event(
            logger,
            "Wait timed out, retrying with relaxed wait",
            event="render_timeout_retry",
            url=url,
            selector=primary.selector,
            error=exc.message,
        )
    return await session.render(url, relaxed)


def categorize_error(error: str | None, status_code: int | None) -> str:
    """Categorize render errors for logging.

    Returns:
        Error category: "timeout", "blocked", "network_failed" or "unknown"
    """
    if not error:
        return "unknown"
    error_lower = error.lower()
    if "timeout" in error_lower or "timed out" in error_lower:
        return "timeout"
    if status_code == 403 or "blocked" in error_lower:
        return "blocked"
    if "connect" in error_lower or "connection" in error_lower:
        return "network_failed"
    return "unknown"


def _render_error(url: str, error: str, status_code: int | None) -> RenderError:
    if categorize_error(error, status_code) == "timeout":
        return RenderTimeout(url, error, status_code)
    return RenderError(url, error, status_code)


class Crawl4AIRenderer:
    """Render pages in headless Chromium through Crawl4AI.

    One browser is launched per session and closed when the session ends.
    """

    def __init__(self, cfg: FetchConfig) -> None:
        self.cfg = cfg

    @asynccontextmanager
    async def session(self) -> AsyncIterator["_Crawl4AISession"]:
        try:
            from crawl4ai import AsyncWebCrawler, BrowserConfig
        except Exception as exc:  # noqa: BLE001
            raise RenderError("", f"ImportError: {exc}") from exc

        browser_cfg = BrowserConfig(
            headless=self.cfg.headless,
            user_agent=self.cfg.user_agent,
            verbose=False,
        )
        async with AsyncWebCrawler(config=browser_cfg) as crawler:
            yield _Crawl4AISession(crawler, self.cfg)


class _Crawl4AISession:
    def __init__(self, crawler, cfg: FetchConfig) -> None:  # noqa: ANN001
        self._crawler = crawler
        self._cfg = cfg

    async def render(self, url: str, wait: WaitCondition) -> Document:
        from crawl4ai import CacheMode, CrawlerRunConfig

        run_cfg = CrawlerRunConfig(
            cache_mode=CacheMode.BYPASS,
            wait_until=wait.wait_until,
            wait_for=f"css:{wait.selector}" if wait.selector else None,
            wait_for_timeout=int(wait.timeout_seconds * 1000),
            page_timeout=int(self._cfg.timeout_seconds * 1000),
            verbose=False,
        )
        try:
            result = await self._crawler.arun(url=url, config=run_cfg)
        except Exception as exc:  # noqa: BLE001
            raise _render_error(url, f"{type(exc).__name__}: {exc}", None) from exc

        status_code = getattr(result, "status_code", None)
        if not getattr(result, "success", True):
            error_message = getattr(result, "error_message", None) or "Crawl failed"
            raise _render_error(url, f"Crawl4AIError: {error_message}", status_code)

        html = getattr(result, "html", None)
        if not html or not html.strip():
            raise RenderError(url, "Crawl4AIError: empty page", status_code)

        final_url = getattr(result, "redirected_url", None) or getattr(result, "url", None) or url
        return Document(html, final_url)


class HttpxRenderer:
    """Fetch static HTML with httpx.

    No JavaScript runs, so the wait selector is ignored; the navigation
    timeout still applies.
    """

    def __init__(self, cfg: FetchConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.cfg = cfg
        self._transport = transport

    @asynccontextmanager
    async def session(self) -> AsyncIterator["_HttpxSession"]:
        async with httpx.AsyncClient(
            headers={"User-Agent": self.cfg.user_agent},
            follow_redirects=True,
            timeout=self.cfg.timeout_seconds,
            transport=self._transport,
        ) as client:
            yield _HttpxSession(client)


class _HttpxSession:
    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def render(self, url: str, wait: WaitCondition) -> Document:
        try:
            resp = await self._client.get(url)
        except httpx.TimeoutException as exc:
            raise RenderTimeout(url, f"{type(exc).__name__}: {exc}") from exc
        except httpx.HTTPError as exc:
            raise RenderError(url, f"{type(exc).__name__}: {exc}") from exc

        if resp.status_code >= 400:
            raise RenderError(url, f"HTTP {resp.status_code}", resp.status_code)
        return Document(resp.text, str(resp.url))


def build_renderer(cfg: FetchConfig) -> Renderer:
    """Build the renderer for the configured backend.

    Raises:
        ConfigError: If the backend name is not supported
    """
    if cfg.backend == "crawl4ai":
        return Crawl4AIRenderer(cfg)
    if cfg.backend == "httpx":
        return HttpxRenderer(cfg)
    raise ConfigError(f"Unsupported fetch backend: {cfg.backend}")
