"""
Main pipeline orchestration for the chiropractic news digest.

This module coordinates the entire workflow:
1. Discover article links on the listing page
2. For each link: render the page and extract its fields
3. Summarize the body (key points + narrative)
4. Write JSON and/or Markdown reports

Each article is processed inside its own failure boundary: an error while
extracting or summarizing one article drops that article and the run
continues. An empty discovery ends the run with no results.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Awaitable, Callable

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

from .config import AppConfig
from .core.types import CandidateLink, RunStats, SummaryResult
from .fetch.discovery import discover
from .fetch.extractor import extract_article
from .fetch.fetcher import Renderer, build_renderer, categorize_error
from .logging_utils import log_event, setup_logging
from .output.renderer import write_json, write_markdown
from .summarize.composer import summarize

Sleep = Callable[[float], Awaitable[None]]


@dataclass
class PipelineOutput:
    """What a pipeline run produced.

    Attributes:
        results: Summaries in discovery order
        paths: Report files written
        stats: Run counters
    """

    results: list[SummaryResult] = field(default_factory=list)
    paths: list[Path] = field(default_factory=list)
    stats: RunStats = field(default_factory=RunStats)


async def process_article(
    candidate: CandidateLink,
    renderer: Renderer,
    cfg: AppConfig,
    logger: logging.Logger | None = None,
) -> SummaryResult:
    """Extract and summarize a single candidate."""
    record = await extract_article(candidate.url, renderer, cfg, logger)
    summary = summarize(record.raw_body, record.title, cfg.summary)
    return SummaryResult.from_record(record, summary)


async def process_candidates(
    candidates: list[CandidateLink],
    renderer: Renderer,
    cfg: AppConfig,
    logger: logging.Logger | None = None,
    stats: RunStats | None = None,
    on_done: Callable[[], None] | None = None,
    sleep: Sleep = asyncio.sleep,
) -> list[SummaryResult]:
    """Process candidates with per-article isolation.

    At most `fetch.concurrency` articles are in flight; with the default of
    1 they run strictly one after another. Request starts are paced through
    one shared lock: `fetch.scraping_delay_seconds` is awaited before every
    article request, so consecutive starts are at least that far apart
    whatever the concurrency.

    Returns:
        Results for the articles that succeeded, in candidate order
    """
    stats = stats if stats is not None else RunStats()
    semaphore = asyncio.Semaphore(cfg.fetch.concurrency)
    pacing = asyncio.Lock()
    delay = cfg.fetch.scraping_delay_seconds

    async def _run(candidate: CandidateLink) -> SummaryResult | None:
        async with semaphore:
            if delay > 0:
                async with pacing:
                    await sleep(delay)
            log_event(
                logger,
                f"Processing: {candidate.title or candidate.url}",
                event="article_start",
                url=candidate.url,
                title=candidate.title,
            )
            try:
                result = await process_article(candidate, renderer, cfg, logger)
            except Exception as exc:  # noqa: BLE001
                stats.failed += 1
                error = f"{type(exc).__name__}: {exc}"
                log_event(
                    logger,
                    f"Error processing article {candidate.url}",
                    level=logging.ERROR,
                    event="article_failed",
                    url=candidate.url,
                    title=candidate.title,
                    error=error,
                    category=categorize_error(error, getattr(exc, "status_code", None)),
                )
                return None
            finally:
                if on_done is not None:
                    on_done()

            stats.processed += 1
            log_event(
                logger,
                "Article processed",
                event="article_complete",
                url=result.url,
                title=result.title,
                key_points=len(result.key_points),
            )
            return result

    outcomes = await asyncio.gather(*(_run(candidate) for candidate in candidates))
    return [result for result in outcomes if result is not None]


async def process_all(
    renderer: Renderer,
    cfg: AppConfig,
    logger: logging.Logger | None = None,
    stats: RunStats | None = None,
    sleep: Sleep = asyncio.sleep,
    on_discovered: Callable[[int], None] | None = None,
    on_done: Callable[[], None] | None = None,
) -> list[SummaryResult]:
    """Discover articles and summarize each one.

    Args:
        renderer: Rendering backend
        cfg: Application configuration
        logger: Optional logger for run events
        stats: Counters updated in place
        sleep: Awaitable used for the pacing delay
        on_discovered: Called once with the number of candidates found
        on_done: Called after each article, whether it succeeded or not

    Returns:
        Summaries in discovery order; empty when discovery finds nothing
    """
    stats = stats if stats is not None else RunStats()
    candidates = await discover(renderer, cfg, logger)
    stats.discovered = len(candidates)
    if on_discovered is not None:
        on_discovered(len(candidates))
    if not candidates:
        log_event(logger, "No articles found", event="no_articles")
        return []
    return await process_candidates(
        candidates, renderer, cfg, logger, stats, on_done=on_done, sleep=sleep
    )


def run_pipeline(
    output_dir: Path,
    cfg: AppConfig,
    show_progress: bool = True,
    console: Console | None = None,
    renderer: Renderer | None = None,
) -> PipelineOutput:
    """Run the complete digest pipeline and write the reports.

    Args:
        output_dir: Directory for reports and the run log
        cfg: Application configuration
        show_progress: Whether to display a progress bar
        console: Rich console for output (creates default if None)
        renderer: Rendering backend (built from cfg.fetch if None)

    Returns:
        The results, written report paths and run statistics
    """
    console = console or Console()
    output_dir.mkdir(parents=True, exist_ok=True)
    logger = setup_logging(cfg.logging, output_dir)
    renderer = renderer or build_renderer(cfg.fetch)
    output = PipelineOutput()

    log_event(
        logger,
        "Starting chiropractic news summarization",
        event="pipeline_start",
        listing_url=cfg.source.listing_url,
        output=str(output_dir),
        backend=cfg.fetch.backend,
    )

    if show_progress:
        output.results = asyncio.run(_run_with_progress(renderer, cfg, logger, output.stats, console))
    else:
        output.results = asyncio.run(process_all(renderer, cfg, logger, output.stats))

    if "json" in cfg.output.formats:
        output.paths.append(write_json(output.results, output_dir / cfg.output.json_filename))
    if "markdown" in cfg.output.formats:
        output.paths.append(write_markdown(output.results, output_dir / cfg.output.markdown_filename))

    _render_run_stats(output.stats, console)
    log_event(
        logger,
        f"Successfully processed {len(output.results)} articles",
        event="pipeline_complete",
        total=len(output.results),
        discovered=output.stats.discovered,
        failed=output.stats.failed,
        reports=[str(path) for path in output.paths],
    )
    return output


async def _run_with_progress(
    renderer: Renderer,
    cfg: AppConfig,
    logger: logging.Logger,
    stats: RunStats,
    console: Console,
) -> list[SummaryResult]:
    progress = Progress(
        SpinnerColumn(),
        TextColumn("{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeRemainingColumn(),
        console=console,
    )
    with progress:
        discover_task = progress.add_task("Discover", total=1)
        article_task = progress.add_task("Extract + Summarize", total=None, visible=False)

        def on_discovered(count: int) -> None:
            progress.advance(discover_task, 1)
            if count:
                progress.update(article_task, total=count, visible=True)

        return await process_all(
            renderer,
            cfg,
            logger,
            stats,
            on_discovered=on_discovered,
            on_done=lambda: progress.advance(article_task, 1),
        )


def _render_run_stats(stats: RunStats, console: Console) -> None:
    console.print(
        "[bold]Run summary[/bold]: "
        f"discovered={stats.discovered}, processed={stats.processed}, failed={stats.failed}"
    )
