"""
Command-line interface for the chiropractic news digest.

Uses Typer to provide a CLI with options for the most common
configuration settings. Loads a .env file before reading the
environment so REQUEST_TIMEOUT, MAX_ARTICLES, USER_AGENT, SCRAPING_DELAY
and LOG_LEVEL can be kept there.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
import typer
from rich.console import Console
from rich.markup import escape

from .config import ConfigError, load_config, override, validate_config
from .core.types import SummaryResult
from .runner import run_pipeline

app = typer.Typer(add_completion=False)
console = Console()

_EXCERPT_CHARS = 200


@app.callback()
def main() -> None:
    """Summarize the latest chiropractic news articles."""


@app.command()
def run(
    output: Path = typer.Option(Path("out"), "--output", "-o"),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    max_articles: int | None = typer.Option(None, "--max-articles", "-n", min=1),
    backend: str | None = typer.Option(None, "--backend", help="Rendering backend: crawl4ai or httpx."),
    timeout: float | None = typer.Option(None, "--timeout", help="Navigation timeout in seconds."),
    delay: float | None = typer.Option(None, "--delay", help="Pause before each article, in seconds."),
    concurrency: int | None = typer.Option(None, "--concurrency", min=1),
    formats: list[str] | None = typer.Option(
        None, "--format", "-f", help="Report format (json, markdown); repeatable."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
    progress: bool = typer.Option(True, "--progress/--no-progress"),
):
    """Run the digest pipeline.

    Discovers articles on the listing page, extracts and summarizes each
    one, and writes the reports to the output directory.

    Args:
        output: Directory for reports and the run log
        config: Optional path to YAML config file
        max_articles: Cap on discovered articles
        backend: Rendering backend
        timeout: Navigation timeout in seconds
        delay: Pause before each article request
        concurrency: Articles processed at once
        formats: Report formats to write
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Enable/disable file logging
        progress: Whether to show progress bar
    """
    load_dotenv()

    try:
        cfg = load_config(str(config) if config else None)
        cfg = override(cfg, "source", max_articles=max_articles)
        cfg = override(
            cfg,
            "fetch",
            backend=backend,
            timeout_seconds=timeout,
            scraping_delay_seconds=delay,
            concurrency=concurrency,
        )
        cfg = override(cfg, "output", formats=tuple(formats) if formats else None)
        cfg = override(
            cfg,
            "logging",
            level=log_level.upper() if log_level else None,
            file=log_file,
        )
        validate_config(cfg)
    except ConfigError as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    try:
        outcome = run_pipeline(output, cfg, show_progress=progress, console=console)
    except Exception as exc:  # noqa: BLE001
        console.print(f"[red]Failed to complete summarization:[/red] {type(exc).__name__}: {exc}")
        raise typer.Exit(code=1) from exc

    _render_results(outcome.results, console)
    for path in outcome.paths:
        console.print(f"Report written: {path}")


def _render_results(results: list[SummaryResult], console: Console) -> None:
    """Print each summarized article with its key points and a summary excerpt."""
    if not results:
        return
    console.print("\n[bold]=== SUMMARY RESULTS ===[/bold]")
    for index, result in enumerate(results, start=1):
        console.print(f"\n[bold]{index}. {escape(result.title)}[/bold]")
        console.print(f"   Author: {escape(result.author)}")
        console.print(f"   Date: {escape(result.published_date)}")
        console.print(f"   URL: {escape(result.url)}", overflow="ignore", crop=False)
        for number, point in enumerate(result.key_points, start=1):
            console.print(f"   {number}. {escape(point)}")
        excerpt = " ".join(result.narrative.split())
        if len(excerpt) > _EXCERPT_CHARS:
            excerpt = excerpt[:_EXCERPT_CHARS] + "..."
        console.print(f"   Summary: {escape(excerpt)}")


if __name__ == "__main__":
    app()
