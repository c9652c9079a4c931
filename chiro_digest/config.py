"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults, followed by environment overrides.
Configuration sections:
- SourceConfig: Listing page and link discovery settings
- FetchConfig: Rendering backend, timeouts and pacing
- ExtractConfig: Per-field selector cascades
- SummaryConfig: Sentence scoring and narrative thresholds
- OutputConfig: Report formats and filenames
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container

All sections are frozen: a config is built once at startup and passed
explicitly to every component that needs it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
import os
from typing import Any, Mapping

import yaml


class ConfigError(ValueError):
    """Raised when a configuration value is invalid."""


@dataclass(frozen=True)
class SourceConfig:
    """Configuration for the listing page and link discovery.

    Attributes:
        listing_url: Category page that lists the articles
        max_articles: Hard cap on discovered links, applied in document order
        dedup_titles: Also drop links whose titles are near-duplicates of earlier
            ones (off by default; recurring headlines differ only by a number)
        title_similarity_threshold: Fuzzy match threshold (0-100) for title dedup
        link_selectors: Link cascade, tried in order over the whole page
        link_containers: Containers searched by the last-resort link strategy
        container_link_selector: Link selector used inside link_containers
    """

    listing_url: str = "https://www.chiroeco.com/category/news/chiropractic-news/"
    max_articles: int = 10
    dedup_titles: bool = False
    title_similarity_threshold: int = 92
    link_selectors: tuple[str, ...] = (".entry-title a", "h2.entry-title a")
    link_containers: tuple[str, ...] = (".entry-content", ".post-content")
    container_link_selector: str = 'a[href*="/20"]'


@dataclass(frozen=True)
class FetchConfig:
    """Configuration for page rendering.

    Attributes:
        backend: "crawl4ai" for headless-browser rendering, "httpx" for static HTML
        timeout_seconds: Navigation timeout
        wait_timeout_seconds: Timeout for the primary wait condition
        relaxed_wait_timeout_seconds: Timeout for the single relaxed retry
        user_agent: User-Agent string sent with every request
        scraping_delay_seconds: Pause before each article request
        concurrency: Number of articles processed at once (1 = sequential)
        headless: Run the browser without a window
        listing_wait_selector: Element the listing page must show before reading it
        article_wait_selector: Element an article page must show before reading it
    """

    backend: str = "crawl4ai"
    timeout_seconds: float = 30.0
    wait_timeout_seconds: float = 10.0
    relaxed_wait_timeout_seconds: float = 5.0
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/91.0.4472.124 Safari/537.36"
    )
    scraping_delay_seconds: float = 1.0
    concurrency: int = 1
    headless: bool = True
    listing_wait_selector: str = ".entry-title a"
    article_wait_selector: str = ".entry-content"


@dataclass(frozen=True)
class ExtractConfig:
    """Selector cascades for the article fields.

    Each tuple is tried in order; the first selector that matches wins.
    Meta selectors are read from their `content` attribute after the
    visible selectors miss.

    Attributes:
        title_selectors: Title cascade
        author_selectors: Visible author cascade
        author_meta_selectors: Author meta-tag fallback
        date_selectors: Date cascade (`datetime` attribute preferred over text)
        date_meta_selectors: Date meta-tag fallback
        body_selectors: Main content containers
        body_fallback: Named whole-page extractors tried after body_selectors
            ("heuristic", "trafilatura", "readability")
        heuristic_min_chars: Minimum text length for the heuristic container scan
    """

    title_selectors: tuple[str, ...] = ("h1.entry-title", "title")
    author_selectors: tuple[str, ...] = (
        ".entry-author-name",
        ".author-name",
        ".vcard .fn",
        ".byline",
        '[rel="author"]',
    )
    author_meta_selectors: tuple[str, ...] = ('meta[name="author"]',)
    date_selectors: tuple[str, ...] = (".entry-time", "time")
    date_meta_selectors: tuple[str, ...] = ('meta[property="article:published_time"]',)
    body_selectors: tuple[str, ...] = (".entry-content", ".post-content")
    body_fallback: tuple[str, ...] = ("heuristic",)
    heuristic_min_chars: int = 100


@dataclass(frozen=True)
class SummaryConfig:
    """Configuration for extractive summarization.

    Attributes:
        min_content_chars: Bodies shorter than this are not summarized
        min_sentence_chars: Sentences must be longer than this to be scored
        max_key_points: Number of ranked sentences kept
        keywords: Domain lexicon, one point per distinct term present
        study_terms: Terms that mark research content
        treatment_terms: Terms that mark treatment content
        detailed_words: Word count above which an article is "detailed"
        comprehensive_words: Word count above which an article is "comprehensive"
    """

    min_content_chars: int = 50
    min_sentence_chars: int = 30
    max_key_points: int = 3
    keywords: tuple[str, ...] = (
        "study",
        "research",
        "treatment",
        "patient",
        "therapy",
        "clinical",
        "effective",
        "result",
    )
    study_terms: tuple[str, ...] = ("study", "research")
    treatment_terms: tuple[str, ...] = ("treatment", "therapy")
    detailed_words: int = 200
    comprehensive_words: int = 500


@dataclass(frozen=True)
class OutputConfig:
    """Configuration for report output.

    Attributes:
        formats: Any of "json" and "markdown"
        json_filename: Name of the JSON report
        markdown_filename: Name of the Markdown report
    """

    formats: tuple[str, ...] = ("json", "markdown")
    json_filename: str = "chiropractic_news_summary.json"
    markdown_filename: str = "chiropractic_news_summary.md"


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to a file in the output directory
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = True
    format: str = "jsonl"
    filename: str = "run.jsonl"


@dataclass(frozen=True)
class AppConfig:
    """Root configuration container aggregating all config sections."""

    source: SourceConfig = field(default_factory=SourceConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


DEFAULT_CONFIG = AppConfig()

_SECTIONS = {
    "source": SourceConfig,
    "fetch": FetchConfig,
    "extract": ExtractConfig,
    "summary": SummaryConfig,
    "output": OutputConfig,
    "logging": LoggingConfig,
}

_BACKENDS = ("crawl4ai", "httpx")
_FORMATS = ("json", "markdown")


def load_config(path: str | None, environ: Mapping[str, str] | None = None) -> AppConfig:
    """Load configuration from a YAML file with defaults, then apply env overrides."""
    cfg = DEFAULT_CONFIG
    if path:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        cfg = _merge_config(cfg, raw)

    cfg = apply_env_overrides(cfg, os.environ if environ is None else environ)
    validate_config(cfg)
    return cfg


def apply_env_overrides(cfg: AppConfig, environ: Mapping[str, str]) -> AppConfig:
    """Apply the legacy environment variables on top of a config.

    REQUEST_TIMEOUT and SCRAPING_DELAY are given in milliseconds.
    """
    fetch_updates: dict[str, Any] = {}
    source_updates: dict[str, Any] = {}
    logging_updates: dict[str, Any] = {}

    timeout_ms = _env_int(environ, "REQUEST_TIMEOUT")
    if timeout_ms is not None:
        fetch_updates["timeout_seconds"] = timeout_ms / 1000
    delay_ms = _env_int(environ, "SCRAPING_DELAY")
    if delay_ms is not None:
        fetch_updates["scraping_delay_seconds"] = delay_ms / 1000
    if environ.get("USER_AGENT"):
        fetch_updates["user_agent"] = environ["USER_AGENT"]

    max_articles = _env_int(environ, "MAX_ARTICLES")
    if max_articles is not None:
        source_updates["max_articles"] = max_articles

    if environ.get("LOG_LEVEL"):
        logging_updates["level"] = environ["LOG_LEVEL"].upper()

    return replace(
        cfg,
        fetch=replace(cfg.fetch, **fetch_updates),
        source=replace(cfg.source, **source_updates),
        logging=replace(cfg.logging, **logging_updates),
    )


def override(cfg: AppConfig, section: str, **values: Any) -> AppConfig:
    """Return a copy of cfg with fields of one section replaced.

    None values are ignored so CLI options that were not given leave the
    config untouched.
    """
    updates = {key: value for key, value in values.items() if value is not None}
    if not updates:
        return cfg
    current = getattr(cfg, section)
    return replace(cfg, **{section: replace(current, **updates)})


def validate_config(cfg: AppConfig) -> None:
    """Reject values the pipeline cannot run with."""
    if cfg.fetch.backend not in _BACKENDS:
        raise ConfigError(
            f"Unsupported fetch backend: {cfg.fetch.backend}. Use one of {', '.join(_BACKENDS)}."
        )
    if cfg.source.max_articles < 1:
        raise ConfigError("source.max_articles must be at least 1")
    if cfg.fetch.concurrency < 1:
        raise ConfigError("fetch.concurrency must be at least 1")
    if cfg.fetch.scraping_delay_seconds < 0:
        raise ConfigError("fetch.scraping_delay_seconds cannot be negative")
    unknown = [fmt for fmt in cfg.output.formats if fmt not in _FORMATS]
    if unknown:
        raise ConfigError(f"Unsupported output format(s): {', '.join(unknown)}")


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            known = {f.name for f in fields(_SECTIONS[key])}
            data[key].update({k: v for k, v in value.items() if k in known})
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    sections = {}
    for name, cls in _SECTIONS.items():
        values = {
            key: tuple(value) if isinstance(value, list) else value
            for key, value in data[name].items()
        }
        sections[name] = cls(**values)
    return AppConfig(**sections)


def _env_int(environ: Mapping[str, str], name: str) -> int | None:
    raw = environ.get(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
