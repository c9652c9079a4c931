"""
Report rendering for Markdown and JSON output.

`to_markdown` is a pure formatting function; the write_* helpers put the
rendered reports on disk.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import date
import json
from pathlib import Path

from ..core.types import SummaryResult

REPORT_TITLE = "Chiropractic News Summary"


def to_markdown(results: list[SummaryResult], generated_on: date | None = None) -> str:
    """Render results as a Markdown report, one section per article.

    Args:
        results: Summaries in the order they should appear
        generated_on: Date shown in the header (defaults to today)

    Returns:
        The Markdown document
    """
    if not results:
        return f"# {REPORT_TITLE}\n\nNo articles processed."

    stamp = (generated_on or date.today()).isoformat()
    lines = [
        f"# {REPORT_TITLE}",
        "",
        f"*Generated on {stamp}*",
        "",
        f"Total articles processed: **{len(results)}**",
        "",
        "---",
        "",
    ]
    for index, result in enumerate(results, start=1):
        lines.extend(
            [
                f"## {index}. {result.title}",
                "",
                f"**Author:** {result.author}",
                "",
                f"**Date:** {result.published_date}",
                "",
                f"**URL:** [Read full article]({result.url})",
                "",
            ]
        )
        if result.key_points:
            lines.append("### Key Points")
            lines.append("")
            for number, point in enumerate(result.key_points, start=1):
                lines.append(f"{number}. {point}")
            lines.append("")
        if result.narrative:
            lines.extend(["### Summary", "", result.narrative, ""])
        lines.extend(["---", ""])

    return "\n".join(lines)


def write_markdown(
    results: list[SummaryResult],
    output_path: Path,
    generated_on: date | None = None,
) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(to_markdown(results, generated_on), encoding="utf-8")
    return output_path


def write_json(results: list[SummaryResult], output_path: Path) -> Path:
    """Write results as a JSON array of objects, key points as lists."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [asdict(result) for result in results]
    for item in payload:
        item["key_points"] = list(item["key_points"])
    output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    return output_path
