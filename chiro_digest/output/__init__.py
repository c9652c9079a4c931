"""
Report output.

This package renders SummaryResults as Markdown and JSON reports.
"""

from .renderer import to_markdown, write_json, write_markdown

__all__ = ["to_markdown", "write_json", "write_markdown"]
