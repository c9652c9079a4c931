"""
Chiropractic News Digest - heuristic news summarizer.

This package discovers articles on a chiropractic news listing page,
extracts their fields with fallback selector cascades, and summarizes
each article into ranked key points and a short narrative.

Main entry point is the CLI via `chiro-digest run` command.

Example:
    $ chiro-digest run -o output/
"""

__all__ = [
    "__version__",
    "discover",
    "extract_article",
    "process_all",
    "summarize",
    "to_markdown",
]
__version__ = "0.1.0"

from .fetch import discover, extract_article
from .output import to_markdown
from .runner import process_all
from .summarize import summarize
