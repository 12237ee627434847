"""Output formatters for dep-uplift."""

from .formatters import COMMENT_MARKER, ConsoleFormatter, JSONFormatter, MarkdownFormatter, sanitize_for_markdown

__all__ = [
    "COMMENT_MARKER",
    "ConsoleFormatter",
    "JSONFormatter",
    "MarkdownFormatter",
    "sanitize_for_markdown",
]
