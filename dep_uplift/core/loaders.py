"""Structured-text loaders with a nesting depth guard.

Dependency files come straight out of pull requests, so before any of them
reaches a JSON, TOML or YAML parser the raw text is scanned once and rejected
if its bracket nesting is deeper than ``MAX_NESTING_DEPTH`` or unbalanced.
"""

import json
from typing import Any, Optional, Sequence

import yaml

try:
    import tomllib
except ImportError:
    import tomli as tomllib

MAX_NESTING_DEPTH = 20

MAX_CONTENT_SIZE = 10 * 1024 * 1024

_OPENERS = "{["
_CLOSERS = "}]"


def check_nesting_depth(
    content: str,
    max_depth: int = MAX_NESTING_DEPTH,
    quote_chars: Sequence[str] = ('"',),
    triple_quotes: bool = False,
    comment_chars: Sequence[str] = (),
    raw_quote_chars: Sequence[str] = (),
) -> bool:
    """Check that bracket nesting stays within ``max_depth``.

    Args:
        content: Raw document text
        max_depth: Maximum allowed depth of ``{``/``[`` nesting
        quote_chars: Characters that open and close string literals
        triple_quotes: Whether tripled quote characters open multi-line strings
        comment_chars: Characters that start a comment running to end of line
        raw_quote_chars: Quote characters whose strings have no escapes

    Returns:
        False if the depth ever exceeds ``max_depth`` or goes negative
    """
    depth = 0
    quote: Optional[str] = None
    in_comment = False
    escape = False
    i = 0
    length = len(content)

    while i < length:
        char = content[i]

        if in_comment:
            if char == "\n":
                in_comment = False
            i += 1
            continue

        if quote is not None:
            if escape:
                escape = False
            elif char == "\\" and quote[0] not in raw_quote_chars:
                escape = True
            elif content.startswith(quote, i):
                i += len(quote)
                quote = None
                continue
            i += 1
            continue

        if char in quote_chars:
            if triple_quotes and content.startswith(char * 3, i):
                quote = char * 3
                i += 3
                continue
            quote = char
        elif char in comment_chars:
            in_comment = True
        elif char in _OPENERS:
            depth += 1
            if depth > max_depth:
                return False
        elif char in _CLOSERS:
            depth -= 1
            if depth < 0:
                return False
        i += 1

    return True


def _within_size(content: str) -> bool:
    return len(content) <= MAX_CONTENT_SIZE


def load_json(content: str, max_depth: int = MAX_NESTING_DEPTH) -> Optional[Any]:
    """Parse JSON text, returning None if it fails the size or depth guard."""
    if not _within_size(content) or not check_nesting_depth(content, max_depth):
        return None
    return json.loads(content)


def load_toml(content: str, max_depth: int = MAX_NESTING_DEPTH) -> Optional[Any]:
    """Parse TOML text, returning None if it fails the size or depth guard."""
    if not _within_size(content):
        return None
    if not check_nesting_depth(
        content,
        max_depth,
        quote_chars=('"', "'"),
        triple_quotes=True,
        comment_chars=("#",),
        raw_quote_chars=("'",),
    ):
        return None
    return tomllib.loads(content)


def load_yaml(content: str, max_depth: int = MAX_NESTING_DEPTH) -> Optional[Any]:
    """Parse YAML text with the safe loader, returning None if it fails a guard."""
    if not _within_size(content):
        return None
    if not check_nesting_depth(
        content,
        max_depth,
        quote_chars=('"', "'"),
        comment_chars=("#",),
        raw_quote_chars=("'",),
    ):
        return None
    return yaml.safe_load(content)
