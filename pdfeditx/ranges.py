"""Page range parsing for split and extract operations.

Expressions look like ``"1-3,5,8-10"``: 1-based page numbers and inclusive
ranges separated by commas. Parsing is lenient per token: a token that is
malformed or falls outside the document is dropped and the rest of the
expression still applies. Only an expression that selects nothing at all is
an error.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from .exceptions import EmptySelectionError

LOGGER = logging.getLogger("pdfeditx.ranges")

_TOKEN_RE = re.compile(r"^(\d+)(?:\s*-\s*(\d+))?$")

DROP_MALFORMED = "malformed"
DROP_REVERSED = "reversed"
DROP_OUT_OF_RANGE = "out of range"


@dataclass
class RangeSelection:
    """Outcome of parsing a range expression against a page count."""

    indices: List[int]
    kept: List[str] = field(default_factory=list)
    dropped: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def dropped_tokens(self) -> List[str]:
        return [token for token, _ in self.dropped]


def _token_pages(token: str, page_count: int) -> Tuple[List[int], str]:
    match = _TOKEN_RE.match(token)
    if not match:
        return [], DROP_MALFORMED

    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) is not None else start
    if start > end:
        return [], DROP_REVERSED

    first = max(start, 1)
    last = min(end, page_count)
    if first > last:
        return [], DROP_OUT_OF_RANGE
    return list(range(first - 1, last)), ""


def parse_selection(expression: str, page_count: int) -> RangeSelection:
    """Parse ``expression`` and report which tokens were kept or dropped.

    Args:
        expression: Comma separated page numbers and ``start-end`` ranges.
        page_count: Number of pages in the target document.

    Returns:
        A :class:`RangeSelection` whose ``indices`` are zero-based, unique and
        ascending. It may be empty; :func:`select_pages` turns that into an
        error.
    """

    indices: set[int] = set()
    selection = RangeSelection(indices=[])

    for raw in (expression or "").split(","):
        token = raw.strip()
        if not token:
            continue
        pages, reason = _token_pages(token, page_count)
        if reason:
            LOGGER.debug("Dropping range token %r (%s)", token, reason)
            selection.dropped.append((token, reason))
            continue
        selection.kept.append(token)
        indices.update(pages)

    selection.indices = sorted(indices)
    return selection


def select_pages(expression: str, page_count: int) -> List[int]:
    """Return the zero-based page indices selected by ``expression``.

    Raises:
        EmptySelectionError: If no valid page remains after parsing.
    """

    selection = parse_selection(expression, page_count)
    if not selection.indices:
        raise EmptySelectionError(
            f"No valid pages found in range {expression!r} for a document with "
            f"{page_count} page(s)."
        )
    return selection.indices


def format_page_indices(indices: Iterable[int]) -> str:
    """Render zero-based ``indices`` as a compact 1-based range expression."""

    pages = sorted(set(index + 1 for index in indices))
    parts: List[str] = []
    start = prev = None
    for page in pages:
        if start is None:
            start = prev = page
        elif page == prev + 1:
            prev = page
        else:
            parts.append(str(start) if start == prev else f"{start}-{prev}")
            start = prev = page
    if start is not None:
        parts.append(str(start) if start == prev else f"{start}-{prev}")
    return ",".join(parts)


__all__ = [
    "RangeSelection",
    "parse_selection",
    "select_pages",
    "format_page_indices",
]
