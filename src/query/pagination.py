"""Pagination directives (`limit:` and `offset:`) in text queries."""

from __future__ import annotations

import re
from dataclasses import dataclass

from src.query.limits import DEFAULT_PAGE_SIZE, clamp_page_size

_LIMIT_RE = re.compile(r"\blimit:\s*(-?\d+)")
_OFFSET_RE = re.compile(r"\boffset:\s*(-?\d+)")


@dataclass(frozen=True)
class Pagination:
    """Page size plus the opaque cursor of the page to fetch."""

    limit: int = DEFAULT_PAGE_SIZE
    after: str | None = None


def extract_pagination(raw_text: str) -> Pagination:
    """Parse `limit:` / `offset:` directives.

    The limit defaults to 10 and is clamped to at most 200. There is no lower clamp: `limit: 0` or a
    negative literal passes through unchanged. The offset is turned into the `after` cursor string.
    """

    text = raw_text or ""

    limit_match = _LIMIT_RE.search(text)
    limit = int(limit_match.group(1)) if limit_match else DEFAULT_PAGE_SIZE

    offset_match = _OFFSET_RE.search(text)
    after = str(int(offset_match.group(1))) if offset_match else None

    return Pagination(limit=clamp_page_size(limit), after=after)
