"""Search API limits.

Two policies live here and are kept apart on purpose:
    - hard caps on filter complexity (group count, filters per group, total filters) reject the
      request;
    - the soft cap on page size clamps the value and never rejects.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol

from src.query.errors import TooManyFilterGroups, TooManyFiltersInGroup, TooManyTotalFilters

MAX_FILTER_GROUPS = 5
MAX_FILTERS_PER_GROUP = 6
MAX_TOTAL_FILTERS = 18

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 200


class HasFilters(Protocol):
    filters: Sequence[Any]


def check_filter_group_count(groups: Sequence[HasFilters]) -> None:
    if len(groups) > MAX_FILTER_GROUPS:
        raise TooManyFilterGroups(len(groups), MAX_FILTER_GROUPS)


def check_filters_per_group(groups: Sequence[HasFilters]) -> None:
    for idx, group in enumerate(groups):
        if len(group.filters) > MAX_FILTERS_PER_GROUP:
            raise TooManyFiltersInGroup(idx, len(group.filters), MAX_FILTERS_PER_GROUP)


def check_total_filters(groups: Sequence[HasFilters]) -> None:
    total = sum(len(group.filters) for group in groups)
    if total > MAX_TOTAL_FILTERS:
        raise TooManyTotalFilters(total, MAX_TOTAL_FILTERS)


# Evaluated in order; the first violation wins.
HARD_CAPS: tuple[Callable[[Sequence[HasFilters]], None], ...] = (
    check_filter_group_count,
    check_filters_per_group,
    check_total_filters,
)


def enforce_hard_caps(groups: Sequence[HasFilters]) -> None:
    """Raise the first hard-cap violation found in `groups`, if any."""

    for rule in HARD_CAPS:
        rule(groups)


def clamp_page_size(limit: int) -> int:
    """Soft cap: reduce page sizes above the maximum. Small or negative values are left alone."""

    return min(limit, MAX_PAGE_SIZE)
