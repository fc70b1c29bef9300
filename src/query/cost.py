"""Synthetic query cost accounting.

Each search is priced in cost points so clients can budget their usage:
    - 300 points per collection search,
    - 30 points per returned object,
    - 3 points per requested property that has a value on an object, 1 point if it is empty.

The budget is advisory: exceeding `max` is reported, never enforced.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

MAX_QUERY_COST = 30_000
OBJECT_COST = 30
POPULATED_PROPERTY_COST = 3
EMPTY_PROPERTY_COST = 1


class RequestKind(StrEnum):
    """Downstream operations that carry a fixed request cost."""

    collection_search = "collection_search"


REQUEST_COSTS: dict[RequestKind, int] = {
    RequestKind.collection_search: 300,
}


def is_populated(value: Any) -> bool:
    return value is not None and value != ""


@dataclass
class CostBudget:
    """Running cost counter for one request. `used` only grows."""

    used: int = 0
    max: int = MAX_QUERY_COST

    def charge_request(self, kind: RequestKind = RequestKind.collection_search) -> None:
        self.used += REQUEST_COSTS[kind]

    def charge_object(self) -> None:
        self.used += OBJECT_COST

    def charge_property(self, value: Any) -> None:
        self.used += POPULATED_PROPERTY_COST if is_populated(value) else EMPTY_PROPERTY_COST

    @property
    def exceeded(self) -> bool:
        return self.used > self.max

    def as_dict(self) -> dict[str, int]:
        return {"used": self.used, "max": self.max}


def account(
        kind: RequestKind,
        object_count: int,
        properties_per_object: int,
        populated_counts: Sequence[int],
) -> CostBudget:
    """Compute the cost of one completed search from counts alone.

    `populated_counts[i]` is the number of requested properties with a value on object `i`.
    """

    if len(populated_counts) != object_count:
        raise ValueError("populated_counts must have one entry per object")

    budget = CostBudget()
    budget.charge_request(kind)
    for populated in populated_counts:
        if not 0 <= populated <= properties_per_object:
            raise ValueError("populated count must be between 0 and properties_per_object")
        budget.charge_object()
        budget.used += populated * POPULATED_PROPERTY_COST
        budget.used += (properties_per_object - populated) * EMPTY_PROPERTY_COST
    return budget
