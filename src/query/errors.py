"""Validation errors raised before any downstream search is attempted.

Every error carries a stable `code` so the HTTP boundary can map it without string matching. None of
these are retried: they describe caller input, not transient failures.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class QueryValidationError(ValueError):
    """Raised when a search request is rejected locally."""

    code = "invalid_query"

    def payload(self) -> dict[str, Any]:
        """Extra fields to include in the error envelope."""

        return {}


class UnsupportedEndpoint(QueryValidationError):
    """The collection identifier is not in the supported allow-list."""

    code = "unsupported_endpoint"

    def __init__(
            self,
            collection: str,
            supported: Iterable[str],
            message: str | None = None,
    ) -> None:
        self.collection = collection
        self.supported = list(supported)
        super().__init__(message or f"Unsupported endpoint: {collection}")

    def payload(self) -> dict[str, Any]:
        return {"supported_endpoints": list(self.supported)}


class TooManyFilterGroups(QueryValidationError):
    code = "too_many_filter_groups"

    def __init__(self, count: int, maximum: int) -> None:
        self.count = count
        self.maximum = maximum
        super().__init__(f"Too many filter groups: {count} (maximum {maximum})")


class TooManyFiltersInGroup(QueryValidationError):
    code = "too_many_filters_in_group"

    def __init__(self, group_index: int, count: int, maximum: int) -> None:
        self.group_index = group_index
        self.count = count
        self.maximum = maximum
        super().__init__(
            f"Too many filters in filter group {group_index}: {count} (maximum {maximum})"
        )


class TooManyTotalFilters(QueryValidationError):
    code = "too_many_total_filters"

    def __init__(self, count: int, maximum: int) -> None:
        self.count = count
        self.maximum = maximum
        super().__init__(f"Too many filters in total: {count} (maximum {maximum})")


class InvalidRequestBody(QueryValidationError):
    """The structured request body does not match the expected shape."""

    code = "invalid_request_body"
