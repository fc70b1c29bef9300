"""Group assembly and limit validation for both entry points.

Text queries are packed into a single AND-group; only the structured entry point can express several
OR-ed groups. Both paths go through the same hard caps before anything is sent downstream.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from src.query.collections import default_properties, require_supported
from src.query.errors import InvalidRequestBody
from src.query.limits import DEFAULT_PAGE_SIZE, clamp_page_size, enforce_hard_caps
from src.query.pagination import Pagination
from src.query.schema import FilterGroup, Predicate, SearchRequest, SearchRequestInput


def assemble(
        predicates: Sequence[Predicate],
        default_props: Sequence[str],
        pagination: Pagination,
        *,
        properties: Sequence[str] | None = None,
) -> SearchRequest:
    """Build a search request from extracted predicates (text entry point).

    All predicates go into one filter group; no predicates means no groups at all.

    Raises:
        QueryValidationError: If the single group breaks a hard cap.
    """

    groups = [FilterGroup(filters=list(predicates))] if predicates else []
    enforce_hard_caps(groups)

    return SearchRequest(
        filter_groups=groups,
        properties=list(properties or default_props),
        limit=pagination.limit,
        after=pagination.after,
    )


def validate(collection: str, body: Mapping[str, Any] | None) -> SearchRequest:
    """Validate a structured search body against the collection allow-list and the API limits.

    Checks run in a fixed order and the first violation is raised:
        1) collection allow-list,
        2) filter group count, filters per group, total filters,
        3) page size is clamped (never rejected).

    A non-empty `query` reduces the request to `{query, limit}`; filter groups and any other fields
    are dropped. Otherwise unrecognised fields such as `sorts` are forwarded unchanged.
    """

    require_supported(collection)

    if body is not None and not isinstance(body, Mapping):
        raise InvalidRequestBody("Search request body must be a JSON object")

    try:
        payload = SearchRequestInput.model_validate(dict(body or {}))
    except ValidationError as exc:
        raise InvalidRequestBody(
            f"Invalid search request body: {exc.error_count()} error(s)"
        ) from exc

    groups = payload.filter_groups or []
    enforce_hard_caps(groups)

    limit = clamp_page_size(payload.limit) if payload.limit is not None else DEFAULT_PAGE_SIZE

    if payload.query:
        return SearchRequest(query=payload.query, limit=limit)

    return SearchRequest(
        filter_groups=list(groups),
        properties=payload.properties or default_properties(collection),
        limit=limit,
        after=payload.after,
        passthrough=dict(payload.model_extra or {}),
    )
