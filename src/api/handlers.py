"""Search endpoint handlers.

Framework-agnostic request handlers: each takes decoded JSON and returns an `ApiResponse` (status
code plus JSON body) for whatever HTTP layer mounts them. Exceptions from the query layer and the
search client are turned into error envelopes here and nowhere else.

Envelopes:
    - structured search: `{success, data, endpoint, request_body_size, rate_limit_info}` or
      `{error, endpoint, documentation}` with 400 / 503 / 500;
    - text query: `{data: {<collection>: {items, total}}, extensions}` or `{errors, extensions}`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from time import monotonic
from typing import Any

from src.app import App
from src.hubspot.client import DownstreamFailure
from src.hubspot.connection import CredentialMissing, require_search_client
from src.query.cost import CostBudget
from src.query.errors import QueryValidationError
from src.query.limits import (
    MAX_FILTER_GROUPS,
    MAX_FILTERS_PER_GROUP,
    MAX_PAGE_SIZE,
    MAX_TOTAL_FILTERS,
)
from src.query.translator import run_structured_search, run_text_query

logger = logging.getLogger(__name__)

DOCUMENTATION_URL = "https://developers.hubspot.com/docs/api/crm/search"
INTERNAL_ERROR_MESSAGE = "Internal error"

RATE_LIMIT_INFO: dict[str, int] = {
    "requests_per_second": 5,
    "max_limit": MAX_PAGE_SIZE,
    "max_filter_groups": MAX_FILTER_GROUPS,
    "max_filters_per_group": MAX_FILTERS_PER_GROUP,
    "max_total_filters": MAX_TOTAL_FILTERS,
}


@dataclass(frozen=True)
class ApiResponse:
    """HTTP status code plus JSON-serializable body."""

    status: int
    body: dict[str, Any]


def _latency_ms(started: float) -> int:
    return int((monotonic() - started) * 1000)


def _body_size(body: Mapping[str, Any]) -> int:
    return len(json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode())


def _search_error(status: int, message: str, endpoint: str, **extra: Any) -> ApiResponse:
    return ApiResponse(
        status=status,
        body={
            "error": message,
            "endpoint": endpoint,
            "documentation": DOCUMENTATION_URL,
            **extra,
        },
    )


async def handle_search(
        app: App,
        collection: str,
        body: Mapping[str, Any] | None,
) -> ApiResponse:
    """Handle `POST /api/hubspot/{collection}/search` with a structured request body."""

    started = monotonic()

    try:
        client = require_search_client(app.search_client)
        outcome = await run_structured_search(client, collection, body)
    except CredentialMissing as exc:
        logger.warning("search unavailable endpoint=%s reason=%s", collection, exc)
        return _search_error(503, str(exc), collection)
    except QueryValidationError as exc:
        logger.info(
            "search rejected endpoint=%s code=%s latency_ms=%d",
            collection,
            exc.code,
            _latency_ms(started),
        )
        return _search_error(400, str(exc), collection, **exc.payload())
    except DownstreamFailure as exc:
        logger.warning("search failed endpoint=%s reason=%s", collection, exc)
        return _search_error(500, str(exc), collection)
    except Exception:
        # Handler boundary: never leak internals to the caller.
        logger.exception("search handler failed endpoint=%s", collection)
        return _search_error(500, INTERNAL_ERROR_MESSAGE, collection)

    request_body = outcome.request.to_body()
    logger.info(
        "search endpoint=%s groups=%d filters=%d limit=%d results=%d latency_ms=%d",
        collection,
        len(outcome.request.filter_groups),
        outcome.request.total_filters(),
        outcome.request.limit,
        len(outcome.result.results),
        _latency_ms(started),
    )
    return ApiResponse(
        status=200,
        body={
            "success": True,
            "data": outcome.result.model_dump(mode="json"),
            "endpoint": collection,
            "request_body_size": _body_size(request_body),
            "rate_limit_info": dict(RATE_LIMIT_INFO),
        },
    )


def _query_errors(message: str, budget: CostBudget) -> ApiResponse:
    return ApiResponse(
        status=200,
        body={
            "errors": [{"message": message}],
            "extensions": {"query_complexity": budget.as_dict()},
        },
    )


async def handle_query(app: App, body: Mapping[str, Any] | None) -> ApiResponse:
    """Handle `POST /graphql` with a `{query}` body.

    Errors are reported GraphQL-style in `errors` with HTTP 200; the cost accrued so far is always
    returned in `extensions.query_complexity`.
    """

    started = monotonic()
    budget = CostBudget()

    query = body.get("query") if isinstance(body, Mapping) else None
    if not isinstance(query, str) or not query.strip():
        return _query_errors("query is required", budget)

    try:
        client = require_search_client(app.search_client)
        result = await run_text_query(client, query, budget=budget)
    except CredentialMissing as exc:
        logger.warning("query unavailable reason=%s", exc)
        return _query_errors(str(exc), budget)
    except QueryValidationError as exc:
        logger.info("query rejected code=%s latency_ms=%d", exc.code, _latency_ms(started))
        return _query_errors(str(exc), budget)
    except DownstreamFailure as exc:
        logger.warning("query failed reason=%s", exc)
        return _query_errors(str(exc), budget)
    except Exception:
        logger.exception("query handler failed")
        return _query_errors(INTERNAL_ERROR_MESSAGE, budget)

    if budget.exceeded:
        logger.warning("query cost over budget used=%d max=%d", budget.used, budget.max)

    logger.info(
        "query collection=%s items=%d total=%d cost=%d latency_ms=%d",
        result.collection,
        len(result.items),
        result.total,
        budget.used,
        _latency_ms(started),
    )
    return ApiResponse(status=200, body=result.as_response())
