"""Query translation orchestration.

Two entry points share the same validation rules:
    - `translate` / `run_text_query`: a GraphQL-flavored text query is parsed into predicates and
      pagination, packed into one filter group and checked against the API limits;
    - `run_structured_search`: a caller-built request body is validated and forwarded.

Each invocation issues at most one downstream search and keeps no state between calls.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from src.query.assemble import assemble, validate
from src.query.collections import default_properties, detect_collection
from src.query.cost import CostBudget, RequestKind
from src.query.extract import extract_predicates, extract_properties
from src.query.pagination import extract_pagination
from src.query.schema import Item, SearchRequest, SearchResult


class SearchClient(Protocol):
    """Document-search collaborator."""

    async def search(self, collection: str, request: SearchRequest) -> SearchResult: ...


@dataclass(frozen=True)
class Translation:
    """A text query resolved to its target collection and validated request."""

    collection: str
    request: SearchRequest


@dataclass(frozen=True)
class QueryResult:
    """Remapped items for one text query plus the cost it incurred."""

    collection: str
    items: list[dict[str, Any]]
    total: int
    cost: CostBudget

    def as_response(self) -> dict[str, Any]:
        return {
            "data": {self.collection: {"items": self.items, "total": self.total}},
            "extensions": {"query_complexity": self.cost.as_dict()},
        }


@dataclass(frozen=True)
class SearchOutcome:
    """Validated structured request and the raw search response."""

    request: SearchRequest
    result: SearchResult


def translate(raw_text: str) -> Translation:
    """Translate a text query into a validated search request without any I/O.

    Raises:
        QueryValidationError: If no supported collection is named or a hard cap is exceeded.
    """

    collection = detect_collection(raw_text)
    request = assemble(
        extract_predicates(raw_text),
        default_properties(collection),
        extract_pagination(raw_text),
        properties=extract_properties(raw_text),
    )
    return Translation(collection=collection, request=request)


def remap_items(
        items: Sequence[Item],
        properties: Sequence[str],
        budget: CostBudget,
) -> list[dict[str, Any]]:
    """Flatten search hits into `{id, <property>: value}` rows, charging cost as values are copied.

    Every requested property appears on every row; missing ones are `None`.
    """

    rows: list[dict[str, Any]] = []
    for item in items:
        budget.charge_object()
        row: dict[str, Any] = {"id": item.id}
        for prop in properties:
            value = item.properties.get(prop)
            budget.charge_property(value)
            row[prop] = value
        rows.append(row)
    return rows


async def run_text_query(
        client: SearchClient,
        raw_text: str,
        *,
        budget: CostBudget | None = None,
) -> QueryResult:
    """Translate a text query, run it, and remap the results.

    Pass a `budget` to observe the cost accrued so far if the downstream call fails.
    """

    budget = budget if budget is not None else CostBudget()
    translation = translate(raw_text)

    budget.charge_request(RequestKind.collection_search)
    result = await client.search(translation.collection, translation.request)

    items = remap_items(result.results, translation.request.properties, budget)
    total = result.total if result.total is not None else len(items)
    return QueryResult(collection=translation.collection, items=items, total=total, cost=budget)


async def run_structured_search(
        client: SearchClient,
        collection: str,
        body: Mapping[str, Any] | None,
) -> SearchOutcome:
    """Validate a structured request body and forward it as one search."""

    request = validate(collection, body)
    result = await client.search(collection, request)
    return SearchOutcome(request=request, result=result)
