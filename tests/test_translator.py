"""Tests for text translation and result remapping."""

from __future__ import annotations

import pytest

from src.query.cost import CostBudget
from src.query.errors import TooManyFiltersInGroup, UnsupportedEndpoint
from src.query.operators import Operator
from src.query.schema import Item, SearchRequest, SearchResult
from src.query.translator import (
    remap_items,
    run_structured_search,
    run_text_query,
    translate,
)


class _FakeSearchClient:
    def __init__(self, result: SearchResult) -> None:
        self.result = result
        self.calls: list[tuple[str, SearchRequest]] = []

    async def search(self, collection: str, request: SearchRequest) -> SearchResult:
        """Record the call and return the canned result."""
        self.calls.append((collection, request))
        return self.result


def test_translate_full_query() -> None:
    translation = translate(
        'query { deals(filter: { amount__gte: "1000", dealstage__in: ["won", "open"] }, '
        "limit: 500, offset: 20) { items { dealname } } }"
    )

    assert translation.collection == "deals"
    request = translation.request
    assert request.limit == 200
    assert request.after == "20"
    assert request.properties == ["dealname", "amount", "dealstage"]
    [group] = request.filter_groups
    assert [(p.property_name, p.operator) for p in group.filters] == [
        ("amount", Operator.GTE),
        ("dealstage", Operator.IN),
    ]


def test_translate_without_filter_has_no_groups() -> None:
    translation = translate("{ contacts(limit: 5) { items } }")
    assert translation.request.filter_groups == []
    assert translation.request.limit == 5


def test_translate_requires_supported_collection() -> None:
    with pytest.raises(UnsupportedEndpoint):
        translate('{ widgets(filter: { name__eq: "x" }) }')


def test_translate_enforces_group_cap() -> None:
    clause = ", ".join(f'p{i}__eq: "x"' for i in range(7))
    with pytest.raises(TooManyFiltersInGroup):
        translate(f"{{ contacts(filter: {{ {clause} }}) }}")


def test_remap_items_charges_cost_per_property() -> None:
    items = [
        Item(id="1", properties={"a": "x", "b": "y", "c": ""}),
        Item(id="2", properties={"a": "x", "b": "y"}),
    ]
    budget = CostBudget()
    budget.charge_request()

    rows = remap_items(items, ["a", "b", "c"], budget)

    assert rows == [
        {"id": "1", "a": "x", "b": "y", "c": ""},
        {"id": "2", "a": "x", "b": "y", "c": None},
    ]
    assert budget.used == 374


@pytest.mark.asyncio
async def test_run_text_query_calls_search_once() -> None:
    client = _FakeSearchClient(
        SearchResult(
            results=[Item(id="7", properties={"email": "a@b.c", "firstname": "Ada"})],
            total=42,
        )
    )

    result = await run_text_query(
        client, '{ contacts(filter: { email__contains: "b.c" }, properties: ["email"]) }'
    )

    assert len(client.calls) == 1
    collection, request = client.calls[0]
    assert collection == "contacts"
    assert request.properties == ["email"]
    assert result.as_response() == {
        "data": {"contacts": {"items": [{"id": "7", "email": "a@b.c"}], "total": 42}},
        "extensions": {"query_complexity": {"used": 300 + 30 + 3, "max": 30_000}},
    }


@pytest.mark.asyncio
async def test_run_text_query_total_defaults_to_item_count() -> None:
    client = _FakeSearchClient(SearchResult(results=[Item(id="1"), Item(id="2")]))
    result = await run_text_query(client, "{ notes { items } }")
    assert result.total == 2


@pytest.mark.asyncio
async def test_rejected_query_never_reaches_client() -> None:
    client = _FakeSearchClient(SearchResult())
    budget = CostBudget()

    with pytest.raises(UnsupportedEndpoint):
        await run_text_query(client, "{ widgets { items } }", budget=budget)

    assert client.calls == []
    assert budget.used == 0


@pytest.mark.asyncio
async def test_run_structured_search_forwards_validated_request() -> None:
    client = _FakeSearchClient(SearchResult(total=0))

    outcome = await run_structured_search(client, "tickets", {"query": "refund", "limit": 999})

    assert client.calls[0][0] == "tickets"
    assert outcome.request.to_body() == {"query": "refund", "limit": 200}
    assert outcome.result.total == 0
