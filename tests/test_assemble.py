"""Tests for group assembly and the shared limit validator."""

from __future__ import annotations

from typing import Any

import pytest

from src.query.assemble import assemble, validate
from src.query.collections import SUPPORTED_COLLECTIONS
from src.query.errors import (
    InvalidRequestBody,
    TooManyFilterGroups,
    TooManyFiltersInGroup,
    TooManyTotalFilters,
    UnsupportedEndpoint,
)
from src.query.operators import Operator
from src.query.pagination import Pagination
from src.query.schema import Predicate


def _predicate(name: str = "email") -> Predicate:
    return Predicate(property_name=name, operator=Operator.EQ, value="x")


def _filter(name: str = "email") -> dict[str, Any]:
    return {"propertyName": name, "operator": "EQ", "value": "x"}


def _groups(*sizes: int) -> list[dict[str, Any]]:
    return [{"filters": [_filter(f"p{i}") for i in range(size)]} for size in sizes]


def test_assemble_without_predicates_has_no_groups() -> None:
    request = assemble([], ["email"], Pagination())

    assert request.filter_groups == []
    assert request.properties == ["email"]
    assert request.limit == 10
    assert request.after is None


def test_assemble_puts_all_predicates_in_one_group() -> None:
    predicates = [_predicate("a"), _predicate("b"), _predicate("c")]
    request = assemble(predicates, ["email"], Pagination(limit=50, after="10"))

    assert len(request.filter_groups) == 1
    assert [p.property_name for p in request.filter_groups[0].filters] == ["a", "b", "c"]
    assert request.limit == 50
    assert request.after == "10"


def test_assemble_explicit_properties_override_defaults() -> None:
    request = assemble([], ["email"], Pagination(), properties=["phone"])
    assert request.properties == ["phone"]


def test_assemble_rejects_more_than_six_predicates() -> None:
    with pytest.raises(TooManyFiltersInGroup):
        assemble([_predicate(str(i)) for i in range(7)], ["email"], Pagination())


def test_validate_unknown_collection_echoes_allow_list() -> None:
    with pytest.raises(UnsupportedEndpoint) as exc_info:
        validate("widgets", {"filterGroups": _groups(1, 1, 1, 1, 1, 1)})

    assert exc_info.value.payload() == {"supported_endpoints": list(SUPPORTED_COLLECTIONS)}
    assert len(SUPPORTED_COLLECTIONS) == 20


def test_validate_rejects_six_groups_even_if_each_is_small() -> None:
    with pytest.raises(TooManyFilterGroups):
        validate("contacts", {"filterGroups": _groups(1, 1, 1, 1, 1, 1)})


def test_validate_rejects_group_with_seven_filters() -> None:
    with pytest.raises(TooManyFiltersInGroup) as exc_info:
        validate("contacts", {"filterGroups": _groups(2, 7)})
    assert exc_info.value.group_index == 1


def test_validate_rejects_nineteen_total_filters() -> None:
    with pytest.raises(TooManyTotalFilters) as exc_info:
        validate("deals", {"filterGroups": _groups(4, 4, 4, 4, 3)})
    assert exc_info.value.count == 19


def test_validate_accepts_eighteen_total_filters() -> None:
    request = validate("deals", {"filterGroups": _groups(6, 6, 6)})
    assert request.total_filters() == 18


def test_group_count_is_checked_before_group_size() -> None:
    with pytest.raises(TooManyFilterGroups):
        validate("contacts", {"filterGroups": _groups(7, 1, 1, 1, 1, 1)})


def test_validate_clamps_limit() -> None:
    assert validate("contacts", {"limit": 500}).limit == 200
    assert validate("contacts", {"limit": 25}).limit == 25
    assert validate("contacts", {}).limit == 10


def test_validate_query_drops_filter_groups() -> None:
    request = validate(
        "contacts",
        {"query": "foo", "filterGroups": _groups(2), "properties": ["email"], "limit": 300},
    )

    assert request.to_body() == {"query": "foo", "limit": 200}


def test_validate_query_uses_default_limit() -> None:
    assert validate("contacts", {"query": "foo"}).to_body() == {"query": "foo", "limit": 10}


def test_validate_defaults_properties_per_collection() -> None:
    request = validate("contacts", {"filterGroups": _groups(1)})
    assert request.properties == ["firstname", "lastname", "email"]
    assert request.to_body()["filterGroups"] == _groups(1)


def test_validate_rejects_malformed_body() -> None:
    with pytest.raises(InvalidRequestBody):
        validate("contacts", {"limit": "lots"})


def test_validate_forwards_sorts_to_wire_body() -> None:
    sorts = [{"propertyName": "createdate", "direction": "DESCENDING"}]
    request = validate(
        "contacts",
        {"filterGroups": _groups(1), "sorts": sorts, "properties": ["email"]},
    )

    body = request.to_body()
    assert body["sorts"] == sorts
    assert body["properties"] == ["email"]


def test_validate_query_drops_sorts() -> None:
    sorts = [{"propertyName": "createdate", "direction": "DESCENDING"}]
    request = validate("contacts", {"query": "foo", "sorts": sorts})

    assert request.to_body() == {"query": "foo", "limit": 10}


def test_validate_rejects_non_object_body() -> None:
    with pytest.raises(InvalidRequestBody):
        validate("contacts", [{"filterGroups": []}])  # type: ignore[arg-type]
