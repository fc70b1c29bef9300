"""Search request schema (Pydantic models).

These models are the contract between the query translator and the CRM search client. Field names
follow Python conventions internally and serialize to the camelCase wire format of the search API
(`propertyName`, `filterGroups`, `highValue`).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.query.operators import Operator, ValueShape, value_shape

DEFAULT_LIMIT = 10


class Predicate(BaseModel):
    """A single property/operator/value comparison.

    Exactly one value slot is populated, chosen by the operator's value shape:
        - scalar operators use `value`,
        - `IN` / `NOT_IN` use `values`,
        - `BETWEEN` uses `value` as the low bound and `high_value` as the high bound.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    property_name: str = Field(alias="propertyName", min_length=1)
    operator: Operator
    value: str | None = None
    values: list[str] | None = None
    high_value: str | None = Field(default=None, alias="highValue")

    @model_validator(mode="after")
    def validate_value_shape(self) -> Predicate:
        """Enforce the one-value-shape-per-operator invariant."""

        shape = value_shape(self.operator)
        if shape == ValueShape.scalar:
            if self.value is None or self.values is not None or self.high_value is not None:
                raise ValueError(f"{self.operator} takes exactly one scalar value")
        elif shape == ValueShape.array:
            if self.values is None or self.value is not None or self.high_value is not None:
                raise ValueError(f"{self.operator} takes a list of values")
        else:
            if self.value is None or self.high_value is None or self.values is not None:
                raise ValueError(f"{self.operator} takes a low and a high value")
        return self

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class FilterGroup(BaseModel):
    """Predicates combined with AND; groups are combined with OR by the search API."""

    model_config = ConfigDict(extra="forbid")

    filters: list[Predicate] = Field(default_factory=list)

    def to_wire(self) -> dict[str, Any]:
        return {"filters": [p.to_wire() for p in self.filters]}


class RawFilterGroup(BaseModel):
    """A caller-supplied filter group forwarded without interpreting its filters."""

    model_config = ConfigDict(extra="allow")

    filters: list[dict[str, Any]] = Field(default_factory=list)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class SearchRequest(BaseModel):
    """A validated, bounded search request ready to be sent downstream.

    When `query` is set the request is a plain free-text search and serializes to `{query, limit}`
    only; filter groups, properties and `passthrough` fields are never combined with it.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    filter_groups: list[FilterGroup | RawFilterGroup] = Field(
        default_factory=list, alias="filterGroups"
    )
    properties: list[str] = Field(default_factory=list)
    limit: int = DEFAULT_LIMIT
    after: str | None = None
    query: str | None = None
    passthrough: dict[str, Any] = Field(default_factory=dict)

    def total_filters(self) -> int:
        return sum(len(group.filters) for group in self.filter_groups)

    def to_body(self) -> dict[str, Any]:
        """Serialize to the JSON body expected by the search endpoint."""

        if self.query is not None:
            return {"query": self.query, "limit": self.limit}

        body: dict[str, Any] = {
            "filterGroups": [group.to_wire() for group in self.filter_groups],
            "properties": list(self.properties),
            "limit": self.limit,
        }
        if self.after is not None:
            body["after"] = self.after
        for key, value in self.passthrough.items():
            body.setdefault(key, value)
        return body


class SearchRequestInput(BaseModel):
    """Structured request body as supplied by a caller of the search endpoint.

    Fields not modelled here (e.g. `sorts`) are kept in `model_extra` and forwarded as-is unless the
    request is reduced to a free-text query.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    filter_groups: list[RawFilterGroup] | None = Field(default=None, alias="filterGroups")
    query: str | None = None
    limit: int | None = None
    properties: list[str] | None = None
    after: str | None = None


class Item(BaseModel):
    """One search hit: an opaque id plus its property bag."""

    model_config = ConfigDict(extra="allow")

    id: str
    properties: dict[str, Any] = Field(default_factory=dict)


class SearchResult(BaseModel):
    """Search API response. Extra fields (e.g. `paging`) are preserved for pass-through."""

    model_config = ConfigDict(extra="allow")

    results: list[Item] = Field(default_factory=list)
    total: int | None = None
