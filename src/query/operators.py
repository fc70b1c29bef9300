"""Filter operator table.

Maps the textual suffixes used in filter clauses (`age__gte`) to the canonical operator codes of the
CRM search API. The table is closed: a suffix that is not listed here is never matched by the
extractor.
"""

from __future__ import annotations

from enum import StrEnum


class Operator(StrEnum):
    """Canonical operator codes understood by the search API."""

    EQ = "EQ"
    NEQ = "NEQ"
    LT = "LT"
    LTE = "LTE"
    GT = "GT"
    GTE = "GTE"
    CONTAINS_TOKEN = "CONTAINS_TOKEN"
    NOT_CONTAINS_TOKEN = "NOT_CONTAINS_TOKEN"
    IN = "IN"
    NOT_IN = "NOT_IN"
    HAS_PROPERTY = "HAS_PROPERTY"
    NOT_HAS_PROPERTY = "NOT_HAS_PROPERTY"
    BETWEEN = "BETWEEN"


class ValueShape(StrEnum):
    """How many values a predicate carries for a given operator."""

    scalar = "scalar"
    array = "array"
    pair = "pair"


SUFFIX_SEPARATOR = "__"

# Ordered: scan order follows this table.
OPERATOR_SUFFIXES: dict[str, Operator] = {
    "eq": Operator.EQ,
    "neq": Operator.NEQ,
    "lt": Operator.LT,
    "lte": Operator.LTE,
    "gt": Operator.GT,
    "gte": Operator.GTE,
    "contains": Operator.CONTAINS_TOKEN,
    "not_contains": Operator.NOT_CONTAINS_TOKEN,
    "in": Operator.IN,
    "not_in": Operator.NOT_IN,
    "null": Operator.HAS_PROPERTY,
    "not_null": Operator.NOT_HAS_PROPERTY,
}

BETWEEN_SUFFIX = "between"

VALUE_SHAPES: dict[Operator, ValueShape] = {
    Operator.EQ: ValueShape.scalar,
    Operator.NEQ: ValueShape.scalar,
    Operator.LT: ValueShape.scalar,
    Operator.LTE: ValueShape.scalar,
    Operator.GT: ValueShape.scalar,
    Operator.GTE: ValueShape.scalar,
    Operator.CONTAINS_TOKEN: ValueShape.scalar,
    Operator.NOT_CONTAINS_TOKEN: ValueShape.scalar,
    Operator.IN: ValueShape.array,
    Operator.NOT_IN: ValueShape.array,
    Operator.HAS_PROPERTY: ValueShape.scalar,
    Operator.NOT_HAS_PROPERTY: ValueShape.scalar,
    Operator.BETWEEN: ValueShape.pair,
}


def resolve(suffix: str) -> Operator | None:
    """Resolve a textual suffix (without the `__` separator) to its operator code."""

    if suffix == BETWEEN_SUFFIX:
        return Operator.BETWEEN
    return OPERATOR_SUFFIXES.get(suffix)


def value_shape(operator: Operator) -> ValueShape:
    return VALUE_SHAPES[operator]


def suffixes_with_shape(shape: ValueShape) -> list[tuple[str, Operator]]:
    """Return `(suffix, operator)` pairs of the given shape, in table order."""

    return [(suffix, op) for suffix, op in OPERATOR_SUFFIXES.items() if VALUE_SHAPES[op] == shape]
