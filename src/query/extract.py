"""Predicate extraction from GraphQL-flavored filter clauses.

A text query carries its filters in a `filter: { ... }` clause whose keys are property names tagged
with an operator suffix:

    contacts(filter: { email__contains: "acme", age__gte: "30", tags__in: ["a", "b"] }, limit: 20)

The scanner is deliberately shallow:
    - the clause ends at the first `}` after `filter:` (a single-level brace scan; nested objects such
      as a `between` value truncate the clause at their own closing brace),
    - each operator is matched independently with its own pattern, so the output order is scalar
      operators (table order), then `between`, then list operators,
    - anything that does not match a known shape (unknown suffix, unterminated quote) is ignored.
"""

from __future__ import annotations

import re

from src.query.operators import (
    BETWEEN_SUFFIX,
    SUFFIX_SEPARATOR,
    Operator,
    ValueShape,
    suffixes_with_shape,
)
from src.query.schema import Predicate

_FILTER_CLAUSE_RE = re.compile(r"filter:\s*\{([^}]*)\}")
_PROPERTIES_RE = re.compile(r"\bproperties:\s*\[([^\]]*)\]")

_FIELD = r"(?P<field>\w+)"
_QUOTED = r'"(?P<value>[^"]*)"'


def _scalar_pattern(suffix: str) -> re.Pattern[str]:
    return re.compile(rf"{_FIELD}{SUFFIX_SEPARATOR}{re.escape(suffix)}:\s*{_QUOTED}")


def _array_pattern(suffix: str) -> re.Pattern[str]:
    return re.compile(
        rf"{_FIELD}{SUFFIX_SEPARATOR}{re.escape(suffix)}:\s*\[(?P<items>[^\]]*)\]"
    )


_SCALAR_PATTERNS: list[tuple[re.Pattern[str], Operator]] = [
    (_scalar_pattern(suffix), op) for suffix, op in suffixes_with_shape(ValueShape.scalar)
]

_ARRAY_PATTERNS: list[tuple[re.Pattern[str], Operator]] = [
    (_array_pattern(suffix), op) for suffix, op in suffixes_with_shape(ValueShape.array)
]

# The closing brace of the between object is not required: it terminates the clause.
_BETWEEN_RE = re.compile(
    rf'{_FIELD}{SUFFIX_SEPARATOR}{BETWEEN_SUFFIX}:\s*\{{\s*value:\s*"(?P<low>[^"]*)"\s*,'
    r'\s*highValue:\s*"(?P<high>[^"]*)"'
)


def extract_filter_clause(raw_text: str) -> str | None:
    """Return the text between `filter: {` and the first following `}`, if any."""

    match = _FILTER_CLAUSE_RE.search(raw_text or "")
    if match is None:
        return None
    return match.group(1)


def _split_list(items: str) -> list[str]:
    # Empty elements are kept as "" (e.g. `[]` yields `[""]`).
    return [element.strip().strip("\"'").strip() for element in items.split(",")]


def _scan_scalars(clause: str) -> list[Predicate]:
    predicates: list[Predicate] = []
    for pattern, op in _SCALAR_PATTERNS:
        for m in pattern.finditer(clause):
            predicates.append(
                Predicate(property_name=m.group("field"), operator=op, value=m.group("value"))
            )
    return predicates


def _scan_between(clause: str) -> list[Predicate]:
    m = _BETWEEN_RE.search(clause)
    if m is None:
        return []
    return [
        Predicate(
            property_name=m.group("field"),
            operator=Operator.BETWEEN,
            value=m.group("low"),
            high_value=m.group("high"),
        )
    ]


def _scan_arrays(clause: str) -> list[Predicate]:
    predicates: list[Predicate] = []
    for pattern, op in _ARRAY_PATTERNS:
        for m in pattern.finditer(clause):
            predicates.append(
                Predicate(
                    property_name=m.group("field"),
                    operator=op,
                    values=_split_list(m.group("items")),
                )
            )
    return predicates


def extract_predicates(raw_text: str) -> list[Predicate]:
    """Extract all predicates from the query's filter clause.

    Returns an empty list when the text has no `filter: { ... }` clause.
    """

    clause = extract_filter_clause(raw_text)
    if clause is None:
        return []

    return [*_scan_scalars(clause), *_scan_between(clause), *_scan_arrays(clause)]


def extract_properties(raw_text: str) -> list[str] | None:
    """Return the fields named by a `properties: [...]` directive, or `None` if absent."""

    match = _PROPERTIES_RE.search(raw_text or "")
    if match is None:
        return None
    fields = [f for f in _split_list(match.group(1)) if f]
    return fields or None
