"""Filter and sort parsing for ``find`` commands.

Filters are written ``<field><op><value>``:

======  =========================
``=``   EQUALS
``~``   CONTAINS
``!~``  NOT_CONTAINS
``@``   IN (comma-separated values)
``>``   GREATER_THAN
``<``   LESS_THAN
``>=``  GREATER_THAN_OR_EQUAL
``<=``  LESS_THAN_OR_EQUAL
======  =========================

Operators are tried in :data:`_OPERATORS` order (two-character ones first)
and the first one found after position 0 wins.  Tokens without any operator
are skipped with a debug message rather than failing the command, so shell
scripts stay forgiving.

Sorts are written ``<field>`` or ``<field>:<asc|desc>``.
"""

from __future__ import annotations

from typing import Iterable

from asacli.models import (
    Condition,
    ConditionOperator,
    OrderByItem,
    Selector,
    SelectorPagination,
    SortOrder,
)
from asacli.output import debug

_OPERATORS: tuple[tuple[str, ConditionOperator], ...] = (
    (">=", ConditionOperator.GREATER_THAN_OR_EQUAL),
    ("<=", ConditionOperator.LESS_THAN_OR_EQUAL),
    ("!~", ConditionOperator.NOT_CONTAINS),
    ("=", ConditionOperator.EQUALS),
    ("~", ConditionOperator.CONTAINS),
    ("@", ConditionOperator.IN),
    (">", ConditionOperator.GREATER_THAN),
    ("<", ConditionOperator.LESS_THAN),
)

_SORT_DIRECTIONS = {
    "asc": SortOrder.ASCENDING,
    "ascending": SortOrder.ASCENDING,
    "desc": SortOrder.DESCENDING,
    "descending": SortOrder.DESCENDING,
}


def parse_filter(token: str) -> Condition | None:
    """Parse one filter token, or return ``None`` if it has no operator."""
    for symbol, operator in _OPERATORS:
        idx = token.find(symbol)
        if idx > 0:
            field = token[:idx]
            value = token[idx + len(symbol):]
            values = value.split(",") if operator is ConditionOperator.IN else [value]
            return Condition(field=field, operator=operator, values=values)
    return None


def parse_filters(tokens: Iterable[str]) -> list[Condition]:
    """Parse filter tokens in order, skipping malformed ones."""
    conditions: list[Condition] = []
    for token in tokens:
        condition = parse_filter(token)
        if condition is None:
            debug(f"Ignoring filter without operator: {token!r}")
            continue
        conditions.append(condition)
    return conditions


def parse_sort(token: str) -> OrderByItem:
    field, _, direction = token.partition(":")
    order = _SORT_DIRECTIONS.get(direction.strip().lower(), SortOrder.ASCENDING)
    return OrderByItem(field=field, sort_order=order)


def parse_sorts(tokens: Iterable[str]) -> list[OrderByItem]:
    """Parse sort tokens; unknown directions fall back to ascending."""
    return [parse_sort(token) for token in tokens]


def build_selector(
    filters: Iterable[str] = (),
    sorts: Iterable[str] = (),
    limit: int = 1000,
    offset: int = 0,
) -> Selector:
    """Build a :class:`~asacli.models.Selector` from CLI tokens."""
    return Selector(
        conditions=parse_filters(filters),
        order_by=parse_sorts(sorts),
        pagination=SelectorPagination(offset=offset, limit=limit),
    )
