"""Composable helpers that turn optional list filters into SQL predicates.

Filters are carried as typed :class:`FilterCondition` values and resolved
against an explicit whitelist of columns, so the predicate and its bound value
always travel together:

- apply_filters: adds WHERE clauses from FilterCondition lists
- search_across: builds a handler that matches a term against several columns
- apply_ordering: adds a fixed ORDER BY with optional NULLS LAST
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any

from sqlalchemy import Select, asc, desc, not_, or_

from campaign_codex.schemas.query import FilterCondition, FilterOp, SortDir

FilterHandler = Callable[[FilterOp, Any], Any]


def apply_filters(
    statement: Select,
    conditions: Iterable[FilterCondition],
    allowed_fields: dict[str, Any],
) -> Select:
    """Apply filter conditions to a Select statement.

    ``allowed_fields`` maps field names to SQLAlchemy column expressions **or
    callables**. A callable value receives ``(op, value)`` and must return a
    SA clause element (or *None* to skip).

    Unknown fields are silently skipped, as are conditions without a value.
    """
    for cond in conditions:
        clause = _resolve_condition(cond, allowed_fields)
        if clause is not None:
            statement = statement.where(clause)
    return statement


def _resolve_condition(cond: FilterCondition, allowed_fields: dict[str, Any]):
    if cond.value is None or cond.value == "":
        return None

    col_or_handler = allowed_fields.get(cond.field)
    if col_or_handler is None:
        return None

    if callable(col_or_handler) and not hasattr(col_or_handler, "__clause_element__"):
        clause = col_or_handler(cond.op, cond.value)
    else:
        clause = _build_filter_clause(col_or_handler, cond.op, cond.value)

    if clause is None:
        return None

    return not_(clause) if cond.negate else clause


def _build_filter_clause(col: Any, op: FilterOp, value: Any):
    if op == FilterOp.eq:
        return col == value
    if op == FilterOp.in_:
        if not value:
            return None
        return col.in_(tuple(value))
    if op == FilterOp.ilike:
        return col.ilike(f"%{value}%")
    if op == FilterOp.is_null:
        return col.is_(None) if value else col.is_not(None)
    return None


def search_across(*columns: Any) -> FilterHandler:
    """Return a handler matching a free-text term against any of *columns*."""

    def handler(op: FilterOp, value: Any):
        term = str(value).strip()
        if not term:
            return None
        return or_(*(column.ilike(f"%{term}%") for column in columns))

    return handler


def apply_ordering(
    statement: Select,
    ordering: Sequence[tuple[Any, SortDir]],
    *,
    nulls_last: bool = False,
) -> Select:
    for col, direction in ordering:
        order = desc(col) if direction == SortDir.desc else asc(col)
        if nulls_last:
            order = order.nulls_last()
        statement = statement.order_by(order)
    return statement
