"""Typed filter conditions consumed by :mod:`campaign_codex.db.query`."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel


class FilterOp(str, Enum):
    """Comparison operators for filter conditions.

    Negation is handled by the ``negate`` flag on FilterCondition,
    not by separate operators.
    """
    eq = "eq"
    in_ = "in_"
    ilike = "ilike"
    is_null = "is_null"


class SortDir(str, Enum):
    asc = "asc"
    desc = "desc"


class FilterCondition(BaseModel):
    """A single field comparison.

    A condition whose ``value`` is ``None`` is an unset optional filter and is
    skipped (``is_null`` excepted)::

        # type = 'npc'
        FilterCondition(field="type", value="npc")

        # parent_location_id IS NULL
        FilterCondition(field="parent_id", op=FilterOp.is_null, value=True)
    """
    field: str
    op: FilterOp = FilterOp.eq
    value: Any = None
    negate: bool = False
