"""Filter predicate builder — partial rules to SQL ``WHERE`` clauses.

A filter is a run of values starting at slot ``field_index``: element ``i``
constrains column ``v{field_index + i}``.  Elements equal to the absent
sentinel are wildcards.  Slots outside the run are never constrained.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, true

from rule_adapter.codec import FIELD_COUNT, VALUE_COLUMNS

if TYPE_CHECKING:
    from sqlalchemy import Table
    from sqlalchemy.sql.elements import ColumnElement

    from rule_adapter.backends.base import Backend
    from rule_adapter.codec import RuleRow


@dataclass(frozen=True)
class RuleFilter:
    """A partial rule used to select stored rules.

    Attributes:
        rule_type:   Rule type to match, or ``None`` for every type.
        field_index: Slot the first value applies to (0-5).
        values:      Values to match; ``""`` leaves a slot unconstrained.
    """

    rule_type: str | None = None
    field_index: int = 0
    values: tuple[str, ...] = ()


def is_valid_filter(field_index: int, values: Sequence[str]) -> bool:
    """Return ``True`` if *values* fit the slots from *field_index* onwards."""
    if not 0 <= field_index < FIELD_COUNT:
        return False
    return 0 < len(values) <= FIELD_COUNT - field_index


def exact_predicate(table: Table, row: RuleRow) -> ColumnElement[bool]:
    """Match the single stored row equal to *row* in every column."""
    clauses = [table.c.ptype == row.ptype]
    clauses.extend(table.c[col] == value for col, value in zip(VALUE_COLUMNS, row.values))
    return and_(*clauses)


def filter_predicate(
    table: Table,
    backend: Backend,
    rule_type: str | None,
    field_index: int,
    values: Sequence[str],
) -> ColumnElement[bool]:
    """Build the clause matching rows against a partial filter.

    Callers validate with :func:`is_valid_filter` first.
    """
    clauses: list[ColumnElement[Any]] = []
    if rule_type is not None:
        clauses.append(table.c.ptype == rule_type)
    for offset, value in enumerate(values):
        clause = backend.wildcard_predicate(table.c[VALUE_COLUMNS[field_index + offset]], value)
        if clause is not None:
            clauses.append(clause)
    if not clauses:
        return true()
    return and_(*clauses)
