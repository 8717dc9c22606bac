"""Rule row codec — variable-arity rule tuples to fixed six-slot rows and back."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass
from typing import Any, NamedTuple

FIELD_COUNT = 6
ABSENT = ""

VALUE_COLUMNS: tuple[str, ...] = tuple(f"v{i}" for i in range(FIELD_COUNT))


class Rule(NamedTuple):
    """A policy tuple as the engine sees it: ``("p", ("alice", "data1", "read"))``."""

    rule_type: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class RuleRow:
    """One stored rule: a type tag plus exactly six positional value slots.

    Slots past the rule's arity hold :data:`ABSENT`.
    """

    ptype: str
    v0: str = ABSENT
    v1: str = ABSENT
    v2: str = ABSENT
    v3: str = ABSENT
    v4: str = ABSENT
    v5: str = ABSENT

    @property
    def values(self) -> tuple[str, ...]:
        return (self.v0, self.v1, self.v2, self.v3, self.v4, self.v5)

    def as_params(self) -> dict[str, str]:
        """Return the row as insert parameters keyed by column name."""
        return asdict(self)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> RuleRow:
        """Build a row from a SQL result mapping.

        ``NULL`` columns (rows written by tools using nullable columns) are
        read back as :data:`ABSENT`.
        """
        ptype = mapping["ptype"] or ""
        slots = {col: _absent_if_null(mapping.get(col)) for col in VALUE_COLUMNS}
        return cls(ptype=ptype, **slots)


def _absent_if_null(value: str | None) -> str:
    return ABSENT if value is None else value


def normalize(values: Sequence[str], field_index: int = 0) -> list[str]:
    """Pad *values* with :data:`ABSENT` up to the ``6 - field_index`` remaining slots."""
    width = FIELD_COUNT - field_index
    padded = list(values[:width])
    padded.extend([ABSENT] * (width - len(padded)))
    return padded


def encode(rule_type: str, values: Sequence[str]) -> RuleRow | None:
    """Encode a rule tuple into a six-slot row.

    Returns ``None`` when *rule_type* is blank, or *values* is empty or wider
    than the row.
    """
    if not rule_type or not rule_type.strip():
        return None
    if not values or len(values) > FIELD_COUNT:
        return None
    return RuleRow(rule_type, *normalize(values))


def decode(row: RuleRow) -> Rule | None:
    """Decode a row back into a rule, dropping every trailing absent slot.

    Returns ``None`` for a blank type or when no value survives.
    """
    if not row.ptype or not row.ptype.strip():
        return None
    values = list(row.values)
    while values and values[-1] == ABSENT:
        values.pop()
    if not values:
        return None
    return Rule(row.ptype, tuple(values))
