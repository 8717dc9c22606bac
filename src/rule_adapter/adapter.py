"""RuleAdapter — the operations a policy engine calls to persist its rules."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterable, Sequence
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from rule_adapter import batch
from rule_adapter.backends import BackendFactory
from rule_adapter.codec import Rule, RuleRow, decode, encode
from rule_adapter.exceptions import PoolError, StorageError, ValidationError
from rule_adapter.filters import RuleFilter, filter_predicate, is_valid_filter

if TYPE_CHECKING:
    from sqlalchemy import Table
    from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
    from sqlalchemy.sql.elements import ColumnElement

    from rule_adapter.backends.base import Backend
    from rule_adapter.config import AdapterConfig

logger = logging.getLogger(__name__)


class RuleAdapter:
    """Stores policy rules in one relational table.

    Every call checks out its own pooled connection and returns it when
    done, so one adapter can be shared across tasks.  Writes go through
    :mod:`rule_adapter.batch` and are atomic.

    Parameters:
        config:  Connection and pool settings.
        backend: Backend to use instead of the one named by
                 ``config.backend``.

    Example:
        adapter = await RuleAdapter.create(AdapterConfig(backend="sqlite", database="rules.db"))
        await adapter.add_one("p", ["alice", "data1", "read"])
        rules = await adapter.load_all()
    """

    def __init__(self, config: AdapterConfig, backend: Backend | None = None) -> None:
        self._config = config
        self._backend: Backend = backend or BackendFactory.create(config.backend)
        self._table: Table = self._backend.build_table(config.table_name)
        self._engine: AsyncEngine = self._backend.connect(config)

    @classmethod
    async def create(cls, config: AdapterConfig, backend: Backend | None = None) -> RuleAdapter:
        """Build an adapter and make sure its table exists."""
        adapter = cls(config, backend)
        await adapter.create_schema()
        return adapter

    async def create_schema(self) -> None:
        async with self._checkout() as conn:
            async with batch.transaction(conn, "create_schema"):
                await self._backend.create_schema(conn, self._table)
        logger.info("Rule table '%s' ready (%s)", self._table.name, self._backend.name)

    async def close(self) -> None:
        await self._engine.dispose()
        logger.info("Disposed engine for '%s'", self._table.name)

    async def __aenter__(self) -> RuleAdapter:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ── connection handling ──────────────────────────────────

    @asynccontextmanager
    async def _checkout(self) -> AsyncIterator[AsyncConnection]:
        """Borrow a connection; failures to get one raise :class:`PoolError`."""
        try:
            conn = await self._engine.connect()
        except (PoolTimeoutError, DBAPIError, OSError) as e:
            raise PoolError(str(e)) from e
        try:
            yield conn
        finally:
            await conn.close()

    # ── loading ──────────────────────────────────────────────

    async def load_all(self) -> list[Rule]:
        """Return every stored rule, skipping rows that decode to nothing."""
        return await self._load(None, "load_policy")

    async def load_filtered(self, rule_filter: RuleFilter) -> list[Rule]:
        """Return the stored rules matching *rule_filter*.

        Raises:
            ValidationError: If the filter's offset or width is out of range
        """
        if not is_valid_filter(rule_filter.field_index, rule_filter.values):
            raise ValidationError(
                f"Filter of {len(rule_filter.values)} values does not fit "
                f"at field index {rule_filter.field_index}"
            )
        clause = filter_predicate(
            self._table,
            self._backend,
            rule_filter.rule_type,
            rule_filter.field_index,
            rule_filter.values,
        )
        return await self._load(clause, "load_filtered_policy")

    async def _load(self, clause: ColumnElement[bool] | None, operation: str) -> list[Rule]:
        stmt = select(self._table).order_by(self._table.c.id)
        if clause is not None:
            stmt = stmt.where(clause)
        async with self._checkout() as conn:
            try:
                result = await conn.execute(stmt)
                mappings = result.mappings().all()
            except SQLAlchemyError as e:
                raise StorageError(operation, str(e)) from e
        rules = []
        for mapping in mappings:
            rule = decode(RuleRow.from_mapping(mapping))
            if rule is not None:
                rules.append(rule)
        logger.debug("Loaded %d rules from '%s'", len(rules), self._table.name)
        return rules

    # ── writing ──────────────────────────────────────────────

    async def save_all(self, rules: Iterable[tuple[str, Sequence[str]]]) -> None:
        """Replace every stored rule with *rules* in one transaction."""
        rows = [_encode_or_raise(rule_type, values) for rule_type, values in rules]
        async with self._checkout() as conn:
            await batch.replace_all(conn, self._table, rows)

    async def add_one(self, rule_type: str, values: Sequence[str]) -> bool:
        """Insert one rule.  A duplicate raises :class:`StorageError`."""
        row = _encode_or_raise(rule_type, values)
        async with self._checkout() as conn:
            count = await batch.insert_one(conn, self._table, row)
        return count == 1

    async def add_many(self, rule_type: str, values_list: Sequence[Sequence[str]]) -> bool:
        """Insert all of *values_list* or none of it."""
        rows = [_encode_or_raise(rule_type, values) for values in values_list]
        if not rows:
            return True
        async with self._checkout() as conn:
            await batch.insert_many(conn, self._table, rows)
        return True

    # ── removing ─────────────────────────────────────────────

    async def remove_one(self, rule_type: str, values: Sequence[str]) -> bool:
        """Delete one rule.

        Raises:
            NotFoundError: If no stored rule equals ``(rule_type, values)``
        """
        row = _encode_or_raise(rule_type, values)
        async with self._checkout() as conn:
            await batch.delete_exact(conn, self._table, row)
        return True

    async def remove_many(self, rule_type: str, values_list: Sequence[Sequence[str]]) -> bool:
        """Delete all of *values_list* or, if any is missing, none of it."""
        rows = [_encode_or_raise(rule_type, values) for values in values_list]
        if not rows:
            return True
        async with self._checkout() as conn:
            await batch.delete_exact_many(conn, self._table, rows)
        return True

    async def remove_by_filter(self, rule_type: str, field_index: int, values: Sequence[str]) -> bool:
        """Delete every rule of *rule_type* matching the filter.

        Returns ``True`` if at least one rule was removed.  A filter that
        does not fit the row returns ``False`` without touching storage.
        """
        if not rule_type or not is_valid_filter(field_index, values):
            logger.debug("Rejected filter at field index %d: %r", field_index, list(values))
            return False
        clause = filter_predicate(self._table, self._backend, rule_type, field_index, values)
        async with self._checkout() as conn:
            count = await batch.delete_filtered(conn, self._table, clause)
        logger.debug("Filter removed %d '%s' rules", count, rule_type)
        return count > 0

    # ── introspection ────────────────────────────────────────

    @property
    def config(self) -> AdapterConfig:
        return self._config

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def table(self) -> Table:
        return self._table


def _encode_or_raise(rule_type: str, values: Sequence[str]) -> RuleRow:
    row = encode(rule_type, values)
    if row is None:
        raise ValidationError(
            f"Cannot store rule type {rule_type!r} with {len(values)} values "
            "(need a non-blank type and 1-6 values)"
        )
    return row
