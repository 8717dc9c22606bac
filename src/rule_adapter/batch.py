"""Batch mutation protocol — every write runs in exactly one transaction.

Each function takes an open connection, begins a transaction, and either
commits all of its statements or rolls all of them back.  Driver errors
surface as :class:`StorageError`; an exact delete that matches nothing
surfaces as :class:`NotFoundError`.  Both abort the transaction.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy import delete, insert
from sqlalchemy.exc import SQLAlchemyError

from rule_adapter.codec import decode
from rule_adapter.exceptions import AdapterError, NotFoundError, StorageError
from rule_adapter.filters import exact_predicate

if TYPE_CHECKING:
    from sqlalchemy import Table
    from sqlalchemy.ext.asyncio import AsyncConnection
    from sqlalchemy.sql.elements import ColumnElement

    from rule_adapter.codec import RuleRow

logger = logging.getLogger(__name__)


@asynccontextmanager
async def transaction(conn: AsyncConnection, operation: str) -> AsyncIterator[AsyncConnection]:
    """Run the block in one transaction, translating driver errors.

    Commits when the block exits normally.  Any exception rolls the
    transaction back and propagates; SQLAlchemy errors are re-raised as
    :class:`StorageError`.
    """
    try:
        async with conn.begin():
            yield conn
    except AdapterError:
        logger.warning("Rolled back '%s'", operation)
        raise
    except SQLAlchemyError as e:
        logger.warning("Rolled back '%s': %s", operation, e)
        raise StorageError(operation, str(e)) from e


def _not_found(row: RuleRow) -> NotFoundError:
    rule = decode(row)
    return NotFoundError(row.ptype, rule.values if rule else ())


async def _delete_one(conn: AsyncConnection, table: Table, row: RuleRow) -> None:
    result = await conn.execute(delete(table).where(exact_predicate(table, row)))
    if result.rowcount != 1:
        raise _not_found(row)


async def delete_exact(conn: AsyncConnection, table: Table, row: RuleRow) -> None:
    """Delete the one row equal to *row*; :class:`NotFoundError` if none matched."""
    async with transaction(conn, "remove_policy"):
        await _delete_one(conn, table, row)


async def delete_exact_many(conn: AsyncConnection, table: Table, rows: Sequence[RuleRow]) -> None:
    """Delete every row in *rows*, or none of them.

    Each row must match exactly one stored row; the first that does not
    aborts the whole batch.
    """
    async with transaction(conn, "remove_policies"):
        for row in rows:
            await _delete_one(conn, table, row)
    logger.debug("Removed %d rules from %s", len(rows), table.name)


async def delete_filtered(conn: AsyncConnection, table: Table, clause: ColumnElement[bool]) -> int:
    """Delete every row matching *clause* and return how many went."""
    async with transaction(conn, "remove_filtered_policy"):
        result = await conn.execute(delete(table).where(clause))
    return result.rowcount


async def insert_one(conn: AsyncConnection, table: Table, row: RuleRow) -> int:
    async with transaction(conn, "add_policy"):
        result = await conn.execute(insert(table).values(**row.as_params()))
    return result.rowcount


async def insert_many(conn: AsyncConnection, table: Table, rows: Sequence[RuleRow]) -> None:
    """Insert *rows* in one transaction; one duplicate aborts the batch."""
    async with transaction(conn, "add_policies"):
        await conn.execute(insert(table), [row.as_params() for row in rows])
    logger.debug("Added %d rules to %s", len(rows), table.name)


async def replace_all(conn: AsyncConnection, table: Table, rows: Sequence[RuleRow]) -> None:
    """Swap the whole table for *rows*.

    Readers at read-committed or above see either the old rule set or
    the new one, never the empty table in between.
    """
    async with transaction(conn, "save_policy"):
        await conn.execute(delete(table))
        if rows:
            await conn.execute(insert(table), [row.as_params() for row in rows])
    logger.debug("Replaced %s with %d rules", table.name, len(rows))
