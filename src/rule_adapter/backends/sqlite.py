"""SQLiteBackend — single-file storage through aiosqlite."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from sqlalchemy import event
from sqlalchemy.engine import URL

from rule_adapter.backends.base import Backend

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from rule_adapter.config import AdapterConfig

_MEMORY = ":memory:"


class SQLiteBackend(Backend):
    """SQLite through ``sqlite+aiosqlite``.

    ``AdapterConfig.database`` is the database file path.  ``":memory:"``
    gives a private in-memory database behind a single shared connection
    (``StaticPool``), useful for testing.  ``pool_size``, ``max_overflow``
    and ``pool_timeout`` are ignored there, checkout never raises
    :class:`PoolError`, and concurrent tasks share one transaction, so
    batch atomicity only holds for one task at a time.  Use a file path
    for concurrent access.

    pysqlite defers ``BEGIN`` until the first DML statement, which would
    leave the delete-then-insert of a full replace outside one
    transaction.  The engine therefore disables the driver's own
    transaction handling and emits ``BEGIN`` itself.
    """

    name: ClassVar[str] = "sqlite"
    driver: ClassVar[str] = "sqlite+aiosqlite"

    busy_timeout_ms: ClassVar[int] = 5000

    def url(self, config: AdapterConfig) -> URL:
        return URL.create(self.driver, database=config.database)

    def engine_options(self, config: AdapterConfig) -> dict[str, Any]:
        if config.database in ("", _MEMORY):
            # StaticPool: one connection, no pool sizing.
            return {"echo": config.echo}
        return super().engine_options(config)

    def connect(self, config: AdapterConfig) -> AsyncEngine:
        engine = super().connect(config)
        busy_timeout_ms = self.busy_timeout_ms

        @event.listens_for(engine.sync_engine, "connect")
        def _on_connect(dbapi_connection, connection_record) -> None:  # pragma: no cover - connection setup
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute(f"PRAGMA busy_timeout={busy_timeout_ms}")
            cursor.close()

        @event.listens_for(engine.sync_engine, "begin")
        def _on_begin(conn) -> None:  # pragma: no cover - connection setup
            conn.exec_driver_sql("BEGIN")

        return engine
