"""Backend ABC — the per-database strategy behind the adapter."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from sqlalchemy import Column, Integer, MetaData, String, Table, UniqueConstraint
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from rule_adapter.codec import ABSENT, VALUE_COLUMNS

if TYPE_CHECKING:
    from sqlalchemy.engine import URL
    from sqlalchemy.ext.asyncio import AsyncConnection
    from sqlalchemy.sql.elements import ColumnElement

    from rule_adapter.config import AdapterConfig


class Backend(ABC):
    """Everything that differs between database families.

    The predicate builder and batch protocol are shared; a backend only
    supplies the engine URL and pool, the column types of the rule table,
    and how a single filter element constrains its column.

    Class Variables:
        name: Registry key used in :attr:`AdapterConfig.backend`.
        driver: SQLAlchemy async driver name (e.g. ``"postgresql+asyncpg"``).
        default_port: Port used when the config leaves it unset.
    """

    name: ClassVar[str] = "base"
    driver: ClassVar[str] = ""
    default_port: ClassVar[int | None] = None

    @abstractmethod
    def url(self, config: AdapterConfig) -> URL:
        """Return the connection URL for *config*."""
        ...

    def engine_options(self, config: AdapterConfig) -> dict[str, Any]:
        """Keyword arguments for :func:`create_async_engine`."""
        return {
            "echo": config.echo,
            "pool_size": config.pool_size,
            "max_overflow": config.max_overflow,
            "pool_timeout": config.pool_timeout,
            "pool_pre_ping": True,
        }

    def connect(self, config: AdapterConfig) -> AsyncEngine:
        """Create the pooled engine.  No connection is opened until first use."""
        return create_async_engine(self.url(config), **self.engine_options(config))

    # ── schema ───────────────────────────────────────────────

    def ptype_type(self) -> String:
        return String()

    def value_type(self) -> String:
        return String()

    def table_options(self) -> dict[str, Any]:
        return {}

    def build_table(self, table_name: str, metadata: MetaData | None = None) -> Table:
        """Describe the rule table for this backend."""
        value_columns = [
            Column(col, self.value_type(), nullable=False, default=ABSENT, server_default=ABSENT)
            for col in VALUE_COLUMNS
        ]
        return Table(
            table_name,
            metadata if metadata is not None else MetaData(),
            Column("id", Integer, primary_key=True, autoincrement=True),
            Column("ptype", self.ptype_type(), nullable=False),
            *value_columns,
            UniqueConstraint("ptype", *VALUE_COLUMNS, name=f"uq_{table_name}_rule"),
            **self.table_options(),
        )

    async def create_schema(self, conn: AsyncConnection, table: Table) -> None:
        """Create the rule table if it does not exist yet."""
        await conn.run_sync(table.metadata.create_all, tables=[table], checkfirst=True)

    # ── matching ─────────────────────────────────────────────

    def wildcard_predicate(self, column: ColumnElement[Any], value: str) -> ColumnElement[bool] | None:
        """Return the clause constraining *column* by one filter element.

        ``None`` means the element is a wildcard and the column is
        unconstrained.  Absent slots are stored as :data:`ABSENT` too, so
        plain equality covers every concrete value.
        """
        if value == ABSENT:
            return None
        return column == value
