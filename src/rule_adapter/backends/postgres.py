"""PostgresBackend — PostgreSQL through asyncpg."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from sqlalchemy.engine import URL

from rule_adapter.backends.base import Backend

if TYPE_CHECKING:
    from rule_adapter.config import AdapterConfig


class PostgresBackend(Backend):
    """PostgreSQL through ``postgresql+asyncpg``.  Unbounded ``VARCHAR`` columns."""

    name: ClassVar[str] = "postgres"
    driver: ClassVar[str] = "postgresql+asyncpg"
    default_port: ClassVar[int | None] = 5432

    def url(self, config: AdapterConfig) -> URL:
        return URL.create(
            self.driver,
            username=config.username,
            password=config.password,
            host=config.host,
            port=config.port or self.default_port,
            database=config.database,
        )
