"""MySQLBackend — MySQL / MariaDB through aiomysql."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from sqlalchemy import String
from sqlalchemy.engine import URL

from rule_adapter.backends.base import Backend

if TYPE_CHECKING:
    from rule_adapter.config import AdapterConfig


class MySQLBackend(Backend):
    """MySQL through ``mysql+aiomysql``.

    InnoDB caps a unique key at 3072 bytes, so the seven key columns are
    bounded: ``VARCHAR(12)`` for the rule type and ``VARCHAR(128)`` for
    each value, stored as utf8.
    """

    name: ClassVar[str] = "mysql"
    driver: ClassVar[str] = "mysql+aiomysql"
    default_port: ClassVar[int | None] = 3306

    def url(self, config: AdapterConfig) -> URL:
        return URL.create(
            self.driver,
            username=config.username,
            password=config.password,
            host=config.host,
            port=config.port or self.default_port,
            database=config.database,
        )

    def ptype_type(self) -> String:
        return String(12)

    def value_type(self) -> String:
        return String(128)

    def table_options(self) -> dict[str, Any]:
        return {"mysql_engine": "InnoDB", "mysql_charset": "utf8"}
