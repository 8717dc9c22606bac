# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Connection configuration for the rule adapter.

The table name lives here rather than in a module constant so that
several adapters can manage different tables in one process.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from rule_adapter.exceptions import ConfigError

DEFAULT_TABLE_NAME = "casbin_rule"

_ENV_FIELDS = {
    "BACKEND": "backend",
    "HOST": "host",
    "PORT": "port",
    "USER": "username",
    "PASSWORD": "password",
    "NAME": "database",
    "TABLE": "table_name",
    "POOL_SIZE": "pool_size",
    "POOL_TIMEOUT": "pool_timeout",
}


class AdapterConfig(BaseModel):
    """Where the rules live and how the connection pool behaves.

    Attributes:
        backend: Database family ("postgres", "mysql" or "sqlite")
        host: Database server host
        port: Server port, ``None`` for the backend's default
        username: Login name
        password: Login password
        database: Database name; for SQLite, the database file path
        table_name: Table holding the rule rows
        pool_size: Number of pooled connections kept open
        max_overflow: Extra connections allowed beyond ``pool_size``
        pool_timeout: Seconds to wait for a free connection before failing
        echo: Log every SQL statement through SQLAlchemy
    """

    backend: str = "postgres"
    host: str = "127.0.0.1"
    port: int | None = None
    username: str | None = None
    password: str | None = None
    database: str = "casbin"
    table_name: str = DEFAULT_TABLE_NAME
    pool_size: int = Field(default=8, ge=1)
    max_overflow: int = Field(default=0, ge=0)
    pool_timeout: float = Field(default=30.0, gt=0)
    echo: bool = False

    def set_auth(self, username: str, password: str) -> None:
        self.username = username
        self.password = password

    @classmethod
    def from_env(
        cls,
        prefix: str = "CASBIN_DB_",
        environ: Mapping[str, str] | None = None,
    ) -> AdapterConfig:
        """Build a config from ``<prefix>BACKEND``, ``<prefix>HOST`` and friends.

        Unset variables fall back to the field defaults.

        Raises:
            ConfigError: If a variable holds a value of the wrong type
        """
        env = os.environ if environ is None else environ
        values = {
            field: env[prefix + suffix]
            for suffix, field in _ENV_FIELDS.items()
            if prefix + suffix in env
        }
        try:
            return cls.model_validate(values)
        except PydanticValidationError as e:
            raise ConfigError(f"Invalid {prefix}* environment: {e}") from e
