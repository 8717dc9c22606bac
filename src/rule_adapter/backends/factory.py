# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Backend factory for selecting a database strategy from configuration.

Uses the Registry pattern to map backend names to backend classes,
allowing extensibility without modifying factory code.
"""

from __future__ import annotations

from typing import ClassVar

from rule_adapter.exceptions import ConfigError

from .base import Backend
from .mysql import MySQLBackend
from .postgres import PostgresBackend
from .sqlite import SQLiteBackend


class BackendFactory:
    """Creates backend instances by name.

    Example:
        backend = BackendFactory.create("sqlite")
        BackendFactory.register("cockroach", CockroachBackend)
    """

    # Class-level registry mapping backend names to backend classes
    _registry: ClassVar[dict[str, type[Backend]]] = {
        "postgres": PostgresBackend,
        "postgresql": PostgresBackend,
        "mysql": MySQLBackend,
        "sqlite": SQLiteBackend,
    }

    @classmethod
    def register(cls, name: str, backend_class: type[Backend]) -> None:
        """Register a custom backend.

        Args:
            name: Name to use in ``AdapterConfig.backend`` (case-insensitive)
            backend_class: Backend class to instantiate

        Raises:
            ValueError: If backend_class.name doesn't match name
        """
        key = name.lower()
        declared = backend_class.name
        if declared != "base" and declared.lower() != key:
            raise ValueError(
                f"Backend {backend_class.__name__} has name='{declared}' "
                f"but is being registered as '{name}'"
            )
        cls._registry[key] = backend_class

    @classmethod
    def registered_types(cls) -> list[str]:
        """Return list of registered backend names."""
        return list(cls._registry.keys())

    @classmethod
    def create(cls, name: str) -> Backend:
        """Instantiate the backend registered under *name* (case-insensitive).

        Raises:
            ConfigError: If no backend is registered under *name*
        """
        backend_class = cls._registry.get(name.lower())
        if not backend_class:
            available = ", ".join(sorted(cls.registered_types()))
            raise ConfigError(f"Unknown backend: '{name}'. Available backends: {available}")
        return backend_class()
