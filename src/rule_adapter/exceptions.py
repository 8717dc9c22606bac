"""Custom exceptions for the rule_adapter package."""

from __future__ import annotations

from collections.abc import Sequence


class AdapterError(Exception):
    """Base exception for all adapter errors."""


class ValidationError(AdapterError):
    """Raised when a rule or filter is rejected before any storage call."""


class ConfigError(AdapterError):
    """Raised when the adapter is misconfigured."""


class PoolError(AdapterError):
    """Raised when a connection cannot be checked out of the pool."""

    def __init__(self, detail: str = "") -> None:
        msg = "Could not acquire a database connection"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class StorageError(AdapterError):
    """Raised when a query or constraint fails inside the database."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        msg = f"Storage error during '{operation}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class NotFoundError(AdapterError):
    """Raised when an exact removal matched no stored rule."""

    def __init__(self, rule_type: str, values: Sequence[str]) -> None:
        self.rule_type = rule_type
        self.values = list(values)
        super().__init__(f"Rule not found: {rule_type}, {', '.join(self.values)}")
