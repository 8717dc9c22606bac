"""Database backends for rule storage."""

from rule_adapter.backends.base import Backend
from rule_adapter.backends.factory import BackendFactory
from rule_adapter.backends.mysql import MySQLBackend
from rule_adapter.backends.postgres import PostgresBackend
from rule_adapter.backends.sqlite import SQLiteBackend

__all__ = ["Backend", "BackendFactory", "MySQLBackend", "PostgresBackend", "SQLiteBackend"]
