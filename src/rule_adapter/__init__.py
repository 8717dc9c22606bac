"""rule_adapter — relational storage for access-control policy rules.

Rules are variable-length string tuples tagged with a rule type.  Each is
stored as one fixed six-slot row; writes are transactional and removal
filters run entirely inside SQL.
"""

from rule_adapter.adapter import RuleAdapter
from rule_adapter.codec import Rule, RuleRow, decode, encode
from rule_adapter.config import AdapterConfig
from rule_adapter.exceptions import (
    AdapterError,
    ConfigError,
    NotFoundError,
    PoolError,
    StorageError,
    ValidationError,
)
from rule_adapter.filters import RuleFilter

__all__ = [
    "AdapterConfig",
    "AdapterError",
    "ConfigError",
    "NotFoundError",
    "PoolError",
    "Rule",
    "RuleAdapter",
    "RuleFilter",
    "RuleRow",
    "StorageError",
    "ValidationError",
    "decode",
    "encode",
]
