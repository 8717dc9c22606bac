"""Shared test fixtures."""

import pytest

from rule_adapter import AdapterConfig, RuleAdapter


@pytest.fixture
def config(tmp_path):
    return AdapterConfig(backend="sqlite", database=str(tmp_path / "rules.db"))


@pytest.fixture
async def adapter(config):
    adapter = await RuleAdapter.create(config)
    yield adapter
    await adapter.close()


@pytest.fixture
async def seeded(adapter):
    await adapter.save_all(
        [
            ("p", ["alice", "data1", "read"]),
            ("p", ["bob", "data2", "write"]),
            ("p", ["data2_admin", "data2", "read"]),
            ("p", ["data2_admin", "data2", "write"]),
            ("g", ["alice", "data2_admin"]),
        ]
    )
    return adapter
