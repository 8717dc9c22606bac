"""Tests for CasbinAdapter with a real casbin.AsyncEnforcer."""

from pathlib import Path

import casbin
import pytest

from rule_adapter import NotFoundError, Rule, RuleFilter
from rule_adapter.enforcer import CasbinAdapter

MODEL_PATH = str(Path(__file__).parent / "fixtures" / "rbac_model.conf")


@pytest.fixture
def casbin_adapter(seeded):
    return CasbinAdapter(seeded)


@pytest.fixture
async def enforcer(casbin_adapter):
    e = casbin.AsyncEnforcer(MODEL_PATH, casbin_adapter)
    await e.load_policy()
    return e


def new_model():
    model = casbin.Model()
    model.load_model(MODEL_PATH)
    return model


async def test_load_policy_into_enforcer(enforcer):
    assert enforcer.enforce("alice", "data1", "read")
    assert enforcer.enforce("alice", "data2", "write")  # through data2_admin
    assert enforcer.enforce("bob", "data2", "write")
    assert not enforcer.enforce("bob", "data1", "read")


async def test_add_policy_is_persisted(enforcer, casbin_adapter):
    assert await enforcer.add_policy("carol", "data3", "read")
    assert Rule("p", ("carol", "data3", "read")) in await casbin_adapter.rules.load_all()


async def test_remove_policy_is_persisted(enforcer, casbin_adapter):
    assert await enforcer.remove_policy("alice", "data1", "read")
    assert Rule("p", ("alice", "data1", "read")) not in await casbin_adapter.rules.load_all()


async def test_remove_filtered_policy_is_persisted(enforcer, casbin_adapter):
    assert await enforcer.remove_filtered_policy(0, "data2_admin")
    rules = await casbin_adapter.rules.load_all()
    assert {r.values[0] for r in rules if r.rule_type == "p"} == {"alice", "bob"}


async def test_save_policy_replaces_stored_rules(casbin_adapter):
    model = new_model()
    model.add_policy("p", "p", ["carol", "data3", "read"])
    model.add_policy("g", "g", ["carol", "data3_admin"])

    assert await casbin_adapter.save_policy(model)
    rules = await casbin_adapter.rules.load_all()
    assert sorted(rules) == [
        Rule("g", ("carol", "data3_admin")),
        Rule("p", ("carol", "data3", "read")),
    ]


async def test_load_filtered_policy(casbin_adapter):
    model = new_model()
    await casbin_adapter.load_filtered_policy(model, RuleFilter("p", 0, ("alice",)))

    assert casbin_adapter.is_filtered()
    assert model.get_policy("p", "p") == [["alice", "data1", "read"]]
    assert model.get_policy("g", "g") == []


async def test_add_and_remove_policies(casbin_adapter):
    rules = [["carol", "data3", "read"], ["carol", "data3", "write"]]
    assert await casbin_adapter.add_policies("p", "p", rules)
    assert await casbin_adapter.remove_policies("p", "p", rules)
    assert len(await casbin_adapter.rules.load_all()) == 5


async def test_remove_missing_policy_raises(casbin_adapter):
    with pytest.raises(NotFoundError):
        await casbin_adapter.remove_policy("p", "p", ["nobody", "nothing", "never"])


async def test_load_policy_keeps_values_verbatim(adapter):
    await adapter.add_one("p", ["alice", "data1,data2", "read"])
    await adapter.add_one("p", [" bob ", "data3", "write "])
    casbin_adapter = CasbinAdapter(adapter)
    model = new_model()

    await casbin_adapter.load_policy(model)

    assert model.get_policy("p", "p") == [
        ["alice", "data1,data2", "read"],
        [" bob ", "data3", "write "],
    ]


async def test_comma_bearing_rule_can_be_removed_after_load(adapter):
    await adapter.add_one("p", ["alice", "data1,data2", "read"])
    e = casbin.AsyncEnforcer(MODEL_PATH, CasbinAdapter(adapter))
    await e.load_policy()

    assert await e.remove_policy("alice", "data1,data2", "read")
    assert await adapter.load_all() == []


async def test_load_policy_skips_types_missing_from_model(adapter):
    await adapter.add_one("p2", ["alice", "data1", "read"])
    await adapter.add_one("p", ["bob", "data2", "write"])
    model = new_model()

    await CasbinAdapter(adapter).load_policy(model)

    assert "p2" not in model.model["p"]
    assert model.get_policy("p", "p") == [["bob", "data2", "write"]]
