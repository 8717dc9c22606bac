"""Tests for the filter predicate builder."""

import pytest

from rule_adapter.backends import MySQLBackend, SQLiteBackend
from rule_adapter.codec import encode
from rule_adapter.filters import exact_predicate, filter_predicate, is_valid_filter


@pytest.fixture
def backend():
    return SQLiteBackend()


@pytest.fixture
def table(backend):
    return backend.build_table("casbin_rule")


def render(clause) -> str:
    return str(clause.compile(compile_kwargs={"literal_binds": True}))


@pytest.mark.parametrize(
    ("field_index", "count", "valid"),
    [
        (0, 1, True),
        (0, 6, True),
        (0, 7, False),
        (1, 5, True),
        (1, 6, False),
        (5, 1, True),
        (5, 2, False),
        (6, 1, False),
        (-1, 1, False),
        (0, 0, False),
    ],
)
def test_is_valid_filter(field_index, count, valid):
    assert is_valid_filter(field_index, ["x"] * count) is valid


def test_offset_maps_values_to_later_columns(table, backend):
    sql = render(filter_predicate(table, backend, "g", 1, ["data2_admin", "domain1", "domain2"]))
    assert "casbin_rule.ptype = 'g'" in sql
    assert "casbin_rule.v1 = 'data2_admin'" in sql
    assert "casbin_rule.v2 = 'domain1'" in sql
    assert "casbin_rule.v3 = 'domain2'" in sql
    assert "v0" not in sql
    assert "v4" not in sql


def test_wildcard_elements_are_unconstrained(table, backend):
    sql = render(filter_predicate(table, backend, "p", 0, ["", "data2", ""]))
    assert "casbin_rule.v1 = 'data2'" in sql
    assert "v0" not in sql
    assert "v2" not in sql


def test_last_slot_offset(table, backend):
    sql = render(filter_predicate(table, backend, "p", 5, ["x"]))
    assert "casbin_rule.v5 = 'x'" in sql


def test_no_rule_type_and_all_wildcards_matches_everything(table, backend):
    sql = render(filter_predicate(table, backend, None, 0, ["", ""]))
    assert "ptype" not in sql
    assert "v0" not in sql


def test_exact_predicate_constrains_every_column(table):
    sql = render(exact_predicate(table, encode("p", ["alice", "data1", "read"])))
    assert "casbin_rule.ptype = 'p'" in sql
    assert "casbin_rule.v2 = 'read'" in sql
    for col in ("v3", "v4", "v5"):
        assert f"casbin_rule.{col} = ''" in sql


def test_wildcard_predicate_is_backend_independent():
    mysql_table = MySQLBackend().build_table("casbin_rule")
    sql = render(filter_predicate(mysql_table, MySQLBackend(), "p", 2, ["read"]))
    assert "casbin_rule.v2 = 'read'" in sql
