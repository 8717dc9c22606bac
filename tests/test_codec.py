"""Tests for the rule row codec."""

import pytest

from rule_adapter.codec import ABSENT, Rule, RuleRow, decode, encode, normalize


@pytest.mark.parametrize(
    "values",
    [
        ("alice",),
        ("alice", "data2_admin"),
        ("alice", "data1", "read"),
        ("alice", "domain1", "data1", "read"),
        ("a", "b", "c", "d", "e"),
        ("a", "b", "c", "d", "e", "f"),
    ],
)
def test_round_trip(values):
    assert decode(encode("p", values)) == Rule("p", values)


def test_encode_fills_absent_slots():
    row = encode("p", ["alice", "data1", "read"])
    assert row == RuleRow("p", "alice", "data1", "read", ABSENT, ABSENT, ABSENT)


def test_encode_rejects_blank_rule_type():
    assert encode("", ["a"]) is None
    assert encode("   ", ["a"]) is None


def test_encode_rejects_empty_tuple():
    assert encode("p", []) is None


def test_encode_rejects_too_many_values():
    assert encode("p", ["a"] * 7) is None


def test_decode_drops_every_trailing_absent_slot():
    row = RuleRow("p", "alice", "data1", ABSENT, ABSENT, ABSENT, ABSENT)
    assert decode(row) == Rule("p", ("alice", "data1"))


def test_decode_keeps_inner_empty_values():
    row = encode("p", ["alice", "", "read"])
    assert decode(row) == Rule("p", ("alice", "", "read"))


def test_explicit_trailing_empty_value_is_not_preserved():
    assert decode(encode("p", ["alice", ""])) == Rule("p", ("alice",))


def test_decode_all_absent_is_none():
    assert decode(RuleRow("p")) is None


def test_decode_blank_rule_type_is_none():
    assert decode(RuleRow("", "alice")) is None


def test_from_mapping_reads_null_as_absent():
    mapping = {
        "id": 7,
        "ptype": "g",
        "v0": "alice",
        "v1": "admin",
        "v2": None,
        "v3": None,
        "v4": None,
        "v5": None,
    }
    row = RuleRow.from_mapping(mapping)
    assert row == RuleRow("g", "alice", "admin")
    assert decode(row) == Rule("g", ("alice", "admin"))


def test_as_params():
    params = encode("g", ["alice", "admin"]).as_params()
    assert params == {
        "ptype": "g",
        "v0": "alice",
        "v1": "admin",
        "v2": "",
        "v3": "",
        "v4": "",
        "v5": "",
    }


def test_normalize_pads_to_remaining_slots():
    assert normalize(["x"], 0) == ["x", "", "", "", "", ""]
    assert normalize(["x", "y"], 4) == ["x", "y"]
    assert normalize(["x"], 5) == ["x"]
