"""Unit tests for the restricted YAML deserializer."""

from __future__ import annotations

import math
import time

import pytest

from safeconfig.errors import DuplicateKeyError, ParseFailure
from safeconfig.yaml_safe.deserializer import deserialize


@pytest.mark.parametrize(
    ("literal", "expected"),
    [
        ("true", True),
        ("False", False),
        ("YES", True),
        ("no", False),
        ("null", None),
        ("~", None),
        ("", None),
        ("42", 42),
        ("-7", -7),
        ("0x1F", 31),
        ("0o17", 15),
        ("3.5", 3.5),
        ("1e3", 1000.0),
        ("-.inf", float("-inf")),
        ("on", "on"),
        ("off", "off"),
        ("2001-12-14", "2001-12-14"),
        ("1_000", "1_000"),
        ("hello world", "hello world"),
    ],
)
def test_plain_scalars_follow_fixed_typing_precedence(literal: str, expected: object) -> None:
    """Plain scalars resolve to bool, null, int, float, or str, and nothing else."""

    value = deserialize(f"value: {literal}\n").value["value"]

    assert value == expected
    assert type(value) is type(expected)


def test_nan_scalar_becomes_float_nan() -> None:
    value = deserialize("value: .nan\n").value["value"]

    assert isinstance(value, float)
    assert math.isnan(value)


def test_quoted_scalars_stay_strings() -> None:
    tree = deserialize("a: \"true\"\nb: '42'\nc: \"null\"\n").value

    assert tree == {"a": "true", "b": "42", "c": "null"}


def test_nested_mappings_and_sequences_keep_document_order() -> None:
    text = "zeta: 1\nalpha:\n  items:\n    - one\n    - {name: two}\n"

    tree = deserialize(text).value

    assert list(tree) == ["zeta", "alpha"]
    assert tree["alpha"]["items"] == ["one", {"name": "two"}]


def test_mapping_keys_are_their_source_text() -> None:
    tree = deserialize("1: one\ntrue: yes\nnull: nothing\n").value

    assert tree == {"1": "one", "true": True, "null": "nothing"}


def test_empty_document_yields_none() -> None:
    assert deserialize("").value is None
    assert deserialize("# only a comment\n").value is None


def test_key_lines_index_nested_paths_and_sequence_items() -> None:
    text = "app:\n  name: svc\nservers:\n  - host: a\n  - host: b\n"

    key_lines = deserialize(text).key_lines

    assert key_lines["app"] == 1
    assert key_lines["app.name"] == 2
    assert key_lines["servers[0]"] == 4
    assert key_lines["servers[1].host"] == 5


def test_duplicate_key_is_rejected_with_line() -> None:
    with pytest.raises(DuplicateKeyError) as exc_info:
        deserialize("a: 1\na: 2\n")

    assert exc_info.value.line == 2
    assert exc_info.value.key == "a"
    assert "Duplicate key `a`" in exc_info.value.detail


def test_duplicate_keys_at_different_levels_are_allowed() -> None:
    tree = deserialize("a:\n  a: 1\nb:\n  a: 2\n").value

    assert tree == {"a": {"a": 1}, "b": {"a": 2}}


@pytest.mark.parametrize(
    "text",
    [
        "obj: !!python/object/apply:os.system ['echo hacked']\n",
        "obj: !!python/name:os.system\n",
        "when: !!timestamp 2001-12-14\n",
        "data: !!binary aGVsbG8=\n",
        "items: !!set {a, b}\n",
        "custom: !Thing value\n",
    ],
)
def test_tags_outside_the_value_grammar_are_rejected(text: str) -> None:
    """Executable and non-plain tags must fail instead of constructing objects."""

    with pytest.raises(ParseFailure, match="is not allowed"):
        deserialize(text)


def test_non_scalar_mapping_keys_are_rejected() -> None:
    with pytest.raises(ParseFailure, match="non-scalar key"):
        deserialize("? [a, b]\n: value\n")


def test_structural_error_reports_one_based_line() -> None:
    with pytest.raises(ParseFailure) as exc_info:
        deserialize("a: 1\nb: [1, 2\nc: 3\n")

    assert exc_info.value.stage == "deserialize"
    assert exc_info.value.line is not None
    assert exc_info.value.line >= 2


def test_tab_indented_structure_fails_on_the_tab_line() -> None:
    with pytest.raises(ParseFailure) as exc_info:
        deserialize("app:\n\tname: svc\n")

    assert exc_info.value.line == 2


def test_multiple_documents_are_rejected() -> None:
    with pytest.raises(ParseFailure):
        deserialize("a: 1\n---\nb: 2\n")


def test_aliases_are_detached_copies() -> None:
    tree = deserialize("base: &base\n  pool: 5\ncopy: *base\n").value

    tree["copy"]["pool"] = 10

    assert tree["base"]["pool"] == 5


def test_merge_key_is_an_ordinary_key_without_expansion() -> None:
    tree = deserialize("base: &b\n  x: 1\nchild:\n  <<: *b\n  y: 2\n").value

    assert tree["child"] == {"<<": {"x": 1}, "y": 2}


def test_recursive_alias_is_rejected() -> None:
    with pytest.raises(ParseFailure, match="Recursive alias"):
        deserialize("a: &loop\n  - *loop\n")


def test_duplicate_key_reports_its_full_path() -> None:
    with pytest.raises(DuplicateKeyError) as exc_info:
        deserialize("app:\n  servers:\n    - host: a\n      host: b\n")

    assert exc_info.value.path == "app.servers[0].host"
    assert exc_info.value.line == 4


def test_aliased_paths_report_anchor_lines() -> None:
    key_lines = deserialize("base: &base\n  pool: 5\ncopy: *base\n").key_lines

    assert key_lines["copy"] == 3
    assert key_lines["copy.pool"] == 2


def test_deep_nesting_beyond_the_recursion_limit_is_a_parse_failure() -> None:
    text = "a: " + "[" * 600 + "]" * 600 + "\n"

    with pytest.raises(ParseFailure, match="nesting is too deep"):
        deserialize(text)


def test_nesting_above_the_depth_cap_reports_its_line() -> None:
    text = "".join(f"{'  ' * depth}k{depth}:\n" for depth in range(120)) + "  " * 120 + "v: 1\n"

    with pytest.raises(ParseFailure, match="at most 100 levels") as exc_info:
        deserialize(text)

    assert exc_info.value.line == 101


def test_alias_fan_out_halts_quickly() -> None:
    lines = ["a0: &a0 [x, x, x, x, x, x, x, x, x, x]"]
    for level in range(1, 9):
        previous = f"*a{level - 1}"
        lines.append(f"a{level}: &a{level} [{', '.join([previous] * 10)}]")
    started = time.monotonic()

    with pytest.raises(ParseFailure, match="Alias expansion exceeds"):
        deserialize("\n".join(lines) + "\n")

    assert time.monotonic() - started < 5.0


def test_moderate_alias_reuse_stays_within_budget() -> None:
    text = "base: &b [1, 2, 3]\n" + "".join(f"k{index}: *b\n" for index in range(500))

    tree = deserialize(text).value

    assert tree["k499"] == [1, 2, 3]
