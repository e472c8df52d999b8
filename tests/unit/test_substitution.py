"""Unit tests for `${NAME}` placeholder substitution."""

from __future__ import annotations

from safeconfig.models.datatypes import Category, Severity
from safeconfig.text.substitution import substitute_variables


def test_text_without_placeholders_is_unchanged() -> None:
    text = "app:\n  name: svc\n  cost: $5\n"

    result = substitute_variables(text, {"name": "ignored"})

    assert result.text == text
    assert result.diagnostics == ()
    assert result.resolved_names == ()


def test_resolved_placeholders_are_replaced_and_rerun_is_a_no_op() -> None:
    env = {"HOST": "db.local", "PORT": "5432"}
    text = "url: ${HOST}:${PORT}\nbackup: ${HOST}\n"

    first = substitute_variables(text, env)
    second = substitute_variables(first.text, env)

    assert first.text == "url: db.local:5432\nbackup: db.local\n"
    assert first.resolved_names == ("HOST", "PORT")
    assert second.text == first.text
    assert second.diagnostics == ()


def test_unresolved_placeholder_is_kept_with_line_numbered_warning() -> None:
    text = "a: 1\nurl: ${MISSING_VAR}\nagain: ${MISSING_VAR}\n"

    result = substitute_variables(text, {})

    assert result.text == text
    assert [item.line for item in result.diagnostics] == [2, 3]
    assert all(item.severity is Severity.WARNING for item in result.diagnostics)
    assert all(item.category is Category.UNRESOLVED_VARIABLE for item in result.diagnostics)
    assert "`MISSING_VAR`" in result.diagnostics[0].message


def test_substituted_values_are_not_rescanned() -> None:
    env = {"OUTER": "${INNER}", "INNER": "deep"}

    result = substitute_variables("value: ${OUTER}\n", env)

    assert result.text == "value: ${INNER}\n"
    assert result.diagnostics == ()


def test_names_outside_the_placeholder_grammar_are_ignored() -> None:
    text = "a: ${1BAD}\nb: $PLAIN\nc: ${with-dash}\nd: ${}\n"

    result = substitute_variables(text, {"1BAD": "x", "PLAIN": "y"})

    assert result.text == text
    assert result.diagnostics == ()


def test_empty_value_replaces_placeholder() -> None:
    result = substitute_variables("token: '${TOKEN}'\n", {"TOKEN": ""})

    assert result.text == "token: ''\n"


def test_unresolved_lines_follow_carriage_return_breaks() -> None:
    """Lone `\\r` and `\\r\\n` breaks count as lines, matching the YAML reader."""

    result = substitute_variables("a: 1\rb: ${ONE}\r\nc: ${TWO}\u2028d: ${THREE}\n", {})

    assert [item.line for item in result.diagnostics] == [2, 3, 4]
