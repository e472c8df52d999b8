"""Structural validation of a deserialized configuration.

Responsibilities:
- Report required key paths that are missing or null.
- Report mapping entries with null or empty-string values.
- Run the lexical hygiene checks on the original raw text.

Every check runs independently and the validator never raises; callers decide
which severities should block use of the configuration.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from ..models.datatypes import Category, Diagnostic, Severity, Value
from ..parsing import format_key_path, parse_key_path
from ..text.hygiene import run_lexical_checks


def _deepest_existing_line(
    segments: tuple[str, ...], key_lines: Mapping[str, int]
) -> int | None:
    for depth in range(len(segments), 0, -1):
        line = key_lines.get(format_key_path(segments[:depth]))
        if line is not None:
            return line
    return None


def check_required_keys(
    tree: Value,
    required: Iterable[str],
    key_lines: Mapping[str, int] | None = None,
) -> list[Diagnostic]:
    """Report each required dotted path that is absent or resolves to null."""

    lines = key_lines or {}
    findings: list[Diagnostic] = []
    for path in required:
        segments = parse_key_path(path)
        current: Any = tree
        present = True
        for segment in segments:
            if isinstance(current, dict) and segment in current:
                current = current[segment]
            else:
                present = False
                break
        if present and current is not None:
            continue
        reason = "is missing" if not present else "is null"
        findings.append(
            Diagnostic(
                severity=Severity.ERROR,
                category=Category.MISSING_REQUIRED_KEY,
                message=f"Required key `{format_key_path(segments)}` {reason}.",
                line=_deepest_existing_line(segments, lines),
                path=format_key_path(segments),
            )
        )
    return findings


def check_empty_values(
    tree: Value, key_lines: Mapping[str, int] | None = None
) -> list[Diagnostic]:
    """Report every mapping entry whose value is null or an empty string."""

    lines = key_lines or {}
    findings: list[Diagnostic] = []

    def _walk(node: Any, segments: tuple[str | int, ...]) -> None:
        if isinstance(node, dict):
            for key, value in node.items():
                child = segments + (key,)
                if value is None or value == "":
                    path = format_key_path(child)
                    findings.append(
                        Diagnostic(
                            severity=Severity.WARNING,
                            category=Category.EMPTY_VALUE,
                            message=f"Key `{path}` has an empty value.",
                            line=lines.get(path),
                            path=path,
                        )
                    )
                else:
                    _walk(value, child)
        elif isinstance(node, list):
            for index, item in enumerate(node):
                _walk(item, segments + (index,))

    _walk(tree, ())
    return findings


def validate_document(
    tree: Value,
    raw_text: str,
    required: Iterable[str] = (),
    key_lines: Mapping[str, int] | None = None,
) -> tuple[Diagnostic, ...]:
    """Run every structural and lexical check and return all findings in order."""

    return (
        *check_required_keys(tree, required, key_lines),
        *check_empty_values(tree, key_lines),
        *run_lexical_checks(raw_text),
    )
