"""Lexical hygiene checks on raw configuration text.

These checks look only at lines of text, never at the parsed tree, so they
run even when the document failed to parse.
"""

from __future__ import annotations

from ..models.datatypes import Category, Diagnostic, Severity
from .lines import split_lines


def _leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def _is_comment_or_blank(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def check_tabs(raw_text: str) -> list[Diagnostic]:
    """Report every line whose leading whitespace contains a tab."""

    findings: list[Diagnostic] = []
    for line_number, line in enumerate(split_lines(raw_text), start=1):
        if "\t" in _leading_whitespace(line):
            findings.append(
                Diagnostic(
                    severity=Severity.ERROR,
                    category=Category.TAB_CHARACTER,
                    message="Tab character in leading whitespace; indent with spaces only.",
                    line=line_number,
                )
            )
    return findings


def _count_unescaped(line: str, quote: str) -> int:
    count = 0
    escaped = False
    for character in line:
        if escaped:
            escaped = False
            continue
        if character == "\\":
            escaped = True
        elif character == quote:
            count += 1
    return count


def check_quote_balance(raw_text: str) -> list[Diagnostic]:
    """Report lines with an odd number of unescaped single or double quotes."""

    findings: list[Diagnostic] = []
    for line_number, line in enumerate(split_lines(raw_text), start=1):
        if _is_comment_or_blank(line):
            continue
        odd = [
            label
            for quote, label in (('"', "double"), ("'", "single"))
            if _count_unescaped(line, quote) % 2
        ]
        if odd:
            findings.append(
                Diagnostic(
                    severity=Severity.WARNING,
                    category=Category.UNBALANCED_QUOTE,
                    message=f"Unbalanced {' and '.join(odd)} quote(s) on this line.",
                    line=line_number,
                )
            )
    return findings


def check_indentation_parity(raw_text: str) -> list[Diagnostic]:
    """Report one warning when both even and odd indentation widths are used."""

    parities: set[int] = set()
    first_odd_line: int | None = None
    for line_number, line in enumerate(split_lines(raw_text), start=1):
        if _is_comment_or_blank(line):
            continue
        width = len(line) - len(line.lstrip(" "))
        parities.add(width % 2)
        if width % 2 and first_odd_line is None:
            first_odd_line = line_number

    if len(parities) < 2:
        return []
    return [
        Diagnostic(
            severity=Severity.WARNING,
            category=Category.INCONSISTENT_INDENTATION,
            message="Both even and odd indentation widths are used; check for mixed styles.",
            line=first_odd_line,
        )
    ]


def run_lexical_checks(raw_text: str) -> list[Diagnostic]:
    """Run tab, quote-balance, and indentation-parity checks in that order."""

    return [
        *check_tabs(raw_text),
        *check_quote_balance(raw_text),
        *check_indentation_parity(raw_text),
    ]
