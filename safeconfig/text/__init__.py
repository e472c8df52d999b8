"""Text-level stages: placeholder substitution and lexical hygiene checks."""

from .hygiene import (
    check_indentation_parity,
    check_quote_balance,
    check_tabs,
    run_lexical_checks,
)
from .lines import LINE_BREAK_PATTERN, line_at, split_lines
from .substitution import (
    PLACEHOLDER_PATTERN,
    SubstitutionResult,
    substitute_variables,
)

__all__ = [
    "LINE_BREAK_PATTERN",
    "PLACEHOLDER_PATTERN",
    "SubstitutionResult",
    "check_indentation_parity",
    "check_quote_balance",
    "check_tabs",
    "line_at",
    "run_lexical_checks",
    "split_lines",
    "substitute_variables",
]
