"""Environment placeholder substitution.

Responsibilities:
- Replace `${NAME}` placeholders with values from an injected environment mapping.
- Leave unresolved placeholders verbatim and report them as warnings.

Substituted values are inserted as-is and never rescanned, so a value that
itself looks like a placeholder cannot trigger further expansion.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Mapping

from ..models.datatypes import Category, Diagnostic, Severity
from .lines import line_at

PLACEHOLDER_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


@dataclass(frozen=True, slots=True)
class SubstitutionResult:
    """Output of one substitution pass.

    Attributes:
        text: Text with every resolvable placeholder replaced.
        diagnostics: One `UNRESOLVED_VARIABLE` warning per unresolved occurrence.
        resolved_names: Variable names that were replaced, in first-seen order.
    """

    text: str
    diagnostics: tuple[Diagnostic, ...]
    resolved_names: tuple[str, ...]


def substitute_variables(text: str, env: Mapping[str, str]) -> SubstitutionResult:
    """Replace placeholders in `text` using `env` without mutating it."""

    diagnostics: list[Diagnostic] = []
    resolved_names: list[str] = []

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in env:
            if name not in resolved_names:
                resolved_names.append(name)
            return str(env[name])
        diagnostics.append(
            Diagnostic(
                severity=Severity.WARNING,
                category=Category.UNRESOLVED_VARIABLE,
                message=f"Variable `{name}` is not defined; placeholder left unchanged.",
                line=line_at(text, match.start()),
            )
        )
        return match.group(0)

    resolved_text = PLACEHOLDER_PATTERN.sub(_replace, text)
    return SubstitutionResult(
        text=resolved_text,
        diagnostics=tuple(diagnostics),
        resolved_names=tuple(resolved_names),
    )
