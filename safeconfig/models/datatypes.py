"""Core datatypes shared across safeconfig modules.

Responsibilities:
- Represent immutable records exchanged between pipeline stages.
- Provide explicit typing for the deserialized value tree and diagnostics.

Key types:
- `Severity`, `Category`, `DocumentStatus`, `Diagnostic`, and `ConfigDocument`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union

from ..parsing import parse_key_path

Value = Union[None, bool, int, float, str, list["Value"], dict[str, "Value"]]


class Severity(str, Enum):
    """Severity of one diagnostic finding."""

    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    """Kind of finding reported by the substitution, parse, or validation stages."""

    UNRESOLVED_VARIABLE = "unresolved-variable"
    TAB_CHARACTER = "tab-character"
    UNBALANCED_QUOTE = "unbalanced-quote"
    INCONSISTENT_INDENTATION = "inconsistent-indentation"
    MISSING_REQUIRED_KEY = "missing-required-key"
    EMPTY_VALUE = "empty-value"
    PARSE_FAILURE = "parse-failure"


class DocumentStatus(str, Enum):
    """Terminal state of one pipeline run that produced a document."""

    COMPLETE = "complete"
    HALTED = "halted"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One validation or substitution finding.

    Attributes:
        severity: Error or warning.
        category: Finding kind.
        message: Human-readable description.
        line: Optional 1-based line number in the source text.
        path: Optional dotted key path the finding refers to.
    """

    severity: Severity
    category: Category
    message: str
    line: int | None = None
    path: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def render(self) -> str:
        """Return a compact single-line representation for CLI and log output."""

        location = f"line {self.line}" if self.line is not None else "-"
        return f"{self.severity.value}: [{self.category.value}] {location}: {self.message}"


@dataclass(frozen=True, slots=True)
class ConfigDocument:
    """Result of one configuration pipeline run.

    Attributes:
        source: Source identifier (file path or literal-text label).
        raw_text: Text exactly as loaded.
        resolved_text: Text after placeholder substitution.
        tree: Deserialized value tree, `None` when halted or for an empty document.
        diagnostics: Ordered findings from every stage that ran.
        status: `COMPLETE` when a tree was produced, `HALTED` on parse failure.
        key_lines: Formatted key path to 1-based line of its key in the source.
    """

    source: str
    raw_text: str
    resolved_text: str = ""
    tree: Value = None
    diagnostics: tuple[Diagnostic, ...] = ()
    status: DocumentStatus = DocumentStatus.COMPLETE
    key_lines: Mapping[str, int] = field(default_factory=dict, repr=False)

    @property
    def is_complete(self) -> bool:
        return self.status is DocumentStatus.COMPLETE

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return tuple(item for item in self.diagnostics if item.is_error)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(item for item in self.diagnostics if not item.is_error)

    @property
    def has_errors(self) -> bool:
        return any(item.is_error for item in self.diagnostics)

    def diagnostics_for(self, category: Category) -> tuple[Diagnostic, ...]:
        """Return diagnostics of one category in report order."""

        return tuple(item for item in self.diagnostics if item.category is category)

    def get(self, path: str, default: Any = None) -> Any:
        """Return the value at a dotted mapping path, or `default` when absent.

        Raises:
            ValueError: If `path` is blank or has an empty segment.
        """

        current: Any = self.tree
        for segment in parse_key_path(path):
            if isinstance(current, dict) and segment in current:
                current = current[segment]
            else:
                return default
        return current
