"""Domain exceptions for pipeline and CLI diagnostics."""

from __future__ import annotations


class ConfigPipelineError(RuntimeError):
    """Raised when a specific pipeline stage cannot continue."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped pipeline error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class SourceUnavailable(ConfigPipelineError):
    """Raised when the loader cannot produce any configuration text."""

    def __init__(self, *, source: str, detail: str, hint: str | None = None) -> None:
        super().__init__(stage="load", detail=detail, hint=hint)
        self.source = source


class ParseFailure(ConfigPipelineError):
    """Raised when configuration text cannot be turned into a value tree."""

    def __init__(
        self,
        *,
        detail: str,
        line: int | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(stage="deserialize", detail=detail, hint=hint)
        self.line = line


class DuplicateKeyError(ParseFailure):
    """Raised when one mapping level defines the same key twice."""

    def __init__(
        self, *, key: str, line: int | None = None, path: str | None = None
    ) -> None:
        location = f" on line {line}" if line is not None else ""
        super().__init__(
            detail=f"Duplicate key `{key}`{location}.",
            line=line,
            hint="Remove or rename the repeated key; later values never override earlier ones.",
        )
        self.key = key
        self.path = path or key


class BindingError(ValueError):
    """Raised when a value tree does not fit the requested typed structure."""

    def __init__(self, path: str, message: str) -> None:
        label = path or "<root>"
        super().__init__(f"`{label}`: {message}")
        self.path = path
