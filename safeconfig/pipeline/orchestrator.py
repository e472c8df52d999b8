"""Pipeline orchestration for safeconfig.

Responsibilities:
- Define the stage order: load, substitute, deserialize, validate.
- Carry a `ConfigDocument` through each stage and stop at parse failure.

Key entry points:
- `ConfigPipeline`: orchestration facade with optional run logging.
- `load_config`: functional wrapper used by library callers.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Mapping

from ..errors import DuplicateKeyError, ParseFailure
from ..io.loader import SourceLike, load_source
from ..models.datatypes import Category, ConfigDocument, Diagnostic, DocumentStatus, Severity
from ..parsing import format_key_path, parse_key_path
from ..telemetry.logger import RunLogger
from ..text.hygiene import run_lexical_checks
from ..text.substitution import substitute_variables
from ..validation.validator import validate_document
from ..yaml_safe.deserializer import DeserializedTree, deserialize
from ..yaml_safe.merge import expand_merged_tree
from .telemetry import PipelineTelemetryMixin


class ConfigPipeline(PipelineTelemetryMixin):
    """Coordinate all stages for a single configuration load."""

    def __init__(
        self,
        run_logger: RunLogger | None = None,
        *,
        expand_merges: bool = False,
        encoding: str = "utf-8",
    ) -> None:
        """Initialize stage options and optional runtime logging."""

        self._run_logger = run_logger
        self._expand_merges = expand_merges
        self._encoding = encoding

    def run(
        self,
        source: SourceLike,
        env: Mapping[str, str],
        required: Iterable[str] = (),
    ) -> ConfigDocument:
        """Load, substitute, deserialize, and validate one configuration source.

        Raises:
            SourceUnavailable: If no text could be read.
            ValueError: If a required key path is blank or malformed.
        """

        required_paths = tuple(format_key_path(parse_key_path(path)) for path in required)

        loaded = self._run_stage("load", lambda: load_source(source, self._encoding))
        document = ConfigDocument(source=loaded.identifier, raw_text=loaded.text)

        substitution = self._run_stage(
            "substitute", lambda: substitute_variables(document.raw_text, env)
        )
        self._on_diagnostics("substitute", substitution.diagnostics)
        document = replace(
            document,
            resolved_text=substitution.text,
            diagnostics=substitution.diagnostics,
        )

        try:
            parsed = self._run_stage("deserialize", lambda: self._deserialize(document))
        except ParseFailure as exc:
            return self._halt(document, exc)

        document = replace(document, tree=parsed.value, key_lines=dict(parsed.key_lines))

        findings = self._run_stage(
            "validate",
            lambda: validate_document(
                document.tree,
                document.raw_text,
                required_paths,
                document.key_lines,
            ),
        )
        self._on_diagnostics("validate", findings)
        return replace(
            document,
            diagnostics=document.diagnostics + findings,
            status=DocumentStatus.COMPLETE,
        )

    def _deserialize(self, document: ConfigDocument) -> DeserializedTree:
        parsed = deserialize(document.resolved_text)
        if not self._expand_merges:
            return parsed
        return expand_merged_tree(parsed)

    def _halt(self, document: ConfigDocument, exc: ParseFailure) -> ConfigDocument:
        """Return the text-only document with the parse failure and lexical findings."""

        failure = Diagnostic(
            severity=Severity.ERROR,
            category=Category.PARSE_FAILURE,
            message=exc.detail,
            line=exc.line,
            path=exc.path if isinstance(exc, DuplicateKeyError) else None,
        )
        lexical = tuple(run_lexical_checks(document.raw_text))
        self._on_diagnostics("deserialize", (failure,))
        self._on_diagnostics("validate", lexical)
        return replace(
            document,
            tree=None,
            diagnostics=document.diagnostics + (failure,) + lexical,
            status=DocumentStatus.HALTED,
        )


def load_config(
    source: SourceLike,
    env: Mapping[str, str],
    required: Iterable[str] = (),
    *,
    expand_merges: bool = False,
    encoding: str = "utf-8",
    run_logger: RunLogger | None = None,
) -> ConfigDocument:
    """Run the full configuration pipeline and return the resulting document.

    Args:
        source: `FileSource`, `TextSource`, or a path (`str`/`os.PathLike`).
        env: Read-only variable mapping used for `${NAME}` placeholders.
        required: Dotted key paths that must resolve to non-null values.
        expand_merges: Fold YAML `<<` merge keys before validation.
        encoding: Text encoding used when reading files.
        run_logger: Optional structured logger for stage events.

    Raises:
        SourceUnavailable: If the source text could not be read.
    """

    pipeline = ConfigPipeline(
        run_logger=run_logger,
        expand_merges=expand_merges,
        encoding=encoding,
    )
    return pipeline.run(source, env, required)
