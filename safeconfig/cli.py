"""Command-line interface for safeconfig.

Responsibilities:
- Expose user-facing commands for checking, showing, and substituting configs.
- Convert CLI arguments into settings, an environment mapping, and a source.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer

from . import __version__
from .cli_rendering import (
    echo_diagnostic,
    echo_diagnostics,
    echo_document_summary,
    exit_with_command_error,
    render_tree,
)
from .cli_runtime import resolve_check_settings, resolve_environment, resolve_source
from .config import CheckSettings
from .io.loader import load_source
from .models.datatypes import ConfigDocument
from .pipeline import ConfigPipeline
from .telemetry.logger import RunLogger
from .text.substitution import substitute_variables

app = typer.Typer(
    name="safeconfig",
    no_args_is_help=True,
    help="Load, interpolate, and validate YAML configuration safely.",
)

_OUTPUT_FORMATS = ("json", "yaml")

SourceArgument = Annotated[
    str,
    typer.Argument(help="Path to the YAML configuration file, or `-` to read stdin."),
]
RequireOption = Annotated[
    Optional[list[str]],
    typer.Option(
        "--require",
        "-r",
        help="Dotted key path that must be present and non-null (repeatable).",
    ),
]
EnvOption = Annotated[
    Optional[list[str]],
    typer.Option("--env", "-e", help="Substitution variable as `NAME=VALUE` (repeatable)."),
]
EnvFileOption = Annotated[
    Optional[Path],
    typer.Option("--env-file", help="Dotenv file with substitution variables."),
]
ProcessEnvOption = Annotated[
    Optional[bool],
    typer.Option(
        "--process-env/--no-process-env",
        help="Use process environment variables for substitution.",
    ),
]
ExpandMergesOption = Annotated[
    Optional[bool],
    typer.Option(
        "--expand-merges/--no-expand-merges",
        help="Fold YAML `<<` merge keys into their mappings before validation.",
    ),
]
EncodingOption = Annotated[
    Optional[str],
    typer.Option("--encoding", help="Encoding used to read the configuration file."),
]
SettingsOption = Annotated[
    Optional[Path],
    typer.Option("--settings", help="YAML settings file with check defaults."),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Log pipeline stage events to stderr."),
]


def _run_pipeline(
    *,
    source: str,
    settings: CheckSettings,
    env_assignments: list[str] | None,
    env_file: Path | None,
    verbose: bool,
) -> ConfigDocument:
    """Assemble the environment and run the pipeline for one CLI source."""

    env = resolve_environment(
        assignments=env_assignments or [],
        env_file=env_file,
        include_process_env=settings.include_process_env,
    )
    pipeline = ConfigPipeline(
        run_logger=RunLogger(level="DEBUG") if verbose else None,
        expand_merges=settings.expand_merges,
        encoding=settings.encoding,
    )
    return pipeline.run(resolve_source(source), env, settings.required_keys)


@app.command("check")
def check_command(
    source: SourceArgument,
    require: RequireOption = None,
    env: EnvOption = None,
    env_file: EnvFileOption = None,
    process_env: ProcessEnvOption = None,
    expand_merges: ExpandMergesOption = None,
    encoding: EncodingOption = None,
    settings_file: SettingsOption = None,
    strict: Annotated[
        Optional[bool],
        typer.Option("--strict/--no-strict", help="Fail on warnings as well as errors."),
    ] = None,
    verbose: VerboseOption = False,
) -> None:
    """Validate a configuration file and report every diagnostic."""

    try:
        settings = resolve_check_settings(
            settings_file=settings_file,
            required_keys=require or [],
            encoding=encoding,
            expand_merges=expand_merges,
            strict=strict,
            include_process_env=process_env,
        )
        document = _run_pipeline(
            source=source,
            settings=settings,
            env_assignments=env,
            env_file=env_file,
            verbose=verbose,
        )
    except Exception as exc:
        exit_with_command_error("check", exc)

    echo_diagnostics(document)
    echo_document_summary(document)

    failed = (
        not document.is_complete
        or document.has_errors
        or (settings.strict and bool(document.warnings))
    )
    if failed:
        raise typer.Exit(code=1)


@app.command("show")
def show_command(
    source: SourceArgument,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: `json` or `yaml`."),
    ] = "json",
    require: RequireOption = None,
    env: EnvOption = None,
    env_file: EnvFileOption = None,
    process_env: ProcessEnvOption = None,
    expand_merges: ExpandMergesOption = None,
    encoding: EncodingOption = None,
    settings_file: SettingsOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Print the deserialized value tree; diagnostics go to stderr."""

    if output_format not in _OUTPUT_FORMATS:
        exit_with_command_error(
            "show",
            ValueError(f"Unsupported `--format` value `{output_format}`; use json or yaml."),
        )
    try:
        settings = resolve_check_settings(
            settings_file=settings_file,
            required_keys=require or [],
            encoding=encoding,
            expand_merges=expand_merges,
            strict=None,
            include_process_env=process_env,
        )
        document = _run_pipeline(
            source=source,
            settings=settings,
            env_assignments=env,
            env_file=env_file,
            verbose=verbose,
        )
    except Exception as exc:
        exit_with_command_error("show", exc)

    echo_diagnostics(document, err=True)
    if not document.is_complete:
        typer.secho(
            f"show failed: `{document.source}` could not be parsed.",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)
    typer.echo(render_tree(document.tree, output_format))


@app.command("substitute")
def substitute_command(
    source: SourceArgument,
    env: EnvOption = None,
    env_file: EnvFileOption = None,
    process_env: ProcessEnvOption = None,
    encoding: EncodingOption = None,
) -> None:
    """Print configuration text with `${NAME}` placeholders resolved."""

    try:
        settings = resolve_check_settings(
            settings_file=None,
            required_keys=[],
            encoding=encoding,
            expand_merges=None,
            strict=None,
            include_process_env=process_env,
        )
        variables = resolve_environment(
            assignments=env or [],
            env_file=env_file,
            include_process_env=settings.include_process_env,
        )
        loaded = load_source(resolve_source(source), settings.encoding)
        result = substitute_variables(loaded.text, variables)
    except Exception as exc:
        exit_with_command_error("substitute", exc)

    for diagnostic in result.diagnostics:
        echo_diagnostic(diagnostic, err=True)
    typer.echo(result.text, nl=False)


@app.command("version")
def version_command() -> None:
    """Print the installed safeconfig version."""

    typer.echo(__version__)


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
