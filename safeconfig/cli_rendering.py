"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command failures,
diagnostic listings, document summaries, and value-tree output.
"""

from __future__ import annotations

import json
from typing import NoReturn

import typer
import yaml

from .errors import ConfigPipelineError
from .models.datatypes import ConfigDocument, Diagnostic, Severity, Value


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, ConfigPipelineError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_diagnostic(diagnostic: Diagnostic, err: bool = False) -> None:
    """Print one diagnostic line, colored by severity."""

    color = typer.colors.RED if diagnostic.severity is Severity.ERROR else typer.colors.YELLOW
    typer.secho(diagnostic.render(), fg=color, err=err)


def echo_diagnostics(document: ConfigDocument, err: bool = False) -> None:
    """Print all diagnostics of a document in report order."""

    for diagnostic in document.diagnostics:
        echo_diagnostic(diagnostic, err=err)


def echo_document_summary(document: ConfigDocument) -> None:
    """Print source, terminal status, and diagnostic counts."""

    typer.echo(f"Source: {document.source}")
    typer.echo(f"Status: {document.status.value}")
    typer.echo(f"Errors: {len(document.errors)}")
    typer.echo(f"Warnings: {len(document.warnings)}")


def render_tree(tree: Value, output_format: str) -> str:
    """Serialize a value tree as JSON or YAML text."""

    if output_format == "json":
        return json.dumps(tree, indent=2, ensure_ascii=False)
    return yaml.safe_dump(tree, sort_keys=False, allow_unicode=True).rstrip("\n")
