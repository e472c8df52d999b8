"""CLI runtime resolution helpers.

This module isolates settings precedence, environment assembly, and source
selection from the command wiring layer. It is the only place that reads the
process environment; the pipeline receives an explicit mapping.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Sequence

from dotenv import dotenv_values
import typer

from .config import CheckSettings, SettingsLoader
from .errors import ConfigPipelineError
from .io.loader import FileSource, TextSource
from .parsing import normalize_optional_string

STDIN_SOURCE = "-"


def parse_env_assignments(assignments: Sequence[str]) -> dict[str, str]:
    """Parse repeated `NAME=VALUE` CLI options into a mapping.

    Raises:
        ConfigPipelineError: If an assignment has no `=` or a blank name.
    """

    parsed: dict[str, str] = {}
    for assignment in assignments:
        name, separator, value = assignment.partition("=")
        normalized_name = normalize_optional_string(name)
        if not separator or normalized_name is None:
            raise ConfigPipelineError(
                stage="environment",
                detail=f"Invalid `--env` value `{assignment}`; expected `NAME=VALUE`.",
                hint="Pass variables as `--env NAME=VALUE`; the value may be empty.",
            )
        parsed[normalized_name] = value
    return parsed


def read_env_file(env_file: Path) -> dict[str, str]:
    """Read a dotenv file without touching the process environment."""

    if not env_file.is_file():
        raise ConfigPipelineError(
            stage="environment",
            detail=f"Env file not found: `{env_file}`.",
            hint="Provide an existing dotenv file via `--env-file <path>`.",
        )
    return {
        key: value
        for key, value in dotenv_values(env_file).items()
        if value is not None
    }


def resolve_environment(
    *,
    assignments: Sequence[str],
    env_file: Path | None,
    include_process_env: bool,
    process_env: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Build the substitution mapping: `--env` > `--env-file` > process environment."""

    resolved: dict[str, str] = {}
    if include_process_env:
        resolved.update(os.environ if process_env is None else process_env)
    if env_file is not None:
        resolved.update(read_env_file(env_file))
    resolved.update(parse_env_assignments(assignments))
    return resolved


def resolve_check_settings(
    *,
    settings_file: Path | None,
    required_keys: Sequence[str],
    encoding: str | None,
    expand_merges: bool | None,
    strict: bool | None,
    include_process_env: bool | None,
    process_env: Mapping[str, str] | None = None,
) -> CheckSettings:
    """Resolve settings with precedence CLI > settings file > environment > defaults."""

    env_map: Mapping[str, str] = os.environ if process_env is None else process_env
    try:
        settings = SettingsLoader.from_env(env_map)
        if settings_file is not None:
            settings = SettingsLoader.from_yaml(settings_file, base=settings)
        return settings.with_overrides(
            required_keys=tuple(required_keys),
            encoding=encoding,
            expand_merges=expand_merges,
            strict=strict,
            include_process_env=include_process_env,
        )
    except ValueError as exc:
        raise ConfigPipelineError(
            stage="settings",
            detail=str(exc),
            hint="Fix the settings file, `SAFECONFIG_*` variables, or CLI options.",
        ) from exc


def resolve_source(source: str) -> FileSource | TextSource:
    """Map the CLI source argument to a source descriptor; `-` reads stdin."""

    if source == STDIN_SOURCE:
        stdin = typer.get_text_stream("stdin")
        return TextSource(stdin.read(), name="<stdin>")
    return FileSource(Path(source))
