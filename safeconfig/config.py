"""Settings model and loaders for the safeconfig command-line tool.

Responsibilities:
- Define check settings as a typed dataclass.
- Provide loader entry points for environment- and file-based settings.
- Resolve CLI overrides with deterministic precedence.

Key types:
- `CheckSettings`: normalized settings for one `check`/`show` run.
- `SettingsLoader`: static construction helpers for `CheckSettings`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

from .io.loader import FileSource
from .parsing import (
    normalize_optional_string,
    parse_key_path,
    parse_permissive_boolean,
    split_csv_tokens,
)
from .pipeline.orchestrator import load_config

_DEFAULT_ENCODING = "utf-8"


@dataclass(frozen=True, slots=True)
class CheckSettings:
    """Settings for one pipeline run driven by the CLI.

    Attributes:
        required_keys: Dotted key paths that must resolve to non-null values.
        encoding: Encoding used to read configuration files.
        expand_merges: Whether YAML `<<` merge keys are folded before validation.
        strict: Whether warnings should fail the `check` command.
        include_process_env: Whether process environment variables feed substitution.
    """

    required_keys: tuple[str, ...] = field(default_factory=tuple)
    encoding: str = _DEFAULT_ENCODING
    expand_merges: bool = False
    strict: bool = False
    include_process_env: bool = True

    def validate(self) -> None:
        """Validate settings values before pipeline execution."""

        for path in self.required_keys:
            parse_key_path(path)
        if not normalize_optional_string(self.encoding):
            raise ValueError("`encoding` must be a non-empty string.")
        try:
            "".encode(self.encoding)
        except LookupError as exc:
            raise ValueError(f"Unknown `encoding` value `{self.encoding}`.") from exc

    def with_overrides(
        self,
        *,
        required_keys: tuple[str, ...] = (),
        encoding: str | None = None,
        expand_merges: bool | None = None,
        strict: bool | None = None,
        include_process_env: bool | None = None,
    ) -> CheckSettings:
        """Return settings with explicit CLI values applied on top.

        Required keys from the CLI are appended to, not substituted for, the
        configured ones; duplicates are dropped while preserving order.
        """

        merged_keys = tuple(dict.fromkeys((*self.required_keys, *required_keys)))
        resolved = replace(
            self,
            required_keys=merged_keys,
            encoding=encoding if encoding is not None else self.encoding,
            expand_merges=expand_merges if expand_merges is not None else self.expand_merges,
            strict=strict if strict is not None else self.strict,
            include_process_env=(
                include_process_env
                if include_process_env is not None
                else self.include_process_env
            ),
        )
        resolved.validate()
        return resolved


class SettingsLoader:
    """Factory methods for creating `CheckSettings` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "required_keys",
            "encoding",
            "expand_merges",
            "strict",
            "include_process_env",
        }
    )

    @staticmethod
    def from_env(env: Mapping[str, str]) -> CheckSettings:
        """Create validated settings from `SAFECONFIG_*` environment variables."""

        settings = CheckSettings(
            required_keys=split_csv_tokens(env.get("SAFECONFIG_REQUIRED")),
            encoding=(
                normalize_optional_string(env.get("SAFECONFIG_ENCODING")) or _DEFAULT_ENCODING
            ),
            expand_merges=SettingsLoader._optional_env_boolean(
                env, "SAFECONFIG_EXPAND_MERGES", default=False
            ),
            strict=SettingsLoader._optional_env_boolean(env, "SAFECONFIG_STRICT", default=False),
            include_process_env=SettingsLoader._optional_env_boolean(
                env, "SAFECONFIG_INCLUDE_PROCESS_ENV", default=True
            ),
        )
        settings.validate()
        return settings

    @staticmethod
    def from_yaml(path: Path, base: CheckSettings | None = None) -> CheckSettings:
        """Create validated settings from a YAML settings file.

        The file goes through the same safe pipeline as any configuration, with
        no placeholder values available. Keys absent from the file keep the
        values of `base`.
        """

        document = load_config(FileSource(path), env={})
        if not document.is_complete:
            failure = document.errors[0]
            raise ValueError(f"Settings file `{path}` is not valid YAML: {failure.message}")

        payload = document.tree if document.tree is not None else {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"Settings file `{path}` must contain a top-level mapping/object.")
        return SettingsLoader._build_from_mapping(
            payload, base or CheckSettings(), source_label=f"Settings file `{path}`"
        )

    @staticmethod
    def _build_from_mapping(
        payload: Mapping[str, Any], base: CheckSettings, source_label: str
    ) -> CheckSettings:
        unknown = sorted(set(payload).difference(SettingsLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        settings = CheckSettings(
            required_keys=SettingsLoader._optional_string_list(
                payload, "required_keys", source_label, default=base.required_keys
            ),
            encoding=SettingsLoader._optional_non_empty_string(
                payload, "encoding", default=base.encoding
            ),
            expand_merges=SettingsLoader._optional_boolean(
                payload, "expand_merges", source_label, default=base.expand_merges
            ),
            strict=SettingsLoader._optional_boolean(
                payload, "strict", source_label, default=base.strict
            ),
            include_process_env=SettingsLoader._optional_boolean(
                payload, "include_process_env", source_label, default=base.include_process_env
            ),
        )
        settings.validate()
        return settings

    @staticmethod
    def _optional_non_empty_string(payload: Mapping[str, Any], key: str, default: str) -> str:
        """Read an optional string field, falling back for blank values."""

        if key not in payload:
            return default
        return normalize_optional_string(payload[key]) or default

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str, default: bool
    ) -> bool:
        """Read and validate a boolean field from a payload."""

        if key not in payload or payload[key] is None:
            return default

        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise ValueError(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed

    @staticmethod
    def _optional_string_list(
        payload: Mapping[str, Any],
        key: str,
        source_label: str,
        default: tuple[str, ...],
    ) -> tuple[str, ...]:
        """Read a list of non-empty strings or a comma-separated string."""

        if key not in payload or payload[key] is None:
            return default

        raw = payload[key]
        if isinstance(raw, str):
            return split_csv_tokens(raw)
        if not isinstance(raw, list):
            raise ValueError(f"{source_label} field `{key}` must be a list of strings.")

        normalized: list[str] = []
        for item in raw:
            value = normalize_optional_string(item) if isinstance(item, str) else None
            if value is None:
                raise ValueError(
                    f"{source_label} field `{key}` must contain only non-empty strings."
                )
            normalized.append(value)
        return tuple(normalized)

    @staticmethod
    def _optional_env_boolean(env: Mapping[str, str], key: str, default: bool) -> bool:
        """Read an optional boolean from environment mapping."""

        if normalize_optional_string(env.get(key)) is None:
            return default
        parsed = parse_permissive_boolean(env.get(key))
        if parsed is None:
            raise ValueError(
                f"Environment variable `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed
