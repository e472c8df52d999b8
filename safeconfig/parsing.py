"""Shared parsing helpers for settings values and key paths."""

from __future__ import annotations

from typing import Iterable


_TRUE_BOOLEAN_TOKENS = frozenset({"1", "true", "yes", "on"})
_FALSE_BOOLEAN_TOKENS = frozenset({"0", "false", "no", "off"})


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_permissive_boolean(value: object) -> bool | None:
    """Parse a permissive boolean token and return `None` for invalid values."""

    if isinstance(value, bool):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None

    token = normalized.lower()
    if token in _TRUE_BOOLEAN_TOKENS:
        return True
    if token in _FALSE_BOOLEAN_TOKENS:
        return False
    return None


def split_csv_tokens(value: object) -> tuple[str, ...]:
    """Split a comma-separated value into stripped non-empty tokens."""

    normalized = normalize_optional_string(value)
    if normalized is None:
        return ()
    return tuple(token.strip() for token in normalized.split(",") if token.strip())


def parse_key_path(path: str) -> tuple[str, ...]:
    """Split a dotted key path into mapping-key segments.

    Raises:
        ValueError: If the path is blank or contains an empty segment.
    """

    normalized = normalize_optional_string(path)
    if normalized is None:
        raise ValueError("Key path must be a non-empty dotted string.")
    segments = tuple(segment.strip() for segment in normalized.split("."))
    if any(not segment for segment in segments):
        raise ValueError(f"Key path `{path}` contains an empty segment.")
    return segments


def format_key_path(segments: Iterable[str | int]) -> str:
    """Format mapping keys and sequence indices as `a.b[0].c`."""

    rendered = ""
    for segment in segments:
        if isinstance(segment, int):
            rendered += f"[{segment}]"
        elif rendered:
            rendered += f".{segment}"
        else:
            rendered = segment
    return rendered
