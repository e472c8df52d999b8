"""Explicit merge-key (`<<`) expansion over a deserialized value tree.

The strict loader treats `<<` as an ordinary string key. When merge support is
requested, this pass folds the merged mappings into their host mapping:
explicit keys win over merged ones, and earlier merge sources win over later
ones. The pass returns a new tree and leaves its input untouched.
"""

from __future__ import annotations

from typing import Any

from ..errors import ParseFailure
from ..models.datatypes import Value
from ..parsing import format_key_path
from .deserializer import DeserializedTree

MERGE_KEY = "<<"

_Segments = tuple[Any, ...]


def _merge_sources(value: Any, segments: _Segments) -> list[tuple[_Segments, dict[str, Any]]]:
    merge_segments = segments + (MERGE_KEY,)
    if isinstance(value, dict):
        return [(merge_segments, value)]
    if isinstance(value, list) and all(isinstance(item, dict) for item in value):
        return [(merge_segments + (index,), item) for index, item in enumerate(value)]
    path = format_key_path(merge_segments)
    raise ParseFailure(
        detail=f"Merge key `{path}` must be a mapping or a list of mappings.",
        hint="Point `<<` at an anchored mapping such as `<<: *defaults`.",
    )


def _copy_lines(lines: dict[str, int], source: _Segments, target: _Segments) -> None:
    """Register the lines of `source` and everything below it under `target`."""

    source_path = format_key_path(source)
    target_path = format_key_path(target)
    for path, line in list(lines.items()):
        if path == source_path or path.startswith((source_path + ".", source_path + "[")):
            lines.setdefault(target_path + path[len(source_path):], line)


def _expand(value: Any, segments: _Segments, lines: dict[str, int] | None) -> Any:
    if isinstance(value, list):
        return [_expand(item, segments + (index,), lines) for index, item in enumerate(value)]
    if not isinstance(value, dict):
        return value

    expanded: dict[str, Any] = {}
    if MERGE_KEY in value:
        for source_segments, source in _merge_sources(value[MERGE_KEY], segments):
            merged_source = _expand(source, source_segments, lines)
            for key, item in merged_source.items():
                if key in expanded:
                    continue
                expanded[key] = item
                if lines is not None and key not in value:
                    _copy_lines(lines, source_segments + (key,), segments + (key,))
    for key, item in value.items():
        if key == MERGE_KEY:
            continue
        expanded[key] = _expand(item, segments + (key,), lines)
    return expanded


def expand_merge_keys(tree: Value) -> Value:
    """Return a copy of `tree` with every `<<` entry folded into its mapping.

    Raises:
        ParseFailure: If a merge value is not a mapping or list of mappings.
    """

    return _expand(tree, (), None)


def expand_merged_tree(parsed: DeserializedTree) -> DeserializedTree:
    """Expand merge keys and extend the key-line index to the merged paths.

    A merged key reports the line where its merge source defines it.
    """

    lines: dict[str, int] = dict(parsed.key_lines)
    value = _expand(parsed.value, (), lines)
    return DeserializedTree(value=value, key_lines=lines)
