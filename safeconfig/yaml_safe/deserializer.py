"""Safe deserialization of resolved configuration text.

Responsibilities:
- Turn text into a plain value tree through `StrictSafeLoader`.
- Index the source line of every key path for diagnostic locations.
- Map every PyYAML failure to `ParseFailure` with a 1-based line number.
- Bound alias expansion and nesting depth before any value is copied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

import yaml
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from ..errors import DuplicateKeyError, ParseFailure
from ..models.datatypes import Value
from ..parsing import format_key_path
from .loader import StrictSafeLoader

MAX_ALIAS_EXPANSION = 10_000
MAX_NESTING_DEPTH = 100

_NESTING_DETAIL = f"Document nesting is too deep; at most {MAX_NESTING_DEPTH} levels are supported."
_NESTING_HINT = "Flatten the configuration structure."


@dataclass(frozen=True, slots=True)
class DeserializedTree:
    """Value tree plus the key-path line index built from the same node graph."""

    value: Value
    key_lines: Mapping[str, int] = field(default_factory=dict)


def _error_line(exc: yaml.YAMLError) -> int | None:
    mark = getattr(exc, "problem_mark", None) or getattr(exc, "context_mark", None)
    if mark is None:
        return None
    return mark.line + 1


def _error_detail(exc: yaml.YAMLError) -> str:
    if isinstance(exc, yaml.MarkedYAMLError):
        parts = [part for part in (exc.context, exc.problem) if part]
        if parts:
            return "; ".join(parts)
    return str(exc)


def _count_nodes(root: Node) -> int:
    """Count distinct composed nodes without following aliases twice."""

    seen: set[int] = set()
    pending = [root]
    while pending:
        node = pending.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        if isinstance(node, MappingNode):
            pending.extend(value_node for _, value_node in node.value)
        elif isinstance(node, SequenceNode):
            pending.extend(node.value)
    return len(seen)


class _KeyLineIndexer:
    """Walk the node graph as the value tree will see it, aliases expanded.

    Every value visit counts against `limit`, so an alias fan-out is refused
    before construction copies it.
    """

    def __init__(self, limit: int) -> None:
        self._limit = limit
        self._count = 0
        self._active: set[int] = set()
        self.key_lines: dict[str, int] = {}

    def index(self, node: Node, segments: tuple[str | int, ...] = ()) -> None:
        self._count += 1
        if self._count > self._limit:
            raise ParseFailure(
                detail=f"Alias expansion exceeds {self._limit} values.",
                line=node.start_mark.line + 1,
                hint="Reduce anchor/alias fan-out in the document.",
            )
        if isinstance(node, ScalarNode):
            return
        if len(segments) >= MAX_NESTING_DEPTH:
            raise ParseFailure(
                detail=_NESTING_DETAIL,
                line=node.start_mark.line + 1,
                hint=_NESTING_HINT,
            )
        if id(node) in self._active:
            raise ParseFailure(
                detail="Recursive alias found; self-referencing structures are not supported.",
                line=node.start_mark.line + 1,
                hint="Replace the recursive anchor/alias with explicit values.",
            )

        self._active.add(id(node))
        try:
            if isinstance(node, MappingNode):
                self._index_mapping(node, segments)
            elif isinstance(node, SequenceNode):
                for position, item in enumerate(node.value):
                    child = segments + (position,)
                    self.key_lines.setdefault(format_key_path(child), item.start_mark.line + 1)
                    self.index(item, child)
        finally:
            self._active.discard(id(node))

    def _index_mapping(self, node: MappingNode, segments: tuple[str | int, ...]) -> None:
        seen: set[str] = set()
        for key_node, value_node in node.value:
            if not isinstance(key_node, ScalarNode):
                continue
            child = segments + (key_node.value,)
            line = key_node.start_mark.line + 1
            if key_node.value in seen:
                raise DuplicateKeyError(
                    key=key_node.value, line=line, path=format_key_path(child)
                )
            seen.add(key_node.value)
            self.key_lines.setdefault(format_key_path(child), line)
            self.index(value_node, child)


def _detach(value: Any) -> Any:
    """Copy containers so aliased nodes do not share objects inside the tree."""

    if isinstance(value, dict):
        return {key: _detach(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_detach(item) for item in value]
    return value


def deserialize(text: str) -> DeserializedTree:
    """Parse `text` into a value tree using the restricted grammar.

    Raises:
        ParseFailure: On malformed structure, unsupported tags, duplicate keys
            (`DuplicateKeyError`), excessive nesting, or alias fan-out.
    """

    try:
        loader = StrictSafeLoader(text)
        try:
            node = loader.get_single_node()
            if node is None:
                return DeserializedTree(value=None)
            indexer = _KeyLineIndexer(limit=_count_nodes(node) + MAX_ALIAS_EXPANSION)
            indexer.index(node)
            value = _detach(loader.construct_document(node))
        finally:
            loader.dispose()
    except yaml.YAMLError as exc:
        raise ParseFailure(
            detail=_error_detail(exc),
            line=_error_line(exc),
            hint="Fix the YAML structure near the reported line.",
        ) from exc
    except RecursionError as exc:
        raise ParseFailure(detail=_NESTING_DETAIL, hint=_NESTING_HINT) from exc

    return DeserializedTree(value=value, key_lines=indexer.key_lines)
