"""Restricted PyYAML loader for the safeconfig value grammar.

Responsibilities:
- Resolve plain scalars with a fixed precedence: bool, null, int, float, str.
- Construct only null, bool, int, float, str, sequence, and mapping values.
- Reject duplicate mapping keys and every other tag, including `!!python/*`.

The loader reuses PyYAML's reader, scanner, parser, and composer but starts
from empty resolver and constructor registries, so nothing registered on
`yaml.SafeLoader` (timestamps, binary, sets, merge keys) leaks in.
"""

from __future__ import annotations

import re
from typing import Any

from yaml.composer import Composer
from yaml.constructor import ConstructorError, SafeConstructor
from yaml.nodes import MappingNode, ScalarNode
from yaml.parser import Parser
from yaml.reader import Reader
from yaml.resolver import BaseResolver
from yaml.scanner import Scanner

from ..errors import DuplicateKeyError

NULL_TAG = "tag:yaml.org,2002:null"
BOOL_TAG = "tag:yaml.org,2002:bool"
INT_TAG = "tag:yaml.org,2002:int"
FLOAT_TAG = "tag:yaml.org,2002:float"
STR_TAG = "tag:yaml.org,2002:str"
SEQ_TAG = "tag:yaml.org,2002:seq"
MAP_TAG = "tag:yaml.org,2002:map"

_SCALAR_KEY_TAGS = frozenset({NULL_TAG, BOOL_TAG, INT_TAG, FLOAT_TAG, STR_TAG})
_TRUE_TOKENS = frozenset({"true", "yes"})
_FALSE_TOKENS = frozenset({"false", "no"})

_BOOL_PATTERN = re.compile(r"^(?:true|false|yes|no)$", re.IGNORECASE)
_NULL_PATTERN = re.compile(r"^(?:null|~|)$", re.IGNORECASE)
_INT_PATTERN = re.compile(r"^(?:[-+]?[0-9]+|0o[0-7]+|0x[0-9a-fA-F]+)$")
_FLOAT_PATTERN = re.compile(
    r"""^(?:[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?
    |[-+]?\.(?:inf|Inf|INF)
    |\.(?:nan|NaN|NAN))$""",
    re.VERBOSE,
)
_NUMBER_FIRST_CHARS = list("-+0123456789.")


class StrictResolver(BaseResolver):
    """Implicit scalar resolution limited to the supported scalar types."""

    yaml_implicit_resolvers: dict[Any, list[tuple[str, re.Pattern[str]]]] = {}
    yaml_path_resolvers: dict[Any, Any] = {}


StrictResolver.add_implicit_resolver(BOOL_TAG, _BOOL_PATTERN, list("tTfFyYnN"))
StrictResolver.add_implicit_resolver(NULL_TAG, _NULL_PATTERN, ["~", "n", "N", ""])
StrictResolver.add_implicit_resolver(INT_TAG, _INT_PATTERN, _NUMBER_FIRST_CHARS)
StrictResolver.add_implicit_resolver(FLOAT_TAG, _FLOAT_PATTERN, _NUMBER_FIRST_CHARS)


class StrictConstructor(SafeConstructor):
    """Constructor that builds plain Python values and nothing else."""

    yaml_constructors: dict[Any, Any] = {}

    def construct_mapping(self, node: Any, deep: bool = False) -> dict[str, Any]:
        if not isinstance(node, MappingNode):
            raise ConstructorError(
                None, None, f"expected a mapping node, but found {node.id}", node.start_mark
            )
        mapping: dict[str, Any] = {}
        for key_node, value_node in node.value:
            if not isinstance(key_node, ScalarNode):
                raise ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    "found a non-scalar key; only scalar keys are supported",
                    key_node.start_mark,
                )
            if key_node.tag not in _SCALAR_KEY_TAGS:
                self.construct_unsupported(key_node)
            key = key_node.value
            if key in mapping:
                raise DuplicateKeyError(key=key, line=key_node.start_mark.line + 1)
            mapping[key] = self.construct_object(value_node, deep=deep)
        return mapping

    def construct_strict_bool(self, node: Any) -> bool:
        value = str(self.construct_scalar(node)).lower()
        if value in _TRUE_TOKENS:
            return True
        if value in _FALSE_TOKENS:
            return False
        raise ConstructorError(None, None, f"invalid boolean {value!r}", node.start_mark)

    def construct_strict_int(self, node: Any) -> int:
        value = str(self.construct_scalar(node))
        try:
            if value.startswith("0x"):
                return int(value[2:], 16)
            if value.startswith("0o"):
                return int(value[2:], 8)
            return int(value)
        except ValueError as exc:
            raise ConstructorError(
                None, None, f"invalid integer {value!r}", node.start_mark
            ) from exc

    def construct_strict_float(self, node: Any) -> float:
        value = str(self.construct_scalar(node))
        lowered = value.lower()
        if lowered in {".inf", "+.inf"}:
            return float("inf")
        if lowered == "-.inf":
            return float("-inf")
        if lowered == ".nan":
            return float("nan")
        try:
            return float(value)
        except ValueError as exc:
            raise ConstructorError(
                None, None, f"invalid float {value!r}", node.start_mark
            ) from exc

    def construct_unsupported(self, node: Any) -> Any:
        raise ConstructorError(
            None,
            None,
            f"tag {node.tag!r} is not allowed; only plain scalars, sequences, "
            "and mappings are supported",
            node.start_mark,
        )


StrictConstructor.add_constructor(NULL_TAG, SafeConstructor.construct_yaml_null)
StrictConstructor.add_constructor(BOOL_TAG, StrictConstructor.construct_strict_bool)
StrictConstructor.add_constructor(INT_TAG, StrictConstructor.construct_strict_int)
StrictConstructor.add_constructor(FLOAT_TAG, StrictConstructor.construct_strict_float)
StrictConstructor.add_constructor(STR_TAG, SafeConstructor.construct_yaml_str)
StrictConstructor.add_constructor(SEQ_TAG, SafeConstructor.construct_yaml_seq)
StrictConstructor.add_constructor(MAP_TAG, SafeConstructor.construct_yaml_map)
StrictConstructor.add_constructor(None, StrictConstructor.construct_unsupported)


class StrictSafeLoader(Reader, Scanner, Parser, Composer, StrictConstructor, StrictResolver):
    """PyYAML loader pipeline wired to the strict resolver and constructor."""

    def __init__(self, stream: str) -> None:
        Reader.__init__(self, stream)
        Scanner.__init__(self)
        Parser.__init__(self)
        Composer.__init__(self)
        StrictConstructor.__init__(self)
        StrictResolver.__init__(self)
