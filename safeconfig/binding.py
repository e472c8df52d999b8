"""Explicit mapping from a value tree to caller-defined dataclasses.

Deserialization never builds caller types. Callers that want a typed view
pass the tree and a dataclass here; fields are matched by name and checked
against their annotations, and nothing outside the annotations is invoked.

Supported annotations: dataclasses, `str`, `int`, `float`, `bool`, `Any`,
`Optional[T]`/`T | None`, `list[T]`, `tuple[T, ...]`, and `dict[str, T]`.
"""

from __future__ import annotations

import dataclasses
import types
from typing import Any, TypeVar, Union, get_args, get_origin, get_type_hints

from .errors import BindingError
from .models.datatypes import ConfigDocument
from .parsing import format_key_path

_T = TypeVar("_T")


def _describe(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__


def _bind_scalar(value: Any, target: type, segments: tuple[str | int, ...]) -> Any:
    path = format_key_path(segments)
    if target is bool:
        if isinstance(value, bool):
            return value
    elif target is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif target is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif target is str:
        if isinstance(value, str):
            return value
    else:
        raise BindingError(path, f"unsupported annotation `{target!r}`")
    raise BindingError(path, f"expected {target.__name__}, found {_describe(value)}")


def _bind(value: Any, annotation: Any, segments: tuple[str | int, ...]) -> Any:
    path = format_key_path(segments)
    if annotation is Any:
        return value

    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        options = get_args(annotation)
        if value is None:
            if type(None) in options:
                return None
            raise BindingError(path, "value is null")
        errors: list[str] = []
        for option in options:
            if option is type(None):
                continue
            try:
                return _bind(value, option, segments)
            except BindingError as exc:
                errors.append(str(exc))
        raise BindingError(path, f"no union member matched ({'; '.join(errors)})")

    if value is None:
        raise BindingError(path, "value is null")

    if origin is list:
        if not isinstance(value, list):
            raise BindingError(path, f"expected a sequence, found {_describe(value)}")
        (item_type,) = get_args(annotation) or (Any,)
        return [_bind(item, item_type, segments + (index,)) for index, item in enumerate(value)]

    if origin is tuple:
        if not isinstance(value, list):
            raise BindingError(path, f"expected a sequence, found {_describe(value)}")
        args = get_args(annotation)
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple(
                _bind(item, args[0], segments + (index,)) for index, item in enumerate(value)
            )
        if len(args) != len(value):
            raise BindingError(path, f"expected {len(args)} items, found {len(value)}")
        return tuple(
            _bind(item, item_type, segments + (index,))
            for index, (item, item_type) in enumerate(zip(value, args))
        )

    if origin is dict:
        if not isinstance(value, dict):
            raise BindingError(path, f"expected a mapping, found {_describe(value)}")
        args = get_args(annotation)
        item_type = args[1] if len(args) == 2 else Any
        return {key: _bind(item, item_type, segments + (key,)) for key, item in value.items()}

    if dataclasses.is_dataclass(annotation) and isinstance(annotation, type):
        return _bind_dataclass(value, annotation, segments)

    return _bind_scalar(value, annotation, segments)


def _bind_dataclass(value: Any, cls: type[_T], segments: tuple[str | int, ...]) -> _T:
    path = format_key_path(segments)
    if not isinstance(value, dict):
        raise BindingError(path, f"expected a mapping for `{cls.__name__}`, found {_describe(value)}")

    hints = get_type_hints(cls)
    init_fields = [item for item in dataclasses.fields(cls) if item.init]
    known = {item.name for item in init_fields}
    unknown = sorted(set(value).difference(known))
    if unknown:
        raise BindingError(path, f"unsupported key(s) for `{cls.__name__}`: {', '.join(unknown)}")

    arguments: dict[str, Any] = {}
    for item in init_fields:
        if item.name in value:
            arguments[item.name] = _bind(value[item.name], hints[item.name], segments + (item.name,))
            continue
        has_default = (
            item.default is not dataclasses.MISSING
            or item.default_factory is not dataclasses.MISSING
        )
        if not has_default:
            raise BindingError(format_key_path(segments + (item.name,)), "required key is missing")
    return cls(**arguments)


def bind(source: ConfigDocument | Any, cls: type[_T]) -> _T:
    """Build an instance of dataclass `cls` from a value tree or complete document.

    Raises:
        BindingError: If the tree does not match the dataclass annotations.
        TypeError: If `cls` is not a dataclass type.
    """

    if not (dataclasses.is_dataclass(cls) and isinstance(cls, type)):
        raise TypeError(f"`{cls!r}` is not a dataclass type.")
    if isinstance(source, ConfigDocument):
        if not source.is_complete:
            raise BindingError("", f"document `{source.source}` has no value tree (halted)")
        tree = source.tree
    else:
        tree = source
    return _bind_dataclass(tree, cls, ())
