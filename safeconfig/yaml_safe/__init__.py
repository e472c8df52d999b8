"""Restricted YAML deserialization built on PyYAML."""

from .deserializer import DeserializedTree, deserialize
from .loader import StrictSafeLoader
from .merge import MERGE_KEY, expand_merge_keys, expand_merged_tree

__all__ = [
    "DeserializedTree",
    "MERGE_KEY",
    "StrictSafeLoader",
    "deserialize",
    "expand_merge_keys",
    "expand_merged_tree",
]
