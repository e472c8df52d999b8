"""Structural validation stage."""

from .validator import check_empty_values, check_required_keys, validate_document

__all__ = ["check_empty_values", "check_required_keys", "validate_document"]
