"""Shared typed data models for safeconfig.

This package contains dataclasses and enums used across pipeline modules to
avoid cross-module coupling and circular imports.
"""

from .datatypes import (
    Category,
    ConfigDocument,
    Diagnostic,
    DocumentStatus,
    Severity,
    Value,
)

__all__ = [
    "Category",
    "ConfigDocument",
    "Diagnostic",
    "DocumentStatus",
    "Severity",
    "Value",
]
