"""Top-level package for safeconfig.

This package loads YAML configuration text, substitutes `${NAME}` placeholders
from an injected environment mapping, deserializes it with a restricted safe
grammar, and validates the result. The main entry point is `load_config`.
"""

__version__ = "0.3.2"

from .binding import bind
from .errors import (
    BindingError,
    ConfigPipelineError,
    DuplicateKeyError,
    ParseFailure,
    SourceUnavailable,
)
from .io.loader import FileSource, TextSource
from .models.datatypes import (
    Category,
    ConfigDocument,
    Diagnostic,
    DocumentStatus,
    Severity,
)
from .pipeline import ConfigPipeline, load_config

__all__ = [
    "BindingError",
    "Category",
    "ConfigDocument",
    "ConfigPipeline",
    "ConfigPipelineError",
    "Diagnostic",
    "DocumentStatus",
    "DuplicateKeyError",
    "FileSource",
    "ParseFailure",
    "Severity",
    "SourceUnavailable",
    "TextSource",
    "__version__",
    "bind",
    "load_config",
]
