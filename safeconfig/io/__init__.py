"""Source input helpers."""

from .loader import FileSource, LoadedSource, TextSource, coerce_source, load_source

__all__ = ["FileSource", "LoadedSource", "TextSource", "coerce_source", "load_source"]
