"""Configuration source loading.

Responsibilities:
- Read raw configuration text from a file path or take literal text as-is.
- Map every read failure to `SourceUnavailable`.

Key types:
- `FileSource`, `TextSource`: explicit source descriptors.
- `LoadedSource`: identifier and raw text produced by `load_source`.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Union

from ..errors import SourceUnavailable


@dataclass(frozen=True, slots=True)
class FileSource:
    """Configuration stored in a file on disk."""

    path: Path

    @property
    def identifier(self) -> str:
        return str(self.path)


@dataclass(frozen=True, slots=True)
class TextSource:
    """Configuration text supplied directly by the caller."""

    text: str
    name: str = "<text>"

    @property
    def identifier(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class LoadedSource:
    """Raw configuration text paired with its source identifier."""

    identifier: str
    text: str


SourceLike = Union[FileSource, TextSource, str, "os.PathLike[str]"]


def coerce_source(source: SourceLike) -> FileSource | TextSource:
    """Normalize a source argument; plain strings and path-likes are file paths."""

    if isinstance(source, (FileSource, TextSource)):
        return source
    if isinstance(source, (str, os.PathLike)):
        return FileSource(Path(source))
    raise TypeError(
        f"Unsupported configuration source type `{type(source).__name__}`; "
        "pass a path, `FileSource`, or `TextSource`."
    )


def load_source(source: SourceLike, encoding: str = "utf-8") -> LoadedSource:
    """Return raw text for a source, reading the file when needed.

    Raises:
        SourceUnavailable: If the file is missing, unreadable, or not decodable.
    """

    resolved = coerce_source(source)
    if isinstance(resolved, TextSource):
        return LoadedSource(identifier=resolved.identifier, text=resolved.text)

    path = resolved.path
    try:
        with path.open("r", encoding=encoding) as handle:
            text = handle.read()
    except FileNotFoundError as exc:
        raise SourceUnavailable(
            source=str(path),
            detail=f"Config file not found: `{path}`.",
            hint="Provide an existing configuration file path.",
        ) from exc
    except IsADirectoryError as exc:
        raise SourceUnavailable(
            source=str(path),
            detail=f"Config path `{path}` is a directory.",
            hint="Point to a configuration file, not a folder.",
        ) from exc
    except PermissionError as exc:
        raise SourceUnavailable(
            source=str(path),
            detail=f"Permission denied reading config file `{path}`.",
            hint="Check file permissions for the current user.",
        ) from exc
    except UnicodeDecodeError as exc:
        raise SourceUnavailable(
            source=str(path),
            detail=f"Config file `{path}` is not valid {encoding} text: {exc.reason}.",
            hint="Re-save the file as UTF-8 or pass the matching `--encoding`.",
        ) from exc
    except OSError as exc:
        raise SourceUnavailable(
            source=str(path),
            detail=f"Failed to read config file `{path}`: {exc}",
        ) from exc

    return LoadedSource(identifier=str(path), text=text)
