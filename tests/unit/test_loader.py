"""Unit tests for configuration source loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from safeconfig.errors import SourceUnavailable
from safeconfig.io.loader import FileSource, TextSource, coerce_source, load_source


def test_load_source_reads_file_and_uses_path_as_identifier(tmp_path: Path) -> None:
    config_path = tmp_path / "app.yaml"
    config_path.write_text("name: svc\n", encoding="utf-8")

    loaded = load_source(FileSource(config_path))

    assert loaded.identifier == str(config_path)
    assert loaded.text == "name: svc\n"


def test_load_source_returns_literal_text_without_filesystem_access() -> None:
    loaded = load_source(TextSource("a: 1\n", name="inline"))

    assert loaded.identifier == "inline"
    assert loaded.text == "a: 1\n"


def test_plain_strings_and_paths_are_treated_as_file_paths(tmp_path: Path) -> None:
    config_path = tmp_path / "app.yaml"
    config_path.write_text("a: 1\n", encoding="utf-8")

    assert coerce_source(str(config_path)) == FileSource(config_path)
    assert load_source(config_path).text == "a: 1\n"


def test_coerce_source_rejects_unsupported_types() -> None:
    with pytest.raises(TypeError, match="Unsupported configuration source type `int`"):
        coerce_source(42)  # type: ignore[arg-type]


def test_missing_file_raises_source_unavailable(tmp_path: Path) -> None:
    missing = tmp_path / "missing.yaml"

    with pytest.raises(SourceUnavailable) as exc_info:
        load_source(missing)

    assert exc_info.value.stage == "load"
    assert exc_info.value.source == str(missing)
    assert "Config file not found" in exc_info.value.detail
    assert isinstance(exc_info.value.__cause__, FileNotFoundError)


def test_directory_source_raises_source_unavailable(tmp_path: Path) -> None:
    with pytest.raises(SourceUnavailable, match="is a directory"):
        load_source(tmp_path)


def test_undecodable_file_raises_source_unavailable(tmp_path: Path) -> None:
    config_path = tmp_path / "binary.yaml"
    config_path.write_bytes(b"name: \xff\xfe\n")

    with pytest.raises(SourceUnavailable, match="is not valid utf-8 text"):
        load_source(config_path)


def test_load_source_honors_encoding(tmp_path: Path) -> None:
    config_path = tmp_path / "latin.yaml"
    config_path.write_bytes("city: Z\xfcrich\n".encode("latin-1"))

    assert load_source(config_path, encoding="latin-1").text == "city: Zürich\n"
