"""Shared pytest fixtures for the full safeconfig test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

_FILES_DIR = Path(__file__).parent / "files"


@pytest.fixture
def files_dir() -> Path:
    """Provide the directory holding YAML and dotenv fixtures."""

    return _FILES_DIR


@pytest.fixture
def service_config_path() -> Path:
    """Provide the canonical service configuration fixture path."""

    return _FILES_DIR / "service.yaml"


@pytest.fixture
def service_env_path() -> Path:
    """Provide the dotenv fixture paired with `service.yaml`."""

    return _FILES_DIR / "service.env"
