"""Integration-test fixtures for deterministic settings resolution."""

from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def _clear_safeconfig_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop `SAFECONFIG_*` variables so host settings never leak into CLI runs."""

    for key in list(os.environ):
        if key.startswith("SAFECONFIG_"):
            monkeypatch.delenv(key, raising=False)
