"""Module entrypoint for running safeconfig as ``python -m safeconfig``."""

from __future__ import annotations

from safeconfig.cli import main


if __name__ == "__main__":
    main()
