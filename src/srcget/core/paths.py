"""Path constants and config-file lookup."""

from __future__ import annotations

from pathlib import Path

SRCGET_TOML = "srcget.toml"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* to the nearest srcget.toml, if any."""
    start = start or Path.cwd()
    for parent in [start, *start.parents]:
        candidate = parent / SRCGET_TOML
        if candidate.is_file():
            return candidate
    return None
