"""Repository for srcget.toml read/write, plus environment overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

import tomlkit

from srcget.core import paths
from srcget.core.env import load_user_env
from srcget.core.models import Settings

TABLE = "srcget"


# ── Serialization ───────────────────────────────────────────────────


def dump(settings: Settings) -> str:
    """Serialize Settings to a TOML string."""
    doc = tomlkit.document()
    doc.add(tomlkit.comment("srcget configuration"))
    doc.add(tomlkit.nl())

    table = tomlkit.table()
    if settings.cache_dir:
        table.add("cache_dir", settings.cache_dir)
    table.add("http_timeout", settings.http_timeout)
    if settings.git_depth is not None:
        table.add("git_depth", settings.git_depth)
    if settings.disabled_detectors:
        table.add("disabled_detectors", list(settings.disabled_detectors))
    if settings.disabled_getters:
        table.add("disabled_getters", list(settings.disabled_getters))
    doc.add(TABLE, table)

    return tomlkit.dumps(doc)


def load(path: Path) -> Settings:
    """Deserialize srcget.toml into Settings."""
    raw = tomlkit.loads(path.read_text())
    table = raw.get(TABLE, {})

    git_depth = table.get("git_depth")
    return Settings(
        cache_dir=str(table.get("cache_dir", "")),
        http_timeout=float(table.get("http_timeout", 30.0)),
        git_depth=int(git_depth) if git_depth is not None else None,
        disabled_detectors=[str(name) for name in table.get("disabled_detectors", [])],
        disabled_getters=[str(name) for name in table.get("disabled_getters", [])],
    )


def save(settings: Settings, path: Path) -> None:
    """Write settings to disk."""
    path.write_text(dump(settings))


# ── Environment ─────────────────────────────────────────────────────


def apply_env(settings: Settings, environ: Mapping[str, str] | None = None) -> Settings:
    """Overlay ``SRCGET_*`` variables on *settings* in place and return it."""
    env = os.environ if environ is None else environ

    if env.get("SRCGET_PWD"):
        settings.pwd = env["SRCGET_PWD"]
    if env.get("SRCGET_CACHE_DIR"):
        settings.cache_dir = env["SRCGET_CACHE_DIR"]

    raw = env.get("SRCGET_HTTP_TIMEOUT", "").strip()
    if raw:
        try:
            settings.http_timeout = float(raw)
        except ValueError:
            raise ValueError(f"SRCGET_HTTP_TIMEOUT must be a number, got {raw!r}") from None

    raw = env.get("SRCGET_GIT_DEPTH", "").strip()
    if raw:
        try:
            settings.git_depth = int(raw)
        except ValueError:
            raise ValueError(f"SRCGET_GIT_DEPTH must be an integer, got {raw!r}") from None

    return settings


def load_settings(start: Path | None = None) -> Settings:
    """Settings from the nearest srcget.toml, then user env files and SRCGET_*."""
    load_user_env()
    path = paths.find_config(start)
    settings = load(path) if path else Settings()
    return apply_env(settings)
