"""Runtime environment helpers."""

from __future__ import annotations

import os
from pathlib import Path

_USER_ENV_LOADED = False


def load_user_env() -> None:
    """Load user-level srcget env files without overriding existing vars."""
    global _USER_ENV_LOADED
    if _USER_ENV_LOADED:
        return

    for env_file in candidate_env_files():
        for key, value in read_env_file(env_file).items():
            os.environ.setdefault(key, value)

    _USER_ENV_LOADED = True


def candidate_env_files() -> list[Path]:
    """Env files in precedence order; earlier files win."""
    files: list[Path] = []
    env_override = os.environ.get("SRCGET_ENV_FILE", "").strip()
    if env_override:
        files.append(Path(env_override).expanduser())

    srcget_home = os.environ.get("SRCGET_HOME", "").strip()
    if srcget_home:
        files.append(Path(srcget_home).expanduser() / ".env")

    files.append(Path.home() / ".config" / "srcget" / "env")
    return files


def read_env_file(path: Path) -> dict[str, str]:
    """Parse ``KEY=value`` lines; comments, blanks and ``export`` are allowed."""
    if not path.is_file():
        return {}

    values: dict[str, str] = {}
    for raw_line in path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key or key in values:
            continue

        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        values[key] = value
    return values
