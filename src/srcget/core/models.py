"""Data shapes for source addresses, fetch modes and settings."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from urllib.parse import parse_qsl


# ── Address layer ───────────────────────────────────────────────────


@dataclass(frozen=True)
class ParsedAddress:
    """A source string split into its grammar components.

    ``raw_query`` keeps the query text exactly as received so that
    parameters such as ``checksum=sha256:...`` survive every rewrite.
    """

    base: str
    force: str = ""
    subdir: str = ""
    raw_query: str = ""

    @property
    def query(self) -> dict[str, str]:
        return dict(parse_qsl(self.raw_query, keep_blank_values=True))

    def __str__(self) -> str:
        out = self.base
        if self.subdir:
            out += "//" + self.subdir
        if self.raw_query:
            out += "?" + self.raw_query
        if self.force:
            out = f"{self.force}::{out}"
        return out


class Mode(enum.Enum):
    """How a getter should materialise an address on disk."""

    ANY = "any"
    FILE = "file"
    DIR = "dir"


# ── Settings layer ──────────────────────────────────────────────────


@dataclass
class Settings:
    """Mirrors the [srcget] table in srcget.toml."""

    pwd: str = ""
    cache_dir: str = ""
    http_timeout: float = 30.0
    git_depth: int | None = None
    disabled_detectors: list[str] = field(default_factory=list)
    disabled_getters: list[str] = field(default_factory=list)
