"""Fetch from the local filesystem (``file://`` addresses)."""

from __future__ import annotations

import os
import re
import shutil
from pathlib import Path
from urllib.parse import unquote

from srcget.core.address import parse_url, url_scheme
from srcget.core.models import Mode
from srcget.detectors.file import FileDetector
from srcget.getters.base import Getter

_DRIVE_PATH_RE = re.compile(r"^/[A-Za-z]:")


class FileGetter(Getter):
    name = "file"
    schemes = frozenset({"file"})

    def detect(self, src: str, pwd: str = "") -> tuple[str, bool]:
        if url_scheme(src):
            return "", False
        return FileDetector().detect(src, pwd)

    def mode(self, url: str) -> Mode:
        path = local_path(url)
        if not path.exists():
            raise FileNotFoundError(f"Source not found: {path}")
        return Mode.DIR if path.is_dir() else Mode.FILE

    def get(self, dst: str, url: str) -> None:
        src = local_path(url)
        if not src.is_dir():
            raise FileNotFoundError(f"Source directory not found: {src}")
        dest = Path(dst)
        if dest.resolve() == src.resolve():
            return
        if dest.exists():
            shutil.rmtree(dest)
        shutil.copytree(src, dest, symlinks=True)

    def get_file(self, dst: str, url: str) -> None:
        src = local_path(url)
        if not src.is_file():
            raise FileNotFoundError(f"Source file not found: {src}")
        dest = Path(dst)
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dest)


def local_path(url: str) -> Path:
    """Filesystem path named by a ``file://`` URL (or a bare path)."""
    parsed = parse_url(url)
    if parsed.scheme != "file":
        return Path(url).expanduser().resolve()
    path = unquote(parsed.path)
    if os.name == "nt" and _DRIVE_PATH_RE.match(path):
        path = path[1:]
    return Path(path)
