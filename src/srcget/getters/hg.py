"""Fetch Mercurial repositories by shelling out to ``hg``.

``rev=<revision>`` on the address selects the revision to update to.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from urllib.parse import parse_qsl, urlencode, urlunsplit

from srcget.core.address import parse_url, url_scheme
from srcget.core.errors import GetterError
from srcget.core.models import Mode
from srcget.detectors import bitbucket
from srcget.getters.base import Getter

logger = logging.getLogger(__name__)


class HgGetter(Getter):
    name = "hg"
    schemes = frozenset({"hg"})

    def detect(self, src: str, pwd: str = "") -> tuple[str, bool]:
        if url_scheme(src):
            return "", False
        result, ok = bitbucket.BitBucketDetector().detect(src, pwd)
        if not ok or result.startswith("git::"):
            return "", False
        return result, True

    def claims(self, url: str) -> bool:
        parsed = parse_url(url)
        return parsed.hostname == bitbucket.BITBUCKET_HOST and not parsed.path.endswith(".git")

    def mode(self, url: str) -> Mode:
        return Mode.DIR

    def get(self, dst: str, url: str) -> None:
        if shutil.which("hg") is None:
            raise GetterError("hg must be available and on the PATH")

        parsed = parse_url(url)
        rev = ""
        kept = []
        for key, value in parse_qsl(parsed.query, keep_blank_values=True):
            if key == "rev":
                rev = value
            else:
                kept.append((key, value))
        scheme = "https" if parsed.scheme == "hg" else parsed.scheme
        clone_url = urlunsplit((scheme, parsed.netloc, parsed.path, urlencode(kept), ""))

        dest = Path(dst)
        if dest.exists():
            shutil.rmtree(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)

        logger.info("Cloning %s into %s", clone_url, dest)
        r = _run(["hg", "clone", "-U", "--", clone_url, str(dest)])
        if r.returncode != 0:
            raise GetterError(f"hg clone failed: {r.stderr.strip()}")

        args = ["hg", "update", "-R", str(dest)]
        if rev:
            args += ["-r", rev]
        r = _run(args)
        if r.returncode != 0:
            raise GetterError(f"hg update failed: {r.stderr.strip()}")

    def get_file(self, dst: str, url: str) -> None:
        raise GetterError("hg getter cannot fetch a single file")


def _run(args: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(args, capture_output=True, text=True)
