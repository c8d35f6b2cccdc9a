"""Fetch git repositories by shelling out to ``git``.

Query parameters understood on the address:

  ref=<branch|tag|commit>   check out this ref after cloning
  depth=<n>                 shallow clone (only with a branch or tag ref)

They are removed before the URL is handed to ``git clone``.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from urllib.parse import parse_qsl, urlencode, urlunsplit

from srcget.core.address import parse_url, split_force_token, url_scheme
from srcget.core.errors import GetterError
from srcget.core.models import Mode
from srcget.detectors import bitbucket, git, github, gitlab
from srcget.getters.base import Getter

logger = logging.getLogger(__name__)

_SHORTHAND_DETECTORS = (
    github.GitHubDetector(),
    gitlab.GitLabDetector(),
    git.GitDetector(),
    bitbucket.BitBucketDetector(),
)


class GitGetter(Getter):
    name = "git"
    schemes = frozenset({"git", "ssh"})

    def __init__(self, depth: int | None = None) -> None:
        self.depth = depth

    def detect(self, src: str, pwd: str = "") -> tuple[str, bool]:
        if url_scheme(src):
            return "", False
        for detector in _SHORTHAND_DETECTORS:
            result, ok = detector.detect(src, pwd)
            if ok:
                return split_force_token(result)[1], True
        return "", False

    def claims(self, url: str) -> bool:
        """True for scheme-qualified addresses that look like a git remote."""
        parsed = parse_url(url)
        return parsed.path.endswith(".git") or parsed.hostname == bitbucket.BITBUCKET_HOST

    def mode(self, url: str) -> Mode:
        return Mode.DIR

    def get(self, dst: str, url: str) -> None:
        if shutil.which("git") is None:
            raise GetterError("git must be available and on the PATH")

        clone_url, ref, depth = parse_clone_args(url)
        if depth is None:
            depth = self.depth

        dest = Path(dst)
        if dest.exists():
            shutil.rmtree(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)

        args = ["git", "clone"]
        if depth and ref:
            args += ["--depth", str(depth), "--branch", ref]
        elif depth:
            args += ["--depth", str(depth)]
        args += [clone_url, str(dest)]

        logger.info("Cloning %s into %s", clone_url, dest)
        r = _run(args)
        if r.returncode != 0:
            raise GetterError(f"git clone failed: {r.stderr.strip()}")

        if ref and not depth:
            r = _run(["git", "-C", str(dest), "checkout", ref])
            if r.returncode != 0:
                raise GetterError(f"git checkout {ref} failed: {r.stderr.strip()}")

    def get_file(self, dst: str, url: str) -> None:
        raise GetterError("git getter cannot fetch a single file")


def parse_clone_args(url: str) -> tuple[str, str, int | None]:
    """Split *url* into ``(clone_url, ref, depth)``."""
    parsed = parse_url(url)
    ref = ""
    depth: int | None = None
    kept: list[tuple[str, str]] = []
    for key, value in parse_qsl(parsed.query, keep_blank_values=True):
        if key == "ref":
            ref = value
        elif key == "depth":
            try:
                depth = int(value)
            except ValueError:
                raise GetterError(f"depth must be an integer, got {value!r}") from None
            if depth < 1:
                raise GetterError(f"depth must be positive, got {depth}")
        else:
            kept.append((key, value))

    clone_url = urlunsplit(
        (parsed.scheme, parsed.netloc, parsed.path, urlencode(kept), parsed.fragment)
    )
    return clone_url, ref, depth


def _run(args: list[str], **kwargs) -> subprocess.CompletedProcess:
    return subprocess.run(args, capture_output=True, text=True, **kwargs)
