"""Detect SCP-style git addresses (``user@host:path``)."""

from __future__ import annotations

import re
from urllib.parse import quote

from srcget.core.address import parse_url, url_scheme
from srcget.core.errors import DetectionError
from srcget.detectors import github

SCP_LIKE_RE = re.compile(r"^(?:([^@]+)@)?([^:]+):/?(.+)$")
_DRIVE_RE = re.compile(r"^[A-Za-z]:[\\/]")


class GitDetector:
    name = "git"

    def detect(self, src: str, pwd: str = "") -> tuple[str, bool]:
        if not src:
            return "", False
        if src.startswith("github.com/"):
            return github.detect_http(src), True
        if looks_scp_like(src):
            return detect_ssh(src), True
        return "", False


def looks_scp_like(src: str) -> bool:
    """True when *src* is not URL syntax but matches ``[user@]host:path``.

    A colon inside the first path segment is what makes such strings
    unparsable as URLs.
    """
    if url_scheme(src) or _DRIVE_RE.match(src):
        return False
    first_segment = src.split("/", 1)[0]
    return ":" in first_segment and SCP_LIKE_RE.match(src) is not None


def detect_ssh(src: str) -> str:
    match = SCP_LIKE_RE.match(src)
    if match is None:
        raise DetectionError("error matching SCP style URL")

    user, host, path = match.groups()
    path, qsep, query = path.partition("?")

    url = "ssh://"
    if user:
        url += quote(user, safe="") + "@"
    url += host + "/" + quote(path, safe="/$&+,:;=@")
    if qsep:
        url += "?" + query

    parse_url(url)
    return "git::" + url
