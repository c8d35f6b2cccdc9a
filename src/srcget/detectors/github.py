"""Detect GitHub shorthand (``github.com/org/repo``) and rewrite it for git."""

from __future__ import annotations

from srcget.core.address import parse_url
from srcget.core.errors import DetectionError


class GitHubDetector:
    name = "github"

    def detect(self, src: str, pwd: str = "") -> tuple[str, bool]:
        if not src.startswith("github.com/"):
            return "", False
        return detect_http(src), True


def detect_http(src: str) -> str:
    """Rewrite ``github.com/org/repo[/sub][?q]`` to a ``git::https`` URL.

    Path segments past the repository become the subdir.
    """
    parts = src.split("?")
    if len(parts) > 2:
        raise DetectionError("there is more than 1 '?' in the URL")

    segments = parts[0].split("/")
    if len(segments) < 3 or not segments[1] or not segments[2]:
        raise DetectionError("GitHub URLs should be github.com/username/repo")

    url = "https://" + "/".join(segments[:3])
    if not url.endswith(".git"):
        url += ".git"
    if len(segments) > 3:
        url += "//" + "/".join(segments[3:])
    if len(parts) == 2:
        url += "?" + parts[1]

    parse_url(url)
    return "git::" + url
