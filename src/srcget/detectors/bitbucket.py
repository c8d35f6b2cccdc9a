"""Detect BitBucket shorthand.

BitBucket hosts both git and Mercurial repositories and the address alone
does not say which. A ``.git`` suffix settles it; otherwise the address is
left scheme-qualified with no force token and getter dispatch offers both
the git and hg getters as candidates.
"""

from __future__ import annotations

from srcget.core.address import parse_url
from srcget.core.errors import DetectionError

BITBUCKET_HOST = "bitbucket.org"


class BitBucketDetector:
    name = "bitbucket"

    def detect(self, src: str, pwd: str = "") -> tuple[str, bool]:
        if not src.startswith(BITBUCKET_HOST + "/"):
            return "", False

        url = f"https://{src}"
        parsed = parse_url(url)
        segments = [s for s in parsed.path.split("/") if s]
        if len(segments) < 2:
            raise DetectionError(
                "BitBucket URLs should be bitbucket.org/username/repo"
            )

        if parsed.path.endswith(".git"):
            return "git::" + url, True
        return url, True
