"""Detect GitLab shorthand, which allows nested group paths."""

from __future__ import annotations

from srcget.core.address import parse_url
from srcget.core.errors import DetectionError


class GitLabDetector:
    name = "gitlab"

    def detect(self, src: str, pwd: str = "") -> tuple[str, bool]:
        if not src.startswith("gitlab.com/"):
            return "", False

        repo_url = parse_url(f"https://{src}")
        parts = repo_url.path.split("//")
        if len(parts[0].split("/")) < 3:
            raise DetectionError(
                "GitLab URLs should be gitlab.com/username/repo "
                "or gitlab.com/organization/project/repo"
            )
        if len(parts) > 2:
            raise DetectionError('URL malformed: "//" can only used once in path')

        if not parts[0].endswith(".git"):
            parts[0] += ".git"

        return "git::" + repo_url._replace(path="//".join(parts)).geturl(), True
