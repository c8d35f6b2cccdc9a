"""Fallback detector: treat whatever is left as a filesystem path.

Only path arithmetic happens here; nothing touches the disk.
"""

from __future__ import annotations

import os

from srcget.core.address import file_url
from srcget.core.errors import DetectionError


class FileDetector:
    name = "file"

    def detect(self, src: str, pwd: str = "") -> tuple[str, bool]:
        if not src:
            return "", False

        path, _, query = src.partition("?")
        if not os.path.isabs(path):
            if not pwd:
                raise DetectionError(
                    "relative paths require a module with a pwd"
                )
            path = os.path.join(pwd, path)
        path = os.path.normpath(path)
        if not os.path.isabs(path):
            raise DetectionError(f"pwd must be an absolute path, got: {pwd}")

        return file_url(path, query), True
