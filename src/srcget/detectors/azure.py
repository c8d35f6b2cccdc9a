"""Detect Azure Blob Storage URLs across the public and sovereign clouds."""

from __future__ import annotations

import re

from srcget.core.address import parse_url
from srcget.core.errors import DetectionError

STORAGE_SUFFIXES = (
    "windows.net",
    "usgovcloudapi.net",
    "chinacloudapi.cn",
    "cloudapi.de",
)

_HOST_RE = re.compile(
    r"^[a-z0-9]{3,24}\.blob\.core\.("
    + "|".join(re.escape(s) for s in STORAGE_SUFFIXES)
    + r")$"
)


class AzureBlobDetector:
    name = "azureblob"

    def detect(self, src: str, pwd: str = "") -> tuple[str, bool]:
        host = src.split("/", 1)[0]
        if ".blob.core." not in host:
            return "", False

        if not _HOST_RE.match(host):
            raise DetectionError(f"invalid Azure Blob Storage hostname: {host}")

        parsed = parse_url(f"https://{src}")
        container = parsed.path.lstrip("/").split("/", 1)[0]
        if not container:
            raise DetectionError("path to blob must contain at least a container name")

        return "azureblob::" + parsed.geturl(), True
