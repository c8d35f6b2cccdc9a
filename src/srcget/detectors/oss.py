"""Detect Alibaba Cloud OSS bucket URLs."""

from __future__ import annotations

from srcget.core.address import parse_url
from srcget.core.errors import DetectionError


class OSSDetector:
    name = "oss"

    def detect(self, src: str, pwd: str = "") -> tuple[str, bool]:
        if ".aliyuncs.com/" not in src:
            return "", False

        parts = src.split("/")
        if len(parts) < 2 or not parts[1]:
            raise DetectionError("URL is not a valid OSS URL")

        url = f"https://{src}"
        parse_url(url)
        return "oss::" + url, True
