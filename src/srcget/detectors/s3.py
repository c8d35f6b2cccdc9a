"""Detect S3 bucket URLs in virtual-hosted and path style."""

from __future__ import annotations

from srcget.core.address import parse_url
from srcget.core.errors import DetectionError

AMAZON_AWS_HOSTS = (
    "amazonaws.com",
    "amazonaws.com.cn",  # China regions
)


class S3Detector:
    name = "s3"

    def detect(self, src: str, pwd: str = "") -> tuple[str, bool]:
        if not src:
            return "", False
        for hostname in AMAZON_AWS_HOSTS:
            if f".{hostname}/" in src:
                stripped = src.replace(f".{hostname}", "")
                return _detect_http(stripped, hostname), True
        return "", False


def _detect_http(src: str, hostname: str) -> str:
    parts = src.split("/")
    if len(parts) < 2:
        raise DetectionError("URL is not a valid S3 URL")

    host_parts = parts[0].split(".")
    rest = "/".join(parts[1:])
    if _is_path_style(host_parts):
        # s3[-.region].amazonaws.com/bucket/key
        url = f"https://{parts[0]}.{hostname}/{rest}"
    else:
        # bucket.s3[-.region].amazonaws.com/key
        bucket = host_parts[0]
        region = ".".join(host_parts[1:])
        url = f"https://{region}.{hostname}/{bucket}/{rest}"

    parse_url(url)
    return "s3::" + url


def _is_path_style(host_parts: list[str]) -> bool:
    # Bucket names are at least three characters, so a leading "s3" label
    # is always the endpoint.
    if host_parts[0] == "s3":
        return True
    return len(host_parts) == 1 and host_parts[0].startswith("s3-")
