"""Detect Google Cloud Storage JSON-API URLs.

Bucket and object names are checked against the published naming rules so
obvious typos fail here rather than as an opaque 404 later.
"""

from __future__ import annotations

import posixpath
import re

from srcget.core.address import parse_url
from srcget.core.errors import DetectionError

_VERSION_RE = re.compile(r"^v\d+$")
_IP_RE = re.compile(r"^(\d{1,3}\.){3}\d{1,3}$")
_GOOGLE_RE = re.compile(r"google|g00gle")
_BUCKET_CHARS_RE = re.compile(r"^[a-z0-9\-_.]+$")


class GCSDetector:
    name = "gcs"

    def detect(self, src: str, pwd: str = "") -> tuple[str, bool]:
        if ".googleapis.com/" not in src:
            return "", False
        return _detect_http(src), True


def _detect_http(src: str) -> str:
    src, qsep, query = src.partition("?")
    parts = posixpath.normpath(src).split("/")
    if len(parts) < 5:
        raise DetectionError("URL is not a valid GCS URL")

    version = parts[2]
    if not _VERSION_RE.match(version):
        raise DetectionError("GCS URL version is not valid")

    bucket = parts[3]
    if not is_valid_bucket_name(bucket):
        raise DetectionError("GCS URL bucket name is not valid")

    obj = "/".join(parts[4:])
    if not is_valid_object_name(obj):
        raise DetectionError("GCS URL object name is not valid")

    url = f"https://www.googleapis.com/storage/{version}/{bucket}/{obj}"
    if qsep:
        url += "?" + query
    parse_url(url)
    return "gcs::" + url


def is_valid_bucket_name(bucket: str) -> bool:
    if len(bucket) < 3 or len(bucket) > 222:
        return False
    if len(bucket) > 63 and any(len(c) > 63 for c in bucket.split(".")):
        return False
    if bucket[0] in "-." or bucket[-1] in "-._":
        return False
    if " " in bucket or _IP_RE.match(bucket):
        return False
    if bucket.startswith("goog") or _GOOGLE_RE.search(bucket):
        return False
    return _BUCKET_CHARS_RE.match(bucket) is not None


def is_valid_object_name(obj: str) -> bool:
    if "\r" in obj or "\n" in obj:
        return False
    if obj.startswith(".well-known/acme-challenge/"):
        return False
    if obj in (".", ".."):
        return False
    return all(c.isprintable() or c.isspace() for c in obj)
