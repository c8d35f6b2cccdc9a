"""Anonymous object-store getters.

Each store exposes public objects over plain HTTPS, so these getters map
the canonical address to that public URL and download it like any other
HTTP file. Credentials and directory (prefix) listing are not handled.
"""

from __future__ import annotations

from srcget.core.address import parse_url, split_force_token, url_scheme
from srcget.core.errors import GetterError
from srcget.detectors import azure, gcs, oss, s3
from srcget.getters.http import HttpGetter


class ObjectStoreGetter(HttpGetter):
    detector = None

    def detect(self, src: str, pwd: str = "") -> tuple[str, bool]:
        if url_scheme(src) or self.detector is None:
            return "", False
        result, ok = self.detector.detect(src, pwd)
        if not ok:
            return "", False
        return split_force_token(result)[1], True

    def request_url(self, url: str) -> str:
        parsed = parse_url(url)
        if parsed.scheme in self.schemes:
            url = self.from_native(parsed.netloc, parsed.path.lstrip("/"), parsed.query)
        return super().request_url(url)

    def from_native(self, bucket: str, key: str, query: str) -> str:
        """Public HTTPS URL for a ``<scheme>://bucket/key`` address."""
        raise GetterError(f"{self.name} getter needs an https:// address")


def _with_query(url: str, query: str) -> str:
    return f"{url}?{query}" if query else url


class S3Getter(ObjectStoreGetter):
    name = "s3"
    schemes = frozenset({"s3"})
    detector = s3.S3Detector()

    def from_native(self, bucket: str, key: str, query: str) -> str:
        return _with_query(f"https://{bucket}.s3.amazonaws.com/{key}", query)


class GCSGetter(ObjectStoreGetter):
    name = "gcs"
    schemes = frozenset({"gcs"})
    detector = gcs.GCSDetector()

    def request_url(self, url: str) -> str:
        # JSON-API object paths are served publicly from storage.googleapis.com.
        parsed = parse_url(url)
        if parsed.hostname == "www.googleapis.com" and parsed.path.startswith("/storage/"):
            parts = parsed.path.split("/", 4)
            if len(parts) == 5:
                url = _with_query(
                    f"https://storage.googleapis.com/{parts[3]}/{parts[4]}", parsed.query
                )
        return super().request_url(url)

    def from_native(self, bucket: str, key: str, query: str) -> str:
        return _with_query(f"https://storage.googleapis.com/{bucket}/{key}", query)


class AzureBlobGetter(ObjectStoreGetter):
    name = "azureblob"
    schemes = frozenset({"azureblob"})
    detector = azure.AzureBlobDetector()


class OSSGetter(ObjectStoreGetter):
    name = "oss"
    schemes = frozenset({"oss"})
    detector = oss.OSSDetector()
