"""Fetch single files over HTTP(S) with httpx."""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import parse_qsl, urlencode, urlunsplit

import httpx

from srcget.core.address import parse_url
from srcget.core.errors import GetterError
from srcget.core.models import Mode
from srcget.getters.base import Getter

logger = logging.getLogger(__name__)

# Consumed by whoever verifies the download, never sent to the server.
_LOCAL_PARAMS = frozenset({"checksum"})


class HttpGetter(Getter):
    name = "http"
    schemes = frozenset({"http", "https"})

    def __init__(
        self,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.transport = transport

    def mode(self, url: str) -> Mode:
        return Mode.FILE

    def get(self, dst: str, url: str) -> None:
        raise GetterError(f"{self.name} getter cannot fetch a directory: {url}")

    def get_file(self, dst: str, url: str) -> None:
        self.download(self.request_url(url), Path(dst))

    def request_url(self, url: str) -> str:
        """The URL actually requested for *url*."""
        return strip_params(url, _LOCAL_PARAMS)

    def download(self, url: str, dest: Path) -> None:
        logger.info("Downloading %s to %s", url, dest)
        dest.parent.mkdir(parents=True, exist_ok=True)
        try:
            with httpx.Client(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                with client.stream("GET", url) as resp:
                    resp.raise_for_status()
                    with open(dest, "wb") as fh:
                        for chunk in resp.iter_bytes():
                            fh.write(chunk)
        except httpx.HTTPStatusError as exc:
            dest.unlink(missing_ok=True)
            raise GetterError(
                f"bad response code {exc.response.status_code} for {url}"
            ) from exc
        except httpx.HTTPError as exc:
            dest.unlink(missing_ok=True)
            raise GetterError(f"error fetching {url}: {exc}") from exc


def strip_params(url: str, names: frozenset[str]) -> str:
    parsed = parse_url(url)
    if not parsed.query:
        return url
    kept = [
        (k, v)
        for k, v in parse_qsl(parsed.query, keep_blank_values=True)
        if k not in names
    ]
    return urlunsplit(
        (parsed.scheme, parsed.netloc, parsed.path, urlencode(kept), parsed.fragment)
    )
