"""Resolve a source string and fetch it to a local path."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import threading
from pathlib import Path

from srcget.core.address import split_force_token, split_subdir, subdir_glob, url_scheme
from srcget.core.errors import FetchError, SrcgetError, UnsupportedSchemeError
from srcget.core.models import Mode, Settings
from srcget.getters import Getter
from srcget.services.group import Group
from srcget.services.registry import Registry, build_registry

logger = logging.getLogger(__name__)


class Client:
    """Resolves, dispatches and fetches sources.

    Concurrent ``get`` calls for the same address, candidate getters and mode
    share one download: the first caller fetches, later ones copy what it
    left behind.

    Fetches that select a subdir download the whole artifact into a scratch
    directory, which stays around as the cached copy until :meth:`close`.
    """

    def __init__(
        self,
        registry: Registry | None = None,
        group: Group | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.registry = registry or build_registry(self.settings)
        self.group = group if group is not None else Group()
        self._scratch: list[str] = []
        self._scratch_lock = threading.Lock()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Remove the scratch directories created by subdir fetches."""
        with self._scratch_lock:
            scratch, self._scratch = self._scratch, []
        for path in scratch:
            shutil.rmtree(path, ignore_errors=True)

    def get(
        self,
        src: str,
        dst: str | Path,
        *,
        mode: Mode = Mode.ANY,
        pwd: str | None = None,
        src_resolve_from: str = "",
    ) -> str:
        """Fetch *src* to *dst* and return *dst*."""
        if pwd is None:
            pwd = self.settings.pwd or os.getcwd()
        dst = str(dst)

        resolved = self.registry.ctx_resolve(src, pwd, src_resolve_from)
        address, candidates = self.registry.dispatch(resolved, pwd)
        if not candidates:
            scheme = split_force_token(resolved)[0] or url_scheme(address) or address
            raise UnsupportedSchemeError(scheme)

        url, subdir = split_subdir(address)
        names = [g.name for g in candidates]
        logger.debug("%s resolved to %s via %s", src, address, names)

        fetch_mode = Mode.DIR if subdir else mode
        key = f"{'|'.join(names)}::{url}#{fetch_mode.value}"
        with self.group.hold(key) as slot:
            if slot.location and os.path.exists(slot.location):
                logger.info("Reusing %s for %s", slot.location, url)
                download = slot.location
            else:
                download = self._download_path(dst, subdir)
                self._fetch(url, download, fetch_mode, candidates)
                slot.result = download

        source = subdir_glob(download, subdir) if subdir else download
        _copy(source, dst)
        return dst

    def _download_path(self, dst: str, subdir: str) -> str:
        if not subdir:
            return dst
        # The whole artifact lands in scratch space; only the subdir reaches dst.
        cache_dir = self.settings.cache_dir or None
        if cache_dir:
            os.makedirs(cache_dir, exist_ok=True)
        scratch = tempfile.mkdtemp(prefix="srcget-", dir=cache_dir)
        with self._scratch_lock:
            self._scratch.append(scratch)
        return os.path.join(scratch, "src")

    def _fetch(self, url: str, dst: str, mode: Mode, candidates: tuple[Getter, ...]) -> None:
        errors: list[tuple[str, Exception]] = []
        for getter in candidates:
            try:
                getter_mode = mode if mode is not Mode.ANY else getter.mode(url)
                if getter_mode is Mode.DIR:
                    getter.get(dst, url)
                else:
                    getter.get_file(dst, url)
            except (SrcgetError, OSError) as exc:
                logger.warning("Getter %s failed for %s: %s", getter.name, url, exc)
                errors.append((getter.name, exc))
                continue
            logger.info("Fetched %s with %s", url, getter.name)
            return
        raise FetchError(url, errors)


def _copy(source: str, dst: str) -> None:
    if os.path.abspath(source) == os.path.abspath(dst):
        return
    dest = Path(dst)
    if os.path.isdir(source):
        if dest.is_dir():
            shutil.rmtree(dest)
        elif dest.exists():
            dest.unlink()
        shutil.copytree(source, dest, symlinks=True)
    else:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, dest)
