"""Getters fetch a canonical address onto the local filesystem.

``dispatch`` decides which getters may serve an address. It is the one
place that interprets force tokens against the registered getters, so
every caller gets the same answer for the same input.
"""

from __future__ import annotations

import logging
import os
from typing import Sequence

from srcget.core.address import (
    file_url,
    fold_detected,
    recombine,
    split_force_token,
    split_subdir,
    url_scheme,
)
from srcget.getters.base import Getter
from srcget.getters.file import FileGetter
from srcget.getters.git import GitGetter
from srcget.getters.hg import HgGetter
from srcget.getters.http import HttpGetter
from srcget.getters.objectstore import AzureBlobGetter, GCSGetter, OSSGetter, S3Getter

logger = logging.getLogger(__name__)


def default_getters(http_timeout: float = 30.0, git_depth: int | None = None) -> tuple[Getter, ...]:
    """The built-in getters, in dispatch order.

    Shorthand-aware getters come before the filesystem fallback, which
    claims any scheme-less input.
    """
    return (
        GitGetter(depth=git_depth),
        HgGetter(),
        S3Getter(timeout=http_timeout),
        GCSGetter(timeout=http_timeout),
        AzureBlobGetter(timeout=http_timeout),
        OSSGetter(timeout=http_timeout),
        FileGetter(),
        HttpGetter(timeout=http_timeout),
    )


def dispatch(src: str, pwd: str, getters: Sequence[Getter]) -> tuple[str, tuple[Getter, ...]]:
    """Pick the getters that may serve *src*.

    Returns the final address (no force token, subdir folded back in) and
    the candidates, best first. A force token owned by a getter makes it
    the only candidate. An empty tuple means nothing can serve the address.
    """
    force, rest = split_force_token(src)
    base, subdir = split_subdir(rest)
    scheme = url_scheme(base)

    if force:
        forced = next((g for g in getters if g.valid_scheme(force)), None)
        if forced is None:
            logger.debug("no getter for force token %r", force)
            return recombine("", base, subdir), ()
        if scheme:
            return recombine("", base, subdir), (forced,)
        result, ok = forced.detect(base, pwd)
        if not ok:
            result = _anchor(base, pwd)
        return _fold(result, subdir), (forced,)

    winner = None
    final = recombine("", base, subdir) if scheme else ""
    if not scheme:
        for getter in getters:
            result, ok = getter.detect(base, pwd)
            if ok:
                winner = getter
                final = _fold(result, subdir)
                break
        if winner is None:
            logger.debug("no getter recognises %r", src)
            return rest, ()

    target = split_subdir(final)[0]
    target_scheme = url_scheme(target)
    candidates = [winner] if winner is not None else []
    for getter in getters:
        if getter is winner:
            continue
        if getter.valid_scheme(target_scheme) or getter.claims(target):
            candidates.append(getter)
    return final, tuple(candidates)


def _fold(detected: str, subdir: str) -> str:
    _, detected = split_force_token(detected)
    return fold_detected(detected, "", subdir)


def _anchor(path: str, pwd: str) -> str:
    """Filesystem path handed to a forced getter with no shorthand for it."""
    path, _, query = path.partition("?")
    if os.path.isabs(path):
        return file_url(path, query)
    if pwd:
        return file_url(os.path.normpath(os.path.join(pwd, path)), query)
    return path + ("?" + query if query else "")


__all__ = [
    "AzureBlobGetter",
    "FileGetter",
    "GCSGetter",
    "Getter",
    "GitGetter",
    "HgGetter",
    "HttpGetter",
    "OSSGetter",
    "S3Getter",
    "default_getters",
    "dispatch",
]
