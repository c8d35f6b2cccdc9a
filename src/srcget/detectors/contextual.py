"""Contextual detection: detectors that also see the caller's context.

Some shorthands cannot be read from the string alone. A relative path given
with a ``git::`` force token names a local git repository, and it must be
resolved from the directory of the module that declared it, which is not
necessarily the process working directory. Contextual detectors therefore
receive, besides ``src`` and ``pwd``:

``force_token``
    The token stripped from the input (``"git"`` for ``git::...``), so a
    detector can tell input meant for it from merely similar input.
``subdir``
    The ``//subdir`` stripped from the input. For awareness only; it must
    not be folded into the result.
``src_resolve_from``
    A directory that takes precedence over ``pwd`` when resolving relative
    filesystem paths.
"""

from __future__ import annotations

import logging
import os
from typing import Protocol, Sequence

from srcget.core.address import (
    canonical_scheme,
    file_url,
    fold_detected,
    parse_url,
    split_force_token,
    split_subdir,
)
from srcget.core.errors import ForcedDetectionError, InvalidSourceError
from srcget.detectors import (
    Detector,
    azure,
    bitbucket,
    file,
    gcs,
    git,
    github,
    gitlab,
    oss,
    s3,
)

logger = logging.getLogger(__name__)

_RELATIVE_PREFIXES = ("./", "../", ".\\", "..\\")


class CtxDetector(Protocol):
    name: str

    def ctx_detect(
        self,
        src: str,
        pwd: str,
        force_token: str = "",
        subdir: str = "",
        src_resolve_from: str = "",
    ) -> tuple[str, bool]: ...


class ContextualAdapter:
    """Run a plain :class:`Detector` inside the contextual chain."""

    def __init__(self, detector: Detector) -> None:
        self.detector = detector
        self.name = detector.name

    def ctx_detect(
        self,
        src: str,
        pwd: str,
        force_token: str = "",
        subdir: str = "",
        src_resolve_from: str = "",
    ) -> tuple[str, bool]:
        return self.detector.detect(src, pwd)

    def __repr__(self) -> str:
        return f"ContextualAdapter({type(self.detector).__name__})"


class GitCtxDetector:
    """SCP-style git addresses, plus relative paths forced with ``git::``."""

    name = "git"

    def ctx_detect(
        self,
        src: str,
        pwd: str,
        force_token: str = "",
        subdir: str = "",
        src_resolve_from: str = "",
    ) -> tuple[str, bool]:
        result, ok = detect_git_force_filepath(src, pwd, force_token, src_resolve_from)
        if ok:
            return result, True
        return git.GitDetector().detect(src, pwd)


class FileCtxDetector:
    """Filesystem fallback that honours ``src_resolve_from``."""

    name = "file"

    def ctx_detect(
        self,
        src: str,
        pwd: str,
        force_token: str = "",
        subdir: str = "",
        src_resolve_from: str = "",
    ) -> tuple[str, bool]:
        return file.FileDetector().detect(src, src_resolve_from or pwd)


def is_relative_path(path: str) -> bool:
    """True only for unambiguous relative paths (``./x``, ``../x``, ``.``, ``..``).

    ``dir/child`` is deliberately not relative here: it could as well be a
    host name.
    """
    return path in (".", "..") or path.startswith(_RELATIVE_PREFIXES)


def detect_git_force_filepath(
    src: str, pwd: str, force_token: str, src_resolve_from: str = ""
) -> tuple[str, bool]:
    """Rewrite ``git::<relative path>`` into a ``git::file://`` URL.

    Declines anything that is not an unambiguous relative path, and anything
    not forced with ``git``. A relative path that is forced but has no
    absolute directory to resolve against is an error, not a decline.
    """
    if force_token != "git" or not src:
        return "", False

    path, _, query = src.partition("?")
    if not is_relative_path(path):
        return "", False

    anchor = src_resolve_from or pwd
    if not anchor:
        raise ForcedDetectionError(
            force_token, src, "relative path needs a pwd or src_resolve_from"
        )
    if not os.path.isabs(anchor):
        raise ForcedDetectionError(
            force_token, src, f"cannot resolve against non-absolute path {anchor!r}"
        )

    resolved = os.path.normpath(os.path.join(anchor, path))
    result = "git::" + file_url(resolved, query)
    parse_url(result[len("git::"):])
    return result, True


def default_ctx_detectors() -> tuple[CtxDetector, ...]:
    """The built-in contextual chain, in evaluation order."""
    return (
        ContextualAdapter(github.GitHubDetector()),
        ContextualAdapter(gitlab.GitLabDetector()),
        GitCtxDetector(),
        ContextualAdapter(bitbucket.BitBucketDetector()),
        ContextualAdapter(s3.S3Detector()),
        ContextualAdapter(gcs.GCSDetector()),
        ContextualAdapter(azure.AzureBlobDetector()),
        ContextualAdapter(oss.OSSDetector()),
        FileCtxDetector(),
    )


def ctx_resolve(
    src: str,
    pwd: str = "",
    src_resolve_from: str = "",
    detectors: Sequence[CtxDetector] | None = None,
) -> str:
    """Contextual counterpart of :func:`srcget.detectors.resolve`.

    Empty *pwd* / *src_resolve_from* mean "not provided".
    """
    if detectors is None:
        detectors = default_ctx_detectors()

    force, get_src = split_force_token(src)
    get_src, subdir = split_subdir(get_src)

    if canonical_scheme(get_src):
        return src

    for detector in detectors:
        result, ok = detector.ctx_detect(get_src, pwd, force, subdir, src_resolve_from)
        if not ok:
            continue
        logger.debug("contextual detector %s rewrote %r to %r", detector.name, get_src, result)
        return fold_detected(result, force, subdir)

    if force:
        raise ForcedDetectionError(force, src)
    raise InvalidSourceError(src)
