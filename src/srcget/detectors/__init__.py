"""Rewrite shorthand source strings into canonical URLs.

Detectors are tried in order on anything that is not already a URL:

  github.com/org/repo             → git::https://github.com/org/repo.git
  gitlab.com/group/project        → git::https://gitlab.com/group/project.git
  git@host:org/repo.git           → git::ssh://git@host/org/repo.git
  bitbucket.org/org/repo          → https://bitbucket.org/org/repo
  bucket.s3.amazonaws.com/key     → s3::https://s3.amazonaws.com/bucket/key
  www.googleapis.com/storage/...  → gcs::https://www.googleapis.com/storage/...
  acct.blob.core.windows.net/c/b  → azureblob::https://acct.blob.core.windows.net/c/b
  bucket.oss-*.aliyuncs.com/key   → oss::https://bucket.oss-*.aliyuncs.com/key
  ./path or /path                 → file:///abs/path  (always last)
"""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from srcget.core.address import canonical_scheme, fold_detected, split_force_token, split_subdir
from srcget.core.errors import InvalidSourceError
from srcget.detectors import azure, bitbucket, file, gcs, git, github, gitlab, oss, s3

logger = logging.getLogger(__name__)


class Detector(Protocol):
    """Turns one family of shorthand strings into a canonical address.

    ``detect`` returns ``(rewritten, True)`` on a match and ``("", False)``
    when the input is not for it. It raises ``DetectionError`` when it
    recognises the input but cannot make sense of it.
    """

    name: str

    def detect(self, src: str, pwd: str = "") -> tuple[str, bool]: ...


def default_detectors() -> tuple[Detector, ...]:
    """The built-in chain, in evaluation order."""
    return (
        github.GitHubDetector(),
        gitlab.GitLabDetector(),
        git.GitDetector(),
        bitbucket.BitBucketDetector(),
        s3.S3Detector(),
        gcs.GCSDetector(),
        azure.AzureBlobDetector(),
        oss.OSSDetector(),
        file.FileDetector(),
    )


def resolve(src: str, pwd: str = "", detectors: Sequence[Detector] | None = None) -> str:
    """Turn *src* into a canonical address.

    Already-canonical input is returned unchanged, so resolving twice is a
    no-op. The first matching detector wins; a detector error aborts.
    """
    if detectors is None:
        detectors = default_detectors()

    force, get_src = split_force_token(src)
    get_src, subdir = split_subdir(get_src)

    if canonical_scheme(get_src):
        return src

    for detector in detectors:
        result, ok = detector.detect(get_src, pwd)
        if not ok:
            continue
        logger.debug("detector %s rewrote %r to %r", detector.name, get_src, result)
        return fold_detected(result, force, subdir)

    raise InvalidSourceError(src)


from srcget.detectors.contextual import CtxDetector, ctx_resolve, default_ctx_detectors  # noqa: E402

__all__ = [
    "CtxDetector",
    "Detector",
    "ctx_resolve",
    "default_ctx_detectors",
    "default_detectors",
    "resolve",
]
