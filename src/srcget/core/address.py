"""Source address grammar.

A source string has the shape::

    [force::]base[//subdir][?query]

where ``force`` overrides automatic getter selection, ``subdir`` selects a
directory inside the fetched artifact and ``query`` carries getter options
(``ref=``, ``checksum=`` ...). Everything here is pure string work.
"""

from __future__ import annotations

import glob
import os
import posixpath
import re
from urllib.parse import SplitResult, quote, urlsplit

from srcget.core.errors import AddressParseError
from srcget.core.models import ParsedAddress

_FORCE_RE = re.compile(r"^([A-Za-z0-9]+)::(.+)$")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
_SCHEME_PREFIX_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]+:")

# Characters left unescaped in the path of an emitted file:// URL.
_FILE_PATH_SAFE = "/$&+,:;=@"


def split_force_token(src: str) -> tuple[str, str]:
    """Split ``force::rest`` into ``(force, rest)``; ``("", src)`` if absent."""
    match = _FORCE_RE.match(src)
    if not match:
        return "", src
    return match.group(1), match.group(2)


def split_subdir(src: str) -> tuple[str, str]:
    """Split ``base//subdir`` into ``(base, subdir)``.

    The scheme's own ``://`` and anything after the first ``?`` are never
    taken as the subdir marker. A query string trailing the subdir is moved
    back onto the base.
    """
    offset = 0
    idx = src.find("://")
    if idx > -1:
        offset = idx + 3

    stop = len(src)
    idx = src.find("?")
    if idx > -1:
        stop = idx

    idx = src.find("//", offset, stop)
    if idx == -1:
        return src, ""

    subdir = src[idx + 2:]
    base = src[:idx]

    qidx = subdir.find("?")
    if qidx > -1:
        base += subdir[qidx:]
        subdir = subdir[:qidx]

    return base, subdir


def join_subdir(detected: str, requested: str) -> str:
    """Nest the requested subdir under the one a detector discovered."""
    if detected and requested:
        return posixpath.join(detected, requested)
    return detected or requested


def parse_url(src: str) -> SplitResult:
    """Split *src* as a URL, rejecting malformed escapes and control bytes."""
    if _CONTROL_RE.search(src):
        raise AddressParseError(f"invalid control character in URL: {src!r}")
    if _BAD_ESCAPE_RE.search(src):
        raise AddressParseError(f"invalid URL escape in: {src!r}")
    if src.startswith(":"):
        raise AddressParseError(f"missing protocol scheme: {src!r}")
    try:
        return urlsplit(src)
    except ValueError as exc:
        raise AddressParseError(f"error parsing URL {src!r}: {exc}") from exc


def url_scheme(src: str) -> str:
    """Return the URL scheme of *src*, or ``""`` if it has none.

    Single-letter schemes are Windows drive letters (``C:\\foo``), not URLs.
    """
    try:
        scheme = parse_url(src).scheme
    except AddressParseError:
        return ""
    if len(scheme) < 2:
        return ""
    return scheme


def canonical_scheme(src: str) -> str:
    """Like :func:`url_scheme`, but strict about scheme-qualified input.

    Anything shaped like ``scheme:...`` must parse as a URL; a malformed one
    raises :class:`AddressParseError` instead of being treated as shorthand.
    """
    if _SCHEME_PREFIX_RE.match(src):
        parse_url(src)
    return url_scheme(src)


def recombine(force: str, base: str, subdir: str) -> str:
    """Reattach *subdir* and *force* to *base*.

    The subdir is appended with a literal ``//`` rather than path-joined, so
    glob patterns in it reach the getter untouched.
    """
    result = base
    if subdir:
        parse_url(base)
        main, hsep, fragment = base.partition("#")
        head, qsep, query = main.partition("?")
        result = f"{head}//{subdir}{qsep}{query}{hsep}{fragment}"
    if force:
        result = f"{force}::{result}"
    return result


def fold_detected(detected: str, src_force: str, subdir: str) -> str:
    """Merge a detector's output with the pieces stripped from the input.

    The force token given on the original input wins over one the detector
    produced; the detector's subdir becomes the parent of the requested one.
    """
    detect_force, result = split_force_token(detected)
    result, detect_subdir = split_subdir(result)
    subdir = join_subdir(detect_subdir, subdir)
    return recombine(src_force or detect_force, result, subdir)


def parse_address(raw: str) -> ParsedAddress:
    """Split *raw* into a :class:`ParsedAddress`."""
    force, rest = split_force_token(raw)
    base, subdir = split_subdir(rest)
    base, _, raw_query = base.partition("?")
    return ParsedAddress(base=base, force=force, subdir=subdir, raw_query=raw_query)


def file_url(path: str, query: str = "") -> str:
    """Format an absolute filesystem path as a ``file://`` URL."""
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    if not path.startswith("/"):
        path = "/" + path
    out = "file://" + quote(path, safe=_FILE_PATH_SAFE)
    if query:
        out += "?" + query
    return out


def subdir_glob(dst: str, subdir: str) -> str:
    """Expand *subdir* (which may hold wildcards) inside a populated *dst*."""
    if not subdir:
        return ""
    matches = glob.glob(os.path.join(dst, subdir))
    if not matches:
        raise FileNotFoundError(f"subdir {subdir!r} not found")
    if len(matches) > 1:
        raise ValueError(f"subdir {subdir!r} matches multiple paths")
    return matches[0]
