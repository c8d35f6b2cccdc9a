"""Exception hierarchy shared by resolution, dispatch and fetch."""

from __future__ import annotations


class SrcgetError(Exception):
    """Base class for recoverable srcget failures."""


class AddressParseError(SrcgetError, ValueError):
    """A source address could not be parsed as a URL."""


class DetectionError(SrcgetError, ValueError):
    """A detector recognised the input but could not rewrite it."""


class InvalidSourceError(DetectionError):
    """No detector matched a non-canonical source string."""

    def __init__(self, src: str) -> None:
        super().__init__(f"invalid source string: {src}")
        self.src = src


class ForcedDetectionError(DetectionError):
    """A force token named a handler that cannot interpret the input."""

    def __init__(self, force: str, src: str, reason: str = "") -> None:
        msg = f"forced getter '{force}' cannot handle source: {src}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
        self.force = force
        self.src = src


class UnsupportedSchemeError(SrcgetError, LookupError):
    """No configured getter claims the resolved scheme."""

    def __init__(self, scheme: str) -> None:
        super().__init__(f"download not supported for scheme '{scheme}'")
        self.scheme = scheme


class GetterError(SrcgetError, RuntimeError):
    """A getter backend failed to fetch its address."""


class FetchError(GetterError):
    """Every candidate getter failed for an address."""

    def __init__(self, src: str, errors: list[tuple[str, Exception]]) -> None:
        lines = [f"error downloading '{src}':"]
        lines.extend(f"  {name}: {exc}" for name, exc in errors)
        super().__init__("\n".join(lines))
        self.src = src
        self.errors = errors


class CoordinatorMisuseError(RuntimeError):
    """Group.end() was called for a key with no matching begin()."""
