"""Resolve source address strings and fetch them onto the local filesystem."""

from __future__ import annotations

from srcget.core.address import parse_address
from srcget.core.errors import (
    AddressParseError,
    CoordinatorMisuseError,
    DetectionError,
    FetchError,
    ForcedDetectionError,
    GetterError,
    InvalidSourceError,
    SrcgetError,
    UnsupportedSchemeError,
)
from srcget.core.models import Mode, ParsedAddress, Settings
from srcget.detectors import ctx_resolve, resolve
from srcget.getters import dispatch
from srcget.services.client import Client
from srcget.services.group import Group
from srcget.services.registry import Registry, build_registry, default_registry

__version__ = "0.1.0"

__all__ = [
    "AddressParseError",
    "Client",
    "CoordinatorMisuseError",
    "DetectionError",
    "FetchError",
    "ForcedDetectionError",
    "GetterError",
    "Group",
    "InvalidSourceError",
    "Mode",
    "ParsedAddress",
    "Registry",
    "Settings",
    "SrcgetError",
    "UnsupportedSchemeError",
    "__version__",
    "build_registry",
    "ctx_resolve",
    "default_registry",
    "dispatch",
    "parse_address",
    "resolve",
]
