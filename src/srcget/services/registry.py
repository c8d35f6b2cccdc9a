"""The contextual detector and getter tuples a client runs with.

A :class:`Registry` is built once and never mutated; pass it to whatever
needs to resolve or dispatch instead of reaching for module globals.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from srcget.core.models import Settings
from srcget.detectors import (
    CtxDetector,
    ctx_resolve,
    default_ctx_detectors,
)
from srcget.getters import Getter, default_getters, dispatch


@dataclass(frozen=True)
class Registry:
    ctx_detectors: tuple[CtxDetector, ...] = field(default_factory=default_ctx_detectors)
    getters: tuple[Getter, ...] = field(default_factory=default_getters)

    def ctx_resolve(self, src: str, pwd: str = "", src_resolve_from: str = "") -> str:
        return ctx_resolve(src, pwd, src_resolve_from, self.ctx_detectors)

    def dispatch(self, src: str, pwd: str = "") -> tuple[str, tuple[Getter, ...]]:
        return dispatch(src, pwd, self.getters)

    def getter(self, scheme: str) -> Getter | None:
        """First getter that owns *scheme*, if any."""
        return next((g for g in self.getters if g.valid_scheme(scheme)), None)


def default_registry() -> Registry:
    return Registry()


def build_registry(settings: Settings) -> Registry:
    """Registry with the built-ins, tuned and filtered by *settings*."""
    disabled_detectors = set(settings.disabled_detectors)
    disabled_getters = set(settings.disabled_getters)
    getters = default_getters(
        http_timeout=settings.http_timeout, git_depth=settings.git_depth
    )
    return Registry(
        ctx_detectors=tuple(
            d for d in default_ctx_detectors() if d.name not in disabled_detectors
        ),
        getters=tuple(g for g in getters if g.name not in disabled_getters),
    )
