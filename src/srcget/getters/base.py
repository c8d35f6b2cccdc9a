from __future__ import annotations

from abc import ABC, abstractmethod

from srcget.core.models import Mode


class Getter(ABC):
    """Abstract getter interface.

    A getter declares the URL schemes (and force tokens) it answers to and
    may recognise shorthand addresses through ``detect``. The fetch methods
    receive the canonical address with force token and subdir removed.
    """

    name: str = ""
    schemes: frozenset[str] = frozenset()

    def valid_scheme(self, scheme: str) -> bool:
        return scheme in self.schemes

    def detect(self, src: str, pwd: str = "") -> tuple[str, bool]:
        """Rewrite *src* if it is a shorthand this getter understands.

        Returns ``(rewritten, True)`` on a match and ``("", False)``
        otherwise. The default getter claims addresses by scheme only.
        """
        return "", False

    def claims(self, url: str) -> bool:
        """Whether this getter can serve *url* despite not owning its scheme."""
        return False

    @abstractmethod
    def mode(self, url: str) -> Mode:
        """Tell whether *url* names a single file or a directory."""

    @abstractmethod
    def get(self, dst: str, url: str) -> None:
        """Fetch the directory at *url* into the directory *dst*."""

    @abstractmethod
    def get_file(self, dst: str, url: str) -> None:
        """Fetch the single file at *url* to the path *dst*."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
