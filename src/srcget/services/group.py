"""Single-flight coordination for downloads keyed by canonical address.

At most one caller per key is "in flight" at a time. Everyone else blocks
in ``begin`` until the holder calls ``end``, then sees the location the
holder recorded (or an empty string if nothing was ever recorded).

Entries are created on first use and never evicted, which suits the
short-lived processes this library is normally embedded in.
"""

from __future__ import annotations

import contextlib
import logging
import threading
from dataclasses import dataclass
from typing import Iterator

from srcget.core.errors import CoordinatorMisuseError

logger = logging.getLogger(__name__)


class _Entry:
    __slots__ = ("location", "in_flight", "cond")

    def __init__(self) -> None:
        self.location = ""
        self.in_flight = False
        self.cond = threading.Condition()


@dataclass
class Slot:
    """What ``Group.hold`` hands the holder: the cached location so far,
    and a place to record the new one."""

    key: str
    location: str = ""
    result: str = ""


class Group:
    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def begin(self, key: str) -> str:
        """Mark *key* in flight, waiting for any current holder first.

        Returns the cached location, or ``""`` if there is none yet.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()

        with entry.cond:
            while entry.in_flight:
                logger.debug("waiting on in-flight fetch of %s", key)
                entry.cond.wait()
            entry.in_flight = True
            return entry.location

    def end(self, key: str, result: str = "") -> None:
        """Release *key*, recording *result* when it is non-empty."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            raise CoordinatorMisuseError(f"end({key!r}) called without begin()")

        with entry.cond:
            if not entry.in_flight:
                raise CoordinatorMisuseError(f"end({key!r}) called without begin()")
            if result:
                entry.location = result
            entry.in_flight = False
            entry.cond.notify_all()

    @contextlib.contextmanager
    def hold(self, key: str) -> Iterator[Slot]:
        """``begin``/``end`` pair that releases the key even on error."""
        slot = Slot(key=key, location=self.begin(key))
        try:
            yield slot
        finally:
            self.end(key, slot.result)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
