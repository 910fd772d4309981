"""Application port for the single published-file slot."""

from __future__ import annotations

import threading
from typing import Protocol

from mp3drop.domain.models import PublishedFile


class RetentionSlot(Protocol):
    """Holds at most one published file for the lifetime of the process."""

    def publish(self, published: PublishedFile) -> PublishedFile | None:
        """Record ``published`` and return whatever it replaced."""

    def current(self) -> PublishedFile | None:
        """Return the file currently exposed to clients, if any."""


class InMemoryRetentionSlot:
    """Lock-guarded slot; ``publish`` is an atomic swap-and-return-previous.

    The slot never deletes files itself. Removing the superseded file is left
    to the caller, after the replacement is fully verified.
    """

    def __init__(self, initial: PublishedFile | None = None) -> None:
        self._lock = threading.Lock()
        self._current = initial

    def publish(self, published: PublishedFile) -> PublishedFile | None:
        with self._lock:
            previous, self._current = self._current, published
        return previous

    def current(self) -> PublishedFile | None:
        with self._lock:
            return self._current
