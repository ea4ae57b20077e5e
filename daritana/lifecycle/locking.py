"""Per-identifier locks serialising mutations of a single check or report."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)


class KeyedLockManager:
    """Hand out one ``threading.Lock`` per identifier.

    Mutations of different checks proceed in parallel; concurrent
    mutations of the same check are serialised.  An entry lives only
    while some thread holds or waits for it.
    """

    def __init__(self) -> None:
        # key -> [lock, number of holders and waiters]
        self._locks: dict[str, list] = {}
        self._guard = threading.Lock()

    def _acquire_entry(self, key: str) -> threading.Lock:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._locks[key] = entry
            entry[1] += 1
            return entry[0]

    def _release_entry(self, key: str) -> None:
        with self._guard:
            entry = self._locks[key]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        """Hold the lock for *key* for the duration of the block."""
        lock = self._acquire_entry(key)
        try:
            with lock:
                logger.debug("Acquired lock on %s", key)
                yield
        finally:
            self._release_entry(key)

    def is_locked(self, key: str) -> bool:
        with self._guard:
            entry = self._locks.get(key)
        return entry is not None and entry[0].locked()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
