"""Entry stores mapping a normalized subject to its single pending code."""

import contextlib
import hmac
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def normalize_subject(subject: str) -> str:
    """Fold an email address so keys differing only in case collide."""
    return subject.strip().casefold()


def codes_match(stored: str, candidate: str) -> bool:
    """Exact string comparison that does not leak the matching prefix length."""
    return hmac.compare_digest(stored.encode(), candidate.encode())


class EntryStore(Protocol):
    """Storage contract shared by the in-memory and Redis implementations.

    `namespace` keeps codes for different purposes apart; an empty namespace is
    valid. None of the methods raise except `StorageUnavailable`.
    """

    async def put(self, namespace: str, subject: str, code: str, ttl: float) -> None: ...

    async def check(self, namespace: str, subject: str, candidate: str) -> bool: ...

    async def clear(self, namespace: str, subject: str) -> None: ...

    async def purge_expired(self) -> int: ...

    async def close(self) -> None: ...


@dataclass(frozen=True)
class Entry:
    """Pending code and the absolute instant after which it is no longer accepted."""

    code: str
    expires_at: float


class InMemoryEntryStore:
    """Process-local store guarded by striped locks.

    Each key maps to one of `stripes` locks, so a read-modify-write on one key is
    atomic while operations on unrelated keys rarely contend. Entries are
    immutable and replaced whole, so a reader never sees a torn pair.
    """

    def __init__(self, clock: Clock = time.monotonic, stripes: int = 64):
        if stripes < 1:
            raise ValueError("At least one lock stripe is required.")
        self._clock = clock
        self._entries: dict[tuple[str, str], Entry] = {}
        self._locks = [threading.Lock() for _ in range(stripes)]

    def _lock_for(self, key: tuple[str, str]) -> threading.Lock:
        return self._locks[hash(key) % len(self._locks)]

    @contextlib.contextmanager
    def _all_stripes(self):
        """Hold every stripe, always in the same order; per-key calls take only one."""
        with contextlib.ExitStack() as stack:
            for lock in self._locks:
                stack.enter_context(lock)
            yield

    async def put(self, namespace: str, subject: str, code: str, ttl: float) -> None:
        key = (namespace, normalize_subject(subject))
        entry = Entry(code=code, expires_at=self._clock() + ttl)
        with self._lock_for(key):
            self._entries[key] = entry

    async def check(self, namespace: str, subject: str, candidate: str) -> bool:
        key = (namespace, normalize_subject(subject))
        with self._lock_for(key):
            entry = self._entries.get(key)
            if entry is None:
                return False
            if self._clock() >= entry.expires_at:
                # passive eviction
                del self._entries[key]
                return False
        return codes_match(entry.code, candidate)

    async def clear(self, namespace: str, subject: str) -> None:
        key = (namespace, normalize_subject(subject))
        with self._lock_for(key):
            self._entries.pop(key, None)

    async def purge_expired(self) -> int:
        """Physically remove every expired entry; returns how many were dropped."""
        removed = 0
        with self._all_stripes():
            keys = list(self._entries)
        for key in keys:
            with self._lock_for(key):
                entry = self._entries.get(key)
                # re-read under the lock: the key may have been replaced since the snapshot
                if entry is not None and self._clock() >= entry.expires_at:
                    del self._entries[key]
                    removed += 1
        if removed:
            logger.debug("Purged %d expired verification entries", removed)
        return removed

    async def close(self) -> None:
        with self._all_stripes():
            self._entries.clear()

    def __len__(self) -> int:
        with self._all_stripes():
            return len(self._entries)
