"""Outstanding anti-forgery state tokens.

A token is issued when a login redirect is emitted and consumed by the single
callback that presents it. Duplicates are allowed: a caller-pinned token that
is already outstanding is inserted again and must be consumed once per issue.

Without ``ttl`` or ``max_size`` the registry never forgets a token whose
callback never arrives. Either bound turns on eviction of the oldest entries.
"""

from __future__ import annotations

import threading
import time
import uuid
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from auth_google.core.logging import get_logger

log = get_logger(__name__)


@dataclass
class _Entry:
    token: str
    issued_at: float


class StateRegistry:
    """Process-local, lock-guarded collection of outstanding state tokens."""

    def __init__(
        self,
        ttl: float | None = None,
        max_size: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl is not None and ttl <= 0:
            raise ValueError("ttl must be positive")
        if max_size is not None and max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._ttl = ttl
        self._max_size = max_size
        self._clock = clock
        self._entries: list[_Entry] = []
        self._lock = threading.Lock()

    def issue(self, candidate: str | None = None) -> str:
        """Register ``candidate`` (or a fresh UUID4) and return it."""
        token = candidate or str(uuid.uuid4())
        with self._lock:
            self._evict_expired()
            self._entries.append(_Entry(token=token, issued_at=self._clock()))
            if self._max_size is not None and len(self._entries) > self._max_size:
                dropped = len(self._entries) - self._max_size
                del self._entries[:dropped]
                log.debug("oauth_state_evicted", reason="capacity", count=dropped)
        return token

    def contains(self, token: str | None) -> bool:
        if not token:
            return False
        with self._lock:
            self._evict_expired()
            return any(entry.token == token for entry in self._entries)

    def consume(self, token: str | None) -> bool:
        """Remove the first occurrence of ``token``.

        Returns False, without raising, when the token is not outstanding.
        """
        if not token:
            return False
        with self._lock:
            self._evict_expired()
            for i, entry in enumerate(self._entries):
                if entry.token == token:
                    del self._entries[i]
                    return True
        return False

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            self._evict_expired()
            return len(self._entries)

    def __contains__(self, token: object) -> bool:
        return isinstance(token, str) and self.contains(token)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            self._evict_expired()
            return iter([entry.token for entry in self._entries])

    def _evict_expired(self) -> None:
        # Caller holds the lock. Entries are in issue order, so expired ones form a prefix.
        if self._ttl is None:
            return
        cutoff = self._clock() - self._ttl
        expired = 0
        for entry in self._entries:
            if entry.issued_at > cutoff:
                break
            expired += 1
        if expired:
            del self._entries[:expired]
            log.debug("oauth_state_evicted", reason="ttl", count=expired)
