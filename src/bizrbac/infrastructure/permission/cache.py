"""Time-bounded cache of resolved user snapshots."""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta

from bizrbac.application.ports import Clock
from bizrbac.domain.entities import UserSnapshot

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(minutes=5)


@dataclass(frozen=True)
class CacheEntry:
    """Cached snapshot and the time it was stored."""

    snapshot: UserSnapshot
    cached_at: datetime


@dataclass(frozen=True)
class FetchToken:
    """Invalidation state observed when a storage fetch started."""

    epoch: int
    generation: int


class UserPermissionCache:
    """Shared snapshot cache with synchronous invalidation.

    An invalidate bumps the user's generation while a fetch for that user is
    in flight (invalidate_all bumps a global epoch). A put carrying a token
    taken before the invalidation is dropped, so a fetch racing an admin
    revoke can never put the stale snapshot back. Generations are kept only
    while fetches are open: ``end_fetch`` of the last one forgets the
    counter. The map is guarded by a plain lock; no critical section
    awaits, so it is safe from both event-loop and worker-thread callers.
    """

    def __init__(self, clock: Clock, ttl: timedelta = DEFAULT_TTL) -> None:
        self._clock = clock
        self._ttl = ttl
        self._lock = threading.Lock()
        self._entries: dict[str, CacheEntry] = {}
        self._generations: dict[str, int] = {}
        self._in_flight: dict[str, int] = {}
        self._epoch = 0

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def tracked_generations(self) -> int:
        """Users whose invalidation counter is currently retained."""
        with self._lock:
            return len(self._generations)

    def begin_fetch(self, user_id: str) -> FetchToken:
        """Capture invalidation state before reading from storage.

        Pair with ``end_fetch`` once the fetch is over, stored or not.
        """
        with self._lock:
            self._in_flight[user_id] = self._in_flight.get(user_id, 0) + 1
            return FetchToken(self._epoch, self._generations.get(user_id, 0))

    def end_fetch(self, user_id: str) -> None:
        with self._lock:
            remaining = self._in_flight.get(user_id, 0) - 1
            if remaining > 0:
                self._in_flight[user_id] = remaining
                return
            self._in_flight.pop(user_id, None)
            self._generations.pop(user_id, None)

    def get(self, user_id: str) -> UserSnapshot | None:
        """Return a fresh snapshot, or None on miss. Expired entries are evicted."""
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is None:
                return None
            if self._clock.now() - entry.cached_at >= self._ttl:
                del self._entries[user_id]
                return None
            return entry.snapshot

    def put(
        self,
        user_id: str,
        snapshot: UserSnapshot,
        token: FetchToken | None = None,
    ) -> bool:
        """Store snapshot. Returns False when an invalidation superseded token."""
        with self._lock:
            if token is not None and token != FetchToken(
                self._epoch, self._generations.get(user_id, 0)
            ):
                logger.debug("Dropping stale cache fill for user %s", user_id)
                return False
            self._entries[user_id] = CacheEntry(snapshot, self._clock.now())
            return True

    def invalidate(self, user_id: str) -> None:
        with self._lock:
            self._entries.pop(user_id, None)
            if user_id in self._in_flight:
                self._generations[user_id] = self._generations.get(user_id, 0) + 1
        logger.debug("Invalidated permission cache for user %s", user_id)

    def invalidate_all(self) -> None:
        with self._lock:
            self._entries.clear()
            self._generations.clear()
            self._epoch += 1
        logger.debug("Invalidated entire permission cache")
