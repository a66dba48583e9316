"""Concurrent key-value cache with time-to-idle expiry.

Backs the in-process rate limit storage. Each entry records when it was last
accessed; an entry idle for longer than `time_to_idle` seconds is treated as
absent. Entries are kept in access order (least recently used first), so the
expired ones are always at the front of the map. They are dropped in two ways:

- On access: `get_or_insert` replaces an expired entry with a fresh value and
  pops at most `sweep_batch` expired entries from the front of the map.
- On demand: `evict_expired()` pops every expired entry.

The map itself is guarded by one short-lived lock. It is held for the lookup,
the O(1) reordering and the bounded sweep, never for I/O. Values are returned
to the caller, who applies any finer-grained locking (per-key locks live
inside the values).
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

V = TypeVar("V")

DEFAULT_SWEEP_BATCH = 16


@dataclass(slots=True)
class _Entry(Generic[V]):
    value: V
    last_access: float


class IdleExpiringCache(Generic[V]):
    """Thread-safe map whose entries expire after a period without access.

    Args:
        time_to_idle: Seconds an entry may go unaccessed before it expires.
        monotonic: Clock returning seconds (defaults to time.monotonic).
        sweep_batch: Most expired entries removed by a single access.

    Example:
        cache: IdleExpiringCache[int] = IdleExpiringCache(time_to_idle=5.0)
        value, created = cache.get_or_insert("client-42", lambda: 0)
    """

    def __init__(
        self,
        *,
        time_to_idle: float,
        monotonic: Callable[[], float] = time.monotonic,
        sweep_batch: int = DEFAULT_SWEEP_BATCH,
    ) -> None:
        if time_to_idle <= 0:
            raise ValueError(f"time_to_idle must be positive, got {time_to_idle}")
        if sweep_batch < 0:
            raise ValueError(f"sweep_batch must not be negative, got {sweep_batch}")

        self._time_to_idle = time_to_idle
        self._monotonic = monotonic
        self._sweep_batch = sweep_batch
        self._lock = threading.Lock()
        self._entries: OrderedDict[str, _Entry[V]] = OrderedDict()

    @property
    def time_to_idle(self) -> float:
        """Idle window in seconds."""
        return self._time_to_idle

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            entry = self._entries.get(key)  # type: ignore[arg-type]
            return entry is not None and not self._is_expired(
                entry, self._monotonic()
            )

    def get_or_insert(self, key: str, factory: Callable[[], V]) -> tuple[V, bool]:
        """Return the live value for key, creating it if absent or expired.

        Resolution is atomic: concurrent callers for the same unseen key all
        receive the single value created by the first of them. The factory
        runs under the map lock and must not block.

        Args:
            key: Cache key.
            factory: Builds a new value.

        Returns:
            tuple[V, bool]: The cached value (its last-access time refreshed)
                and whether it was created by this call.
        """
        now = self._monotonic()
        with self._lock:
            entry = self._entries.get(key)
            created = entry is None or self._is_expired(entry, now)
            if created:
                entry = _Entry(value=factory(), last_access=now)
                self._entries[key] = entry
            else:
                entry.last_access = now
            self._entries.move_to_end(key)
            self._pop_expired(now, limit=self._sweep_batch)
            return entry.value, created

    def evict_expired(self) -> int:
        """Remove every expired entry now.

        Returns:
            int: Number of entries removed.
        """
        with self._lock:
            return self._pop_expired(self._monotonic(), limit=None)

    def _is_expired(self, entry: _Entry[V], now: float) -> bool:
        return now - entry.last_access > self._time_to_idle

    def _pop_expired(self, now: float, *, limit: int | None) -> int:
        # Caller holds self._lock. Entries are in access order, so the scan
        # stops at the first live one.
        removed = 0
        while self._entries and (limit is None or removed < limit):
            _, oldest = next(iter(self._entries.items()))
            if not self._is_expired(oldest, now):
                break
            self._entries.popitem(last=False)
            removed += 1
        return removed
