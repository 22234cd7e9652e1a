"""
Query cache for API reads.

Entries are keyed by tuples such as ("users", "list", (("page", 1),)). A fetch:

- fresh entry (younger than stale_time): served from memory
- stale entry: served from memory while one background refresh runs for that key
- missing or invalidated entry: fetched synchronously

Failed fetches are retried with exponential backoff, except for 401/403 answers.
A fetch that was running when its key was invalidated, removed or overwritten
still answers its caller, but its result is not cached.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Hashable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from app.client.api_client import ApiClientError

logger = logging.getLogger(__name__)

QueryKey = tuple[Hashable, ...]
Fetcher = Callable[[], Any]

DEFAULT_RETRY = 3
RETRY_BASE_DELAY_SEC = 1.0
RETRY_MAX_DELAY_SEC = 30.0
DEFAULT_GC_TIME_SEC = 5 * 60

NO_RETRY_STATUSES = frozenset({401, 403})


def make_key(*parts: Hashable, params: dict[str, Any] | None = None) -> QueryKey:
    """Build a cache key; params are sorted and None values dropped so equal queries share a key."""
    if params is None:
        return tuple(parts)
    normalized = tuple(sorted((k, v) for k, v in params.items() if v is not None))
    return (*parts, normalized)


def should_retry(error: Exception) -> bool:
    if isinstance(error, ApiClientError) and error.status_code in NO_RETRY_STATUSES:
        return False
    return True


@dataclass
class CacheEntry:
    data: Any
    updated_at: float
    last_access: float
    stale_time: float
    gc_time: float
    invalidated: bool = False

    def is_stale(self, now: float) -> bool:
        return self.invalidated or now - self.updated_at >= self.stale_time


class QueryCache:
    """Thread-safe in-memory cache with stale-while-revalidate reads."""

    def __init__(
        self,
        retry: int = DEFAULT_RETRY,
        retry_delay: float = RETRY_BASE_DELAY_SEC,
        max_retry_delay: float = RETRY_MAX_DELAY_SEC,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        self.retry = retry
        self.retry_delay = retry_delay
        self.max_retry_delay = max_retry_delay
        self._clock = clock
        self._sleep = sleep
        self._executor = executor or ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="query-cache"
        )
        self._lock = threading.Lock()
        self._entries: dict[QueryKey, CacheEntry] = {}
        self._inflight: dict[QueryKey, Future[Any]] = {}
        # Bumped by invalidate/remove/clear/set_data; a fetch started under an older
        # generation is returned to its caller but never written back.
        self._generations: dict[QueryKey, int] = {}

    def _fetch_with_retry(self, key: QueryKey, fetcher: Fetcher) -> Any:
        """Waits retry_delay * 2**n (capped at max_retry_delay) between attempts."""

        def log_retry(retry_state: RetryCallState) -> None:
            wait = retry_state.next_action.sleep if retry_state.next_action else 0
            logger.info(
                "Query %s failed (%s); retry %d in %.1fs",
                key,
                retry_state.outcome.exception() if retry_state.outcome else None,
                retry_state.attempt_number,
                wait,
            )

        retrying = Retrying(
            stop=stop_after_attempt(self.retry + 1),
            wait=wait_exponential(multiplier=self.retry_delay, max=self.max_retry_delay),
            retry=retry_if_exception(should_retry),
            sleep=self._sleep,
            before_sleep=log_retry,
            reraise=True,
        )
        return retrying(fetcher)

    def _generation(self, key: QueryKey) -> int:
        """Caller holds the lock."""
        return self._generations.setdefault(key, 0)

    def _bump(self, prefix: QueryKey) -> None:
        """Caller holds the lock."""
        for key in self._generations:
            if key[: len(prefix)] == prefix:
                self._generations[key] += 1

    def _store(
        self,
        key: QueryKey,
        data: Any,
        stale_time: float,
        gc_time: float,
        generation: int | None = None,
    ) -> bool:
        now = self._clock()
        with self._lock:
            if generation is not None and self._generations.get(key, 0) != generation:
                logger.info("Discarding result for %s; invalidated while fetching", key)
                return False
            self._entries[key] = CacheEntry(
                data=data,
                updated_at=now,
                last_access=now,
                stale_time=stale_time,
                gc_time=gc_time,
            )
            return True

    def fetch(
        self,
        key: QueryKey,
        fetcher: Fetcher,
        stale_time: float = 0.0,
        gc_time: float = DEFAULT_GC_TIME_SEC,
    ) -> Any:
        """Return data for key, fetching or revalidating as the entry's age requires."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and not entry.invalidated:
                entry.last_access = now
                if not entry.is_stale(now):
                    return entry.data
                self._schedule_refresh(key, fetcher, stale_time, gc_time)
                return entry.data
            generation = self._generation(key)

        data = self._fetch_with_retry(key, fetcher)
        self._store(key, data, stale_time, gc_time, generation)
        return data

    def _schedule_refresh(
        self, key: QueryKey, fetcher: Fetcher, stale_time: float, gc_time: float
    ) -> None:
        """Start a background refresh unless one is already running. Caller holds the lock."""
        if key in self._inflight:
            return
        generation = self._generation(key)

        def refresh() -> Any:
            try:
                data = self._fetch_with_retry(key, fetcher)
                self._store(key, data, stale_time, gc_time, generation)
                return data
            except Exception:
                logger.warning(
                    "Background refresh failed for %s; keeping stale data", key, exc_info=True
                )
                raise
            finally:
                with self._lock:
                    self._inflight.pop(key, None)

        self._inflight[key] = self._executor.submit(refresh)

    def pending(self, key: QueryKey) -> Future[Any] | None:
        """The running background refresh for key, if any."""
        with self._lock:
            return self._inflight.get(key)

    def get_data(self, key: QueryKey) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            return entry.data if entry is not None else None

    def set_data(
        self,
        key: QueryKey,
        data: Any,
        stale_time: float = 0.0,
        gc_time: float = DEFAULT_GC_TIME_SEC,
    ) -> None:
        """Write data directly; any fetch already running for key is discarded."""
        with self._lock:
            self._generations[key] = self._generation(key) + 1
        self._store(key, data, stale_time, gc_time)

    def is_stale(self, key: QueryKey) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is None or entry.is_stale(self._clock())

    def invalidate(self, prefix: QueryKey) -> int:
        """Mark every entry whose key starts with prefix; the next fetch goes to the server."""
        count = 0
        with self._lock:
            self._bump(prefix)
            for key, entry in self._entries.items():
                if key[: len(prefix)] == prefix:
                    entry.invalidated = True
                    count += 1
        return count

    def remove(self, prefix: QueryKey) -> int:
        with self._lock:
            self._bump(prefix)
            doomed = [k for k in self._entries if k[: len(prefix)] == prefix]
            for key in doomed:
                del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._bump(())
            self._entries.clear()

    def collect_garbage(self) -> int:
        """Evict entries not read or written for longer than their gc_time."""
        now = self._clock()
        with self._lock:
            doomed = [
                k for k, e in self._entries.items() if now - e.last_access >= e.gc_time
            ]
            for key in doomed:
                del self._entries[key]
        return len(doomed)

    def keys(self) -> list[QueryKey]:
        with self._lock:
            return list(self._entries)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
