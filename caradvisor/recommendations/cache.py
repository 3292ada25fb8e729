from __future__ import annotations

import hashlib
import json
import time
from collections.abc import Callable
from typing import Any

_DEFAULT_TTL = 300  # 5 minutes


def make_key(request_dict: dict) -> str:
    normalized = json.dumps(request_dict, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


class TTLCache:
    """
    Key -> (value, expiry) store with hit/miss accounting.

    Each service instance owns its own cache. Expired entries are dropped on
    every write and before size is reported.
    """

    def __init__(self, ttl_seconds: float = _DEFAULT_TTL, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}
        self._hits = 0
        self._misses = 0

    def _purge_expired(self) -> None:
        now = self._clock()
        self._entries = {k: e for k, e in self._entries.items() if e[1] > now}

    def get(self, request_dict: dict) -> Any | None:
        key = make_key(request_dict)
        entry = self._entries.get(key)
        if entry and self._clock() < entry[1]:
            self._hits += 1
            return entry[0]
        if entry:
            del self._entries[key]
        self._misses += 1
        return None

    def set(self, request_dict: dict, value: Any) -> None:
        self._purge_expired()
        self._entries[make_key(request_dict)] = (value, self._clock() + self.ttl_seconds)

    def get_or_compute(
        self,
        request_dict: dict,
        compute: Callable[[], Any],
        should_cache: Callable[[Any], bool] | None = None,
    ) -> Any:
        """Return the cached value for *request_dict*, computing it on a miss.

        ``should_cache`` lets callers skip storing results such as fallbacks.
        """
        cached = self.get(request_dict)
        if cached is not None:
            return cached
        value = compute()
        if should_cache is None or should_cache(value):
            self.set(request_dict, value)
        return value

    def stats(self) -> dict:
        self._purge_expired()
        total = self._hits + self._misses
        return {
            "size": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
        }

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0
