"""
cache_service.py - Coach response caching
In-memory cache keyed by SHA-256 of (user id + prompt + model) with TTL expiry,
so repeated insight requests within a day don't hit the LLM again.
"""

import hashlib
import time


class ResponseCache:
    """In-memory LLM response cache with TTL and hit tracking."""

    def __init__(self, clock=time.time):
        # hash → {response, timestamp, ttl}
        self._cache: dict[str, dict] = {}
        self._clock = clock
        self.hits: int = 0
        self.misses: int = 0

    @staticmethod
    def _hash(user_id: str, prompt: str, model: str) -> str:
        raw = f"{user_id}||{prompt}||{model}"
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()

    def get(self, user_id: str, prompt: str, model: str) -> dict | None:
        """Return cached response or None on miss / expiry."""
        key = self._hash(user_id, prompt, model)
        entry = self._cache.get(key)
        if entry is None or self._clock() - entry["timestamp"] > entry["ttl"]:
            self._cache.pop(key, None)
            self.misses += 1
            return None
        self.hits += 1
        return entry["response"]

    def set(self, user_id: str, prompt: str, model: str, response: dict, ttl_seconds: int = 3600):
        """Store a response with a TTL (seconds). ttl_seconds=0 → don't cache."""
        if ttl_seconds <= 0:
            return
        self._cache[self._hash(user_id, prompt, model)] = {
            "response": response,
            "timestamp": self._clock(),
            "ttl": ttl_seconds,
        }

    def clear_expired(self):
        """Evict all entries past their TTL."""
        now = self._clock()
        for k in [k for k, v in self._cache.items() if now - v["timestamp"] > v["ttl"]]:
            del self._cache[k]
