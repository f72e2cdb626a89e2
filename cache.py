"""TTL cache for parsed transcripts, keyed by payload digest."""

from __future__ import annotations

import hashlib
import threading
import time
from collections import OrderedDict
from typing import Optional

from config import DEFAULT_CACHE_MAX_ENTRIES, DEFAULT_CACHE_TTL_SECONDS
from models import ParsedTranscript


def payload_digest(raw: str) -> str:
    """SHA-256 hex digest of the UTF-8 encoded payload."""
    return hashlib.sha256(raw.encode("utf-8", errors="surrogatepass")).hexdigest()


class TranscriptCache:
    """Thread-safe in-memory cache with per-entry TTL and a size bound."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._store: OrderedDict[str, tuple[float, ParsedTranscript]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, raw: str) -> Optional[ParsedTranscript]:
        """Return the cached result for *raw* if within TTL, else None."""
        key = payload_digest(raw)
        with self._lock:
            self._evict_expired()
            entry = self._store.get(key)
            if entry is None:
                return None
            return entry[1]

    def set(self, raw: str, value: ParsedTranscript) -> None:
        """Store a result; the oldest entries go once the bound is exceeded."""
        if self._max_entries <= 0:
            return
        key = payload_digest(raw)
        with self._lock:
            self._store.pop(key, None)
            self._store[key] = (time.monotonic(), value)
            while len(self._store) > self._max_entries:
                self._store.popitem(last=False)

    def _evict_expired(self) -> None:
        """Remove entries older than TTL. Must be called under lock."""
        now = time.monotonic()
        expired = [k for k, (ts, _) in self._store.items() if now - ts >= self._ttl]
        for k in expired:
            del self._store[k]

    def __len__(self) -> int:
        with self._lock:
            self._evict_expired()
            return len(self._store)
