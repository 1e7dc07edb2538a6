"""Content-fingerprinted memoization for derived indices.

Entries are keyed by ``(kind, fingerprint)`` where the fingerprint is a hash
of the input tables, so a changed table can never be served a stale index.
Entries also expire after ``ttl_seconds``. A miss simply rebuilds.
"""

import hashlib
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import pandas as pd

logger = logging.getLogger(__name__)

type Fingerprint = str
type Clock = Callable[[], float]


def fingerprint_frames(*frames: pd.DataFrame | None, salt: str = "") -> Fingerprint:
    """Stable content hash over one or more DataFrames (column names included).

    ``salt`` folds in anything else the derived value depends on, such as
    the options an index was built with.
    """
    digest = hashlib.sha256(salt.encode())
    for frame in frames:
        if frame is None:
            digest.update(b"<none>")
            continue
        digest.update("|".join(map(str, frame.columns)).encode())
        digest.update(str(len(frame)).encode())
        if not frame.empty:
            hashed = pd.util.hash_pandas_object(frame.astype(str), index=False)
            digest.update(hashed.to_numpy().tobytes())
        digest.update(b"<end>")
    return digest.hexdigest()


@dataclass
class _Entry[T]:
    value: T
    stored_at: float


class FingerprintCache:
    def __init__(self, ttl_seconds: float = 600, clock: Clock = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[tuple[str, Fingerprint], _Entry] = {}
        self.hits = 0
        self.misses = 0

    def get_or_build[T](self, kind: str, fingerprint: Fingerprint, build: Callable[[], T]) -> T:
        key = (kind, fingerprint)
        now = self._clock()
        entry = self._entries.get(key)

        if entry is not None and now - entry.stored_at < self.ttl_seconds:
            self.hits += 1
            logger.debug("Cache hit for %s (%s)", kind, fingerprint[:12])
            return entry.value

        self.misses += 1
        value = build()
        self._entries[key] = _Entry(value=value, stored_at=now)
        self._evict_expired(now)
        return value

    def invalidate(self, kind: str | None = None) -> None:
        if kind is None:
            self._entries.clear()
            return
        self._entries = {k: v for k, v in self._entries.items() if k[0] != kind}

    def _evict_expired(self, now: float) -> None:
        expired = [k for k, v in self._entries.items() if now - v.stored_at >= self.ttl_seconds]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)
