from __future__ import annotations

import hashlib
import threading
from typing import Callable, Dict, Generic, Optional, TypeVar


T = TypeVar("T")


def credential_fingerprint(*parts: Optional[str]) -> str:
    """Stable, non-reversible identity for a set of credential fields.

    Secrets never end up in the cache key itself; only their SHA-256 digest.
    """
    h = hashlib.sha256()
    for p in parts:
        h.update((p or "").encode("utf-8"))
        h.update(b"\x00")
    return h.hexdigest()


class ClientCache(Generic[T]):
    """
    Tiny in-memory cache of client handles, owned by the caller.

    - Keyed by `credential_fingerprint(...)` of whatever identifies a client
      (e.g. namespace, api key, region, endpoint).
    - Nothing is shared between cache instances; there is no module-level cache.
    - `get_or_init` builds a value at most once per key, even across threads.
    """

    def __init__(self) -> None:
        self._data: Dict[str, T] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, fingerprint: object) -> bool:
        return fingerprint in self._data

    def get(self, fingerprint: str) -> Optional[T]:
        return self._data.get(fingerprint)

    def get_or_init(self, fingerprint: str, factory: Callable[[], T]) -> T:
        with self._lock:
            existing = self._data.get(fingerprint)
            if existing is not None:
                return existing
            value = factory()
            self._data[fingerprint] = value
            return value

    def pop(self, fingerprint: str) -> Optional[T]:
        with self._lock:
            return self._data.pop(fingerprint, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
