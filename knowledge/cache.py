"""
Cache adapter abstraction and the per-document analysis memo.

The adapter interface keeps call sites independent of the backing store; the
in-memory adapter wraps a cachetools cache with a lock. ``AnalysisCache``
memoizes each document's own extraction result by document id and content
hash so unchanged documents are not re-analyzed.
"""
import logging
import threading
from typing import Any, Dict, Optional

from cachetools import LRUCache

from knowledge.entity_models import AnalysisResult

logger = logging.getLogger(__name__)


class CacheAdapter:
    """Abstract cache adapter interface."""

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError()

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError()

    def delete(self, key: str) -> None:
        raise NotImplementedError()

    def clear(self) -> None:
        raise NotImplementedError()

    def __len__(self) -> int:
        raise NotImplementedError()


class InMemoryCacheAdapter(CacheAdapter):
    """Lock-guarded adapter over a cachetools cache (LRUCache by default).

    Any mutable mapping with `get`, `pop` and `clear` works as `cache_impl`.
    """

    def __init__(self, cache_impl):
        self._cache = cache_impl
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._cache.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._cache[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._cache.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


class AnalysisCache:
    """
    Memo of per-document analysis results keyed by document id and content hash.

    Storing a result under a new fingerprint drops the document's superseded
    entry. Cached results are shared; callers must treat them as read-only
    (the merge step copies everything it returns).
    """

    def __init__(self, max_size: int = 1024, adapter: Optional[CacheAdapter] = None):
        if adapter is None:
            adapter = InMemoryCacheAdapter(LRUCache(maxsize=max_size))
        self._adapter = adapter
        self._latest: Dict[str, str] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def _make_key(document_id: str, fingerprint: str) -> str:
        return f"{document_id}::{fingerprint}"

    def get(self, document_id: str, fingerprint: str) -> Optional[AnalysisResult]:
        result = self._adapter.get(self._make_key(document_id, fingerprint))
        with self._lock:
            if result is None:
                self.misses += 1
            else:
                self.hits += 1
        return result

    def put(self, document_id: str, fingerprint: str, result: AnalysisResult) -> None:
        key = self._make_key(document_id, fingerprint)
        with self._lock:
            previous = self._latest.get(document_id)
            self._latest[document_id] = key
        if previous and previous != key:
            self._adapter.delete(previous)
            logger.debug(f"Dropped superseded analysis for {document_id}")
        self._adapter.set(key, result)

    def invalidate(self, document_id: str) -> None:
        with self._lock:
            key = self._latest.pop(document_id, None)
        if key:
            self._adapter.delete(key)

    def clear(self) -> None:
        with self._lock:
            self._latest.clear()
            self.hits = 0
            self.misses = 0
        self._adapter.clear()

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {"size": len(self._adapter), "hits": self.hits, "misses": self.misses}
