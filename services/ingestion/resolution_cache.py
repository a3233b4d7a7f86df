from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from config import settings
from infrastructure.document_store import DocumentStoreGateway
from schemas.dish import ApprovalState
from services.search.normalizer import normalize_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolutionCacheEntry:
    id: str
    name: str
    normalized_name: str


@dataclass(frozen=True, slots=True)
class _Snapshot:
    entries: Mapping[str, ResolutionCacheEntry]
    built_at: float


class ResolutionCache:
    """Read-through snapshot of approved dishes with a fixed validity window.

    The snapshot is replaced wholesale on expiry. There is no lock: callers
    racing on an expired snapshot may each rebuild it, and the last
    assignment wins. Readers always see a complete snapshot.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = settings.RESOLUTION_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        collection: str = settings.DISHES_COLLECTION,
    ):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.collection = collection
        self._snapshot: Optional[_Snapshot] = None

    def is_fresh(self) -> bool:
        snapshot = self._snapshot
        return snapshot is not None and self.clock() - snapshot.built_at < self.ttl_seconds

    def invalidate(self) -> None:
        self._snapshot = None

    async def get_snapshot(self, store: DocumentStoreGateway) -> Mapping[str, ResolutionCacheEntry]:
        snapshot = self._snapshot
        now = self.clock()
        if snapshot is not None and now - snapshot.built_at < self.ttl_seconds:
            return snapshot.entries

        documents = await store.query_by_exact_field(
            self.collection,
            "approval_state",
            ApprovalState.APPROVED.value,
        )
        entries: dict[str, ResolutionCacheEntry] = {}
        for document in documents:
            name = document.get("name") or ""
            if not isinstance(name, str):
                logger.warning("Leaving dish %s out of the resolution cache: non-text name %r", document.id, name)
                continue
            entries[document.id] = ResolutionCacheEntry(
                id=document.id,
                name=name,
                normalized_name=normalize_text(name),
            )

        rebuilt = _Snapshot(entries=MappingProxyType(entries), built_at=now)
        self._snapshot = rebuilt
        logger.info("Rebuilt dish resolution cache with %d entries", len(entries))
        return rebuilt.entries


_shared_cache: Optional[ResolutionCache] = None


def get_shared_resolution_cache() -> ResolutionCache:
    """Process-wide cache shared by all ingestion requests."""
    global _shared_cache
    if _shared_cache is None:
        _shared_cache = ResolutionCache()
    return _shared_cache
