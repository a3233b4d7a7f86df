from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from infrastructure.document_store import DocumentStoreGateway
from services.ingestion.resolution_cache import ResolutionCache
from services.search.normalizer import normalize_text


@dataclass(frozen=True, slots=True)
class DishMatch:
    id: str
    name: str


class DishResolver:
    """Match free-text menu items to catalogued dishes.

    Used by menu ingestion only. An exact normalized match wins; otherwise the
    first cached dish whose normalized name contains the item, or is contained
    by it, is returned. That first hit follows snapshot order and is a
    plausible match, not necessarily the best one.
    """

    def __init__(self, store: DocumentStoreGateway, cache: ResolutionCache):
        self.store = store
        self.cache = cache

    async def resolve(self, free_text: str) -> Optional[DishMatch]:
        normalized_input = normalize_text(free_text)
        if not normalized_input:
            return None

        snapshot = await self.cache.get_snapshot(self.store)

        for entry in snapshot.values():
            if entry.normalized_name == normalized_input:
                return DishMatch(id=entry.id, name=entry.name)

        for entry in snapshot.values():
            if not entry.normalized_name:
                continue
            if normalized_input in entry.normalized_name or entry.normalized_name in normalized_input:
                return DishMatch(id=entry.id, name=entry.name)

        return None
