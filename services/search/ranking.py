from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from schemas.dish import CatalogEntry
from services.search.normalizer import normalize_text


def _match_tier(normalized_name: str, normalized_query: str) -> int:
    if normalized_name == normalized_query:
        return 0
    if normalized_name.startswith(normalized_query):
        return 1
    if any(word.startswith(normalized_query) for word in normalized_name.split()):
        return 2
    return 3


def rank_entries(
    entries: Iterable[CatalogEntry],
    normalized_query: str,
    *,
    limit: Optional[int] = None,
    prefer_images: bool = False,
) -> List[CatalogEntry]:
    """Order search hits by match quality, then alphabetically.

    Exact normalized-name matches come first, then names starting with the
    query, then names with any word starting with the query, then the rest.
    Ties sort by normalized name; ``sorted`` keeps input order for full ties.
    With ``prefer_images`` entries that have a primary image lead every tier.
    """

    def sort_key(entry: CatalogEntry) -> Tuple[int, int, str]:
        normalized_name = normalize_text(entry.name)
        image_rank = 0 if (not prefer_images or entry.has_image) else 1
        return image_rank, _match_tier(normalized_name, normalized_query), normalized_name

    ranked = sorted(entries, key=sort_key)
    return ranked if limit is None else ranked[:limit]
