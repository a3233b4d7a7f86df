from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Tuple

from config import settings
from infrastructure.document_store import DocumentNotFoundError, DocumentStoreGateway
from schemas.dish import ApprovalState, CatalogEntry, VoteDirection, VoteResult
from services.search.tokenizer import generate_search_tokens

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = {"name", "image_url", "category", "tags", "image_provider_nickname"}
_VOTE_FIELDS = {VoteDirection.UP: "thumbs_up", VoteDirection.DOWN: "thumbs_down"}


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class DishCatalogService:
    """Writes to the dish catalog.

    Every write that sets a name also rewrites the ``tokens`` index field in
    the same store call; ``reindex_dish`` is the explicit form of that
    contract for documents whose tokens are stale or missing.
    """

    def __init__(
        self,
        store: DocumentStoreGateway,
        *,
        collection: str = settings.DISHES_COLLECTION,
    ):
        self.store = store
        self.collection = collection

    @staticmethod
    def _clean_name(name: str) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValueError("Dish name cannot be empty")
        return cleaned

    async def create_dish(
        self,
        name: str,
        *,
        image_url: str = "",
        category: Optional[str] = None,
        tags: Iterable[str] = (),
        approval_state: ApprovalState = ApprovalState.APPROVED,
        image_provider_nickname: Optional[str] = None,
        requested_by: Optional[str] = None,
    ) -> str:
        cleaned = self._clean_name(name)
        now = _utc_timestamp()
        dish_id = await self.store.create_document(
            self.collection,
            {
                "name": cleaned,
                "tokens": generate_search_tokens(cleaned),
                "image_url": image_url or "",
                "category": category or None,
                "tags": list(tags or []),
                "approval_state": ApprovalState(approval_state).value,
                "image_provider_nickname": image_provider_nickname or None,
                "requested_by": requested_by or None,
                "thumbs_up": 0,
                "thumbs_down": 0,
                "created_at": now,
                "updated_at": now,
            },
        )
        logger.info("Created dish %s (%s, %s)", dish_id, cleaned, ApprovalState(approval_state).value)
        return dish_id

    async def create_dish_from_menu_item(self, name: str, category: Optional[str]) -> str:
        """Create an approved, image-less dish for a menu item nobody has catalogued yet."""
        return await self.create_dish(name, category=category)

    async def update_dish(self, dish_id: str, **updates: Any) -> None:
        unknown = set(updates) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unsupported dish fields: {', '.join(sorted(unknown))}")

        changes = dict(updates)
        if "name" in changes:
            changes["name"] = self._clean_name(changes["name"])
            changes["tokens"] = generate_search_tokens(changes["name"])
        if "tags" in changes:
            changes["tags"] = list(changes["tags"] or [])
        changes["updated_at"] = _utc_timestamp()
        await self.store.update_document(self.collection, dish_id, changes)

    async def rename_dish(self, dish_id: str, new_name: str) -> None:
        await self.update_dish(dish_id, name=new_name)

    async def reindex_dish(self, dish_id: str) -> List[str]:
        """Recompute ``tokens`` from the stored name and write them back."""
        document = await self.store.get_document(self.collection, dish_id)
        if document is None:
            raise DocumentNotFoundError(self.collection, dish_id)
        tokens = generate_search_tokens(document.get("name") or "")
        await self.store.update_document(self.collection, dish_id, {"tokens": tokens})
        return tokens

    async def reindex_all(self) -> int:
        documents = await self.store.list_documents(self.collection)
        for document in documents:
            await self.store.update_document(
                self.collection,
                document.id,
                {"tokens": generate_search_tokens(document.get("name") or "")},
            )
        logger.info("Reindexed tokens for %d dishes", len(documents))
        return len(documents)

    async def delete_dish(self, dish_id: str) -> None:
        await self.store.delete_document(self.collection, dish_id)

    async def get_dish(self, dish_id: str) -> Optional[CatalogEntry]:
        document = await self.store.get_document(self.collection, dish_id)
        return CatalogEntry.from_document(document) if document else None

    async def get_dishes_by_tags(
        self,
        tags: Iterable[str],
        *,
        limit: int = settings.SEARCH_MAX_RESULTS,
    ) -> List[CatalogEntry]:
        required = set(tags or ())
        if not required:
            return []
        documents = await self.store.query_by_exact_field(
            self.collection,
            "approval_state",
            ApprovalState.APPROVED.value,
        )
        entries = [
            CatalogEntry.from_document(document)
            for document in documents
            if required.issubset(document.get("tags") or [])
        ]
        return entries[:limit]

    async def list_dishes_by_state(self, state: ApprovalState) -> List[CatalogEntry]:
        documents = await self.store.query_by_exact_field(
            self.collection,
            "approval_state",
            ApprovalState(state).value,
        )
        return [CatalogEntry.from_document(document) for document in documents]

    async def submit_dish_suggestion(
        self,
        name: str,
        *,
        requested_by: str,
        image_url: str = "",
        category: Optional[str] = None,
        tags: Iterable[str] = (),
        nickname: Optional[str] = None,
    ) -> str:
        """Record a user suggestion as a pending dish awaiting moderation."""
        return await self.create_dish(
            name,
            image_url=image_url,
            category=category,
            tags=tags,
            approval_state=ApprovalState.PENDING,
            image_provider_nickname=nickname if image_url else None,
            requested_by=requested_by,
        )

    async def set_approval_state(self, dish_id: str, state: ApprovalState) -> None:
        await self.store.update_document(
            self.collection,
            dish_id,
            {"approval_state": ApprovalState(state).value, "updated_at": _utc_timestamp()},
        )

    async def approve_dish(self, dish_id: str) -> None:
        await self.set_approval_state(dish_id, ApprovalState.APPROVED)

    async def reject_dish(self, dish_id: str) -> None:
        await self.set_approval_state(dish_id, ApprovalState.REJECTED)

    async def vote_dish(
        self,
        dish_id: str,
        vote: VoteDirection,
        previous: Optional[VoteDirection] = None,
    ) -> VoteResult:
        """Apply one client's vote given the vote it cast before.

        Repeating the previous vote withdraws it; voting the other way moves
        the vote from one counter to the other.
        """
        vote = VoteDirection(vote)
        previous = VoteDirection(previous) if previous else None

        document = await self.store.get_document(self.collection, dish_id)
        if document is None:
            raise DocumentNotFoundError(self.collection, dish_id)

        counts = {field: int(document.get(field) or 0) for field in _VOTE_FIELDS.values()}
        if previous is vote:
            counts[_VOTE_FIELDS[vote]] -= 1
            current = None
        else:
            if previous is not None:
                counts[_VOTE_FIELDS[previous]] -= 1
            counts[_VOTE_FIELDS[vote]] += 1
            current = vote
        counts = {field: max(value, 0) for field, value in counts.items()}

        await self.store.update_document(self.collection, dish_id, counts)
        return VoteResult(id=dish_id, vote=current, **counts)

    async def get_top_dishes(
        self,
        page: int = 1,
        page_size: int = 10,
        tags: Optional[Iterable[str]] = None,
    ) -> Tuple[List[CatalogEntry], bool]:
        """One page of approved dishes ordered by net votes, plus a has-more flag."""
        if page < 1 or page_size < 1:
            raise ValueError("page and page_size must be positive")

        documents = await self.store.query_by_exact_field(
            self.collection,
            "approval_state",
            ApprovalState.APPROVED.value,
        )
        entries = [CatalogEntry.from_document(document) for document in documents]
        pool = sorted(entries, key=lambda entry: -entry.thumbs_up)[: settings.TOP_DISHES_POOL_SIZE]

        required = set(tags or ())
        if required:
            pool = [entry for entry in pool if required.issubset(entry.tags)]
        pool.sort(key=lambda entry: -(entry.thumbs_up - entry.thumbs_down))

        start = (page - 1) * page_size
        end = start + page_size
        return pool[start:end], len(pool) > end
