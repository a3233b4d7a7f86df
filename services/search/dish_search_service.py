from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from config import settings
from infrastructure.document_store import DocumentStoreGateway, StoredDocument
from schemas.dish import ApprovalState, CatalogEntry
from services.search.normalizer import normalize_text
from services.search.ranking import rank_entries
from services.search.tokenizer import generate_search_tokens

logger = logging.getLogger(__name__)

# Upper bound for the prefix range query on the name field.
HIGH_SENTINEL = "\uf8ff"
MIN_QUERY_TOKEN_LENGTH = 2


class SearchPath(str, Enum):
    TOKENS = "tokens"
    NAME_PREFIX = "name_prefix"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(slots=True)
class CandidateFetch:
    """Outcome of one candidate query, tagged with the path that produced it."""

    path: SearchPath
    documents: List[StoredDocument] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.path is SearchPath.FAILED


@dataclass(slots=True)
class DishSearchResult:
    path: SearchPath
    entries: List[CatalogEntry] = field(default_factory=list)


class DishSearchService:
    """Token-membership search over the dish catalog.

    The store can only answer "does the token array intersect these few
    values", so the query is expanded with the same tokenizer used at write
    time, candidates are over-fetched and then verified client-side.
    """

    def __init__(
        self,
        store: DocumentStoreGateway,
        *,
        collection: str = settings.DISHES_COLLECTION,
        fetch_limit: int = settings.SEARCH_FETCH_LIMIT,
        max_results: int = settings.SEARCH_MAX_RESULTS,
        prefer_images: bool = settings.SEARCH_PREFER_IMAGES,
    ):
        self.store = store
        self.collection = collection
        self.fetch_limit = fetch_limit
        self.max_results = min(max_results, settings.SEARCH_RESULT_CAP)
        self.prefer_images = prefer_images

    async def search(
        self,
        query: str,
        tags: Optional[Iterable[str]] = None,
        include_all_states: bool = False,
    ) -> List[CatalogEntry]:
        """Return up to ``max_results`` ranked dishes whose name contains ``query``."""
        result = await self.search_with_path(query, tags, include_all_states)
        return result.entries

    async def search_with_path(
        self,
        query: str,
        tags: Optional[Iterable[str]] = None,
        include_all_states: bool = False,
    ) -> DishSearchResult:
        if not query or not query.strip():
            return DishSearchResult(path=SearchPath.SKIPPED)

        normalized_query = normalize_text(query)
        candidates = self.candidate_tokens(query)
        if not candidates:
            return DishSearchResult(path=SearchPath.SKIPPED)

        fetch = await self._fetch_by_tokens(candidates)
        if fetch.failed:
            logger.warning(
                "Token membership query failed, falling back to name prefix: %s", fetch.error
            )
            fetch = await self._fetch_by_name_prefix(normalized_query)
            if fetch.failed:
                logger.error("Name prefix fallback query also failed: %s", fetch.error)

        required_tags = set(tags or ())
        entries = self._verify(fetch.documents, normalized_query, required_tags, include_all_states)
        ranked = rank_entries(
            entries,
            normalized_query,
            limit=self.max_results,
            prefer_images=self.prefer_images,
        )
        return DishSearchResult(path=fetch.path, entries=ranked)

    @staticmethod
    def candidate_tokens(query: str) -> List[str]:
        """Query tokens sent to the membership query, most specific first."""
        tokens = [
            token
            for token in generate_search_tokens(query)
            if len(token) >= MIN_QUERY_TOKEN_LENGTH
        ]
        return tokens[: settings.MEMBERSHIP_QUERY_LIMIT]

    async def _fetch_by_tokens(self, candidates: Sequence[str]) -> CandidateFetch:
        try:
            documents = await self.store.query_by_token_membership(
                self.collection,
                "tokens",
                candidates,
                limit=self.fetch_limit,
            )
        except Exception as exc:
            return CandidateFetch(path=SearchPath.FAILED, error=exc)
        return CandidateFetch(path=SearchPath.TOKENS, documents=documents)

    async def _fetch_by_name_prefix(self, normalized_query: str) -> CandidateFetch:
        try:
            documents = await self.store.query_by_name_range(
                self.collection,
                "name",
                normalized_query,
                normalized_query + HIGH_SENTINEL,
                order_by="name",
                limit=self.fetch_limit,
            )
        except Exception as exc:
            return CandidateFetch(path=SearchPath.FAILED, error=exc)
        return CandidateFetch(path=SearchPath.NAME_PREFIX, documents=documents)

    def _verify(
        self,
        documents: Iterable[StoredDocument],
        normalized_query: str,
        required_tags: set[str],
        include_all_states: bool,
    ) -> List[CatalogEntry]:
        seen_ids: set[str] = set()
        entries: List[CatalogEntry] = []
        for document in documents:
            if document.id in seen_ids:
                continue
            seen_ids.add(document.id)

            name = document.get("name")
            if not isinstance(name, str):
                logger.warning("Skipping dish document %s with non-text name %r", document.id, name)
                continue
            # Token overlap is only a hint; the name itself must contain the query.
            if normalized_query not in normalize_text(name):
                continue
            try:
                entry = CatalogEntry.from_document(document)
            except ValueError as exc:
                logger.warning("Skipping malformed dish document %s: %s", document.id, exc)
                continue
            if required_tags and not required_tags.issubset(entry.tags):
                continue
            if not include_all_states and entry.approval_state is not ApprovalState.APPROVED:
                continue
            entries.append(entry)
        return entries
