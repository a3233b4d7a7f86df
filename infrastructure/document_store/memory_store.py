from __future__ import annotations

import copy
import uuid
from typing import Any, Mapping, Optional, Sequence

from config.settings import MEMBERSHIP_QUERY_LIMIT

from .gateway import (
    DocumentNotFoundError,
    MembershipQueryError,
    StoredDocument,
)


class InMemoryDocumentStore:
    """Process-local document store with the same query limits as the hosted one.

    Collections are plain dicts keyed by document id, so iteration follows
    insertion order.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    def _collection(self, name: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(name, {})

    @staticmethod
    def _snapshot(document_id: str, fields: Mapping[str, Any]) -> StoredDocument:
        return StoredDocument(id=document_id, fields=copy.deepcopy(dict(fields)))

    async def query_by_token_membership(
        self,
        collection: str,
        field: str,
        candidate_tokens: Sequence[str],
        *,
        limit: int,
    ) -> list[StoredDocument]:
        if not candidate_tokens:
            raise MembershipQueryError("Membership query requires at least one candidate")
        if len(candidate_tokens) > MEMBERSHIP_QUERY_LIMIT:
            raise MembershipQueryError(
                f"Membership query accepts at most {MEMBERSHIP_QUERY_LIMIT} candidates, "
                f"got {len(candidate_tokens)}"
            )
        wanted = set(candidate_tokens)
        results: list[StoredDocument] = []
        for document_id, fields in self._collection(collection).items():
            values = fields.get(field)
            if not isinstance(values, (list, tuple, set, frozenset)):
                continue
            if wanted.intersection(values):
                results.append(self._snapshot(document_id, fields))
                if len(results) >= limit:
                    break
        return results

    async def query_by_name_range(
        self,
        collection: str,
        field: str,
        lower_bound: str,
        upper_bound: str,
        *,
        order_by: str,
        limit: int,
    ) -> list[StoredDocument]:
        matches = [
            (document_id, fields)
            for document_id, fields in self._collection(collection).items()
            if isinstance(fields.get(field), str)
            and isinstance(fields.get(order_by), str)
            and lower_bound <= fields[field] <= upper_bound
        ]
        matches.sort(key=lambda item: item[1][order_by])
        return [self._snapshot(document_id, fields) for document_id, fields in matches[:limit]]

    async def query_by_exact_field(
        self,
        collection: str,
        field: str,
        value: Any,
        *,
        limit: Optional[int] = None,
    ) -> list[StoredDocument]:
        results = [
            self._snapshot(document_id, fields)
            for document_id, fields in self._collection(collection).items()
            if field in fields and fields[field] == value
        ]
        return results if limit is None else results[:limit]

    async def list_documents(
        self,
        collection: str,
        *,
        limit: Optional[int] = None,
    ) -> list[StoredDocument]:
        results = [
            self._snapshot(document_id, fields)
            for document_id, fields in self._collection(collection).items()
        ]
        return results if limit is None else results[:limit]

    async def get_document(self, collection: str, document_id: str) -> Optional[StoredDocument]:
        fields = self._collection(collection).get(document_id)
        if fields is None:
            return None
        return self._snapshot(document_id, fields)

    async def create_document(self, collection: str, fields: Mapping[str, Any]) -> str:
        document_id = uuid.uuid4().hex
        self._collection(collection)[document_id] = copy.deepcopy(dict(fields))
        return document_id

    async def update_document(
        self,
        collection: str,
        document_id: str,
        fields: Mapping[str, Any],
    ) -> None:
        existing = self._collection(collection).get(document_id)
        if existing is None:
            raise DocumentNotFoundError(collection, document_id)
        existing.update(copy.deepcopy(dict(fields)))

    async def delete_document(self, collection: str, document_id: str) -> None:
        if self._collection(collection).pop(document_id, None) is None:
            raise DocumentNotFoundError(collection, document_id)
