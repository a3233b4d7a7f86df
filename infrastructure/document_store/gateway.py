from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol, Sequence


class DocumentStoreError(Exception):
    """Base error raised by document store backends."""


class MembershipQueryError(DocumentStoreError):
    """The token-membership query could not be served."""


class DocumentNotFoundError(DocumentStoreError):
    """A write referenced a document id that does not exist."""

    def __init__(self, collection: str, document_id: str) -> None:
        super().__init__(f"Document {document_id!r} not found in {collection!r}")
        self.collection = collection
        self.document_id = document_id


@dataclass(slots=True)
class StoredDocument:
    """A document id together with its field mapping."""

    id: str
    fields: dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)


class DocumentStoreGateway(Protocol):
    """Abstraction over the backing document store."""

    async def query_by_token_membership(
        self,
        collection: str,
        field: str,
        candidate_tokens: Sequence[str],
        *,
        limit: int,
    ) -> list[StoredDocument]:
        """Return documents whose array ``field`` intersects ``candidate_tokens``."""

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
        """Return documents with ``lower_bound <= field <= upper_bound`` ordered by ``order_by``."""

    async def query_by_exact_field(
        self,
        collection: str,
        field: str,
        value: Any,
        *,
        limit: Optional[int] = None,
    ) -> list[StoredDocument]:
        """Return documents whose ``field`` equals ``value``."""

    async def list_documents(
        self,
        collection: str,
        *,
        limit: Optional[int] = None,
    ) -> list[StoredDocument]:
        """Return documents of a collection in insertion order."""

    async def get_document(self, collection: str, document_id: str) -> Optional[StoredDocument]:
        """Fetch a single document or ``None``."""

    async def create_document(self, collection: str, fields: Mapping[str, Any]) -> str:
        """Insert a document and return its store-assigned id."""

    async def update_document(
        self,
        collection: str,
        document_id: str,
        fields: Mapping[str, Any],
    ) -> None:
        """Merge ``fields`` into an existing document."""

    async def delete_document(self, collection: str, document_id: str) -> None:
        """Remove a document."""
