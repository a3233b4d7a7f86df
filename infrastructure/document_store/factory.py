from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

from config.settings import DOCUMENT_STORE_MODE

from .gateway import DocumentStoreGateway
from .memory_store import InMemoryDocumentStore

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class DocumentStoreBackend(str, Enum):
    SQL = "sql"
    MEMORY = "memory"


_memory_store: Optional[InMemoryDocumentStore] = None


def get_memory_store() -> InMemoryDocumentStore:
    """Return the process-wide in-memory store."""
    global _memory_store
    if _memory_store is None:
        _memory_store = InMemoryDocumentStore()
    return _memory_store


def create_document_store(
    db: Optional["AsyncSession"] = None,
    backend: Optional[Union[DocumentStoreBackend, str]] = None,
) -> DocumentStoreGateway:
    """Instantiate the configured document-store backend."""

    backend_value = backend or DOCUMENT_STORE_MODE
    if isinstance(backend_value, DocumentStoreBackend):
        backend_key = backend_value.value
    else:
        backend_key = str(backend_value).lower().strip()

    if backend_key == DocumentStoreBackend.MEMORY.value:
        return get_memory_store()

    if backend_key == DocumentStoreBackend.SQL.value:
        if db is None:
            raise ValueError("The sql document store requires a database session")
        # Imported here so the memory backend works without DATABASE_URL.
        from .sql_store import SqlDocumentStore

        return SqlDocumentStore(db)

    raise ValueError(f"Unsupported document store backend: {backend_value}")
