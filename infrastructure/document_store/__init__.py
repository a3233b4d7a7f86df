from .factory import DocumentStoreBackend, create_document_store, get_memory_store
from .gateway import (
    DocumentNotFoundError,
    DocumentStoreError,
    DocumentStoreGateway,
    MembershipQueryError,
    StoredDocument,
)
from .memory_store import InMemoryDocumentStore

__all__ = [
    "DocumentNotFoundError",
    "DocumentStoreError",
    "DocumentStoreGateway",
    "MembershipQueryError",
    "StoredDocument",
    "InMemoryDocumentStore",
    "DocumentStoreBackend",
    "create_document_store",
    "get_memory_store",
]
