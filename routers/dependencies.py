from __future__ import annotations

import hmac
from typing import AsyncIterator, Optional

from fastapi import Depends, Header, HTTPException, status

from config import settings
from infrastructure.document_store import (
    DocumentStoreBackend,
    DocumentStoreGateway,
    create_document_store,
)
from services.catalog import DishCatalogService
from services.ingestion import DishResolver, MenuIngestionService, get_shared_resolution_cache
from services.search import DishSearchService


def _session_factory():
    from infrastructure.database.database import SessionLocal

    return SessionLocal


async def get_document_store() -> AsyncIterator[DocumentStoreGateway]:
    if settings.DOCUMENT_STORE_MODE == DocumentStoreBackend.MEMORY.value:
        yield create_document_store(backend=DocumentStoreBackend.MEMORY)
        return

    db = _session_factory()()
    try:
        yield create_document_store(db, backend=DocumentStoreBackend.SQL)
        await db.commit()
    except Exception:
        await db.rollback()
        # A snapshot rebuilt through this session may list dishes that were
        # never committed.
        get_shared_resolution_cache().invalidate()
        raise
    finally:
        await db.close()


def get_search_service(
    store: DocumentStoreGateway = Depends(get_document_store),
) -> DishSearchService:
    return DishSearchService(store)


def get_catalog_service(
    store: DocumentStoreGateway = Depends(get_document_store),
) -> DishCatalogService:
    return DishCatalogService(store)


def get_menu_ingestion_service(
    store: DocumentStoreGateway = Depends(get_document_store),
) -> MenuIngestionService:
    resolver = DishResolver(store, get_shared_resolution_cache())
    return MenuIngestionService(store, resolver, DishCatalogService(store))


async def require_api_key(x_api_key: Optional[str] = Header(None, alias="X-API-Key")) -> None:
    expected_raw = settings.API_AUTH_TOKEN
    expected = expected_raw.strip().strip('"') if expected_raw else ""
    if not expected:
        # No API key configured; allow all requests.
        return
    provided = x_api_key.strip().strip('"') if x_api_key else ""
    if not provided or not hmac.compare_digest(provided, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
