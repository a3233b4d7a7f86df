import sys
import uuid
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import settings

if not settings.DATABASE_URL:
    pytest.skip("DATABASE_URL is not configured", allow_module_level=True)

from infrastructure.database.database import SessionLocal, create_tables
from infrastructure.document_store import (
    DocumentNotFoundError,
    DocumentStoreBackend,
    MembershipQueryError,
    create_document_store,
)
from services.catalog import DishCatalogService
from services.search import DishSearchService


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.mark.anyio("asyncio")
async def test_sql_store_serves_search_and_writes():
    await create_tables()
    collection = f"dishes_{uuid.uuid4().hex[:8]}"

    async with SessionLocal() as session:
        store = create_document_store(session, backend=DocumentStoreBackend.SQL)
        catalog = DishCatalogService(store, collection=collection)
        search = DishSearchService(store, collection=collection)
        try:
            duck_id = await catalog.create_dish("Arroz de Pato")
            await catalog.create_dish("Sopa de Peixe", approval_state="pending")

            assert [entry.id for entry in await search.search("pato")] == [duck_id]
            assert await search.search("peixe") == []

            await catalog.rename_dish(duck_id, "Arroz de Marisco")
            assert await search.search("pato") == []
            assert [entry.id for entry in await search.search("marisco")] == [duck_id]

            approved = await store.query_by_exact_field(collection, "approval_state", "approved")
            assert [document.id for document in approved] == [duck_id]

            with pytest.raises(MembershipQueryError):
                await store.query_by_token_membership(
                    collection, "tokens", [f"t{index}" for index in range(11)], limit=10
                )
            with pytest.raises(DocumentNotFoundError):
                await store.update_document(collection, "missing", {"name": "X"})

            await catalog.delete_dish(duck_id)
            assert await store.get_document(collection, duck_id) is None
        finally:
            await session.rollback()


@pytest.mark.anyio("asyncio")
async def test_sql_store_accepts_names_longer_than_a_varchar():
    await create_tables()
    collection = f"dishes_{uuid.uuid4().hex[:8]}"
    long_name = "Arroz de Pato " + " ".join(f"ingrediente{index}" for index in range(40))
    assert len(long_name) > 255

    async with SessionLocal() as session:
        store = create_document_store(session, backend=DocumentStoreBackend.SQL)
        catalog = DishCatalogService(store, collection=collection)
        search = DishSearchService(store, collection=collection)
        try:
            dish_id = await catalog.create_dish(long_name)

            assert [entry.id for entry in await search.search(long_name)] == [dish_id]
        finally:
            await session.rollback()
