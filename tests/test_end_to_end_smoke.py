import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from infrastructure.document_store import InMemoryDocumentStore
from schemas.dish import ApprovalState
from services.catalog import DishCatalogService
from services.ingestion import DishResolver, ResolutionCache
from services.search import DishSearchService


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.mark.anyio("asyncio")
async def test_ingested_dish_becomes_searchable():
    store = InMemoryDocumentStore()
    catalog = DishCatalogService(store)
    resolver = DishResolver(store, ResolutionCache(clock=lambda: 0.0))
    search = DishSearchService(store)

    assert await resolver.resolve("Sopa de Legumes") is None
    dish_id = await catalog.create_dish_from_menu_item("Sopa de Legumes", "Dieta Mediterrânica")

    results = await search.search("legumes")

    assert [entry.id for entry in results] == [dish_id]
    assert results[0].name == "Sopa de Legumes"
    assert results[0].approval_state is ApprovalState.APPROVED


@pytest.mark.anyio("asyncio")
async def test_rename_reindexes_tokens():
    store = InMemoryDocumentStore()
    catalog = DishCatalogService(store)
    search = DishSearchService(store)
    dish_id = await catalog.create_dish("Frango Assado")

    await catalog.rename_dish(dish_id, "Peru Estufado")

    assert await search.search("frango") == []
    assert [entry.id for entry in await search.search("estufado")] == [dish_id]


@pytest.mark.anyio("asyncio")
async def test_reindex_repairs_legacy_documents():
    store = InMemoryDocumentStore()
    catalog = DishCatalogService(store)
    search = DishSearchService(store)
    legacy_id = await store.create_document(
        "dishes", {"name": "Caldo Verde", "approval_state": "approved"}
    )

    assert await search.search("verde") == []

    await catalog.reindex_dish(legacy_id)

    assert [entry.id for entry in await search.search("verde")] == [legacy_id]
    assert await catalog.reindex_all() == 1


@pytest.mark.anyio("asyncio")
async def test_suggestion_is_hidden_until_approved():
    store = InMemoryDocumentStore()
    catalog = DishCatalogService(store)
    search = DishSearchService(store)
    dish_id = await catalog.submit_dish_suggestion(
        "Polvo à Lagareiro",
        requested_by="client-42",
        image_url="https://img.example/polvo.jpg",
        nickname="Rita",
    )

    assert await search.search("polvo") == []
    assert [entry.id for entry in await catalog.list_dishes_by_state(ApprovalState.PENDING)] == [dish_id]

    await catalog.approve_dish(dish_id)

    (entry,) = await search.search("polvo")
    assert entry.image_provider_nickname == "Rita"
    assert entry.requested_by == "client-42"

    await catalog.reject_dish(dish_id)
    assert await search.search("polvo") == []


@pytest.mark.anyio("asyncio")
async def test_dishes_by_tags():
    store = InMemoryDocumentStore()
    catalog = DishCatalogService(store)
    await catalog.create_dish("Salada Grega", tags=["#salada", "#vegetariano"])
    await catalog.create_dish("Salada de Atum", tags=["#salada", "#peixe"])
    await catalog.create_dish("Salada Caprese", tags=["#salada", "#vegetariano"], approval_state=ApprovalState.PENDING)

    veggie = await catalog.get_dishes_by_tags(["#salada", "#vegetariano"])

    assert [entry.name for entry in veggie] == ["Salada Grega"]
    assert await catalog.get_dishes_by_tags([]) == []


@pytest.mark.anyio("asyncio")
async def test_catalog_rejects_blank_names_and_unknown_fields():
    catalog = DishCatalogService(InMemoryDocumentStore())
    dish_id = await catalog.create_dish("Bitoque")

    with pytest.raises(ValueError):
        await catalog.create_dish("   ")
    with pytest.raises(ValueError):
        await catalog.update_dish(dish_id, thumbs_up=100)
    with pytest.raises(ValueError):
        await catalog.rename_dish(dish_id, "")
