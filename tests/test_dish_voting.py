import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from infrastructure.document_store import DocumentNotFoundError, InMemoryDocumentStore
from schemas.dish import ApprovalState, VoteDirection
from services.catalog import DishCatalogService


@pytest.fixture
def anyio_backend():
    return "asyncio"


async def _with_votes(store, name, up, down, **kwargs):
    catalog = DishCatalogService(store)
    dish_id = await catalog.create_dish(name, **kwargs)
    await store.update_document("dishes", dish_id, {"thumbs_up": up, "thumbs_down": down})
    return dish_id


@pytest.mark.anyio("asyncio")
async def test_first_vote_then_switch_then_withdraw():
    store = InMemoryDocumentStore()
    catalog = DishCatalogService(store)
    dish_id = await catalog.create_dish("Bacalhau à Brás")

    first = await catalog.vote_dish(dish_id, VoteDirection.UP)
    assert (first.thumbs_up, first.thumbs_down, first.vote) == (1, 0, VoteDirection.UP)

    switched = await catalog.vote_dish(dish_id, VoteDirection.DOWN, previous=VoteDirection.UP)
    assert (switched.thumbs_up, switched.thumbs_down, switched.vote) == (0, 1, VoteDirection.DOWN)

    withdrawn = await catalog.vote_dish(dish_id, VoteDirection.DOWN, previous=VoteDirection.DOWN)
    assert (withdrawn.thumbs_up, withdrawn.thumbs_down, withdrawn.vote) == (0, 0, None)

    stored = await catalog.get_dish(dish_id)
    assert (stored.thumbs_up, stored.thumbs_down) == (0, 0)


@pytest.mark.anyio("asyncio")
async def test_counters_never_go_negative():
    store = InMemoryDocumentStore()
    catalog = DishCatalogService(store)
    dish_id = await catalog.create_dish("Caldo Verde")

    result = await catalog.vote_dish(dish_id, "up", previous="up")

    assert (result.thumbs_up, result.thumbs_down, result.vote) == (0, 0, None)


@pytest.mark.anyio("asyncio")
async def test_voting_on_a_missing_dish_fails():
    catalog = DishCatalogService(InMemoryDocumentStore())

    with pytest.raises(DocumentNotFoundError):
        await catalog.vote_dish("missing", VoteDirection.UP)


@pytest.mark.anyio("asyncio")
async def test_top_dishes_are_ordered_by_net_votes_and_paginated():
    store = InMemoryDocumentStore()
    popular = await _with_votes(store, "Arroz de Pato", up=9, down=1)
    divisive = await _with_votes(store, "Dobrada", up=10, down=8)
    liked = await _with_votes(store, "Caldo Verde", up=5, down=0)
    await _with_votes(store, "Sopa de Peixe", up=50, down=0, approval_state=ApprovalState.PENDING)
    catalog = DishCatalogService(store)

    first_page, first_has_more = await catalog.get_top_dishes(page=1, page_size=2)
    second_page, second_has_more = await catalog.get_top_dishes(page=2, page_size=2)

    assert [entry.id for entry in first_page] == [popular, liked]
    assert first_has_more is True
    assert [entry.id for entry in second_page] == [divisive]
    assert second_has_more is False


@pytest.mark.anyio("asyncio")
async def test_top_dishes_filter_by_tags():
    store = InMemoryDocumentStore()
    await _with_votes(store, "Arroz de Pato", up=9, down=1, tags=["#porco"])
    spicy = await _with_votes(store, "Frango Piri-Piri", up=3, down=0, tags=["#frango", "#picante"])
    catalog = DishCatalogService(store)

    dishes, has_more = await catalog.get_top_dishes(tags=["#picante"])

    assert [entry.id for entry in dishes] == [spicy]
    assert has_more is False


@pytest.mark.anyio("asyncio")
async def test_top_dishes_only_consider_the_thirty_most_up_voted():
    store = InMemoryDocumentStore()
    for index in range(30):
        await _with_votes(store, f"Prato {index}", up=100 + index, down=100 + index)
    overlooked = await _with_votes(store, "Prato Esquecido", up=5, down=0)
    catalog = DishCatalogService(store)

    dishes, has_more = await catalog.get_top_dishes(page=1, page_size=30)

    assert len(dishes) == 30
    assert overlooked not in {entry.id for entry in dishes}
    assert has_more is False


@pytest.mark.anyio("asyncio")
async def test_top_dishes_reject_non_positive_pages():
    catalog = DishCatalogService(InMemoryDocumentStore())

    with pytest.raises(ValueError):
        await catalog.get_top_dishes(page=0)
