import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from infrastructure.document_store import InMemoryDocumentStore
from main import app
from routers.dependencies import get_document_store
from services.ingestion import get_shared_resolution_cache


@pytest.fixture
def client():
    store = InMemoryDocumentStore()

    async def _override_store():
        yield store

    app.dependency_overrides[get_document_store] = _override_store
    get_shared_resolution_cache().invalidate()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        get_shared_resolution_cache().invalidate()


def test_create_then_search(client):
    created = client.post("/api/dishes", json={"name": "Arroz de Pato", "tags": ["#porco"]})
    assert created.status_code == 200
    dish_id = created.json()["id"]

    response = client.get("/api/dishes/search", params={"q": "pato"})

    assert response.status_code == 200
    body = response.json()
    assert body["path"] == "tokens"
    assert [dish["id"] for dish in body["results"]] == [dish_id]
    assert body["results"][0]["approval_state"] == "approved"
    assert "tokens" not in body["results"][0]


def test_blank_search_is_rejected(client):
    response = client.get("/api/dishes/search", params={"q": "  "})

    assert response.status_code == 400


def test_rename_and_missing_dish(client):
    dish_id = client.post("/api/dishes", json={"name": "Frango Assado"}).json()["id"]

    renamed = client.patch(f"/api/dishes/{dish_id}", json={"name": "Frango Grelhado"})
    assert renamed.status_code == 200
    assert client.get(f"/api/dishes/{dish_id}").json()["name"] == "Frango Grelhado"
    hits = client.get("/api/dishes/search", params={"q": "grelhado"}).json()["results"]
    assert [dish["id"] for dish in hits] == [dish_id]

    assert client.patch("/api/dishes/unknown", json={"name": "X"}).status_code == 404
    assert client.get("/api/dishes/unknown").status_code == 404
    assert client.post("/api/dishes/unknown/reindex").status_code == 404


def test_suggestion_approval_flow(client):
    dish_id = client.post(
        "/api/dishes/suggestions",
        json={"name": "Polvo à Lagareiro", "requested_by": "client-1"},
    ).json()["id"]

    assert client.get("/api/dishes/search", params={"q": "polvo"}).json()["results"] == []
    pending = client.get("/api/dishes/pending").json()
    assert [dish["id"] for dish in pending] == [dish_id]

    assert client.post(f"/api/dishes/{dish_id}/approve").status_code == 200
    hits = client.get("/api/dishes/search", params={"q": "polvo"}).json()["results"]
    assert [dish["id"] for dish in hits] == [dish_id]


def test_menu_upload(client):
    payload = {
        "menu_data": [
            {
                "date": "03/02/2025",
                "lunch": {
                    "Sugestão do Chefe": "Sopa de Legumes",
                    "Dieta Mediterrânica": "Peixe Grelhado",
                    "Alternativa": "",
                    "Vegetariana": "Caril de Grão",
                    "Sopa": "Caldo Verde",
                },
            },
            {"date": "bad", "lunch": {}},
        ]
    }

    response = client.post("/api/admin/menus/upload", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["results"] == [
        {"date": "03/02/2025", "action": "created", "id": body["results"][0]["id"]}
    ]
    hits = client.get("/api/dishes/search", params={"q": "legumes"}).json()["results"]
    assert [dish["name"] for dish in hits] == ["Sopa de Legumes"]


def test_menu_upload_without_valid_days(client):
    response = client.post(
        "/api/admin/menus/upload",
        json={"menu_data": {"date": "2025-02-03", "lunch": {}}},
    )

    assert response.status_code == 400


def test_vote_and_top_dishes(client):
    duck = client.post("/api/dishes", json={"name": "Arroz de Pato"}).json()["id"]
    soup = client.post("/api/dishes", json={"name": "Caldo Verde"}).json()["id"]

    voted = client.post(f"/api/dishes/{soup}/vote", json={"vote": "up"})
    assert voted.status_code == 200
    assert voted.json() == {"id": soup, "thumbs_up": 1, "thumbs_down": 0, "vote": "up"}

    switched = client.post(f"/api/dishes/{duck}/vote", json={"vote": "down"}).json()
    assert switched["thumbs_down"] == 1

    top = client.get("/api/dishes/top", params={"page_size": 1})
    assert top.status_code == 200
    body = top.json()
    assert [dish["id"] for dish in body["dishes"]] == [soup]
    assert body["has_more"] is True

    assert client.post("/api/dishes/unknown/vote", json={"vote": "up"}).status_code == 404
    assert client.post(f"/api/dishes/{soup}/vote", json={"vote": "sideways"}).status_code == 422
    assert client.get("/api/dishes/top", params={"page": 0}).status_code == 422


def test_uploaded_menu_can_be_read_by_date(client):
    payload = {
        "menu_data": {
            "date": "03/02/2025",
            "lunch": {"Sugestão do Chefe": "Bacalhau à Brás", "Sopa": "Caldo Verde"},
        }
    }
    assert client.post("/api/admin/menus/upload", json=payload).status_code == 200

    response = client.get("/api/menus/2025-02-03")

    assert response.status_code == 200
    body = response.json()
    assert body["date"] == "2025-02-03"
    assert body["lunch"]["items"]["Sugestão do Chefe"]["dish_name"] == "Bacalhau à Brás"
    assert body["lunch"]["items"]["Sugestão do Chefe"]["dish_id"]
    assert client.get("/api/menus/2025-02-04").status_code == 404
