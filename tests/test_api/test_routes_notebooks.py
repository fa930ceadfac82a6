"""HTTP tests for notebook and page routes."""

import pytest
from starlette.testclient import TestClient

from tonish.config import AppSettings
from tonish.main import build_app


@pytest.fixture
def client(mock_settings: AppSettings):
    with TestClient(build_app(mock_settings)) as c:
        yield c


def _notebook(client: TestClient, **fields) -> dict:
    fields.setdefault("name", "Notes")
    resp = client.post("/api/notebooks", json=fields)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestNotebookRoutes:

    def test_crud(self, client: TestClient) -> None:
        notebook = _notebook(client, name="Recipes", tags="food")
        nb_id = notebook["id"]
        assert notebook["pages"] == []

        updated = client.put(f"/api/notebooks/{nb_id}", json={"is_pinned": True}).json()
        assert updated["is_pinned"] is True
        assert updated["name"] == "Recipes"

        assert [n["id"] for n in client.get("/api/notebooks").json()] == [nb_id]
        assert client.delete(f"/api/notebooks/{nb_id}").status_code == 204
        assert client.get(f"/api/notebooks/{nb_id}").status_code == 404

    def test_create_requires_name(self, client: TestClient) -> None:
        assert client.post("/api/notebooks", json={"tags": "x"}).status_code == 422

    def test_delete_broadcasts_to_owner(self, client: TestClient) -> None:
        notebook = _notebook(client, user_id=2)
        with client.websocket_connect("/ws?user_id=2") as ws:
            client.delete(f"/api/notebooks/{notebook['id']}")
            message = ws.receive_json()
        assert message == {"type": "notebook_delete", "data": notebook, "user_id": 2}


class TestPageRoutes:

    def test_page_crud_and_search(self, client: TestClient) -> None:
        notebook = _notebook(client)
        resp = client.post(
            "/api/pages",
            json={"notebook_id": notebook["id"], "title": "Sourdough", "content": "flour"},
        )
        assert resp.status_code == 201
        page = resp.json()

        assert client.get(f"/api/pages/{page['id']}").json()["title"] == "Sourdough"
        assert [p["id"] for p in client.get("/api/pages/search", params={"q": "flour"}).json()] == [
            page["id"]
        ]
        assert client.get("/api/pages/search", params={"q": "zzz"}).json() == []

        edited = client.put(f"/api/pages/{page['id']}", json={"content": "rye"}).json()
        assert edited["content"] == "rye"
        assert edited["title"] == "Sourdough"

        assert client.delete(f"/api/pages/{page['id']}").status_code == 204
        assert client.get(f"/api/pages/{page['id']}").status_code == 404

    def test_page_for_missing_notebook_is_404(self, client: TestClient) -> None:
        resp = client.post("/api/pages", json={"notebook_id": 404, "title": "Orphan"})
        assert resp.status_code == 404
        assert resp.json() == {"error": "Notebook not found"}

    def test_page_change_announces_parent_notebook(self, client: TestClient) -> None:
        notebook = _notebook(client, user_id=8)
        with client.websocket_connect("/ws?user_id=8") as ws:
            client.post("/api/pages", json={"notebook_id": notebook["id"], "title": "P1"})
            message = ws.receive_json()

        assert message["type"] == "notebook_update"
        assert message["user_id"] == 8
        assert message["data"]["id"] == notebook["id"]
        assert [p["title"] for p in message["data"]["pages"]] == ["P1"]


class TestNotebookOwnership:

    @pytest.mark.parametrize("owner", [-1, 2**63])
    def test_out_of_range_owner_rejected(self, client: TestClient, owner: int) -> None:
        resp = client.post("/api/notebooks", json={"name": "N", "user_id": owner})
        assert resp.status_code == 422
        assert client.get("/api/notebooks").json() == []

    def test_page_with_overflowing_notebook_id_rejected(self, client: TestClient) -> None:
        resp = client.post("/api/pages", json={"notebook_id": 2**64, "title": "x"})
        assert resp.status_code == 422

    def test_ownership_move_notifies_previous_owner(self, client: TestClient) -> None:
        notebook = _notebook(client, user_id=3)
        with client.websocket_connect("/ws?user_id=3") as old:
            client.put(f"/api/notebooks/{notebook['id']}", json={"user_id": 4})
            message = old.receive_json()
        assert message["type"] == "notebook_update"
        assert message["user_id"] == 3
        assert message["data"]["user_id"] == 4
