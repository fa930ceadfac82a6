"""HTTP tests for task routes, including live notifications over /ws."""

import pytest
from starlette.testclient import TestClient

from tonish.config import AppSettings
from tonish.main import build_app


@pytest.fixture
def client(mock_settings: AppSettings):
    with TestClient(build_app(mock_settings)) as c:
        yield c


def _create(client: TestClient, **fields) -> dict:
    fields.setdefault("title", "Task")
    resp = client.post("/api/tasks", json=fields)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestTaskCrud:

    def test_health(self, client: TestClient) -> None:
        assert client.get("/").json()["message"] == "Tonish API is running"

    def test_create_get_list(self, client: TestClient) -> None:
        task = _create(client, title="Write docs", priority="high", quadrant="q1")

        assert client.get(f"/api/tasks/{task['id']}").json()["title"] == "Write docs"
        assert [t["id"] for t in client.get("/api/tasks").json()] == [task["id"]]
        assert len(client.get("/api/tasks/quadrant/q1").json()) == 1
        assert client.get("/api/tasks/quadrant/q2").json() == []
        assert len(client.get("/api/tasks/status", params={"status": "todo"}).json()) == 1

    def test_missing_title_is_validation_error(self, client: TestClient) -> None:
        assert client.post("/api/tasks", json={"priority": "low"}).status_code == 422

    def test_unknown_task_is_404(self, client: TestClient) -> None:
        resp = client.get("/api/tasks/999")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Task not found"}
        assert client.put("/api/tasks/999", json={"title": "x"}).status_code == 404
        assert client.delete("/api/tasks/999").status_code == 404

    def test_update_keeps_unsent_fields_and_owner(self, client: TestClient) -> None:
        task = _create(client, description="keep me", user_id=3)

        resp = client.put(f"/api/tasks/{task['id']}", json={"status": "done", "user_id": 0})

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "done"
        assert body["description"] == "keep me"
        assert body["user_id"] == 3

    def test_soft_delete_archive_restore_permanent(self, client: TestClient) -> None:
        task = _create(client)
        task_id = task["id"]

        assert client.delete(f"/api/tasks/{task_id}").status_code == 204
        assert client.get(f"/api/tasks/{task_id}").status_code == 404
        assert [t["id"] for t in client.get("/api/tasks/archived").json()] == [task_id]

        restored = client.post(f"/api/tasks/{task_id}/restore")
        assert restored.status_code == 200
        assert restored.json()["deleted_at"] is None

        archived = client.post(f"/api/tasks/{task_id}/archive").json()
        assert archived["is_archived"] is True
        assert client.get("/api/tasks").json() == []

        assert client.delete(f"/api/tasks/{task_id}/permanent").status_code == 204
        assert client.get("/api/tasks/archived").json() == []


class TestTaskNotifications:

    def test_create_reaches_global_listener(self, client: TestClient) -> None:
        with client.websocket_connect("/ws") as ws:
            task = _create(client, title="Live")
            message = ws.receive_json()

        assert message["type"] == "task_create"
        assert message["data"]["id"] == task["id"]
        assert "user_id" not in message

    def test_owner_targeted_updates(self, client: TestClient) -> None:
        with client.websocket_connect("/ws?user_id=5") as mine, client.websocket_connect(
            "/ws?user_id=6"
        ) as other:
            task = _create(client, title="Mine", user_id=5)
            client.put(f"/api/tasks/{task['id']}", json={"title": "Renamed"})
            client.delete(f"/api/tasks/{task['id']}")
            # A global event proves the other listener simply got nothing before it.
            client.post("/api/notebooks", json={"name": "Shared"})

            first = mine.receive_json()
            second = mine.receive_json()
            third = mine.receive_json()
            other_first = other.receive_json()

        assert [first["type"], second["type"], third["type"]] == [
            "task_create",
            "task_update",
            "task_delete",
        ]
        assert {m["user_id"] for m in (first, second, third)} == {5}
        assert second["data"]["title"] == "Renamed"
        assert third["data"]["deleted_at"] is not None
        assert other_first["type"] == "notebook_create"

    def test_ws_status_counts_connections(self, client: TestClient) -> None:
        with client.websocket_connect("/ws?user_id=1"):
            body = client.get("/api/ws/status").json()
        assert body["connected_clients"] >= 1
        assert body["running"] is True


class TestOwnerValidation:

    @pytest.mark.parametrize("owner", [-3, 2**64])
    def test_out_of_range_owner_rejected(self, client: TestClient, owner: int) -> None:
        resp = client.post("/api/tasks", json={"title": "t", "user_id": owner})
        assert resp.status_code == 422
        assert client.get("/api/tasks").json() == []

    def test_out_of_range_owner_rejected_on_update(self, client: TestClient) -> None:
        task = _create(client, user_id=1)
        resp = client.put(f"/api/tasks/{task['id']}", json={"user_id": -1})
        assert resp.status_code == 422
        assert client.get(f"/api/tasks/{task['id']}").json()["user_id"] == 1

    def test_ownership_move_notifies_both_owners(self, client: TestClient) -> None:
        task = _create(client, user_id=1)
        with client.websocket_connect("/ws?user_id=1") as old, client.websocket_connect(
            "/ws?user_id=2"
        ) as new:
            client.put(f"/api/tasks/{task['id']}", json={"user_id": 2})
            old_message = old.receive_json()
            new_message = new.receive_json()

        assert old_message["type"] == "task_update"
        assert old_message["user_id"] == 1
        assert old_message["data"]["user_id"] == 2
        assert new_message["type"] == "task_update"
        assert new_message["user_id"] == 2
