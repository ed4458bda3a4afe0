"""
HTTP surface: status codes, headers and payload shapes.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Make the taskboard package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from taskboard.app import create_app  # noqa: E402
from taskboard.core import config as core_config  # noqa: E402
from taskboard.domain.models import User  # noqa: E402
from taskboard.repositories.json_storage import UserStore  # noqa: E402


@pytest.fixture()
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("TASKBOARD_DATA_DIR", str(tmp_path))
    core_config.get_settings.cache_clear()
    UserStore(tmp_path / "users.json").save(
        [User(id="u1", first_name="Ada", last_name="Lovelace", email="ada@example.com", password="secret", role="Admin")]
    )
    with TestClient(create_app()) as test_client:
        yield test_client
    core_config.get_settings.cache_clear()


def _create(client, **body):
    payload = {"name": "Apollo", "createdBy": "u1", **body}
    return client.post("/api/project", json=payload)


def test_health(client):
    assert client.get("/").json() == {"status": "ok"}


def test_project_crud_flow(client):
    res = _create(client, id="p1", status="InProgress")
    assert res.status_code == 201
    assert res.headers["location"].endswith("/api/project/p1")
    body = res.json()
    assert body["id"] == "p1"
    assert body["createdByDisplayName"] == "Ada Lovelace"
    assert body["percentComplete"] == 0
    assert body["projectTasks"] == []

    assert client.get("/api/project/p1").json()["status"] == "InProgress"
    assert [p["id"] for p in client.get("/api/project").json()] == ["p1"]

    res = client.put("/api/project/p1", json={"name": "Apollo 2", "createdBy": "someone"})
    assert res.status_code == 204
    updated = client.get("/api/project/p1").json()
    assert updated["name"] == "Apollo 2"
    assert updated["createdBy"] == "u1"

    assert client.delete("/api/project/p1").status_code == 204
    assert client.get("/api/project").json() == []


def test_project_not_found_and_duplicate(client):
    assert client.get("/api/project/nope").status_code == 404
    assert client.put("/api/project/nope", json={"name": "x"}).status_code == 404
    res = client.delete("/api/project/nope")
    assert res.status_code == 404
    assert res.json() == {"error": "Project with ID 'nope' not found."}

    _create(client, id="p1")
    res = _create(client, id="p1")
    assert res.status_code == 400
    assert "already exists" in res.json()["error"]


def test_repeated_nested_task_ids_are_rejected(client):
    tasks = [{"id": "t1", "title": "a", "status": "New"}, {"id": "t1", "title": "b", "status": "New"}]
    res = _create(client, id="p1", projectTasks=tasks)
    assert res.status_code == 400
    assert "already exists" in res.json()["error"]
    assert client.get("/api/project").json() == []

    _create(client, id="p1")
    res = client.put("/api/project/p1", json={"name": "x", "projectTasks": tasks})
    assert res.status_code == 400
    assert client.get("/api/project/p1/tasks").json() == []


def test_percent_complete_is_integral_on_the_wire(client):
    _create(client, id="p1", projectTasks=[{"title": "a", "status": "Done"}])
    _create(client, id="p2", projectTasks=[{"title": "a", "status": "Done"}, {"title": "b", "status": "New"}])

    percents = {p["id"]: p["percentComplete"] for p in client.get("/api/project").json()}
    assert percents == {"p1": 100, "p2": 0}
    assert all(isinstance(v, int) for v in percents.values())


def test_task_endpoints(client):
    _create(client, id="p1")

    res = client.post("/api/project/p1/tasks", json={"title": "Design", "status": "New", "assignedTo": "u1"})
    assert res.status_code == 201
    task = res.json()
    assert task["projectId"] == "p1"
    assert task["assignedToDisplayName"] == "Ada Lovelace"
    assert res.headers["location"].endswith(f"/api/project/p1/tasks/{task['id']}")

    assert client.get(f"/api/project/p1/tasks/{task['id']}").json()["title"] == "Design"
    assert [t["id"] for t in client.get("/api/project/p1/tasks").json()] == [task["id"]]

    res = client.put(f"/api/project/p1/tasks/{task['id']}", json={"title": "Design v2", "status": "Done"})
    assert res.status_code == 204
    assert client.get("/api/project/p1").json()["percentComplete"] == 100

    assert client.delete(f"/api/project/p1/tasks/{task['id']}").status_code == 204
    assert client.get(f"/api/project/p1/tasks/{task['id']}").status_code == 404


def test_task_failures(client):
    assert client.get("/api/project/nope/tasks").status_code == 404
    assert client.post("/api/project/nope/tasks", json={"title": "x", "status": "New"}).status_code == 404

    _create(client, id="p1")
    client.post("/api/project/p1/tasks", json={"id": "t1", "title": "x", "status": "New"})
    assert client.post("/api/project/p1/tasks", json={"id": "t1", "title": "y", "status": "New"}).status_code == 400
    assert client.put("/api/project/p1/tasks/t9", json={"title": "x", "status": "New"}).status_code == 404
    assert client.delete("/api/project/p1/tasks/t9").status_code == 404


def test_task_requires_title_and_status(client):
    _create(client, id="p1")
    res = client.post("/api/project/p1/tasks", json={"description": "no title"})
    assert res.status_code == 422
    assert res.json()["error"] == "Invalid request payload."


def test_user_endpoints_never_expose_passwords(client):
    users = client.get("/api/user").json()
    assert users == [
        {"id": "u1", "firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com", "role": "Admin"}
    ]

    res = client.post("/api/user/login", json={"email": "ada@example.com", "password": "secret"})
    assert res.status_code == 200
    assert "password" not in res.json()
    assert client.post("/api/user/login", json={"email": "ada@example.com", "password": "bad"}).status_code == 401

    res = client.get("/api/user/u1")
    assert res.status_code == 200
    assert res.json()["firstName"] == "Ada"
    assert "password" not in res.json()
    assert client.get("/api/user/nope").status_code == 404


def test_user_scoped_listings(client):
    _create(client, id="p1")
    _create(client, id="p2", createdBy="u2")
    client.post("/api/project/p2/tasks", json={"title": "x", "status": "Ready", "assignedTo": "u1"})

    assert [p["id"] for p in client.get("/api/user/u1/projects").json()] == ["p1"]
    tasks = client.get("/api/user/u1/tasks").json()
    assert [(t["title"], t["projectId"]) for t in tasks] == [("x", "p2")]


def test_malformed_store_is_a_server_error(client, tmp_path):
    (tmp_path / "projects.json").write_text("{broken", encoding="utf-8")
    res = client.get("/api/project")
    assert res.status_code == 500
    assert res.json() == {"error": "Stored data is unreadable."}
