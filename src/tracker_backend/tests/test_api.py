"""
End-to-end tests through the HTTP and WebSocket surface.
"""

import json

from tracker_backend.repositories.base import DuplicateError, RepositoryError
from tracker_backend.repositories.project import ProjectRepository
from tracker_backend.tests.fixtures import register_and_login

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def create_project(client, headers, key="DEMO", name="Demo project"):
    response = client.post("/api/projects", headers=headers, json={"name": name, "key": key})
    assert response.status_code == 201, response.text
    return response.json()


class TestDemoScenario:

    def test_membership_grants_access_and_updates_are_pushed(self, client):
        alice = register_and_login(client, "alice")
        bobby = register_and_login(client, "bobby")

        project = create_project(client, alice)
        assert project["key"] == "DEMO"
        assert project["members"] == []

        # Bobby sees nothing and may not create tasks yet
        assert client.get("/api/projects", headers=bobby).json() == []
        response = client.post(f"/api/projects/{project['id']}/tasks", headers=bobby, json={"title": "Early bird"})
        assert response.status_code == 403
        assert response.json()["detail"]["reason"] == "NotMember"

        response = client.post(
            f"/api/projects/{project['id']}/members", headers=alice, json={"email": "bobby@example.com"}
        )
        assert response.status_code == 200
        assert len(response.json()["members"]) == 1

        listed = client.get("/api/projects", headers=bobby).json()
        assert [(p["key"], p["user_role"]) for p in listed] == [("DEMO", "member")]

        response = client.post(f"/api/projects/{project['id']}/tasks", headers=bobby, json={"title": "Write docs"})
        assert response.status_code == 201
        task = response.json()
        assert task["status"] == "ToDo"
        assert task["priority"] == "Medium"

        with client.websocket_connect("/ws") as websocket:
            response = client.patch(f"/api/tasks/{task['id']}", headers=alice, json={"status": "Done"})
            assert response.status_code == 200
            assert response.json()["status"] == "Done"

            event = json.loads(websocket.receive_text())

        assert event["event_type"] == "TASK_UPDATED"
        assert event["task"]["id"] == task["id"]
        assert event["changes"]["status_changed"] is True
        assert event["changes"]["previous_status"] == "ToDo"


class TestPushChannel:

    def test_disconnect_releases_subscription(self, client, hub):
        for _ in range(10):
            with client.websocket_connect("/ws"):
                assert hub.subscriber_count == 1
            assert hub.subscriber_count == 0


class TestErrorMapping:

    def test_unknown_resources_are_not_found(self, client):
        headers = register_and_login(client, "alice")
        assert client.get("/api/projects/missing", headers=headers).status_code == 404
        assert client.get("/api/tasks/missing", headers=headers).status_code == 404
        assert client.get("/api/images/missing", headers=headers).status_code == 404

    def test_invalid_bodies_are_bad_request(self, client):
        headers = register_and_login(client, "alice")
        assert client.post("/api/projects", headers=headers, json={"name": "No key"}).status_code == 400
        assert client.post("/api/projects", headers=headers, json={"name": "Lower", "key": "demo"}).status_code == 400

        project = create_project(client, headers)
        response = client.post(f"/api/projects/{project['id']}/tasks", headers=headers, json={
            "title": "Due", "has_due_date": True
        })
        assert response.status_code == 400

        task = client.post(f"/api/projects/{project['id']}/tasks", headers=headers, json={"title": "Plain"}).json()
        assert client.patch(f"/api/tasks/{task['id']}", headers=headers, json={"title": None}).status_code == 400
        assert client.patch(f"/api/tasks/{task['id']}", headers=headers, json={"status": "Unknown"}).status_code == 400

    def test_duplicate_project_key(self, client):
        headers = register_and_login(client, "alice")
        create_project(client, headers)
        response = client.post("/api/projects", headers=headers, json={"name": "Again", "key": "DEMO"})
        assert response.status_code == 400

    def test_repository_errors_are_mapped(self, client, monkeypatch):
        headers = register_and_login(client, "alice")

        def racing_insert(self, entity):
            raise DuplicateError("Project", {"key": entity.key})

        monkeypatch.setattr(ProjectRepository, "create", racing_insert)
        response = client.post("/api/projects", headers=headers, json={"name": "Raced", "key": "RACE"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Project already exists"

        def broken_insert(self, entity):
            raise RepositoryError("connection lost")

        monkeypatch.setattr(ProjectRepository, "create", broken_insert)
        response = client.post("/api/projects", headers=headers, json={"name": "Broken", "key": "LOST"})
        assert response.status_code == 500
        assert response.json()["detail"] == "Internal server error"

    def test_owner_only_project_operations(self, client):
        alice = register_and_login(client, "alice")
        bobby = register_and_login(client, "bobby")
        project = create_project(client, alice)
        client.post(f"/api/projects/{project['id']}/members", headers=alice, json={"email": "bobby@example.com"})

        response = client.patch(f"/api/projects/{project['id']}", headers=bobby, json={"name": "Taken over"})
        assert response.status_code == 403
        assert response.json()["detail"]["reason"] == "NotOwner"
        assert client.delete(f"/api/projects/{project['id']}", headers=bobby).status_code == 403

        assert client.delete(f"/api/projects/{project['id']}", headers=alice).status_code == 204
        assert client.get(f"/api/projects/{project['id']}", headers=alice).status_code == 404

    def test_requests_without_token(self, client):
        assert client.get("/api/projects").status_code == 401
        assert client.post("/api/projects", json={"name": "Anon", "key": "ANON"}).status_code == 401


class TestTaskResources:

    def test_comments_and_date_range(self, client):
        alice = register_and_login(client, "alice")
        project = create_project(client, alice)
        task = client.post(f"/api/projects/{project['id']}/tasks", headers=alice, json={"title": "Plan"}).json()

        response = client.post(f"/api/tasks/{task['id']}/comments", headers=alice, json={"content": "Looks good"})
        assert response.status_code == 201
        comment = response.json()
        assert comment["author"]["username"] == "alice"

        response = client.patch(
            f"/api/tasks/{task['id']}/comments/{comment['id']}", headers=alice, json={"content": "Looks great"}
        )
        assert response.json()["content"] == "Looks great"

        response = client.post(f"/api/tasks/{task['id']}/date-range", headers=alice, json={
            "start_date": "2026-05-01T09:00:00Z", "end_date": "2026-05-03T17:00:00Z"
        })
        assert response.status_code == 200

        full = client.get(f"/api/tasks/{task['id']}/full", headers=alice).json()
        assert full["task"]["id"] == task["id"]
        assert full["date_range"]["task_id"] == task["id"]

        ranges = client.get(f"/api/projects/{project['id']}/date-ranges", headers=alice).json()
        assert len(ranges) == 1

        assert client.delete(f"/api/tasks/{task['id']}/comments/{comment['id']}", headers=alice).status_code == 204
        assert client.get(f"/api/tasks/{task['id']}/comments", headers=alice).json() == []

    def test_delete_task_pushes_event(self, client):
        alice = register_and_login(client, "alice")
        project = create_project(client, alice)
        task = client.post(f"/api/projects/{project['id']}/tasks", headers=alice, json={"title": "Remove me"}).json()

        with client.websocket_connect("/ws") as websocket:
            assert client.delete(f"/api/tasks/{task['id']}", headers=alice).status_code == 204
            event = json.loads(websocket.receive_text())

        assert event == {"event_type": "TASK_DELETED", "task_id": task["id"], "project_id": project["id"]}


class TestImageEndpoints:

    def test_upload_download_and_delete(self, client, storage):
        alice = register_and_login(client, "alice")

        response = client.post(
            "/api/images",
            headers=alice,
            files={"file": ("photo.png", PNG, "image/png")},
            data={"custom_name": "profile", "folder": "avatar"},
        )
        assert response.status_code == 201, response.text
        image = response.json()
        assert image["filename"] == "profile.png"
        assert ("test-images", "avatar/profile.png") in storage.objects

        response = client.get(f"/api/images/{image['id']}/download", headers=alice)
        assert response.status_code == 200
        assert response.content == PNG
        assert response.headers["content-type"] == "image/png"
        assert "inline" in response.headers["content-disposition"]

        assert [i["id"] for i in client.get("/api/images", headers=alice).json()] == [image["id"]]

        assert client.delete(f"/api/images/{image['id']}", headers=alice).status_code == 204
        assert storage.objects == {}

    def test_upload_rejections(self, client):
        alice = register_and_login(client, "alice")
        assert client.post("/api/images", headers=alice).status_code == 400

        response = client.post(
            "/api/images", headers=alice, files={"file": ("notes.txt", b"hello", "text/plain")}
        )
        assert response.status_code == 400

        response = client.post(
            "/api/images?project_id=DEMO", headers=alice, files={"file": ("photo.png", PNG, "image/png")}
        )
        assert response.status_code == 400

    def test_only_uploader_may_delete(self, client):
        alice = register_and_login(client, "alice")
        bobby = register_and_login(client, "bobby")
        image = client.post(
            "/api/images", headers=alice, files={"file": ("photo.png", PNG, "image/png")}
        ).json()

        assert client.delete(f"/api/images/{image['id']}", headers=bobby).status_code == 403
        assert client.get(f"/api/images/{image['id']}", headers=bobby).status_code == 200
