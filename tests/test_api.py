"""
Tests for the dashboard API.

Tests validate:
- Every GET endpoint against the sample workspace
- camelCase response keys
- Error bodies: {"error": ..., "code": ...} with no internal detail
- Project file containment (404 for disallowed or missing files)
- Read-only surface (405 for other methods)
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from constellation.api.app import app
from constellation.api.deps import get_aggregator


@pytest.fixture
def client(aggregator):
    """TestClient serving the sample workspace."""
    app.dependency_overrides[get_aggregator] = lambda: aggregator
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestRoot:
    """Test the UI shell."""

    def test_index(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]


class TestProjectEndpoints:
    """Tests for /api/projects and /api/project/{slug}/..."""

    def test_list_projects(self, client):
        response = client.get("/api/projects")
        assert response.status_code == 200
        projects = response.json()["projects"]
        assert [p["slug"] for p in projects] == ["launch-site", "shop", "legacy", "ghost"]
        assert projects[0]["assignedTo"] == "engineering"
        assert projects[0]["progress"] == 67

    def test_state(self, client):
        response = client.get("/api/project/launch-site/state")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Launch Site"
        assert data["state"]["phase"] == "build"
        assert data["state"]["lastUpdated"] == "2026-01-22T09:00:00Z"
        assert [t["status"] for t in data["state"]["tasks"]] == [
            "done", "in_progress", "pending"
        ]

    @pytest.mark.parametrize(
        "slug,code",
        [("ghost", "DIR_NOT_FOUND"), ("legacy", "NO_STATE"), ("nope", "NOT_FOUND")],
    )
    def test_state_errors(self, client, slug, code):
        response = client.get(f"/api/project/{slug}/state")
        assert response.status_code == 404
        assert response.json()["code"] == code
        assert set(response.json()) == {"error", "code"}

    def test_malformed_state(self, client, tmp_path):
        (tmp_path / "projects" / "legacy" / "state.json").write_text("{broken")
        response = client.get("/api/project/legacy/state")
        assert response.status_code == 404
        assert response.json() == {
            "error": "Project state.json is malformed",
            "code": "MALFORMED",
        }

    def test_state_with_odd_records(self, client, tmp_path):
        shop_state = tmp_path / "projects" / "shop" / "state.json"
        shop_state.write_text(
            '{"tasks": [{"id": "T7", "status": "failed"}, {"id": "T9", "status": "review"},'
            ' {"title": "no id"}], "activity": null}'
        )
        response = client.get("/api/project/shop/state")
        assert response.status_code == 200
        state = response.json()["state"]
        assert [t["id"] for t in state["tasks"]] == ["T7", "T9"]
        assert state["activity"] == []

    def test_progress(self, client):
        data = client.get("/api/project/launch-site/progress").json()
        assert data["exists"] is True
        assert "Copy approved" in data["content"]

        missing = client.get("/api/project/legacy/progress")
        assert missing.status_code == 200
        assert missing.json() == {"slug": "legacy", "exists": False, "content": ""}

    def test_progress_missing_directory(self, client):
        response = client.get("/api/project/ghost/progress")
        assert response.status_code == 404
        assert response.json()["code"] == "DIR_NOT_FOUND"

    def test_tasks(self, client):
        data = client.get("/api/project/launch-site/tasks").json()
        assert (data["done"], data["total"], data["progress"]) == (2, 3, 67)
        assert [i["title"] for i in data["items"]] == ["Copy", "Design", "Deploy"]

        assert client.get("/api/project/shop/tasks").json()["exists"] is False

    def test_file(self, client):
        response = client.get("/api/project/launch-site/files/docs/notes.md")
        assert response.status_code == 200
        assert response.json() == {
            "slug": "launch-site",
            "path": "docs/notes.md",
            "content": "# Notes\n",
            "size": 8,
        }

    @pytest.mark.parametrize("path", ["secret.env", "missing.md", "docs"])
    def test_file_rejections_look_missing(self, client, path):
        response = client.get(f"/api/project/launch-site/files/{path}")
        assert response.status_code == 404
        assert response.json() == {"error": "File not found", "code": "NOT_FOUND"}

    def test_file_traversal_rejected(self, client):
        response = client.get("/api/project/launch-site/files/..%2Fshop%2Fstate.json")
        assert response.status_code == 404
        assert "T7" not in response.text


class TestOverviewEndpoints:
    """Tests for overview, ideas and agent views."""

    def test_overview(self, client):
        data = client.get("/api/overview").json()
        assert data["counts"] == {"total": 4, "active": 3, "paused": 1, "complete": 0}
        assert data["tasks"]["inProgress"] == 1
        assert data["attention"][0] == {
            "project": "Shop",
            "slug": "shop",
            "reason": "1 failed task: T7",
            "severity": "high",
        }

    def test_ideas(self, client):
        data = client.get("/api/ideas").json()
        assert data["counts"] == {"total": 6, "open": 3, "blocked": 1, "done": 2}
        assert data["ideas"][5]["doneDate"] == "2026-01-02"

    def test_agents(self, client):
        agents = client.get("/api/agents").json()
        assert isinstance(agents, list)
        engineering = agents[1]
        assert engineering["displayName"] == "Engineering"
        assert engineering["lastActivity"]["text"] == "Shipped pricing page"
        assert engineering["isRunning"] is False

    def test_changelog_window(self, client):
        assert client.get("/api/changelog").json()["since"] == "24h"
        assert client.get("/api/changelog", params={"since": "7d"}).json()["since"] == "7d"
        assert client.get("/api/changelog", params={"since": "bogus"}).json()["since"] == "24h"

    def test_blocked(self, client):
        blocked = client.get("/api/blocked").json()
        assert [b["type"] for b in blocked] == ["inbox", "feed"]


class TestDepartmentEndpoints:
    """Tests for /api/departments."""

    def test_list(self, client):
        departments = client.get("/api/departments").json()["departments"]
        assert departments[0]["currentFocus"] == "Checkout rewrite"
        assert departments[0]["inboxPending"] == 2

    def test_feed_route_is_not_a_department(self, client):
        response = client.get("/api/departments/feed")
        assert response.status_code == 200
        assert response.json()["entries"][0]["department"] == "content"

    def test_detail(self, client):
        data = client.get("/api/departments/content").json()
        assert data["displayName"] == "Content"
        assert len(data["tweets"]) == 3
        assert data["findings"] is None

    def test_unknown(self, client):
        response = client.get("/api/departments/legal")
        assert response.status_code == 404
        assert response.json() == {"error": "Department not found", "code": "NOT_FOUND"}


class TestSystemEndpoints:
    """Tests for /api/health and /api/metrics."""

    def test_health(self, client):
        data = client.get("/api/health").json()
        assert data == {"services": [], "summary": {"total": 0, "online": 0, "stopped": 0}}

    def test_metrics(self, client):
        data = client.get("/api/metrics").json()
        assert data["feedEntries"]["perAgent"]["engineering"] == 4
        assert data["git"] == {"commitsToday": 0, "commitsWeek": 0}
        assert "lastUpdated" in data


class TestErrors:
    """Test error handling."""

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_write_methods_not_allowed(self, client):
        response = client.post("/api/overview")
        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed", "code": "METHOD_NOT_ALLOWED"}

    def test_internal_errors_hide_details(self):
        failing = MagicMock()
        failing.overview.side_effect = RuntimeError("boom at /srv/secret/path")
        app.dependency_overrides[get_aggregator] = lambda: failing
        try:
            response = TestClient(app, raise_server_exceptions=False).get("/api/overview")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {
            "error": "An internal server error occurred",
            "code": "INTERNAL_ERROR",
        }
        assert "secret" not in response.text
