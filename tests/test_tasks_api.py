"""Tests for the task endpoints (search, status filter, pagination, summary)."""


def _make(client, headers, title, **extra):
    resp = client.post("/api/tasks", json={"title": title, **extra}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


class TestCreate:
    def test_create_and_list(self, client, newcomer):
        headers, _ = newcomer
        task_id = _make(client, headers, "  Open bank account  ", description="TD or RBC", due_date="2024-02-01")
        body = client.get("/api/tasks", headers=headers).json()
        assert body["total"] == 1
        task = body["tasks"][0]
        assert task["id"] == task_id
        assert task["title"] == "Open bank account"
        assert task["status"] == "pending"
        assert task["due_date"] == "2024-02-01"
        assert task["is_starter"] is False

    def test_title_required(self, client, newcomer):
        resp = client.post("/api/tasks", json={"title": "   "}, headers=newcomer[0])
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Title is required"


class TestListing:
    def test_search_matches_title_or_description(self, client, newcomer):
        headers, _ = newcomer
        _make(client, headers, "Get SIN")
        _make(client, headers, "Phone", description="compare SIN-free plans")
        _make(client, headers, "Housing")
        body = client.get("/api/tasks", params={"q": "SIN"}, headers=headers).json()
        assert body["total"] == 2

    def test_status_filter(self, client, newcomer):
        headers, _ = newcomer
        done = _make(client, headers, "Done one")
        _make(client, headers, "Open one")
        client.put(f"/api/tasks/{done}", json={"status": "completed"}, headers=headers)

        completed = client.get("/api/tasks", params={"status": "completed"}, headers=headers).json()
        pending = client.get("/api/tasks", params={"status": "pending"}, headers=headers).json()
        everything = client.get("/api/tasks", params={"status": "all"}, headers=headers).json()
        assert [t["title"] for t in completed["tasks"]] == ["Done one"]
        assert [t["title"] for t in pending["tasks"]] == ["Open one"]
        assert everything["total"] == 2

    def test_pagination(self, client, newcomer):
        headers, _ = newcomer
        for i in range(12):
            _make(client, headers, f"Task {i}")
        first = client.get("/api/tasks", params={"page": 1, "limit": 5}, headers=headers).json()
        last = client.get("/api/tasks", params={"page": 3, "limit": 5}, headers=headers).json()
        assert first["totalPages"] == 3
        assert len(first["tasks"]) == 5
        assert len(last["tasks"]) == 2
        # newest first
        assert first["tasks"][0]["title"] == "Task 11"

    def test_limit_is_clamped(self, client, newcomer):
        headers, _ = newcomer
        big = client.get("/api/tasks", params={"limit": 500}, headers=headers).json()
        small = client.get("/api/tasks", params={"limit": 0}, headers=headers).json()
        junk = client.get("/api/tasks", params={"limit": "lots", "page": "-4"}, headers=headers).json()
        assert big["limit"] == 50
        assert small["limit"] == 10
        assert junk["limit"] == 10
        assert junk["page"] == 1
        assert big["totalPages"] == 1

    def test_owner_isolation(self, client, newcomer, other_newcomer):
        _make(client, newcomer[0], "Mine")
        assert client.get("/api/tasks", headers=other_newcomer[0]).json()["total"] == 0


class TestSummary:
    def test_empty(self, client, newcomer):
        assert client.get("/api/tasks/summary", headers=newcomer[0]).json() == {
            "total": 0, "completed": 0, "pending": 0, "percent": 0,
        }

    def test_percent(self, client, newcomer):
        headers, _ = newcomer
        ids = [_make(client, headers, f"T{i}") for i in range(3)]
        client.put(f"/api/tasks/{ids[0]}", json={"status": "completed"}, headers=headers)
        assert client.get("/api/tasks/summary", headers=headers).json() == {
            "total": 3, "completed": 1, "pending": 2, "percent": 33,
        }


class TestUpdateDelete:
    def test_partial_update_keeps_other_fields(self, client, newcomer):
        headers, _ = newcomer
        task_id = _make(client, headers, "Resume", description="Canadian format")
        client.put(f"/api/tasks/{task_id}", json={"due_date": "2024-05-01"}, headers=headers)
        task = client.get("/api/tasks", headers=headers).json()["tasks"][0]
        assert task["title"] == "Resume"
        assert task["description"] == "Canadian format"
        assert task["due_date"] == "2024-05-01"

    def test_update_foreign_task_is_not_found(self, client, newcomer, other_newcomer):
        task_id = _make(client, newcomer[0], "Mine")
        resp = client.put(f"/api/tasks/{task_id}", json={"title": "Stolen"}, headers=other_newcomer[0])
        assert resp.status_code == 404

    def test_delete(self, client, newcomer):
        headers, _ = newcomer
        task_id = _make(client, headers, "Temp")
        assert client.delete(f"/api/tasks/{task_id}", headers=headers).status_code == 200
        assert client.delete(f"/api/tasks/{task_id}", headers=headers).status_code == 404
