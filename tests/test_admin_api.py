"""Tests for announcements and the admin endpoints."""


class TestAnnouncements:
    def test_admin_creates_everyone_reads(self, client, admin, newcomer):
        resp = client.post(
            "/api/announcements",
            json={"title": "Tax clinic", "message": "Free help on Saturday", "category": "finance"},
            headers=admin[0],
        )
        assert resp.status_code == 201
        items = client.get("/api/announcements", headers=newcomer[0]).json()
        assert len(items) == 1
        assert items[0]["category"] == "finance"
        assert items[0]["created_by_name"] == "Ada Admin"

    def test_unknown_category_is_general(self, client, admin):
        client.post("/api/announcements", json={"title": "t", "message": "m", "category": "misc"}, headers=admin[0])
        assert client.get("/api/announcements", headers=admin[0]).json()[0]["category"] == "general"

    def test_newcomer_cannot_write(self, client, admin, newcomer):
        resp = client.post("/api/announcements", json={"title": "t", "message": "m"}, headers=newcomer[0])
        assert resp.status_code == 403
        ann_id = client.post(
            "/api/announcements", json={"title": "t", "message": "m"}, headers=admin[0]
        ).json()["id"]
        assert client.put(f"/api/announcements/{ann_id}", json={"title": "x"}, headers=newcomer[0]).status_code == 403
        assert client.delete(f"/api/announcements/{ann_id}", headers=newcomer[0]).status_code == 403

    def test_missing_fields(self, client, admin):
        assert client.post("/api/announcements", json={"title": "t"}, headers=admin[0]).status_code == 400

    def test_update_and_delete(self, client, admin):
        headers, _ = admin
        ann_id = client.post("/api/announcements", json={"title": "t", "message": "m"}, headers=headers).json()["id"]
        assert client.put(f"/api/announcements/{ann_id}", json={"message": "new"}, headers=headers).status_code == 200
        item = client.get("/api/announcements", headers=headers).json()[0]
        assert item["title"] == "t"
        assert item["message"] == "new"
        assert item["updated_at"]
        assert client.delete(f"/api/announcements/{ann_id}", headers=headers).status_code == 200
        assert client.delete(f"/api/announcements/{ann_id}", headers=headers).status_code == 404
        assert client.put(f"/api/announcements/{ann_id}", json={"title": "x"}, headers=headers).status_code == 404


class TestAdmin:
    def test_stats(self, client, admin, newcomer):
        client.post("/api/tasks", json={"title": "A"}, headers=newcomer[0])
        stats = client.get("/api/admin/stats", headers=admin[0]).json()
        assert stats == {
            "totalUsers": 2,
            "totalTasks": 1,
            "completedTasks": 0,
            "totalAnnouncements": 0,
            "totalDeadlines": 0,
        }

    def test_newcomer_forbidden(self, client, newcomer):
        assert client.get("/api/admin/stats", headers=newcomer[0]).status_code == 403
        assert client.get("/api/admin/users", headers=newcomer[0]).status_code == 403

    def test_users_listing(self, client, admin, newcomer):
        users = client.get("/api/admin/users", headers=admin[0]).json()["users"]
        assert {u["email"] for u in users} == {"admin@example.com", "newcomer@example.com"}
        assert all("password_hash" not in u for u in users)

    def test_change_role(self, client, admin, newcomer):
        _, user = newcomer
        resp = client.put(f"/api/admin/users/{user['id']}/role", json={"role": "admin"}, headers=admin[0])
        assert resp.status_code == 200
        # role is read per request, so the same token now passes admin checks
        assert client.get("/api/admin/stats", headers=newcomer[0]).status_code == 200

    def test_change_role_invalid(self, client, admin, newcomer):
        _, user = newcomer
        resp = client.put(f"/api/admin/users/{user['id']}/role", json={"role": "owner"}, headers=admin[0])
        assert resp.status_code == 400

    def test_change_role_unknown_user(self, client, admin):
        resp = client.put("/api/admin/users/9999/role", json={"role": "admin"}, headers=admin[0])
        assert resp.status_code == 404

    def test_reset_password(self, client, admin, newcomer):
        _, user = newcomer
        resp = client.put(
            f"/api/admin/users/{user['id']}/reset-password", json={"newPassword": "fresh789"}, headers=admin[0]
        )
        assert resp.status_code == 200
        login = client.post("/api/auth/login", json={"email": "newcomer@example.com", "password": "fresh789"})
        assert login.status_code == 200

    def test_reset_password_longer_than_bcrypt_limit(self, client, admin, newcomer):
        _, user = newcomer
        password = "x" * 100
        resp = client.put(
            f"/api/admin/users/{user['id']}/reset-password", json={"newPassword": password}, headers=admin[0]
        )
        assert resp.status_code == 200
        login = client.post("/api/auth/login", json={"email": "newcomer@example.com", "password": password})
        assert login.status_code == 200

    def test_reset_password_too_short(self, client, admin, newcomer):
        _, user = newcomer
        resp = client.put(
            f"/api/admin/users/{user['id']}/reset-password", json={"newPassword": "abc"}, headers=admin[0]
        )
        assert resp.status_code == 400

    def test_starter_tasks_add_and_remove(self, client, admin, newcomer):
        headers, user = newcomer
        client.post("/api/tasks", json={"title": "My own"}, headers=headers)

        added = client.post(f"/api/admin/users/{user['id']}/add-starter-tasks", headers=admin[0]).json()
        assert added["inserted"] == 15
        page = client.get("/api/tasks", params={"limit": 50}, headers=headers).json()
        assert page["total"] == 16
        assert sum(t["is_starter"] for t in page["tasks"]) == 15

        removed = client.delete(f"/api/admin/users/{user['id']}/remove-starter-tasks", headers=admin[0]).json()
        assert removed["deleted"] == 15
        page = client.get("/api/tasks", headers=headers).json()
        assert [t["title"] for t in page["tasks"]] == ["My own"]

    def test_starter_tasks_unknown_user(self, client, admin):
        assert client.post("/api/admin/users/9999/add-starter-tasks", headers=admin[0]).status_code == 404
