"""
Accounts, categories, notifications and agent profiles over HTTP.
Run: pytest tests/test_accounts_api.py -v
"""


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


class TestAuth:
    def test_register_and_login(self, client, register):
        _, user = register("alice")
        assert user["role"] == "user"
        assert "password_hash" not in user

        r = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})
        assert r.status_code == 200
        token = r.json()["access_token"]

        me = client.get("/api/auth/me", headers=auth_header(token))
        assert me.status_code == 200
        assert me.json()["username"] == "alice"

    def test_wrong_password(self, client, register):
        register("alice")
        r = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "nope"})
        assert r.status_code == 401

    def test_duplicate_email(self, client, register):
        register("alice")
        r = client.post(
            "/api/auth/register",
            json={"username": "other", "email": "ALICE@example.com", "password": "secret123"},
        )
        assert r.status_code == 409

    def test_admin_registration_requires_key(self, client):
        body = {"username": "root", "email": "root@example.com", "password": "secret123", "role": "admin"}
        assert client.post("/api/auth/register", json=body).status_code == 403
        assert client.post("/api/auth/register", json={**body, "admin_key": "guess"}).status_code == 403
        r = client.post("/api/auth/register", json={**body, "admin_key": "ADMIN2024"})
        assert r.status_code == 201
        assert r.json()["user"]["role"] == "admin"

    def test_missing_and_invalid_token(self, client):
        r = client.get("/api/auth/me")
        assert r.status_code == 401
        assert r.json()["detail"] == "Access token required"
        assert client.get("/api/auth/me", headers=auth_header("not-a-jwt")).status_code == 401


class TestAdminEndpoints:
    def test_list_users_admin_only(self, client, register):
        alice, _ = register("alice")
        admin, _ = register("root", role="admin", admin_key="ADMIN2024")

        assert client.get("/api/users/", headers=alice).status_code == 403
        users = client.get("/api/users/", headers=admin).json()
        assert {u["username"] for u in users} == {"alice", "root"}
        assert all("password_hash" not in u for u in users)

    def test_default_categories_seeded(self, client, register):
        alice, _ = register("alice")
        categories = client.get("/api/categories/", headers=alice).json()
        assert [c["name"] for c in categories] == [
            "Hardware Support",
            "Software Support",
            "Network Support",
            "Account Support",
            "General Support",
        ]
        assert "printer" in categories[0]["specializations"]

    def test_create_category_admin_only(self, client, register):
        alice, _ = register("alice")
        admin, _ = register("root", role="admin", admin_key="ADMIN2024")

        assert client.post("/api/categories/", json={"name": "Billing"}, headers=alice).status_code == 403
        r = client.post("/api/categories/", json={"name": "Billing"}, headers=admin)
        assert r.status_code == 201
        assert r.json()["specializations"] == []


class TestNotifications:
    def test_mark_read_only_own(self, client, register):
        alice, _ = register("alice")
        bob, _ = register("bob")
        register("pat", role="agent", specializations=["printer"])
        client.post(
            "/api/tickets/",
            data={"subject": "Printer", "description": "printer jammed", "category_id": "1"},
            headers=alice,
        )
        note = client.get("/api/notifications/", headers=alice).json()[0]
        assert note["read"] is False

        assert client.put(f"/api/notifications/{note['id']}/read", headers=bob).status_code == 404
        r = client.put(f"/api/notifications/{note['id']}/read", headers=alice)
        assert r.status_code == 200
        assert r.json()["read"] is True
        assert client.get("/api/notifications/", headers=alice).json()[0]["read"] is True


class TestAgentProfile:
    def test_profile_fields(self, client, register):
        alice, user = register("alice")
        _, agent = register("pat", role="agent", specializations=["printer"])

        profile = client.get(f"/api/agents/{agent['id']}/profile", headers=alice).json()
        assert profile["rating"] == 0.0
        assert profile["total_ratings"] == 0
        assert profile["specializations"] == ["printer"]

        assert client.get(f"/api/agents/{user['id']}/profile", headers=alice).status_code == 404

    def test_agent_updates_own_specializations(self, client, register):
        alice, _ = register("alice")
        pat, agent = register("pat", role="agent", specializations=["printer"])
        nina, _ = register("nina", role="agent")

        body = {"specializations": ["wifi", " router ", ""], "bio": "network person"}
        assert client.put(f"/api/agents/{agent['id']}/profile", json=body, headers=nina).status_code == 403
        assert client.put(f"/api/agents/{agent['id']}/profile", json=body, headers=alice).status_code == 403

        r = client.put(f"/api/agents/{agent['id']}/profile", json=body, headers=pat)
        assert r.status_code == 200
        assert r.json()["specializations"] == ["wifi", "router"]
        assert r.json()["bio"] == "network person"

        # new tags drive the next match
        created = client.post(
            "/api/tickets/",
            data={"subject": "Wifi", "description": "the wifi router is down", "category_id": "5"},
            headers=alice,
        ).json()
        assert created["ticket"]["assigned_to"] == agent["id"]

    def test_admin_updates_any_agent(self, client, register):
        admin, _ = register("root", role="admin", admin_key="ADMIN2024")
        _, agent = register("pat", role="agent")
        r = client.put(f"/api/agents/{agent['id']}/profile", json={"specializations": ["laptop"]}, headers=admin)
        assert r.status_code == 200
        assert r.json()["specializations"] == ["laptop"]
