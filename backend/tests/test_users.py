# MedStore API Tests - User administration
#
# Tests for:
# - Admin-only user CRUD
# - Unique lowercase emails
# - Store assignment rules
# - Passwords never returned
# - Admins cannot lock themselves out
# - Startup admin bootstrap

from medstore.models import User
from medstore.services import user_service


class TestUserAdmin:

    def test_list_users_hides_passwords(self, client, admin_headers, clerk_a):
        response = client.get("/api/users", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert {u["email"] for u in data} == {"admin@medstore.com", "clerk.a@medstore.com"}
        assert all("password" not in u for u in data)

    def test_create_store_user(self, client, db_session, admin_headers, store_a):
        response = client.post("/api/users", json={
            "email": "New.Clerk@MedStore.com",
            "password": "s3cret",
            "role": "user",
            "store_id": store_a.id,
        }, headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "new.clerk@medstore.com"
        assert data["store"]["name"] == "Central Pharmacy"
        assert "password" not in data

        login = client.post("/api/auth/login", json={"email": "new.clerk@medstore.com", "password": "s3cret"})
        assert login.status_code == 200

    def test_create_duplicate_email_any_case(self, client, admin_headers, clerk_a, store_a):
        response = client.post("/api/users", json={
            "email": "CLERK.A@medstore.com",
            "password": "x",
            "role": "user",
            "store_id": store_a.id,
        }, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "User already exists"

    def test_store_user_needs_store(self, client, admin_headers):
        response = client.post("/api/users", json={
            "email": "floating@medstore.com",
            "password": "x",
            "role": "user",
        }, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Store is required for store users"

    def test_admin_without_store_allowed(self, client, admin_headers):
        response = client.post("/api/users", json={
            "email": "second.admin@medstore.com",
            "password": "x",
            "role": "admin",
        }, headers=admin_headers)

        assert response.status_code == 201
        assert response.json()["store_id"] is None

    def test_unknown_store(self, client, admin_headers):
        response = client.post("/api/users", json={
            "email": "lost@medstore.com",
            "password": "x",
            "role": "user",
            "store_id": 999,
        }, headers=admin_headers)

        assert response.status_code == 404

    def test_invalid_role(self, client, admin_headers, store_a):
        response = client.post("/api/users", json={
            "email": "odd@medstore.com",
            "password": "x",
            "role": "superuser",
            "store_id": store_a.id,
        }, headers=admin_headers)

        assert response.status_code == 400
        assert "role" in response.json()["detail"]

    def test_invalid_email(self, client, admin_headers, store_a):
        response = client.post("/api/users", json={
            "email": "not-an-email",
            "password": "x",
            "store_id": store_a.id,
        }, headers=admin_headers)

        assert response.status_code == 400

    def test_update_user(self, client, admin_headers, clerk_a, store_b):
        response = client.put(f"/api/users/{clerk_a.id}", json={
            "store_id": store_b.id,
            "password": "rotated",
        }, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["store_id"] == store_b.id
        login = client.post("/api/auth/login", json={"email": "clerk.a@medstore.com", "password": "rotated"})
        assert login.status_code == 200

    def test_update_email_to_taken(self, client, admin_headers, clerk_a, clerk_b):
        response = client.put(f"/api/users/{clerk_a.id}", json={"email": "clerk.b@medstore.com"},
                              headers=admin_headers)

        assert response.status_code == 400

    def test_update_missing_user(self, client, admin_headers):
        assert client.put("/api/users/999", json={"role": "user"}, headers=admin_headers).status_code == 404

    def test_role_change_applies_to_existing_token(self, client, admin_headers, clerk_a, clerk_a_headers):
        assert client.get("/api/users", headers=clerk_a_headers).status_code == 403

        client.put(f"/api/users/{clerk_a.id}", json={"role": "admin"}, headers=admin_headers)

        assert client.get("/api/users", headers=clerk_a_headers).status_code == 200

    def test_delete_user(self, client, db_session, admin_headers, clerk_a):
        response = client.delete(f"/api/users/{clerk_a.id}", headers=admin_headers)

        assert response.status_code == 200
        assert db_session.query(User).filter(User.email == "clerk.a@medstore.com").count() == 0

    def test_cannot_delete_self(self, client, admin_headers, admin_user):
        response = client.delete(f"/api/users/{admin_user.id}", headers=admin_headers)

        assert response.status_code == 400

    def test_cannot_demote_self(self, client, admin_headers, admin_user, store_a):
        response = client.put(f"/api/users/{admin_user.id}", json={"role": "user", "store_id": store_a.id},
                              headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "You cannot change your own role"
        assert client.get("/api/users", headers=admin_headers).status_code == 200

    def test_can_update_own_email(self, client, admin_headers, admin_user):
        response = client.put(f"/api/users/{admin_user.id}", json={"email": "chief@medstore.com", "role": "admin"},
                              headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["email"] == "chief@medstore.com"

    def test_promote_and_clear_store(self, client, admin_headers, clerk_b, store_b):
        response = client.put(f"/api/users/{clerk_b.id}", json={"role": "admin", "store_id": None},
                              headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["role"] == "admin"
        assert response.json()["store_id"] is None
        assert client.delete(f"/api/stores/{store_b.id}", headers=admin_headers).status_code == 200

    def test_clearing_store_of_store_user_rejected(self, client, admin_headers, clerk_a):
        response = client.put(f"/api/users/{clerk_a.id}", json={"store_id": None}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Store is required for store users"

    def test_omitted_store_is_kept(self, client, admin_headers, clerk_a, store_a):
        response = client.put(f"/api/users/{clerk_a.id}", json={"password": "rotated"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["store_id"] == store_a.id

    def test_delete_missing_user(self, client, admin_headers):
        assert client.delete("/api/users/999", headers=admin_headers).status_code == 404


class TestUserAdminAccess:

    def test_store_user_forbidden(self, client, clerk_a_headers, clerk_a):
        assert client.get("/api/users", headers=clerk_a_headers).status_code == 403
        assert client.get(f"/api/users/{clerk_a.id}", headers=clerk_a_headers).status_code == 403
        assert client.delete(f"/api/users/{clerk_a.id}", headers=clerk_a_headers).status_code == 403

    def test_anonymous_unauthorized(self, client):
        assert client.get("/api/users").status_code == 401


class TestAdminBootstrap:

    def test_creates_admin_when_none_exists(self, db_session):
        admin, created = user_service.ensure_admin_account(db_session, " Boot@MedStore.com ", "first-pass")

        assert created is True
        assert admin.email == "boot@medstore.com"
        assert admin.role == "admin"
        assert admin.store_id is None
        assert user_service.authenticate(db_session, "boot@medstore.com", "first-pass") is not None

    def test_promotes_existing_account(self, db_session, clerk_a):
        admin, created = user_service.ensure_admin_account(db_session, "clerk.a@medstore.com", "ignored")

        assert created is False
        assert admin.id == clerk_a.id
        assert admin.role == "admin"
        # The existing password is left alone
        assert admin.password == "clerk-a-pass"
        assert db_session.query(User).count() == 1

    def test_noop_when_admin_exists(self, db_session, admin_user):
        admin, created = user_service.ensure_admin_account(db_session, "other@medstore.com", "x")

        assert admin is None
        assert created is False
        assert db_session.query(User).count() == 1
        assert user_service.get_user_by_email(db_session, "other@medstore.com") is None
