"""End-to-end tests for the authentication and profile endpoints."""
from conftest import DEFAULT_PASSWORD, bearer, csrf, make_user
from core.enums import Role

REGISTRATION = {
    "name": "Jane Doe",
    "email": "Jane@Example.com",
    "password": DEFAULT_PASSWORD,
    "confirmPassword": DEFAULT_PASSWORD,
}


def test_register_creates_customer_and_returns_token(client):
    res = client.post("/auth/register", json=REGISTRATION)
    assert res.status_code == 201
    body = res.json()
    assert body["accessToken"]
    assert body["user"]["email"] == "jane@example.com"
    assert body["user"]["role"] == "customer"
    assert "password" not in body["user"] and "passwordHash" not in body["user"]
    assert "refreshToken" in res.cookies


def test_register_with_weak_password_lists_unmet_rules(client):
    res = client.post("/auth/register", json={**REGISTRATION, "password": "abc", "confirmPassword": "abc"})
    assert res.status_code == 400
    errors = res.json()["details"]["errors"]
    assert [e["rule"] for e in errors] == ["length", "uppercase", "digit", "special"]


def test_register_with_mismatched_confirmation(client):
    res = client.post("/auth/register", json={**REGISTRATION, "confirmPassword": "Other!Pass1"})
    assert res.status_code == 400
    assert res.json()["details"]["errors"][0]["field"] == "confirmPassword"


def test_register_duplicate_email_conflicts(client):
    assert client.post("/auth/register", json=REGISTRATION).status_code == 201
    res = client.post("/auth/register", json={**REGISTRATION, "email": "jane@example.com"})
    assert res.status_code == 409


def test_register_rejects_malformed_email(client):
    res = client.post("/auth/register", json={**REGISTRATION, "email": "not-an-email"})
    assert res.status_code == 400
    assert res.json()["details"]["errors"][0]["field"] == "email"


def test_login_failures_are_indistinguishable(client, db):
    make_user(db, email="known@example.com")
    wrong_password = client.post("/auth/login", json={"email": "known@example.com", "password": "Wrong!Pass1"})
    unknown_email = client.post("/auth/login", json={"email": "nobody@example.com", "password": "Wrong!Pass1"})

    assert wrong_password.status_code == unknown_email.status_code == 400
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["message"] == "Invalid credentials"


def test_login_refresh_and_logout(client, db):
    make_user(db, email="known@example.com", role=Role.ADMIN)
    login = client.post("/auth/login", json={"email": "known@example.com", "password": DEFAULT_PASSWORD})
    assert login.status_code == 200
    assert login.json()["user"]["role"] == "admin"

    refreshed = client.post("/auth/refresh")
    assert refreshed.status_code == 200
    token = refreshed.json()["accessToken"]
    profile = client.get("/users/profile", headers={"Authorization": f"Bearer {token}"})
    assert profile.json()["email"] == "known@example.com"

    assert client.post("/auth/logout").status_code == 200
    client.cookies.clear()
    assert client.post("/auth/refresh").status_code == 401


def test_protected_endpoint_requires_valid_token(client):
    assert client.get("/users/profile").status_code == 401
    res = client.get("/users/profile", headers={"Authorization": "Bearer not-a-token"})
    assert res.status_code == 401


def test_update_profile_sanitizes_name(client, db):
    user = make_user(db)
    res = client.put(
        "/users/profile",
        json={"name": "  New <Name> "},
        headers={**bearer(user), **csrf(client)},
    )
    assert res.status_code == 200
    assert res.json()["name"] == "New Name"


def test_user_listing_is_admin_only(client, db):
    customer = make_user(db)
    admin = make_user(db, email="admin@example.com", role=Role.SUPER_ADMIN)

    assert client.get("/users", headers=bearer(customer)).status_code == 403
    res = client.get("/users", headers=bearer(admin))
    assert res.status_code == 200
    assert {u["email"] for u in res.json()} == {"customer@example.com", "admin@example.com"}
