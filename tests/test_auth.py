"""Registration, login, token refresh and admin bootstrap."""

from conftest import PASSWORD, register
from mentor.models.user import User
from mentor.services.auth import create_access_token, create_refresh_token, is_strong_password


def test_password_strength_rule() -> None:
    assert is_strong_password("Secret123")
    assert not is_strong_password("short1A")
    assert not is_strong_password("alllowercase1")
    assert not is_strong_password("NoDigitsHere")


def test_register_returns_tokens_and_default_role(client) -> None:
    tokens = register(client)
    assert tokens["token_type"] == "bearer"

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert me.status_code == 200
    data = me.json()
    assert data["email"] == "user@mentorapp.io"
    assert data["roles"] == ["user"]
    assert set(data) == {"id", "email", "created_at", "roles"}


def test_register_rejects_weak_password(client) -> None:
    resp = client.post(
        "/api/auth/register",
        json={"email": "weak@mentorapp.io", "password": "password", "name": "Weak"},
    )
    assert resp.status_code == 400
    assert "uppercase" in resp.json()["detail"]


def test_register_rejects_invalid_mobile(client) -> None:
    resp = client.post(
        "/api/auth/register",
        json={"email": "m@mentorapp.io", "password": PASSWORD, "name": "M", "mobile": "12345"},
    )
    assert resp.status_code == 400
    assert "10-digit" in resp.json()["detail"]


def test_register_duplicate_messages(client) -> None:
    register(client, email="first@mentorapp.io", mobile="9876543210")

    same_email = client.post(
        "/api/auth/register",
        json={"email": "first@mentorapp.io", "password": PASSWORD, "name": "Again"},
    )
    assert same_email.json()["detail"] == "Email is already registered"

    same_mobile = client.post(
        "/api/auth/register",
        json={"email": "second@mentorapp.io", "password": PASSWORD, "name": "Again", "mobile": "9876543210"},
    )
    assert same_mobile.json()["detail"] == "Mobile number is already registered"

    both = client.post(
        "/api/auth/register",
        json={"email": "first@mentorapp.io", "password": PASSWORD, "name": "Again", "mobile": "9876543210"},
    )
    assert both.status_code == 400
    assert both.json()["detail"] == "Email and mobile number are already registered"


def test_login_success_and_failure(client) -> None:
    register(client)

    ok = client.post("/api/auth/login", data={"username": "user@mentorapp.io", "password": PASSWORD})
    assert ok.status_code == 200
    assert ok.json()["access_token"]

    bad = client.post("/api/auth/login", data={"username": "user@mentorapp.io", "password": "Wrong1234"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Incorrect email or password"


def test_login_disabled_account(client, db) -> None:
    register(client)
    user = db.query(User).filter(User.email == "user@mentorapp.io").first()
    user.is_active = False
    db.commit()

    resp = client.post("/api/auth/login", data={"username": "user@mentorapp.io", "password": PASSWORD})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "User account is disabled"


def test_refresh_requires_refresh_token(client, db) -> None:
    register(client)
    user = db.query(User).first()

    resp = client.post("/api/auth/refresh", json={"refresh_token": create_access_token(user.id)})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token type"

    resp = client.post("/api/auth/refresh", json={"refresh_token": create_refresh_token(user.id)})
    assert resp.status_code == 200
    assert resp.json()["refresh_token"]


def test_refresh_token_cannot_authenticate_requests(client, db) -> None:
    register(client)
    user = db.query(User).first()
    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {create_refresh_token(user.id)}"})
    assert resp.status_code == 401


def test_me_requires_auth(client) -> None:
    assert client.get("/api/auth/me").status_code == 401
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_update_password(client, auth_headers) -> None:
    wrong = client.put(
        "/api/auth/password",
        json={"current_password": "Nope12345", "new_password": "Another123"},
        headers=auth_headers,
    )
    assert wrong.status_code == 400

    weak = client.put(
        "/api/auth/password",
        json={"current_password": PASSWORD, "new_password": "weak"},
        headers=auth_headers,
    )
    assert weak.status_code == 400

    ok = client.put(
        "/api/auth/password",
        json={"current_password": PASSWORD, "new_password": "Another123"},
        headers=auth_headers,
    )
    assert ok.status_code == 200

    login = client.post("/api/auth/login", data={"username": "user@mentorapp.io", "password": "Another123"})
    assert login.status_code == 200


def test_admin_setup_only_once(client) -> None:
    status_before = client.get("/api/auth/admin-setup").json()
    assert status_before == {"admin_exists": False, "setup_enabled": True}

    payload = {
        "name": "Admin",
        "email": "admin@mentorapp.io",
        "password": PASSWORD,
        "confirm_password": PASSWORD,
    }
    created = client.post("/api/auth/admin-setup", json=payload)
    assert created.status_code == 200
    assert created.json()["roles"] == ["admin"]

    again = client.post("/api/auth/admin-setup", json={**payload, "email": "other@mentorapp.io"})
    assert again.status_code == 403
    assert client.get("/api/auth/admin-setup").json()["admin_exists"] is True


def test_admin_setup_validates_passwords(client) -> None:
    mismatch = client.post(
        "/api/auth/admin-setup",
        json={"name": "A", "email": "a@mentorapp.io", "password": PASSWORD, "confirm_password": "Other123"},
    )
    assert mismatch.status_code == 400
    assert mismatch.json()["detail"] == "Passwords do not match"

    short = client.post(
        "/api/auth/admin-setup",
        json={"name": "A", "email": "a@mentorapp.io", "password": "Ab1", "confirm_password": "Ab1"},
    )
    assert short.status_code == 400


def test_admin_only_routes_reject_regular_users(client, auth_headers) -> None:
    assert client.get("/api/analytics/summary", headers=auth_headers).status_code == 403
    assert client.get("/api/admin/dashboard", headers=auth_headers).status_code == 403
