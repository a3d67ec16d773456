# Point the app at a throwaway database and uploads folder before mentor.config is imported
import os
import tempfile

_tmp_dir = tempfile.mkdtemp(prefix="mentor-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp_dir, 'test.db')}"
os.environ["UPLOADS_DIR"] = os.path.join(_tmp_dir, "uploads")
os.environ["GEMINI_API_KEY"] = ""
os.environ["ADMIN_SETUP_ENABLED"] = "true"

import pytest
from fastapi.testclient import TestClient

from backend import app
from mentor.database import Base, SessionLocal, engine

PASSWORD = "Secret123"


@pytest.fixture(autouse=True)
def fresh_schema():
    """Every test starts from empty tables."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def register(client: TestClient, email: str = "user@mentorapp.io", name: str = "Test User", mobile=None) -> dict:
    payload = {"email": email, "password": PASSWORD, "name": name}
    if mobile:
        payload["mobile"] = mobile
    resp = client.post("/api/auth/register", json=payload)
    assert resp.status_code == 200, resp.text
    return resp.json()


@pytest.fixture
def auth_headers(client: TestClient) -> dict:
    tokens = register(client)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest.fixture
def admin_headers(client: TestClient) -> dict:
    resp = client.post(
        "/api/auth/admin-setup",
        json={
            "name": "Admin",
            "email": "admin@mentorapp.io",
            "password": PASSWORD,
            "confirm_password": PASSWORD,
        },
    )
    assert resp.status_code == 200, resp.text
    login = client.post("/api/auth/login", data={"username": "admin@mentorapp.io", "password": PASSWORD})
    assert login.status_code == 200, login.text
    return {"Authorization": f"Bearer {login.json()['access_token']}"}
