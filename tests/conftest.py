import pytest

from finance_api import create_app
from finance_api.config import TestingConfig

PASSWORD = "correct-horse-battery"


@pytest.fixture
def app(tmp_path):
    app = create_app(TestingConfig, DB_PATH=str(tmp_path / "test.db"))
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


def register_and_login(client, username="alice", email="alice@example.com", password=PASSWORD):
    resp = client.post("/api/auth/register", json={"username": username, "email": email, "password": password})
    assert resp.status_code == 201, resp.get_json()
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    data = resp.get_json()
    return {"Authorization": f"Bearer {data['accessToken']}"}, data["userId"]


@pytest.fixture
def auth(client):
    headers, _ = register_and_login(client)
    return headers


@pytest.fixture
def user_id(client, auth):
    return client.get("/api/auth/me", headers=auth).get_json()["id"]


@pytest.fixture
def other_auth(app):
    # separate test client so the two users don't share a cookie jar
    headers, _ = register_and_login(app.test_client(), username="bob", email="bob@example.com")
    return headers
