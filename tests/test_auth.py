import uuid

import pytest

from storefront.api import limiter
from storefront.security import decode_session_token


@pytest.fixture(autouse=True)
def _fast(fast_hashing):
    pass


def test_register_and_login(client):
    username = f"user_{uuid.uuid4().hex}"
    resp = client.post(
        "/api/register",
        json={"username": username, "password": "secret", "role": "merchant"},
    )
    assert resp.status_code == 200
    registered = resp.json()
    assert registered["username"] == username
    assert registered["role"] == "merchant"
    assert "password" not in registered and "password_hash" not in registered

    resp = client.post("/api/login", json={"username": username, "password": "secret"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == registered["id"]
    assert data["role"] == "merchant"
    assert decode_session_token(data["token"])["sub"] == str(registered["id"])


def test_first_user_gets_id_one(client):
    resp = client.post(
        "/api/register",
        json={"username": "alice", "password": "pw123", "role": "merchant"},
    )
    body = resp.json()
    assert (body["id"], body["username"], body["role"]) == (1, "alice", "merchant")


@pytest.mark.parametrize("role,password", [("customer", "other"), ("merchant", "pw123")])
def test_duplicate_username_rejected(client, role, password):
    client.post(
        "/api/register",
        json={"username": "bob", "password": "pw123", "role": "customer"},
    )
    resp = client.post(
        "/api/register",
        json={"username": "bob", "password": password, "role": role},
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Username already exists"}


def test_register_unknown_role_fails_at_storage(client):
    resp = client.post(
        "/api/register",
        json={"username": "carol", "password": "pw", "role": "admin"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Username already exists"}
    assert client.post("/api/login", json={"username": "carol", "password": "pw"}).status_code == 401


def test_login_failures_are_indistinguishable(client):
    client.post(
        "/api/register",
        json={"username": "dave", "password": "right", "role": "customer"},
    )
    wrong_password = client.post("/api/login", json={"username": "dave", "password": "wrong"})
    unknown_user = client.post("/api/login", json={"username": "nobody", "password": "right"})

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json() == {"error": "Invalid credentials"}


def test_login_is_rate_limited(client, monkeypatch):
    monkeypatch.setattr(limiter, "enabled", True)
    limiter.reset()
    statuses = [
        client.post("/api/login", json={"username": "x", "password": "y"}).status_code
        for _ in range(6)
    ]
    limiter.reset()
    assert statuses[:5] == [401] * 5
    assert statuses[5] == 429
