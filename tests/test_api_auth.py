import pytest
from fastapi.testclient import TestClient

from casino_crm.api import deps
from casino_crm.main import app
from casino_crm.services.storage import LocalStorage


def _register(client, email="new@example.com", password="s3cret-pass"):
    return client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "full_name": "New User"},
    )


def test_health_is_public(anon_client):
    response = anon_client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_register_login_and_use_token(anon_client):
    response = _register(anon_client)
    assert response.status_code == 201
    assert response.json()["data"]["email"] == "new@example.com"
    assert "password" not in response.json()["data"]

    response = anon_client.post(
        "/api/auth/login", data={"username": "new@example.com", "password": "s3cret-pass"}
    )
    assert response.status_code == 200
    token = response.json()["access_token"]
    assert response.json()["token_type"] == "bearer"

    response = anon_client.get("/api/clients", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


def test_login_sets_session_cookie(anon_client):
    _register(anon_client)
    response = anon_client.post(
        "/api/auth/login", data={"username": "new@example.com", "password": "s3cret-pass"}
    )
    assert response.cookies.get("access_token")
    # the cookie alone authenticates follow-up requests
    assert anon_client.get("/api/agents").status_code == 200

    anon_client.get("/api/auth/logout")
    anon_client.cookies.clear()
    assert anon_client.get("/api/agents").status_code == 401


def test_register_duplicate_email(anon_client):
    _register(anon_client)
    response = _register(anon_client)
    assert response.status_code == 400
    assert "error" in response.json()


def test_login_with_wrong_password(anon_client):
    _register(anon_client)
    response = anon_client.post(
        "/api/auth/login", data={"username": "new@example.com", "password": "wrong"}
    )
    assert response.status_code == 401
    assert response.json() == {"error": "Incorrect email or password"}


def test_garbage_token_is_rejected(anon_client):
    response = anon_client.get("/api/documents", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json() == {"error": "Could not validate credentials"}


@pytest.fixture
def local_storage(anon_client, tmp_path):
    storage = LocalStorage(root=tmp_path, base_url="http://testserver", secret="files-secret")
    app.dependency_overrides[deps.get_storage] = lambda: storage
    return storage


def _path(url):
    return url.replace("http://testserver", "")


def test_signed_file_link_serves_the_blob(anon_client, local_storage):
    local_storage.upload("c1/c1_1.pdf", b"%PDF-1.4 body")

    response = anon_client.get(_path(local_storage.create_signed_url("c1/c1_1.pdf", 60)))
    assert response.status_code == 200
    assert response.content == b"%PDF-1.4 body"
    assert response.headers["content-disposition"].startswith("inline")

    url = local_storage.create_signed_url("c1/c1_1.pdf", 60, download="Passport.pdf")
    response = anon_client.get(_path(url))
    assert response.status_code == 200
    assert response.headers["content-disposition"].startswith("attachment")
    assert "Passport.pdf" in response.headers["content-disposition"]


def test_signed_file_link_rejects_bad_tokens(anon_client, local_storage):
    local_storage.upload("c1/c1_1.pdf", b"x")

    expired = local_storage.create_signed_url("c1/c1_1.pdf", -5)
    assert anon_client.get(_path(expired)).status_code == 401
    assert anon_client.get("/api/files/forged-token").status_code == 401

    missing = local_storage.create_signed_url("c1/gone.pdf", 60)
    assert anon_client.get(_path(missing)).status_code == 404


def test_startup_creates_tables(monkeypatch):
    calls = []
    monkeypatch.setattr("casino_crm.main.init_db", lambda: calls.append("init_db"))
    with TestClient(app) as client:
        assert client.get("/api/health").status_code == 200
    assert calls == ["init_db"]
