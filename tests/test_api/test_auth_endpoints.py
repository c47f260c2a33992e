"""Tests for session and client profile endpoints."""

import pytest

from agencyhub.domain.accounts.service import AccountService
from agencyhub.main import app
from tests.utils.factories import create_client


def _whitelist(db, email="new@x.com", role="client", code="code-123"):
    AccountService(db).add_whitelisted_email(email, role, code)


def _register(client, email="new@x.com", code="code-123", name="New Person"):
    return client.post(
        "/api/auth/register",
        json={"email": email, "password": "s3cret-pass", "registrationCode": code, "name": name},
    )


@pytest.mark.api
def test_register_sets_session_cookie(client, db):
    _whitelist(db)

    response = _register(client)

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["username"] == "new@x.com"
    assert body["user"]["role"] == "client"
    assert body["user"]["name"] == "New Person"
    assert body["token"]
    assert "session" in response.cookies

    session = client.get("/api/auth/session")
    assert session.json()["user"]["username"] == "new@x.com"


@pytest.mark.api
def test_register_errors(client, db):
    assert _register(client).status_code == 403

    _whitelist(db)
    bad_code = _register(client, code="nope")
    assert bad_code.status_code == 400
    assert bad_code.json()["error"] == "invalid_input"

    assert _register(client).status_code == 200
    assert _register(client).status_code == 409


@pytest.mark.api
def test_register_rejects_malformed_email(client):
    assert _register(client, email="not-an-email").status_code == 422


@pytest.mark.api
def test_login_and_logout(client, db):
    _whitelist(db, role="agent")
    _register(client)
    client.cookies.clear()

    failed = client.post("/api/auth/login", json={"username": "new@x.com", "password": "wrong"})
    assert failed.status_code == 401
    assert failed.json()["error"] == "unauthorized"

    ok = client.post("/api/auth/login", json={"username": "new@x.com", "password": "s3cret-pass"})
    assert ok.status_code == 200
    assert ok.json()["user"]["role"] == "agent"

    token = ok.json()["token"]
    client.cookies.clear()
    bearer = client.get("/api/auth/session", headers={"Authorization": f"Bearer {token}"})
    assert bearer.json()["user"]["username"] == "new@x.com"

    client.post("/api/auth/logout")
    client.cookies.clear()
    assert client.get("/api/auth/session").json() == {"user": None}


@pytest.mark.api
def test_session_with_garbage_token(client):
    response = client.get("/api/auth/session", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 200
    assert response.json() == {"user": None}


@pytest.mark.api
def test_protected_route_requires_authentication(client):
    response = client.get("/api/roster")
    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"


@pytest.mark.api
def test_client_profile_round_trip(client, db, talent, talent_headers):
    response = client.put(
        "/api/client/profile",
        json={"name": {"first": "Eric", "last": "Murphy"}, "profile": {"height": "180cm"}},
        headers=talent_headers,
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Eric Murphy"

    profile = client.get("/api/client/profile", headers=talent_headers).json()
    assert profile["firstName"] == "Eric"
    assert profile["profile"] == {"height": "180cm"}


@pytest.mark.api
def test_profile_update_invalidates_identity_cache(client, talent, talent_headers):
    client.get("/api/client/profile", headers=talent_headers)
    assert app.state.identity_cache.get(talent.id) is not None

    client.put("/api/client/profile", json={"profile": {"eyes": "blue"}}, headers=talent_headers)
    assert app.state.identity_cache.get(talent.id) is None


@pytest.mark.api
def test_empty_profile_update_is_bad_request(client, talent_headers):
    response = client.put("/api/client/profile", json={}, headers=talent_headers)
    assert response.status_code == 400


@pytest.mark.api
def test_profile_is_client_only(client, agent_headers):
    response = client.get("/api/client/profile", headers=agent_headers)
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


@pytest.mark.api
def test_token_for_deleted_user_is_rejected(client, db):
    from tests.utils.factories import auth_headers

    ghost = create_client(db)
    headers = auth_headers(ghost)
    db.delete(ghost)
    db.commit()

    assert client.get("/api/client/profile", headers=headers).status_code == 401
