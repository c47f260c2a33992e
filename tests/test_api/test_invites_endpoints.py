"""Tests for invitation endpoints."""

import pytest

from tests.utils.factories import create_client


@pytest.mark.api
def test_invite_new_client(client, agent, agent_headers):
    response = client.post(
        "/api/invites", json={"email": "jane@x.com", "name": "Jane Doe"}, headers=agent_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["isNewClient"] is True
    assert body["magicLink"].startswith("http://localhost:8081/register?")
    assert "email=jane%40x.com" in body["magicLink"]

    invites = client.get("/api/invites", headers=agent_headers).json()
    assert len(invites) == 1
    assert invites[0]["representationId"] == body["representationId"]
    assert invites[0]["clientName"] == "Jane Doe"
    assert invites[0]["status"] == "pending"

    # Pending representations stay off the roster until the client registers
    assert client.get("/api/roster", headers=agent_headers).json() == []


@pytest.mark.api
def test_invite_existing_client(client, db, agent_headers):
    existing = create_client(db, username="known@x.com")

    body = client.post(
        "/api/invites", json={"email": "known@x.com", "name": "Known"}, headers=agent_headers
    ).json()

    assert body["clientId"] == existing.id
    assert body["isNewClient"] is False
    assert body["magicLink"] is None


@pytest.mark.api
def test_invited_client_registration_activates_representation(client, agent_headers):
    invite = client.post(
        "/api/invites", json={"email": "jane@x.com", "name": "Jane Doe"}, headers=agent_headers
    ).json()
    code = invite["magicLink"].split("code=")[1]

    registered = client.post(
        "/api/auth/register",
        json={"email": "jane@x.com", "password": "s3cret-pass", "registrationCode": code, "name": "Jane Doe"},
    )

    assert registered.status_code == 200
    assert registered.json()["user"]["id"] == invite["clientId"]
    roster = client.get("/api/roster", headers=agent_headers).json()
    assert [r["id"] for r in roster] == [invite["representationId"]]


@pytest.mark.api
def test_invite_validation(client, agent_headers):
    assert client.post(
        "/api/invites", json={"email": "nope", "name": "Jane"}, headers=agent_headers
    ).status_code == 422
    assert client.post(
        "/api/invites", json={"email": "jane@x.com", "name": "  "}, headers=agent_headers
    ).status_code == 422


@pytest.mark.api
def test_invite_conflicts_with_agent_identity(client, other_agent, agent_headers):
    response = client.post(
        "/api/invites", json={"email": other_agent.username, "name": "Lloyd"}, headers=agent_headers
    )
    assert response.status_code == 409
    assert response.json()["error"] == "conflict"


@pytest.mark.api
def test_invites_are_agent_only(client, talent_headers):
    response = client.post(
        "/api/invites", json={"email": "jane@x.com", "name": "Jane Doe"}, headers=talent_headers
    )
    assert response.status_code == 403
