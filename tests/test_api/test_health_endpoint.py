"""Tests for health check endpoints."""

import pytest


@pytest.mark.api
@pytest.mark.parametrize("path", ["/health", "/api/health"])
def test_health(client, path):
    response = client.get(path)
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
