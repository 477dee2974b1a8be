"""Tests for health domain router."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from chatauth.db.engine import get_session


def test_health_endpoint_database_healthy(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}


def test_health_endpoint_database_unhealthy(app, client: TestClient):
    mock_session = MagicMock(spec=Session)
    mock_session.exec.side_effect = OperationalError(
        "SELECT 1", {}, Exception("Connection refused")
    )
    app.dependency_overrides[get_session] = lambda: mock_session

    response = client.get("/health")

    assert response.status_code == 503
    assert response.json() == {"status": "unhealthy", "database": "error"}
