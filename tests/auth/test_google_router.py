"""Tests for the Google OAuth routes."""

from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlsplit

from fastapi.testclient import TestClient
from sqlmodel import Session, select

from chatauth.auth.google import GoogleIdentity
from chatauth.core.constants import Cookies
from chatauth.core.exceptions import ProviderError
from chatauth.user.models import User


def start_login(client: TestClient) -> str:
    """Begin the flow and return the state sent to Google."""
    response = client.get("/auth/google", follow_redirects=False)
    assert response.status_code == 302
    location = urlsplit(response.headers["location"])
    return parse_qs(location.query)["state"][0]


def test_login_redirects_to_google(client: TestClient, mock_google: MagicMock):
    response = client.get("/auth/google", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"].startswith(
        "https://accounts.google.com/o/oauth2/v2/auth"
    )
    assert Cookies.OAUTH_STATE in response.cookies
    mock_google.authorization_url.assert_called_once()


def test_login_uses_fresh_state_each_time(client: TestClient):
    assert start_login(client) != start_login(client)


def test_callback_creates_user_and_session(
    client: TestClient, session: Session, mock_google: MagicMock
):
    state = start_login(client)

    response = client.get(
        "/auth/google/callback",
        params={"code": "auth-code", "state": state},
        follow_redirects=False,
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/profile"
    assert Cookies.SESSION in response.cookies
    mock_google.fetch_identity.assert_awaited_once_with("auth-code")

    user = session.exec(select(User).where(User.external_id == "google-uid-123")).one()
    assert user.email == "alice@example.com"
    assert user.password_hash is None

    profile = client.get("/profile")
    assert profile.status_code == 200
    assert profile.json()["display_name"] == "Alice Liddell"
    assert profile.json()["avatar_url"] == "https://example.com/alice.png"


def test_callback_clears_state_cookie(client: TestClient):
    state = start_login(client)

    client.get(
        "/auth/google/callback",
        params={"code": "auth-code", "state": state},
        follow_redirects=False,
    )

    assert Cookies.OAUTH_STATE not in client.cookies


def test_returning_user_is_not_duplicated(
    client: TestClient, session: Session, federated_user: User
):
    state = start_login(client)

    response = client.get(
        "/auth/google/callback",
        params={"code": "auth-code", "state": state},
        follow_redirects=False,
    )

    assert response.headers["location"] == "/profile"
    users = session.exec(select(User)).all()
    assert [u.id for u in users] == [federated_user.id]
    assert client.get("/profile").json()["id"] == str(federated_user.id)


def test_callback_with_mismatched_state(client: TestClient, mock_google: MagicMock):
    start_login(client)

    response = client.get(
        "/auth/google/callback",
        params={"code": "auth-code", "state": "forged-state"},
        follow_redirects=False,
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/"
    assert Cookies.SESSION not in response.cookies
    mock_google.fetch_identity.assert_not_called()


def test_callback_without_prior_login(client: TestClient, mock_google: MagicMock):
    response = client.get(
        "/auth/google/callback",
        params={"code": "auth-code", "state": "some-state"},
        follow_redirects=False,
    )

    assert response.headers["location"] == "/"
    mock_google.fetch_identity.assert_not_called()


def test_callback_consent_denied(client: TestClient, mock_google: MagicMock):
    state = start_login(client)

    response = client.get(
        "/auth/google/callback",
        params={"error": "access_denied", "state": state},
        follow_redirects=False,
    )

    assert response.headers["location"] == "/"
    assert Cookies.SESSION not in response.cookies
    mock_google.fetch_identity.assert_not_called()


def test_callback_provider_failure(
    client: TestClient, session: Session, mock_google: MagicMock
):
    mock_google.fetch_identity.side_effect = ProviderError()
    state = start_login(client)

    response = client.get(
        "/auth/google/callback",
        params={"code": "auth-code", "state": state},
        follow_redirects=False,
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/"
    assert Cookies.SESSION not in response.cookies
    assert session.exec(select(User)).all() == []


def test_callback_email_owned_by_local_account(
    client: TestClient, session: Session, local_user: User, mock_google: MagicMock
):
    mock_google.fetch_identity.return_value = GoogleIdentity(
        external_id="google-uid-456", email=local_user.email
    )
    state = start_login(client)

    response = client.get(
        "/auth/google/callback",
        params={"code": "auth-code", "state": state},
        follow_redirects=False,
    )

    assert response.headers["location"] == "/"
    session.refresh(local_user)
    assert local_user.external_id is None


def test_callback_uses_configured_redirects(
    app, client: TestClient, mock_google: MagicMock
):
    app.state.settings = app.state.settings.model_copy(
        update={"oauth_success_url": "/chat", "oauth_failure_url": "/login-failed"}
    )

    state = start_login(client)
    ok = client.get(
        "/auth/google/callback",
        params={"code": "auth-code", "state": state},
        follow_redirects=False,
    )
    failed = client.get(
        "/auth/google/callback",
        params={"code": "auth-code", "state": "stale"},
        follow_redirects=False,
    )

    assert ok.headers["location"] == "/chat"
    assert failed.headers["location"] == "/login-failed"
