"""Tests for chatauth/main.py - application factory and lifespan."""

from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient
from sqlalchemy import inspect

from chatauth.auth.google import GoogleOAuthClient
from chatauth.auth.sessions import SessionManager
from chatauth.db.engine import create_db_engine
from chatauth.main import create_app, run


def test_create_app_wires_state(settings, engine, mock_google):
    app = create_app(settings, engine=engine, google_client=mock_google)

    assert app.state.settings is settings
    assert app.state.engine is engine
    assert app.state.google_client is mock_google
    assert isinstance(app.state.session_manager, SessionManager)


def test_create_app_builds_default_collaborators(settings):
    app = create_app(settings)

    assert isinstance(app.state.google_client, GoogleOAuthClient)
    assert str(app.state.engine.url) == "sqlite://"


def test_routes_are_registered(settings, engine, mock_google):
    app = create_app(settings, engine=engine, google_client=mock_google)
    paths = {
        (route.path, tuple(sorted(route.methods)))
        for route in app.routes
        if hasattr(route, "methods")
    }

    for expected in [
        ("/", ("GET",)),
        ("/auth/google", ("GET",)),
        ("/auth/google/callback", ("GET",)),
        ("/register", ("POST",)),
        ("/login", ("POST",)),
        ("/profile", ("GET",)),
        ("/logout", ("GET",)),
        ("/health", ("GET",)),
    ]:
        assert expected in paths


def test_lifespan_creates_schema_and_closes_client(settings):
    engine = create_db_engine("sqlite://")
    mock_google = MagicMock(spec=GoogleOAuthClient)
    app = create_app(settings, engine=engine, google_client=mock_google)

    with TestClient(app) as client:
        assert {"users", "auth_sessions"} <= set(inspect(engine).get_table_names())
        assert client.get("/health").status_code == 200

    mock_google.aclose.assert_awaited_once()
    engine.dispose()


def test_run_serves_configured_address(settings):
    settings = settings.model_copy(update={"host": "127.0.0.1", "port": 8081})

    with (
        patch("chatauth.main.load_settings", return_value=settings),
        patch("chatauth.main.uvicorn.run") as mock_run,
    ):
        run()

    _, kwargs = mock_run.call_args
    assert kwargs == {"host": "127.0.0.1", "port": 8081}
