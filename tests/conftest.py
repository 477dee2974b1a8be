import inspect
from unittest.mock import MagicMock

import anyio
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import Engine
from sqlmodel import Session

from chatauth.auth.google import GoogleIdentity, GoogleOAuthClient
from chatauth.auth.passwords import hash_password
from chatauth.core.settings import Settings
from chatauth.db.engine import create_db_engine, get_session, init_db
from chatauth.main import create_app
from chatauth.user.models import User

TEST_PASSWORD = "correct-horse-battery"


def pytest_configure(config: pytest.Config) -> None:
    # Tests use @pytest.mark.asyncio, but we intentionally rely on anyio.
    config.addinivalue_line(
        "markers",
        "asyncio: run async tests using anyio (project-local hook)",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run @pytest.mark.asyncio tests with anyio.

    This avoids adding an external pytest-asyncio dependency.
    """
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    funcargs = {
        name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
    }

    async def _run_async_test() -> None:
        await test_func(**funcargs)

    anyio.run(_run_async_test)
    return True


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine: Engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="settings")
def settings_fixture():
    """Settings for tests: development cookies and the cheapest bcrypt cost."""
    return Settings(
        env_name="development",
        database_url="sqlite://",
        session_secret_key="test-secret-key",
        google_client_id="test-client-id",
        google_client_secret="test-client-secret",
        google_callback_url="http://testserver/auth/google/callback",
        bcrypt_rounds=4,
    )


@pytest.fixture(name="google_identity")
def google_identity_fixture():
    return GoogleIdentity(
        external_id="google-uid-123",
        email="alice@example.com",
        display_name="Alice Liddell",
        first_name="Alice",
        last_name="Liddell",
        avatar_url="https://example.com/alice.png",
    )


@pytest.fixture(name="mock_google")
def mock_google_fixture(google_identity: GoogleIdentity):
    """Create a mock GoogleOAuthClient."""
    mock_client = MagicMock(spec=GoogleOAuthClient)
    mock_client.authorization_url.side_effect = (
        lambda state: f"https://accounts.google.com/o/oauth2/v2/auth?state={state}"
    )
    mock_client.fetch_identity.return_value = google_identity
    return mock_client


@pytest.fixture(name="app")
def app_fixture(
    settings: Settings, engine: Engine, session: Session, mock_google: MagicMock
):
    app = create_app(settings, engine=engine, google_client=mock_google)
    app.dependency_overrides[get_session] = lambda: session
    yield app
    app.dependency_overrides.clear()


@pytest.fixture(name="client")
def client_fixture(app: FastAPI):
    return TestClient(app)


@pytest.fixture(name="local_user")
def local_user_fixture(session: Session):
    """Create a user registered with email and password."""
    user = User(
        email="bob@example.com",
        password_hash=hash_password(TEST_PASSWORD, rounds=4),
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture(name="federated_user")
def federated_user_fixture(session: Session, google_identity: GoogleIdentity):
    """Create a user that signed up through Google."""
    user = User(
        email=google_identity.email,
        external_id=google_identity.external_id,
        display_name=google_identity.display_name,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture(name="authenticated_client")
def authenticated_client_fixture(client: TestClient, local_user: User):
    """A client holding a live session for local_user."""
    response = client.post(
        "/login", json={"email": local_user.email, "password": TEST_PASSWORD}
    )
    assert response.status_code == 200
    return client
