import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import APIRouter, FastAPI
from sqlalchemy import Engine

from chatauth.auth.google import GoogleOAuthClient
from chatauth.auth.google_router import router as google_router
from chatauth.auth.router import router as auth_router
from chatauth.auth.sessions import SessionManager
from chatauth.core.cors import add_cors_middleware
from chatauth.core.exception_handlers import register_exception_handlers
from chatauth.core.logging import configure_logging
from chatauth.core.request_logging import add_request_logging_middleware
from chatauth.core.settings import Settings, load_settings
from chatauth.db.engine import create_db_engine, init_db
from chatauth.health.router import router as health_router
from chatauth.home.router import router as home_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(app.state.engine)
    logger.info("Database schema ready")
    yield
    # Cleanup HTTP clients
    await app.state.google_client.aclose()


def create_app(
    settings: Settings | None = None,
    engine: Engine | None = None,
    google_client: GoogleOAuthClient | None = None,
) -> FastAPI:
    """Build the application with its collaborators.

    Everything a request needs (settings, database engine, session manager
    and Google client) is attached to ``app.state`` so tests can pass their
    own instances instead of patching module globals.
    """
    configure_logging()

    settings = settings or load_settings()

    app = FastAPI(title="ChatAuth", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine or create_db_engine(settings.database_url)
    app.state.session_manager = SessionManager(settings)
    app.state.google_client = google_client or GoogleOAuthClient.from_settings(
        settings
    )

    api_router = APIRouter()
    api_router.include_router(home_router)
    api_router.include_router(health_router)
    api_router.include_router(google_router)
    api_router.include_router(auth_router)

    app.include_router(api_router)

    add_request_logging_middleware(app)
    add_cors_middleware(app, settings)
    register_exception_handlers(app)

    return app


def run() -> None:
    """Serve the application with uvicorn."""
    settings = load_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
