from collections.abc import Generator

from fastapi import Request
from sqlalchemy import Engine
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool


def create_db_engine(database_url: str) -> Engine:
    connect_args: dict[str, object] = {}
    kwargs: dict[str, object] = {}
    if database_url.startswith("sqlite"):
        # Required for SQLite when used with FastAPI across threads.
        connect_args = {"check_same_thread": False}
        if database_url in {"sqlite://", "sqlite:///:memory:"}:
            # In-memory databases live on a single shared connection.
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    return create_engine(database_url, echo=False, connect_args=connect_args, **kwargs)


def init_db(engine: Engine) -> None:
    """Create tables for every registered SQLModel table model."""
    import chatauth.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session(request: Request) -> Generator[Session, None, None]:
    with Session(request.app.state.engine) as session:
        yield session
