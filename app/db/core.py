from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import settings


def _build_engine(url: str):
    # SQLite needs check_same_thread=False for FastAPI's threadpool;
    # in-memory databases must share a single connection.
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    return create_engine(url, pool_pre_ping=True)


engine = _build_engine(settings.database_url)


def create_db_and_tables():
    # Import registers the table models on SQLModel.metadata
    from app.db import schema  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session
