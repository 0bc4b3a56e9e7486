import logging

from fastapi import Depends, Request
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

# Register tables on SQLModel.metadata before create_all.
from vidtube.db import models  # noqa: F401
from vidtube.store.adapter import DocumentStore

logger = logging.getLogger("db")


class Database:
    """Owns the engine for the lifetime of the application.

    Constructed once in the FastAPI lifespan, stored on ``app.state.db`` and
    disposed on shutdown.
    """

    def __init__(self, url: str, echo: bool = False):
        if not url:
            raise RuntimeError("DATABASE_URL must be set in the environment")
        kwargs = {"echo": echo}
        if url.startswith("sqlite"):
            # SQLite needs check_same_thread=False for FastAPI's threadpool
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
        self.url = url
        self.engine = create_engine(url, **kwargs)

    def init(self, auto_create: bool = False) -> None:
        """Create the schema in local/dev when explicitly enabled.

        Prefer running Alembic migrations in non-dev environments.
        """
        if auto_create:
            SQLModel.metadata.create_all(self.engine)
            logger.info("Database schema ensured")

    def session(self) -> Session:
        return Session(self.engine, expire_on_commit=False)

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connections closed")


def get_session(request: Request):
    database: Database = request.app.state.db
    with database.session() as session:
        yield session


def get_store(session: Session = Depends(get_session)) -> DocumentStore:
    return DocumentStore(session)
