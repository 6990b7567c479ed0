from __future__ import annotations

from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from gymbook.core.logging import get_logger
from gymbook.core.settings import settings


class Database:
    """Owns the engine and session factory for one process.

    Built once in the app lifespan and disposed on shutdown; everything that
    needs the store receives it (or a session from it) explicitly.
    """

    def __init__(self, url: str, *, echo: bool = False, **engine_kwargs) -> None:
        self.url = url
        self.engine: Engine = create_engine(
            url, pool_pre_ping=True, echo=echo, future=True, **engine_kwargs
        )
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            future=True,
        )

    @classmethod
    def from_settings(cls) -> Database:
        kwargs = {}
        if settings.DATABASE_URL.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
        return cls(settings.DATABASE_URL, echo=settings.DB_ECHO, **kwargs)

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()
        get_logger().info("db.disposed")


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency do FastAPI: abre uma sessão por request e fecha no final."""
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    finally:
        db.close()


__all__ = ["Database", "get_db"]
