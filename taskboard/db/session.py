from typing import Iterator
from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import create_engine, Session, SQLModel

from ..core.config import Settings
from .. import models  # noqa: F401  (registers tables on SQLModel.metadata)


# Helper function to ensure URL format is correct
def get_db_url(settings: Settings) -> str:
    url = settings.DATABASE_URL
    if not url:
        return "sqlite:///./taskboard.db"
    # Only sync drivers are used
    url = url.replace("+aiosqlite", "").replace("+asyncpg", "")
    return url.replace("postgres://", "postgresql://")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(settings: Settings, **kwargs) -> Engine:
    db_url = get_db_url(settings)

    # --- CONFIGURATION FOR SQLITE ---
    if db_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        engine = create_engine(
            db_url,
            echo=settings.SQL_ECHO,
            connect_args=connect_args,
            **kwargs,
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    # --- CONFIGURATION FOR POSTGRESQL ---
    return create_engine(
        db_url,
        echo=settings.SQL_ECHO,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        **kwargs,
    )


def create_db_and_tables(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)


# Dependency: one session per request, bound to the app's engine
def get_session(request: Request) -> Iterator[Session]:
    with Session(request.app.state.engine) as session:
        yield session
