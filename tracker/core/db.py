from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from tracker.core.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # sessions are handed across threads by FastAPI and Celery
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO, **_engine_options(settings.DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db() -> Iterator[Session]:
    """Request-scoped session for FastAPI dependencies."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session for work outside a request: Celery tasks and MCP tools."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    import tracker.models  # noqa: F401  registers tables on Base.metadata
    Base.metadata.create_all(bind=engine)
