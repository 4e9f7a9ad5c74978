"""Engine and session factory for the decision store"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session
from drive_decision.config import settings
from drive_decision.infrastructure.database.models import Base


def build_engine(database_url: str) -> Engine:
    """
    Postgres gets a bounded pool; SQLite (local runs, tests) gets a
    thread-shareable connection and the default pool.
    """
    if make_url(database_url).get_backend_name() == "sqlite":
        return create_engine(database_url, connect_args={"check_same_thread": False})

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=settings.db_pool_recycle_seconds,
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Create the decision table if it does not exist yet"""
    Base.metadata.create_all(bind=engine)


def get_db() -> Session:
    """Request-scoped session; callers commit, the session is always closed"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
