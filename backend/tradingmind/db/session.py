"""
Database session management with SQLAlchemy 2.0.

Provides engine configuration, per-request session creation and a
database health probe.
"""

from typing import Any, Dict

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from loguru import logger

from tradingmind.config import settings


def _engine_options(database_url: str) -> Dict[str, Any]:
    """Pool and connect options per backend."""
    if database_url.startswith("sqlite"):
        options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            # One shared connection, otherwise every session sees an empty database
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_timeout": 30,
        "pool_recycle": 1800,
    }


def build_engine(database_url: str) -> Engine:
    return create_engine(database_url, echo=settings.debug, **_engine_options(database_url))


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)


def init_db() -> None:
    """Create all tables. Idempotent: existing tables are left alone."""
    from tradingmind.db.models import Base

    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info("Database schema initialized")


def get_db() -> Session:
    """
    Get a database session.

    Caller is responsible for closing it with close_db_session().
    """
    return SessionLocal()


def close_db_session(db: Session) -> None:
    """Close a session obtained from get_db()."""
    try:
        db.close()
    except SQLAlchemyError as e:
        logger.warning(f"Error closing database session: {e}")


def check_db_health() -> Dict[str, Any]:
    """Run a trivial query and report whether the database answers."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "healthy"}
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "unhealthy", "error": e.__class__.__name__}
