"""
Engine, session factory and declarative base shared by every ChefOS model.

PostgreSQL in deployments; SQLite works for local runs and the test suite, so
models stick to portable column types (``Uuid``, ``JSON``).
"""

import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings

logger = logging.getLogger("chefos.database")

Base = declarative_base()


def build_engine(url: str, echo: bool = False):
    """Create an engine with the connection options the backend needs."""
    if url.startswith("sqlite"):
        # One connection is shared by the worker threads FastAPI runs sync routes in
        return create_engine(
            url, echo=echo, future=True, connect_args={"check_same_thread": False}
        )
    return create_engine(url, echo=echo, future=True, pool_pre_ping=True)


engine = build_engine(settings.database_url, echo=settings.db_echo)

SessionLocal = sessionmaker(bind=engine, future=True)


def init_database():
    """Create missing tables. Existing tables are left untouched."""
    with engine.begin() as conn:
        Base.metadata.create_all(bind=conn)
    logger.info(f"Database schema ready ({len(Base.metadata.tables)} tables)")


def get_db_session():
    """Request-scoped session for FastAPI dependency injection"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
