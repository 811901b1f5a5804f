"""Database engine and session management"""

from typing import Generator
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from household_finance.config import Settings


def build_engine(settings: Settings) -> Engine:
    """Pooled engine; connections are recycled to avoid stale ones"""
    return create_engine(
        settings.database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=settings.db_pool_recycle_seconds,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency injection for database sessions, one per request"""
    db = request.app.state.session_factory()
    try:
        yield db
    except Exception:
        # Nothing from a failed request is persisted
        db.rollback()
        raise
    finally:
        db.close()
