"""Database engine and per-request session handling"""

from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from lending_gateway.config import settings


def build_engine(database_url: str) -> Engine:
    """Create an engine; SQLite (local runs, tests) skips the server pool settings"""
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})

    # Pool of 10 + 10 overflow, connections recycled hourly
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield one session per request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
