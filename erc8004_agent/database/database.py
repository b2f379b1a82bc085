"""Engine and session factory for the wallet link store."""

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from ..settings import DatabaseSettings

load_dotenv()

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_DATABASE_PATH = PROJECT_ROOT / "erc8004_agent.db"


def _absolute_sqlite_url(url: str) -> str:
    """Resolve a relative ``sqlite:///`` path against the project root."""
    prefix = "sqlite:///"
    path_part = url[len(prefix):]
    if not url.startswith(prefix) or path_part.startswith("/") or path_part in ("", ":memory:"):
        return url
    return f"{prefix}{(PROJECT_ROOT / path_part).resolve()}"


def get_database_url(settings: Optional[DatabaseSettings] = None) -> str:
    """Return the SQLAlchemy URL for the link store, defaulting to a local SQLite file."""
    url = (settings or DatabaseSettings()).database_url
    if not url:
        return f"sqlite:///{DEFAULT_DATABASE_PATH}"
    # SQLAlchemy only accepts the postgresql:// scheme.
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if url.startswith("sqlite"):
        return _absolute_sqlite_url(url)
    return url


def build_engine(settings: Optional[DatabaseSettings] = None) -> Engine:
    settings = settings or DatabaseSettings()
    url = get_database_url(settings)
    logger.info("Link store: %s://*****", url.split("://")[0])

    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False}, echo=settings.database_echo)
    return create_engine(url, pool_pre_ping=True, pool_recycle=3600, echo=settings.database_echo)


engine = build_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dependency for FastAPI to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
