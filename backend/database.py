# backend/database.py
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()

# Bound lazily to the process-wide engine in get_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False)

_engine = None


def normalize_database_url(url: str) -> str:
    # Hosted Postgres providers still hand out postgres:// URLs, SQLAlchemy requires postgresql://
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live inside a single connection
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": 0,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
        "pool_pre_ping": True,
    }


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine():
    """Return the shared engine, creating it (and its pool) on first use."""
    global _engine
    if _engine is None:
        url = normalize_database_url(settings.DATABASE_URL)
        _engine = create_engine(url, **_engine_options(url))
        if url.startswith("sqlite"):
            event.listen(_engine, "connect", _enable_sqlite_foreign_keys)
        SessionLocal.configure(bind=_engine)
        logger.info("Database engine created for %s", _engine.url.render_as_string(hide_password=True))
    return _engine


def dispose_engine():
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None


def get_db():
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    # Register every table on Base.metadata before creating them
    import models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())
