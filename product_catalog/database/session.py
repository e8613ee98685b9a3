import logging
import sqlite3
import time

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from product_catalog.core.config import settings

logger = logging.getLogger(__name__)


def _connect_args(url: str) -> dict:
    # SQLite connections are shared with the FastAPI threadpool
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


@event.listens_for(Engine, "connect")
def _register_sqlite_functions(dbapi_connection, connection_record):
    # SQLite's built-in lower() only folds ASCII; match Python and PostgreSQL
    if isinstance(dbapi_connection, sqlite3.Connection):
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


class Base(DeclarativeBase):
    pass


def get_db():
    """Yield a session per request and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_connection(db) -> bool:
    """Return True when the store answers a trivial query."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connectivity check failed: {str(e)}")
        return False


def init_db(bind: Engine = engine, retries: int = None, delay: float = None) -> bool:
    """
    Create missing tables, retrying while the database comes up.

    Returns False when every attempt failed; the application keeps running
    so that the health check can report the outage.
    """
    # Import the models so that Base has them registered
    from product_catalog.database import base  # noqa: F401

    retries = settings.DB_INIT_RETRIES if retries is None else retries
    delay = settings.DB_INIT_RETRY_DELAY if delay is None else delay

    for attempt in range(1, retries + 1):
        try:
            Base.metadata.create_all(bind=bind)
            logger.info("Database and tables are ready.")
            return True
        except Exception as e:
            logger.warning(f"Attempt {attempt}/{retries} failed to connect to database: {str(e)}")
            if attempt < retries:
                time.sleep(delay)

    logger.error(
        f"Failed to connect to database after {retries} attempts. "
        "Continuing without database initialization."
    )
    return False
