"""
Database connection and session management for the shop service
"""
from contextlib import contextmanager
from typing import Generator, Iterator, List
import logging

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from .config import settings

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_pre_ping": True,
    }


engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.SQL_ECHO,
    **_engine_options(settings.DATABASE_URL)
)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()


def init_db() -> None:
    """
    Verify connectivity and create all tables.
    Called once from the application lifespan.

    Raises:
        SQLAlchemyError: if the database cannot be reached
    """
    # Import models so they are registered with Base
    from . import models  # noqa: F401

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialized url=%s", engine.url.render_as_string(hide_password=True))
    except Exception as e:
        logger.error("Failed to initialize database: %s", e)
        raise


def dispose_db() -> None:
    """Release pooled connections. Called on application shutdown."""
    engine.dispose()
    logger.info("Database connections disposed")


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function to get database session.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Run a block as one unit of work: commit on success, roll back on any error.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def missing_tables() -> List[str]:
    """Names of mapped tables that the database does not have yet."""
    from . import models  # noqa: F401

    present = set(inspect(engine).get_table_names())
    return sorted(name for name in Base.metadata.tables if name not in present)


def check_db_connection() -> bool:
    """
    Check if database connection is working.

    Returns:
        bool: True if connection is successful, False otherwise
    """
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error("Database connection check failed: %s", e)
        return False
    finally:
        db.close()
