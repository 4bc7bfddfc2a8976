import logging
import time
from typing import Generator
from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from .config import settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str, **kwargs):
    """Create a SQLAlchemy engine suited to the given database URL."""
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_size", 10)
        kwargs.setdefault("max_overflow", 20)
        kwargs.setdefault("pool_recycle", 300)
    return create_engine(
        database_url,
        pool_pre_ping=True,
        echo=settings.debug,
        **kwargs
    )


engine = build_engine(settings.database_url)

# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# Base class for models
Base = declarative_base()


@event.listens_for(engine, "connect")
def receive_connect(dbapi_connection, connection_record):
    """Event listener for database connections"""
    logger.debug("Database connection established")


def get_db() -> Generator[Session, None, None]:
    """
    Database dependency for FastAPI

    Yields:
        Session: Database session
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db(max_retries: int = 10, delay: int = 5) -> bool:
    """
    Create database tables, retrying while the database comes up.

    Returns:
        bool: True if successful
    """
    # Import all models here to ensure they are registered
    from .. import models  # noqa: F401

    for attempt in range(max_retries):
        try:
            logger.info(f"Attempting to connect to database (attempt {attempt + 1}/{max_retries})")
            Base.metadata.create_all(bind=engine)
            logger.info("Database tables created successfully")
            return True
        except OperationalError as e:
            logger.warning(f"Database connection failed (attempt {attempt + 1}): {e}")
            if attempt < max_retries - 1:
                logger.info(f"Retrying in {delay} seconds...")
                time.sleep(delay)
            else:
                logger.error("Failed to connect to database after all retries")
                raise
    return False


def check_db_connection(db: Session) -> bool:
    """
    Check database connectivity

    Returns:
        bool: True if connected, False otherwise
    """
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False
