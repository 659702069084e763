"""Database engine factory for SQLModel."""

from pathlib import Path

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from core.log import get_logger
from core.models.rows import FeedRecord, KeyValueEntry
from core.types import Environment

logger = get_logger(__name__)

MEMORY_DATABASE_URL = "sqlite:///:memory:"


def setup_database_url(environment: Environment, db_path: Path | None = None) -> str:
    """Construct database URL based on environment configuration.

    Args:
        environment: Environment type
        db_path: Optional custom database path. If provided, overrides default path.

    Returns:
        Database connection URL
    """
    if environment == Environment.TESTING and db_path is None:
        return MEMORY_DATABASE_URL

    if db_path is not None:
        db_path = Path(db_path)
    elif environment == Environment.PRODUCTION:
        db_path = Path("db", "swellsync.db")
    elif environment == Environment.DEVELOPMENT:
        db_path = Path("db", "swellsync.dev.db")
    else:
        raise ValueError(f"Unknown environment: {environment}")

    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{db_path}"


def create_database_engine(
    environment: Environment,
    echo: bool = False,
    db_path: Path | None = None,
) -> Engine:
    """Create database engine based on environment configuration.

    Fetch tasks write from worker threads, so connections are not bound to
    the creating thread. An in-memory database shares a single connection,
    otherwise every thread would see its own empty database.

    Args:
        environment: Environment type
        echo: Enable SQL echo for debugging
        db_path: Optional custom database path. If provided, overrides default path.

    Returns:
        Configured SQLModel engine
    """
    database_url = setup_database_url(environment, db_path)
    logger.info(f"Creating database engine for: {database_url}")

    if database_url == MEMORY_DATABASE_URL:
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_engine(
        database_url,
        echo=echo,
        connect_args={
            "check_same_thread": False,
            "timeout": 60.0,
        },
        pool_pre_ping=True,
        pool_recycle=3600,
        pool_size=10,
    )


def create_database_tables(engine: Engine) -> None:
    """Create all database tables using SQLModel."""
    logger.info("Creating database tables...")

    SQLModel.metadata.create_all(engine)

    for model in (KeyValueEntry, FeedRecord):
        logger.info(f"> Created table for {model.__tablename__}")


def drop_database_tables(engine: Engine) -> None:
    """Drop all database tables (use with caution)."""
    logger.warning("Dropping all database tables...")
    SQLModel.metadata.drop_all(engine)
    logger.info("Database tables dropped successfully")


def reset_database(engine: Engine) -> None:
    """Reset database by dropping and recreating all tables."""
    logger.warning("Resetting database...")
    drop_database_tables(engine)
    create_database_tables(engine)
    logger.info("Database reset completed")
