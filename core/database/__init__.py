"""Core database functionality."""

from .engine import (
    create_database_engine,
    create_database_tables,
    drop_database_tables,
    reset_database,
    setup_database_url,
)

__all__ = [
    "create_database_engine",
    "create_database_tables",
    "drop_database_tables",
    "reset_database",
    "setup_database_url",
]
