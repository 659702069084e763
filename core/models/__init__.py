"""Database row models for swellsync."""

from core.models.rows import FeedRecord, KeyValueEntry

__all__ = [
    "FeedRecord",
    "KeyValueEntry",
]
