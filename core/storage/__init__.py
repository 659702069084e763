"""Persisted key-value storage."""

from .kv import KeyValueStore, MemoryKeyValueStore, SqlKeyValueStore

__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqlKeyValueStore",
]
