"""Namespaced string key-value stores.

Cooldown timestamps, HTTP cache validators and user preferences are small
string values that must survive restarts. Each logical store gets its own
``KeyValueStore`` instance; there is no process-wide singleton.

Writes are single-key upserts. Worker threads may write different keys
concurrently, so implementations must be thread-safe for disjoint keys.
"""

import threading
from abc import ABC, abstractmethod

from sqlalchemy.engine import Engine
from sqlmodel import Session, col, select

from core.log import get_logger
from core.models.rows import KeyValueEntry
from core.utils import get_current_timestamp

logger = get_logger(__name__)


class KeyValueStore(ABC):
    """Interface for a persisted string key-value store."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value for ``key`` or None."""
        pass

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """Insert or overwrite the value for ``key``."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove ``key``; missing keys are ignored."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry of this store."""
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """Return all stored keys in sorted order."""
        pass

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None


class MemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store, used for tests and ephemeral runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._data)


class SqlKeyValueStore(KeyValueStore):
    """SQLite-backed store sharing one table across namespaces.

    Every call opens its own session, so one instance can be used from the
    main context and from worker threads.
    """

    def __init__(self, engine: Engine, namespace: str) -> None:
        """Initialize the store.

        Args:
            engine: Database engine with the key_value_entry table created
            namespace: Logical store name, e.g. "task_cooldowns"
        """
        if not namespace:
            raise ValueError("namespace must not be empty")
        self.engine = engine
        self.namespace = namespace

    def get(self, key: str) -> str | None:
        with Session(self.engine) as session:
            entry = session.get(KeyValueEntry, (self.namespace, key))
            return entry.value if entry else None

    def put(self, key: str, value: str) -> None:
        with Session(self.engine) as session:
            try:
                entry = session.get(KeyValueEntry, (self.namespace, key))
                if entry is None:
                    entry = KeyValueEntry(namespace=self.namespace, key=key, value=value)
                else:
                    entry.value = value
                    entry.updated_at = get_current_timestamp()
                session.add(entry)
                session.commit()
            except Exception as exc:
                session.rollback()
                logger.error(f"Failed to store {self.namespace}/{key}: {exc}")
                raise

    def remove(self, key: str) -> None:
        with Session(self.engine) as session:
            entry = session.get(KeyValueEntry, (self.namespace, key))
            if entry is not None:
                session.delete(entry)
                session.commit()

    def clear(self) -> None:
        with Session(self.engine) as session:
            statement = select(KeyValueEntry).where(
                col(KeyValueEntry.namespace) == self.namespace
            )
            for entry in session.exec(statement).all():
                session.delete(entry)
            session.commit()
        logger.debug(f"Cleared key-value namespace {self.namespace}")

    def keys(self) -> list[str]:
        with Session(self.engine) as session:
            statement = (
                select(KeyValueEntry.key)
                .where(col(KeyValueEntry.namespace) == self.namespace)
                .order_by(col(KeyValueEntry.key))
            )
            return list(session.exec(statement).all())
