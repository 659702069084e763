"""Tests for the database engine factory."""

from pathlib import Path

import pytest
from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from core.database.engine import (
    MEMORY_DATABASE_URL,
    create_database_engine,
    create_database_tables,
    drop_database_tables,
    reset_database,
    setup_database_url,
)
from core.storage import SqlKeyValueStore
from core.types import Environment


def test_testing_defaults_to_memory() -> None:
    assert setup_database_url(Environment.TESTING) == MEMORY_DATABASE_URL


def test_custom_path_overrides_environment(tmp_path: Path) -> None:
    db_path = tmp_path / "nested" / "custom.db"

    url = setup_database_url(Environment.PRODUCTION, db_path)

    assert url == f"sqlite:///{db_path}"
    assert db_path.parent.is_dir()


def test_create_database_tables() -> None:
    engine = create_database_engine(Environment.TESTING)
    create_database_tables(engine)

    tables = set(inspect(engine).get_table_names())
    assert {"key_value_entry", "feed_record"} <= tables


def test_memory_engine_shared_across_threads() -> None:
    """Worker threads must see the same in-memory database."""
    import threading

    engine = create_database_engine(Environment.TESTING)
    create_database_tables(engine)
    assert isinstance(engine.pool, StaticPool)

    store = SqlKeyValueStore(engine, "threads")
    thread = threading.Thread(target=store.put, args=("k", "v"))
    thread.start()
    thread.join()

    assert store.get("k") == "v"


def test_drop_database_tables() -> None:
    engine = create_database_engine(Environment.TESTING)
    create_database_tables(engine)
    drop_database_tables(engine)

    assert inspect(engine).get_table_names() == []


def test_reset_database(tmp_path: Path) -> None:
    engine = create_database_engine(Environment.TESTING, db_path=tmp_path / "r.db")
    create_database_tables(engine)
    store = SqlKeyValueStore(engine, "ns")
    store.put("k", "v")

    reset_database(engine)

    assert store.get("k") is None
    engine.dispose()


@pytest.mark.parametrize("environment", [Environment.DEVELOPMENT, Environment.PRODUCTION])
def test_default_paths(environment: Environment, monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)

    url = setup_database_url(environment)

    assert url.startswith("sqlite:///db/swellsync")
    assert (tmp_path / "db").is_dir()
