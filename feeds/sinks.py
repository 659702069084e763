"""Persistence for decoded feed records."""

import json
from collections.abc import Iterable
from typing import Protocol

from sqlalchemy import delete, insert
from sqlalchemy.engine import Engine
from sqlmodel import Session, col, select
from sqlmodel.sql.expression import SelectOfScalar

from core.log import get_logger
from core.models.rows import FeedRecord
from core.types import JsonRecord
from core.utils import get_current_timestamp

logger = get_logger(__name__)


class CatalogSink(Protocol):
    """Receives a complete station catalog."""

    def replace_all(self, records: list[JsonRecord]) -> None: ...


class StationDataSink(Protocol):
    """Receives the complete time series of one station."""

    def replace_all_for_station(
        self, station_id: str, records: list[JsonRecord]
    ) -> None: ...


class FeedRecordRepository:
    """Stores the records of one dataset in the ``feed_record`` table.

    Each replace runs in a single transaction, so readers see either the old
    or the new set of records. Safe to call from worker threads.
    """

    def __init__(self, engine: Engine, dataset: str, id_field: str = "id"):
        """Initialize the repository.

        Args:
            engine: Database engine
            dataset: Dataset name stored with every row
            id_field: Record field holding the station id for catalog records
        """
        self.engine = engine
        self.dataset = dataset
        self.id_field = id_field

    def replace_all(self, records: list[JsonRecord]) -> None:
        """Replace the whole dataset with ``records``."""
        rows = [
            self._row(record.get(self.id_field), position, record)
            for position, record in enumerate(records)
        ]
        with self.engine.begin() as connection:
            connection.execute(
                delete(FeedRecord).where(col(FeedRecord.dataset) == self.dataset)
            )
            if rows:
                connection.execute(insert(FeedRecord), rows)
        logger.debug(f"Replaced {len(rows)} {self.dataset} records")

    def replace_all_for_station(
        self, station_id: str, records: list[JsonRecord]
    ) -> None:
        """Replace the records of one station."""
        rows = [
            self._row(station_id, position, record)
            for position, record in enumerate(records)
        ]
        with self.engine.begin() as connection:
            connection.execute(
                delete(FeedRecord).where(
                    col(FeedRecord.dataset) == self.dataset,
                    col(FeedRecord.station_id) == station_id,
                )
            )
            if rows:
                connection.execute(insert(FeedRecord), rows)
        logger.debug(f"Replaced {len(rows)} {self.dataset} records for {station_id}")

    def query_all(self) -> list[JsonRecord]:
        """Return every record of the dataset, grouped by station."""
        statement = (
            select(FeedRecord)
            .where(col(FeedRecord.dataset) == self.dataset)
            .order_by(col(FeedRecord.station_id), col(FeedRecord.position))
        )
        return self._load(statement)

    def query_by_ids(self, ids: Iterable[str]) -> list[JsonRecord]:
        """Return the records whose station id is in ``ids``."""
        id_list = list(ids)
        if not id_list:
            return []
        statement = (
            select(FeedRecord)
            .where(
                col(FeedRecord.dataset) == self.dataset,
                col(FeedRecord.station_id).in_(id_list),
            )
            .order_by(col(FeedRecord.station_id), col(FeedRecord.position))
        )
        return self._load(statement)

    def query_by_station(self, station_id: str) -> list[JsonRecord]:
        """Return the records of one station in feed order."""
        statement = (
            select(FeedRecord)
            .where(
                col(FeedRecord.dataset) == self.dataset,
                col(FeedRecord.station_id) == station_id,
            )
            .order_by(col(FeedRecord.position))
        )
        return self._load(statement)

    def _row(
        self, station_id: str | None, position: int, record: JsonRecord
    ) -> dict[str, object]:
        return {
            "dataset": self.dataset,
            "station_id": station_id,
            "position": position,
            "payload": json.dumps(record),
            "fetched_at": get_current_timestamp(),
        }

    def _load(self, statement: SelectOfScalar[FeedRecord]) -> list[JsonRecord]:
        with Session(self.engine) as session:
            rows = session.exec(statement).all()
            return [json.loads(row.payload) for row in rows]
