"""SQLModel database models for swellsync."""

from sqlmodel import Field, Index, SQLModel

from core.utils import get_current_timestamp


class KeyValueEntry(SQLModel, table=True):
    """One entry of a namespaced key-value store.

    Backs the cooldown timestamps, HTTP validators and user preferences.
    """

    __tablename__ = "key_value_entry"

    namespace: str = Field(primary_key=True, description="Logical store name")
    key: str = Field(primary_key=True, description="Entry key within namespace")
    value: str = Field(description="Opaque string value")
    updated_at: str = Field(
        default_factory=get_current_timestamp,
        description="ISO8601 datetime of the last write",
    )


class FeedRecord(SQLModel, table=True):
    """A decoded record from a marine data feed, stored as JSON."""

    __tablename__ = "feed_record"

    record_id: int | None = Field(default=None, primary_key=True)
    dataset: str = Field(description="Dataset name (e.g., buoy_std_met)")
    station_id: str | None = Field(
        default=None, description="Station the record belongs to or describes"
    )
    position: int = Field(default=0, description="Order within the decoded feed")
    payload: str = Field(description="JSON encoded record")
    fetched_at: str = Field(
        default_factory=get_current_timestamp,
        description="ISO8601 datetime when the record was stored",
    )

    __table_args__ = (
        Index("idx_feed_record_dataset_station", "dataset", "station_id"),
    )
