"""HTTP cache validators and their persistence."""

from pydantic import BaseModel, ValidationError

from core.log import get_logger
from core.storage.kv import KeyValueStore

logger = get_logger(__name__)


class Validator(BaseModel):
    """Cache validator captured from a successful response."""

    last_modified: str | None = None
    etag: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.last_modified is None and self.etag is None

    def request_headers(self) -> dict[str, str]:
        """Build conditional request headers.

        ``If-Modified-Since`` is preferred; ``If-None-Match`` is only sent
        when no modification date is known.
        """
        if self.last_modified:
            return {"If-Modified-Since": self.last_modified}
        if self.etag:
            return {"If-None-Match": self.etag}
        return {}


class ValidatorStore:
    """Persists one validator per cache key as JSON."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def get(self, cache_key: str) -> Validator | None:
        raw = self.store.get(cache_key)
        if raw is None:
            return None
        try:
            return Validator.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable validator for {cache_key}: {e}")
            return None

    def put(self, cache_key: str, validator: Validator) -> None:
        self.store.put(cache_key, validator.model_dump_json())

    def remove(self, cache_key: str) -> None:
        self.store.remove(cache_key)

    def clear(self) -> None:
        self.store.clear()
