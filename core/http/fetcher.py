"""Conditional HTTP fetcher used by background fetch tasks."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import httpx

from core.constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_USER_AGENT,
)
from core.log import get_logger

from .exceptions import (
    FetchDecodeError,
    FetchStatusError,
    FetchTimeoutError,
    FetchTransportError,
)
from .validators import Validator, ValidatorStore

logger = get_logger(__name__)

T = TypeVar("T")

Decoder = Callable[[bytes], T]


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Outcome of a conditional fetch.

    ``present`` is False when the server answered 304 Not Modified; in that
    case ``body`` is None and callers must leave their stored data alone.
    """

    present: bool
    body: T | None = None
    validator: Validator | None = None

    @classmethod
    def not_modified(cls) -> "FetchResult[T]":
        return cls(present=False)


class ConditionalFetcher:
    """Fetches remote resources with If-Modified-Since / If-None-Match.

    Runs on worker threads, so it uses a synchronous ``httpx.Client``. The
    client is safe to share across threads.
    """

    def __init__(
        self,
        validators: ValidatorStore,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        client: httpx.Client | None = None,
    ):
        """Initialize the fetcher.

        Args:
            validators: Store holding the last validator per cache key
            connect_timeout: Connect timeout in seconds
            read_timeout: Read timeout in seconds
            user_agent: User-Agent header sent with every request
            client: Preconfigured client, mainly for tests
        """
        self.validators = validators
        self.client = client or httpx.Client(
            timeout=httpx.Timeout(read_timeout, connect=connect_timeout),
            headers={"User-Agent": user_agent},
            follow_redirects=True,
        )

    def __enter__(self) -> "ConditionalFetcher":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()

    def close(self) -> None:
        self.client.close()

    def fetch(
        self,
        url: str,
        decoder: Decoder[T],
        cache_key: str | None = None,
        params: Mapping[str, str] | None = None,
    ) -> FetchResult[T]:
        """Fetch and decode a resource, sending stored validators if any.

        The stored validator is never updated here. Callers pass the returned
        validator to ``remember`` once they have stored the body.

        Args:
            url: Resource URL
            decoder: Turns the raw body into records
            cache_key: Key for validator lookup; None makes the request
                unconditional
            params: Query parameters

        Returns:
            FetchResult with the decoded body, or a not-modified result

        Raises:
            FetchStatusError: If the status is neither 2xx nor 304
            FetchTimeoutError: If the request times out
            FetchTransportError: If the request fails otherwise
            FetchDecodeError: If the decoder rejects the body
        """
        headers: dict[str, str] = {}
        if cache_key is not None:
            stored = self.validators.get(cache_key)
            if stored is not None:
                headers = stored.request_headers()

        try:
            response = self.client.get(url, params=params, headers=headers)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout fetching {url}: {e}")
            raise FetchTimeoutError(f"Timeout fetching {url}") from e
        except httpx.RequestError as e:
            logger.error(f"Request error fetching {url}: {e}")
            raise FetchTransportError(f"Request failed for {url}: {e}") from e

        if response.status_code == httpx.codes.NOT_MODIFIED:
            logger.debug(f"Not modified: {url}")
            return FetchResult.not_modified()

        if not response.is_success:
            logger.error(f"HTTP {response.status_code} fetching {url}")
            raise FetchStatusError(url, response.status_code)

        try:
            body = decoder(response.content)
        except Exception as e:
            logger.error(f"Could not decode response from {url}: {e}")
            raise FetchDecodeError(f"Could not decode response from {url}: {e}") from e

        validator = Validator(
            last_modified=response.headers.get("Last-Modified"),
            etag=response.headers.get("ETag"),
        )
        logger.debug(f"Fetched {url} ({len(response.content)} bytes)")
        return FetchResult(present=True, body=body, validator=validator)

    def remember(self, cache_key: str, validator: Validator | None) -> None:
        """Persist a validator after its body was stored successfully."""
        if validator is None or validator.is_empty:
            return
        self.validators.put(cache_key, validator)

    def forget(self, cache_key: str) -> None:
        """Drop the validator so the next fetch downloads in full."""
        self.validators.remove(cache_key)
