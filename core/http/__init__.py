"""Conditional HTTP fetching."""

from .exceptions import (
    FetchDecodeError,
    FetchError,
    FetchStatusError,
    FetchTimeoutError,
    FetchTransportError,
)
from .fetcher import ConditionalFetcher, Decoder, FetchResult
from .validators import Validator, ValidatorStore

__all__ = [
    "ConditionalFetcher",
    "Decoder",
    "FetchDecodeError",
    "FetchError",
    "FetchResult",
    "FetchStatusError",
    "FetchTimeoutError",
    "FetchTransportError",
    "Validator",
    "ValidatorStore",
]
