"""Exceptions raised by the conditional fetcher."""


class FetchError(Exception):
    """Base exception for remote fetch errors."""

    pass


class FetchStatusError(FetchError):
    """Raised when the server answers with a status other than 2xx or 304."""

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"HTTP {status_code} from {url}")


class FetchTimeoutError(FetchError):
    """Raised when connecting or reading times out."""

    pass


class FetchTransportError(FetchError):
    """Raised when the request fails below the HTTP layer."""

    pass


class FetchDecodeError(FetchError):
    """Raised when a response body cannot be decoded."""

    pass
