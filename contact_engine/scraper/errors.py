"""Fetch failure taxonomy.

Every failure carries a short ``kind`` string that the aggregator copies
into :attr:`ScrapeResult.error` when the home page cannot be fetched.
"""

from __future__ import annotations

from typing import Optional


class FetchError(Exception):
    """Base class for all content-fetch failures."""

    kind = "network"

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class NetworkError(FetchError):
    """Connection, DNS, TLS or protocol failure (including redirect loops)."""

    kind = "network"


class FetchTimeoutError(FetchError):
    kind = "timeout"


class HttpStatusError(FetchError):
    """The final response had a non-2xx status."""

    kind = "status"

    def __init__(self, message: str, url: str = "", status_code: Optional[int] = None) -> None:
        super().__init__(message, url)
        self.status_code = status_code


class ResponseTooLargeError(FetchError):
    kind = "oversized"


class InvalidUrlError(FetchError):
    """The URL is empty or has no usable scheme/host."""

    kind = "invalid_url"
