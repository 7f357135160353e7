"""HTTP content fetcher with bounded redirects, a byte cap and a hard deadline."""

from __future__ import annotations

import time
import urllib.parse
from typing import Optional

import httpx

from contact_engine.config import settings
from contact_engine.models import FetchedPage, FetchTarget
from contact_engine.scraper.errors import (
    FetchTimeoutError,
    HttpStatusError,
    InvalidUrlError,
    NetworkError,
    ResponseTooLargeError,
)

_REDIRECT_CODES = (301, 302, 303, 307, 308)


def _default_headers() -> dict[str, str]:
    return {
        "User-Agent": settings.user_agent,
        "Accept": "text/html,application/xhtml+xml",
        "Accept-Language": "en-GB,en;q=0.9",
    }


def make_client() -> httpx.Client:
    """Return an ``httpx.Client`` configured for page fetching.

    Redirects are followed by :func:`fetch_page` itself so the hop count
    stays bounded by ``settings.max_redirects``.
    """
    return httpx.Client(headers=_default_headers(), follow_redirects=False)


def normalise_url(url: str) -> str:
    """Return *url* with a scheme, raising :class:`InvalidUrlError` if unusable."""
    raw = (url or "").strip()
    if not raw:
        raise InvalidUrlError("Invalid URL", url)
    if "://" not in raw:
        raw = "https://" + raw

    parsed = urllib.parse.urlparse(raw)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidUrlError(f"Invalid URL: {url!r}", url)
    return raw


def _strip_fragment(url: str) -> str:
    parsed = urllib.parse.urlparse(url)
    return urllib.parse.urlunparse(parsed._replace(fragment=""))


def _read_capped(response: httpx.Response, max_bytes: int, deadline: float, url: str) -> bytes:
    """Read the streamed body, aborting past *max_bytes* or *deadline*."""
    declared = response.headers.get("Content-Length", "")
    if declared.isdigit() and int(declared) > max_bytes:
        raise ResponseTooLargeError(
            f"Response too large ({declared} bytes declared)", url
        )

    buf = bytearray()
    for chunk in response.iter_bytes():
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise ResponseTooLargeError(
                f"Response too large (over {max_bytes} bytes)", url
            )
        if time.monotonic() > deadline:
            raise FetchTimeoutError("Request timeout", url)
    return bytes(buf)


def _decode(body: bytes, charset: Optional[str]) -> str:
    try:
        return body.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


def fetch_page(target: FetchTarget, client: Optional[httpx.Client] = None) -> FetchedPage:
    """Fetch ``target.url`` and return a :class:`FetchedPage`.

    Redirects are re-issued against the ``Location`` target up to
    ``settings.max_redirects`` times.  The whole operation, redirects and
    body streaming included, must finish within ``target.timeout`` seconds.

    Args:
        target: URL plus timeout and byte budget.
        client: Optional shared client.  A short-lived one is created (and
            closed) when omitted.

    Raises:
        InvalidUrlError: The URL cannot be fetched at all.
        FetchTimeoutError: The deadline passed.
        HttpStatusError: The final response was not 2xx.
        ResponseTooLargeError: The body exceeded ``target.max_bytes``.
        NetworkError: Any other transport failure, or too many redirects.
    """
    if client is None:
        with make_client() as own_client:
            return fetch_page(target, own_client)

    current = normalise_url(target.url)
    deadline = time.monotonic() + target.timeout

    for _ in range(settings.max_redirects + 1):
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise FetchTimeoutError("Request timeout", current)

        try:
            with client.stream("GET", current, timeout=remaining) as response:
                location = response.headers.get("Location")
                if response.status_code in _REDIRECT_CODES and location:
                    current = _strip_fragment(urllib.parse.urljoin(current, location.strip()))
                    continue

                if not 200 <= response.status_code < 300:
                    raise HttpStatusError(
                        f"HTTP {response.status_code}",
                        current,
                        status_code=response.status_code,
                    )

                body = _read_capped(response, target.max_bytes, deadline, current)
                return FetchedPage(
                    url=str(response.url),
                    html=_decode(body, response.charset_encoding),
                    status_code=response.status_code,
                )
        except httpx.TimeoutException as exc:
            raise FetchTimeoutError("Request timeout", current) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"Network error: {exc}", current) from exc

    raise NetworkError(f"Too many redirects (> {settings.max_redirects})", current)
