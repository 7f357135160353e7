"""Tests for the content fetcher (redirects, byte cap, failure taxonomy).

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer so no real network calls
  are made.  Redirects are returned as raw 3xx responses because the fetcher
  follows them itself.
"""

from __future__ import annotations

import httpx
import pytest
import respx

from contact_engine.config import settings
from contact_engine.models import FetchedPage, FetchTarget
from contact_engine.scraper.errors import (
    FetchError,
    FetchTimeoutError,
    HttpStatusError,
    InvalidUrlError,
    NetworkError,
    ResponseTooLargeError,
)
from contact_engine.scraper.fetcher import fetch_page, normalise_url

_HTML = "<html><body><p>Hello from the practice.</p></body></html>"


def _target(url: str, max_bytes: int = 1024 * 1024, timeout: float = 5.0) -> FetchTarget:
    return FetchTarget(url=url, timeout=timeout, max_bytes=max_bytes)


# ---------------------------------------------------------------------------
# normalise_url
# ---------------------------------------------------------------------------

class TestNormaliseUrl:
    def test_adds_https_when_scheme_missing(self) -> None:
        assert normalise_url("example.co.uk") == "https://example.co.uk"

    def test_keeps_existing_scheme(self) -> None:
        assert normalise_url("http://example.co.uk/about") == "http://example.co.uk/about"

    def test_strips_surrounding_whitespace(self) -> None:
        assert normalise_url("  https://example.co.uk  ") == "https://example.co.uk"

    def test_empty_url_is_invalid(self) -> None:
        with pytest.raises(InvalidUrlError) as exc_info:
            normalise_url("   ")
        assert exc_info.value.kind == "invalid_url"

    def test_non_http_scheme_is_invalid(self) -> None:
        with pytest.raises(InvalidUrlError):
            normalise_url("ftp://example.co.uk")


# ---------------------------------------------------------------------------
# fetch_page
# ---------------------------------------------------------------------------

class TestFetchPage:
    def test_successful_fetch_returns_page(self) -> None:
        with respx.mock:
            respx.get("https://example.co.uk/").mock(
                return_value=httpx.Response(200, text=_HTML)
            )
            page = fetch_page(_target("https://example.co.uk/"))

        assert isinstance(page, FetchedPage)
        assert page.status_code == 200
        assert page.url == "https://example.co.uk/"
        assert "Hello from the practice" in page.html

    def test_follows_relative_redirect(self) -> None:
        with respx.mock:
            respx.get("https://example.co.uk/old").mock(
                return_value=httpx.Response(301, headers={"Location": "/new"})
            )
            respx.get("https://example.co.uk/new").mock(
                return_value=httpx.Response(200, text=_HTML)
            )
            page = fetch_page(_target("https://example.co.uk/old"))

        assert page.url == "https://example.co.uk/new"
        assert page.status_code == 200

    def test_follows_absolute_redirect_to_other_host(self) -> None:
        with respx.mock:
            respx.get("http://example.co.uk/").mock(
                return_value=httpx.Response(308, headers={"Location": "https://www.example.co.uk/"})
            )
            respx.get("https://www.example.co.uk/").mock(
                return_value=httpx.Response(200, text=_HTML)
            )
            page = fetch_page(_target("http://example.co.uk/"))

        assert page.url == "https://www.example.co.uk/"

    def test_redirect_loop_fails_as_network_error(self) -> None:
        with respx.mock:
            route = respx.get("https://example.co.uk/loop").mock(
                return_value=httpx.Response(302, headers={"Location": "/loop"})
            )
            with pytest.raises(NetworkError, match="Too many redirects"):
                fetch_page(_target("https://example.co.uk/loop"))

        assert route.call_count == settings.max_redirects + 1

    def test_not_found_raises_status_error(self) -> None:
        with respx.mock:
            respx.get("https://example.co.uk/missing").mock(
                return_value=httpx.Response(404, text="Not Found")
            )
            with pytest.raises(HttpStatusError) as exc_info:
                fetch_page(_target("https://example.co.uk/missing"))

        assert exc_info.value.status_code == 404
        assert exc_info.value.kind == "status"

    def test_redirect_without_location_is_a_status_error(self) -> None:
        with respx.mock:
            respx.get("https://example.co.uk/").mock(return_value=httpx.Response(302))
            with pytest.raises(HttpStatusError):
                fetch_page(_target("https://example.co.uk/"))

    def test_declared_length_over_cap_fails_before_reading(self) -> None:
        with respx.mock:
            respx.get("https://example.co.uk/big").mock(
                return_value=httpx.Response(200, content=b"x" * 2048)
            )
            with pytest.raises(ResponseTooLargeError) as exc_info:
                fetch_page(_target("https://example.co.uk/big", max_bytes=1024))

        assert exc_info.value.kind == "oversized"

    def test_streamed_body_over_cap_fails(self) -> None:
        """Without a Content-Length the cap is enforced while streaming."""
        with respx.mock:
            respx.get("https://example.co.uk/big").mock(
                return_value=httpx.Response(200, stream=httpx.ByteStream(b"x" * 2048))
            )
            with pytest.raises(ResponseTooLargeError):
                fetch_page(_target("https://example.co.uk/big", max_bytes=1024))

    def test_body_at_cap_is_accepted(self) -> None:
        with respx.mock:
            respx.get("https://example.co.uk/").mock(
                return_value=httpx.Response(200, content=b"x" * 1024)
            )
            page = fetch_page(_target("https://example.co.uk/", max_bytes=1024))

        assert len(page.html) == 1024

    def test_timeout_raises_fetch_timeout(self) -> None:
        with respx.mock:
            respx.get("https://example.co.uk/").mock(side_effect=httpx.ConnectTimeout)
            with pytest.raises(FetchTimeoutError) as exc_info:
                fetch_page(_target("https://example.co.uk/"))

        assert exc_info.value.kind == "timeout"

    def test_connection_error_raises_network_error(self) -> None:
        with respx.mock:
            respx.get("https://example.co.uk/").mock(side_effect=httpx.ConnectError)
            with pytest.raises(NetworkError) as exc_info:
                fetch_page(_target("https://example.co.uk/"))

        assert exc_info.value.kind == "network"
        assert isinstance(exc_info.value, FetchError)

    def test_zero_timeout_fails_without_request(self) -> None:
        with respx.mock(assert_all_called=False):
            route = respx.get("https://example.co.uk/").mock(
                return_value=httpx.Response(200, text=_HTML)
            )
            with pytest.raises(FetchTimeoutError):
                fetch_page(_target("https://example.co.uk/", timeout=0.0))

        assert not route.called

    def test_uses_supplied_client(self) -> None:
        with respx.mock:
            respx.get("https://example.co.uk/").mock(
                return_value=httpx.Response(200, text=_HTML)
            )
            with httpx.Client() as client:
                page = fetch_page(_target("https://example.co.uk/"), client)
                assert not client.is_closed

        assert page.status_code == 200
