"""Tests for secondary-page discovery (sitemap.xml and fixed paths)."""

from __future__ import annotations

import httpx
import respx

from contact_engine.scraper.sitemap import (
    SECONDARY_PATHS,
    discover_sitemap_pages,
    fallback_pages,
    relevant_sitemap_urls,
    site_root,
)

_SITEMAP = """\
<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
  <url><loc>https://practice.co.uk/</loc></url>
  <url><loc>https://practice.co.uk/about-us/</loc></url>
  <url><loc>https://practice.co.uk/treatments/implants/</loc></url>
  <url><loc><![CDATA[https://practice.co.uk/meet-the-team/]]></loc></url>
  <url><loc>https://practice.co.uk/contact/</loc></url>
  <url><loc>https://practice.co.uk/our-people/</loc></url>
</urlset>
"""

_SITEMAP_INDEX = """\
<sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
  <sitemap><loc>https://practice.co.uk/page-sitemap.xml</loc></sitemap>
  <sitemap><loc>https://practice.co.uk/post-sitemap.xml</loc></sitemap>
</sitemapindex>
"""


class TestSiteRoot:
    def test_drops_path_and_query(self) -> None:
        assert site_root("https://www.practice.co.uk/team/?x=1") == "https://www.practice.co.uk"


class TestRelevantSitemapUrls:
    def test_filters_and_orders_by_page_type(self) -> None:
        assert relevant_sitemap_urls(_SITEMAP) == [
            "https://practice.co.uk/contact/",
            "https://practice.co.uk/meet-the-team/",
            "https://practice.co.uk/about-us/",
            "https://practice.co.uk/our-people/",
        ]

    def test_sitemap_index_is_not_followed(self) -> None:
        assert relevant_sitemap_urls(_SITEMAP_INDEX) == []

    def test_html_sitemap_page_does_not_hide_other_entries(self) -> None:
        xml = (
            "<urlset><url><loc>https://practice.co.uk/sitemap/</loc></url>"
            "<url><loc>https://practice.co.uk/contact/</loc></url></urlset>"
        )
        assert relevant_sitemap_urls(xml) == ["https://practice.co.uk/contact/"]

    def test_garbage_yields_nothing(self) -> None:
        assert relevant_sitemap_urls("<html>not a sitemap</html>") == []
        assert relevant_sitemap_urls("") == []


class TestDiscoverSitemapPages:
    def test_reads_sitemap_at_site_root(self) -> None:
        with respx.mock:
            respx.get("https://practice.co.uk/sitemap.xml").mock(
                return_value=httpx.Response(200, text=_SITEMAP)
            )
            pages = discover_sitemap_pages("https://practice.co.uk/some/page")

        assert pages[0] == "https://practice.co.uk/contact/"
        assert len(pages) == 4

    def test_missing_sitemap_is_empty(self) -> None:
        with respx.mock:
            respx.get("https://practice.co.uk/sitemap.xml").mock(
                return_value=httpx.Response(404)
            )
            assert discover_sitemap_pages("https://practice.co.uk/") == []

    def test_network_failure_is_empty(self) -> None:
        with respx.mock:
            respx.get("https://practice.co.uk/sitemap.xml").mock(side_effect=httpx.ConnectError)
            assert discover_sitemap_pages("https://practice.co.uk/") == []

    def test_byte_cap_is_caller_supplied(self) -> None:
        with respx.mock:
            respx.get("https://practice.co.uk/sitemap.xml").mock(
                return_value=httpx.Response(200, text=_SITEMAP)
            )
            assert discover_sitemap_pages("https://practice.co.uk/", max_bytes=64) == []
            assert len(discover_sitemap_pages("https://practice.co.uk/", timeout=2.0)) == 4


class TestFallbackPages:
    def test_contact_pages_come_first(self) -> None:
        pages = fallback_pages("https://practice.co.uk/index.html")
        assert pages[0] == "https://practice.co.uk/contact"
        assert len(pages) == len(SECONDARY_PATHS)
        assert pages.index("https://practice.co.uk/team") < pages.index("https://practice.co.uk/about")
