"""Secondary-page discovery: relevant ``sitemap.xml`` entries or fixed paths."""

from __future__ import annotations

import re
import sys
import urllib.parse
from typing import List, Optional

import httpx

from contact_engine.config import settings
from contact_engine.models import FetchTarget
from contact_engine.scraper.errors import FetchError
from contact_engine.scraper.fetcher import fetch_page

# Contact pages first (email + names), then team, then about.
SECONDARY_PATHS = (
    "/contact",
    "/contact-us",
    "/contactus",
    "/team",
    "/meet-the-team",
    "/our-team",
    "/staff",
    "/people",
    "/directors",
    "/about",
    "/about-us",
    "/aboutus",
    "/blog",
    "/news",
)

_RELEVANT_KEYWORDS = ("team", "about", "contact", "staff", "people", "directors", "meet")
_CDATA = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)
_LOC = re.compile(r"<loc>\s*(.*?)\s*</loc>", re.IGNORECASE | re.DOTALL)
_INDEX_ROOT = re.compile(r"<(?:\w+:)?sitemapindex\b", re.IGNORECASE)


def site_root(url: str) -> str:
    """``https://www.example.co.uk/any/path`` → ``https://www.example.co.uk``."""
    parsed = urllib.parse.urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def _priority(url: str) -> int:
    path = url.lower()
    if "contact" in path:
        return 1
    if "team" in path or "meet" in path:
        return 2
    if "about" in path:
        return 3
    return 4


def relevant_sitemap_urls(xml: str) -> List[str]:
    """Pick contact/team/about-style page URLs out of a sitemap document.

    A ``<sitemapindex>`` document (entries pointing at further sitemaps)
    is not followed and yields an empty list.
    """
    cleaned = _CDATA.sub(r"\1", xml or "")
    if _INDEX_ROOT.search(cleaned):
        return []
    urls = [u.strip() for u in _LOC.findall(cleaned) if u.strip()]

    relevant = [u for u in urls if any(k in u.lower() for k in _RELEVANT_KEYWORDS)]
    return sorted(relevant, key=_priority)


def discover_sitemap_pages(
    base_url: str,
    client: Optional[httpx.Client] = None,
    timeout: Optional[float] = None,
    max_bytes: Optional[int] = None,
) -> List[str]:
    """Return relevant page URLs from ``<root>/sitemap.xml``, or ``[]``.

    *timeout* and *max_bytes* default to the secondary-page settings.
    """
    sitemap_url = f"{site_root(base_url)}/sitemap.xml"
    target = FetchTarget(
        url=sitemap_url,
        timeout=timeout if timeout is not None else settings.secondary_timeout,
        max_bytes=max_bytes if max_bytes is not None else settings.max_response_bytes,
    )
    try:
        page = fetch_page(target, client)
    except FetchError as exc:
        print(f"[DISCOVER] No sitemap at {sitemap_url} ({exc.kind})", file=sys.stderr)
        return []

    urls = relevant_sitemap_urls(page.html)
    if urls:
        print(f"[DISCOVER] Sitemap lists {len(urls)} relevant page(s)", file=sys.stderr)
    return urls


def fallback_pages(base_url: str) -> List[str]:
    root = site_root(base_url)
    return [f"{root}{path}" for path in SECONDARY_PATHS]
