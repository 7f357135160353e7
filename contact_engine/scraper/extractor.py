"""Page projections: turns fetched markup into a :class:`PageContent`."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

from contact_engine.models import PageContent, PageSource

_NON_CONTENT_TAGS = ["script", "style", "noscript", "template", "svg"]
_SUMMARY_META = ("description", "og:description")
_WS = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _collapse(text: str) -> str:
    return _WS.sub(" ", text).strip()


def _summary(soup: BeautifulSoup) -> str:
    """Return the first non-empty meta description / ``og:description`` value."""
    for meta in soup.find_all("meta"):
        key = (meta.get("name") or meta.get("property") or "").strip().lower()
        if key in _SUMMARY_META:
            content = _collapse(meta.get("content") or "")
            if content:
                return content
    return ""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_page(url: str, html: str, source: PageSource = "static") -> PageContent:
    """Parse *html* once and return its :class:`PageContent` projection.

    The visible text drops script-like elements and turns every remaining
    tag boundary into a space, so ``<h3>Principal</h3><p>Jane Doe</p>``
    reads ``"Principal Jane Doe"``.  The summary is the page's meta
    description (or ``og:description``).
    """
    soup = BeautifulSoup(html or "", "html.parser")
    summary = _summary(soup)
    for tag in soup(_NON_CONTENT_TAGS):
        tag.decompose()
    text = _collapse(soup.get_text(separator=" "))
    return PageContent(url=url, html=html or "", visible_text=text, summary=summary, source=source)
