"""Scraper package: page fetch, render-need detection and rendering fallback."""

from contact_engine.scraper.classifier import needs_rendering
from contact_engine.scraper.errors import FetchError
from contact_engine.scraper.extractor import build_page
from contact_engine.scraper.fetcher import fetch_page, make_client, normalise_url
from contact_engine.scraper.renderer import PlaywrightRenderer, RenderBackend

__all__ = [
    "FetchError",
    "PlaywrightRenderer",
    "RenderBackend",
    "build_page",
    "fetch_page",
    "make_client",
    "needs_rendering",
    "normalise_url",
]
