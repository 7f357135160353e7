"""Page aggregation: the one public entry point, :func:`discover_contacts`.

For one business website:

1. Fetch the home page (rendering it in a headless browser when the static
   markup is a script shell).  If this fails the whole discovery fails, as
   a structured result rather than an exception.
2. Extract emails, people and the registry details from it.
3. Walk a bounded, prioritised list of secondary pages (sitemap entries or
   fixed ``/contact``, ``/team``, ``/about``… paths), skipping any that fail,
   are thin, or are error pages, and merge what they yield.
4. Rank the merged emails and resolve claims once over the merged sets, so
   a person named on ``/team`` can own an address found on ``/contact``.

Everything is sequential within one call and nothing is shared between
calls apart from the rendering backend.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

import httpx

from contact_engine.config import settings
from contact_engine.extract.emails import business_domain, rank_emails, scan_emails
from contact_engine.extract.persons import extract_persons, merge_persons
from contact_engine.extract.registry import find_registered_address, find_registration_number
from contact_engine.models import FetchTarget, PageContent, PersonCandidate, PersonResult, ScrapeResult
from contact_engine.resolve import resolve_claims
from contact_engine.scraper.classifier import needs_rendering
from contact_engine.scraper.errors import FetchError
from contact_engine.scraper.extractor import build_page
from contact_engine.scraper.fetcher import fetch_page, make_client, normalise_url
from contact_engine.scraper.renderer import RenderBackend
from contact_engine.scraper.renderer import renderer as shared_renderer
from contact_engine.scraper.sitemap import SECONDARY_PATHS, discover_sitemap_pages, fallback_pages

_ERROR_PAGE = re.compile(
    r"\b404\s*[-:|]?\s*(?:error|not found|page)\b|\berror\s*[-:]?\s*404\b"
    r"|page not found|page cannot be found|page (?:does not|doesn't) exist",
    re.IGNORECASE,
)
# Error banners sit at the top of the page; deeper mentions are ordinary copy.
_ERROR_SCAN_CHARS = 300


@dataclass
class DiscoveryOptions:
    """Per-call knobs.  Defaults come from :data:`contact_engine.config.settings`."""

    home_timeout: float = field(default_factory=lambda: settings.home_timeout)
    secondary_timeout: float = field(default_factory=lambda: settings.secondary_timeout)
    render_timeout: float = field(default_factory=lambda: settings.render_timeout)
    max_bytes: int = field(default_factory=lambda: settings.max_response_bytes)
    max_secondary_pages: int = field(default_factory=lambda: settings.max_secondary_pages)
    render_fallback: bool = field(default_factory=lambda: settings.render_fallback)
    use_sitemap: bool = field(default_factory=lambda: settings.use_sitemap)
    early_exit: bool = field(default_factory=lambda: settings.early_exit)
    min_page_text: int = field(default_factory=lambda: settings.min_page_text)
    strategy_order: Tuple[str, ...] = field(default_factory=lambda: tuple(settings.strategy_order))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _log(message: str) -> None:
    print(f"[DISCOVER] {message}", file=sys.stderr)


def _load_page(
    url: str,
    timeout: float,
    options: DiscoveryOptions,
    backend: RenderBackend,
    client: httpx.Client,
) -> PageContent:
    """Fetch *url*, re-render it if the static markup is a script shell.

    Raises:
        FetchError: The static fetch failed.  Rendering failures never raise;
            the static markup is used instead.
    """
    fetched = fetch_page(FetchTarget(url=url, timeout=timeout, max_bytes=options.max_bytes), client)

    if options.render_fallback and needs_rendering(fetched.html):
        rendered = backend.render(fetched.url, options.render_timeout)
        if rendered:
            return build_page(fetched.url, rendered, source="rendered")
        _log(f"Rendering unavailable for {fetched.url}; using static markup")

    return build_page(fetched.url, fetched.html, source="static")


def _merge_addresses(existing: List[str], new: Iterable[str]) -> List[str]:
    merged = list(existing)
    for address in new:
        if address not in merged:
            merged.append(address)
    return merged


def _is_error_page(page: PageContent) -> bool:
    head = f"{page.summary} {page.visible_text[:_ERROR_SCAN_CHARS]}"
    return bool(_ERROR_PAGE.search(head))


def _is_settled(persons: List[PersonCandidate], addresses: List[str], domain: str) -> bool:
    """True once there is an email and a name and every name owns an email."""
    if not persons or not addresses:
        return False
    return resolve_claims(persons, rank_emails(addresses, domain)).all_claimed


def _secondary_pages(home_url: str, options: DiscoveryOptions, client: httpx.Client) -> List[str]:
    """Candidate pages in visiting order, bounded by the fixed path list size."""
    pages = []
    if options.use_sitemap:
        pages = discover_sitemap_pages(
            home_url, client, timeout=options.secondary_timeout, max_bytes=options.max_bytes
        )
    if not pages:
        pages = fallback_pages(home_url)
    home = home_url.rstrip("/")
    pages = [p for p in pages if p.rstrip("/") != home]
    return pages[:len(SECONDARY_PATHS)]


def _failure(url: str, exc: FetchError) -> ScrapeResult:
    _log(f"Discovery failed for {url}: {exc}")
    return ScrapeResult(url=url, error=exc.kind, error_detail=str(exc))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def discover_contacts(
    website_url: str,
    *,
    options: Optional[DiscoveryOptions] = None,
    renderer: Optional[RenderBackend] = None,
    client: Optional[httpx.Client] = None,
) -> ScrapeResult:
    """Discover the people, emails and claims for one business website.

    Args:
        website_url: Home page URL; ``https://`` is assumed when no scheme
            is given.
        options: Per-call overrides of the settings defaults.
        renderer: Rendering backend for script-driven pages.  Defaults to
            the process-wide shared :class:`PlaywrightRenderer`; the caller
            owns its shutdown.
        client: Optional shared ``httpx.Client``.

    Returns:
        A :class:`ScrapeResult`.  When the home page cannot be fetched,
        ``error`` holds the failure kind and every list is empty.
    """
    opts = options or DiscoveryOptions()
    backend = renderer if renderer is not None else shared_renderer

    try:
        home_url = normalise_url(website_url)
    except FetchError as exc:
        return _failure(website_url, exc)

    http = client or make_client()
    try:
        _log(f"Scraping {home_url}")
        try:
            home = _load_page(home_url, opts.home_timeout, opts, backend, http)
        except FetchError as exc:
            return _failure(home_url, exc)

        # Redirects may land on another domain, e.g. .com to .co.uk.
        domain = business_domain(home.url)
        pages_fetched = [home.url]
        rendered = home.source == "rendered"
        addresses = scan_emails(home.html)
        persons = extract_persons(home, opts.strategy_order)
        registration = find_registration_number(home.html)
        address = find_registered_address(home.html)

        for page_url in _secondary_pages(home.url, opts, http):
            # Only pages that yielded content count against the cap.
            if len(pages_fetched) > opts.max_secondary_pages:
                break
            if opts.early_exit and _is_settled(persons, addresses, domain):
                _log(f"Early exit: {len(persons)} name(s) all matched to an email")
                break
            try:
                page = _load_page(page_url, opts.secondary_timeout, opts, backend, http)
            except FetchError as exc:
                _log(f"Skipping {page_url} ({exc.kind}: {exc})")
                continue
            if len(page.visible_text) < opts.min_page_text or _is_error_page(page):
                _log(f"Skipping {page_url} (thin or error page)")
                continue

            pages_fetched.append(page.url)
            rendered = rendered or page.source == "rendered"
            addresses = _merge_addresses(addresses, scan_emails(page.html))
            page_persons = extract_persons(page, opts.strategy_order)
            if page_persons:
                _log(f"Found {len(page_persons)} name(s) on {page.url}")
            persons = merge_persons(persons, page_persons)
    finally:
        if client is None:
            http.close()

    emails = rank_emails(addresses, domain)
    resolution = resolve_claims(persons, emails)

    result = ScrapeResult(
        url=home_url,
        emails=[e.address for e in emails],
        persons=[
            PersonResult(name=p.name, title=p.title, claimed_email=resolution.claimed_email_for(p))
            for p in resolution.ordered_persons
        ],
        claims=resolution.claims,
        registration_identifier=registration,
        registered_address=address,
        pages_fetched=pages_fetched,
        rendered=rendered,
    )
    _log(
        f"Done {home_url}: {len(result.persons)} name(s), {len(result.emails)} email(s), "
        f"{len(result.claims)} claimed"
    )
    return result
