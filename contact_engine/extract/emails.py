"""Email extraction: scan markup for addresses, filter junk, rank by relevance."""

from __future__ import annotations

import html
import re
import urllib.parse
from typing import Iterable, List, Set

from contact_engine.models import EmailCandidate

_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}")

_IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png", ".gif", ".svg", ".webp", ".bmp", ".ico", ".tiff")
# "300x125@2x.png" style artifacts from responsive image filenames
_DIMENSION_BEFORE_AT = re.compile(r"\d+x\d+@")
_RETINA_AFTER_AT = re.compile(r"@\d+x\.")

# Error-reporting and website-builder infrastructure, never a business inbox
PLATFORM_DOMAINS = (
    "sentry.io",
    "sentry.wixpress.com",
    "sentry-next.wixpress.com",
    "wixpress.com",
    "wix.com",
    "squarespace.com",
    "weebly.com",
    "shopify.com",
    "wordpress.com",
    "tumblr.com",
    "blogger.com",
    "medium.com",
    "godaddy.com",
)

_GENERIC_LOCAL_PARTS = {"noreply", "no-reply", "donotreply", "do-not-reply", "example", "test"}
_PLACEHOLDER_DOMAIN = re.compile(r"^(example|domain|test|mailservice)\.(com|net|org|co\.uk)$")

RANK_CONTACT = 1
RANK_HELLO = 2
RANK_BUSINESS = 3
RANK_OTHER = 10


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

def _clean(token: str) -> str:
    return token.strip(" \t\r\n\"'<>[](){}.,;:").lower()


def _is_image_artifact(address: str) -> bool:
    if address.endswith(_IMAGE_SUFFIXES):
        return True
    return bool(_DIMENSION_BEFORE_AT.search(address) or _RETINA_AFTER_AT.search(address))


def _is_platform(domain: str) -> bool:
    return any(domain == p or domain.endswith("." + p) for p in PLATFORM_DOMAINS)


def _is_generic(local: str, domain: str) -> bool:
    return local in _GENERIC_LOCAL_PARTS or bool(_PLACEHOLDER_DOMAIN.match(domain))


def is_usable_email(address: str) -> bool:
    """Return ``True`` if *address* may become an :class:`EmailCandidate`."""
    if not address or "@" not in address or len(address) > 254:
        return False
    local, _, domain = address.partition("@")
    if not local or not domain:
        return False
    if _is_image_artifact(address):
        return False
    if _is_platform(domain):
        return False
    return not _is_generic(local, domain)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def business_domain(website_url: str) -> str:
    """Return the host of *website_url* without a leading ``www.``."""
    raw = (website_url or "").strip()
    if "://" not in raw:
        raw = "https://" + raw
    host = (urllib.parse.urlparse(raw).hostname or "").lower()
    return host[4:] if host.startswith("www.") else host


def scan_emails(markup: str) -> List[str]:
    """Return usable addresses in *markup*, deduplicated, in first-seen order.

    Entity-escaped (``&#64;``) and URL-encoded (``%20info@``) forms are
    decoded before scanning.
    """
    if not markup:
        return []

    text = urllib.parse.unquote(html.unescape(markup))
    seen: Set[str] = set()
    found: List[str] = []
    for match in _EMAIL_RE.finditer(text):
        address = _clean(match.group(0))
        if address in seen or not is_usable_email(address):
            continue
        seen.add(address)
        found.append(address)
    return found


def rank_email(address: str, domain: str) -> int:
    """Relevance rank of *address* for a business at *domain* (lower is better)."""
    local, _, email_domain = address.lower().partition("@")
    if domain and email_domain in (domain, f"www.{domain}"):
        if "contact" in local or "info" in local:
            return RANK_CONTACT
        if "hello" in local or "enquir" in local:
            return RANK_HELLO
        return RANK_BUSINESS
    return RANK_OTHER


def rank_emails(addresses: Iterable[str], domain: str) -> List[EmailCandidate]:
    """Rank *addresses* ascending; equal ranks keep their input order."""
    candidates = [EmailCandidate(address=a, rank=rank_email(a, domain)) for a in addresses]
    return sorted(candidates, key=lambda c: c.rank)


def extract_emails(markup: str, domain: str) -> List[EmailCandidate]:
    """Scan, filter and rank the addresses in one page of *markup*."""
    return rank_emails(scan_emails(markup), domain)
