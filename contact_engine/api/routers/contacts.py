"""Contact discovery endpoint.

Routes
------
POST /contacts/discover    Body: {"url": "https://...", ...}    → discover_contacts
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, HttpUrl

from contact_engine.aggregator import DiscoveryOptions, discover_contacts

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class DiscoverRequest(BaseModel):
    url: HttpUrl
    render: Optional[bool] = None
    use_sitemap: Optional[bool] = None
    max_pages: Optional[int] = Field(default=None, ge=0, le=20)


class PersonResponse(BaseModel):
    name: str
    title: Optional[str] = None
    claimedEmail: Optional[str] = None


class DiscoverResponse(BaseModel):
    url: str
    emails: list[str]
    persons: list[PersonResponse]
    registrationIdentifier: Optional[str] = None
    registeredAddress: Optional[str] = None
    pagesFetched: list[str]
    rendered: bool
    fetchedAt: str
    error: Optional[str] = None
    errorDetail: Optional[str] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _options(body: DiscoverRequest) -> DiscoveryOptions:
    options = DiscoveryOptions()
    if body.render is not None:
        options.render_fallback = body.render
    if body.use_sitemap is not None:
        options.use_sitemap = body.use_sitemap
    if body.max_pages is not None:
        options.max_secondary_pages = body.max_pages
    return options


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/discover", response_model=DiscoverResponse)
def discover_endpoint(body: DiscoverRequest) -> dict[str, Any]:
    """Scrape a business website and return its people, emails and claims.

    Returns 502 when the home page itself cannot be fetched; the detail
    carries the failure kind (``network``, ``timeout``, ``status``,
    ``oversized``).
    """
    result = discover_contacts(str(body.url), options=_options(body))
    if not result.ok:
        raise HTTPException(
            status_code=502,
            detail={"error": result.error, "errorDetail": result.error_detail},
        )
    return result.to_dict()
