"""Data models shared by the fetch, extraction and resolution stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Literal, Optional

PageSource = Literal["static", "rendered"]


@dataclass(frozen=True)
class FetchTarget:
    """A URL plus the budget one fetch of it may spend."""

    url: str
    timeout: float
    max_bytes: int


@dataclass
class FetchedPage:
    """The raw HTTP response body for a single fetch, after redirects."""

    url: str
    html: str
    status_code: int


@dataclass
class PageContent:
    """One fetched page, ready for extraction."""

    url: str
    html: str
    visible_text: str
    summary: str = ""
    source: PageSource = "static"


@dataclass(frozen=True)
class EmailCandidate:
    """A filtered, lower-cased address and its relevance rank (lower is better)."""

    address: str
    rank: int

    @property
    def local_part(self) -> str:
        return self.address.split("@", 1)[0]

    @property
    def domain(self) -> str:
        return self.address.split("@", 1)[1]


@dataclass(frozen=True)
class PersonCandidate:
    """A name found on a page, with the title the finding strategy assigned."""

    name: str
    title: Optional[str] = None
    strategy: str = ""

    @property
    def first_name(self) -> str:
        return self.name.split()[0]

    @property
    def last_name(self) -> str:
        return self.name.split()[-1]


@dataclass(frozen=True)
class Claim:
    """An exclusive pairing of one person to one email."""

    person: PersonCandidate
    email: EmailCandidate


@dataclass
class PersonResult:
    name: str
    title: Optional[str]
    claimed_email: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "claimedEmail": self.claimed_email,
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ScrapeResult:
    """Everything discovered for one business in one invocation."""

    url: str
    emails: List[str] = field(default_factory=list)
    persons: List[PersonResult] = field(default_factory=list)
    claims: List[Claim] = field(default_factory=list)
    registration_identifier: Optional[str] = None
    registered_address: Optional[str] = None
    pages_fetched: List[str] = field(default_factory=list)
    rendered: bool = False
    fetched_at: datetime = field(default_factory=_utcnow)
    error: Optional[str] = None
    error_detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready external shape."""
        return {
            "url": self.url,
            "emails": list(self.emails),
            "persons": [p.to_dict() for p in self.persons],
            "registrationIdentifier": self.registration_identifier,
            "registeredAddress": self.registered_address,
            "pagesFetched": list(self.pages_fetched),
            "rendered": self.rendered,
            "fetchedAt": self.fetched_at.isoformat(),
            "error": self.error,
            "errorDetail": self.error_detail,
        }
