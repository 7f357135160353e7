"""Identity resolution: decide which person, if any, owns which email.

The core property is exclusivity.  Once an address is claimed it leaves the
pool for the rest of the resolution, so two people can never be reported
as owning the same inbox.  The pool lives in a :class:`ClaimLedger` created
per call, so concurrent resolutions for different businesses share nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from contact_engine.models import Claim, EmailCandidate, PersonCandidate

# Title keywords → role inbox local parts, senior roles first.
ROLE_INBOXES: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    (("practice manager", "office manager"), ("pm", "manager", "office")),
    (("owner", "proprietor", "founder", "principal"), ("owner", "director", "ceo")),
    (("director",), ("director", "md")),
    (("reception",), ("reception", "front")),
)


def personal_local_parts(person: PersonCandidate) -> List[str]:
    """Personal inbox shapes for *person*, most specific first.

    ``Christopher Needham`` → ``christopher.needham``, ``christopherneedham``,
    ``christopher``, ``cneedham``, ``c.needham``.
    """
    first = person.first_name.lower()
    last = person.last_name.lower()
    return [
        f"{first}.{last}",
        f"{first}{last}",
        first,
        f"{first[0]}{last}",
        f"{first[0]}.{last}",
    ]


def role_local_parts(title: Optional[str]) -> List[str]:
    """Role inbox shapes for a job *title* (empty when the title has none)."""
    if not title:
        return []
    lowered = title.lower()
    for keywords, local_parts in ROLE_INBOXES:
        if any(k in lowered for k in keywords):
            return list(local_parts)
    return []


@dataclass
class ClaimLedger:
    """The unclaimed email pool and the claims made so far, for one resolution."""

    pool: List[EmailCandidate] = field(default_factory=list)
    claims: List[Claim] = field(default_factory=list)

    @classmethod
    def open(cls, emails: Sequence[EmailCandidate]) -> "ClaimLedger":
        """Start a ledger whose pool is *emails* in rank order (best first)."""
        return cls(pool=sorted(emails, key=lambda e: e.rank))

    def find(self, local_parts: Sequence[str]) -> Optional[EmailCandidate]:
        """First unclaimed email whose local part equals one of *local_parts*.

        *local_parts* are tried in order; for each, the pool is scanned best
        rank first.
        """
        for local in local_parts:
            for email in self.pool:
                if email.local_part == local:
                    return email
        return None

    def claim(self, person: PersonCandidate, email: EmailCandidate) -> Claim:
        """Record *person* as the owner of *email* and remove it from the pool.

        Raises:
            ValueError: If *email* is already claimed or *person* already
                holds a claim.
        """
        if email not in self.pool:
            raise ValueError(f"{email.address} is not available to claim")
        if any(c.person.name.lower() == person.name.lower() for c in self.claims):
            raise ValueError(f"{person.name} already holds a claim")
        self.pool.remove(email)
        claim = Claim(person=person, email=email)
        self.claims.append(claim)
        return claim


@dataclass
class Resolution:
    """Outcome of one resolution pass."""

    persons: List[PersonCandidate]
    claims: List[Claim]
    unclaimed_emails: List[EmailCandidate]

    def _by_name(self) -> Dict[str, str]:
        return {c.person.name.lower(): c.email.address for c in self.claims}

    def claimed_email_for(self, person: PersonCandidate) -> Optional[str]:
        return self._by_name().get(person.name.lower())

    @property
    def unclaimed_persons(self) -> List[PersonCandidate]:
        claimed = self._by_name()
        return [p for p in self.persons if p.name.lower() not in claimed]

    @property
    def ordered_persons(self) -> List[PersonCandidate]:
        """Claimed persons first, each group in original candidate order."""
        claimed = self._by_name()
        return [p for p in self.persons if p.name.lower() in claimed] + self.unclaimed_persons

    @property
    def all_claimed(self) -> bool:
        return bool(self.persons) and len(self.claims) == len(self.persons)


def match_email(person: PersonCandidate, ledger: ClaimLedger) -> Optional[EmailCandidate]:
    """Best unclaimed email for *person*: personal shapes, then role inboxes."""
    email = ledger.find(personal_local_parts(person))
    if email is None:
        email = ledger.find(role_local_parts(person.title))
    return email


def resolve_claims(
    persons: Sequence[PersonCandidate], emails: Sequence[EmailCandidate]
) -> Resolution:
    """Assign emails to *persons* in candidate order, first match wins.

    Args:
        persons: Deduplicated candidates in precedence order.
        emails: Ranked candidates for the same business.

    Returns:
        A :class:`Resolution`; unmatched persons are kept, just unclaimed.
    """
    ledger = ClaimLedger.open(emails)
    for person in persons:
        email = match_email(person, ledger)
        if email is not None:
            ledger.claim(person, email)
    return Resolution(persons=list(persons), claims=list(ledger.claims), unclaimed_emails=list(ledger.pool))
