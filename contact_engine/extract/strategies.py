"""Independent name-finding strategies.

Each strategy is a plain ``(text) -> list[PersonCandidate]`` function that
knows one way names appear on small-business sites.  Strategies do not see
one another's output; :func:`contact_engine.extract.persons.extract_persons`
runs them in precedence order and deduplicates.

Name words are matched case-sensitively (``[A-Z][a-z]+``); the keywords
around them are matched case-insensitively via scoped ``(?i:...)`` groups.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Literal

from contact_engine.extract.names import best_name, is_plausible_name
from contact_engine.models import PersonCandidate

StrategyFunc = Callable[[str], List[PersonCandidate]]


@dataclass(frozen=True)
class Strategy:
    """A named strategy and the page field it reads (``summary`` or ``body``)."""

    name: str
    source: Literal["summary", "body"]
    func: StrategyFunc


# ---------------------------------------------------------------------------
# Shared pattern fragments
# ---------------------------------------------------------------------------
_HONORIFIC = r"(?:(?:Dr|Mr|Mrs|Ms|Miss|Prof)\.?\s+)"
_WORD = r"[A-Z][a-z]+"

_QUALIFICATIONS = (
    "BDS|MBChB|MBBS|MD|PhD|BSc|MSc|MFDS|MJDF|RCS|NVQ|"
    "ACCA|ACA|FCA|FCCA|ATT|CTA|CIMA|CIPFA"
)

_BUSINESS_ROLES = (
    "managing director|co-founder|principal|owner|founder|director|ceo|"
    "proprietor|partner"
)

# Longest phrases first so "Practice Manager" wins over "Manager".
_JOB_PHRASES = (
    "practice manager|office manager|lead nurse|senior nurse|dental nurse|"
    "dental hygienist|dental therapist|dental surgeon|receptionist|manager|"
    "director|owner|founder|partner|associate|hygienist|therapist|nurse|"
    "dentist|surgeon|administrator|accountant|bookkeeper|consultant|engineer|"
    "plumber|electrician|builder|chef|stylist|barber|technician|specialist|"
    "coordinator|officer"
)

# Words that belong to a compound job title rather than to the name,
# as in "Paul Brown Tax Director".
_JOB_PREFIXES = frozenset(
    """
    Tax Operations Sales Marketing Managing Senior Junior Chief Executive
    Finance Technical Practice Office Business Client Accounts Payroll Audit
    """.split()
)

_REGULATORS = r"GDC|GMC|NMC|GPhC|HCPC"

_ACRONYMS = {"ceo": "CEO", "co-founder": "Co-Founder"}


def _role_title(raw: str) -> str:
    """Normalise a matched role phrase: ``"practice  manager"`` → ``"Practice Manager"``."""
    key = " ".join(raw.split()).lower()
    if key in _ACRONYMS:
        return _ACRONYMS[key]
    return " ".join(w.capitalize() for w in key.split(" "))


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

_SUMMARY_RE = re.compile(rf"\bDr\.?\s+(?P<name>{_WORD}(?: {_WORD}){{1,2}})")


def find_summary_names(text: str) -> List[PersonCandidate]:
    """``Dr <Name>`` inside a page's curated meta description."""
    found: List[PersonCandidate] = []
    for m in _SUMMARY_RE.finditer(text):
        name = best_name(m.group("name").split(" "), anchor="left")
        if name:
            found.append(PersonCandidate(name=name, title="Dr", strategy="summary"))
    return found


_QUALIFICATION_RE = re.compile(
    rf"\b(?P<name>{_WORD}(?: {_WORD}){{1,3}}?)\s*[|–—,]?\s*"
    rf"\b(?P<qual>{_QUALIFICATIONS})\b"
)


def find_qualified_names(text: str) -> List[PersonCandidate]:
    """A name followed by a post-nominal: ``Christopher Needham BDS``."""
    found: List[PersonCandidate] = []
    for m in _QUALIFICATION_RE.finditer(text):
        name = best_name(m.group("name").split(" "), anchor="right")
        if name:
            found.append(
                PersonCandidate(name=name, title=m.group("qual"), strategy="qualification")
            )
    return found


_ROLE_THEN_NAME_RE = re.compile(
    rf"\b(?P<role>(?i:{_BUSINESS_ROLES}))\b[\s:,\-–—]+{_HONORIFIC}?"
    rf"(?P<name>{_WORD}(?: {_WORD}){{1,2}})"
)
_NAME_THEN_ROLE_RE = re.compile(
    rf"{_HONORIFIC}?\b(?P<name>{_WORD}(?: {_WORD}){{1,2}}?)[\s,\-–—]+"
    rf"(?P<role>(?i:{_BUSINESS_ROLES}))\b"
)


def find_titled_names(text: str) -> List[PersonCandidate]:
    """A business role word directly before or after a name.

    ``Principal Christopher Needham`` / ``Sarah Johnson, Owner``.
    """
    found: List[PersonCandidate] = []
    for m in _ROLE_THEN_NAME_RE.finditer(text):
        name = best_name(m.group("name").split(" "), anchor="left")
        if name:
            found.append(
                PersonCandidate(name=name, title=_role_title(m.group("role")), strategy="title_first")
            )
    for m in _NAME_THEN_ROLE_RE.finditer(text):
        name = best_name(m.group("name").split(" "), anchor="right")
        if name:
            found.append(
                PersonCandidate(name=name, title=_role_title(m.group("role")), strategy="title_first")
            )
    return found


_NARRATIVE_RE = re.compile(
    rf"\b(?i:founded|started|established|owned|run|led)\s+(?i:by)\s+{_HONORIFIC}?"
    rf"(?P<name>{_WORD}(?: {_WORD}){{1,2}})"
)


def find_narrative_names(text: str) -> List[PersonCandidate]:
    """``...was founded by Sarah Johnson in 1998``."""
    found: List[PersonCandidate] = []
    for m in _NARRATIVE_RE.finditer(text):
        name = best_name(m.group("name").split(" "), anchor="left")
        if name:
            found.append(PersonCandidate(name=name, title="Founder", strategy="narrative"))
    return found


_COMPOUND_TITLE_RE = re.compile(
    rf"\b(?P<name>{_WORD} {_WORD}) (?P<middle>{_WORD}) "
    r"(?P<role>Director|Manager|Accountant|Partner|Officer)\b"
)
_JOB_INDICATOR_RE = re.compile(
    rf"\b(?P<name>{_WORD} {_WORD}) (?P<role>(?i:{_JOB_PHRASES}))\b"
)


def find_job_indicator_names(text: str) -> List[PersonCandidate]:
    """A two-word name directly followed by a job title.

    ``Amanda Lynam Practice Manager``, ``Zoe Tierney Receptionist``.  In
    ``Paul Brown Tax Director`` the middle word is a title prefix; in
    ``Mary Ann Smith Director`` it is part of the name.
    """
    found: List[PersonCandidate] = []
    compound_spans = []
    for m in _COMPOUND_TITLE_RE.finditer(text):
        middle, role = m.group("middle"), m.group("role")
        if middle in _JOB_PREFIXES:
            name, title = m.group("name"), f"{middle} {role}"
        else:
            name, title = f"{m.group('name')} {middle}", role
        if is_plausible_name(name):
            found.append(PersonCandidate(name=name, title=title, strategy="proximity"))
            compound_spans.append(m.span())

    for m in _JOB_INDICATOR_RE.finditer(text):
        # "Brown Tax Director" inside "Paul Brown Tax Director" is already taken
        if any(start <= m.start() < end for start, end in compound_spans):
            continue
        name = m.group("name")
        if is_plausible_name(name):
            found.append(
                PersonCandidate(name=name, title=_role_title(m.group("role")), strategy="proximity")
            )
    return found


# Zero-width so every word start is tried, not just the first in a run.
_REGULATORY_RE = re.compile(
    rf"(?<![A-Za-z])(?=(?P<name>{_WORD} {_WORD})\b[A-Za-z\s\-–:,()]{{0,30}}?"
    rf"\b(?:{_REGULATORS})\s+(?i:registration\s+)?(?i:number|no\.?|pin)\b)"
)


def find_registered_professionals(text: str) -> List[PersonCandidate]:
    """A name shortly before a professional-register number.

    ``Barbara Woodall Dental Hygienist - GDC Number 12345``.
    """
    found: List[PersonCandidate] = []
    for m in _REGULATORY_RE.finditer(text):
        name = m.group("name")
        if is_plausible_name(name):
            found.append(PersonCandidate(name=name, title="Professional", strategy="regulatory"))
    return found


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

STRATEGIES: Dict[str, Strategy] = {
    s.name: s
    for s in (
        Strategy("summary", "summary", find_summary_names),
        Strategy("qualification", "body", find_qualified_names),
        Strategy("title_first", "body", find_titled_names),
        Strategy("narrative", "body", find_narrative_names),
        Strategy("proximity", "body", find_job_indicator_names),
        Strategy("regulatory", "body", find_registered_professionals),
    )
}
