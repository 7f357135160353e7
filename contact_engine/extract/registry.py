"""Auxiliary single-pattern scans: company registration number and registered address.

Both target UK small-business footers ("Registered in England and Wales
No. 01234567", "Registered Office: 1 High Street, Stockport SK7 1AA").
"""

from __future__ import annotations

import html as html_lib
import re
from typing import Optional

_TAG = re.compile(r"<[^>]+>")
_WS = re.compile(r"\s+")

_REGISTRATION_PATTERNS = [
    re.compile(r"Company\s+(?:Registration\s+)?(?:No\.?|Number)[\s:]+(\d{8})\b", re.I),
    re.compile(r"Registered\s+(?:No\.?|Number)[\s:]+(\d{8})\b", re.I),
    re.compile(r"Registration\s+(?:No\.?|Number)[\s:]+(\d{8})\b", re.I),
    re.compile(r"Registered\s+in\s+England\s+(?:(?:and|&)\s+Wales\s+)?(?:No\.?|Number)?[\s:]*(\d{8})\b", re.I),
    re.compile(r"Companies\s+House\s+(?:No\.?|Number)?[\s:]*(\d{8})\b", re.I),
    re.compile(r"\bCompany\b[^<]{0,30}?\b(\d{8})\b", re.I),
    re.compile(r"\bRegistered\b[^<]{0,30}?\b(\d{8})\b", re.I),
]

_ADDRESS_PATTERNS = [
    re.compile(
        r"Registered\s+(?:Office|Address)[\s:]+"
        r"(.{20,200}?(?:United\s+Kingdom|\bUK\b|\b[A-Z]{1,2}\d[A-Z\d]?\s*\d[A-Z]{2}\b))",
        re.I,
    ),
]

MAX_ADDRESS_LENGTH = 200


def _flatten(html: str) -> str:
    return _WS.sub(" ", html_lib.unescape(_TAG.sub(" ", html)))


def find_registration_number(html: str) -> Optional[str]:
    """Return the first 8-digit company number near a registration phrase."""
    if not html:
        return None
    text = _flatten(html)
    for pattern in _REGISTRATION_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def find_registered_address(html: str) -> Optional[str]:
    """Return the text after "Registered Office/Address" up to a UK postcode or "UK"."""
    if not html:
        return None
    text = _flatten(html)
    for pattern in _ADDRESS_PATTERNS:
        match = pattern.search(text)
        if match:
            address = _WS.sub(" ", match.group(1)).strip(" ,:")
            return address[:MAX_ADDRESS_LENGTH]
    return None
