"""Name-shape validation shared by every person-extraction strategy.

A plausible name is 2–4 capitalised words (``Jane``, ``Needham``) of 5–40
characters in total that does not start with a sentence opener or role
word, does not carry a qualification where a surname should be, and does
not contain an organisational noun.  The word lists below are tuned on UK
small-business sites (dental practices, accountants, trades).
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

MIN_NAME_LENGTH = 5
MAX_NAME_LENGTH = 40
MIN_WORDS = 2
MAX_WORDS = 4

_WORD_SHAPE = re.compile(r"^[A-Z][a-z]+$")

# Capitalised words that open sentences or headings, and role/industry
# words that precede a real name.  Compared lower-cased on the first word.
LEADING_STOPWORDS = frozenset(
    """
    about accepts achieved acts address also become best book british business
    call care certified change chartered chief client clinical committed company
    completed contact continued contractor current dear dental development
    dentist digital director doctor email enhanced enjoys excellent executive
    extended external finance finds founder friendly gained general graduated
    hello here home internal joined lives linkedin main manager marketing media
    meet message modern moved national nurse offers operations our owner partner
    passed practice principal professional provides qualified read receptionist
    registered relaxed returned sales says senior service several social special
    spent sports successful team technical the their treatment umbrella uses
    visit visiting website welcome works working taking playing going doing
    making having being getting coming looking gdc gmc nmc solutions
    """.split()
)

# Post-nominal credentials that regexes mistake for surnames
QUALIFICATIONS = frozenset(
    """
    bds mbbs mbchb md phd bsc msc ba ma mfds mjdf rcs nvq eng acca aca fca fcca
    att cta cima cipfa frcs mrcs gdc
    """.split()
)

# Organisational, role and heading nouns that never follow a first name
TRAILING_STOPWORDS = frozenset(
    """
    about accountancy accounting associates care certificate client clinic college
    company contact degree dental development diploma director email executive
    general group holdings insurance junior lead limited linkedin ltd management
    managing manager marketing media number officer operations partnership
    practice professional sales school senior service services solutions surgery
    team university website change
    tax finance technical office business accounts payroll audit chief
    """.split()
)

# Function words and the pronouns that open the next sentence once tags
# are flattened ("Christopher Needham We have been...")
_FUNCTION_WORDS = frozenset(
    """
    the and as an of in on at to for with from by
    we our us you your they their them he she his her it its this that
    """.split()
)


def is_plausible_name(name: Optional[str]) -> bool:
    """Return ``True`` if *name* looks like an ordinary person's full name."""
    if not name:
        return False
    if not MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH:
        return False

    words = name.split(" ")
    if not MIN_WORDS <= len(words) <= MAX_WORDS:
        return False
    if not all(_WORD_SHAPE.match(w) for w in words):
        return False

    lowered = [w.lower() for w in words]
    if lowered[0] in LEADING_STOPWORDS:
        return False
    if any(w in QUALIFICATIONS for w in lowered[1:]):
        return False
    if any(w in TRAILING_STOPWORDS for w in lowered[1:]):
        return False
    return not any(w in _FUNCTION_WORDS for w in lowered)


def best_name(words: Sequence[str], anchor: str) -> Optional[str]:
    """Return the longest plausible name inside a captured word run.

    Regex captures are greedy, so a run often carries a neighbouring word
    (``"Meet Jane Doe"`` before a qualification, ``"Jane Doe Email"`` after a
    role word).  Words are dropped from the side *away* from the keyword that
    anchored the match: ``anchor="right"`` keeps the words nearest the right
    end (keyword follows the name), ``anchor="left"`` the words nearest the
    left end (keyword precedes it).
    """
    words = list(words)
    for size in range(min(len(words), MAX_WORDS), MIN_WORDS - 1, -1):
        window = words[-size:] if anchor == "right" else words[:size]
        candidate = " ".join(window)
        if is_plausible_name(candidate):
            return candidate
    return None


def split_name(full_name: Optional[str]) -> Tuple[str, str]:
    """Split a validated name into ``(first, rest)``.

    Returns ``("", "")`` when *full_name* fails validation, so callers never
    address someone as "Dear Chartered".
    """
    cleaned = " ".join((full_name or "").split())
    if not is_plausible_name(cleaned):
        return "", ""
    parts: List[str] = cleaned.split(" ")
    return parts[0], " ".join(parts[1:])
