"""Person extraction: run every strategy over a page and deduplicate."""

from __future__ import annotations

import sys
from typing import Iterable, List, Optional, Sequence, Set

from contact_engine.config import settings
from contact_engine.extract.names import is_plausible_name
from contact_engine.extract.strategies import STRATEGIES, Strategy
from contact_engine.models import PageContent, PersonCandidate


def resolve_order(order: Optional[Sequence[str]] = None) -> List[Strategy]:
    """Map strategy names to :class:`Strategy` objects, in precedence order.

    Raises:
        KeyError: If *order* names an unknown strategy.
    """
    names = order if order is not None else settings.strategy_order
    unknown = [n for n in names if n not in STRATEGIES]
    if unknown:
        raise KeyError(f"Unknown extraction strategies: {', '.join(unknown)}")
    return [STRATEGIES[n] for n in names]


def merge_persons(
    existing: Iterable[PersonCandidate], new: Iterable[PersonCandidate]
) -> List[PersonCandidate]:
    """Concatenate, keeping the first occurrence of each name (case-insensitive)."""
    seen: Set[str] = set()
    merged: List[PersonCandidate] = []
    for person in [*existing, *new]:
        key = person.name.lower()
        if key not in seen:
            seen.add(key)
            merged.append(person)
    return merged


def extract_persons(
    page: PageContent, order: Optional[Sequence[str]] = None
) -> List[PersonCandidate]:
    """Return the people named on *page*.

    Strategies run in precedence order, so when two strategies find the same
    name the earlier one's title is kept.  A strategy that raises is
    reported and skipped; the others still run.
    """
    found: List[PersonCandidate] = []
    for strategy in resolve_order(order):
        text = page.summary if strategy.source == "summary" else page.visible_text
        if not text:
            continue
        try:
            candidates = strategy.func(text)
        except Exception as exc:
            print(
                f"[EXTRACT] Strategy {strategy.name!r} failed on {page.url}: {exc}",
                file=sys.stderr,
            )
            continue
        found.extend(c for c in candidates if is_plausible_name(c.name))

    return merge_persons([], found)
