"""Render-need heuristics: does static markup hold enough text to extract from?"""

from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Script-driven shell markers (website builders and SPA frameworks)
# ---------------------------------------------------------------------------
FRAMEWORK_MARKERS = (
    # Wix
    "wix-warmup-data",
    "wixCssCustom",
    "X-Wix-",
    "wix-site",
    "wixCodeInit",
    "thunderbolt-",
    # Squarespace
    "data-layout-label",
    "squarespace.com/universal",
    "sqs-block",
    # SPA shells
    "__NEXT_DATA__",
    "__NUXT__",
    "ng-version=",
    "data-reactroot",
)

MARKER_TEXT_THRESHOLD = 500
LARGE_HTML_THRESHOLD = 10_000
THIN_TEXT_THRESHOLD = 200

_SCRIPT_STYLE = re.compile(r"<(script|style)[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG = re.compile(r"<[^>]+>")
_WS = re.compile(r"\s+")


def visible_text_length(html: str) -> int:
    """Length of *html* once script/style blocks and tags are stripped."""
    no_scripts = _SCRIPT_STYLE.sub("", html)
    stripped = _TAG.sub(" ", no_scripts)
    return len(_WS.sub(" ", stripped).strip())


def find_marker(html: str) -> str | None:
    """Return the first framework marker present in *html*, if any."""
    for marker in FRAMEWORK_MARKERS:
        if marker in html:
            return marker
    return None


def needs_rendering(html: str) -> bool:
    """Return ``True`` if *html* should be re-fetched with a headless browser.

    Two independent signals:

    * a known framework marker **and** under 500 characters of visible text;
    * more than 10 000 characters of markup **and** under 200 characters of
      visible text, whatever produced it.

    Content-rich pages never qualify, even when a marker string appears.
    """
    if not html or not isinstance(html, str):
        return False

    text_len = visible_text_length(html)

    if find_marker(html) is not None and text_len < MARKER_TEXT_THRESHOLD:
        return True

    if len(html) > LARGE_HTML_THRESHOLD and text_len < THIN_TEXT_THRESHOLD:
        return True

    return False
