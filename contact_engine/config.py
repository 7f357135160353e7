"""Centralised settings for the contact discovery engine.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

DEFAULT_STRATEGY_ORDER = (
    "summary",
    "qualification",
    "title_first",
    "narrative",
    "proximity",
    "regulatory",
)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "y", "on")


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name)
    if not raw:
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------
    home_timeout: float = field(
        default_factory=lambda: float(os.environ.get("HOME_TIMEOUT", "10.0"))
    )
    secondary_timeout: float = field(
        default_factory=lambda: float(os.environ.get("SECONDARY_TIMEOUT", "5.0"))
    )
    max_response_bytes: int = field(
        default_factory=lambda: int(os.environ.get("MAX_RESPONSE_BYTES", str(1024 * 1024)))
    )
    max_redirects: int = field(
        default_factory=lambda: int(os.environ.get("MAX_REDIRECTS", "5"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "USER_AGENT",
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36",
        )
    )

    # ------------------------------------------------------------------
    # Rendering fallback (headless Chromium)
    # ------------------------------------------------------------------
    render_fallback: bool = field(
        default_factory=lambda: _env_bool("RENDER_FALLBACK", True)
    )
    render_timeout: float = field(
        default_factory=lambda: float(os.environ.get("RENDER_TIMEOUT", "15.0"))
    )

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------
    max_secondary_pages: int = field(
        default_factory=lambda: int(os.environ.get("MAX_SECONDARY_PAGES", "8"))
    )
    use_sitemap: bool = field(
        default_factory=lambda: _env_bool("USE_SITEMAP", True)
    )
    early_exit: bool = field(
        default_factory=lambda: _env_bool("EARLY_EXIT", True)
    )
    min_page_text: int = field(
        default_factory=lambda: int(os.environ.get("MIN_PAGE_TEXT", "200"))
    )

    # ------------------------------------------------------------------
    # Person extraction
    # ------------------------------------------------------------------
    strategy_order: tuple[str, ...] = field(
        default_factory=lambda: _env_list("STRATEGY_ORDER", DEFAULT_STRATEGY_ORDER)
    )


# Module-level singleton, import this everywhere:
#   from contact_engine.config import settings
settings = Settings()
