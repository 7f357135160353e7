"""Contact discovery engine: people, emails and claims from a business website."""

from contact_engine.aggregator import DiscoveryOptions, discover_contacts
from contact_engine.models import ScrapeResult

__all__ = ["DiscoveryOptions", "ScrapeResult", "discover_contacts"]
