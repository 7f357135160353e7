"""Extraction package: emails, people and registry details from page content."""

from contact_engine.extract.emails import business_domain, extract_emails, rank_emails, scan_emails
from contact_engine.extract.names import is_plausible_name, split_name
from contact_engine.extract.persons import extract_persons, merge_persons
from contact_engine.extract.registry import find_registered_address, find_registration_number

__all__ = [
    "business_domain",
    "extract_emails",
    "extract_persons",
    "find_registered_address",
    "find_registration_number",
    "is_plausible_name",
    "merge_persons",
    "rank_emails",
    "scan_emails",
    "split_name",
]
