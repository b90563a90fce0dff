"""
Contact CSV ingestion, filtering and output.
"""

from contact_filter.contacts.schemas import CONTACT_HEADERS, Contact, FilterSummary

__all__ = ["CONTACT_HEADERS", "Contact", "FilterSummary"]
