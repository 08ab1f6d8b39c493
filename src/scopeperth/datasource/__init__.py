"""
Data access layer.

Reads listings, comparables, rents and suburb aggregates from Supabase and
adapts every row to the canonical record types.
"""

from scopeperth.datasource.adapters import adapt_listing
from scopeperth.datasource.repository import ListingRepository

__all__ = [
    "adapt_listing",
    "ListingRepository",
]
