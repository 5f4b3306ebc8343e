"""Database session and repository utilities."""

from src.db.session import Database, get_db_session
from src.db.repositories import (
    ListingSearchFilters,
    ListingWithAgent,
    build_searchable_location,
    delete_listing,
    fetch_inquiries_by_agent,
    fetch_listing,
    fetch_listing_by_id,
    fetch_listings,
    fetch_listings_by_agent,
    insert_inquiry,
    insert_listing,
    update_listing,
    upsert_user,
)

__all__ = [
    "Database",
    "get_db_session",
    "ListingSearchFilters",
    "ListingWithAgent",
    "build_searchable_location",
    "delete_listing",
    "fetch_inquiries_by_agent",
    "fetch_listing",
    "fetch_listing_by_id",
    "fetch_listings",
    "fetch_listings_by_agent",
    "insert_inquiry",
    "insert_listing",
    "update_listing",
    "upsert_user",
]
