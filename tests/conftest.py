"""Test fixtures for Taskiq, the async runtime, and an in-memory listing store."""

import os
import sys
from collections.abc import AsyncIterator, Iterator, Mapping
from dataclasses import asdict
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

os.environ["TASKIQ_TESTING"] = "1"

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import pytest

from src.config.settings import get_settings
from src.db.repositories import (
    ACTIVE_STATUS,
    LOCATION_FIELDS,
    InquiryInsert,
    ListingSearchFilters,
    ListingWithAgent,
    build_searchable_location,
)
from src.models.inquiry import Inquiry
from src.models.listing import Listing
from src.models.user import User
from src.schemas.listing import ListingCreate
from src.taskiq_app.broker import broker
from src.taskiq_app.dedup import _MEMORY_LOCKS

BASE_TIME = datetime(2026, 1, 1, tzinfo=UTC)


@pytest.fixture(scope="function", autouse=True)
async def init_taskiq() -> AsyncIterator[None]:
    """Initialize broker per test when using InMemoryBroker."""

    _MEMORY_LOCKS.clear()
    await broker.startup()
    yield
    await broker.shutdown()
    _MEMORY_LOCKS.clear()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def listing_payload(**overrides: Any) -> dict[str, Any]:
    """Minimal valid create body in wire (camelCase) form."""

    payload: dict[str, Any] = {
        "title": "Bright apartment",
        "listingType": "for_sale",
        "propertyType": "apartment",
        "country": "France",
        "city": "Paris",
        "streetAddress": "1 Rue de Rivoli",
        "price": "350000.00",
        "paymentFrequency": "one_time",
    }
    payload.update(overrides)
    return payload


def make_user(user_id: str = "agent-a", **overrides: Any) -> User:
    values: dict[str, Any] = {
        "id": user_id,
        "email": f"{user_id}@example.com",
        "first_name": "Alex",
        "last_name": "Martin",
        "agency_name": "Seine Realty",
        "created_at": BASE_TIME,
        "updated_at": BASE_TIME,
    }
    values.update(overrides)
    return User(**values)


class FakeMarketplaceStore:
    """Dict-backed stand-in for the repository functions used by services."""

    def __init__(self) -> None:
        self.listings: dict[int, Listing] = {}
        self.inquiries: dict[int, Inquiry] = {}
        self.users: dict[str, User] = {}
        self._next_listing_id = 1
        self._next_inquiry_id = 1
        self._clock = BASE_TIME

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def add_user(self, user: User) -> User:
        self.users[user.id] = user
        return user

    def add_listing(self, agent_id: str = "agent-a", **overrides: Any) -> Listing:
        if agent_id not in self.users:
            self.add_user(make_user(agent_id))
        values = ListingCreate.model_validate(listing_payload(**overrides)).model_dump()
        values["agent_id"] = agent_id
        return self._insert(values)

    def _insert(self, values: Mapping[str, object]) -> Listing:
        now = self._tick()
        listing = Listing(**values)
        listing.id = self._next_listing_id
        self._next_listing_id += 1
        listing.searchable_location = build_searchable_location(
            listing.city, listing.state_province, listing.country
        )
        listing.created_at = now
        listing.updated_at = now
        self.listings[listing.id] = listing
        return listing

    def _matches(self, listing: Listing, filters: ListingSearchFilters) -> bool:
        if listing.status != ACTIVE_STATUS:
            return False
        if filters.location:
            needle = filters.location.lower()
            haystacks = (listing.city, listing.country, listing.searchable_location)
            if not any(needle in (value or "").lower() for value in haystacks):
                return False
        if filters.min_price is not None and listing.price < filters.min_price:
            return False
        if filters.max_price is not None and listing.price > filters.max_price:
            return False
        if filters.property_type and listing.property_type != filters.property_type:
            return False
        if filters.min_bedrooms is not None and (
            listing.bedrooms is None or listing.bedrooms < filters.min_bedrooms
        ):
            return False
        if filters.min_bathrooms is not None and (
            listing.bathrooms is None or listing.bathrooms < filters.min_bathrooms
        ):
            return False
        if filters.features and not set(filters.features) & set(listing.features or []):
            return False
        return True

    async def fetch_listings(
        self, session: object, filters: ListingSearchFilters
    ) -> list[ListingWithAgent]:
        matching = [
            listing
            for listing in self.listings.values()
            if self._matches(listing, filters)
        ]
        matching.sort(key=lambda listing: (listing.created_at, listing.id), reverse=True)
        page = matching[filters.offset : filters.offset + filters.limit]
        return [
            ListingWithAgent(listing=listing, agent=self.users[listing.agent_id])
            for listing in page
        ]

    async def fetch_listing_by_id(
        self, session: object, listing_id: int
    ) -> ListingWithAgent | None:
        listing = self.listings.get(listing_id)
        if listing is None:
            return None
        return ListingWithAgent(listing=listing, agent=self.users[listing.agent_id])

    async def fetch_listing(self, session: object, listing_id: int) -> Listing | None:
        return self.listings.get(listing_id)

    async def fetch_listings_by_agent(
        self, session: object, agent_id: str
    ) -> list[Listing]:
        owned = [
            listing for listing in self.listings.values() if listing.agent_id == agent_id
        ]
        return sorted(owned, key=lambda item: (item.created_at, item.id), reverse=True)

    async def insert_listing(
        self, session: object, values: Mapping[str, object]
    ) -> Listing:
        return self._insert(values)

    async def update_listing(
        self, session: object, listing: Listing, changes: Mapping[str, object]
    ) -> Listing:
        for name, value in changes.items():
            setattr(listing, name, value)
        if LOCATION_FIELDS & changes.keys():
            listing.searchable_location = build_searchable_location(
                listing.city, listing.state_province, listing.country
            )
        listing.updated_at = self._tick()
        return listing

    async def delete_listing(self, session: object, listing_id: int) -> bool:
        return self.listings.pop(listing_id, None) is not None

    async def insert_inquiry(self, session: object, row: InquiryInsert) -> Inquiry:
        inquiry = Inquiry(**asdict(row), status="new", created_at=self._tick())
        inquiry.id = self._next_inquiry_id
        self._next_inquiry_id += 1
        self.inquiries[inquiry.id] = inquiry
        return inquiry

    async def fetch_inquiries_by_agent(
        self, session: object, agent_id: str
    ) -> list[Inquiry]:
        captured = [
            inquiry for inquiry in self.inquiries.values() if inquiry.agent_id == agent_id
        ]
        return sorted(
            captured, key=lambda item: (item.created_at, item.id), reverse=True
        )


@pytest.fixture
def fake_store(monkeypatch: pytest.MonkeyPatch) -> FakeMarketplaceStore:
    """Route listing and inquiry services to an in-memory store."""

    store = FakeMarketplaceStore()
    listing_functions = (
        "fetch_listings",
        "fetch_listing_by_id",
        "fetch_listing",
        "fetch_listings_by_agent",
        "insert_listing",
        "update_listing",
        "delete_listing",
    )
    for name in listing_functions:
        monkeypatch.setattr(
            f"src.services.listing_service.{name}", getattr(store, name)
        )
    for name in ("fetch_listing", "insert_inquiry", "fetch_inquiries_by_agent"):
        monkeypatch.setattr(
            f"src.services.inquiry_service.{name}", getattr(store, name)
        )
    return store


@pytest.fixture
def session() -> AsyncMock:
    return AsyncMock()

