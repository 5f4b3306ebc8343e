from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from conftest import FakeMarketplaceStore
from src.errors import NotFoundError
from src.schemas.inquiry import InquiryCreate
from src.schemas.listing import ListingUpdate
from src.services.inquiry_service import InquiryService
from src.services.listing_service import ListingService


def _inquiry(**overrides: object) -> InquiryCreate:
    body: dict[str, object] = {
        "inquirerName": "Jamie Doe",
        "inquirerEmail": "jamie@example.com",
        "message": "Is the price negotiable?",
    }
    body.update(overrides)
    return InquiryCreate.model_validate(body)


@pytest.mark.anyio
async def test_inquiry_snapshots_owner_at_submission(
    fake_store: FakeMarketplaceStore, session: AsyncMock
) -> None:
    listing = fake_store.add_listing("agent-a")
    inquiries = InquiryService(session)

    created = await inquiries.create_inquiry(listing.id, _inquiry())

    assert created.status == "new"
    assert created.agent_id == "agent-a"
    assert created.property_id == listing.id
    assert [item.id for item in await inquiries.list_agent_inquiries("agent-a")] == [
        created.id
    ]

    # Ownership moves without going through the public update body.
    listing.agent_id = "agent-b"

    assert fake_store.inquiries[created.id].agent_id == "agent-a"
    assert await inquiries.list_agent_inquiries("agent-b") == []
    assert len(await inquiries.list_agent_inquiries("agent-a")) == 1


@pytest.mark.anyio
async def test_inquiry_against_unknown_listing_raises_not_found(
    fake_store: FakeMarketplaceStore, session: AsyncMock
) -> None:
    with pytest.raises(NotFoundError):
        await InquiryService(session).create_inquiry(42, _inquiry())

    assert fake_store.inquiries == {}


@pytest.mark.anyio
async def test_inquiry_against_id_beyond_integer_range_is_not_found(
    session: AsyncMock,
) -> None:
    with pytest.raises(NotFoundError):
        await InquiryService(session).create_inquiry(3_000_000_000, _inquiry())

    session.get.assert_not_awaited()
    session.add.assert_not_called()


@pytest.mark.anyio
async def test_inquiry_allowed_for_non_active_listing(
    fake_store: FakeMarketplaceStore, session: AsyncMock
) -> None:
    listing = fake_store.add_listing("agent-a")
    await ListingService(session).update_listing(
        "agent-a", listing.id, ListingUpdate.model_validate({"status": "sold"})
    )

    created = await InquiryService(session).create_inquiry(listing.id, _inquiry())

    assert created.agent_id == "agent-a"


@pytest.mark.anyio
async def test_agent_inquiries_are_newest_first(
    fake_store: FakeMarketplaceStore, session: AsyncMock
) -> None:
    first_listing = fake_store.add_listing("agent-a")
    second_listing = fake_store.add_listing("agent-a")
    other_listing = fake_store.add_listing("agent-c")
    service = InquiryService(session)

    older = await service.create_inquiry(first_listing.id, _inquiry())
    newer = await service.create_inquiry(second_listing.id, _inquiry())
    await service.create_inquiry(other_listing.id, _inquiry())

    results = await service.list_agent_inquiries("agent-a")

    assert [item.id for item in results] == [newer.id, older.id]


@pytest.mark.anyio
async def test_inquiry_blank_optional_fields_are_stored_as_null(
    fake_store: FakeMarketplaceStore, session: AsyncMock
) -> None:
    listing = fake_store.add_listing("agent-a")

    created = await InquiryService(session).create_inquiry(
        listing.id, _inquiry(inquirerPhone="  ", message="")
    )

    assert created.inquirer_phone is None
    assert created.message is None
