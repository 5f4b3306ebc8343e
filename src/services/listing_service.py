"""Business logic for listing search and agent-owned listing lifecycle."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.config import get_settings
from src.db.repositories import (
    ListingSearchFilters,
    ListingWithAgent,
    delete_listing,
    fetch_listing,
    fetch_listing_by_id,
    fetch_listings,
    fetch_listings_by_agent,
    insert_listing,
    update_listing,
)
from src.errors import FieldError, NotFoundError, ValidationError
from src.models.listing import Listing
from src.schemas.listing import (
    AgentProfile,
    ListingCreate,
    ListingOut,
    ListingSearchCriteria,
    ListingUpdate,
    ListingWithAgentOut,
)
from src.services.base import storage_guard

logger = logging.getLogger(__name__)


def to_listing_with_agent(row: ListingWithAgent) -> ListingWithAgentOut:
    listing = ListingOut.model_validate(row.listing)
    return ListingWithAgentOut(
        **listing.model_dump(), agent=AgentProfile.model_validate(row.agent)
    )


class ListingService:
    """Service layer for public search and agent listing management."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @storage_guard
    async def search_listings(
        self, criteria: ListingSearchCriteria
    ) -> list[ListingWithAgentOut]:
        """Search active listings, newest first."""

        filters = ListingSearchFilters(
            location=criteria.location,
            min_price=criteria.min_price,
            max_price=criteria.max_price,
            property_type=criteria.property_type,
            min_bedrooms=criteria.min_bedrooms,
            min_bathrooms=criteria.min_bathrooms,
            features=list(criteria.features),
            limit=criteria.limit or get_settings().default_page_size,
            offset=criteria.offset,
        )
        rows = await fetch_listings(self._session, filters)
        return [to_listing_with_agent(row) for row in rows]

    @storage_guard
    async def get_listing(self, listing_id: int) -> ListingWithAgentOut:
        """Fetch a listing of any status with its agent profile."""

        row = await fetch_listing_by_id(self._session, listing_id)
        if row is None:
            raise NotFoundError("Property", listing_id)
        return to_listing_with_agent(row)

    @storage_guard
    async def list_agent_listings(self, agent_id: str) -> list[ListingOut]:
        listings = await fetch_listings_by_agent(self._session, agent_id)
        return [ListingOut.model_validate(listing) for listing in listings]

    @storage_guard
    async def create_listing(self, agent_id: str, payload: ListingCreate) -> ListingOut:
        """Persist a new listing owned by the calling agent."""

        if not agent_id:
            raise ValidationError([FieldError("agentId", "Field required")])

        values = payload.model_dump()
        values["agent_id"] = agent_id
        listing = await insert_listing(self._session, values)
        logger.info("Listing %s created by agent %s", listing.id, agent_id)
        return ListingOut.model_validate(listing)

    @storage_guard
    async def update_listing(
        self, agent_id: str, listing_id: int, payload: ListingUpdate
    ) -> ListingOut:
        """Merge a partial update into a listing the caller owns."""

        listing = await self._owned_listing(agent_id, listing_id)
        changes = payload.changes()
        listing = await update_listing(self._session, listing, changes)
        logger.info(
            "Listing %s updated by agent %s (%s)",
            listing_id,
            agent_id,
            ", ".join(sorted(changes)) or "no fields",
        )
        return ListingOut.model_validate(listing)

    @storage_guard
    async def delete_listing(self, agent_id: str, listing_id: int) -> None:
        """Delete a listing the caller owns."""

        await self._owned_listing(agent_id, listing_id)
        if not await delete_listing(self._session, listing_id):
            raise NotFoundError("Property", listing_id)
        logger.info("Listing %s deleted by agent %s", listing_id, agent_id)

    async def _owned_listing(self, agent_id: str, listing_id: int) -> Listing:
        # Someone else's listing is reported exactly like a missing one.
        listing = await fetch_listing(self._session, listing_id)
        if listing is None:
            raise NotFoundError("Property", listing_id)
        if listing.agent_id != agent_id:
            logger.warning(
                "Agent %s attempted to modify listing %s owned by another agent",
                agent_id,
                listing_id,
            )
            raise NotFoundError("Property", listing_id)
        return listing
