"""Business logic for buyer inquiries."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.repositories import (
    InquiryInsert,
    fetch_inquiries_by_agent,
    fetch_listing,
    insert_inquiry,
)
from src.errors import NotFoundError
from src.schemas.inquiry import InquiryCreate, InquiryOut
from src.services.base import storage_guard

logger = logging.getLogger(__name__)


class InquiryService:
    """Service layer for recording and listing inquiries."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @storage_guard
    async def create_inquiry(
        self, listing_id: int, payload: InquiryCreate
    ) -> InquiryOut:
        """Record an inquiry against a listing of any status.

        The listing's current agent is copied onto the inquiry, so a later
        change of owner does not move historical inquiries.
        """

        listing = await fetch_listing(self._session, listing_id)
        if listing is None:
            raise NotFoundError("Property", listing_id)

        inquiry = await insert_inquiry(
            self._session,
            InquiryInsert(
                property_id=listing.id,
                agent_id=listing.agent_id,
                inquirer_name=payload.inquirer_name,
                inquirer_email=payload.inquirer_email,
                inquirer_phone=payload.inquirer_phone,
                message=payload.message,
            ),
        )
        logger.info(
            "Inquiry %s recorded for listing %s (agent %s)",
            inquiry.id,
            listing.id,
            listing.agent_id,
        )
        return InquiryOut.model_validate(inquiry)

    @storage_guard
    async def list_agent_inquiries(self, agent_id: str) -> list[InquiryOut]:
        inquiries = await fetch_inquiries_by_agent(self._session, agent_id)
        return [InquiryOut.model_validate(inquiry) for inquiry in inquiries]
