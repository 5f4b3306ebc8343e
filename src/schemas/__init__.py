"""Request and response schemas."""

from src.schemas.inquiry import InquiryCreate, InquiryOut
from src.schemas.listing import (
    AgentProfile,
    ListingCreate,
    ListingOut,
    ListingSearchCriteria,
    ListingUpdate,
    ListingWithAgentOut,
)
from src.schemas.user import AgentAccountOut, SubscriptionCreate, SubscriptionOut

__all__ = [
    "AgentAccountOut",
    "AgentProfile",
    "InquiryCreate",
    "InquiryOut",
    "ListingCreate",
    "ListingOut",
    "ListingSearchCriteria",
    "ListingUpdate",
    "ListingWithAgentOut",
    "SubscriptionCreate",
    "SubscriptionOut",
]
