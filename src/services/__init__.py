"""Service layer."""

from src.services.agent_service import AgentService
from src.services.inquiry_service import InquiryService
from src.services.listing_service import ListingService
from src.services.subscription_service import SubscriptionService

__all__ = ["AgentService", "InquiryService", "ListingService", "SubscriptionService"]
