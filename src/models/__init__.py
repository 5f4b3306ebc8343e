"""SQLAlchemy ORM models."""

from src.models.inquiry import Inquiry
from src.models.listing import Listing
from src.models.user import PLAN_LISTING_LIMITS, User

__all__ = ["Inquiry", "Listing", "PLAN_LISTING_LIMITS", "User"]
